from sqlalchemy import Column, Text, TIMESTAMP, func

from .base import Base, JSONType


class JobSwipe(Base):
    """
    Per-user preference ledger: the jobs a user swiped right (liked) or left (disliked).

    One row per user, keyed by the user id. Both id lists are stored as JSON
    arrays and are kept disjoint by the ledger service.
    """
    __tablename__ = 'job_swipe'

    user_id = Column(Text, primary_key=True)

    like_job_ids = Column(JSONType, nullable=False, default=list)
    dislike_job_ids = Column(JSONType, nullable=False, default=list)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
