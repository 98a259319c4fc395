from sqlalchemy import Column, Text, TIMESTAMP, func

from .base import Base


class PreferenceSummary(Base):
    """
    LLM-written description of what a user likes and dislikes in job postings.

    Overwritten on every regeneration; no history is kept.
    """
    __tablename__ = 'preference_summary'

    user_id = Column(Text, primary_key=True)
    summary = Column(Text, nullable=False)
    model = Column(Text)
    generated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
