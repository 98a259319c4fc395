import enum
import uuid

from sqlalchemy import Column, Text, TIMESTAMP, Boolean, Numeric, Index, func

from .base import Base, JSONType


class JobStatus(str, enum.Enum):
    """Lifecycle status of a job posting. Only OPEN postings are swipeable."""
    DRAFT = "DRAFT"
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    EXPIRED = "EXPIRED"
    FILLED = "FILLED"


def _new_job_id() -> str:
    return uuid.uuid4().hex


class JobPost(Base):
    __tablename__ = 'job_post'

    id = Column(Text, primary_key=True, default=_new_job_id)
    owner_id = Column(Text, nullable=False)  # company user that posted the job

    # Core Identity
    title = Column(Text, nullable=False)
    job_type = Column(Text)  # Full-time|Part-time|Contract|Internship
    company = Column(Text, nullable=False)
    location_text = Column(Text)
    is_remote = Column(Boolean, nullable=False, default=False)

    # Compensation
    salary_min = Column(Numeric)
    salary_max = Column(Numeric)

    # Content
    description = Column(Text)
    requirements = Column(Text)
    benefits = Column(Text)
    required_skills = Column(JSONType, nullable=False, default=list)

    status = Column(Text, nullable=False, default=JobStatus.OPEN.value)
    application_deadline = Column(TIMESTAMP(timezone=True))

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index('idx_job_post_status_created', 'status', 'created_at'),
        Index('idx_job_post_owner', 'owner_id'),
    )
