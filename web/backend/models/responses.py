#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class LedgerResponse(BaseModel):
    """A user's liked and disliked job ids."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "user_id": "user-1",
                "liked_job_ids": ["6ba7b8109dad11d180b400c04fd430c8"],
                "disliked_job_ids": []
            }
        }
    )

    success: bool
    user_id: str
    liked_job_ids: List[str]
    disliked_job_ids: List[str]


class JobIdsResponse(BaseModel):
    success: bool
    job_ids: List[str]


class SwipeMutationResponse(BaseModel):
    """Result of a like, dislike, unlike or undislike."""
    success: bool
    swipe_id: Optional[str] = None


class MembershipResponse(BaseModel):
    success: bool
    job_id: str
    value: bool


class SummaryResponse(BaseModel):
    """Freshly generated preference summary."""
    success: bool
    analysis: str


class StoredSummaryResponse(BaseModel):
    """The last preference summary stored for a user."""
    success: bool
    user_id: str
    summary: str
    model: Optional[str]
    generated_at: Optional[str]


class JobCard(BaseModel):
    """A posting as shown in the swipe feed."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "job_id": "6ba7b8109dad11d180b400c04fd430c8",
                "title": "Senior Python Developer",
                "company": "TechCorp",
                "location": "Berlin",
                "salary_min": 70000.0,
                "salary_max": 90000.0,
                "is_remote": True,
                "job_type": "Full-time",
                "required_skills": ["python", "sql"],
                "status": "OPEN"
            }
        }
    )

    job_id: str
    title: str
    company: str
    location: Optional[str]
    salary_min: Optional[float]
    salary_max: Optional[float]
    is_remote: bool
    job_type: Optional[str]
    required_skills: List[str] = Field(default_factory=list)
    status: str


class FeedResponse(BaseModel):
    success: bool
    user_id: str
    cursor: int
    jobs: List[JobCard]


class SwipeFailureDetail(BaseModel):
    """A ledger write that failed and is waiting to be retried."""
    job_id: str
    direction: str
    error: str
    attempts: int
    occurred_at: Optional[str]


class SwipeSessionResponse(BaseModel):
    """Snapshot of a swipe session."""
    success: bool
    session_id: str
    user_id: str
    state: str = Field(description="loading, ready or exhausted")
    cursor: int = Field(ge=0)
    total: int = Field(ge=0)
    current_job: Optional[JobCard]
    failed_writes: List[SwipeFailureDetail] = Field(default_factory=list)
    last_error: Optional[str] = None


class SwipeDecisionResponse(BaseModel):
    """Outcome of a decide call plus the session after it."""
    success: bool
    accepted: bool
    job_id: Optional[str] = None
    direction: Optional[str] = None
    write_succeeded: bool = False
    write_error: Optional[str] = None
    session: SwipeSessionResponse


class SwipeRetryResponse(BaseModel):
    success: bool
    still_failing: int = Field(ge=0)
    session: SwipeSessionResponse


class DeleteSessionResponse(BaseModel):
    success: bool
    message: str


class JobDetails(BaseModel):
    """Details of a job posting."""
    job_id: str
    owner_id: str
    title: str
    company: str
    job_type: Optional[str]
    location: Optional[str]
    is_remote: bool
    salary_min: Optional[float]
    salary_max: Optional[float]
    description: Optional[str]
    requirements: Optional[str]
    benefits: Optional[str]
    required_skills: List[str] = Field(default_factory=list)
    status: str
    application_deadline: Optional[str]
    created_at: Optional[str]
    updated_at: Optional[str]


class JobsResponse(BaseModel):
    success: bool
    count: int
    jobs: List[JobDetails]


class JobDetailResponse(BaseModel):
    success: bool
    job: JobDetails


class DeleteJobResponse(BaseModel):
    success: bool
    message: str
