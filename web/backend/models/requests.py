#!/usr/bin/env python3
"""
Request models for API endpoints.
"""

from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Optional

from core.swipe.models import Direction
from database.models import JobStatus


class SummaryRequest(BaseModel):
    """Request to generate a preference summary."""
    display_name: str = Field(default="", max_length=200, description="Name used to address the user")


class SwipeSessionCreate(BaseModel):
    """Request to open a swipe session."""
    user_id: str = Field(..., min_length=1, description="User the session belongs to")
    pool_limit: Optional[int] = Field(
        None,
        ge=1,
        description="Open postings to fetch before filtering, or null for the configured default"
    )


class SwipeDecision(BaseModel):
    """A like or dislike on the session's current posting."""
    direction: Direction = Field(..., description="like or dislike")


class JobPostCreate(BaseModel):
    """Request to create a job posting."""
    owner_id: str = Field(..., min_length=1, description="Company user publishing the posting")
    title: str = Field(..., min_length=1)
    company: str = Field(..., min_length=1)
    job_type: Optional[str] = Field(None, description="Full-time, Part-time, Contract, Internship")
    location_text: Optional[str] = None
    is_remote: bool = False
    salary_min: Optional[float] = Field(None, ge=0)
    salary_max: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None
    requirements: Optional[str] = None
    benefits: Optional[str] = None
    required_skills: List[str] = Field(default_factory=list)
    status: JobStatus = JobStatus.OPEN
    application_deadline: Optional[datetime] = None


class JobStatusUpdate(BaseModel):
    """Request to change a posting's status."""
    status: JobStatus = Field(..., description="DRAFT, OPEN, CLOSED, EXPIRED or FILLED")
    owner_id: Optional[str] = Field(None, description="When given, must match the posting's owner")


class JobPostUpdate(BaseModel):
    """Request to edit a job posting. Only the fields that are sent are changed."""
    owner_id: Optional[str] = Field(None, description="When given, must match the posting's owner")
    title: Optional[str] = Field(None, min_length=1)
    company: Optional[str] = Field(None, min_length=1)
    job_type: Optional[str] = None
    location_text: Optional[str] = None
    is_remote: Optional[bool] = None
    salary_min: Optional[float] = Field(None, ge=0)
    salary_max: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None
    requirements: Optional[str] = None
    benefits: Optional[str] = None
    required_skills: Optional[List[str]] = None
    status: Optional[JobStatus] = None
    application_deadline: Optional[datetime] = None
