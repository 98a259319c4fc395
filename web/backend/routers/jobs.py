#!/usr/bin/env python3
"""
Job endpoints - publish and manage job postings.
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.models import JobStatus
from ..dependencies import get_db
from ..services.job_service import JobService
from ..models.requests import JobPostCreate, JobPostUpdate, JobStatusUpdate
from ..models.responses import DeleteJobResponse, JobsResponse, JobDetailResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


@router.get("", response_model=JobsResponse)
def list_jobs(
    status: Optional[JobStatus] = Query(default=JobStatus.OPEN, description="Posting status filter"),
    limit: int = Query(default=20, ge=1, le=500, description="Maximum results to return"),
    db: Session = Depends(get_db)
):
    """List job postings, newest first."""
    service = JobService(db)
    jobs = service.list_jobs(status=status, limit=limit)
    return JobsResponse(success=True, count=len(jobs), jobs=jobs)


@router.get("/search", response_model=JobsResponse)
def search_jobs(
    is_remote: bool = Query(default=False, description="Only remote postings"),
    job_type: Optional[str] = Query(default=None, description="Exact job type, e.g. Full-time"),
    min_salary: Optional[float] = Query(default=None, ge=0, description="Keep postings whose salary_max reaches this"),
    max_salary: Optional[float] = Query(default=None, ge=0, description="Keep postings whose salary_min is within this"),
    skills: Optional[List[str]] = Query(default=None, description="Any of these, matched as substrings"),
    status: JobStatus = Query(default=JobStatus.OPEN, description="Posting status filter"),
    limit: int = Query(default=20, ge=1, le=500, description="Maximum results to return"),
    db: Session = Depends(get_db)
):
    """Search postings by remote flag, job type, salary range and skills, newest first."""
    service = JobService(db)
    jobs = service.filter_jobs(
        is_remote=is_remote,
        job_type=job_type,
        min_salary=min_salary,
        max_salary=max_salary,
        skills=skills,
        status=status,
        limit=limit
    )
    return JobsResponse(success=True, count=len(jobs), jobs=jobs)


@router.get("/company/{owner_id}", response_model=JobsResponse)
def list_company_jobs(
    owner_id: str,
    status: Optional[JobStatus] = Query(default=None, description="Posting status filter"),
    limit: int = Query(default=20, ge=1, le=500, description="Maximum results to return"),
    db: Session = Depends(get_db)
):
    """List the postings one company has published, in any status unless filtered."""
    service = JobService(db)
    jobs = service.list_company_jobs(owner_id, status=status, limit=limit)
    return JobsResponse(success=True, count=len(jobs), jobs=jobs)


@router.get("/{job_id}", response_model=JobDetailResponse)
def get_job(job_id: str, db: Session = Depends(get_db)):
    service = JobService(db)
    return JobDetailResponse(success=True, job=service.get_job(job_id))


@router.post("", response_model=JobDetailResponse, status_code=201)
def create_job(body: JobPostCreate, db: Session = Depends(get_db)):
    """
    Publish a job posting.

    Postings are created OPEN unless another status is given, and only OPEN
    postings appear in swipe feeds.
    """
    service = JobService(db)
    return JobDetailResponse(success=True, job=service.create_job(body))


@router.patch("/{job_id}/status", response_model=JobDetailResponse)
def update_job_status(job_id: str, body: JobStatusUpdate, db: Session = Depends(get_db)):
    """
    Change a posting's status, e.g. close it once filled.

    If ``owner_id`` is given it must match the posting's owner.
    """
    service = JobService(db)
    return JobDetailResponse(success=True, job=service.update_status(job_id, body))


@router.patch("/{job_id}", response_model=JobDetailResponse)
def update_job(job_id: str, body: JobPostUpdate, db: Session = Depends(get_db)):
    """
    Edit a posting. Only the fields present in the body are changed.

    If ``owner_id`` is given it must match the posting's owner.
    """
    service = JobService(db)
    return JobDetailResponse(success=True, job=service.update_job(job_id, body))


@router.delete("/{job_id}", response_model=DeleteJobResponse)
def delete_job(
    job_id: str,
    owner_id: Optional[str] = Query(default=None, description="When given, must match the posting's owner"),
    db: Session = Depends(get_db)
):
    service = JobService(db)
    service.delete_job(job_id, owner_id=owner_id)
    return DeleteJobResponse(success=True, message=f"Job {job_id} deleted")
