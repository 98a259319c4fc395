#!/usr/bin/env python3
"""
Job service - business logic for job posting operations.
"""

import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from database.models import JobPost, JobStatus
from database.repositories import JobPostRepository
from ..models.requests import JobPostCreate, JobPostUpdate, JobStatusUpdate
from ..models.responses import JobDetails
from ..utils import safe_float, safe_datetime_iso
from ..exceptions import InvalidRequestException, JobNotFoundException, PermissionDeniedException

logger = logging.getLogger(__name__)


class JobService:
    """Service for managing job postings."""

    # Columns that are NOT NULL on job_post
    _REQUIRED_FIELDS = frozenset({'title', 'company', 'is_remote', 'required_skills', 'status'})

    def __init__(self, db: Session):
        self.db = db
        self.repo = JobPostRepository(db)

    def list_jobs(self, status: Optional[JobStatus] = JobStatus.OPEN, limit: int = 20) -> List[JobDetails]:
        """
        List postings, newest first.

        Args:
            status: Only postings with this status, or None for all.
            limit: Maximum number of postings to return.
        """
        return [self._build_job_details(job) for job in self.repo.list_jobs(limit=limit, status=status)]

    def list_company_jobs(
        self,
        owner_id: str,
        status: Optional[JobStatus] = None,
        limit: int = 20
    ) -> List[JobDetails]:
        """
        List one company's postings, newest first.

        Raises:
            InvalidRequestException: If ``owner_id`` is blank.
        """
        if not owner_id or not owner_id.strip():
            raise InvalidRequestException("Owner ID is required")
        jobs = self.repo.list_owner_jobs(owner_id, limit=limit, status=status)
        return [self._build_job_details(job) for job in jobs]

    def filter_jobs(
        self,
        is_remote: bool = False,
        job_type: Optional[str] = None,
        min_salary: Optional[float] = None,
        max_salary: Optional[float] = None,
        skills: Optional[List[str]] = None,
        status: JobStatus = JobStatus.OPEN,
        limit: int = 20
    ) -> List[JobDetails]:
        jobs = self.repo.filter_jobs(
            is_remote=is_remote,
            job_type=job_type,
            min_salary=min_salary,
            max_salary=max_salary,
            skills=skills,
            status=status,
            limit=limit
        )
        return [self._build_job_details(job) for job in jobs]

    def get_job(self, job_id: str) -> JobDetails:
        return self._build_job_details(self._get_or_raise(job_id))

    def create_job(self, request: JobPostCreate) -> JobDetails:
        job = self.repo.create_job_post(request.model_dump())
        self.db.commit()
        self.db.refresh(job)
        logger.info(f"Created job {job.id} '{job.title}' for owner {job.owner_id}")
        return self._build_job_details(job)

    def update_status(self, job_id: str, request: JobStatusUpdate) -> JobDetails:
        """
        Change a posting's status.

        Raises:
            JobNotFoundException: If the posting does not exist.
            PermissionDeniedException: If ``owner_id`` is given and does not match.
        """
        job = self._get_or_raise(job_id)
        self._check_owner(job, request.owner_id, "update")

        self.repo.update_status(job, request.status)
        self.db.commit()
        self.db.refresh(job)
        return self._build_job_details(job)

    def update_job(self, job_id: str, request: JobPostUpdate) -> JobDetails:
        """
        Edit a posting's fields. Fields left out of the request keep their value.

        Raises:
            JobNotFoundException: If the posting does not exist.
            PermissionDeniedException: If ``owner_id`` is given and does not match.
            InvalidRequestException: If a required field is set to null.
        """
        job = self._get_or_raise(job_id)
        self._check_owner(job, request.owner_id, "update")

        fields = request.model_dump(exclude_unset=True, exclude={'owner_id'})
        cleared = sorted(k for k in self._REQUIRED_FIELDS if k in fields and fields[k] is None)
        if cleared:
            raise InvalidRequestException(f"Fields cannot be cleared: {', '.join(cleared)}")

        self.repo.update_job(job, fields)
        self.db.commit()
        self.db.refresh(job)
        return self._build_job_details(job)

    def delete_job(self, job_id: str, owner_id: Optional[str] = None) -> None:
        """
        Remove a posting. Ledgers that reference it keep the id.

        Raises:
            JobNotFoundException: If the posting does not exist.
            PermissionDeniedException: If ``owner_id`` is given and does not match.
        """
        job = self._get_or_raise(job_id)
        self._check_owner(job, owner_id, "delete")

        self.repo.delete_job(job)
        self.db.commit()

    # Private helper methods

    def _get_or_raise(self, job_id: str) -> JobPost:
        job = self.repo.get_by_id(job_id)
        if job is None:
            raise JobNotFoundException(f"Job {job_id} not found")
        return job

    def _check_owner(self, job: JobPost, owner_id: Optional[str], action: str) -> None:
        if owner_id is not None and owner_id != job.owner_id:
            raise PermissionDeniedException(
                f"User {owner_id} may not {action} job {job.id}"
            )

    def _build_job_details(self, job: JobPost) -> JobDetails:
        return JobDetails(
            job_id=str(job.id),
            owner_id=job.owner_id,
            title=job.title,
            company=job.company,
            job_type=job.job_type,
            location=job.location_text,
            is_remote=bool(job.is_remote),
            salary_min=safe_float(job.salary_min),
            salary_max=safe_float(job.salary_max),
            description=job.description,
            requirements=job.requirements,
            benefits=job.benefits,
            required_skills=list(job.required_skills or []),
            status=job.status,
            application_deadline=safe_datetime_iso(job.application_deadline),
            created_at=safe_datetime_iso(job.created_at),
            updated_at=safe_datetime_iso(job.updated_at)
        )
