import logging
from typing import List, Optional, Dict, Any
from datetime import datetime, timezone

from sqlalchemy import select

from database.models import JobPost, JobStatus
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class JobPostRepository(BaseRepository):
    model = JobPost

    UPDATABLE_FIELDS = frozenset({
        'title', 'job_type', 'company', 'location_text', 'is_remote',
        'salary_min', 'salary_max', 'description', 'requirements',
        'benefits', 'required_skills', 'status', 'application_deadline',
    })

    def get_by_id(self, job_post_id: str) -> Optional[JobPost]:
        return self.get_by_key(job_post_id)

    def create_job_post(self, job_data: Dict[str, Any]) -> JobPost:
        job_post = JobPost(
            owner_id=job_data['owner_id'],
            title=job_data['title'],
            job_type=job_data.get('job_type'),
            company=job_data['company'],
            location_text=job_data.get('location_text'),
            is_remote=bool(job_data.get('is_remote', False)),
            salary_min=job_data.get('salary_min'),
            salary_max=job_data.get('salary_max'),
            description=job_data.get('description'),
            requirements=job_data.get('requirements'),
            benefits=job_data.get('benefits'),
            required_skills=list(job_data.get('required_skills') or []),
            status=JobStatus(job_data.get('status') or JobStatus.OPEN).value,
            application_deadline=job_data.get('application_deadline'),
        )
        self.db.add(job_post)
        self.db.flush()  # Generate ID
        return job_post

    def list_jobs(
        self,
        limit: int = 20,
        status: Optional[JobStatus] = None
    ) -> List[JobPost]:
        """Newest postings first, optionally restricted to one status."""
        stmt = select(JobPost)

        if status is not None:
            stmt = stmt.where(JobPost.status == JobStatus(status).value)

        # id breaks ties between postings created in the same instant
        stmt = stmt.order_by(JobPost.created_at.desc(), JobPost.id.desc()).limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def list_open_jobs(self, limit: int = 20) -> List[JobPost]:
        return self.list_jobs(limit=limit, status=JobStatus.OPEN)

    def list_owner_jobs(
        self,
        owner_id: str,
        limit: int = 20,
        status: Optional[JobStatus] = None
    ) -> List[JobPost]:
        """A company's own postings, newest first."""
        stmt = select(JobPost).where(JobPost.owner_id == owner_id)

        if status is not None:
            stmt = stmt.where(JobPost.status == JobStatus(status).value)

        stmt = stmt.order_by(JobPost.created_at.desc(), JobPost.id.desc()).limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def filter_jobs(
        self,
        is_remote: bool = False,
        job_type: Optional[str] = None,
        min_salary: Optional[float] = None,
        max_salary: Optional[float] = None,
        skills: Optional[List[str]] = None,
        status: JobStatus = JobStatus.OPEN,
        limit: int = 20
    ) -> List[JobPost]:
        """
        Search postings of one status, newest first.

        ``min_salary`` keeps postings whose salary_max reaches it and
        ``max_salary`` keeps postings whose salary_min is within it, so a
        posting matches when its range overlaps the requested one. Postings
        without the compared bound never match. ``skills`` keeps postings where
        any requested skill is a case-insensitive substring of any required skill.
        """
        stmt = select(JobPost).where(JobPost.status == JobStatus(status).value)

        if is_remote:
            stmt = stmt.where(JobPost.is_remote.is_(True))
        if job_type:
            stmt = stmt.where(JobPost.job_type == job_type)
        if min_salary is not None:
            stmt = stmt.where(JobPost.salary_max >= min_salary)
        if max_salary is not None:
            stmt = stmt.where(JobPost.salary_min <= max_salary)

        stmt = stmt.order_by(JobPost.created_at.desc(), JobPost.id.desc())

        wanted = [s.lower() for s in (skills or []) if s and s.strip()]
        if not wanted:
            return list(self.db.execute(stmt.limit(limit)).scalars().all())

        # required_skills is a JSON array, matched here rather than in SQL
        matches = []
        for job in self.db.execute(stmt).scalars():
            job_skills = [str(s).lower() for s in (job.required_skills or [])]
            if any(w in s for w in wanted for s in job_skills):
                matches.append(job)
                if len(matches) >= limit:
                    break
        return matches

    def update_status(self, job_post: JobPost, status: JobStatus) -> JobPost:
        job_post.status = JobStatus(status).value
        job_post.updated_at = datetime.now(timezone.utc)
        logger.info(f"Job {job_post.id} status set to {job_post.status}")
        return job_post

    def update_job(self, job_post: JobPost, fields: Dict[str, Any]) -> JobPost:
        """Overwrite the given columns; keys not present are left alone."""
        for key, value in fields.items():
            if key not in self.UPDATABLE_FIELDS:
                raise ValueError(f"Job field {key!r} cannot be updated")
            if key == 'status':
                value = JobStatus(value).value
            elif key == 'required_skills':
                value = list(value or [])
            elif key == 'is_remote':
                value = bool(value)
            setattr(job_post, key, value)
        job_post.updated_at = datetime.now(timezone.utc)
        logger.info(f"Job {job_post.id} updated: {', '.join(sorted(fields)) or 'no fields'}")
        return job_post

    def delete_job(self, job_post: JobPost) -> None:
        self.db.delete(job_post)
        self.db.flush()
        logger.info(f"Job {job_post.id} deleted")
