#!/usr/bin/env python3
"""
Unit tests for the job board repositories on SQLite.
"""

import pytest
from unittest.mock import MagicMock

from sqlalchemy.exc import IntegrityError

from database.models import JobStatus, JobSwipe
from database.repositories import JobSwipeRepository
from database.uow import job_board_uow


class TestJobPostRepository:

    def test_create_job_post_defaults_to_open(self, session_factory):
        with job_board_uow(session_factory) as repo:
            job = repo.jobs.create_job_post({
                "owner_id": "company-1",
                "title": "Data Engineer",
                "company": "Initech",
                "required_skills": ["python", "spark"],
            })
            job_id = job.id

        with job_board_uow(session_factory) as repo:
            stored = repo.jobs.get_by_id(job_id)
            assert stored.status == JobStatus.OPEN.value
            assert stored.required_skills == ["python", "spark"]
            assert stored.is_remote is False

    def test_list_jobs_filters_by_status_newest_first(self, session_factory, job_factory):
        first = job_factory(title="First")
        job_factory(title="Closed", status=JobStatus.CLOSED)
        last = job_factory(title="Last")

        with job_board_uow(session_factory) as repo:
            open_ids = [job.id for job in repo.jobs.list_open_jobs(limit=10)]
            all_jobs = repo.jobs.list_jobs(limit=10, status=None)

        assert open_ids == [last, first]
        assert len(all_jobs) == 3

    def test_list_jobs_respects_limit(self, session_factory, job_factory):
        for n in range(5):
            job_factory(title=f"Job {n}")

        with job_board_uow(session_factory) as repo:
            assert len(repo.jobs.list_open_jobs(limit=2)) == 2

    def test_update_status(self, session_factory, job_factory):
        job_id = job_factory()

        with job_board_uow(session_factory) as repo:
            repo.jobs.update_status(repo.jobs.get_by_id(job_id), JobStatus.FILLED)

        with job_board_uow(session_factory) as repo:
            assert repo.jobs.get_by_id(job_id).status == "FILLED"
            assert repo.jobs.list_open_jobs() == []

    def test_get_unknown_job_returns_none(self, session_factory):
        with job_board_uow(session_factory) as repo:
            assert repo.jobs.get_by_id("missing") is None

    def test_update_job_changes_only_given_fields(self, session_factory, job_factory):
        job_id = job_factory(title="Old Title", description="Keep me")

        with job_board_uow(session_factory) as repo:
            repo.jobs.update_job(repo.jobs.get_by_id(job_id), {
                "title": "New Title",
                "required_skills": ["rust"],
                "status": JobStatus.CLOSED,
            })

        with job_board_uow(session_factory) as repo:
            stored = repo.jobs.get_by_id(job_id)
            assert stored.title == "New Title"
            assert stored.description == "Keep me"
            assert stored.required_skills == ["rust"]
            assert stored.status == "CLOSED"

    def test_update_job_rejects_unknown_field(self, session_factory, job_factory):
        job_id = job_factory()

        with job_board_uow(session_factory) as repo:
            with pytest.raises(ValueError):
                repo.jobs.update_job(repo.jobs.get_by_id(job_id), {"owner_id": "company-2"})

    def test_delete_job(self, session_factory, job_factory):
        job_id = job_factory()

        with job_board_uow(session_factory) as repo:
            repo.jobs.delete_job(repo.jobs.get_by_id(job_id))

        with job_board_uow(session_factory) as repo:
            assert repo.jobs.get_by_id(job_id) is None

    def test_list_owner_jobs(self, session_factory, job_factory):
        first = job_factory(owner_id="company-1")
        job_factory(owner_id="company-2")
        closed = job_factory(owner_id="company-1", status=JobStatus.CLOSED)

        with job_board_uow(session_factory) as repo:
            all_ids = [job.id for job in repo.jobs.list_owner_jobs("company-1")]
            closed_ids = [job.id for job in repo.jobs.list_owner_jobs("company-1", status=JobStatus.CLOSED)]

        assert all_ids == [closed, first]
        assert closed_ids == [closed]


class TestJobPostFilter:

    def _ids(self, session_factory, **filters):
        with job_board_uow(session_factory) as repo:
            return [job.id for job in repo.jobs.filter_jobs(**filters)]

    def test_defaults_to_open_newest_first(self, session_factory, job_factory):
        first = job_factory()
        job_factory(status=JobStatus.CLOSED)
        last = job_factory()

        assert self._ids(session_factory) == [last, first]

    def test_remote_and_job_type(self, session_factory, job_factory):
        remote_full = job_factory(is_remote=True, job_type="Full-time")
        job_factory(is_remote=True, job_type="Contract")
        job_factory(is_remote=False, job_type="Full-time")

        assert self._ids(session_factory, is_remote=True, job_type="Full-time") == [remote_full]

    def test_salary_range_overlap(self, session_factory, job_factory):
        low = job_factory(salary_min=40000, salary_max=60000)
        mid = job_factory(salary_min=70000, salary_max=90000)
        high = job_factory(salary_min=120000, salary_max=150000)
        job_factory()  # no salary given

        assert self._ids(session_factory, min_salary=80000) == [high, mid]
        assert self._ids(session_factory, max_salary=75000) == [mid, low]
        assert self._ids(session_factory, min_salary=55000, max_salary=100000) == [mid, low]

    def test_skills_match_case_insensitive_substring(self, session_factory, job_factory):
        py = job_factory(required_skills=["Python", "Django"])
        job_factory(required_skills=["Go"])
        ts = job_factory(required_skills=["TypeScript"])
        job_factory(required_skills=[])

        assert self._ids(session_factory, skills=["python"]) == [py]
        assert self._ids(session_factory, skills=["script", "DJANGO"]) == [ts, py]

    def test_limit_applies_after_skill_filter(self, session_factory, job_factory):
        job_factory(required_skills=["python"])
        job_factory(required_skills=["java"])
        second = job_factory(required_skills=["python"])
        job_factory(required_skills=["java"])
        newest = job_factory(required_skills=["python"])

        assert self._ids(session_factory, skills=["python"], limit=2) == [newest, second]


class TestJobSwipeRepository:

    def test_get_or_create_is_stable(self, session_factory):
        with job_board_uow(session_factory) as repo:
            repo.swipes.get_or_create("u1")
        with job_board_uow(session_factory) as repo:
            swipe = repo.swipes.get_or_create("u1")
            assert swipe.like_job_ids == []
            assert repo.swipes.list_user_ids() == ["u1"]

    def test_save_job_ids_persists_lists(self, session_factory):
        with job_board_uow(session_factory) as repo:
            swipe = repo.swipes.get_or_create("u1")
            repo.swipes.save_job_ids(swipe, ["a", "b"], ["c"])

        with job_board_uow(session_factory) as repo:
            swipe = repo.swipes.get_by_user_id("u1")
            assert swipe.like_job_ids == ["a", "b"]
            assert swipe.dislike_job_ids == ["c"]

    def test_get_or_create_recovers_from_concurrent_insert(self):
        existing = JobSwipe(user_id="u1", like_job_ids=[], dislike_job_ids=[])
        db = MagicMock()
        repo = JobSwipeRepository(db)
        repo.get_by_user_id = MagicMock(side_effect=[None, existing])
        db.flush.side_effect = IntegrityError("INSERT", {}, Exception("duplicate key"))

        assert repo.get_or_create("u1") is existing
        db.rollback.assert_called_once()


class TestPreferenceSummaryRepository:

    def test_save_summary_upserts(self, session_factory):
        with job_board_uow(session_factory) as repo:
            repo.summaries.save_summary("u1", "first", model="m1")
        with job_board_uow(session_factory) as repo:
            repo.summaries.save_summary("u1", "second", model="m2")
        with job_board_uow(session_factory) as repo:
            record = repo.summaries.get_by_user_id("u1")
            assert (record.summary, record.model) == ("second", "m2")
            assert record.generated_at is not None


class TestUnitOfWork:

    def test_rolls_back_on_error(self, session_factory):
        with pytest.raises(RuntimeError):
            with job_board_uow(session_factory) as repo:
                repo.swipes.get_or_create("u1")
                raise RuntimeError("boom")

        with job_board_uow(session_factory) as repo:
            assert repo.swipes.get_by_user_id("u1") is None
