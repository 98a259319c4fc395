"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For standard test utilities, see tests/__init__.py
"""

import itertools
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from database.init_db import init_db
from database.models import JobPost, JobStatus


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests as requiring PostgreSQL (deselect with '-m \"not db\"')"
    )


@pytest.fixture
def session_factory(tmp_path):
    """Sessionmaker over a fresh SQLite file with all tables created."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'jobswipe.db'}",
        connect_args={"check_same_thread": False}
    )
    init_db(engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def job_factory(session_factory):
    """
    Insert a job posting and return its id.

    Each call is created one minute after the previous one, so later postings
    sort first in feeds.
    """
    counter = itertools.count()
    base_time = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)

    def _create(title="Backend Engineer", company="Acme", status=JobStatus.OPEN, **fields):
        created_at = base_time + timedelta(minutes=next(counter))
        with session_factory() as session:
            job = JobPost(
                owner_id=fields.pop("owner_id", "company-1"),
                title=title,
                company=company,
                status=JobStatus(status).value,
                created_at=created_at,
                updated_at=created_at,
                **fields
            )
            session.add(job)
            session.commit()
            return job.id

    return _create


@pytest.fixture(scope="session")
def postgres_url():
    """
    PostgreSQL URL for ``db`` tests.

    Uses TEST_DATABASE_URL when set, otherwise starts a container through
    testcontainers. Skips when neither is available.
    """
    from tests import SKIP_DB_TESTS, get_test_database_url, is_database_available

    if SKIP_DB_TESTS:
        pytest.skip("SKIP_DB_TESTS is set")

    external_url = get_test_database_url()
    if external_url:
        if is_database_available(external_url):
            yield external_url
            return
        pytest.skip("External database not available")

    try:
        from testcontainers.postgres import PostgresContainer

        postgres = PostgresContainer(
            image="postgres:16-alpine",
            username="testuser",
            password="testpass",
            dbname="jobswipe_test"
        )
        postgres.start()
    except Exception as e:
        pytest.skip(f"Could not start test database container: {e}")

    try:
        yield postgres.get_connection_url()
    finally:
        postgres.stop()
