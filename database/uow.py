import contextlib
import logging
from typing import Optional

from sqlalchemy.orm import sessionmaker

from database.repository import JobBoardRepository

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def job_board_uow(session_factory: Optional[sessionmaker] = None):
    """Per-unit-of-work transaction scope.

    Yields a JobBoardRepository bound to a fresh Session. Commits on success,
    rolls back on exception, always closes.

    Usage:
        with job_board_uow(session_factory) as repo:
            swipe = repo.swipes.get_or_create(user_id)
            # perform operations...
        # commit happens automatically on successful exit
    """
    if session_factory is None:
        from database.database import SessionLocal
        session_factory = SessionLocal

    session = session_factory()
    try:
        repo = JobBoardRepository(session)
        yield repo
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
