#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.
"""

import logging
import threading
from typing import Generator, Optional

import openai
from fastapi import Depends
from sqlalchemy.orm import Session, sessionmaker

from core.app_context import AppContext
from core.llm.interfaces import LLMProvider
from core.swipe import FeedAssembler, PreferenceLedgerService, PreferenceSummarizer
from database.database import create_session_factory
from .config import get_config
from .exceptions import SummaryFailedException

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Manages database connections and sessions.

    The engine is created on first use so importing the app does not need a
    reachable database.
    """

    def __init__(self):
        self._session_factory: Optional[sessionmaker] = None
        self._lock = threading.Lock()

    @property
    def session_factory(self) -> sessionmaker:
        with self._lock:
            if self._session_factory is None:
                config = get_config()
                engine_kwargs = {"pool_pre_ping": True}  # Verify connections before using
                if not config.database.url.startswith("sqlite"):
                    engine_kwargs.update(pool_size=10, max_overflow=20)
                self._session_factory = create_session_factory(config.database.url, **engine_kwargs)
            return self._session_factory

    def get_session(self) -> Generator[Session, None, None]:
        """
        Get a database session.

        Yields:
            Session: SQLAlchemy database session.
        """
        session = self.session_factory()
        try:
            yield session
        finally:
            session.close()


# Global database manager instance
_db_manager = DatabaseManager()


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session.

    Usage:
        @app.get("/endpoint")
        def my_endpoint(db: Session = Depends(get_db)):
            ...

    Yields:
        Session: Database session that will be automatically closed.
    """
    yield from _db_manager.get_session()


def get_session_factory() -> sessionmaker:
    """Sessionmaker for services that open their own units of work."""
    return _db_manager.session_factory


_ai_service: Optional[LLMProvider] = None
_ai_service_lock = threading.Lock()


def get_ai_service() -> LLMProvider:
    """Shared LLM client, built on first use from the ``llm`` config section."""
    global _ai_service
    with _ai_service_lock:
        if _ai_service is None:
            try:
                _ai_service = AppContext._build_ai_service(get_config().llm)
            except openai.OpenAIError as e:
                logger.error(f"LLM client is not configured: {e}")
                raise SummaryFailedException(f"LLM client is not configured: {e}") from e
        return _ai_service


def get_ledger_service(
    session_factory: sessionmaker = Depends(get_session_factory)
) -> PreferenceLedgerService:
    return PreferenceLedgerService(session_factory)


def get_feed_assembler(
    session_factory: sessionmaker = Depends(get_session_factory),
    ledger_service: PreferenceLedgerService = Depends(get_ledger_service)
) -> FeedAssembler:
    return FeedAssembler(
        session_factory,
        ledger_service,
        parallel_reads=get_config().feed.parallel_reads
    )


def get_summarizer(
    session_factory: sessionmaker = Depends(get_session_factory),
    ledger_service: PreferenceLedgerService = Depends(get_ledger_service),
    ai_service: LLMProvider = Depends(get_ai_service)
) -> PreferenceSummarizer:
    summarizer_config = get_config().summarizer
    return PreferenceSummarizer(
        session_factory,
        ledger_service,
        ai_service,
        sample_size=summarizer_config.sample_size,
        max_words=summarizer_config.max_words
    )


def get_summary_reader(
    session_factory: sessionmaker = Depends(get_session_factory),
    ledger_service: PreferenceLedgerService = Depends(get_ledger_service)
) -> PreferenceSummarizer:
    """Summarizer for reading stored summaries; never calls the model."""
    return PreferenceSummarizer(session_factory, ledger_service, llm=None)
