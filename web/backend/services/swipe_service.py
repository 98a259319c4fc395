#!/usr/bin/env python3
"""
Swipe service - keeps live swipe sessions in memory for the API.
"""

import time
import uuid
import logging
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict, Optional

from core.swipe import (
    DecisionOutcome,
    Direction,
    FeedAssembler,
    JobSnapshot,
    PreferenceLedgerService,
    SwipeController,
    SwipeFailure,
)
from ..models.responses import (
    JobCard,
    SwipeFailureDetail,
    SwipeSessionResponse,
    SwipeDecisionResponse,
    SwipeRetryResponse,
)
from ..config import get_config
from ..utils import safe_datetime_iso
from ..exceptions import SwipeSessionNotFoundException

logger = logging.getLogger(__name__)


def job_card(job: Optional[JobSnapshot]) -> Optional[JobCard]:
    if job is None:
        return None
    return JobCard(
        job_id=job.id,
        title=job.title,
        company=job.company,
        location=job.location,
        salary_min=job.salary_min,
        salary_max=job.salary_max,
        is_remote=job.is_remote,
        job_type=job.job_type,
        required_skills=list(job.required_skills),
        status=job.status
    )


def _failure_detail(failure: SwipeFailure) -> SwipeFailureDetail:
    return SwipeFailureDetail(
        job_id=failure.job_id,
        direction=failure.direction.value,
        error=failure.error,
        attempts=failure.attempts,
        occurred_at=safe_datetime_iso(failure.occurred_at)
    )


def session_response(session_id: str, controller: SwipeController) -> SwipeSessionResponse:
    snapshot = controller.snapshot()
    return SwipeSessionResponse(
        success=True,
        session_id=session_id,
        user_id=snapshot["user_id"],
        state=snapshot["state"],
        cursor=snapshot["cursor"],
        total=snapshot["total"],
        current_job=job_card(snapshot["current_job"]),
        failed_writes=[_failure_detail(f) for f in snapshot["failed_writes"]],
        last_error=snapshot["last_error"]
    )


@dataclass
class _SessionEntry:
    controller: SwipeController
    last_used: float


class SwipeSessionManager:
    """
    Manages swipe sessions and their controllers.

    Sessions idle for longer than ``session_ttl_seconds`` are dropped the next
    time any session is opened or looked up.
    """

    def __init__(
        self,
        session_ttl_seconds: float = 1800.0,
        clock: Callable[[], float] = time.monotonic
    ):
        self._sessions: Dict[str, _SessionEntry] = {}
        self._lock = Lock()
        self._session_ttl_seconds = session_ttl_seconds
        self._clock = clock

    def _evict_idle(self, now: float) -> None:
        # Caller holds self._lock
        expired = [
            session_id for session_id, entry in self._sessions.items()
            if now - entry.last_used > self._session_ttl_seconds
        ]
        for session_id in expired:
            entry = self._sessions.pop(session_id)
            unsaved = len(entry.controller.failed_writes)
            if unsaved:
                logger.warning(
                    f"Evicted idle swipe session {session_id} with {unsaved} unsaved decisions"
                )
            else:
                logger.info(f"Evicted idle swipe session {session_id}")

    def create_session(
        self,
        user_id: str,
        ledger_service: PreferenceLedgerService,
        feed_assembler: FeedAssembler,
        pool_limit: int
    ) -> str:
        """
        Open a session for ``user_id`` and load its first feed.

        A feed that fails to load still yields a session; it is EXHAUSTED with
        ``last_error`` set and can be refreshed.

        Returns:
            Session ID.
        """
        controller = SwipeController(
            user_id,
            ledger_service,
            feed_assembler,
            pool_limit=pool_limit
        )
        controller.load()

        session_id = str(uuid.uuid4())
        with self._lock:
            now = self._clock()
            self._evict_idle(now)
            self._sessions[session_id] = _SessionEntry(controller, now)

        logger.info(
            f"Opened swipe session {session_id} for user {user_id} "
            f"({controller.state.value}, {len(controller.pool)} postings)"
        )
        return session_id

    def get_session(self, session_id: str) -> SwipeController:
        """
        Raises:
            SwipeSessionNotFoundException: If the session does not exist or was evicted.
        """
        with self._lock:
            now = self._clock()
            self._evict_idle(now)
            entry = self._sessions.get(session_id)
            if entry is not None:
                entry.last_used = now
        if entry is None:
            raise SwipeSessionNotFoundException(f"Swipe session {session_id} not found")
        return entry.controller

    def close_session(self, session_id: str) -> None:
        with self._lock:
            entry = self._sessions.pop(session_id, None)
        if entry is None:
            raise SwipeSessionNotFoundException(f"Swipe session {session_id} not found")
        controller = entry.controller
        if controller.failed_writes:
            logger.warning(
                f"Closed swipe session {session_id} with {len(controller.failed_writes)} unsaved decisions"
            )

    def decide(self, session_id: str, direction: Direction) -> SwipeDecisionResponse:
        controller = self.get_session(session_id)
        outcome: DecisionOutcome = controller.decide(direction)
        return SwipeDecisionResponse(
            success=True,
            accepted=outcome.accepted,
            job_id=outcome.job_id,
            direction=outcome.direction.value if outcome.direction else None,
            write_succeeded=outcome.success,
            write_error=outcome.error,
            session=session_response(session_id, controller)
        )

    def refresh(self, session_id: str) -> SwipeSessionResponse:
        controller = self.get_session(session_id)
        controller.refresh()
        return session_response(session_id, controller)

    def retry(self, session_id: str) -> SwipeRetryResponse:
        controller = self.get_session(session_id)
        still_failing = controller.retry_failed_writes()
        return SwipeRetryResponse(
            success=True,
            still_failing=still_failing,
            session=session_response(session_id, controller)
        )


# Global session manager instance
_swipe_manager: Optional[SwipeSessionManager] = None
_swipe_manager_lock = Lock()


def get_swipe_manager() -> SwipeSessionManager:
    """Get the global swipe session manager instance."""
    global _swipe_manager
    with _swipe_manager_lock:
        if _swipe_manager is None:
            _swipe_manager = SwipeSessionManager(
                session_ttl_seconds=get_config().feed.session_ttl_seconds
            )
        return _swipe_manager
