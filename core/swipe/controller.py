"""
Swipe controller - the per-session state machine over a feed.

    LOADING -> READY(cursor) -> READY(cursor + 1) | EXHAUSTED

Each decision writes to the ledger and then advances the cursor whether or
not the write succeeded, so a slow or failing store never blocks swiping.
Failed writes are queued on the session and can be replayed with
``retry_failed_writes``. Only ``refresh`` leaves EXHAUSTED.
"""

import logging
import threading
from typing import Callable, Dict, Any, List, Optional

from core.swipe.feed import FeedAssembler
from core.swipe.ledger import PreferenceLedgerService
from core.swipe.models import (
    DecisionOutcome,
    Direction,
    FeedResult,
    FeedState,
    JobSnapshot,
    LedgerMutationResult,
    SwipeFailure,
    SwipeState,
)

logger = logging.getLogger(__name__)


class SwipeController:
    """One user's swipe session."""

    def __init__(
        self,
        user_id: str,
        ledger_service: PreferenceLedgerService,
        feed_assembler: FeedAssembler,
        pool_limit: int = 20,
        on_write_failed: Optional[Callable[[SwipeFailure], None]] = None
    ):
        self.user_id = user_id
        self.ledger_service = ledger_service
        self.feed_assembler = feed_assembler
        self.pool_limit = pool_limit
        self.on_write_failed = on_write_failed

        self._state = SwipeState.LOADING
        self._feed = FeedState(user_id=user_id)
        self._failed_writes: List[SwipeFailure] = []
        self._last_error: Optional[str] = None
        # Single-flight guard: at most one decision in flight per session
        self._in_flight = threading.Lock()

    @property
    def state(self) -> SwipeState:
        return self._state

    @property
    def cursor(self) -> int:
        return self._feed.cursor

    @property
    def pool(self) -> List[JobSnapshot]:
        return list(self._feed.pool)

    @property
    def current_job(self) -> Optional[JobSnapshot]:
        if self._state != SwipeState.READY:
            return None
        return self._feed.current

    @property
    def failed_writes(self) -> List[SwipeFailure]:
        return list(self._failed_writes)

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    def load(self) -> FeedResult:
        """Assemble a new feed and reset the cursor.

        On failure the session becomes EXHAUSTED with ``last_error`` set;
        calling ``refresh`` again is the way out.
        """
        with self._in_flight:
            self._state = SwipeState.LOADING
            result = self.feed_assembler.build_feed(self.user_id, self.pool_limit)

            if result.error:
                logger.warning(f"Could not load feed for user {self.user_id}: {result.error}")
                self._feed = FeedState(user_id=self.user_id)
                self._last_error = result.error
                self._state = SwipeState.EXHAUSTED
                return result

            self._feed = result.feed
            self._last_error = None
            self._state = SwipeState.EXHAUSTED if self._feed.is_exhausted else SwipeState.READY
            return result

    def refresh(self) -> FeedResult:
        return self.load()

    def decide(self, direction: Direction) -> DecisionOutcome:
        """
        Apply a like or dislike to the current posting and move to the next.

        A call made while another decision is in flight, or while the session
        is not READY, does nothing and comes back with ``accepted=False``.

        Args:
            direction: Direction.LIKE or Direction.DISLIKE.

        Returns:
            DecisionOutcome describing the write and the new position.
        """
        try:
            direction = Direction(direction)
        except ValueError:
            logger.warning(f"Ignoring unknown swipe direction {direction!r} for user {self.user_id}")
            return self._rejected()

        if not self._in_flight.acquire(blocking=False):
            logger.debug(f"Ignoring {direction.value} for user {self.user_id}: decision in flight")
            return self._rejected()

        try:
            if self._state != SwipeState.READY:
                return self._rejected()

            job = self._feed.current
            result = self._write(direction, job.id)

            self._feed.cursor += 1
            if self._feed.is_exhausted:
                self._state = SwipeState.EXHAUSTED
                logger.info(f"Feed exhausted for user {self.user_id}")

            if result.success:
                # A newer decision on the same job supersedes any queued one
                self._discard_failures(job.id)
            else:
                self._record_failure(job.id, direction, result.error)

            return DecisionOutcome(
                accepted=True,
                state=self._state,
                cursor=self._feed.cursor,
                job_id=job.id,
                direction=direction,
                success=result.success,
                error=result.error,
            )
        finally:
            self._in_flight.release()

    def retry_failed_writes(self) -> int:
        """Replay queued failed writes.

        Returns:
            Number of writes still failing.
        """
        # Decisions made while the retry runs are rejected like any concurrent decide
        with self._in_flight:
            still_failing: List[SwipeFailure] = []

            for failure in self._failed_writes:
                result = self._write(failure.direction, failure.job_id)
                if result.success:
                    logger.info(f"Retried {failure.direction.value} of job {failure.job_id} for user {self.user_id}")
                    continue
                failure.attempts += 1
                failure.error = result.error or failure.error
                still_failing.append(failure)

            self._failed_writes = still_failing
            return len(still_failing)

    def snapshot(self) -> Dict[str, Any]:
        """Serializable view of the session."""
        current = self.current_job
        return {
            "user_id": self.user_id,
            "state": self._state.value,
            "cursor": self._feed.cursor,
            "total": len(self._feed.pool),
            "current_job": current,
            "failed_writes": self.failed_writes,
            "last_error": self._last_error,
        }

    # Private helper methods

    def _write(self, direction: Direction, job_id: str) -> LedgerMutationResult:
        if direction == Direction.LIKE:
            return self.ledger_service.like(self.user_id, job_id)
        return self.ledger_service.dislike(self.user_id, job_id)

    def _discard_failures(self, job_id: str) -> None:
        self._failed_writes = [f for f in self._failed_writes if f.job_id != job_id]

    def _record_failure(self, job_id: str, direction: Direction, error: Optional[str]) -> None:
        failure = SwipeFailure(job_id=job_id, direction=direction, error=error or "Unknown error")
        # Only the latest decision per job is worth replaying
        self._discard_failures(job_id)
        self._failed_writes.append(failure)
        logger.warning(
            f"Swipe write failed for user {self.user_id}, job {job_id} ({direction.value}): {failure.error}"
        )
        if self.on_write_failed is None:
            return
        try:
            self.on_write_failed(failure)
        except Exception as e:
            logger.error(f"on_write_failed callback raised for user {self.user_id}, job {job_id}: {e}", exc_info=True)

    def _rejected(self) -> DecisionOutcome:
        return DecisionOutcome(accepted=False, state=self._state, cursor=self._feed.cursor)
