"""
Preference ledger service - the per-user record of liked and disliked jobs.

Each operation runs in its own unit of work: read the user's row (creating an
empty one on first access), apply the change, commit. There is no locking, so
two sessions writing the same ledger at once resolve as last-writer-wins.

Store failures are logged and returned as tagged results; nothing raises past
these methods.
"""

import logging
from typing import Callable, Optional

from sqlalchemy.orm import sessionmaker

from core.swipe.models import (
    JobIdsResult,
    LedgerLookup,
    LedgerMutationResult,
    MembershipResult,
    PreferenceLedger,
)
from database.uow import job_board_uow

logger = logging.getLogger(__name__)


def _error_message(exc: Exception) -> str:
    return str(exc) or exc.__class__.__name__


class PreferenceLedgerService:
    """Reads and mutates swipe ledgers."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory

    def get(self, user_id: str) -> LedgerLookup:
        """
        Get the user's ledger, creating an empty one if none exists yet.

        Args:
            user_id: The user whose ledger to read.

        Returns:
            LedgerLookup with the ledger, or with ``error`` set on failure.
        """
        if not user_id:
            return LedgerLookup(error="User ID is required")

        try:
            with job_board_uow(self.session_factory) as repo:
                record = repo.swipes.get_or_create(user_id)
                return LedgerLookup(ledger=PreferenceLedger.from_record(record))
        except Exception as e:
            logger.error(f"Error getting swipe ledger for user {user_id}: {e}", exc_info=True)
            return LedgerLookup(error=_error_message(e))

    def like(self, user_id: str, job_id: str) -> LedgerMutationResult:
        """Put ``job_id`` in the liked set and take it out of the disliked set."""
        return self._mutate(user_id, job_id, "liking", PreferenceLedger.like)

    def dislike(self, user_id: str, job_id: str) -> LedgerMutationResult:
        """Put ``job_id`` in the disliked set and take it out of the liked set."""
        return self._mutate(user_id, job_id, "disliking", PreferenceLedger.dislike)

    def unlike(self, user_id: str, job_id: str) -> LedgerMutationResult:
        return self._mutate(user_id, job_id, "unliking", PreferenceLedger.unlike)

    def undislike(self, user_id: str, job_id: str) -> LedgerMutationResult:
        return self._mutate(user_id, job_id, "undisliking", PreferenceLedger.undislike)

    def liked_jobs(self, user_id: str) -> JobIdsResult:
        lookup = self.get(user_id)
        if lookup.error:
            return JobIdsResult(job_ids=[], error=lookup.error)
        return JobIdsResult(job_ids=list(lookup.ledger.liked_job_ids))

    def disliked_jobs(self, user_id: str) -> JobIdsResult:
        lookup = self.get(user_id)
        if lookup.error:
            return JobIdsResult(job_ids=[], error=lookup.error)
        return JobIdsResult(job_ids=list(lookup.ledger.disliked_job_ids))

    def has_liked(self, user_id: str, job_id: str) -> MembershipResult:
        lookup = self.get(user_id)
        if lookup.error:
            return MembershipResult(value=False, error=lookup.error)
        return MembershipResult(value=lookup.ledger.is_liked(job_id))

    def has_disliked(self, user_id: str, job_id: str) -> MembershipResult:
        lookup = self.get(user_id)
        if lookup.error:
            return MembershipResult(value=False, error=lookup.error)
        return MembershipResult(value=lookup.ledger.is_disliked(job_id))

    # Private helper methods

    def _mutate(
        self,
        user_id: str,
        job_id: str,
        action: str,
        apply: Callable[[PreferenceLedger, str], None]
    ) -> LedgerMutationResult:
        if not user_id:
            return LedgerMutationResult(success=False, error="User ID is required")
        if not job_id:
            return LedgerMutationResult(success=False, error="Job ID is required")

        try:
            with job_board_uow(self.session_factory) as repo:
                record = repo.swipes.get_or_create(user_id)
                ledger = PreferenceLedger.from_record(record)
                apply(ledger, job_id)
                repo.swipes.save_job_ids(record, ledger.liked_job_ids, ledger.disliked_job_ids)

            logger.debug(f"Ledger for user {user_id} after {action} job {job_id}: {ledger.to_dict()}")
            return LedgerMutationResult(success=True, swipe_id=user_id)
        except Exception as e:
            logger.error(f"Error {action} job {job_id} for user {user_id}: {e}", exc_info=True)
            return LedgerMutationResult(success=False, error=_error_message(e))
