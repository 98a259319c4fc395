#!/usr/bin/env python3
"""
Preference service - maps ledger and summarizer results onto API responses.
"""

import logging
from typing import Optional

from core.swipe import PreferenceLedgerService, PreferenceSummarizer
from core.swipe.summarizer import NOTHING_TO_SUMMARIZE
from ..models.responses import (
    LedgerResponse,
    JobIdsResponse,
    SwipeMutationResponse,
    MembershipResponse,
    SummaryResponse,
    StoredSummaryResponse,
)
from ..utils import safe_datetime_iso
from ..exceptions import (
    LedgerUnavailableException,
    InvalidRequestException,
    SummaryFailedException,
    SummaryNotFoundException,
)

logger = logging.getLogger(__name__)


class PreferenceService:
    """Service for reading and changing a user's swipe preferences."""

    def __init__(
        self,
        ledger_service: PreferenceLedgerService,
        summarizer: Optional[PreferenceSummarizer] = None
    ):
        self.ledger_service = ledger_service
        self.summarizer = summarizer

    def get_ledger(self, user_id: str) -> LedgerResponse:
        lookup = self.ledger_service.get(user_id)
        if lookup.error:
            raise LedgerUnavailableException(lookup.error)
        return LedgerResponse(
            success=True,
            user_id=user_id,
            liked_job_ids=list(lookup.ledger.liked_job_ids),
            disliked_job_ids=list(lookup.ledger.disliked_job_ids)
        )

    def liked_jobs(self, user_id: str) -> JobIdsResponse:
        return self._job_ids(self.ledger_service.liked_jobs(user_id))

    def disliked_jobs(self, user_id: str) -> JobIdsResponse:
        return self._job_ids(self.ledger_service.disliked_jobs(user_id))

    def like(self, user_id: str, job_id: str) -> SwipeMutationResponse:
        return self._mutation(self.ledger_service.like(user_id, job_id))

    def dislike(self, user_id: str, job_id: str) -> SwipeMutationResponse:
        return self._mutation(self.ledger_service.dislike(user_id, job_id))

    def unlike(self, user_id: str, job_id: str) -> SwipeMutationResponse:
        return self._mutation(self.ledger_service.unlike(user_id, job_id))

    def undislike(self, user_id: str, job_id: str) -> SwipeMutationResponse:
        return self._mutation(self.ledger_service.undislike(user_id, job_id))

    def has_liked(self, user_id: str, job_id: str) -> MembershipResponse:
        return self._membership(job_id, self.ledger_service.has_liked(user_id, job_id))

    def has_disliked(self, user_id: str, job_id: str) -> MembershipResponse:
        return self._membership(job_id, self.ledger_service.has_disliked(user_id, job_id))

    def summarize(self, user_id: str, display_name: str = "") -> SummaryResponse:
        """
        Generate and store a preference summary.

        Raises:
            InvalidRequestException: If the user has no resolvable swiped jobs.
            SummaryFailedException: If the ledger read, model call or save failed.
        """
        result = self.summarizer.summarize(user_id, display_name=display_name)
        if result.error == NOTHING_TO_SUMMARIZE:
            raise InvalidRequestException(f"User {user_id} has no swiped jobs to summarize")
        if result.error:
            raise SummaryFailedException(result.error)
        return SummaryResponse(success=True, analysis=result.analysis)

    def get_summary(self, user_id: str) -> StoredSummaryResponse:
        try:
            stored = self.summarizer.get_summary(user_id)
        except Exception as e:
            logger.error(f"Error reading preference summary for user {user_id}: {e}", exc_info=True)
            raise LedgerUnavailableException(str(e) or e.__class__.__name__) from e

        if stored is None:
            raise SummaryNotFoundException(f"No preference summary for user {user_id}")

        return StoredSummaryResponse(
            success=True,
            user_id=stored["user_id"],
            summary=stored["summary"],
            model=stored["model"],
            generated_at=safe_datetime_iso(stored["generated_at"])
        )

    # Private helper methods

    def _job_ids(self, result) -> JobIdsResponse:
        if result.error:
            raise LedgerUnavailableException(result.error)
        return JobIdsResponse(success=True, job_ids=result.job_ids)

    def _mutation(self, result) -> SwipeMutationResponse:
        if not result.success:
            raise LedgerUnavailableException(result.error or "Ledger write failed")
        return SwipeMutationResponse(success=True, swipe_id=result.swipe_id)

    def _membership(self, job_id: str, result) -> MembershipResponse:
        if result.error:
            raise LedgerUnavailableException(result.error)
        return MembershipResponse(success=True, job_id=job_id, value=result.value)
