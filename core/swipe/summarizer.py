"""
Preference summarizer - turns a user's swipe ledger into a short prose summary.

A handful of recently liked and disliked postings are resolved, embedded in a
prompt, and sent to the hosted model. The trimmed completion is stored as the
user's PreferenceSummary, replacing any previous one.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import sessionmaker

from core.llm.interfaces import LLMProvider
from core.llm.system_prompts import (
    PREFERENCE_SUMMARY_SYSTEM_PROMPT,
    build_preference_summary_prompt,
)
from core.swipe.ledger import PreferenceLedgerService
from core.swipe.models import JobSnapshot, SummaryResult
from database.uow import job_board_uow

logger = logging.getLogger(__name__)

NOTHING_TO_SUMMARIZE = "No swiped jobs to summarize"


class PreferenceSummarizer:
    """Generates and stores preference summaries.

    ``llm`` may be None when the instance is only used to read stored summaries.
    """

    def __init__(
        self,
        session_factory: Optional[sessionmaker],
        ledger_service: PreferenceLedgerService,
        llm: Optional[LLMProvider],
        sample_size: int = 3,
        max_words: int = 100
    ):
        self.session_factory = session_factory
        self.ledger_service = ledger_service
        self.llm = llm
        self.sample_size = sample_size
        self.max_words = max_words

    def summarize(self, user_id: str, display_name: str = "") -> SummaryResult:
        """
        Generate and store a new preference summary for ``user_id``.

        Postings that cannot be resolved are left out of the prompt; the run
        fails only when none of the sampled postings resolve.

        Args:
            user_id: The user to summarize.
            display_name: Name used to address the user in the prompt.

        Returns:
            SummaryResult with the summary text, or ``analysis=""`` and an error.
        """
        liked = self.ledger_service.liked_jobs(user_id)
        if liked.error:
            return SummaryResult(error=liked.error)

        disliked = self.ledger_service.disliked_jobs(user_id)
        if disliked.error:
            return SummaryResult(error=disliked.error)

        liked_jobs = self._resolve(self._most_recent(liked.job_ids))
        disliked_jobs = self._resolve(self._most_recent(disliked.job_ids))

        if not liked_jobs and not disliked_jobs:
            return SummaryResult(error=NOTHING_TO_SUMMARIZE)

        prompt = build_preference_summary_prompt(
            display_name,
            liked_jobs,
            disliked_jobs,
            max_words=self.max_words
        )

        try:
            analysis = (self.llm.generate_text(prompt, system_prompt=PREFERENCE_SUMMARY_SYSTEM_PROMPT) or "").strip()
        except Exception as e:
            logger.error(f"Preference summary generation failed for user {user_id}: {e}", exc_info=True)
            return SummaryResult(error=f"Failed to generate preference summary: {e}")

        if not analysis:
            return SummaryResult(error="Model returned an empty summary")

        try:
            with job_board_uow(self.session_factory) as repo:
                repo.summaries.save_summary(user_id, analysis, model=self.llm.model_name)
        except Exception as e:
            logger.error(f"Error saving preference summary for user {user_id}: {e}", exc_info=True)
            return SummaryResult(error=str(e) or e.__class__.__name__)

        logger.info(
            f"Stored preference summary for user {user_id} "
            f"({len(liked_jobs)} liked, {len(disliked_jobs)} disliked postings)"
        )
        return SummaryResult(analysis=analysis)

    def get_summary(self, user_id: str) -> Optional[dict]:
        """Return the stored summary as a dict, or None if there is none."""
        with job_board_uow(self.session_factory) as repo:
            record = repo.summaries.get_by_user_id(user_id)
            if record is None:
                return None
            return {
                "user_id": record.user_id,
                "summary": record.summary,
                "model": record.model,
                "generated_at": record.generated_at,
            }

    # Private helper methods

    def _most_recent(self, job_ids: List[str]) -> List[str]:
        # Ledger lists are in insertion order; newest decisions last
        return list(reversed(job_ids[-self.sample_size:]))

    def _resolve(self, job_ids: List[str]) -> List[JobSnapshot]:
        resolved = []
        for job_id in job_ids:
            try:
                with job_board_uow(self.session_factory) as repo:
                    job = repo.jobs.get_by_id(job_id)
                    if job is None:
                        logger.warning(f"Skipping job {job_id} in preference summary: not found")
                        continue
                    resolved.append(JobSnapshot.from_model(job))
            except Exception as e:
                logger.warning(f"Skipping job {job_id} in preference summary: {e}")
        return resolved
