"""
Feed assembler - builds the swipe feed for a user.

The feed is the newest open postings minus every posting already present in
the user's ledger, in fetch order. The postings read and the ledger read are
independent, so they run on two worker threads (each with its own session)
and are joined before the difference is taken.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from sqlalchemy.orm import sessionmaker

from core.swipe.ledger import PreferenceLedgerService
from core.swipe.models import FeedResult, FeedState, JobSnapshot, LedgerLookup
from database.uow import job_board_uow

logger = logging.getLogger(__name__)


class FeedAssembler:
    """Computes the undecided subset of open postings for a user."""

    def __init__(
        self,
        session_factory: Optional[sessionmaker],
        ledger_service: PreferenceLedgerService,
        parallel_reads: bool = True
    ):
        self.session_factory = session_factory
        self.ledger_service = ledger_service
        self.parallel_reads = parallel_reads

    def build_feed(self, user_id: str, pool_limit: int) -> FeedResult:
        """
        Build a fresh feed for ``user_id``.

        Args:
            user_id: The user the feed is for.
            pool_limit: Maximum number of open postings fetched before the
                user's swiped postings are removed.

        Returns:
            FeedResult holding a FeedState with cursor 0, or an error.
        """
        if not user_id:
            return FeedResult(error="User ID is required")
        if pool_limit < 1:
            return FeedResult(error=f"pool_limit must be at least 1, got {pool_limit}")

        try:
            if self.parallel_reads:
                with ThreadPoolExecutor(max_workers=2, thread_name_prefix="feed-read") as executor:
                    postings_future = executor.submit(self._fetch_open_postings, pool_limit)
                    ledger_future = executor.submit(self.ledger_service.get, user_id)
                    postings = postings_future.result()
                    lookup = ledger_future.result()
            else:
                postings = self._fetch_open_postings(pool_limit)
                lookup = self.ledger_service.get(user_id)
        except Exception as e:
            logger.error(f"Error fetching open postings for user {user_id}: {e}", exc_info=True)
            return FeedResult(error=str(e) or e.__class__.__name__)

        return self._assemble(user_id, postings, lookup)

    # Private helper methods

    def _fetch_open_postings(self, pool_limit: int) -> List[JobSnapshot]:
        with job_board_uow(self.session_factory) as repo:
            return [JobSnapshot.from_model(job) for job in repo.jobs.list_open_jobs(limit=pool_limit)]

    def _assemble(
        self,
        user_id: str,
        postings: List[JobSnapshot],
        lookup: LedgerLookup
    ) -> FeedResult:
        if lookup.error:
            return FeedResult(error=lookup.error)

        swiped = lookup.ledger.swiped_job_ids()
        pool = [job for job in postings if job.id not in swiped]

        logger.info(
            f"Built feed for user {user_id}: {len(pool)} of {len(postings)} open postings undecided"
        )
        return FeedResult(feed=FeedState(user_id=user_id, pool=pool, cursor=0))
