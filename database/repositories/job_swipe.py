import logging
from typing import List, Optional, Sequence
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from database.models import JobSwipe
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class JobSwipeRepository(BaseRepository):
    model = JobSwipe

    def get_by_user_id(self, user_id: str) -> Optional[JobSwipe]:
        return self.get_by_key(user_id)

    def create(self, user_id: str) -> JobSwipe:
        swipe = JobSwipe(
            user_id=user_id,
            like_job_ids=[],
            dislike_job_ids=[]
        )
        self.db.add(swipe)
        self.db.flush()
        return swipe

    def get_or_create(self, user_id: str) -> JobSwipe:
        """Return the user's ledger row, inserting an empty one on first access.

        Two sessions racing on the first access both try to insert; the loser
        hits the primary key, rolls back and reads the winner's row. Call this
        first in a unit of work: the rollback discards anything pending.
        """
        swipe = self.get_by_user_id(user_id)
        if swipe is not None:
            return swipe

        try:
            swipe = self.create(user_id)
            logger.info(f"Created empty swipe ledger for user {user_id}")
            return swipe
        except IntegrityError:
            self.db.rollback()
            logger.info(f"Swipe ledger for user {user_id} created concurrently, re-reading")
            swipe = self.get_by_user_id(user_id)
            if swipe is None:
                raise
            return swipe

    def save_job_ids(
        self,
        swipe: JobSwipe,
        like_job_ids: Sequence[str],
        dislike_job_ids: Sequence[str]
    ) -> JobSwipe:
        # Assign fresh lists so the JSON columns are flagged dirty
        swipe.like_job_ids = list(like_job_ids)
        swipe.dislike_job_ids = list(dislike_job_ids)
        swipe.updated_at = datetime.now(timezone.utc)
        return swipe

    def list_user_ids(self) -> List[str]:
        stmt = select(JobSwipe.user_id).order_by(JobSwipe.user_id)
        return list(self.db.execute(stmt).scalars().all())
