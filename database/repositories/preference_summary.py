import logging
from typing import Optional
from datetime import datetime, timezone


from database.models import PreferenceSummary
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class PreferenceSummaryRepository(BaseRepository):
    model = PreferenceSummary

    def get_by_user_id(self, user_id: str) -> Optional[PreferenceSummary]:
        return self.get_by_key(user_id)

    def save_summary(
        self,
        user_id: str,
        summary: str,
        model: Optional[str] = None
    ) -> PreferenceSummary:
        """Insert or overwrite the user's summary."""
        record = self.get_by_user_id(user_id)
        now = datetime.now(timezone.utc)

        if record is None:
            record = PreferenceSummary(user_id=user_id, summary=summary, model=model, generated_at=now)
            self.db.add(record)
        else:
            record.summary = summary
            record.model = model
            record.generated_at = now

        self.db.flush()
        return record
