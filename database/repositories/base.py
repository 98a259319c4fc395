from typing import Any, Optional

from sqlalchemy import inspect, select
from sqlalchemy.orm import Session


class BaseRepository:
    """Per-table repository over a caller-owned Session.

    Subclasses set ``model``; transactions belong to the unit of work.
    """
    model = None

    def __init__(self, db: Session):
        self.db = db

    def get_by_key(self, key: Any) -> Optional[Any]:
        """Row with primary key ``key``, or None."""
        primary_key = inspect(self.model).primary_key[0]
        stmt = select(self.model).where(primary_key == key)
        return self.db.execute(stmt).scalar_one_or_none()
