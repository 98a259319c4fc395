from sqlalchemy.orm import Session

from database.repositories import (
    JobPostRepository,
    JobSwipeRepository,
    PreferenceSummaryRepository,
)


class JobBoardRepository:
    """Facade bundling the per-table repositories over one Session."""

    def __init__(self, db: Session):
        self.db = db
        self.jobs = JobPostRepository(db)
        self.swipes = JobSwipeRepository(db)
        self.summaries = PreferenceSummaryRepository(db)
