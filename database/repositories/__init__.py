from database.repositories.base import BaseRepository
from database.repositories.job_post import JobPostRepository
from database.repositories.job_swipe import JobSwipeRepository
from database.repositories.preference_summary import PreferenceSummaryRepository

__all__ = [
    'BaseRepository',
    'JobPostRepository',
    'JobSwipeRepository',
    'PreferenceSummaryRepository',
]
