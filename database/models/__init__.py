from .base import Base, JSONType
from .job import JobPost, JobStatus
from .job_swipe import JobSwipe
from .preference_summary import PreferenceSummary

__all__ = [
    'Base',
    'JSONType',
    'JobPost',
    'JobStatus',
    'JobSwipe',
    'PreferenceSummary',
]
