"""Business logic services."""

from .preference_service import PreferenceService
from .swipe_service import SwipeSessionManager, get_swipe_manager
from .job_service import JobService
