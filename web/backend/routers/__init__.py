"""API route handlers."""

from .preferences import router as preferences_router
from .swipe import router as swipe_router, feed_router
from .jobs import router as jobs_router
