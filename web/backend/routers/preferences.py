#!/usr/bin/env python3
"""
Preference endpoints - a user's liked and disliked jobs and their summary.
"""

import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from core.swipe import PreferenceLedgerService, PreferenceSummarizer
from ..config import get_config
from ..dependencies import get_ledger_service, get_summarizer, get_summary_reader
from ..services.preference_service import PreferenceService
from ..models.requests import SummaryRequest
from ..models.responses import (
    LedgerResponse,
    JobIdsResponse,
    SwipeMutationResponse,
    MembershipResponse,
    SummaryResponse,
    StoredSummaryResponse,
)

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)

router = APIRouter(prefix="/api/preferences/{user_id}", tags=["preferences"])


def add_rate_limit_handlers(app):
    """Add rate limit exception handlers to the FastAPI app."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


async def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "error": str(exc),
            "type": "RateLimitExceeded"
        }
    )


def _summary_rate_limit() -> str:
    return get_config().summarizer.rate_limit


def get_preference_service(
    ledger_service: PreferenceLedgerService = Depends(get_ledger_service)
) -> PreferenceService:
    return PreferenceService(ledger_service)


@router.get("", response_model=LedgerResponse)
def get_ledger(user_id: str, service: PreferenceService = Depends(get_preference_service)):
    """
    Get the user's ledger.

    A user seen for the first time gets an empty ledger.
    """
    return service.get_ledger(user_id)


@router.get("/liked", response_model=JobIdsResponse)
def get_liked_jobs(user_id: str, service: PreferenceService = Depends(get_preference_service)):
    return service.liked_jobs(user_id)


@router.get("/disliked", response_model=JobIdsResponse)
def get_disliked_jobs(user_id: str, service: PreferenceService = Depends(get_preference_service)):
    return service.disliked_jobs(user_id)


@router.post("/like/{job_id}", response_model=SwipeMutationResponse)
def like_job(user_id: str, job_id: str, service: PreferenceService = Depends(get_preference_service)):
    """Like a job. Removes it from the disliked set if present."""
    return service.like(user_id, job_id)


@router.delete("/like/{job_id}", response_model=SwipeMutationResponse)
def unlike_job(user_id: str, job_id: str, service: PreferenceService = Depends(get_preference_service)):
    return service.unlike(user_id, job_id)


@router.get("/like/{job_id}", response_model=MembershipResponse)
def has_liked_job(user_id: str, job_id: str, service: PreferenceService = Depends(get_preference_service)):
    return service.has_liked(user_id, job_id)


@router.post("/dislike/{job_id}", response_model=SwipeMutationResponse)
def dislike_job(user_id: str, job_id: str, service: PreferenceService = Depends(get_preference_service)):
    """Dislike a job. Removes it from the liked set if present."""
    return service.dislike(user_id, job_id)


@router.delete("/dislike/{job_id}", response_model=SwipeMutationResponse)
def undislike_job(user_id: str, job_id: str, service: PreferenceService = Depends(get_preference_service)):
    return service.undislike(user_id, job_id)


@router.get("/dislike/{job_id}", response_model=MembershipResponse)
def has_disliked_job(user_id: str, job_id: str, service: PreferenceService = Depends(get_preference_service)):
    return service.has_disliked(user_id, job_id)


@router.post("/summary", response_model=SummaryResponse)
@limiter.limit(_summary_rate_limit)
def create_summary(
    request: Request,
    user_id: str,
    body: SummaryRequest,
    ledger_service: PreferenceLedgerService = Depends(get_ledger_service),
    summarizer: PreferenceSummarizer = Depends(get_summarizer)
):
    """
    Generate a fresh preference summary with the language model.

    Uses the most recent liked and disliked jobs. The summary replaces any
    stored one.
    """
    service = PreferenceService(ledger_service, summarizer)
    return service.summarize(user_id, display_name=body.display_name)


@router.get("/summary", response_model=StoredSummaryResponse)
def get_summary(
    user_id: str,
    ledger_service: PreferenceLedgerService = Depends(get_ledger_service),
    summarizer: PreferenceSummarizer = Depends(get_summary_reader)
):
    """Get the last stored preference summary."""
    service = PreferenceService(ledger_service, summarizer)
    return service.get_summary(user_id)
