#!/usr/bin/env python3
"""
Swipe endpoints - feeds and interactive swipe sessions.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query

from core.swipe import FeedAssembler, PreferenceLedgerService
from ..config import get_config
from ..dependencies import get_feed_assembler, get_ledger_service
from ..services.swipe_service import get_swipe_manager, job_card, session_response
from ..models.requests import SwipeSessionCreate, SwipeDecision
from ..models.responses import (
    FeedResponse,
    SwipeSessionResponse,
    SwipeDecisionResponse,
    SwipeRetryResponse,
    DeleteSessionResponse,
)
from ..exceptions import LedgerUnavailableException

logger = logging.getLogger(__name__)

feed_router = APIRouter(prefix="/api/feed", tags=["swipe"])
router = APIRouter(prefix="/api/swipe/sessions", tags=["swipe"])


def _effective_pool_limit(requested) -> int:
    feed_config = get_config().feed
    limit = requested if requested is not None else feed_config.pool_limit
    return min(limit, feed_config.max_pool_limit)


@feed_router.get("/{user_id}", response_model=FeedResponse)
def get_feed(
    user_id: str,
    limit: Optional[int] = Query(default=None, ge=1, description="Open postings to fetch before filtering"),
    feed_assembler: FeedAssembler = Depends(get_feed_assembler)
):
    """
    Build a one-off feed of open jobs the user has not swiped yet.

    Newest postings first. The limit is capped by ``feed.max_pool_limit``.
    """
    result = feed_assembler.build_feed(user_id, _effective_pool_limit(limit))
    if result.error:
        raise LedgerUnavailableException(result.error)

    return FeedResponse(
        success=True,
        user_id=user_id,
        cursor=result.feed.cursor,
        jobs=[job_card(job) for job in result.feed.pool]
    )


@router.post("", response_model=SwipeSessionResponse)
def create_session(
    body: SwipeSessionCreate,
    ledger_service: PreferenceLedgerService = Depends(get_ledger_service),
    feed_assembler: FeedAssembler = Depends(get_feed_assembler)
):
    """
    Open a swipe session and load its feed.

    If the feed cannot be loaded the session comes back ``exhausted`` with
    ``last_error`` set; refresh it to try again.
    """
    manager = get_swipe_manager()
    session_id = manager.create_session(
        body.user_id,
        ledger_service,
        feed_assembler,
        pool_limit=_effective_pool_limit(body.pool_limit)
    )
    return session_response(session_id, manager.get_session(session_id))


@router.get("/{session_id}", response_model=SwipeSessionResponse)
def get_session(session_id: str):
    manager = get_swipe_manager()
    return session_response(session_id, manager.get_session(session_id))


@router.post("/{session_id}/decide", response_model=SwipeDecisionResponse)
def decide(session_id: str, body: SwipeDecision):
    """
    Like or dislike the current job and advance to the next.

    The session advances even if saving the decision fails; the failure is
    listed under ``failed_writes`` until retried. ``accepted`` is false when
    the session had no current job or was busy with another request.
    """
    return get_swipe_manager().decide(session_id, body.direction)


@router.post("/{session_id}/refresh", response_model=SwipeSessionResponse)
def refresh_session(session_id: str):
    return get_swipe_manager().refresh(session_id)


@router.post("/{session_id}/retry", response_model=SwipeRetryResponse)
def retry_failed_writes(session_id: str):
    """Retry decisions that could not be saved."""
    return get_swipe_manager().retry(session_id)


@router.delete("/{session_id}", response_model=DeleteSessionResponse)
def close_session(session_id: str):
    get_swipe_manager().close_session(session_id)
    return DeleteSessionResponse(success=True, message=f"Swipe session {session_id} closed")
