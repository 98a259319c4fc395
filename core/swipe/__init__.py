"""Swipe Module - preference ledger, feed assembly, swipe sessions and summaries."""
from core.swipe.models import (
    Direction,
    SwipeState,
    PreferenceLedger,
    JobSnapshot,
    FeedState,
    LedgerLookup,
    LedgerMutationResult,
    JobIdsResult,
    MembershipResult,
    FeedResult,
    SummaryResult,
    SwipeFailure,
    DecisionOutcome,
)
from core.swipe.ledger import PreferenceLedgerService
from core.swipe.feed import FeedAssembler
from core.swipe.controller import SwipeController
from core.swipe.summarizer import PreferenceSummarizer

__all__ = [
    'Direction',
    'SwipeState',
    'PreferenceLedger',
    'JobSnapshot',
    'FeedState',
    'LedgerLookup',
    'LedgerMutationResult',
    'JobIdsResult',
    'MembershipResult',
    'FeedResult',
    'SummaryResult',
    'SwipeFailure',
    'DecisionOutcome',
    'PreferenceLedgerService',
    'FeedAssembler',
    'SwipeController',
    'PreferenceSummarizer',
]
