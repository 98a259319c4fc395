"""
Data models for the swipe core.

Plain dataclasses shared by the ledger, feed, controller and summarizer.
Every public core operation returns one of the result types below instead of
raising on store or model failures.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional


class Direction(str, Enum):
    """A swipe decision."""
    LIKE = "like"
    DISLIKE = "dislike"


class SwipeState(str, Enum):
    """States of a swipe session."""
    LOADING = "loading"
    READY = "ready"
    EXHAUSTED = "exhausted"


def decode_job_ids(raw: Any) -> List[str]:
    """Normalize a stored id collection into an ordered, duplicate-free list.

    Accepts a JSON array or the legacy map-of-id-to-id encoding, where the
    map's values are the ids. ``None`` reads as empty.
    """
    if raw is None:
        return []
    if isinstance(raw, dict):
        raw = raw.values()
    return list(dict.fromkeys(str(job_id) for job_id in raw if job_id is not None))


@dataclass
class PreferenceLedger:
    """A user's liked and disliked job ids.

    Both lists behave as insertion-ordered sets and never share an id.
    """
    user_id: str
    liked_job_ids: List[str] = field(default_factory=list)
    disliked_job_ids: List[str] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: Any) -> "PreferenceLedger":
        """Build from a ``JobSwipe`` row."""
        return cls(
            user_id=record.user_id,
            liked_job_ids=decode_job_ids(record.like_job_ids),
            disliked_job_ids=decode_job_ids(record.dislike_job_ids),
        )

    def like(self, job_id: str) -> None:
        self.disliked_job_ids = [j for j in self.disliked_job_ids if j != job_id]
        if job_id not in self.liked_job_ids:
            self.liked_job_ids.append(job_id)

    def dislike(self, job_id: str) -> None:
        self.liked_job_ids = [j for j in self.liked_job_ids if j != job_id]
        if job_id not in self.disliked_job_ids:
            self.disliked_job_ids.append(job_id)

    def unlike(self, job_id: str) -> None:
        self.liked_job_ids = [j for j in self.liked_job_ids if j != job_id]

    def undislike(self, job_id: str) -> None:
        self.disliked_job_ids = [j for j in self.disliked_job_ids if j != job_id]

    def is_liked(self, job_id: str) -> bool:
        return job_id in self.liked_job_ids

    def is_disliked(self, job_id: str) -> bool:
        return job_id in self.disliked_job_ids

    def swiped_job_ids(self) -> set:
        return set(self.liked_job_ids) | set(self.disliked_job_ids)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "liked_job_ids": list(self.liked_job_ids),
            "disliked_job_ids": list(self.disliked_job_ids),
        }


@dataclass(frozen=True)
class JobSnapshot:
    """Read-only copy of a posting, detached from the database session."""
    id: str
    title: str
    company: str
    location: Optional[str] = None
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    is_remote: bool = False
    job_type: Optional[str] = None
    required_skills: tuple = ()
    status: str = "OPEN"

    @classmethod
    def from_model(cls, job: Any) -> "JobSnapshot":
        def _num(value):
            if value is None:
                return None
            return float(value) if isinstance(value, (Decimal, int, float)) else None

        return cls(
            id=str(job.id),
            title=job.title,
            company=job.company,
            location=job.location_text,
            salary_min=_num(job.salary_min),
            salary_max=_num(job.salary_max),
            is_remote=bool(job.is_remote),
            job_type=job.job_type,
            required_skills=tuple(job.required_skills or ()),
            status=job.status,
        )


@dataclass
class FeedState:
    """An ordered pool of undecided postings and the index of the next one."""
    user_id: str
    pool: List[JobSnapshot] = field(default_factory=list)
    cursor: int = 0

    @property
    def current(self) -> Optional[JobSnapshot]:
        if self.cursor < len(self.pool):
            return self.pool[self.cursor]
        return None

    @property
    def remaining(self) -> int:
        return max(len(self.pool) - self.cursor, 0)

    @property
    def is_exhausted(self) -> bool:
        return self.cursor >= len(self.pool)

    def job_ids(self) -> List[str]:
        return [job.id for job in self.pool]


# ---------------------------------------------------------------------------
# Tagged results
# ---------------------------------------------------------------------------

@dataclass
class LedgerLookup:
    ledger: Optional[PreferenceLedger] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class LedgerMutationResult:
    success: bool
    error: Optional[str] = None
    swipe_id: Optional[str] = None


@dataclass
class JobIdsResult:
    job_ids: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class MembershipResult:
    value: bool = False
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class FeedResult:
    feed: Optional[FeedState] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class SummaryResult:
    analysis: str = ""
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class SwipeFailure:
    """A ledger write that failed after the cursor had already moved on."""
    job_id: str
    direction: Direction
    error: str
    attempts: int = 1
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class DecisionOutcome:
    """What happened to one ``decide`` call.

    ``accepted`` is False when the call was a no-op (a decision was already in
    flight, or the session was not READY). ``success`` reports the ledger write.
    """
    accepted: bool
    state: SwipeState
    cursor: int
    job_id: Optional[str] = None
    direction: Optional[Direction] = None
    success: bool = False
    error: Optional[str] = None
