"""
Domain models for the archetype engine.

Plain dataclasses shared by the repositories, the aggregation and
classification pipeline, and the assignment service.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class InteractionStatus(str, Enum):
    OPEN = "open"
    RESOLVED = "resolved"
    ABANDONED = "abandoned"


@dataclass(slots=True, frozen=True)
class InteractionRecord:
    """One conflict episode between an initiator and a responder."""

    id: str
    initiator_id: str
    responder_id: str
    created_at: datetime
    resolved_at: datetime | None
    status: InteractionStatus
    responder_reply_present: bool
    initiator_satisfaction: bool | None = None
    responder_satisfaction: bool | None = None
    core_issue_identified_by_initiator: bool = False
    core_issue_identified_by_responder: bool = False


@dataclass(slots=True)
class UserConflictStats:
    """Per-user statistics vector, rebuilt from scratch on every run."""

    total: int = 0
    resolved: int = 0
    as_responder: int = 0
    resolved_as_responder: int = 0
    started_this_month: int = 0
    rehash_votes: int = 0
    fast_resolutions: int = 0
    ghosted: int = 0
    received_never_responded: int = 0
    mutual_satisfaction: int = 0
    core_issue_completions: int = 0
    abandoned: int = 0

    @property
    def unresolved(self) -> int:
        return self.total - self.resolved

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(slots=True, frozen=True)
class Archetype:
    """Static catalog entry describing one behavioral archetype."""

    key: str
    title: str
    emoji: str
    description: str


@dataclass(slots=True)
class AssignmentResult:
    """Outcome of classifying a single user."""

    user_id: str
    archetype: Archetype
    previous_key: str | None
    updated: bool
    achievement_unlocked: bool = False
    assigned_at: datetime | None = None
    stats: UserConflictStats = field(default_factory=UserConflictStats)

    @property
    def archetype_key(self) -> str:
        return self.archetype.key

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "archetype_key": self.archetype.key,
            "archetype_title": self.archetype.title,
            "archetype_emoji": self.archetype.emoji,
            "previous_key": self.previous_key,
            "updated": self.updated,
            "achievement_unlocked": self.achievement_unlocked,
            "assigned_at": self.assigned_at.isoformat() if self.assigned_at else None,
            "stats": self.stats.to_dict(),
        }
