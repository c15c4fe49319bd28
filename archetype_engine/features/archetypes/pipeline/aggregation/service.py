"""
Conflict statistics aggregation.

Reduces every conflict a user took part in into a UserConflictStats vector
consumed by the archetype classifier. Counters are role sensitive: the same
record contributes differently depending on whether the user started it or
received it.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime, timedelta

from .repository import InteractionRepository
from archetype_engine.features.archetypes.domain import (
    InteractionRecord,
    InteractionStatus,
    UserConflictStats,
)
from archetype_engine.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

FAST_RESOLUTION_WINDOW = timedelta(hours=1)


def month_window_start(now: datetime) -> datetime:
    """
    Start of the trailing "this month" window.

    Midnight on the same day-of-month one calendar month before ``now``.
    Days that do not exist in the previous month roll forward into the
    following one (31 March -> 3 March in a non-leap year).
    """
    year, month = (now.year - 1, 12) if now.month == 1 else (now.year, now.month - 1)
    first_of_month = datetime(year, month, 1, tzinfo=now.tzinfo)
    return first_of_month + timedelta(days=now.day - 1)


class StatsAggregationService:
    def __init__(self, interaction_store=InteractionRepository):
        self.interaction_store = interaction_store

    async def aggregate_for_user(self, user_id: str, now: datetime | None = None) -> UserConflictStats:
        """Fetch the user's conflicts and reduce them. Store errors propagate untouched."""
        if not user_id:
            raise ValueError("user_id must be a non-empty identifier")

        records = await self.interaction_store.list_interactions(user_id)
        stats = self.build_stats(user_id, records, now or datetime.now(UTC))

        logger.debug("Conflict stats computed", user_id=user_id, **stats.to_dict())
        return stats

    def build_stats(
        self, user_id: str, records: Iterable[InteractionRecord], now: datetime
    ) -> UserConflictStats:
        stats = UserConflictStats()
        window_start = month_window_start(now)

        for record in records:
            is_initiator = record.initiator_id == user_id
            is_responder = record.responder_id == user_id
            is_resolved = record.status == InteractionStatus.RESOLVED

            stats.total += 1

            if is_resolved:
                stats.resolved += 1

            if is_initiator and record.created_at >= window_start:
                stats.started_this_month += 1

            if is_responder:
                stats.as_responder += 1
                if is_resolved:
                    stats.resolved_as_responder += 1

            if (is_initiator and record.initiator_satisfaction is False) or (
                is_responder and record.responder_satisfaction is False
            ):
                stats.rehash_votes += 1

            # Counted for either role
            if (
                record.resolved_at is not None
                and record.resolved_at - record.created_at < FAST_RESOLUTION_WINDOW
            ):
                stats.fast_resolutions += 1

            if is_initiator and not record.responder_reply_present:
                stats.ghosted += 1

            if is_responder and not record.responder_reply_present:
                stats.received_never_responded += 1

            if record.initiator_satisfaction is True and record.responder_satisfaction is True:
                stats.mutual_satisfaction += 1

            if (is_initiator and record.core_issue_identified_by_initiator) or (
                is_responder and record.core_issue_identified_by_responder
            ):
                stats.core_issue_completions += 1

            if record.status == InteractionStatus.ABANDONED:
                stats.abandoned += 1

        return stats


stats_aggregation_service = StatsAggregationService()
