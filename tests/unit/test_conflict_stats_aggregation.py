from datetime import UTC, datetime, timedelta

import pytest

from archetype_engine.features.archetypes.domain import InteractionStatus, UserConflictStats
from archetype_engine.features.archetypes.errors import DataAccessError
from archetype_engine.features.archetypes.pipeline.aggregation import (
    StatsAggregationService,
    month_window_start,
)


def test_no_records_yields_all_zero_vector(now):
    service = StatsAggregationService()

    stats = service.build_stats("user-1", [], now)

    assert stats == UserConflictStats()
    assert all(value == 0 for value in stats.to_dict().values())


def test_responder_without_reply_is_not_ghosted(record_factory, now):
    service = StatsAggregationService()
    record = record_factory("user-2", "user-1", responder_reply_present=False)

    stats = service.build_stats("user-1", [record], now)

    assert stats.received_never_responded == 1
    assert stats.ghosted == 0
    assert stats.as_responder == 1


def test_initiator_without_reply_is_ghosted(record_factory, now):
    service = StatsAggregationService()
    record = record_factory("user-1", "user-2", responder_reply_present=False)

    stats = service.build_stats("user-1", [record], now)

    assert stats.ghosted == 1
    assert stats.received_never_responded == 0
    assert stats.as_responder == 0


def test_resolution_and_role_counters(record_factory, now):
    service = StatsAggregationService()
    records = [
        record_factory("user-2", "user-1", status=InteractionStatus.RESOLVED),
        record_factory("user-3", "user-1", status=InteractionStatus.RESOLVED),
        record_factory("user-3", "user-1", status=InteractionStatus.OPEN),
        record_factory("user-1", "user-2", status=InteractionStatus.RESOLVED),
        record_factory("user-1", "user-3", status=InteractionStatus.ABANDONED),
    ]

    stats = service.build_stats("user-1", records, now)

    assert stats.total == 5
    assert stats.resolved == 3
    assert stats.as_responder == 3
    assert stats.resolved_as_responder == 2
    assert stats.abandoned == 1
    assert stats.unresolved == 2


def test_rehash_votes_only_count_own_side(record_factory, now):
    service = StatsAggregationService()
    records = [
        record_factory("user-1", "user-2", initiator_satisfaction=False),
        record_factory("user-2", "user-1", responder_satisfaction=False),
        # the other participant's dissatisfaction is not the user's vote
        record_factory("user-1", "user-2", responder_satisfaction=False),
        # unset is not a dissatisfied vote
        record_factory("user-1", "user-2", initiator_satisfaction=None),
    ]

    stats = service.build_stats("user-1", records, now)

    assert stats.rehash_votes == 2


def test_mutual_satisfaction_requires_both_true(record_factory, now):
    service = StatsAggregationService()
    records = [
        record_factory(initiator_satisfaction=True, responder_satisfaction=True),
        record_factory(initiator_satisfaction=True, responder_satisfaction=None),
        record_factory(initiator_satisfaction=True, responder_satisfaction=False),
    ]

    stats = service.build_stats("user-1", records, now)

    assert stats.mutual_satisfaction == 1


def test_core_issue_completions_are_role_sensitive(record_factory, now):
    service = StatsAggregationService()
    records = [
        record_factory("user-1", "user-2", core_issue_identified_by_initiator=True),
        record_factory("user-2", "user-1", core_issue_identified_by_responder=True),
        record_factory("user-1", "user-2", core_issue_identified_by_responder=True),
    ]

    stats = service.build_stats("user-1", records, now)

    assert stats.core_issue_completions == 2


def test_fast_resolutions_count_for_either_role(record_factory, now):
    service = StatsAggregationService()
    records = [
        record_factory("user-1", "user-2", status=InteractionStatus.RESOLVED, resolved_after=timedelta(minutes=20)),
        record_factory("user-2", "user-1", status=InteractionStatus.RESOLVED, resolved_after=timedelta(minutes=59)),
        record_factory("user-2", "user-1", status=InteractionStatus.RESOLVED, resolved_after=timedelta(hours=1)),
    ]

    stats = service.build_stats("user-1", records, now)

    assert stats.fast_resolutions == 2


def test_started_this_month_only_counts_initiated_records_in_window(record_factory, now):
    service = StatsAggregationService()
    records = [
        record_factory("user-1", "user-2", created_at=now - timedelta(days=2)),
        record_factory("user-1", "user-2", created_at=datetime(2024, 5, 15, tzinfo=UTC)),
        record_factory("user-1", "user-2", created_at=datetime(2024, 5, 14, 23, 59, tzinfo=UTC)),
        record_factory("user-2", "user-1", created_at=now - timedelta(days=1)),
    ]

    stats = service.build_stats("user-1", records, now)

    assert stats.started_this_month == 2


@pytest.mark.parametrize(
    ("now", "expected"),
    [
        (datetime(2024, 6, 15, 12, 30, tzinfo=UTC), datetime(2024, 5, 15, tzinfo=UTC)),
        (datetime(2024, 1, 10, 8, 0, tzinfo=UTC), datetime(2023, 12, 10, tzinfo=UTC)),
        (datetime(2023, 3, 31, 9, 0, tzinfo=UTC), datetime(2023, 3, 3, tzinfo=UTC)),
        (datetime(2024, 3, 30, 9, 0, tzinfo=UTC), datetime(2024, 3, 1, tzinfo=UTC)),
    ],
)
def test_month_window_start(now, expected):
    assert month_window_start(now) == expected


@pytest.mark.asyncio
async def test_aggregate_for_user_reads_from_store(interaction_store, record_factory, now):
    interaction_store.records = [
        record_factory("user-1", "user-2"),
        record_factory("user-3", "user-1"),
        record_factory("user-2", "user-3"),
    ]
    service = StatsAggregationService(interaction_store)

    stats = await service.aggregate_for_user("user-1", now=now)

    assert interaction_store.calls == ["user-1"]
    assert stats.total == 2


@pytest.mark.asyncio
async def test_aggregate_for_user_propagates_store_failure(interaction_store):
    interaction_store.failing_users = {"user-1"}
    service = StatsAggregationService(interaction_store)

    with pytest.raises(DataAccessError):
        await service.aggregate_for_user("user-1")


@pytest.mark.asyncio
async def test_aggregate_for_user_rejects_empty_id(interaction_store):
    service = StatsAggregationService(interaction_store)

    with pytest.raises(ValueError):
        await service.aggregate_for_user("")
