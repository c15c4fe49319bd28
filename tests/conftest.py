from datetime import UTC, datetime, timedelta
from itertools import count

import pytest

from archetype_engine.features.archetypes.domain import InteractionRecord, InteractionStatus
from archetype_engine.features.archetypes.errors import DataAccessError

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)

_ids = count(1)


def make_record(
    initiator_id: str = "user-1",
    responder_id: str = "user-2",
    *,
    status: InteractionStatus = InteractionStatus.OPEN,
    created_at: datetime | None = None,
    resolved_after: timedelta | None = None,
    responder_reply_present: bool = True,
    initiator_satisfaction: bool | None = None,
    responder_satisfaction: bool | None = None,
    core_issue_identified_by_initiator: bool = False,
    core_issue_identified_by_responder: bool = False,
) -> InteractionRecord:
    created = created_at or NOW - timedelta(days=90)
    if status == InteractionStatus.RESOLVED and resolved_after is None:
        resolved_after = timedelta(days=1)
    resolved_at = created + resolved_after if status == InteractionStatus.RESOLVED else None
    return InteractionRecord(
        id=f"conflict-{next(_ids)}",
        initiator_id=initiator_id,
        responder_id=responder_id,
        created_at=created,
        resolved_at=resolved_at,
        status=status,
        responder_reply_present=responder_reply_present,
        initiator_satisfaction=initiator_satisfaction,
        responder_satisfaction=responder_satisfaction,
        core_issue_identified_by_initiator=core_issue_identified_by_initiator,
        core_issue_identified_by_responder=core_issue_identified_by_responder,
    )


class FakeInteractionStore:
    def __init__(self, records=None, failing_users=()):
        self.records: list[InteractionRecord] = list(records or [])
        self.failing_users = set(failing_users)
        self.calls: list[str] = []

    async def list_interactions(self, user_id: str) -> list[InteractionRecord]:
        self.calls.append(user_id)
        if user_id in self.failing_users:
            raise DataAccessError("conflicts table unreachable", operation="list_interactions", user_id=user_id)
        return [r for r in self.records if user_id in (r.initiator_id, r.responder_id)]


class FakeProfileStore:
    def __init__(self, archetypes: dict[str, str | None] | None = None):
        self.archetypes: dict[str, str | None] = dict(archetypes or {})
        self.emojis: dict[str, str] = {}
        self.writes: list[tuple[str, str, str]] = []
        self.reject_writes = False

    async def list_all_user_ids(self) -> list[str]:
        return list(self.archetypes)

    async def get_current_archetype(self, user_id: str) -> str | None:
        return self.archetypes.get(user_id)

    async def profile_exists(self, user_id: str) -> bool:
        return user_id in self.archetypes

    async def set_archetype(self, user_id, key, emoji, assigned_at, expected_key=None) -> bool:
        if self.reject_writes or user_id not in self.archetypes:
            return False
        if self.archetypes[user_id] != expected_key:
            return False
        self.archetypes[user_id] = key
        self.emojis[user_id] = emoji
        self.writes.append((user_id, key, emoji))
        return True


class FakeAchievementStore:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.unlocked: set[tuple[str, str]] = set()

    async def unlock_archetype_achievement(self, user_id: str, key: str, emoji: str) -> bool:
        if self.fail:
            raise DataAccessError("rpc failed", operation="unlock_archetype_achievement", user_id=user_id)
        is_new = (user_id, key) not in self.unlocked
        self.unlocked.add((user_id, key))
        return is_new


@pytest.fixture
def interaction_store():
    return FakeInteractionStore()


@pytest.fixture
def profile_store():
    return FakeProfileStore()


@pytest.fixture
def achievement_store():
    return FakeAchievementStore()


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def record_factory():
    return make_record
