"""
Interaction store backed by the conflicts table.

Maps raw conflict rows onto InteractionRecord. Column names follow the
conflicts schema: user1 is the initiator, user2 the responder.
"""

from datetime import UTC, datetime
from typing import Any

from archetype_engine.db.helpers import DatabaseError, fetch_all
from archetype_engine.features.archetypes.domain import InteractionRecord, InteractionStatus
from archetype_engine.features.archetypes.errors import DataAccessError
from archetype_engine.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


def _as_utc(value: Any, column: str) -> datetime:
    if not isinstance(value, datetime):
        raise ValueError(f"{column} is not a timestamp: {value!r}")
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _optional_bool(value: Any, column: str) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    raise ValueError(f"{column} is not a boolean: {value!r}")


class InteractionRepository:
    """Raw SQL helpers for reading a user's conflict history."""

    SELECT_COLUMNS = """
        id, user1_id, user2_id, created_at, resolved_at, status,
        user2_raw_message, user1_satisfaction, user2_satisfaction,
        user1_core_issue, user2_core_issue
    """

    @classmethod
    def _row_to_record(cls, row: dict[str, Any]) -> InteractionRecord:
        """Convert a conflicts row, raising ValueError/KeyError on malformed data."""
        status = InteractionStatus(row["status"])
        created_at = _as_utc(row["created_at"], "created_at")
        resolved_at = (
            _as_utc(row["resolved_at"], "resolved_at") if row.get("resolved_at") is not None else None
        )
        reply = row.get("user2_raw_message")

        return InteractionRecord(
            id=str(row["id"]),
            initiator_id=str(row["user1_id"]),
            responder_id=str(row["user2_id"]) if row.get("user2_id") is not None else "",
            created_at=created_at,
            resolved_at=resolved_at,
            status=status,
            responder_reply_present=bool(reply),
            initiator_satisfaction=_optional_bool(row.get("user1_satisfaction"), "user1_satisfaction"),
            responder_satisfaction=_optional_bool(row.get("user2_satisfaction"), "user2_satisfaction"),
            core_issue_identified_by_initiator=bool(row.get("user1_core_issue")),
            core_issue_identified_by_responder=bool(row.get("user2_core_issue")),
        )

    @classmethod
    async def list_interactions(cls, user_id: str) -> list[InteractionRecord]:
        """
        Fetch every conflict the user took part in, in either role.

        Raises:
            DataAccessError: store unreachable or a row could not be mapped.
                Nothing is returned for the user in that case.
        """
        query = f"""
            SELECT {cls.SELECT_COLUMNS}
            FROM conflicts
            WHERE user1_id = %s OR user2_id = %s
            ORDER BY created_at DESC
        """

        try:
            rows = await fetch_all(query, (user_id, user_id))
        except DatabaseError as e:
            raise DataAccessError(
                f"Failed to load conflicts: {e}",
                operation="list_interactions",
                user_id=user_id,
                recoverable=e.recoverable,
            ) from e

        records: list[InteractionRecord] = []
        for row in rows:
            try:
                records.append(cls._row_to_record(row))
            except (KeyError, TypeError, ValueError) as e:
                logger.error(
                    "Malformed conflict row",
                    user_id=user_id,
                    conflict_id=row.get("id") if isinstance(row, dict) else None,
                    error=str(e),
                )
                raise DataAccessError(
                    f"Malformed conflict row: {e}",
                    operation="list_interactions",
                    user_id=user_id,
                    recoverable=False,
                ) from e

        return records
