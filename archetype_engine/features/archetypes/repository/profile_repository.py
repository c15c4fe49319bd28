"""
Profile store for the archetype engine.

Reads and writes the classification columns on the profiles table:
conflict_archetype, archetype_emoji and archetype_assigned_at.
"""

from datetime import datetime

from archetype_engine.db.helpers import DatabaseError, execute_query, fetch_all, fetch_one
from archetype_engine.features.archetypes.errors import DataAccessError
from archetype_engine.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class ProfileRepository:
    """Raw SQL helpers for profile classification fields."""

    @classmethod
    async def list_all_user_ids(cls) -> list[str]:
        query = "SELECT id FROM profiles ORDER BY id"

        try:
            rows = await fetch_all(query)
        except DatabaseError as e:
            raise DataAccessError(
                f"Failed to list profiles: {e}", operation="list_all_user_ids", recoverable=e.recoverable
            ) from e

        return [str(row["id"]) for row in rows]

    @classmethod
    async def get_current_archetype(cls, user_id: str) -> str | None:
        """Stored archetype key, None when unset or the profile row is missing."""
        query = "SELECT conflict_archetype FROM profiles WHERE id = %s"

        try:
            row = await fetch_one(query, (user_id,))
        except DatabaseError as e:
            raise DataAccessError(
                f"Failed to read profile: {e}",
                operation="get_current_archetype",
                user_id=user_id,
                recoverable=e.recoverable,
            ) from e

        if not row:
            return None
        return row.get("conflict_archetype")

    @classmethod
    async def profile_exists(cls, user_id: str) -> bool:
        query = "SELECT 1 FROM profiles WHERE id = %s"

        try:
            row = await fetch_one(query, (user_id,))
        except DatabaseError as e:
            raise DataAccessError(
                f"Failed to look up profile: {e}",
                operation="profile_exists",
                user_id=user_id,
                recoverable=e.recoverable,
            ) from e

        return row is not None

    @classmethod
    async def set_archetype(
        cls,
        user_id: str,
        key: str,
        emoji: str,
        assigned_at: datetime,
        expected_key: str | None = None,
    ) -> bool:
        """
        Conditionally write a new classification.

        The row only changes while conflict_archetype still equals
        ``expected_key``, so two writers cannot both apply a change computed
        from the same stale read.

        Returns:
            True if a row was updated
        """
        query = """
            UPDATE profiles
            SET conflict_archetype = %s,
                archetype_emoji = %s,
                archetype_assigned_at = %s
            WHERE id = %s
              AND conflict_archetype IS NOT DISTINCT FROM %s
        """

        try:
            updated = await execute_query(query, (key, emoji, assigned_at, user_id, expected_key))
        except DatabaseError as e:
            raise DataAccessError(
                f"Failed to update profile archetype: {e}",
                operation="set_archetype",
                user_id=user_id,
                recoverable=e.recoverable,
            ) from e

        if updated:
            logger.debug("Profile archetype row updated", user_id=user_id, archetype=key)
        return updated > 0
