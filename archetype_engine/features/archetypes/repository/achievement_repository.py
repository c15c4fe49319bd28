"""
Archetype achievement unlocks.

Wraps the unlock_archetype_achievement database function, which records
the first time a user earns an archetype and reports whether it was new.
"""

from archetype_engine.db.helpers import DatabaseError, fetch_val
from archetype_engine.features.archetypes.errors import DataAccessError


class AchievementRepository:
    @classmethod
    async def unlock_archetype_achievement(cls, user_id: str, key: str, emoji: str) -> bool:
        """Returns True when the achievement did not exist before."""
        query = "SELECT unlock_archetype_achievement(%s, %s, %s)"

        try:
            result = await fetch_val(query, (user_id, key, emoji))
        except DatabaseError as e:
            raise DataAccessError(
                f"Failed to unlock archetype achievement: {e}",
                operation="unlock_archetype_achievement",
                user_id=user_id,
                recoverable=e.recoverable,
            ) from e

        return result is True
