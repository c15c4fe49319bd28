"""
Single-user archetype assignment.

aggregate -> classify -> read stored key -> write only if it changed.
Errors are raised to the caller unwrapped; the batch job decides how to
account for them.
"""

import asyncio
from datetime import UTC, datetime
from functools import partial

from archetype_engine.config import settings
from archetype_engine.features.archetypes.domain import Archetype, AssignmentResult
from archetype_engine.features.archetypes.errors import ArchetypeAssignmentError, ProfileNotFoundError
from archetype_engine.features.archetypes.pipeline.aggregation import StatsAggregationService
from archetype_engine.features.archetypes.pipeline.aggregation.repository import InteractionRepository
from archetype_engine.features.archetypes.pipeline.classification import determine_archetype
from archetype_engine.features.archetypes.repository import AchievementRepository, ProfileRepository
from archetype_engine.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class ArchetypeAssignmentService:
    """Classifies one user and persists the result when it changed."""

    def __init__(
        self,
        interaction_store=InteractionRepository,
        profile_store=ProfileRepository,
        achievement_store=AchievementRepository,
        unlock_achievements: bool | None = None,
    ):
        self.aggregator = StatsAggregationService(interaction_store)
        self.profile_store = profile_store
        self.achievement_store = achievement_store
        self.unlock_achievements = (
            settings.ARCHETYPE_UNLOCK_ACHIEVEMENTS if unlock_achievements is None else unlock_achievements
        )
        # Writes still running after their caller was cancelled
        self._detached_writes: set[asyncio.Task] = set()

    async def assign_archetype(self, user_id: str) -> bool:
        """Returns True when a new archetype was written."""
        result = await self.assign_archetype_detailed(user_id)
        return result.updated

    async def assign_archetype_detailed(self, user_id: str) -> AssignmentResult:
        """
        Run the full classification pass for one user.

        Raises:
            ValueError: empty user id
            DataAccessError: interaction or profile store failure
            ProfileNotFoundError: no profile row exists for the user
            ArchetypeAssignmentError: the stored key changed to a different value mid-write
            ClassificationInvariantViolation: no rule matched
        """
        stats = await self.aggregator.aggregate_for_user(user_id)
        archetype = determine_archetype(stats)
        logger.debug(
            "Archetype determined", user_id=user_id, archetype=archetype.key, title=archetype.title
        )

        current_key = await self.profile_store.get_current_archetype(user_id)

        if current_key == archetype.key:
            logger.info("Archetype unchanged", user_id=user_id, archetype=archetype.key)
            return AssignmentResult(
                user_id=user_id,
                archetype=archetype,
                previous_key=current_key,
                updated=False,
                stats=stats,
            )

        # Once the write starts it runs to completion even if the caller is cancelled
        write = asyncio.ensure_future(self._apply_change(user_id, archetype, current_key))
        try:
            updated, achievement_unlocked, assigned_at = await asyncio.shield(write)
        except asyncio.CancelledError:
            self._detached_writes.add(write)
            write.add_done_callback(partial(self._on_detached_write_done, user_id, archetype.key))
            raise

        if updated:
            logger.info(
                "Archetype updated",
                user_id=user_id,
                archetype=archetype.key,
                previous_archetype=current_key,
                emoji=archetype.emoji,
            )
        return AssignmentResult(
            user_id=user_id,
            archetype=archetype,
            previous_key=current_key,
            updated=updated,
            achievement_unlocked=achievement_unlocked,
            assigned_at=assigned_at,
            stats=stats,
        )

    async def _apply_change(
        self, user_id: str, archetype: Archetype, current_key: str | None
    ) -> tuple[bool, bool, datetime | None]:
        """Conditional write, then the achievement unlock once the write is known to have applied."""
        assigned_at = datetime.now(UTC)
        written = await self.profile_store.set_archetype(
            user_id, archetype.key, archetype.emoji, assigned_at, expected_key=current_key
        )
        if not written:
            await self._check_rejected_write(user_id, archetype)
            return False, False, None

        achievement_unlocked = await self._unlock_achievement(user_id, archetype)
        return True, achievement_unlocked, assigned_at

    async def _check_rejected_write(self, user_id: str, archetype: Archetype) -> None:
        """
        Work out why the conditional update touched no row.

        Returns normally when another writer already stored the same key.
        """
        if not await self.profile_store.profile_exists(user_id):
            raise ProfileNotFoundError(user_id)

        stored_key = await self.profile_store.get_current_archetype(user_id)
        if stored_key != archetype.key:
            raise ArchetypeAssignmentError(
                "Profile archetype changed concurrently",
                user_id=user_id,
                archetype_key=archetype.key,
            )

        logger.info("Archetype already current after concurrent write", user_id=user_id, archetype=archetype.key)

    def _on_detached_write_done(self, user_id: str, archetype_key: str, task: asyncio.Task) -> None:
        self._detached_writes.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(
                "Archetype write failed after caller was cancelled",
                user_id=user_id,
                archetype=archetype_key,
                error=str(error),
                error_type=type(error).__name__,
            )

    async def _unlock_achievement(self, user_id: str, archetype: Archetype) -> bool:
        """Best effort; a failed unlock never blocks the assignment."""
        if not self.unlock_achievements:
            return False

        try:
            is_new = await self.achievement_store.unlock_archetype_achievement(
                user_id, archetype.key, archetype.emoji
            )
        except Exception as e:
            logger.warning(
                "Archetype achievement unlock failed",
                user_id=user_id,
                archetype=archetype.key,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        if is_new:
            logger.info("Archetype achievement unlocked", user_id=user_id, archetype=archetype.key)
        return bool(is_new)


archetype_assignment_service = ArchetypeAssignmentService()


async def assign_archetype(user_id: str) -> bool:
    """Classify a single user on demand."""
    return await archetype_assignment_service.assign_archetype(user_id)
