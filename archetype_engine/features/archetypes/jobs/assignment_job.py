"""
Archetype assignment batch job.

Walks every profile in sequence, classifies each user through
ArchetypeAssignmentService and accumulates a run summary. A failure for one
user is recorded against that user and never stops the run.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime

import structlog

from archetype_engine.config import settings
from archetype_engine.db.pool import db_pool
from archetype_engine.features.archetypes.repository import ProfileRepository
from archetype_engine.features.archetypes.services import (
    ArchetypeAssignmentService,
    archetype_assignment_service,
)
from archetype_engine.infrastructure.observability.logging import get_logger, log_job_summary

logger = get_logger(__name__)

JOB_NAME = "archetype_assignment"
SCHEDULER_ERROR_BACKOFF_SECONDS = 60


@dataclass(slots=True)
class UserFailure:
    user_id: str
    error: str
    error_type: str

    def to_dict(self) -> dict:
        return {"user_id": self.user_id, "error": self.error, "error_type": self.error_type}


@dataclass(slots=True)
class ArchetypeRunSummary:
    """Tally for one batch run."""

    total_users: int = 0
    updated: int = 0
    unchanged: int = 0
    errored: int = 0
    errors: list[UserFailure] = field(default_factory=list)
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    finished_at: datetime | None = None
    message: str = "Archetype assignment completed"
    skipped: bool = False

    def record_updated(self) -> None:
        self.updated += 1

    def record_unchanged(self) -> None:
        self.unchanged += 1

    def record_error(self, user_id: str, error: BaseException) -> None:
        self.errored += 1
        self.errors.append(UserFailure(user_id=user_id, error=str(error), error_type=type(error).__name__))

        logger.warning(
            "Archetype assignment failed for user",
            user_id=user_id,
            error=str(error),
            error_type=type(error).__name__,
        )

    @property
    def processed(self) -> int:
        return self.updated + self.unchanged + self.errored

    @property
    def duration_seconds(self) -> float:
        end = self.finished_at or datetime.now(UTC)
        return (end - self.started_at).total_seconds()

    def finalize(self) -> None:
        self.finished_at = datetime.now(UTC)

    def to_dict(self) -> dict:
        return {
            "job_run": JOB_NAME,
            "message": self.message,
            "skipped": self.skipped,
            "total_users": self.total_users,
            "updated": self.updated,
            "unchanged": self.unchanged,
            "errored": self.errored,
            "errors": [failure.to_dict() for failure in self.errors],
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "duration_seconds": round(self.duration_seconds, 2),
        }


class ArchetypeAssignmentJob:
    """
    Batch driver for archetype assignment.

    Users are processed one at a time with a short pause between them to
    keep load on the shared database bounded. Cancellation is honoured
    between users; an in-flight profile write is never interrupted.
    """

    def __init__(
        self,
        service: ArchetypeAssignmentService | None = None,
        profile_store=None,
        inter_user_delay: float | None = None,
    ):
        self.service = service or archetype_assignment_service
        self.profile_store = profile_store or self.service.profile_store or ProfileRepository
        self.inter_user_delay = (
            settings.inter_user_delay_seconds() if inter_user_delay is None else inter_user_delay
        )
        self.is_running = False
        self.last_run_time: datetime | None = None
        self.last_summary: ArchetypeRunSummary | None = None

    async def run_once(self) -> ArchetypeRunSummary:
        """
        Classify every known user.

        Raises:
            DataAccessError: only if the user list itself cannot be read
        """
        if self.is_running:
            logger.warning("Archetype assignment already running, skipping this iteration")
            return ArchetypeRunSummary(
                skipped=True, message="Archetype assignment already running"
            )

        self.is_running = True
        summary = ArchetypeRunSummary()
        try:
            logger.info("Starting archetype assignment for all users")

            user_ids = await self.profile_store.list_all_user_ids()
            summary.total_users = len(user_ids)

            if not user_ids:
                summary.message = "No users found for archetype assignment"
                logger.info(summary.message)
            else:
                logger.info("Found users for archetype assignment", user_count=len(user_ids))
                await self._process_users(user_ids, summary)

            summary.finalize()
            self.last_run_time = summary.finished_at
            self.last_summary = summary
            log_job_summary(JOB_NAME, summary.to_dict())
            return summary

        except asyncio.CancelledError:
            summary.finalize()
            logger.warning(
                "Archetype assignment cancelled",
                processed=summary.processed,
                total_users=summary.total_users,
            )
            raise

        finally:
            self.is_running = False

    async def _process_users(self, user_ids: list[str], summary: ArchetypeRunSummary) -> None:
        last_index = len(user_ids) - 1
        for index, user_id in enumerate(user_ids):
            with structlog.contextvars.bound_contextvars(job_run=JOB_NAME, user_index=index):
                try:
                    updated = await self.service.assign_archetype(user_id)
                except Exception as e:
                    summary.record_error(user_id, e)
                else:
                    if updated:
                        summary.record_updated()
                    else:
                        summary.record_unchanged()

            if index < last_index and self.inter_user_delay > 0:
                await asyncio.sleep(self.inter_user_delay)

    def get_job_status(self) -> dict:
        return {
            "job_name": JOB_NAME,
            "is_running": self.is_running,
            "last_run_time": self.last_run_time.isoformat() if self.last_run_time else None,
            "inter_user_delay_seconds": self.inter_user_delay,
            "interval_hours": settings.ARCHETYPE_JOB_INTERVAL_HOURS,
            "last_run_summary": self.last_summary.to_dict() if self.last_summary else None,
        }


# Singleton instance for application use
archetype_assignment_job = ArchetypeAssignmentJob()


async def assign_archetypes_for_all_users() -> ArchetypeRunSummary:
    """Batch entry point: classify every user and return the run summary."""
    return await archetype_assignment_job.run_once()


async def _ensure_db_pool() -> None:
    if not db_pool.is_ready:
        await db_pool.initialize()


async def run_archetype_assignment_once() -> None:
    """Worker entry point for a single pass."""
    await _ensure_db_pool()
    try:
        await assign_archetypes_for_all_users()
    finally:
        await db_pool.close()


async def start_archetype_assignment_scheduler() -> None:
    """Run the batch every ARCHETYPE_JOB_INTERVAL_HOURS until stopped."""
    interval = settings.job_interval_seconds()
    logger.info("Starting archetype assignment scheduler", interval_hours=settings.ARCHETYPE_JOB_INTERVAL_HOURS)

    await _ensure_db_pool()
    try:
        while True:
            try:
                await assign_archetypes_for_all_users()
            except Exception as e:
                logger.error(
                    "Error in archetype assignment scheduler",
                    error=str(e),
                    error_type=type(e).__name__,
                )
                await asyncio.sleep(SCHEDULER_ERROR_BACKOFF_SECONDS)
                continue

            await asyncio.sleep(interval)
    finally:
        await db_pool.close()


if __name__ == "__main__":
    asyncio.run(run_archetype_assignment_once())
