"""
Exceptions raised by the archetype engine.

DataAccessError and ArchetypeAssignmentError (including ProfileNotFoundError)
are scoped to one user; the batch job records them and moves on.
ClassificationInvariantViolation means the rule table itself is broken.
"""

from typing import Any

from archetype_engine.db.helpers import DatabaseError


class DataAccessError(DatabaseError):
    """Interaction or profile store unreachable, or returned malformed data."""

    def __init__(
        self,
        message: str,
        operation: str = "unknown",
        user_id: str | None = None,
        recoverable: bool = True,
    ):
        super().__init__(message, operation=operation, recoverable=recoverable)
        self.user_id = user_id


class ArchetypeAssignmentError(Exception):
    """The profile store refused or lost a classification write."""

    def __init__(self, message: str, user_id: str, archetype_key: str | None = None):
        super().__init__(message)
        self.user_id = user_id
        self.archetype_key = archetype_key


class ClassificationInvariantViolation(Exception):
    """No classification rule matched a statistics vector."""

    def __init__(self, stats: Any):
        super().__init__(f"No archetype rule matched stats: {stats!r}")
        self.stats = stats


class ProfileNotFoundError(ArchetypeAssignmentError):
    """No profile row exists for the user being classified."""

    def __init__(self, user_id: str):
        super().__init__(f"Profile not found: {user_id}", user_id=user_id)
