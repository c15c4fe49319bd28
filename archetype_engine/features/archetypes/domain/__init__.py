"""
Domain subpackage for the archetype engine.
"""

from .catalog import ARCHETYPES, ArchetypeKey, get_archetype_info, list_archetypes
from .models import (
    Archetype,
    AssignmentResult,
    InteractionRecord,
    InteractionStatus,
    UserConflictStats,
)

__all__ = [
    "ARCHETYPES",
    "Archetype",
    "ArchetypeKey",
    "AssignmentResult",
    "InteractionRecord",
    "InteractionStatus",
    "UserConflictStats",
    "get_archetype_info",
    "list_archetypes",
]
