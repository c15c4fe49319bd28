"""
Service layer for archetype assignment.
"""

from .assignment_service import (
    ArchetypeAssignmentService,
    archetype_assignment_service,
    assign_archetype,
)

__all__ = ["ArchetypeAssignmentService", "archetype_assignment_service", "assign_archetype"]
