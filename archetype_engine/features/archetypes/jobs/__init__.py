"""
Background jobs for archetype assignment.
"""

from .assignment_job import (
    ArchetypeAssignmentJob,
    ArchetypeRunSummary,
    archetype_assignment_job,
    assign_archetypes_for_all_users,
    run_archetype_assignment_once,
    start_archetype_assignment_scheduler,
)

__all__ = [
    "ArchetypeAssignmentJob",
    "ArchetypeRunSummary",
    "archetype_assignment_job",
    "assign_archetypes_for_all_users",
    "run_archetype_assignment_once",
    "start_archetype_assignment_scheduler",
]
