"""
Conflict archetype feature package.

Keeps every layer of archetype assignment co-located: domain models and
catalog, the aggregation/classification pipeline, repositories, the
assignment service, the batch job and the API router.
"""

# Re-export the primary building blocks for easy access.
from .api.router import router as archetype_router  # noqa: F401
from .domain import ARCHETYPES, Archetype, UserConflictStats, get_archetype_info  # noqa: F401
from .jobs import assign_archetypes_for_all_users, start_archetype_assignment_scheduler  # noqa: F401
from .services import assign_archetype  # noqa: F401
