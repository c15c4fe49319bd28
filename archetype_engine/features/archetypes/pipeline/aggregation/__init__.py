"""
Aggregation package for the archetype engine.

Reads a user's conflict history and reduces it to a statistics vector.
"""

from .repository import InteractionRepository
from .service import StatsAggregationService, month_window_start, stats_aggregation_service

__all__ = [
    "InteractionRepository",
    "StatsAggregationService",
    "month_window_start",
    "stats_aggregation_service",
]
