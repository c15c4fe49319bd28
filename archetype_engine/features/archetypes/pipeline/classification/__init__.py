"""
Classification package for the archetype engine.
"""

from .rules import ARCHETYPE_RULES, ArchetypeRule
from .service import classify, determine_archetype, first_matching_rule

__all__ = [
    "ARCHETYPE_RULES",
    "ArchetypeRule",
    "classify",
    "determine_archetype",
    "first_matching_rule",
]
