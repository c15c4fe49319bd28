"""
Archetype classifier.

Pure mapping from a statistics vector to one catalog archetype: walk the
rule table and return the first match.
"""

from collections.abc import Iterable

from .rules import ARCHETYPE_RULES, ArchetypeRule
from archetype_engine.features.archetypes.domain import ARCHETYPES, Archetype, UserConflictStats
from archetype_engine.features.archetypes.errors import ClassificationInvariantViolation


def first_matching_rule(
    stats: UserConflictStats, rules: Iterable[ArchetypeRule] = ARCHETYPE_RULES
) -> ArchetypeRule:
    for rule in rules:
        if rule.predicate(stats):
            return rule
    raise ClassificationInvariantViolation(stats)


def classify(stats: UserConflictStats, rules: Iterable[ArchetypeRule] = ARCHETYPE_RULES) -> str:
    """Return the archetype key for ``stats``."""
    return first_matching_rule(stats, rules).key


def determine_archetype(
    stats: UserConflictStats, rules: Iterable[ArchetypeRule] = ARCHETYPE_RULES
) -> Archetype:
    """Return the catalog entry for ``stats``."""
    return ARCHETYPES[classify(stats, rules)]
