"""
Ordered archetype rules.

Rules are not mutually exclusive; the first matching rule wins, so the
order of ARCHETYPE_RULES is the tie-break. Reordering or adding an
archetype is an edit to this table only.
"""

from collections.abc import Callable
from dataclasses import dataclass

from archetype_engine.features.archetypes.domain import ARCHETYPES, ArchetypeKey, UserConflictStats

StatsPredicate = Callable[[UserConflictStats], bool]


@dataclass(slots=True, frozen=True)
class ArchetypeRule:
    key: str
    predicate: StatsPredicate
    reason: str


ARCHETYPE_RULES: tuple[ArchetypeRule, ...] = (
    ArchetypeRule(
        ArchetypeKey.PEACEFUL_OBSERVER.value,
        lambda s: s.total == 0,
        "no conflicts at all",
    ),
    ArchetypeRule(
        ArchetypeKey.CHAOS_GOBLIN.value,
        lambda s: s.unresolved >= 5 or s.rehash_votes >= 5,
        "5+ unresolved conflicts or 5+ rehash votes",
    ),
    ArchetypeRule(
        ArchetypeKey.DRAMA_GENERATOR.value,
        lambda s: s.started_this_month >= 3,
        "started 3+ conflicts in the last month",
    ),
    ArchetypeRule(
        ArchetypeKey.SWIFT_FIXER.value,
        lambda s: s.fast_resolutions >= 2,
        "2+ conflicts resolved in under an hour",
    ),
    ArchetypeRule(
        ArchetypeKey.FIXER.value,
        lambda s: s.resolved_as_responder >= 3,
        "resolved 3+ conflicts as the responder",
    ),
    ArchetypeRule(
        ArchetypeKey.HARMONY_SEEKER.value,
        lambda s: s.mutual_satisfaction >= 3,
        "3+ mutually satisfied outcomes",
    ),
    ArchetypeRule(
        ArchetypeKey.ACCOUNTABILITY_CHAMP.value,
        lambda s: s.core_issue_completions >= 3 and s.total > 0,
        "completed the core issue step 3+ times",
    ),
    ArchetypeRule(
        ArchetypeKey.REHASHER.value,
        lambda s: s.rehash_votes >= 2,
        "voted not satisfied in 2+ conflicts",
    ),
    ArchetypeRule(
        ArchetypeKey.PASSIVE_GHOST.value,
        lambda s: s.ghosted >= 1,
        "started a conflict the other side never answered",
    ),
    ArchetypeRule(
        ArchetypeKey.UNREAD_RECEIPT.value,
        lambda s: s.received_never_responded >= 2,
        "received 2+ conflicts without replying",
    ),
    ArchetypeRule(
        ArchetypeKey.EMOTIONAL_DIPLOMAT.value,
        lambda s: s.total >= 1,
        "has conflict history matching no other rule",
    ),
    # Unreachable after the first rule, kept so the table is total
    ArchetypeRule(
        ArchetypeKey.PEACEFUL_OBSERVER.value,
        lambda s: True,
        "fallback",
    ),
)


def validate_rules(rules: tuple[ArchetypeRule, ...]) -> None:
    """Every rule must point at a catalog entry."""
    unknown = [rule.key for rule in rules if rule.key not in ARCHETYPES]
    if unknown:
        raise ValueError(f"Archetype rules reference unknown keys: {', '.join(unknown)}")


validate_rules(ARCHETYPE_RULES)
