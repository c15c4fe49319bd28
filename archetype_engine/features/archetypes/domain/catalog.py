"""
Static archetype catalog.

Twenty fixed archetypes keyed by a stable slug. The mapping is read-only;
callers look entries up, they never mutate them.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from .models import Archetype


class ArchetypeKey(str, Enum):
    """Stable keys persisted on profiles.conflict_archetype."""

    FIXER = "the-fixer"
    REHASHER = "the-rehasher"
    DRAMA_GENERATOR = "the-drama-generator"
    SWIFT_FIXER = "the-swift-fixer"
    PASSIVE_GHOST = "the-passive-ghost"
    EMOTIONAL_DIPLOMAT = "the-emotional-diplomat"
    PETTY_PICASSO = "the-petty-picasso"
    CHAOS_GOBLIN = "the-chaos-goblin"
    COOLDOWN_KING = "the-cooldown-king"
    UNREAD_RECEIPT = "the-unread-receipt"
    FIRESTARTER = "the-firestarter"
    HARMONY_SEEKER = "the-harmony-seeker"
    ACCOUNTABILITY_CHAMP = "the-accountability-champ"
    POLITE_AVENGER = "the-polite-avenger"
    EMPATH = "the-empath"
    DISAPPEARING_DIPLOMAT = "the-disappearing-diplomat"
    SPREADSHEET_WARRIOR = "the-spreadsheet-warrior"
    SIDE_EYE_SENDER = "the-side-eye-sender"
    CHRONIC_CLARIFIER = "the-chronic-clarifier"
    PEACEFUL_OBSERVER = "the-peaceful-observer"


def _entry(key: ArchetypeKey, title: str, emoji: str, description: str) -> tuple[str, Archetype]:
    return key.value, Archetype(key=key.value, title=title, emoji=emoji, description=description)


ARCHETYPES: Mapping[str, Archetype] = MappingProxyType(
    dict(
        [
            _entry(
                ArchetypeKey.FIXER,
                "The Fixer",
                "🛠️❤️",
                "Resolves conflicts as the responder with care and dedication",
            ),
            _entry(
                ArchetypeKey.REHASHER,
                "The Rehasher",
                "♻️🤔",
                "Thoughtfully seeks better solutions when first attempts don't work",
            ),
            _entry(
                ArchetypeKey.DRAMA_GENERATOR,
                "The Drama Generator",
                "🎭🔥",
                "Frequently initiates conflicts - maybe needs some chill time",
            ),
            _entry(
                ArchetypeKey.SWIFT_FIXER,
                "The Swift Fixer",
                "⚡🤝",
                "Lightning-fast conflict resolution skills",
            ),
            _entry(
                ArchetypeKey.PASSIVE_GHOST,
                "The Passive Ghost",
                "👻📵",
                "Starts conflicts but vanishes when it's time to engage",
            ),
            _entry(
                ArchetypeKey.EMOTIONAL_DIPLOMAT,
                "The Emotional Diplomat",
                "🕊️💬",
                "Masters the art of balanced, thoughtful communication",
            ),
            _entry(
                ArchetypeKey.PETTY_PICASSO,
                "The Petty Picasso",
                "🎨🧃",
                "Creates dramatic masterpieces out of everyday conflicts",
            ),
            _entry(
                ArchetypeKey.CHAOS_GOBLIN,
                "The Chaos Goblin",
                "💣😈",
                "Leaves a trail of unresolved conflicts in their wake",
            ),
            _entry(
                ArchetypeKey.COOLDOWN_KING,
                "The Cooldown King/Queen",
                "🧊⏳",
                "Takes their sweet time to respond - patience is a virtue",
            ),
            _entry(
                ArchetypeKey.UNREAD_RECEIPT,
                "The Unread Receipt",
                "📪🙈",
                "Receives conflicts but never responds - the ultimate ghost",
            ),
            _entry(
                ArchetypeKey.FIRESTARTER,
                "The Firestarter",
                "🔥🧨",
                "Messages tend to escalate situations rather than resolve them",
            ),
            _entry(
                ArchetypeKey.HARMONY_SEEKER,
                "The Harmony Seeker",
                "🌈☮️",
                "Consistently achieves mutual satisfaction in conflict resolution",
            ),
            _entry(
                ArchetypeKey.ACCOUNTABILITY_CHAMP,
                "The Accountability Champ",
                "📓✅",
                "Always follows through with the core issues clarification step",
            ),
            _entry(
                ArchetypeKey.POLITE_AVENGER,
                "The Polite Avenger",
                "🧐🎯",
                "Formal language with emotionally sharp undertones",
            ),
            _entry(
                ArchetypeKey.EMPATH,
                "The Empath",
                "🌊🫶",
                "Frequently validates and acknowledges others' feelings",
            ),
            _entry(
                ArchetypeKey.DISAPPEARING_DIPLOMAT,
                "The Disappearing Diplomat",
                "🕵️‍♂️🌀",
                "Has a habit of abandoning conflicts mid-resolution",
            ),
            _entry(
                ArchetypeKey.SPREADSHEET_WARRIOR,
                "The Spreadsheet Warrior",
                "📊⚔️",
                "Conflicts often involve planning, schedules, and organizational tasks",
            ),
            _entry(
                ArchetypeKey.SIDE_EYE_SENDER,
                "The Side-Eye Sender",
                "👀😒",
                "Master of short, snarky one-line responses",
            ),
            _entry(
                ArchetypeKey.CHRONIC_CLARIFIER,
                "The Chronic Clarifier",
                "❓🔍",
                "Uses the core issues step multiple times - loves to dig deep",
            ),
            _entry(
                ArchetypeKey.PEACEFUL_OBSERVER,
                "The Peaceful Observer",
                "🧘‍♀️👀",
                "Never starts or responds to conflicts - the zen master",
            ),
        ]
    )
)


def get_archetype_info(key: str | None) -> Archetype | None:
    """Look up a catalog entry, None for unknown or missing keys."""
    if not key:
        return None
    return ARCHETYPES.get(key)


def list_archetypes() -> list[Archetype]:
    return list(ARCHETYPES.values())
