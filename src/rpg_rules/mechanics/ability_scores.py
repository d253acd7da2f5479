"""Ability score math: pure functions, no I/O."""
from __future__ import annotations

import math
from typing import Any, Mapping

from rpg_rules.mechanics.skills import skill_ability

ABILITY_NAMES = ["strength", "dexterity", "constitution", "intelligence", "wisdom", "charisma"]

ABILITY_ABBREVIATIONS: dict[str, str] = {
    "str": "strength",
    "dex": "dexterity",
    "con": "constitution",
    "int": "intelligence",
    "wis": "wisdom",
    "cha": "charisma",
}

DEFAULT_SCORE = 10


def modifier(score: int) -> int:
    """Calculate ability modifier from score."""
    return (score - 10) // 2


def canonical_ability(name: str) -> str | None:
    """Map 'Strength', 'STR' or 'str' to 'strength'. None if not an ability."""
    key = name.strip().lower()
    if key in ABILITY_NAMES:
        return key
    return ABILITY_ABBREVIATIONS.get(key)


def governing_ability(key: str) -> str | None:
    """Resolve an ability or skill name to the ability that governs it."""
    return canonical_ability(key) or skill_ability(key)


def ability_score(stats: Mapping[str, Any] | Any, ability: str) -> int:
    """Read a score from a mapping or an AbilityScores-like object, defaulting to 10."""
    if isinstance(stats, Mapping):
        value = stats.get(ability)
    else:
        value = getattr(stats, ability, None)
    return DEFAULT_SCORE if value is None else int(value)


def resolve_ability(stats: Mapping[str, Any] | Any, key: str) -> int:
    """Modifier for the ability governing ``key`` (ability, abbreviation or skill).

    Unrecognized keys yield 0.
    """
    ability = governing_ability(key)
    if ability is None:
        return 0
    return modifier(ability_score(stats, ability))


def proficiency_bonus_for_level(level: int) -> int:
    """Proficiency bonus by character level: +2 at 1-4, +3 at 5-8, ... +6 at 17-20."""
    clamped = min(max(level, 1), 20)
    return math.ceil(1 + clamped / 4)
