"""Skill system: pure math, no I/O."""
from __future__ import annotations

SKILL_ABILITY_MAP: dict[str, str] = {
    "acrobatics": "dexterity",
    "animal handling": "wisdom",
    "arcana": "intelligence",
    "athletics": "strength",
    "deception": "charisma",
    "history": "intelligence",
    "insight": "wisdom",
    "intimidation": "charisma",
    "investigation": "intelligence",
    "medicine": "wisdom",
    "nature": "intelligence",
    "perception": "wisdom",
    "performance": "charisma",
    "persuasion": "charisma",
    "religion": "intelligence",
    "sleight of hand": "dexterity",
    "stealth": "dexterity",
    "survival": "wisdom",
}


def normalize_skill(name: str) -> str:
    """'Sleight_of_Hand' -> 'sleight of hand'."""
    return " ".join(name.lower().replace("_", " ").split())


def is_skill(name: str) -> bool:
    return normalize_skill(name) in SKILL_ABILITY_MAP


def skill_ability(name: str) -> str | None:
    """Return the ability that governs a skill, or None for unknown skills."""
    return SKILL_ABILITY_MAP.get(normalize_skill(name))
