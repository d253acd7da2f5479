"""Shared fixtures for the rpg-rules test suite."""
from __future__ import annotations

import itertools
import random
from typing import Any, Callable

import pytest

from rpg_rules.models.character import Character
from rpg_rules.models.profiles import SpellProfile, WeaponProfile
from rpg_rules.rules.catalog import RulesCatalog


STANDARD_SCORES = {
    "strength": 16, "dexterity": 14, "constitution": 13,
    "intelligence": 12, "wisdom": 14, "charisma": 8,
}

# rng() value that makes any die land on its highest face
MAX_FACE = 0.999


def face(value: int, sides: int = 20) -> float:
    """rng() value that makes a die with ``sides`` land on ``value``."""
    return (value - 0.5) / sides


@pytest.fixture
def rng_sequence() -> Callable[..., Callable[[], float]]:
    """Factory: rng returning the given values in order, repeating the last one."""
    def make(*values: float) -> Callable[[], float]:
        it = itertools.chain(values, itertools.repeat(values[-1]))
        return lambda: next(it)
    return make


@pytest.fixture
def die_face() -> Callable[..., float]:
    return face


@pytest.fixture
def d20_then_max(rng_sequence):
    """Factory: a d20 landing on ``natural``, every later die at its maximum."""
    def make(natural: int) -> Callable[[], float]:
        return rng_sequence(face(natural), MAX_FACE)
    return make


@pytest.fixture
def min_rng() -> Callable[[], float]:
    return lambda: 0.0


@pytest.fixture
def max_rng() -> Callable[[], float]:
    return lambda: MAX_FACE


@pytest.fixture
def seeded_rng():
    return random.Random(42).random


@pytest.fixture
def sample_ability_scores() -> dict[str, int]:
    return dict(STANDARD_SCORES)


@pytest.fixture
def fighter() -> Character:
    return Character.model_validate({
        "stats": dict(STANDARD_SCORES),
        "level": 1,
        "skill_proficiencies": ["athletics", "perception"],
        "saving_throw_proficiencies": ["strength", "constitution"],
        "equipped_weapon": "longsword",
    })


@pytest.fixture
def cleric_character() -> dict[str, Any]:
    return {
        "stats": {"strength": 12, "dexterity": 10, "wisdom": 14, "intelligence": 16},
        "level": 11,
    }


@pytest.fixture
def tiny_catalog() -> RulesCatalog:
    weapons = [
        WeaponProfile.model_validate({
            "name": "Longsword", "type": "melee", "category": "martial",
            "damage": {"dice": "1d8", "damage_type": "slashing"},
            "properties": ["versatile"], "required_stat": "strength",
        }),
        WeaponProfile.model_validate({
            "name": "Dagger", "type": "melee",
            "damage": {"dice": "1d4", "damage_type": "piercing"},
            "properties": ["finesse", "light", "thrown"], "required_stat": "dexterity",
        }),
    ]
    spells = [
        SpellProfile.model_validate({
            "name": "Fire Bolt", "level": 0, "required_stat": "intelligence",
            "damage": {"dice": "1d10", "damage_type": "fire", "scaling": {"per_character_level": "1d10"}},
        }),
        SpellProfile.model_validate({
            "name": "Cure Wounds", "level": 1, "required_stat": "wisdom",
            "healing": {"dice": "1d8", "scaling": {"per_level": "1d8"}},
        }),
    ]
    return RulesCatalog(weapons, spells)


@pytest.fixture(scope="session")
def packaged_catalog() -> RulesCatalog:
    return RulesCatalog.from_content()
