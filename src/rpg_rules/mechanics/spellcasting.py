"""Spellcasting mechanics: pure functions, no I/O."""
from __future__ import annotations

from rpg_rules.mechanics.ability_scores import modifier
from rpg_rules.mechanics.combat_math import damage_roll
from rpg_rules.mechanics.dice import DiceExpression, DiceResult, Rng, roll_pool
from rpg_rules.models.profiles import Scaling, SpellProfile

CANTRIP_SCALING_LEVELS = [5, 11, 17]

MAX_SLOT_LEVEL = 9


def calculate_spell_dc(ability_score: int, prof_bonus: int) -> int:
    """Calculate spell save DC: 8 + ability modifier + proficiency bonus."""
    return 8 + modifier(ability_score) + prof_bonus


def calculate_spell_attack_bonus(ability_score: int, prof_bonus: int) -> int:
    """Calculate spell attack bonus: ability modifier + proficiency bonus."""
    return modifier(ability_score) + prof_bonus


def cantrip_scaling_steps(character_level: int) -> int:
    """How many of the 5/11/17 thresholds a character has reached."""
    return sum(1 for threshold in CANTRIP_SCALING_LEVELS if character_level >= threshold)


def effective_slot_level(spell: SpellProfile, slot_level: int | None) -> int:
    """Slot a spell is cast with: never below its own level, never above 9th."""
    if slot_level is None:
        return spell.level
    return min(max(slot_level, spell.level), MAX_SLOT_LEVEL)


def scaled_dice(
    base: DiceExpression,
    scaling: Scaling | None,
    spell: SpellProfile,
    slot_level: int,
    character_level: int,
) -> list[DiceExpression]:
    """Base dice plus any upcast and cantrip scaling dice, as a pool to roll together."""
    pool = [base]
    if scaling is None:
        return pool
    levels_above = slot_level - spell.level
    if scaling.per_level and levels_above > 0:
        pool.append(scaling.per_level.scaled(levels_above))
    if scaling.per_character_level and spell.is_cantrip:
        steps = cantrip_scaling_steps(character_level)
        if steps:
            pool.append(scaling.per_character_level.scaled(steps))
    return pool


def calculate_spell_damage(
    dice: list[DiceExpression],
    damage_modifier: int = 0,
    is_critical: bool = False,
    rng: Rng | None = None,
) -> DiceResult:
    """Roll spell damage. Critical doubles the dice, not the modifier. Minimum 1."""
    return damage_roll(dice, damage_modifier, is_critical, rng)


def calculate_healing(dice: list[DiceExpression], bonus: int, spellcasting_mod: int, rng: Rng | None = None) -> DiceResult:
    """Roll healing: dice + flat bonus + spellcasting ability modifier. Never doubled, minimum 1."""
    result = roll_pool(dice, rng=rng)
    result.modifier += bonus + spellcasting_mod
    result.total = max(1, sum(result.rolls) + result.modifier)
    return result
