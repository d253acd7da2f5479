"""Combat math: pure functions, no I/O."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from rpg_rules.mechanics.ability_scores import ability_score, modifier
from rpg_rules.mechanics.dice import DiceExpression, DiceResult, Rng, roll_d20, roll_pool
from rpg_rules.models.outcome import Critical
from rpg_rules.models.profiles import WeaponProfile


@dataclass
class D20Roll:
    natural: int
    modifier: int
    total: int
    critical: Critical | None = None
    success: bool | None = None


def critical_for(natural: int) -> Critical | None:
    """Natural 20 is a critical success, natural 1 a critical failure, whatever the modifiers."""
    if natural == 20:
        return Critical.SUCCESS
    if natural == 1:
        return Critical.FAILURE
    return None


def d20_test(bonus: int, threshold: int | None = None, rng: Rng | None = None) -> D20Roll:
    """Roll 1d20 + bonus. ``success`` is only set when a DC or AC is known."""
    result = roll_d20(modifier=bonus, rng=rng)
    natural = result.rolls[0]
    return D20Roll(
        natural=natural,
        modifier=bonus,
        total=result.total,
        critical=critical_for(natural),
        success=None if threshold is None else result.total >= threshold,
    )


def weapon_ability(stats, weapon: WeaponProfile) -> str:
    """Ability used to attack with a weapon. Finesse weapons use the better of STR and DEX."""
    if weapon.is_finesse:
        strength = ability_score(stats, "strength")
        dexterity = ability_score(stats, "dexterity")
        return "dexterity" if dexterity > strength else "strength"
    return weapon.required_stat


def attack_bonus(stats, weapon: WeaponProfile, proficiency_bonus: int, is_proficient: bool = True) -> tuple[str, int, int]:
    """Returns (ability, ability_modifier, attack_bonus)."""
    ability = weapon_ability(stats, weapon)
    mod = modifier(ability_score(stats, ability))
    return ability, mod, mod + (proficiency_bonus if is_proficient else 0)


def damage_roll(
    dice: Iterable[DiceExpression],
    damage_modifier: int,
    is_critical: bool = False,
    rng: Rng | None = None,
) -> DiceResult:
    """Roll damage. Critical rolls the dice twice; the modifier is added once. Minimum 1."""
    result = roll_pool(dice, rng=rng, double_dice=is_critical)
    result.modifier += damage_modifier
    result.total = max(1, sum(result.rolls) + result.modifier)
    return result
