"""Tests for src/rpg_rules/mechanics/spellcasting.py."""
from __future__ import annotations

import pytest

from rpg_rules.mechanics.dice import DiceExpression
from rpg_rules.mechanics.spellcasting import (
    CANTRIP_SCALING_LEVELS,
    calculate_healing,
    calculate_spell_attack_bonus,
    calculate_spell_damage,
    calculate_spell_dc,
    cantrip_scaling_steps,
    effective_slot_level,
    scaled_dice,
)


class TestSpellDC:
    @pytest.mark.parametrize("score, prof, dc", [
        (16, 2, 13), (14, 2, 12), (10, 3, 11), (20, 6, 19),
    ])
    def test_dc(self, score, prof, dc):
        assert calculate_spell_dc(score, prof) == dc

    def test_attack_bonus(self):
        assert calculate_spell_attack_bonus(16, 2) == 5


class TestCantripScaling:
    def test_thresholds(self):
        assert CANTRIP_SCALING_LEVELS == [5, 11, 17]

    @pytest.mark.parametrize("level, steps", [
        (1, 0), (4, 0), (5, 1), (10, 1), (11, 2), (16, 2), (17, 3), (20, 3),
    ])
    def test_steps(self, level, steps):
        assert cantrip_scaling_steps(level) == steps

    def test_level_11_cantrip_gets_two_extra_dice(self, packaged_catalog):
        fire_bolt = packaged_catalog.spells["fire bolt"]
        pool = scaled_dice(fire_bolt.damage.dice, fire_bolt.damage.scaling, fire_bolt, 0, 11)
        assert pool == [DiceExpression(1, 10), DiceExpression(2, 10)]

    def test_character_scaling_ignored_for_leveled_spells(self, packaged_catalog):
        fireball = packaged_catalog.spells["fireball"]
        pool = scaled_dice(fireball.damage.dice, fireball.damage.scaling, fireball, 3, 20)
        assert pool == [DiceExpression(8, 6)]


class TestUpcasting:
    @pytest.mark.parametrize("slot, expected", [
        (None, 3), (1, 3), (3, 3), (5, 5), (12, 9),
    ])
    def test_effective_slot_level(self, packaged_catalog, slot, expected):
        assert effective_slot_level(packaged_catalog.spells["fireball"], slot) == expected

    def test_fireball_at_slot_5(self, packaged_catalog):
        fireball = packaged_catalog.spells["fireball"]
        pool = scaled_dice(fireball.damage.dice, fireball.damage.scaling, fireball, 5, 9)
        assert sum(d.count for d in pool) == 10

    def test_magic_missile_at_slot_3(self, packaged_catalog, max_rng):
        missile = packaged_catalog.spells["magic missile"]
        pool = scaled_dice(missile.damage.dice, missile.damage.scaling, missile, 3, 5)
        result = calculate_spell_damage(pool, rng=max_rng)
        assert len(result.rolls) == 5
        assert result.modifier == 5
        assert result.total == 25


class TestDamageAndHealing:
    def test_critical_spell_damage_doubles_dice(self, max_rng):
        result = calculate_spell_damage([DiceExpression(1, 10)], 0, is_critical=True, rng=max_rng)
        assert result.rolls == [10, 10]
        assert result.total == 20

    def test_cure_wounds_base(self, packaged_catalog, seeded_rng):
        cure = packaged_catalog.spells["cure wounds"]
        for _ in range(100):
            pool = scaled_dice(cure.healing.dice, cure.healing.scaling, cure, 1, 1)
            result = calculate_healing(pool, cure.healing.bonus, 2, seeded_rng)
            assert len(result.rolls) == 1
            assert 3 <= result.total <= 10

    def test_healing_minimum_one(self, min_rng):
        result = calculate_healing([DiceExpression(1, 4)], 0, -3, min_rng)
        assert result.total == 1
