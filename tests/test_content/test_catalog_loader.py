"""Tests for catalog loading: validates the packaged weapon and spell TOML files."""
from __future__ import annotations

import pydantic
import pytest

from rpg_rules.content.loader import load_all_spells, load_all_weapons
from rpg_rules.models.profiles import WeaponCategory, WeaponType


VALID_DAMAGE_TYPES = {
    "fire", "cold", "lightning", "thunder", "acid", "poison",
    "necrotic", "radiant", "force", "psychic",
    "bludgeoning", "piercing", "slashing",
}


@pytest.fixture(scope="module")
def all_weapons():
    return load_all_weapons()


@pytest.fixture(scope="module")
def all_spells():
    return load_all_spells()


class TestWeapons:
    def test_loads_weapons(self, all_weapons):
        assert len(all_weapons) >= 30

    def test_keyed_by_lowercase_name(self, all_weapons):
        for key, weapon in all_weapons.items():
            assert key == weapon.name.lower()

    @pytest.mark.parametrize("name, dice, damage_type", [
        ("longsword", "1d8", "slashing"),
        ("greataxe", "1d12", "slashing"),
        ("dagger", "1d4", "piercing"),
        ("longbow", "1d8", "piercing"),
        ("maul", "2d6", "bludgeoning"),
    ])
    def test_known_weapons(self, all_weapons, name, dice, damage_type):
        weapon = all_weapons[name]
        assert str(weapon.damage.dice) == dice
        assert weapon.damage.damage_type == damage_type

    def test_finesse_weapons_marked(self, all_weapons):
        for name in ("dagger", "rapier", "shortsword", "scimitar"):
            assert all_weapons[name].is_finesse

    def test_ranged_weapons_use_dexterity(self, all_weapons):
        for weapon in all_weapons.values():
            if weapon.type is WeaponType.RANGED and "thrown" not in weapon.properties:
                assert weapon.required_stat == "dexterity", weapon.name

    def test_categories(self, all_weapons):
        assert all_weapons["club"].category is WeaponCategory.SIMPLE
        assert all_weapons["greatsword"].category is WeaponCategory.MARTIAL

    def test_damage_types_valid(self, all_weapons):
        for weapon in all_weapons.values():
            assert weapon.damage.damage_type in VALID_DAMAGE_TYPES


class TestSpells:
    def test_loads_spells(self, all_spells):
        assert len(all_spells) >= 10

    def test_levels_in_range(self, all_spells):
        for spell in all_spells.values():
            assert 0 <= spell.level <= 9

    def test_damage_types_valid(self, all_spells):
        for spell in all_spells.values():
            if spell.damage:
                assert spell.damage.damage_type in VALID_DAMAGE_TYPES, spell.name

    def test_character_scaling_only_on_cantrips(self, all_spells):
        for spell in all_spells.values():
            scaling = spell.damage.scaling if spell.damage else None
            if scaling and scaling.per_character_level:
                assert spell.is_cantrip, spell.name

    def test_attack_vs_save_vs_auto_hit(self, all_spells):
        assert all_spells["fire bolt"].needs_attack_roll
        assert not all_spells["fireball"].needs_attack_roll
        assert not all_spells["magic missile"].needs_attack_roll
        assert all_spells["fireball"].saving_throw.effect.value == "half"

    def test_healing_spells(self, all_spells):
        assert all_spells["cure wounds"].healing is not None
        assert all_spells["cure wounds"].damage is None


class TestContentDirOverride:
    def test_custom_directory(self, tmp_path):
        (tmp_path / "weapons.toml").write_text(
            '[[weapons]]\nname = "Spear"\ndamage = { dice = "1d6", damage_type = "piercing" }\n'
        )
        weapons = load_all_weapons(tmp_path)
        assert list(weapons) == ["spear"]

    def test_bad_dice_rejected_at_load(self, tmp_path):
        (tmp_path / "weapons.toml").write_text(
            '[[weapons]]\nname = "Broken"\ndamage = { dice = "d6", damage_type = "piercing" }\n'
        )
        with pytest.raises(pydantic.ValidationError):
            load_all_weapons(tmp_path)

    def test_mental_stat_required_for_spells(self, tmp_path):
        (tmp_path / "spells.toml").write_text(
            '[[spells]]\nname = "Punch Spell"\nrequired_stat = "strength"\n'
        )
        with pytest.raises(pydantic.ValidationError):
            load_all_spells(tmp_path)
