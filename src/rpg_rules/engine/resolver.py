"""Action resolver: turns suggestions and free-text actions into roll outcomes."""
from __future__ import annotations

import logging
import re
from typing import Any

from rpg_rules.config import EngineSettings
from rpg_rules.mechanics.ability_scores import (
    ABILITY_ABBREVIATIONS,
    ABILITY_NAMES,
    ability_score,
    canonical_ability,
    governing_ability,
    modifier,
    proficiency_bonus_for_level,
    resolve_ability,
)
from rpg_rules.mechanics.combat_math import D20Roll, attack_bonus, d20_test, damage_roll
from rpg_rules.mechanics.dice import Rng, parse
from rpg_rules.mechanics.skills import SKILL_ABILITY_MAP, normalize_skill, skill_ability
from rpg_rules.mechanics.spellcasting import (
    calculate_healing,
    calculate_spell_attack_bonus,
    calculate_spell_damage,
    calculate_spell_dc,
    effective_slot_level,
    scaled_dice,
)
from rpg_rules.models.character import Character, CharacterLike, coerce_character
from rpg_rules.models.outcome import ActionKind, Critical, RollOutcome
from rpg_rules.models.profiles import UNARMED_STRIKE, SpellProfile, WeaponProfile
from rpg_rules.models.suggestion import Suggestion, SuggestionKind
from rpg_rules.rules.catalog import RulesCatalog

logger = logging.getLogger(__name__)

# Verbs that imply a weapon attack or a spell.
_WEAPON_PATTERN = re.compile(
    r"\b(?:attack(?:s|ed|ing)?|strik(?:e|es|ing)|slash(?:es|ed|ing)?|stab(?:s|bed|bing)?"
    r"|shoot(?:s|ing)?|shot|throw(?:s|n|ing)?|threw|swing(?:s|ing)?|swung)\b",
    re.I,
)
_SPELL_PATTERN = re.compile(r"\b(?:cast(?:s|ing)?|spells?|incantations?)\b", re.I)
_SAVE_PATTERN = re.compile(r"\bsav(?:e|es|ing\s+throw)\b", re.I)

_SLOT_LEVEL_PATTERN = re.compile(r"\blevel\s+(\d+)\b|\b(\d+)(?:st|nd|rd|th)[-\s]+level\b", re.I)
_AC_PATTERN = re.compile(r"\b(?:against|vs\.?)\s+AC\s*(\d+)", re.I)
_DC_PATTERN = re.compile(r"\bDC\s*(\d+)", re.I)
_ABILITY_OR_SKILL_PATTERN = re.compile(
    r"\b("
    + "|".join(
        r"\s+".join(name.split())
        for name in sorted([*ABILITY_NAMES, *ABILITY_ABBREVIATIONS, *SKILL_ABILITY_MAP], key=len, reverse=True)
    )
    + r")\b",
    re.I,
)

_MENTAL_STATS = ("intelligence", "wisdom", "charisma")


def _int_match(pattern: re.Pattern[str], text: str) -> int | None:
    m = pattern.search(text)
    if not m:
        return None
    return int(next(g for g in m.groups() if g is not None))


def _hit_or_unknown(roll: D20Roll) -> bool:
    """Damage is rolled unless a known AC was missed without a natural 20."""
    return roll.success is not False or roll.critical is Critical.SUCCESS


class ActionResolver:
    """Stateless resolver. The catalog and settings are injected and never mutated."""

    def __init__(self, catalog: RulesCatalog, settings: EngineSettings | None = None):
        self.catalog = catalog
        self.settings = settings or EngineSettings()

    def proficiency_for(self, character: Character, override: int | None = None) -> int:
        if override is not None:
            return override
        if character.proficiency_bonus is not None:
            return character.proficiency_bonus
        if self.settings.proficiency_by_level:
            return proficiency_bonus_for_level(character.level)
        return self.settings.default_proficiency_bonus

    # -- Suggestions --

    def resolve_suggestion(
        self,
        suggestion: Suggestion,
        character: CharacterLike | None,
        rng: Rng | None = None,
        proficient: bool | None = None,
        target_armor_class: int | None = None,
        proficiency_bonus: int | None = None,
    ) -> RollOutcome:
        char = coerce_character(character)
        prof = self.proficiency_for(char, proficiency_bonus)
        logger.debug("Resolving %s suggestion %r", suggestion.kind.value, suggestion.description)

        if suggestion.kind is SuggestionKind.ATTACK:
            target_ac = target_armor_class if target_armor_class is not None else suggestion.target_armor_class
            if suggestion.attack_mode == "spell":
                return self._spell_attack_suggestion(suggestion, char, prof, target_ac, rng)
            return self._weapon_attack(
                kind=ActionKind.ATTACK_ROLL,
                description=suggestion.description,
                weapon_texts=[char.equipped_weapon],
                character=char,
                prof=prof,
                target_ac=target_ac,
                rng=rng,
                suggestion=suggestion,
                damage_expression=suggestion.damage_expression,
                proficient=proficient is not False,
            )

        kind = ActionKind.SAVING_THROW if suggestion.kind is SuggestionKind.SAVE else ActionKind.SKILL_CHECK
        return self._check(
            kind=kind,
            description=suggestion.description,
            ability=suggestion.related_ability,
            skill=suggestion.skill,
            dc=suggestion.difficulty_class,
            character=char,
            prof=prof,
            proficient=proficient,
            rng=rng,
            suggestion=suggestion,
        )

    # -- Free-text actions --

    def resolve_free_action(
        self,
        action_text: str,
        character: CharacterLike | None,
        proficiency_bonus: int | None = None,
        rng: Rng | None = None,
    ) -> RollOutcome:
        """Resolve text such as 'attack with a longsword' or 'cast fireball at 5th level'.

        Never raises for unrecognized text: it degrades to an ability check, or to an
        UNRESOLVED outcome with no roll when no ability or skill is named.
        """
        char = coerce_character(character)
        prof = self.proficiency_for(char, proficiency_bonus)
        text = action_text or ""
        notes: list[str] = []

        if _SPELL_PATTERN.search(text):
            spell = self.catalog.find_spell(text)
            if spell is not None:
                return self._cast(
                    spell=spell,
                    description=text,
                    slot_level=_int_match(_SLOT_LEVEL_PATTERN, text),
                    character=char,
                    prof=prof,
                    target_ac=_int_match(_AC_PATTERN, text),
                    rng=rng,
                )
            logger.info("No known spell in %r", text)
            notes.append("Unknown spell, no spell effect applied")

        if _WEAPON_PATTERN.search(text):
            return self._weapon_attack(
                kind=ActionKind.WEAPON_ATTACK,
                description=text,
                weapon_texts=[text, char.equipped_weapon],
                character=char,
                prof=prof,
                target_ac=_int_match(_AC_PATTERN, text),
                rng=rng,
                notes=notes,
            )

        named = _ABILITY_OR_SKILL_PATTERN.search(text)
        if named is None:
            return RollOutcome(
                kind=ActionKind.UNRESOLVED,
                description=text,
                notes=(*notes, "No ability, skill, weapon or spell recognized"),
            )

        name = named.group(1).lower()
        ability = canonical_ability(name)
        skill = None if ability else normalize_skill(name)
        kind = ActionKind.SAVING_THROW if _SAVE_PATTERN.search(text) else ActionKind.SKILL_CHECK
        return self._check(
            kind=kind,
            description=text,
            ability=ability or skill_ability(skill),
            skill=skill if kind is ActionKind.SKILL_CHECK else None,
            dc=_int_match(_DC_PATTERN, text),
            character=char,
            prof=prof,
            proficient=None,
            rng=rng,
            notes=notes,
        )

    # -- Resolution steps --

    def _check(
        self,
        kind: ActionKind,
        description: str,
        ability: str | None,
        skill: str | None,
        dc: int | None,
        character: Character,
        prof: int,
        proficient: bool | None,
        rng: Rng | None,
        suggestion: Suggestion | None = None,
        notes: list[str] | None = None,
    ) -> RollOutcome:
        key = ability or skill or ""
        mod = resolve_ability(character.stats, key)
        if proficient is None:
            if kind is ActionKind.SAVING_THROW:
                proficient = ability is not None and character.is_proficient_in_save(ability)
            else:
                proficient = skill is not None and character.is_proficient_in_skill(skill)
        bonus = mod + (prof if proficient else 0)
        roll = d20_test(bonus, dc, rng)
        return RollOutcome(
            kind=kind,
            description=description,
            suggestion=suggestion,
            die_roll=roll.natural,
            modifier=bonus,
            total=roll.total,
            success=roll.success,
            critical=roll.critical,
            ability=governing_ability(key),
            skill=skill,
            notes=tuple(notes or ()),
        )

    def _find_weapon(self, weapon_texts: list[str | None]) -> tuple[WeaponProfile, list[str]]:
        named = [t for t in weapon_texts if t]
        for text in named:
            weapon = self.catalog.find_weapon(text)
            if weapon is not None:
                return weapon, []
        if named:
            logger.info("Unknown weapon in %r, using %s", named, UNARMED_STRIKE.name)
            return UNARMED_STRIKE, [f"Unknown weapon, using {UNARMED_STRIKE.name}"]
        return UNARMED_STRIKE, []

    def _weapon_attack(
        self,
        kind: ActionKind,
        description: str,
        weapon_texts: list[str | None],
        character: Character,
        prof: int,
        target_ac: int | None,
        rng: Rng | None,
        suggestion: Suggestion | None = None,
        damage_expression: str | None = None,
        notes: list[str] | None = None,
        proficient: bool = True,
    ) -> RollOutcome:
        weapon, fallback_notes = self._find_weapon(weapon_texts)
        ability, mod, bonus = attack_bonus(character.stats, weapon, prof, proficient)
        roll = d20_test(bonus, target_ac, rng)
        is_critical = roll.critical is Critical.SUCCESS

        damage = None
        if _hit_or_unknown(roll):
            if damage_expression:
                damage = damage_roll([parse(damage_expression)], 0, is_critical, rng)
            else:
                damage = damage_roll([weapon.damage.dice], mod, is_critical, rng)

        return RollOutcome(
            kind=kind,
            description=description,
            suggestion=suggestion,
            die_roll=roll.natural,
            modifier=bonus,
            total=roll.total,
            success=roll.success,
            critical=roll.critical,
            ability=ability,
            weapon_name=weapon.name,
            damage=damage.total if damage else None,
            damage_rolls=tuple(damage.rolls) if damage else (),
            damage_bonus=damage.modifier if damage else 0,
            damage_type=weapon.damage.damage_type,
            notes=(*(notes or ()), *fallback_notes),
        )

    def _spell_attack_suggestion(
        self,
        suggestion: Suggestion,
        character: Character,
        prof: int,
        target_ac: int | None,
        rng: Rng | None,
    ) -> RollOutcome:
        # No spell is named: attack with the character's best spellcasting stat
        ability = max(_MENTAL_STATS, key=lambda a: ability_score(character.stats, a))
        bonus = calculate_spell_attack_bonus(ability_score(character.stats, ability), prof)
        roll = d20_test(bonus, target_ac, rng)
        damage = None
        if suggestion.damage_expression and _hit_or_unknown(roll):
            damage = calculate_spell_damage(
                [parse(suggestion.damage_expression)], 0, roll.critical is Critical.SUCCESS, rng
            )
        return RollOutcome(
            kind=ActionKind.ATTACK_ROLL,
            description=suggestion.description,
            suggestion=suggestion,
            die_roll=roll.natural,
            modifier=bonus,
            total=roll.total,
            success=roll.success,
            critical=roll.critical,
            ability=ability,
            damage=damage.total if damage else None,
            damage_rolls=tuple(damage.rolls) if damage else (),
            damage_bonus=damage.modifier if damage else 0,
        )

    def _cast(
        self,
        spell: SpellProfile,
        description: str,
        slot_level: int | None,
        character: Character,
        prof: int,
        target_ac: int | None,
        rng: Rng | None,
    ) -> RollOutcome:
        score = ability_score(character.stats, spell.required_stat)
        spell_mod = modifier(score)
        slot = effective_slot_level(spell, slot_level)
        fields: dict[str, Any] = {
            "kind": ActionKind.SPELL_CAST,
            "description": description,
            "ability": spell.required_stat,
            "spell_name": spell.name,
            "spell_slot_level": slot,
        }

        roll = None
        if spell.saving_throw is not None:
            fields["save_dc"] = calculate_spell_dc(score, prof)
            fields["save_ability"] = spell.saving_throw.ability
            fields["save_effect"] = spell.saving_throw.effect.value
        elif spell.needs_attack_roll:
            bonus = calculate_spell_attack_bonus(score, prof)
            roll = d20_test(bonus, target_ac, rng)
            fields.update(
                die_roll=roll.natural,
                modifier=bonus,
                total=roll.total,
                success=roll.success,
                critical=roll.critical,
            )

        if spell.damage is not None and (roll is None or _hit_or_unknown(roll)):
            pool = scaled_dice(spell.damage.dice, spell.damage.scaling, spell, slot, character.level)
            is_critical = roll is not None and roll.critical is Critical.SUCCESS
            damage = calculate_spell_damage(
                pool, spell_mod if spell.damage.add_modifier else 0, is_critical, rng
            )
            fields.update(
                damage=damage.total,
                damage_rolls=tuple(damage.rolls),
                damage_bonus=damage.modifier,
                damage_type=spell.damage.damage_type,
            )
        elif spell.damage is not None:
            fields["damage_type"] = spell.damage.damage_type

        if spell.healing is not None:
            pool = scaled_dice(spell.healing.dice, spell.healing.scaling, spell, slot, character.level)
            healing = calculate_healing(pool, spell.healing.bonus, spell_mod, rng)
            fields.update(healing=healing.total, healing_rolls=tuple(healing.rolls))

        logger.debug("Cast %s at slot %d: %s", spell.name, slot, fields)
        return RollOutcome(**fields)
