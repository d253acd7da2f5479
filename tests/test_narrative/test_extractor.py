"""Tests for src/rpg_rules/narrative/extractor.py."""
from __future__ import annotations

import pytest

from rpg_rules.models.suggestion import SourceSpan, Suggestion, SuggestionKind
from rpg_rules.narrative.extractor import extract_suggestions, find_rule_references, resolve_overlaps


def _suggestion(start, length, recognizer="r"):
    return Suggestion(
        kind=SuggestionKind.SKILL,
        related_ability="strength",
        source_span=SourceSpan(start=start, length=length),
        recognizer=recognizer,
    )


class TestResolveOverlaps:
    def test_disjoint_kept_in_order(self):
        kept = resolve_overlaps([_suggestion(20, 5), _suggestion(0, 5)])
        assert [s.source_span.start for s in kept] == [0, 20]

    def test_longer_overlap_replaces(self):
        kept = resolve_overlaps([_suggestion(0, 5, "short"), _suggestion(2, 10, "long")])
        assert [s.recognizer for s in kept] == ["long"]

    def test_contained_match_dropped(self):
        kept = resolve_overlaps([_suggestion(0, 20, "outer"), _suggestion(5, 5, "inner")])
        assert [s.recognizer for s in kept] == ["outer"]

    def test_equal_length_keeps_earlier_start(self):
        kept = resolve_overlaps([_suggestion(3, 8, "later"), _suggestion(0, 8, "earlier")])
        assert [s.recognizer for s in kept] == ["earlier"]

    def test_equal_span_keeps_higher_priority(self):
        kept = resolve_overlaps([_suggestion(0, 8, "first"), _suggestion(0, 8, "second")])
        assert [s.recognizer for s in kept] == ["first"]

    def test_results_never_overlap(self):
        candidates = [_suggestion(s, l) for s, l in [(0, 4), (2, 9), (10, 3), (12, 6), (30, 1)]]
        kept = resolve_overlaps(candidates)
        for a, b in zip(kept, kept[1:]):
            assert a.source_span.end <= b.source_span.start


class TestExtractSuggestions:
    def test_requested_dc_strength_check(self):
        suggestions = extract_suggestions("You must make a DC 15 Strength check to break down the door.")
        assert len(suggestions) == 1
        s = suggestions[0]
        assert s.kind is SuggestionKind.SKILL
        assert s.related_ability == "strength"
        assert s.difficulty_class == 15

    def test_specific_match_wins_over_generic(self):
        suggestions = extract_suggestions("Strength (Athletics) check (DC 15)")
        assert len(suggestions) == 1
        s = suggestions[0]
        assert s.related_ability == "strength"
        assert s.skill == "athletics"
        assert s.difficulty_class == 15
        assert s.recognizer == "ability_skill_check"
        assert s.source_span == SourceSpan(start=0, length=34)

    @pytest.mark.parametrize("text, ability, skill", [
        ("Make a Stealth check to slip past.", "dexterity", "stealth"),
        ("Roll a Sleight of Hand check", "dexterity", "sleight of hand"),
        ("an Animal Handling check", "wisdom", "animal handling"),
    ])
    def test_skill_maps_to_governing_ability(self, text, ability, skill):
        [s] = extract_suggestions(text)
        assert s.related_ability == ability
        assert s.skill == skill

    def test_bracket_prompt_abbreviation(self):
        [s] = extract_suggestions("The runes glow. [Roll: d20+Int modifier vs DC 12]")
        assert s.related_ability == "intelligence"
        assert s.difficulty_class == 12

    def test_saving_throw(self):
        [s] = extract_suggestions("The trap springs! Make a DC 14 Dexterity saving throw.")
        assert s.kind is SuggestionKind.SAVE
        assert s.related_ability == "dexterity"
        assert s.difficulty_class == 14

    @pytest.mark.parametrize("text, kind, ability, dc", [
        ("Make an Intelligence check (DC 15).", SuggestionKind.SKILL, "intelligence", 15),
        ("Attempt a Dexterity check (DC 12).", SuggestionKind.SKILL, "dexterity", 12),
        ("Roll your Strength saving throw (DC 5).", SuggestionKind.SAVE, "strength", 5),
        ("Make a DC 11 Wisdom saving throw (DC 99)", SuggestionKind.SAVE, "wisdom", 11),
    ])
    def test_request_keeps_trailing_dc(self, text, kind, ability, dc):
        [s] = extract_suggestions(text)
        assert s.kind is kind
        assert s.related_ability == ability
        assert s.difficulty_class == dc
        assert s.description == text.rstrip(".")

    def test_uppercase_damage_dice_normalized(self):
        [s] = extract_suggestions("Make an attack roll against AC 12, dealing 1D6+2 piercing damage.")
        assert s.damage_expression == "1d6+2"

    def test_saves_require_an_ability(self):
        assert extract_suggestions("Make a Stealth saving throw") == []

    def test_attack_with_ac_and_damage(self):
        [s] = extract_suggestions("Make a melee attack roll against AC 13, dealing 1d8+3 slashing damage.")
        assert s.kind is SuggestionKind.ATTACK
        assert s.target_armor_class == 13
        assert s.damage_expression == "1d8+3"
        assert s.attack_mode == "melee"
        assert s.related_ability is None

    def test_multiple_in_reading_order(self):
        text = (
            "Make a Dexterity saving throw. Then make a DC 12 Wisdom (Perception) check, "
            "or an attack roll against AC 15."
        )
        suggestions = extract_suggestions(text)
        assert [s.kind for s in suggestions] == [
            SuggestionKind.SAVE, SuggestionKind.SKILL, SuggestionKind.ATTACK,
        ]
        assert suggestions[1].skill == "perception"
        assert suggestions[2].target_armor_class == 15

    @pytest.mark.parametrize("text", ["", "The tavern is quiet tonight.", "Make a Luck check"])
    def test_nothing_to_suggest(self, text):
        assert extract_suggestions(text) == []

    def test_description_is_source_text(self):
        text = "He asks for a Charisma check."
        [s] = extract_suggestions(text)
        assert text[s.source_span.start:s.source_span.end] == s.description == "Charisma check"


class TestRuleReferences:
    def test_terms_found(self):
        refs = find_rule_references("You have advantage on the attack roll, but you are poisoned.")
        assert [r.rule_type for r in refs] == ["advantage", "attack-roll", "conditions"]

    def test_disadvantage_not_read_as_advantage(self):
        [ref] = find_rule_references("Roll with disadvantage")
        assert ref.rule_type == "disadvantage"

    def test_longest_term_wins(self):
        [ref] = find_rule_references("Make a Wisdom saving throw")
        assert ref.rule_type == "saving-throw"
        assert ref.term == "Wisdom saving throw"

    def test_empty(self):
        assert find_rule_references("") == []
