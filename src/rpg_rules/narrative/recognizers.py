"""Ordered recognizer table for checks, saves and attack rolls in narrative text.

Each ``Recognizer`` pairs a pattern with the suggestion kind it produces and a
capture function that turns a match into ``Captures``. The table order is the
priority order: more informative patterns come first, so at an equal start
offset the earlier recognizer wins an overlap.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional

from rpg_rules.mechanics.ability_scores import ABILITY_ABBREVIATIONS, ABILITY_NAMES, governing_ability
from rpg_rules.mechanics.skills import SKILL_ABILITY_MAP
from rpg_rules.models.suggestion import SuggestionKind


@dataclass(frozen=True)
class Captures:
    name: Optional[str] = None
    ability: Optional[str] = None
    skill: Optional[str] = None
    dc: Optional[int] = None
    ac: Optional[int] = None
    damage: Optional[str] = None
    mode: Optional[str] = None


@dataclass(frozen=True)
class Recognizer:
    name: str
    kind: SuggestionKind
    pattern: re.Pattern[str]
    capture: Callable[[re.Match[str]], Captures]


def _int(value: str | None) -> int | None:
    return int(value) if value else None


def named_groups(match: re.Match[str]) -> Captures:
    """Default capture mapping: read the named groups a pattern defines."""
    groups = match.groupdict()
    damage = groups.get("damage")
    mode = groups.get("mode")
    return Captures(
        name=groups.get("name"),
        ability=groups.get("ability"),
        skill=groups.get("skill"),
        dc=_int(groups.get("dc") or groups.get("trailing_dc")),
        ac=_int(groups.get("ac")),
        damage="".join(damage.split()).lower() if damage else None,
        mode=mode.lower() if mode else None,
    )


_BRACKET_MODIFIER = re.compile(r"d20\s*\+\s*([A-Za-z]+)", re.I)
_ANY_ABILITY = re.compile(r"\b(" + "|".join(ABILITY_NAMES) + r")\b", re.I)


def bracket_captures(match: re.Match[str]) -> Captures:
    """'[Roll: d20+Int modifier vs DC 12]' -> intelligence, DC 12.

    Falls back to any ability named in the bracket, then to intelligence.
    """
    body = match.group("body")
    modifier_match = _BRACKET_MODIFIER.search(body)
    if modifier_match and governing_ability(modifier_match.group(1)):
        name = modifier_match.group(1)
    else:
        ability_match = _ANY_ABILITY.search(body)
        name = ability_match.group(1) if ability_match else "intelligence"
    return Captures(name=name, dc=_int(match.group("dc")))


def _alternation(words) -> str:
    # Longest first so "sleight of hand" is tried before shorter alternatives
    ordered = sorted(words, key=len, reverse=True)
    return "(?:" + "|".join(r"\s+".join(map(re.escape, w.split())) for w in ordered) + ")"


ABILITY = _alternation(list(ABILITY_NAMES) + list(ABILITY_ABBREVIATIONS))
SKILL = _alternation(SKILL_ABILITY_MAP)
_DC_SUFFIX = r"(?:\s*\(\s*DC\s*(?P<dc>\d+)\s*\))?"
# Trailing "(DC N)" for patterns that may already have captured a leading "DC N"
_TRAILING_DC = r"(?:\s*\(\s*DC\s*(?P<trailing_dc>\d+)\s*\))?"
_REQUEST = r"\b(?:make|roll|attempt)\s+(?:an?|your)\s+"
_SAVE = r"(?:saving\s+throw|save)\b"
_DAMAGE = (
    r"(?:,?\s+(?:dealing|for|doing)\s+"
    r"(?P<damage>\d+d\d+(?:\s*[+-]\s*\d+)?)(?:\s+[a-z]+)?\s+damage)?"
)


def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


RECOGNIZERS: tuple[Recognizer, ...] = (
    # -- Skill and ability checks --
    Recognizer(
        "dc_ability_skill_check",
        SuggestionKind.SKILL,
        _compile(rf"\bDC\s*(?P<dc>\d+)\s+(?P<ability>{ABILITY})\s*\(\s*(?P<skill>{SKILL})\s*\)\s+check\b"),
        named_groups,
    ),
    Recognizer(
        "ability_skill_check",
        SuggestionKind.SKILL,
        _compile(rf"\b(?P<ability>{ABILITY})\s*\(\s*(?P<skill>{SKILL})\s*\)\s+check\b{_DC_SUFFIX}"),
        named_groups,
    ),
    Recognizer(
        "requested_check",
        SuggestionKind.SKILL,
        _compile(
            rf"{_REQUEST}(?:DC\s*(?P<dc>\d+)\s+)?(?P<name>{SKILL}|[A-Za-z]+)(?:\s+ability)?\s+check\b{_TRAILING_DC}"
        ),
        named_groups,
    ),
    Recognizer(
        "dc_check",
        SuggestionKind.SKILL,
        _compile(rf"\bDC\s*(?P<dc>\d+)\s+(?P<name>{SKILL}|[A-Za-z]+)(?:\s+ability)?\s+check\b"),
        named_groups,
    ),
    Recognizer(
        "ability_check",
        SuggestionKind.SKILL,
        _compile(rf"\b(?P<name>{ABILITY})(?:\s+ability)?\s+check\b{_DC_SUFFIX}"),
        named_groups,
    ),
    Recognizer(
        "skill_check",
        SuggestionKind.SKILL,
        _compile(rf"\(?\b(?P<skill>{SKILL})\)?\s+check\b{_DC_SUFFIX}"),
        named_groups,
    ),
    Recognizer(
        "bracket_roll",
        SuggestionKind.SKILL,
        _compile(r"\[Roll:(?P<body>[^\]]*?)(?:vs\.?|against)\s+DC\s*(?P<dc>\d+)[^\]]*\]"),
        bracket_captures,
    ),
    # -- Saving throws --
    Recognizer(
        "requested_save",
        SuggestionKind.SAVE,
        _compile(rf"{_REQUEST}(?:DC\s*(?P<dc>\d+)\s+)?(?P<name>{ABILITY})\s+{_SAVE}{_TRAILING_DC}"),
        named_groups,
    ),
    Recognizer(
        "dc_save",
        SuggestionKind.SAVE,
        _compile(rf"\bDC\s*(?P<dc>\d+)\s+(?P<name>{ABILITY})\s+{_SAVE}"),
        named_groups,
    ),
    Recognizer(
        "ability_save",
        SuggestionKind.SAVE,
        _compile(rf"\b(?P<name>{ABILITY})\s+{_SAVE}{_DC_SUFFIX}"),
        named_groups,
    ),
    # -- Attack rolls --
    Recognizer(
        "requested_attack",
        SuggestionKind.ATTACK,
        _compile(
            rf"{_REQUEST}(?:(?P<mode>melee|ranged|spell)\s+)?attack\s+roll\b"
            rf"(?:\s+(?:against|vs\.?)\s+AC\s*(?P<ac>\d+))?{_DAMAGE}"
        ),
        named_groups,
    ),
    Recognizer(
        "attack_vs_ac",
        SuggestionKind.ATTACK,
        _compile(
            rf"\b(?:(?P<mode>melee|ranged|spell)\s+)?attack\s+roll\s+(?:against|vs\.?)\s+AC\s*(?P<ac>\d+){_DAMAGE}"
        ),
        named_groups,
    ),
    Recognizer(
        "attack_roll",
        SuggestionKind.ATTACK,
        _compile(r"\b(?:(?P<mode>melee|ranged|spell)\s+)?attack\s+roll\b"),
        named_groups,
    ),
)


# Rules-glossary terms for tooltip annotation, in priority order.
RULE_TERMS: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (_compile(pattern), rule_type)
    for pattern, rule_type in (
        (rf"\b{ABILITY}\s+(?:ability\s+)?check\b", "ability-check"),
        (r"\bability\s+check\b", "ability-check"),
        (rf"\b{SKILL}\s+check\b", "ability-check"),
        (rf"\b{ABILITY}\s+(?:save|saving\s+throw)\b", "saving-throw"),
        (r"\bdeath\s+(?:save|saving\s+throw)\b", "death-saves"),
        (r"\bsaving\s+throw\b", "saving-throw"),
        (r"\bsave\b", "saving-throw"),
        (r"\battack\s+roll\b", "attack-roll"),
        (r"\bhit\b", "attack-roll"),
        (r"\binitiative\b", "initiative"),
        (r"\bturn\s+order\b", "initiative"),
        (r"\bcombat\s+turn\b", "combat-turn"),
        (r"\byour\s+turn\b", "combat-turn"),
        (r"\bbonus\s+action\b", "combat-turn"),
        (r"\breaction\b", "combat-turn"),
        (r"\baction\b", "combat-turn"),
        (r"\bdamage\s+roll\b", "damage"),
        (r"\broll\s+(?:for\s+)?damage\b", "damage"),
        (r"\bdisadvantage\b", "disadvantage"),
        (r"\badvantage\b", "advantage"),
        (r"\bproficiency\s+bonus\b", "proficiency"),
        (r"\bproficient\b", "proficiency"),
        (r"\bspell\s+save\s+DC\b", "spell-casting"),
        (r"\bspell\s+slot\b", "spell-casting"),
        (r"\bspell(?:casting)?\b", "spell-casting"),
        (r"\bcantrip\b", "spell-casting"),
        (
            r"\b(?:blinded|charmed|deafened|frightened|grappled|incapacitated|invisible|"
            r"paralyzed|petrified|poisoned|prone|restrained|stunned|unconscious)\b",
            "conditions",
        ),
        (r"\bdifficult\s+terrain\b", "movement"),
        (r"\bmovement\b", "movement"),
        (r"\bexhaustion\b", "exhaustion"),
    )
)
