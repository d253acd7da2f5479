"""Turn narrative prose into a left-to-right list of non-overlapping suggestions."""
from __future__ import annotations

import logging
import re
from typing import Iterable, Sequence, TypeVar

from rpg_rules.mechanics.ability_scores import canonical_ability
from rpg_rules.mechanics.skills import is_skill, normalize_skill, skill_ability
from rpg_rules.models.suggestion import RuleReference, SourceSpan, Suggestion, SuggestionKind
from rpg_rules.narrative.recognizers import RECOGNIZERS, RULE_TERMS, Recognizer

logger = logging.getLogger(__name__)

_S = TypeVar("_S", Suggestion, RuleReference)


def _span(match: re.Match[str]) -> SourceSpan:
    return SourceSpan(start=match.start(), length=match.end() - match.start())


def resolve_overlaps(candidates: Iterable[_S]) -> list[_S]:
    """Keep disjoint spans, preferring the longer match.

    Candidates are stably sorted by start offset. Scanning left to right, a
    candidate that does not overlap the last kept one is kept. An overlapping
    candidate replaces the last kept one only if it extends further and is
    strictly longer; otherwise it is dropped. Equal-length ties therefore go
    to the earlier start, then to the earlier candidate in input order.
    """
    ordered = sorted(candidates, key=lambda c: c.source_span.start)
    kept: list[_S] = []
    last_end = -1
    for candidate in ordered:
        span = candidate.source_span
        if span.start >= last_end:
            kept.append(candidate)
            last_end = span.end
        elif span.end > last_end and span.length > kept[-1].source_span.length:
            kept[-1] = candidate
            last_end = span.end
    return kept


def build_suggestion(recognizer: Recognizer, match: re.Match[str]) -> Suggestion | None:
    """Convert one match to a Suggestion, or None if it names no known ability or skill."""
    caps = recognizer.capture(match)
    ability = skill = None

    if recognizer.kind is not SuggestionKind.ATTACK:
        if caps.ability:
            ability = canonical_ability(caps.ability)
        if caps.skill:
            skill = normalize_skill(caps.skill)
        if caps.name:
            if canonical_ability(caps.name):
                ability = canonical_ability(caps.name)
            elif recognizer.kind is SuggestionKind.SKILL and is_skill(caps.name):
                skill = normalize_skill(caps.name)
        if ability is None and skill is not None:
            ability = skill_ability(skill)
        if ability is None:
            logger.debug("Discarding %s match %r: no ability or skill", recognizer.name, match.group(0))
            return None

    return Suggestion(
        kind=recognizer.kind,
        related_ability=ability,
        skill=skill,
        difficulty_class=caps.dc,
        target_armor_class=caps.ac,
        damage_expression=caps.damage,
        attack_mode=caps.mode,
        source_span=_span(match),
        description=match.group(0),
        recognizer=recognizer.name,
    )


def extract_suggestions(text: str, recognizers: Sequence[Recognizer] = RECOGNIZERS) -> list[Suggestion]:
    """Find every implied check in ``text``, most specific match per span, in reading order."""
    if not text:
        return []
    candidates: list[Suggestion] = []
    for recognizer in recognizers:
        for match in recognizer.pattern.finditer(text):
            suggestion = build_suggestion(recognizer, match)
            if suggestion is not None:
                candidates.append(suggestion)
    return resolve_overlaps(candidates)


def find_rule_references(
    text: str, terms: Sequence[tuple[re.Pattern[str], str]] = RULE_TERMS
) -> list[RuleReference]:
    """Locate rules-glossary terms for tooltip rendering, longest match per span."""
    if not text:
        return []
    candidates = [
        RuleReference(rule_type=rule_type, term=match.group(0), source_span=_span(match))
        for pattern, rule_type in terms
        for match in pattern.finditer(text)
    ]
    return resolve_overlaps(candidates)
