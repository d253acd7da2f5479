from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SuggestionKind(str, Enum):
    SKILL = "skill"
    SAVE = "save"
    ATTACK = "attack"


class SourceSpan(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0)
    length: int = Field(ge=0)

    @property
    def end(self) -> int:
        return self.start + self.length

    def overlaps(self, other: SourceSpan) -> bool:
        return self.start < other.end and other.start < self.end


class Suggestion(BaseModel):
    """A check implied by narrative text, located by its span in that text."""

    model_config = ConfigDict(frozen=True)

    kind: SuggestionKind
    related_ability: Optional[str] = None
    skill: Optional[str] = None
    difficulty_class: Optional[int] = None
    target_armor_class: Optional[int] = None
    damage_expression: Optional[str] = None
    attack_mode: Optional[str] = None
    source_span: SourceSpan
    description: str = ""
    recognizer: str = ""


class RuleReference(BaseModel):
    """A rules-glossary term found in narrative text, for tooltip rendering."""

    model_config = ConfigDict(frozen=True)

    rule_type: str
    term: str
    source_span: SourceSpan
