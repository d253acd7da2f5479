from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rpg_rules.mechanics.ability_scores import canonical_ability
from rpg_rules.mechanics.skills import normalize_skill


class AbilityScores(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    strength: int = 10
    dexterity: int = 10
    constitution: int = 10
    intelligence: int = 10
    wisdom: int = 10
    charisma: int = 10


class Character(BaseModel):
    """Per-call character snapshot. Never mutated by the engine."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    stats: AbilityScores = Field(default_factory=AbilityScores)
    level: int = Field(default=1, ge=1, le=20)
    proficiency_bonus: Optional[int] = None
    skill_proficiencies: frozenset[str] = Field(default_factory=frozenset)
    saving_throw_proficiencies: frozenset[str] = Field(default_factory=frozenset)
    equipped_weapon: Optional[str] = None

    @field_validator("stats", mode="before")
    @classmethod
    def _drop_missing_scores(cls, v: Any) -> Any:
        # Absent or null scores fall back to the model default of 10
        if isinstance(v, Mapping):
            return {k: s for k, s in v.items() if s is not None}
        return v

    @field_validator("skill_proficiencies", mode="before")
    @classmethod
    def _normalize_skills(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple, set, frozenset)):
            return frozenset(normalize_skill(s) for s in v)
        return v

    @field_validator("saving_throw_proficiencies", mode="before")
    @classmethod
    def _normalize_saves(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple, set, frozenset)):
            return frozenset(canonical_ability(s) or s.lower() for s in v)
        return v

    def is_proficient_in_skill(self, skill: str) -> bool:
        return normalize_skill(skill) in self.skill_proficiencies

    def is_proficient_in_save(self, ability: str) -> bool:
        return ability in self.saving_throw_proficiencies


CharacterLike = Union[Character, Mapping[str, Any]]


def coerce_character(character: CharacterLike | None) -> Character:
    """Accept a Character or a plain mapping such as {"stats": {...}, "level": 5}."""
    if character is None:
        return Character()
    if isinstance(character, Character):
        return character
    return Character.model_validate(character)
