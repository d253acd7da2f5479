from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from rpg_rules.models.suggestion import Suggestion


class ActionKind(str, Enum):
    SKILL_CHECK = "skill_check"
    SAVING_THROW = "saving_throw"
    ATTACK_ROLL = "attack_roll"
    WEAPON_ATTACK = "weapon_attack"
    SPELL_CAST = "spell_cast"
    UNRESOLVED = "unresolved"


class Critical(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class RollOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ActionKind
    description: str = ""
    suggestion: Optional[Suggestion] = None

    # d20 portion; die_roll is None when no d20 was rolled (save spells, healing, unresolved)
    die_roll: Optional[int] = None
    modifier: int = 0
    total: int = 0
    success: Optional[bool] = None
    critical: Optional[Critical] = None

    ability: Optional[str] = None
    skill: Optional[str] = None
    weapon_name: Optional[str] = None
    spell_name: Optional[str] = None
    spell_slot_level: Optional[int] = None

    damage: Optional[int] = None
    damage_rolls: tuple[int, ...] = ()
    damage_bonus: int = 0
    damage_type: Optional[str] = None

    healing: Optional[int] = None
    healing_rolls: tuple[int, ...] = ()

    save_dc: Optional[int] = None
    save_ability: Optional[str] = None
    save_effect: Optional[str] = None

    notes: tuple[str, ...] = ()

    @property
    def rolled(self) -> bool:
        return self.die_roll is not None
