from __future__ import annotations

from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

from rpg_rules.mechanics.ability_scores import ABILITY_NAMES
from rpg_rules.mechanics.dice import DiceExpression, parse


def _dice(value):
    if isinstance(value, str):
        return parse(value)
    return value


# Dice strings in content files are parsed here, so bad notation fails at load time.
Dice = Annotated[DiceExpression, BeforeValidator(_dice)]


class WeaponType(str, Enum):
    MELEE = "melee"
    RANGED = "ranged"


class WeaponCategory(str, Enum):
    SIMPLE = "simple"
    MARTIAL = "martial"


class SaveEffect(str, Enum):
    HALF = "half"
    NONE = "none"


class AreaShape(str, Enum):
    CONE = "cone"
    CUBE = "cube"
    CYLINDER = "cylinder"
    LINE = "line"
    SPHERE = "sphere"


class Scaling(BaseModel):
    model_config = ConfigDict(frozen=True)

    per_level: Optional[Dice] = None
    per_character_level: Optional[Dice] = None


class WeaponDamage(BaseModel):
    model_config = ConfigDict(frozen=True)

    dice: Dice
    damage_type: str = "bludgeoning"


class WeaponProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: WeaponType = WeaponType.MELEE
    category: WeaponCategory = WeaponCategory.SIMPLE
    damage: WeaponDamage
    properties: frozenset[str] = Field(default_factory=frozenset)
    required_stat: str = "strength"

    @field_validator("required_stat")
    @classmethod
    def _physical_stat(cls, v: str) -> str:
        if v not in ("strength", "dexterity"):
            raise ValueError(f"Weapons must use strength or dexterity, got '{v}'")
        return v

    @property
    def is_finesse(self) -> bool:
        return "finesse" in self.properties


class SpellDamage(BaseModel):
    model_config = ConfigDict(frozen=True)

    dice: Dice
    damage_type: str
    scaling: Optional[Scaling] = None
    add_modifier: bool = False


class SpellHealing(BaseModel):
    model_config = ConfigDict(frozen=True)

    dice: Dice
    bonus: int = 0
    scaling: Optional[Scaling] = None


class SavingThrow(BaseModel):
    model_config = ConfigDict(frozen=True)

    ability: str
    effect: SaveEffect = SaveEffect.NONE

    @field_validator("ability")
    @classmethod
    def _known_ability(cls, v: str) -> str:
        if v not in ABILITY_NAMES:
            raise ValueError(f"Unknown saving throw ability '{v}'")
        return v


class AreaOfEffect(BaseModel):
    model_config = ConfigDict(frozen=True)

    shape: AreaShape
    size_ft: int = Field(gt=0)


class SpellProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    level: int = Field(default=0, ge=0, le=9)
    damage: Optional[SpellDamage] = None
    healing: Optional[SpellHealing] = None
    saving_throw: Optional[SavingThrow] = None
    area_of_effect: Optional[AreaOfEffect] = None
    auto_hit: bool = False
    required_stat: str = "intelligence"

    @field_validator("required_stat")
    @classmethod
    def _mental_stat(cls, v: str) -> str:
        if v not in ("intelligence", "wisdom", "charisma"):
            raise ValueError(f"Spells must use a mental stat, got '{v}'")
        return v

    @property
    def is_cantrip(self) -> bool:
        return self.level == 0

    @property
    def needs_attack_roll(self) -> bool:
        return self.damage is not None and self.saving_throw is None and not self.auto_hit


UNARMED_STRIKE = WeaponProfile(
    name="Unarmed Strike",
    type=WeaponType.MELEE,
    damage=WeaponDamage(dice=DiceExpression(1, 1), damage_type="bludgeoning"),
    required_stat="strength",
)
