"""Engine bootstrap: wires settings, catalog and resolver together."""
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from rpg_rules.config import EngineSettings, load_settings
from rpg_rules.engine.resolver import ActionResolver
from rpg_rules.mechanics import dice
from rpg_rules.mechanics.dice import DiceExpression, DiceResult, Rng
from rpg_rules.models.character import CharacterLike
from rpg_rules.models.outcome import RollOutcome
from rpg_rules.models.suggestion import RuleReference, Suggestion
from rpg_rules.narrative import extractor
from rpg_rules.rules.catalog import RulesCatalog

logger = logging.getLogger(__name__)


class RulesEngine:
    """Main entry point: text in, suggestions and roll outcomes out."""

    def __init__(
        self,
        settings: EngineSettings | None = None,
        catalog: RulesCatalog | None = None,
    ):
        self.settings = settings or EngineSettings()
        self.catalog = catalog or RulesCatalog.from_content(self.settings.catalog_dir)
        self.resolver = ActionResolver(self.catalog, self.settings)

    @classmethod
    def from_config(cls, config_path: Path | None = None) -> RulesEngine:
        return cls(load_settings(config_path))

    def extract_suggestions(self, text: str) -> list[Suggestion]:
        return extractor.extract_suggestions(text)

    def find_rule_references(self, text: str) -> list[RuleReference]:
        return extractor.find_rule_references(text)

    def resolve_suggestion(
        self,
        suggestion: Suggestion,
        character: CharacterLike | None = None,
        rng: Rng | None = None,
        proficient: bool | None = None,
        target_armor_class: int | None = None,
    ) -> RollOutcome:
        return self.resolver.resolve_suggestion(
            suggestion,
            character,
            rng=rng,
            proficient=proficient,
            target_armor_class=target_armor_class,
        )

    def resolve_free_action(
        self,
        text: str,
        character: CharacterLike | None = None,
        proficiency_bonus: int | None = None,
        rng: Rng | None = None,
    ) -> RollOutcome:
        return self.resolver.resolve_free_action(text, character, proficiency_bonus=proficiency_bonus, rng=rng)


@lru_cache(maxsize=1)
def default_engine() -> RulesEngine:
    """Engine configured from config.toml, built on first use."""
    engine = RulesEngine.from_config()
    logger.debug("Default engine ready with %d weapons, %d spells", len(engine.catalog.weapons), len(engine.catalog.spells))
    return engine


# -- Module-level API --


def extract_suggestions(text: str) -> list[Suggestion]:
    return default_engine().extract_suggestions(text)


def find_rule_references(text: str) -> list[RuleReference]:
    return default_engine().find_rule_references(text)


def resolve_suggestion(
    suggestion: Suggestion,
    character: CharacterLike | None = None,
    rng: Rng | None = None,
    proficient: bool | None = None,
    target_armor_class: int | None = None,
) -> RollOutcome:
    return default_engine().resolve_suggestion(
        suggestion, character, rng=rng, proficient=proficient, target_armor_class=target_armor_class
    )


def resolve_free_action(
    text: str,
    character: CharacterLike | None = None,
    proficiency_bonus: int | None = None,
    rng: Rng | None = None,
) -> RollOutcome:
    return default_engine().resolve_free_action(text, character, proficiency_bonus=proficiency_bonus, rng=rng)


def parse_dice(text: str) -> DiceExpression:
    """Parse 'NdM[+/-K]'. Raises MalformedDiceNotation on anything else."""
    return dice.parse(text)


def roll_dice(expression: DiceExpression | str, rng: Rng | None = None) -> DiceResult:
    if isinstance(expression, str):
        return dice.roll_expression(expression, rng)
    return dice.roll(expression, rng)
