"""Typer CLI application."""
from __future__ import annotations

import logging
import random
from typing import List, Optional

import typer
from rich.logging import RichHandler

from rpg_rules.mechanics.ability_scores import canonical_ability
from rpg_rules.mechanics.dice import MalformedDiceNotation, Rng

app = typer.Typer(
    name="rpg-rules",
    help="Turn tabletop narrative into dice rolls using 5e rules",
    no_args_is_help=True,
)


def _rng(seed: Optional[int]) -> Rng | None:
    return random.Random(seed).random if seed is not None else None


def _parse_stats(stats: list[str]) -> dict[str, int]:
    """Parse ['str=16', 'wisdom=14'] into {'strength': 16, 'wisdom': 14}."""
    parsed: dict[str, int] = {}
    for item in stats:
        name, sep, value = item.partition("=")
        ability = canonical_ability(name)
        if not sep or ability is None or not value.strip().lstrip("-").isdigit():
            raise typer.BadParameter(f"Expected ability=score, got {item!r}", param_hint="--stat")
        parsed[ability] = int(value)
    return parsed


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show engine logging"),
) -> None:
    """Rules engine for narrative-driven tabletop play."""
    from rpg_rules.config import load_settings

    level = "DEBUG" if verbose else load_settings().log_level
    logging.basicConfig(level=level, format="%(message)s", handlers=[RichHandler(show_path=False)])


@app.command()
def suggest(text: str = typer.Argument(..., help="Narrative text to scan")) -> None:
    """List the checks, saves and attacks implied by narrative text."""
    from rpg_rules.cli.display import Display
    from rpg_rules.engine.app import default_engine

    Display().show_suggestions(text, default_engine().extract_suggestions(text))


@app.command()
def roll(
    expression: str = typer.Argument(..., help="Dice notation such as 2d6+3"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for repeatable rolls"),
) -> None:
    """Roll dice notation."""
    from rpg_rules.cli.display import Display
    from rpg_rules.engine.app import roll_dice

    display = Display()
    try:
        result = roll_dice(expression, _rng(seed))
    except MalformedDiceNotation as e:
        display.show_error(str(e))
        raise typer.Exit(code=1)
    display.show_dice_roll(result)


@app.command()
def resolve(
    text: str = typer.Argument(..., help="Action such as 'attack with my longsword against AC 15'"),
    stat: List[str] = typer.Option([], "--stat", "-s", help="Ability score as ability=score, repeatable"),
    level: int = typer.Option(1, "--level", "-l", min=1, max=20, help="Character level"),
    weapon: Optional[str] = typer.Option(None, "--weapon", "-w", help="Equipped weapon"),
    proficiency: Optional[int] = typer.Option(None, "--proficiency", "-p", help="Proficiency bonus override"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for repeatable rolls"),
) -> None:
    """Resolve a free-text action for a character."""
    from rpg_rules.cli.display import Display
    from rpg_rules.engine.app import default_engine

    character = {"stats": _parse_stats(stat), "level": level, "equipped_weapon": weapon}
    outcome = default_engine().resolve_free_action(text, character, proficiency_bonus=proficiency, rng=_rng(seed))
    Display().show_outcome(outcome)


@app.command()
def catalog() -> None:
    """List the weapons and spells the engine knows."""
    from rpg_rules.cli.display import Display
    from rpg_rules.engine.app import default_engine

    Display().show_catalog(default_engine().catalog)


@app.command()
def rules(text: str = typer.Argument(..., help="Narrative text to scan")) -> None:
    """Find rules-glossary terms in narrative text."""
    from rpg_rules.cli.display import Display
    from rpg_rules.engine.app import default_engine

    Display().show_rule_references(default_engine().find_rule_references(text))


if __name__ == "__main__":
    app()
