"""Dice rolling engine: pure math, no I/O."""
from __future__ import annotations

import random
import re
from dataclasses import dataclass, field
from typing import Callable, Iterable

# Pattern: NdM, optional +/-X
_DICE_RE = re.compile(r"^(\d+)d(\d+)([+-]\d+)?$")

Rng = Callable[[], float]


class MalformedDiceNotation(ValueError):
    """Raised when a string does not follow the NdM[+/-K] grammar."""


@dataclass(frozen=True)
class DiceExpression:
    count: int
    sides: int
    modifier: int = 0

    def __post_init__(self) -> None:
        if self.count <= 0 or self.sides <= 0:
            raise MalformedDiceNotation(
                f"Dice count and sides must be positive: {self.count}d{self.sides}"
            )

    def __str__(self) -> str:
        if self.modifier:
            return f"{self.count}d{self.sides}{self.modifier:+d}"
        return f"{self.count}d{self.sides}"

    def scaled(self, times: int) -> DiceExpression:
        """Multiply dice count and modifier, e.g. '1d4+1' x3 -> '3d4+3'."""
        return DiceExpression(self.count * times, self.sides, self.modifier * times)


@dataclass
class DiceResult:
    expression: str
    rolls: list[int] = field(default_factory=list)
    modifier: int = 0
    total: int = 0


def parse(expression: str) -> DiceExpression:
    """Parse '2d6+3' into a DiceExpression."""
    m = _DICE_RE.match(expression.strip()) if isinstance(expression, str) else None
    if not m:
        raise MalformedDiceNotation(f"Invalid dice expression: {expression!r}")
    count = int(m.group(1))
    sides = int(m.group(2))
    modifier = int(m.group(3)) if m.group(3) else 0
    return DiceExpression(count, sides, modifier)


def roll_die(sides: int, rng: Rng | None = None) -> int:
    """Roll a single die: floor(rng() * sides) + 1."""
    source = rng or random.random
    return int(source() * sides) + 1


def roll(expr: DiceExpression, rng: Rng | None = None) -> DiceResult:
    """Roll every die in the expression and add the modifier once."""
    rolls = [roll_die(expr.sides, rng) for _ in range(expr.count)]
    return DiceResult(
        expression=str(expr),
        rolls=rolls,
        modifier=expr.modifier,
        total=sum(rolls) + expr.modifier,
    )


def roll_expression(expression: str, rng: Rng | None = None) -> DiceResult:
    """Roll dice from an expression like '2d6+3' or '1d20'."""
    result = roll(parse(expression), rng)
    result.expression = expression
    return result


def roll_d20(modifier: int = 0, rng: Rng | None = None) -> DiceResult:
    """Convenience: roll 1d20 + modifier."""
    r = roll(DiceExpression(1, 20, 0), rng)
    r.modifier = modifier
    r.total = r.rolls[0] + modifier
    return r


def roll_pool(
    expressions: Iterable[DiceExpression],
    rng: Rng | None = None,
    double_dice: bool = False,
) -> DiceResult:
    """Roll several expressions as one pool.

    With ``double_dice`` each expression's dice are rolled a second time;
    modifiers are still added only once.
    """
    exprs = list(expressions)
    rolls: list[int] = []
    modifier = 0
    for expr in exprs:
        rolls.extend(roll(expr, rng).rolls)
        if double_dice:
            rolls.extend(roll(expr, rng).rolls)
        modifier += expr.modifier
    return DiceResult(
        expression=" + ".join(str(e) for e in exprs),
        rolls=rolls,
        modifier=modifier,
        total=sum(rolls) + modifier,
    )
