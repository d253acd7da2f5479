"""Rich terminal display for suggestions, rolls and catalog listings."""
from __future__ import annotations

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from rpg_rules.mechanics.dice import DiceResult
from rpg_rules.models.outcome import Critical, RollOutcome
from rpg_rules.models.suggestion import RuleReference, Suggestion
from rpg_rules.rules.catalog import RulesCatalog

console = Console()


def _signed(value: int) -> str:
    return f"+{value}" if value >= 0 else str(value)


class Display:
    def __init__(self, width: int = 80, show_dice: bool = True):
        self.console = console
        self.width = width
        self.show_dice = show_dice

    def show_suggestions(self, text: str, suggestions: list[Suggestion]) -> None:
        if not suggestions:
            self.console.print("[dim]No checks suggested.[/dim]")
            return
        table = Table(title="Suggested Rolls", box=box.SIMPLE_HEAVY, border_style="cyan")
        table.add_column("At", justify="right")
        table.add_column("Kind", style="bold")
        table.add_column("Ability")
        table.add_column("Skill")
        table.add_column("DC/AC", justify="right")
        table.add_column("Text")
        for s in suggestions:
            threshold = s.difficulty_class if s.difficulty_class is not None else s.target_armor_class
            table.add_row(
                str(s.source_span.start),
                s.kind.value,
                (s.related_ability or "-").title(),
                (s.skill or "-").title(),
                "-" if threshold is None else str(threshold),
                s.description,
            )
        self.console.print(table)

    def show_rule_references(self, references: list[RuleReference]) -> None:
        if not references:
            self.console.print("[dim]No rules terms found.[/dim]")
            return
        table = Table(title="Rules Terms", box=box.SIMPLE)
        table.add_column("At", justify="right")
        table.add_column("Term", style="bold")
        table.add_column("Rule")
        for ref in references:
            table.add_row(str(ref.source_span.start), ref.term, ref.rule_type)
        self.console.print(table)

    def show_dice_roll(self, result: DiceResult, purpose: str = "") -> None:
        if not self.show_dice:
            return
        roll_str = ", ".join(str(r) for r in result.rolls)
        mod_str = f" {_signed(result.modifier)}" if result.modifier else ""
        label = f" ({purpose})" if purpose else ""
        self.console.print(f"  Roll {result.expression}{label}: [{roll_str}]{mod_str} = [bold]{result.total}[/bold]")

    def show_outcome(self, outcome: RollOutcome) -> None:
        content = Text()
        content.append(f"{outcome.description}\n", style="italic")

        if outcome.rolled:
            content.append(f"d20: {outcome.die_roll} {_signed(outcome.modifier)} = ", style="bold")
            content.append(f"{outcome.total}", style="bold yellow")
            if outcome.critical is Critical.SUCCESS:
                content.append("  CRITICAL!", style="bold green")
            elif outcome.critical is Critical.FAILURE:
                content.append("  FUMBLE", style="bold red")
            if outcome.success is True:
                content.append("  success", style="green")
            elif outcome.success is False:
                content.append("  failure", style="red")
            content.append("\n")

        if outcome.ability:
            label = outcome.ability.title()
            if outcome.skill:
                label += f" ({outcome.skill.title()})"
            content.append(f"Ability: {label}\n")
        if outcome.weapon_name:
            content.append(f"Weapon: {outcome.weapon_name}\n")
        if outcome.spell_name:
            content.append(f"Spell: {outcome.spell_name} (slot {outcome.spell_slot_level})\n")
        if outcome.save_dc is not None:
            content.append(
                f"Save: DC {outcome.save_dc} {(outcome.save_ability or '').title()} ({outcome.save_effect})\n"
            )
        if outcome.damage is not None:
            rolls = ", ".join(str(r) for r in outcome.damage_rolls)
            content.append(
                f"Damage: [{rolls}] {_signed(outcome.damage_bonus)} = {outcome.damage} {outcome.damage_type or ''}\n",
                style="red",
            )
        if outcome.healing is not None:
            rolls = ", ".join(str(r) for r in outcome.healing_rolls)
            content.append(f"Healing: [{rolls}] = {outcome.healing}\n", style="green")
        for note in outcome.notes:
            content.append(f"Note: {note}\n", style="dim")

        title = outcome.kind.value.replace("_", " ").title()
        self.console.print(Panel(content, title=title, border_style="yellow", box=box.ROUNDED, width=self.width))

    def show_catalog(self, catalog: RulesCatalog) -> None:
        weapons = Table(title="Weapons", box=box.SIMPLE_HEAVY, border_style="red")
        weapons.add_column("Name", style="bold")
        weapons.add_column("Type")
        weapons.add_column("Damage")
        weapons.add_column("Stat")
        weapons.add_column("Properties")
        for w in sorted(catalog.weapons.values(), key=lambda p: p.name):
            weapons.add_row(
                w.name,
                f"{w.category.value} {w.type.value}",
                f"{w.damage.dice} {w.damage.damage_type}",
                w.required_stat[:3].upper(),
                ", ".join(sorted(w.properties)) or "-",
            )
        self.console.print(weapons)

        spells = Table(title="Spells", box=box.SIMPLE_HEAVY, border_style="magenta")
        spells.add_column("Name", style="bold")
        spells.add_column("Level", justify="right")
        spells.add_column("Effect")
        spells.add_column("Stat")
        for s in sorted(catalog.spells.values(), key=lambda p: (p.level, p.name)):
            effects = []
            if s.damage:
                effects.append(f"{s.damage.dice} {s.damage.damage_type}")
            if s.healing:
                effects.append(f"heals {s.healing.dice}")
            if s.saving_throw:
                effects.append(f"{s.saving_throw.ability[:3].upper()} save")
            spells.add_row(s.name, "cantrip" if s.is_cantrip else str(s.level), "; ".join(effects), s.required_stat[:3].upper())
        self.console.print(spells)

    def show_error(self, message: str) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {message}")
