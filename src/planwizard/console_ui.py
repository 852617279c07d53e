"""Console UI for the planwizard CLI.

This module only renders view models and collects input. Navigation rules
live in the engine and in planwizard.stepper.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from planwizard.definitions import WizardDefinition
from planwizard.stepper import NavigationControls, StepperItem, StepStatus

_STATUS_STYLES = {
    StepStatus.COMPLETED: "green",
    StepStatus.ACTIVE: "bold cyan",
    StepStatus.PENDING: "dim",
}


@dataclass
class ConsoleUI:
    """Rich-backed console helpers."""

    console: Console = field(default_factory=Console)
    input_fn: Callable[[str], str] = input

    def print(self, text: str = "") -> None:
        self.console.print(text)

    def print_header(self, text: str) -> None:
        self.console.print(Panel(f"[bold cyan]{escape(text)}[/bold cyan]"))

    def print_success(self, text: str) -> None:
        self.console.print(f"[bold green]OK[/bold green] {escape(text)}")

    def print_error(self, text: str) -> None:
        self.console.print(f"[bold red]ERROR[/bold red] {escape(text)}")

    def print_warning(self, text: str) -> None:
        self.console.print(f"[bold yellow]![/bold yellow] {escape(text)}")

    def render_steps_table(self, definition: WizardDefinition) -> None:
        table = Table(title=definition.name)
        table.add_column("#", justify="right")
        table.add_column("Id", style="cyan")
        table.add_column("Label")
        table.add_column("Kind")
        table.add_column("Gate")

        for i, step in enumerate(definition.steps, 1):
            table.add_row(
                str(i),
                step.id,
                f"{step.icon} {step.label}".strip(),
                "optional" if step.is_optional else "required",
                "yes" if step.validate is not None else "-",
            )

        self.console.print(table)
        if definition.description:
            self.console.print(definition.description)

    def render_stepper(self, items: list[StepperItem], caption: str, progress: int) -> None:
        line = Text()
        for item in items:
            marker = "x" if item.status is StepStatus.COMPLETED else str(item.index + 1)
            label = f"[{marker}] {item.label}"
            if item.is_optional:
                label += " (opt)"
            line.append(label, style=_STATUS_STYLES[item.status])
            if item.index < len(items) - 1:
                line.append(" == " if item.connector_filled else " -- ")

        self.console.print(line)
        self.console.print(f"{escape(caption)}  ({progress}%)")

    def render_controls(self, controls: NavigationControls) -> None:
        parts = []
        if controls.show_prev:
            parts.append("p=previous")
        if controls.show_skip:
            parts.append("s=skip optional")
        next_label = "finish" if controls.next_is_finish else "next"
        if controls.next_enabled:
            parts.append(f"n={next_label}")
        else:
            parts.append(f"n={next_label} (blocked)")
        parts.extend(["g N=go to", "c=confirm", "r=reset", "q=quit"])
        self.console.print("  ".join(parts))

    def prompt_command(self) -> str:
        return self.input_fn("> ").strip()
