"""Read-only view models for a stepper widget and the navigation bar.

Rendering layers (console driver, web templates, desktop widgets) consume
these instead of re-deriving status rules from the engine state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from planwizard.engine import WizardEngine


class StepStatus(str, Enum):
    COMPLETED = "completed"
    ACTIVE = "active"
    PENDING = "pending"


class Direction(str, Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


@dataclass(frozen=True)
class StepperItem:
    index: int
    id: str
    label: str
    icon: str
    is_optional: bool
    status: StepStatus
    clickable: bool
    connector_filled: bool  # line towards the next step; unused on the last item


@dataclass(frozen=True)
class NavigationControls:
    show_prev: bool
    show_skip: bool
    next_enabled: bool
    next_is_finish: bool


def step_status(engine: WizardEngine, index: int) -> StepStatus:
    """Completed wins over active: a revisited step still shows as done."""
    if index in engine.completed_steps:
        return StepStatus.COMPLETED
    if index == engine.current_step:
        return StepStatus.ACTIVE
    return StepStatus.PENDING


def is_step_clickable(engine: WizardEngine, index: int) -> bool:
    """A stepper dot is reachable when already completed or not ahead of the current step."""
    if not 0 <= index < engine.total_steps:
        return False
    return index in engine.completed_steps or index <= engine.current_step


def build_stepper(engine: WizardEngine) -> list[StepperItem]:
    completed = engine.completed_steps
    return [
        StepperItem(
            index=i,
            id=step.id,
            label=step.label,
            icon=step.icon,
            is_optional=step.is_optional,
            status=step_status(engine, i),
            clickable=is_step_clickable(engine, i),
            connector_filled=i in completed,
        )
        for i, step in enumerate(engine.steps)
    ]


def step_caption(engine: WizardEngine) -> str:
    return f"Etape {engine.current_step + 1} sur {engine.total_steps} - {engine.current_step_data.label}"


def build_navigation(engine: WizardEngine, can_skip: bool = True) -> NavigationControls:
    """State of the Previous / Skip / Next buttons.

    Args:
        engine: Wizard engine
        can_skip: Whether the host offers bulk-skip at all
    """
    return NavigationControls(
        show_prev=not engine.is_first_step,
        show_skip=can_skip and engine.is_optional_step,
        next_enabled=engine.can_proceed,
        next_is_finish=engine.is_last_step,
    )


def click_step(engine: WizardEngine, index: int) -> Direction | None:
    """Apply a stepper click.

    Returns:
        Transition direction, or None when the step is not clickable
    """
    if not is_step_clickable(engine, index):
        return None
    direction = Direction.FORWARD if index > engine.current_step else Direction.BACKWARD
    engine.go_to_step(index)
    return direction
