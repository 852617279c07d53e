"""Wizard Engine - step sequencing for multi-step data entry.

The engine owns the navigation state of one wizard session: which step is
current and which steps were passed by a successful forward move. What a
"valid" step means is injected by the caller as validator closures; the
engine never sees the data the steps edit.

Navigation never raises. Requests that cannot be honoured (out-of-range
jumps, forward moves blocked by the validation gate, anything while the
engine is locked) are ignored and logged at VERBOSE level.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from planwizard.core.config import ConfigResolver
from planwizard.core.diagnostics import build_envelope
from planwizard.core.errors import StepDefinitionError
from planwizard.core.events import EventBus
from planwizard.core.logging import get_logger
from planwizard.gate import can_proceed
from planwizard.skip_planner import COMPLETED, plan_skip
from planwizard.steps import StepDescriptor, StepRegistry

_logger = get_logger(__name__)

EVENT_STEP_CHANGED = "wizard.step_changed"
EVENT_STEP_COMPLETED = "wizard.step_completed"
EVENT_COMPLETED = "wizard.completed"
EVENT_RESET = "wizard.reset"


@dataclass(frozen=True)
class WizardState:
    """Point-in-time copy of the engine's navigation state."""

    current_step: int
    completed_steps: frozenset[int]
    has_completed: bool = False


class WizardEngine:
    """Navigate an ordered list of steps.

    Example:
        engine = WizardEngine(PLANNING_WIZARD_STEPS, on_complete=save_plan)
        if engine.can_proceed:
            engine.next_step()
        engine.skip_optional_steps()
    """

    def __init__(
        self,
        steps: Iterable[StepDescriptor],
        initial_step: int = 0,
        on_complete: Callable[[], None] | None = None,
        *,
        lock_on_complete: bool = False,
        event_bus: EventBus | None = None,
    ) -> None:
        """Initialize wizard engine.

        Args:
            steps: Ordered steps with unique ids (at least one)
            initial_step: Index the wizard starts at and returns to on reset()
            on_complete: Called once per completion event
            lock_on_complete: Ignore all navigation after completion until reset()
            event_bus: Optional bus receiving wizard.* events

        Raises:
            StepDefinitionError: If steps are empty/duplicated or initial_step
                is out of range
        """
        self._registry = steps if isinstance(steps, StepRegistry) else StepRegistry(steps)
        if not self._registry.contains_index(initial_step):
            raise StepDefinitionError(
                f"initial_step {initial_step} is out of range for {len(self._registry)} steps",
                f"Use a value between 0 and {len(self._registry) - 1}",
            )

        self._initial_step = initial_step
        self._on_complete = on_complete
        self._lock_on_complete = lock_on_complete
        self._event_bus = event_bus

        self._current_step = initial_step
        self._completed: set[int] = set()
        self._has_completed = False

    @classmethod
    def from_config(
        cls,
        steps: Iterable[StepDescriptor],
        resolver: ConfigResolver,
        on_complete: Callable[[], None] | None = None,
        event_bus: EventBus | None = None,
    ) -> WizardEngine:
        """Build an engine from wizard.initial_step and wizard.lock_on_complete."""
        initial_step = resolver.resolve_int("wizard.initial_step", default=0)
        lock = resolver.resolve_bool("wizard.lock_on_complete", default=False)
        _logger.debug(f"Engine config: initial_step={initial_step} lock_on_complete={lock}")
        return cls(
            steps,
            initial_step=initial_step,
            on_complete=on_complete,
            lock_on_complete=lock,
            event_bus=event_bus,
        )

    # -- read-only projections -------------------------------------------

    @property
    def steps(self) -> tuple[StepDescriptor, ...]:
        return self._registry.steps

    @property
    def current_step(self) -> int:
        return self._current_step

    @property
    def current_step_data(self) -> StepDescriptor:
        return self._registry[self._current_step]

    @property
    def total_steps(self) -> int:
        return len(self._registry)

    @property
    def initial_step(self) -> int:
        return self._initial_step

    def index_of(self, step_id: str) -> int | None:
        """Index of the step with ``step_id``, or None when there is none."""
        return self._registry.index_of(step_id)

    @property
    def is_first_step(self) -> bool:
        return self._current_step == 0

    @property
    def is_last_step(self) -> bool:
        return self._current_step == self.total_steps - 1

    @property
    def is_optional_step(self) -> bool:
        return self.current_step_data.is_optional

    @property
    def can_proceed(self) -> bool:
        """Current step's validation gate, evaluated on every access."""
        return can_proceed(self.current_step_data)

    @property
    def progress(self) -> int:
        """Position-based percentage, rounded half up: (current + 1) / total."""
        total = self.total_steps
        return (200 * (self._current_step + 1) + total) // (2 * total)

    @property
    def completed_steps(self) -> frozenset[int]:
        return frozenset(self._completed)

    @property
    def has_completed(self) -> bool:
        """True once a completion event fired since construction or reset()."""
        return self._has_completed

    @property
    def is_locked(self) -> bool:
        return self._lock_on_complete and self._has_completed

    def snapshot(self) -> WizardState:
        return WizardState(
            current_step=self._current_step,
            completed_steps=self.completed_steps,
            has_completed=self._has_completed,
        )

    # -- navigation ------------------------------------------------------

    def next_step(self) -> None:
        """Complete the current step and move forward.

        Blocked (no state change, no callback) while can_proceed is False.
        On the last step the completion callback fires and the pointer stays.
        """
        if self._ignored_while_locked("next_step"):
            return
        if not self.can_proceed:
            _logger.verbose(f"next_step blocked by validation gate at '{self.current_step_data.id}'")
            return

        self.mark_step_complete(self._current_step)

        if self.is_last_step:
            self._complete("next_step")
        else:
            self._move_to(min(self._current_step + 1, self.total_steps - 1), "next_step")

    def prev_step(self) -> None:
        """Move back one step. Never gated, never touches completed_steps."""
        if self._ignored_while_locked("prev_step"):
            return
        self._move_to(max(self._current_step - 1, 0), "prev_step")

    def go_to_step(self, step: int) -> None:
        """Jump to ``step``; out-of-range targets are ignored.

        Which steps a user may jump to is the caller's policy (see
        planwizard.stepper.is_step_clickable).
        """
        if self._ignored_while_locked("go_to_step"):
            return
        if not self._registry.contains_index(step):
            _logger.verbose(f"go_to_step({step}) ignored: valid range is 0..{self.total_steps - 1}")
            return
        self._move_to(step, "go_to_step")

    def skip_optional_steps(self) -> None:
        """Jump to the next required step, or complete if none remain ahead."""
        if self._ignored_while_locked("skip_optional_steps"):
            return

        target = plan_skip(self.steps, self._current_step)
        if target is COMPLETED:
            self._complete("skip_optional_steps")
        else:
            self._move_to(target, "skip_optional_steps")

    def mark_step_complete(self, step: int) -> None:
        """Record ``step`` as completed. Idempotent; out-of-range is ignored."""
        if not self._registry.contains_index(step):
            _logger.verbose(f"mark_step_complete({step}) ignored: out of range")
            return
        if step in self._completed:
            return

        self._completed.add(step)
        step_id = self._registry[step].id
        _logger.debug(f"Step {step} ('{step_id}') marked complete")
        self._publish(EVENT_STEP_COMPLETED, "mark_step_complete", {"index": step, "step_id": step_id})

    def reset(self) -> None:
        """Return to initial_step with no completed steps (also unlocks)."""
        self._current_step = self._initial_step
        self._completed.clear()
        self._has_completed = False
        _logger.debug(f"Wizard reset to step {self._initial_step}")
        self._publish(EVENT_RESET, "reset", {"index": self._initial_step})

    # -- internals -------------------------------------------------------

    def _move_to(self, target: int, operation: str) -> None:
        previous = self._current_step
        if target == previous:
            return

        previous_id = self._registry[previous].id
        target_id = self._registry[target].id
        self._current_step = target
        _logger.debug(f"{operation}: step {previous} ('{previous_id}') -> {target} ('{target_id}')")
        self._publish(
            EVENT_STEP_CHANGED,
            operation,
            {"from": previous, "to": target, "step_id": target_id},
        )

    def _complete(self, operation: str) -> None:
        self._has_completed = True
        _logger.verbose(f"Wizard completed via {operation} at step {self._current_step}")
        self._publish(EVENT_COMPLETED, operation, {"index": self._current_step})
        if self._on_complete is not None:
            self._on_complete()

    def _ignored_while_locked(self, operation: str) -> bool:
        if self.is_locked:
            _logger.verbose(f"{operation} ignored: wizard is locked after completion")
            return True
        return False

    def _publish(self, event: str, operation: str, data: dict[str, Any]) -> None:
        if self._event_bus is None or not self._event_bus.has_subscribers(event):
            return
        self._event_bus.publish(
            event,
            build_envelope(event=event, component="wizard", operation=operation, data=data),
        )
