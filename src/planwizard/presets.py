"""Default steps of the planning creation wizard."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from planwizard.steps import StepDescriptor

PLANNING_WIZARD_STEPS: tuple[StepDescriptor, ...] = (
    StepDescriptor(id="config", label="Configuration", icon="⚙️", is_optional=False),
    StepDescriptor(id="users", label="Utilisateurs", icon="👥", is_optional=False),
    StepDescriptor(id="tasks", label="Taches", icon="✅", is_optional=True),
    StepDescriptor(id="milestones", label="Objectifs", icon="🎯", is_optional=True),
    StepDescriptor(id="shopping", label="Courses", icon="🛒", is_optional=True),
)


def _always_valid() -> bool:
    return True


def has_named_participant(names: Iterable[str]) -> bool:
    """At least one participant has a non-blank name."""
    return any(name.strip() for name in names)


def build_planning_steps(participant_names: Callable[[], Iterable[str]]) -> list[StepDescriptor]:
    """Attach validators to PLANNING_WIZARD_STEPS.

    Args:
        participant_names: Returns the current participant names; called on
            every evaluation of the `users` gate

    Returns:
        New step list; the preset itself is left untouched
    """
    steps: list[StepDescriptor] = []
    for step in PLANNING_WIZARD_STEPS:
        if step.id == "users":
            steps.append(step.with_validator(lambda: has_named_participant(participant_names())))
        else:
            steps.append(step.with_validator(_always_valid))
    return steps
