"""Tests for the planning presets."""

from planwizard.engine import WizardEngine
from planwizard.presets import PLANNING_WIZARD_STEPS, build_planning_steps, has_named_participant


def test_preset_order_and_kinds() -> None:
    assert [s.id for s in PLANNING_WIZARD_STEPS] == ["config", "users", "tasks", "milestones", "shopping"]
    assert [s.is_optional for s in PLANNING_WIZARD_STEPS] == [False, False, True, True, True]
    assert PLANNING_WIZARD_STEPS[1].label == "Utilisateurs"


def test_has_named_participant() -> None:
    assert has_named_participant(["Alice"])
    assert has_named_participant(["", "  Bob "])
    assert not has_named_participant([])
    assert not has_named_participant(["", "   "])


def test_build_planning_steps_reads_names_lazily() -> None:
    names: list[str] = []
    engine = WizardEngine(build_planning_steps(lambda: names))

    engine.next_step()
    assert engine.current_step_data.id == "users"
    assert not engine.can_proceed

    names.append("Alice")
    assert engine.can_proceed
    engine.next_step()
    assert engine.current_step_data.id == "tasks"


def test_build_planning_steps_leaves_preset_untouched() -> None:
    steps = build_planning_steps(lambda: ["x"])

    assert all(step.validate is not None for step in steps)
    assert all(step.validate is None for step in PLANNING_WIZARD_STEPS)
