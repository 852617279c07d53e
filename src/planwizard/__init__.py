"""planwizard - step-sequencing engine for multi-step data entry wizards."""

__version__ = "1.0.0"

from planwizard.definitions import WizardDefinition, load_definition, parse_definition
from planwizard.engine import WizardEngine, WizardState
from planwizard.gate import can_proceed
from planwizard.presets import PLANNING_WIZARD_STEPS, build_planning_steps, has_named_participant
from planwizard.skip_planner import COMPLETED, plan_skip
from planwizard.stepper import (
    Direction,
    NavigationControls,
    StepperItem,
    StepStatus,
    build_navigation,
    build_stepper,
    click_step,
    is_step_clickable,
    step_caption,
    step_status,
)
from planwizard.steps import StepDescriptor, StepRegistry, Validator

__all__ = [
    # Steps
    "StepDescriptor",
    "StepRegistry",
    "Validator",
    # Engine
    "WizardEngine",
    "WizardState",
    "can_proceed",
    "plan_skip",
    "COMPLETED",
    # Presets
    "PLANNING_WIZARD_STEPS",
    "build_planning_steps",
    "has_named_participant",
    # Stepper
    "Direction",
    "NavigationControls",
    "StepperItem",
    "StepStatus",
    "build_navigation",
    "build_stepper",
    "click_step",
    "is_step_clickable",
    "step_caption",
    "step_status",
    # Definitions
    "WizardDefinition",
    "load_definition",
    "parse_definition",
]
