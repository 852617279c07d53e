"""Load wizard step lists from YAML definitions.

Format:

    wizard:
      name: Planning
      description: Weekly planning creation
      steps:
        - id: config
          label: Configuration
          icon: "*"
        - id: tasks
          label: Tasks
          optional: true
          validate: confirmed

``validate`` names a predicate in the ``validators`` mapping passed by the
caller; YAML cannot carry code, so the caller owns every predicate.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from planwizard.core.errors import DefinitionLoadError, StepDefinitionError
from planwizard.core.logging import get_logger
from planwizard.steps import StepDescriptor, StepRegistry, Validator

_logger = get_logger(__name__)


@dataclass(frozen=True)
class WizardDefinition:
    name: str
    description: str
    steps: tuple[StepDescriptor, ...]


def load_definition(path: Path, validators: Mapping[str, Validator] | None = None) -> WizardDefinition:
    """Load wizard definition from YAML.

    Args:
        path: Path to wizard YAML file
        validators: Named predicates referenced by `validate` keys

    Returns:
        Parsed WizardDefinition

    Raises:
        DefinitionLoadError: If file not found, invalid YAML or bad structure
    """
    if not path.exists():
        raise DefinitionLoadError(f"Wizard file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            _logger.debug(f"Loading wizard from: {path}")
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DefinitionLoadError(f"Invalid YAML in {path}: {e}") from e

    definition = parse_definition(data, validators)
    _logger.verbose(f"Wizard loaded: {definition.name} ({len(definition.steps)} steps)")
    return definition


def parse_definition(data: Any, validators: Mapping[str, Validator] | None = None) -> WizardDefinition:
    """Build a WizardDefinition from an already-parsed document.

    Raises:
        DefinitionLoadError: On a structural problem or unknown validator name
    """
    validators = validators or {}

    if not isinstance(data, dict):
        raise DefinitionLoadError("Wizard definition must be a mapping")
    if "wizard" not in data:
        raise DefinitionLoadError("Missing 'wizard' key in definition")

    wizard = data["wizard"]
    if not isinstance(wizard, dict):
        raise DefinitionLoadError("'wizard' must be a mapping")
    if "name" not in wizard:
        raise DefinitionLoadError("Missing 'name' in wizard definition")

    raw_steps = wizard.get("steps")
    if not isinstance(raw_steps, list) or not raw_steps:
        raise DefinitionLoadError("Wizard must have at least one step")

    steps = tuple(_parse_step(i, raw, validators) for i, raw in enumerate(raw_steps))

    # Same preconditions the engine enforces, reported at load time.
    try:
        StepRegistry(steps)
    except StepDefinitionError as e:
        raise DefinitionLoadError(e.message, e.suggestion) from e

    return WizardDefinition(
        name=str(wizard["name"]),
        description=str(wizard.get("description", "")),
        steps=steps,
    )


def _parse_step(index: int, raw: Any, validators: Mapping[str, Validator]) -> StepDescriptor:
    if not isinstance(raw, dict):
        raise DefinitionLoadError(f"Step {index} must be a mapping")

    step_id = raw.get("id")
    if not isinstance(step_id, str) or not step_id.strip():
        raise DefinitionLoadError(f"Step {index} is missing a string 'id'")

    optional = raw.get("optional", False)
    if not isinstance(optional, bool):
        raise DefinitionLoadError(f"Step '{step_id}': 'optional' must be true or false")

    validate: Validator | None = None
    validator_name = raw.get("validate")
    if validator_name is not None:
        if not isinstance(validator_name, str) or validator_name not in validators:
            known = ", ".join(sorted(validators)) or "none"
            raise DefinitionLoadError(
                f"Step '{step_id}' references unknown validator '{validator_name}'",
                f"Known validators: {known}",
            )
        validate = validators[validator_name]

    return StepDescriptor(
        id=step_id,
        label=str(raw.get("label", step_id)),
        icon=str(raw.get("icon", "")),
        is_optional=optional,
        validate=validate,
    )
