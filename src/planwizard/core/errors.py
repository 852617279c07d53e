"""Error handling with friendly messages."""

from __future__ import annotations


class PlanWizardError(Exception):
    """Base exception for all planwizard errors."""

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message}\nSuggestion: {self.suggestion}"
        return self.message


class ConfigError(PlanWizardError):
    """Configuration error."""

    pass


class StepDefinitionError(PlanWizardError):
    """Step list violates a construction precondition."""

    pass


class DuplicateStepError(StepDefinitionError):
    """Two steps share the same id."""

    def __init__(self, step_id: str) -> None:
        super().__init__(
            f"Duplicate step id '{step_id}'",
            "Every step needs a unique, stable id",
        )


class DefinitionLoadError(PlanWizardError):
    """Wizard definition file could not be loaded."""

    pass
