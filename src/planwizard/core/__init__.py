"""planwizard core - ambient services shared by the wizard engine.

Logging, events, configuration, diagnostics and the error hierarchy.
"""

from planwizard.core.config import ConfigResolver, ConfigSource, LoggingPolicy
from planwizard.core.diagnostics import build_envelope, install_jsonl_sink, is_diagnostics_enabled
from planwizard.core.errors import (
    ConfigError,
    DefinitionLoadError,
    DuplicateStepError,
    PlanWizardError,
    StepDefinitionError,
)
from planwizard.core.events import EventBus, get_event_bus
from planwizard.core.log_bus import LogBus, LogRecord, get_log_bus
from planwizard.core.logging import (
    VerbosityLevel,
    apply_logging_policy,
    get_logger,
    get_verbosity,
    set_colors,
    set_verbosity,
)

__all__ = [
    # Config
    "ConfigResolver",
    "ConfigSource",
    "LoggingPolicy",
    # Diagnostics
    "build_envelope",
    "install_jsonl_sink",
    "is_diagnostics_enabled",
    # Errors
    "PlanWizardError",
    "ConfigError",
    "StepDefinitionError",
    "DuplicateStepError",
    "DefinitionLoadError",
    # Events
    "EventBus",
    "get_event_bus",
    # Logging
    "LogBus",
    "LogRecord",
    "get_log_bus",
    "VerbosityLevel",
    "apply_logging_policy",
    "get_logger",
    "get_verbosity",
    "set_colors",
    "set_verbosity",
]
