"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add src to path (for 'planwizard.*' imports without an install)
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root / "src"))


class ToggleGate:
    """Validator stub whose answer the test flips; counts evaluations."""

    def __init__(self, ok: bool = True) -> None:
        self.ok = ok
        self.calls = 0

    def __call__(self) -> bool:
        self.calls += 1
        return self.ok


@pytest.fixture(autouse=True)
def _restore_logging_globals():
    """CLI tests change process-wide verbosity; put it back afterwards."""
    from planwizard.core.logging import VerbosityLevel, set_colors, set_verbosity

    yield
    set_verbosity(VerbosityLevel.NORMAL)
    set_colors(True)


@pytest.fixture
def users_gate():
    """Gate of the `users` step, open by default."""
    return ToggleGate(ok=True)


@pytest.fixture
def planning_steps(users_gate):
    """The five-step planning list: config, users (gated), tasks, milestones, shopping."""
    from planwizard.presets import PLANNING_WIZARD_STEPS

    return [
        step.with_validator(users_gate) if step.id == "users" else step
        for step in PLANNING_WIZARD_STEPS
    ]


@pytest.fixture
def completions():
    """List collecting one entry per on_complete call."""
    return []


@pytest.fixture
def engine(planning_steps, completions):
    """WizardEngine over the planning steps, recording completions."""
    from planwizard.engine import WizardEngine

    return WizardEngine(planning_steps, on_complete=lambda: completions.append(True))


@pytest.fixture
def bus():
    """Fresh, isolated EventBus."""
    from planwizard.core.events import EventBus

    return EventBus()


@pytest.fixture
def isolated_resolver(tmp_path):
    """ConfigResolver that never reads the real user/system config files."""
    from planwizard.core.config import ConfigResolver

    def _make(cli_args=None, defaults=None):
        return ConfigResolver(
            cli_args=cli_args or {},
            user_config_path=tmp_path / "no_user_config.yaml",
            system_config_path=tmp_path / "no_system_config.yaml",
            defaults=defaults,
        )

    return _make
