"""Tests for ConfigResolver."""

from pathlib import Path

import pytest

from planwizard.core.config import ConfigResolver
from planwizard.core.errors import ConfigError


def test_cli_has_highest_priority(tmp_path: Path) -> None:
    """CLI args have highest priority."""
    user_config = tmp_path / "config.yaml"
    user_config.write_text("wizard:\n  initial_step: 1\n")

    resolver = ConfigResolver(
        cli_args={"wizard": {"initial_step": 3}},
        user_config_path=user_config,
    )

    value, source = resolver.resolve("wizard.initial_step")
    assert value == 3
    assert source == "cli"


def test_env_overrides_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Environment variables override config files."""
    user_config = tmp_path / "config.yaml"
    user_config.write_text("wizard:\n  initial_step: 1\n")

    monkeypatch.setenv("PLANWIZARD_WIZARD_INITIAL_STEP", "2")

    resolver = ConfigResolver(cli_args={}, user_config_path=user_config)

    value, source = resolver.resolve("wizard.initial_step")
    assert value == "2"
    assert source == "env"
    assert resolver.resolve_int("wizard.initial_step") == 2


def test_user_config_overrides_system(tmp_path: Path) -> None:
    """User config overrides system config."""
    user_config = tmp_path / "user.yaml"
    user_config.write_text("wizard:\n  lock_on_complete: true\n")

    system_config = tmp_path / "system.yaml"
    system_config.write_text("wizard:\n  lock_on_complete: false\n")

    resolver = ConfigResolver(
        cli_args={},
        user_config_path=user_config,
        system_config_path=system_config,
    )

    value, source = resolver.resolve("wizard.lock_on_complete")
    assert value is True
    assert source == "user_config"


def test_system_config_used_when_user_config_missing(tmp_path: Path) -> None:
    system_config = tmp_path / "system.yaml"
    system_config.write_text("logging:\n  level: verbose\n")

    resolver = ConfigResolver(
        user_config_path=tmp_path / "nonexistent.yaml",
        system_config_path=system_config,
    )

    assert resolver.resolve("logging.level") == ("verbose", "system_config")


def test_defaults_used_when_nothing_else(isolated_resolver) -> None:
    """Defaults are used when no other source provides value."""
    resolver = isolated_resolver()

    value, source = resolver.resolve("wizard.lock_on_complete")
    assert value is False
    assert source == "default"
    assert resolver.resolve("wizard.initial_step") == (0, "default")


def test_missing_key_raises_error(isolated_resolver) -> None:
    """Missing key raises ConfigError."""
    resolver = isolated_resolver(defaults={})

    with pytest.raises(ConfigError, match="not found"):
        resolver.resolve("nonexistent_key")


def test_invalid_yaml_raises_config_error(tmp_path: Path) -> None:
    user_config = tmp_path / "config.yaml"
    user_config.write_text("wizard: [unclosed\n")

    resolver = ConfigResolver(user_config_path=user_config, system_config_path=tmp_path / "none.yaml")

    with pytest.raises(ConfigError, match="Failed to load config"):
        resolver.resolve("wizard.initial_step")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("true", True), ("YES", True), ("1", True), ("off", False), ("0", False), (False, False)],
)
def test_resolve_bool_normalizes(isolated_resolver, raw: object, expected: bool) -> None:
    resolver = isolated_resolver(cli_args={"wizard": {"lock_on_complete": raw}})
    assert resolver.resolve_bool("wizard.lock_on_complete") is expected


def test_resolve_bool_rejects_garbage(isolated_resolver) -> None:
    resolver = isolated_resolver(cli_args={"wizard": {"lock_on_complete": "maybe"}})
    with pytest.raises(ConfigError, match="must be a bool"):
        resolver.resolve_bool("wizard.lock_on_complete")


def test_resolve_bool_and_int_defaults_for_missing_keys(isolated_resolver) -> None:
    resolver = isolated_resolver(defaults={})
    assert resolver.resolve_bool("wizard.lock_on_complete", default=True) is True
    assert resolver.resolve_int("wizard.initial_step", default=4) == 4


@pytest.mark.parametrize("raw", ["two", True, "1.5"])
def test_resolve_int_rejects_non_integers(isolated_resolver, raw: object) -> None:
    resolver = isolated_resolver(cli_args={"wizard": {"initial_step": raw}})
    with pytest.raises(ConfigError, match="must be an int"):
        resolver.resolve_int("wizard.initial_step")


def test_logging_level_default_and_normalization(isolated_resolver) -> None:
    assert isolated_resolver().resolve_logging_level() == "normal"
    assert isolated_resolver(cli_args={"logging": {"level": " DEBUG "}}).resolve_logging_level() == "debug"


def test_logging_level_verbosity_alias(isolated_resolver) -> None:
    resolver = isolated_resolver(cli_args={"verbosity": 2}, defaults={})
    assert resolver.resolve_logging_level() == "verbose"


def test_logging_level_invalid(isolated_resolver) -> None:
    resolver = isolated_resolver(cli_args={"logging": {"level": "loud"}})
    with pytest.raises(ConfigError, match="Allowed values"):
        resolver.resolve_logging_level()


def test_logging_policy(isolated_resolver) -> None:
    policy = isolated_resolver(cli_args={"logging": {"level": "quiet", "color": False}}).resolve_logging_policy()

    assert policy.level_name == "quiet"
    assert policy.color is False
    assert policy.sources["level_name"].source == "cli"


def test_resolve_all(isolated_resolver) -> None:
    """Resolve all keys."""
    resolver = isolated_resolver(
        cli_args={"wizard": {"initial_step": 2}},
        defaults={"wizard": {"initial_step": 0, "lock_on_complete": False}},
    )

    all_config = resolver.resolve_all()

    assert all_config["wizard.initial_step"].value == 2
    assert all_config["wizard.initial_step"].source == "cli"
    assert all_config["wizard.lock_on_complete"].value is False
    assert all_config["wizard.lock_on_complete"].source == "default"
