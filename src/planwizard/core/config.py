"""Configuration resolver with 4-level priority.

Priority (highest to lowest):
1. CLI arguments
2. Environment variables (PLANWIZARD_*)
3. Config files (user > system)
4. Defaults
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from planwizard.core.errors import ConfigError

ALLOWED_LOGGING_LEVELS = frozenset({"quiet", "normal", "verbose", "debug"})
DEFAULT_LOGGING_LEVEL = "normal"

# Numeric verbosity (argparse flags, legacy configs) -> level name.
_VERBOSITY_ALIASES = {0: "quiet", 1: "normal", 2: "verbose", 3: "debug"}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class ConfigSource:
    """Represents where a config value came from."""

    value: Any
    source: str  # 'cli' | 'env' | 'user_config' | 'system_config' | 'default'


@dataclass(frozen=True)
class LoggingPolicy:
    """Resolved, immutable logging policy."""

    level_name: str  # quiet | normal | verbose | debug
    color: bool
    sources: dict[str, ConfigSource]


def _flatten_items(data: dict[str, Any], prefix: str = "") -> list[tuple[str, Any]]:
    """Flatten nested dicts to dot-notation key paths."""
    items: list[tuple[str, Any]] = []

    for key, value in data.items():
        key_path = f"{prefix}.{key}" if prefix else str(key)

        if isinstance(value, dict):
            items.extend(_flatten_items(value, key_path))
        else:
            items.append((key_path, value))

    return items


class ConfigResolver:
    """Resolve configuration with strict 4-level priority.

    Example:
        resolver = ConfigResolver(
            cli_args={'wizard': {'lock_on_complete': True}},
            user_config_path=Path('~/.config/planwizard/config.yaml')
        )

        lock, source = resolver.resolve('wizard.lock_on_complete')
        # lock = True, source = 'cli'
    """

    def __init__(
        self,
        cli_args: dict[str, Any] | None = None,
        user_config_path: Path | None = None,
        system_config_path: Path | None = None,
        defaults: dict[str, Any] | None = None,
    ) -> None:
        """Initialize config resolver.

        Args:
            cli_args: Arguments from CLI (highest priority)
            user_config_path: Path to user config file
            system_config_path: Path to system config file
            defaults: Default values (lowest priority)
        """
        self.cli_args = cli_args or {}
        self.user_config_path = user_config_path or Path.home() / ".config/planwizard/config.yaml"
        self.system_config_path = system_config_path or Path("/etc/planwizard/config.yaml")
        self.defaults = self._default_config() if defaults is None else defaults

        self._user_config: dict[str, Any] | None = None
        self._system_config: dict[str, Any] | None = None

    def resolve(self, key: str) -> tuple[Any, str]:
        """Resolve config value with priority.

        Args:
            key: Config key (supports dot notation: 'wizard.initial_step')

        Returns:
            (value, source) tuple

        Raises:
            ConfigError: If key not found in any source
        """
        value = self._get_nested(self.cli_args, key)
        if value is not None:
            return value, "cli"

        value = self._from_env(key)
        if value is not None:
            return value, "env"

        value = self._get_nested(self._get_user_config(), key)
        if value is not None:
            return value, "user_config"

        value = self._get_nested(self._get_system_config(), key)
        if value is not None:
            return value, "system_config"

        value = self._get_nested(self.defaults, key)
        if value is not None:
            return value, "default"

        raise ConfigError(f"Config key '{key}' not found in any source")

    def resolve_bool(self, key: str, default: bool = False) -> bool:
        """Resolve a boolean key, normalizing env-style strings.

        Raises:
            ConfigError: If the value cannot be read as a bool.
        """
        found = self._try_resolve_value(key)
        if found is None:
            return default
        value, _src = found

        if isinstance(value, bool):
            return value
        if isinstance(value, int):
            return bool(value)
        s = str(value).strip().lower()
        if s in _TRUE_VALUES:
            return True
        if s in _FALSE_VALUES:
            return False
        raise ConfigError(f"Config key '{key}' must be a bool, got {value!r}")

    def resolve_int(self, key: str, default: int = 0) -> int:
        """Resolve an integer key, accepting numeric strings.

        Raises:
            ConfigError: If the value is not an integer.
        """
        found = self._try_resolve_value(key)
        if found is None:
            return default
        value, _src = found

        if isinstance(value, bool):
            raise ConfigError(f"Config key '{key}' must be an int, got bool")
        if isinstance(value, int):
            return value
        s = str(value).strip()
        if s.lstrip("-").isdigit():
            return int(s)
        raise ConfigError(f"Config key '{key}' must be an int, got {value!r}")

    def resolve_logging_level(self) -> str:
        """Resolve and validate logging.level.

        Falls back to the `verbosity` alias, then to DEFAULT_LOGGING_LEVEL.

        Raises:
            ConfigError: If the resolved value is invalid.
        """
        level, _src = self._resolve_logging_level_and_source()
        return level

    def resolve_logging_policy(self) -> LoggingPolicy:
        """Resolve the logging policy. Side-effect free."""
        level_name, src = self._resolve_logging_level_and_source()
        color = self.resolve_bool("logging.color", default=True)
        return LoggingPolicy(level_name=level_name, color=color, sources={"level_name": src})

    def _resolve_logging_level_and_source(self) -> tuple[str, ConfigSource]:
        key = "logging.level"
        found = self._try_resolve_value(key)
        if found is None:
            # Resolver-only alias
            found = self._try_resolve_value("verbosity")

        if found is None:
            return DEFAULT_LOGGING_LEVEL, ConfigSource(value=DEFAULT_LOGGING_LEVEL, source="default")

        value, source = found
        norm = self._normalize_logging_level(key, value)
        return norm, ConfigSource(value=norm, source=source)

    def _try_resolve_value(self, key: str) -> tuple[Any, str] | None:
        try:
            return self.resolve(key)
        except ConfigError:
            return None

    def _normalize_logging_level(self, key: str, value: Any) -> str:
        if isinstance(value, int) and not isinstance(value, bool):
            if value in _VERBOSITY_ALIASES:
                return _VERBOSITY_ALIASES[value]
            raise ConfigError(f"Invalid '{key}': {value!r}. Numeric levels are 0-3")

        if not isinstance(value, str):
            raise ConfigError(f"Config key '{key}' must be a string, got {type(value).__name__}")

        norm = value.strip().lower()
        if norm == "":
            raise ConfigError(f"Config key '{key}' must not be empty")
        if norm.isdigit() and int(norm) in _VERBOSITY_ALIASES:
            return _VERBOSITY_ALIASES[int(norm)]

        if norm not in ALLOWED_LOGGING_LEVELS:
            allowed = ", ".join(sorted(ALLOWED_LOGGING_LEVELS))
            raise ConfigError(f"Invalid '{key}': {value!r}. Allowed values: {allowed}")

        return norm

    def resolve_all(self) -> dict[str, ConfigSource]:
        """Resolve every key found in defaults, config files and CLI args.

        Returns:
            Dict of key -> ConfigSource, sorted by key
        """
        all_keys: set[str] = set()
        for data in (self.defaults, self._get_system_config(), self._get_user_config(), self.cli_args):
            all_keys.update(k for k, _v in _flatten_items(data))

        result: dict[str, ConfigSource] = {}
        for key in sorted(all_keys):
            try:
                value, source = self.resolve(key)
            except ConfigError:
                continue
            result[key] = ConfigSource(value=value, source=source)
        return result

    def _from_env(self, key: str) -> Any | None:
        """Get value from environment variables.

        Environment variable format: PLANWIZARD_KEY_NAME
        Example: PLANWIZARD_WIZARD_INITIAL_STEP, PLANWIZARD_LOGGING_LEVEL
        """
        env_key = f"PLANWIZARD_{key.upper().replace('.', '_')}"
        return os.environ.get(env_key)

    def _get_user_config(self) -> dict[str, Any]:
        if self._user_config is None:
            self._user_config = self._load_yaml(self.user_config_path)
        return self._user_config

    def _get_system_config(self) -> dict[str, Any]:
        if self._system_config is None:
            self._system_config = self._load_yaml(self.system_config_path)
        return self._system_config

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
                return data if isinstance(data, dict) else {}
        except Exception as e:
            raise ConfigError(f"Failed to load config from {path}: {e}") from e

    def _get_nested(self, data: dict[str, Any], key: str) -> Any | None:
        """Get nested value using dot notation.

        Example:
            data = {'wizard': {'initial_step': 2}}
            _get_nested(data, 'wizard.initial_step') -> 2
        """
        current: Any = data

        for part in key.split("."):
            if not isinstance(current, dict):
                return None
            current = current.get(part)
            if current is None:
                return None

        return current

    @staticmethod
    def _default_config() -> dict[str, Any]:
        """Default configuration."""
        return {
            "logging": {
                "level": DEFAULT_LOGGING_LEVEL,
                "color": True,
            },
            "wizard": {
                "initial_step": 0,
                "lock_on_complete": False,
            },
            "diagnostics": {
                "enabled": False,
                "dir": str(Path.home() / ".planwizard" / "diagnostics"),
            },
        }
