"""Diagnostics envelope + JSONL sink.

Every wizard event travels as a canonical envelope. The JSONL sink, enabled
through the config resolver, appends each bus event to
<diagnostics.dir>/diagnostics.jsonl. It is registered once per bus and
self-filters while diagnostics are disabled.
"""

from __future__ import annotations

import json
import weakref
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from planwizard.core.config import ConfigResolver
from planwizard.core.errors import ConfigError
from planwizard.core.events import EventBus, get_event_bus
from planwizard.core.logging import get_logger

_logger = get_logger(__name__)

_ENVELOPE_KEYS = frozenset({"event", "component", "operation", "timestamp", "data"})


def build_envelope(
    *,
    event: str,
    component: str,
    operation: str,
    data: dict[str, Any],
) -> dict[str, Any]:
    """Build the canonical diagnostics envelope.

    Schema:
        {
          "event": "<string>",
          "component": "<string>",
          "operation": "<string>",
          "timestamp": "<iso8601 utc>",
          "data": { ... }
        }
    """
    ts = datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")
    return {
        "event": event,
        "component": component,
        "operation": operation,
        "timestamp": ts,
        "data": data,
    }


def is_diagnostics_enabled(resolver: ConfigResolver) -> bool:
    """Return whether diagnostics.enabled is on. Invalid values count as off."""
    try:
        return resolver.resolve_bool("diagnostics.enabled", default=False)
    except ConfigError as e:
        _logger.warning(f"{e}; treating diagnostics as disabled")
        return False


def _is_envelope(obj: Any) -> bool:
    return isinstance(obj, dict) and set(obj.keys()) == _ENVELOPE_KEYS and isinstance(obj["data"], dict)


_INSTALLED_BUSES: weakref.WeakSet[EventBus] = weakref.WeakSet()


def install_jsonl_sink(*, resolver: ConfigResolver, bus: EventBus | None = None) -> None:
    """Install the JSONL diagnostics subscriber on ``bus`` (default: global bus).

    Idempotent per bus. Non-envelope events are wrapped with
    component/operation "unknown".
    """
    bus = bus or get_event_bus()
    if bus in _INSTALLED_BUSES:
        return

    def _on_any_event(event: str, data: dict[str, Any]) -> None:
        if not is_diagnostics_enabled(resolver):
            return

        try:
            out_dir, _src = resolver.resolve("diagnostics.dir")
        except ConfigError:
            _logger.warning("Missing diagnostics.dir; cannot write diagnostics JSONL.")
            return
        out_path = Path(str(out_dir)) / "diagnostics.jsonl"

        if _is_envelope(data):
            payload = data
        else:
            payload = build_envelope(event=event, component="unknown", operation="unknown", data=data)

        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
            line = json.dumps(payload, ensure_ascii=True, separators=(",", ":"), sort_keys=True)
            with out_path.open("a", encoding="utf-8") as f:
                f.write(line)
                f.write("\n")
        except OSError as e:
            _logger.warning(f"Diagnostics sink write failed: {type(e).__name__}: {e}")

    bus.subscribe_all(_on_any_event)
    _INSTALLED_BUSES.add(bus)
