"""Tests for the diagnostics envelope and JSONL sink."""

import json
from pathlib import Path

from planwizard.core.diagnostics import build_envelope, install_jsonl_sink, is_diagnostics_enabled
from planwizard.core.events import EventBus
from planwizard.engine import WizardEngine


def _resolver(isolated_resolver, tmp_path: Path, enabled: object):
    return isolated_resolver(cli_args={"diagnostics": {"enabled": enabled, "dir": str(tmp_path / "diag")}})


def test_build_envelope_shape() -> None:
    env = build_envelope(event="wizard.reset", component="wizard", operation="reset", data={"index": 0})

    assert set(env) == {"event", "component", "operation", "timestamp", "data"}
    assert env["timestamp"].endswith("Z")
    assert env["data"] == {"index": 0}


def test_is_diagnostics_enabled(isolated_resolver, tmp_path: Path) -> None:
    assert not is_diagnostics_enabled(isolated_resolver())
    assert is_diagnostics_enabled(_resolver(isolated_resolver, tmp_path, "on"))
    # Invalid values count as off.
    assert not is_diagnostics_enabled(_resolver(isolated_resolver, tmp_path, "sometimes"))


def test_disabled_sink_writes_nothing(isolated_resolver, tmp_path: Path) -> None:
    bus = EventBus()
    install_jsonl_sink(resolver=_resolver(isolated_resolver, tmp_path, False), bus=bus)

    bus.publish("wizard.reset", {"index": 0})

    assert not (tmp_path / "diag").exists()


def test_enabled_sink_writes_engine_events(planning_steps, isolated_resolver, tmp_path: Path) -> None:
    bus = EventBus()
    install_jsonl_sink(resolver=_resolver(isolated_resolver, tmp_path, True), bus=bus)
    engine = WizardEngine(planning_steps, event_bus=bus)

    engine.next_step()

    lines = (tmp_path / "diag" / "diagnostics.jsonl").read_text(encoding="utf-8").splitlines()
    records = [json.loads(line) for line in lines]
    assert [r["event"] for r in records] == ["wizard.step_completed", "wizard.step_changed"]
    assert all(r["component"] == "wizard" for r in records)
    assert records[1]["data"]["to"] == 1


def test_non_envelope_events_are_wrapped(isolated_resolver, tmp_path: Path) -> None:
    bus = EventBus()
    install_jsonl_sink(resolver=_resolver(isolated_resolver, tmp_path, True), bus=bus)

    bus.publish("custom.thing", {"k": "v"})

    record = json.loads((tmp_path / "diag" / "diagnostics.jsonl").read_text(encoding="utf-8"))
    assert record["event"] == "custom.thing"
    assert record["component"] == "unknown"
    assert record["data"] == {"k": "v"}


def test_install_is_idempotent_per_bus(isolated_resolver, tmp_path: Path) -> None:
    bus = EventBus()
    resolver = _resolver(isolated_resolver, tmp_path, True)
    install_jsonl_sink(resolver=resolver, bus=bus)
    install_jsonl_sink(resolver=resolver, bus=bus)

    bus.publish("wizard.reset", {"index": 0})

    lines = (tmp_path / "diag" / "diagnostics.jsonl").read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
