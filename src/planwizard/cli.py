"""planwizard command line.

    planwizard show wizards/planning.yaml
    planwizard run wizards/planning.yaml --lock-on-complete --verbose
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from planwizard.console_ui import ConsoleUI
from planwizard.core.config import ConfigResolver
from planwizard.core.diagnostics import install_jsonl_sink
from planwizard.core.errors import PlanWizardError
from planwizard.core.events import get_event_bus
from planwizard.core.logging import apply_logging_policy, get_logger, set_colors
from planwizard.definitions import WizardDefinition, load_definition
from planwizard.engine import EVENT_RESET, WizardEngine
from planwizard.stepper import build_navigation, build_stepper, step_caption
from planwizard.steps import Validator

_logger = get_logger(__name__)


class ConsoleSession:
    """Drive one engine from typed commands.

    The session is the engine's external collaborator: it owns the data the
    `confirmed` validator reads (the set of steps the user confirmed).
    """

    def __init__(self, ui: ConsoleUI) -> None:
        self.ui = ui
        self.confirmed: set[str] = set()
        self.completions = 0
        self.engine: WizardEngine | None = None

    def validators(self) -> dict[str, Validator]:
        return {"confirmed": self._current_step_confirmed}

    def _current_step_confirmed(self) -> bool:
        return self.engine is not None and self.engine.current_step_data.id in self.confirmed

    def on_complete(self) -> None:
        self.completions += 1
        self.ui.print_success(f"Wizard completed ({len(self.confirmed)} step(s) confirmed)")

    def render(self) -> None:
        engine = self._require_engine()
        self.ui.render_stepper(build_stepper(engine), step_caption(engine), engine.progress)
        self.ui.render_controls(build_navigation(engine))

    def handle(self, command: str) -> bool:
        """Apply one command. Returns False when the session should end."""
        engine = self._require_engine()
        verb, _, arg = command.partition(" ")
        verb = verb.lower()

        if verb in {"q", "quit", "exit"}:
            return False
        if verb == "n":
            if not engine.can_proceed:
                self.ui.print_warning(f"Step '{engine.current_step_data.id}' is not valid yet (try 'c')")
            engine.next_step()
        elif verb == "p":
            engine.prev_step()
        elif verb == "s":
            engine.skip_optional_steps()
        elif verb == "g":
            target = self._go_to_target(arg.strip())
            if target is None:
                self.ui.print_warning("Usage: g N|ID (1-based step number or step id)")
            else:
                engine.go_to_step(target)
        elif verb == "c":
            self.confirmed.add(engine.current_step_data.id)
        elif verb == "r":
            self.confirmed.clear()
            engine.reset()
        elif verb:
            self.ui.print_warning(f"Unknown command: {verb}")

        # A locked engine cannot move any more.
        return not engine.is_locked

    def _go_to_target(self, arg: str) -> int | None:
        engine = self._require_engine()
        if arg.lstrip("-").isdigit():
            return int(arg) - 1
        return engine.index_of(arg) if arg else None

    def on_reset(self, envelope: dict[str, Any]) -> None:
        index = envelope.get("data", {}).get("index", 0)
        self.ui.print(f"Wizard reset to step {index + 1}")

    def run(self) -> int:
        while True:
            self.render()
            try:
                command = self.ui.prompt_command()
            except EOFError:
                return 0
            if not self.handle(command):
                return 0

    def _require_engine(self) -> WizardEngine:
        if self.engine is None:
            raise PlanWizardError("Console session has no engine attached")
        return self.engine


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="planwizard", description="Multi-step wizard engine")

    parser.add_argument("--quiet", action="store_true", help="Warnings and errors only")
    parser.add_argument("--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Debug output (everything)")
    parser.add_argument("--config", type=Path, help="User config file path")

    sub = parser.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", help="List the steps of a wizard definition")
    show.add_argument("definition", type=Path, help="Wizard YAML file")

    run = sub.add_parser("run", help="Walk through a wizard interactively")
    run.add_argument("definition", type=Path, help="Wizard YAML file")
    run.add_argument("--initial-step", type=int, help="0-based index to start at")
    run.add_argument(
        "--lock-on-complete",
        action="store_true",
        help="End the session once the wizard completes",
    )

    return parser


def _cli_args(args: argparse.Namespace) -> dict[str, Any]:
    cli_args: dict[str, Any] = {}

    if args.quiet:
        cli_args["logging"] = {"level": "quiet"}
    elif args.debug:
        cli_args["logging"] = {"level": "debug"}
    elif args.verbose:
        cli_args["logging"] = {"level": "verbose"}

    wizard: dict[str, Any] = {}
    if getattr(args, "initial_step", None) is not None:
        wizard["initial_step"] = args.initial_step
    if getattr(args, "lock_on_complete", False):
        wizard["lock_on_complete"] = True
    if wizard:
        cli_args["wizard"] = wizard

    return cli_args


def main(argv: list[str] | None = None, ui: ConsoleUI | None = None) -> int:
    """Entry point. Returns the process exit status."""
    args = build_parser().parse_args(argv)
    ui = ui or ConsoleUI()

    try:
        resolver = ConfigResolver(cli_args=_cli_args(args), user_config_path=args.config)
        policy = resolver.resolve_logging_policy()
        apply_logging_policy(policy)
        set_colors(policy.color)

        session = ConsoleSession(ui)
        definition = load_definition(args.definition, session.validators())
        if args.command == "show":
            ui.render_steps_table(definition)
            return 0
        return _run(session, definition, resolver)
    except PlanWizardError as e:
        ui.print_error(str(e))
        return 1
    except KeyboardInterrupt:
        ui.print_error("Interrupted by user")
        return 1


def _run(session: ConsoleSession, definition: WizardDefinition, resolver: ConfigResolver) -> int:
    bus = get_event_bus()
    install_jsonl_sink(resolver=resolver, bus=bus)

    session.engine = WizardEngine.from_config(
        definition.steps,
        resolver,
        on_complete=session.on_complete,
        event_bus=bus,
    )
    _logger.verbose(f"Running wizard '{definition.name}'")
    session.ui.print_header(definition.name)
    with bus.listening({EVENT_RESET: session.on_reset}):
        return session.run()


if __name__ == "__main__":
    sys.exit(main())
