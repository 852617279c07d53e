"""LogBus for streaming log records to hosts.

The core logger publishes every emitted record here. Hosts (the console
driver, tests, an embedding UI) subscribe to mirror log lines elsewhere.
Publishing is fail-safe: a failing subscriber never breaks logging.
"""

from __future__ import annotations

import contextlib
import sys
import traceback
from collections.abc import Callable, Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class LogRecord:
    level_name: str
    plain: str
    logger_name: str


class LogBus:
    def __init__(self) -> None:
        self._subs: list[Callable[[LogRecord], None]] = []

    def subscribe_all(self, cb: Callable[[LogRecord], None]) -> None:
        self._subs.append(cb)

    def unsubscribe_all(self, cb: Callable[[LogRecord], None]) -> None:
        try:
            self._subs.remove(cb)
        except ValueError:
            return

    def publish(self, record: LogRecord) -> None:
        for cb in list(self._subs):
            try:
                cb(record)
            except Exception:
                # Writing through the core logger here would recurse.
                msg = "LogBus subscriber raised; suppressed.\n" + traceback.format_exc()
                with contextlib.suppress(Exception):
                    sys.stderr.write(msg)

    @contextlib.contextmanager
    def capture(self, level_name: str | None = None) -> Iterator[list[LogRecord]]:
        """Collect records published inside the ``with`` block.

        Args:
            level_name: Only keep records of this level (e.g. "DEBUG")
        """
        records: list[LogRecord] = []

        def _collect(rec: LogRecord) -> None:
            if level_name is None or rec.level_name == level_name:
                records.append(rec)

        self.subscribe_all(_collect)
        try:
            yield records
        finally:
            self.unsubscribe_all(_collect)

    def clear(self) -> None:
        self._subs.clear()


_LOG_BUS: LogBus | None = None


def get_log_bus() -> LogBus:
    global _LOG_BUS
    if _LOG_BUS is None:
        _LOG_BUS = LogBus()
    return _LOG_BUS
