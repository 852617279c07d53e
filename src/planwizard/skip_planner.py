"""Bulk-skip planning for optional steps."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Literal

from planwizard.steps import StepDescriptor


class _Completed(Enum):
    COMPLETED = "completed"

    def __repr__(self) -> str:
        return "COMPLETED"


COMPLETED = _Completed.COMPLETED
"""Returned by plan_skip when only optional steps remain ahead."""

SkipTarget = int | Literal[_Completed.COMPLETED]


def plan_skip(steps: Sequence[StepDescriptor], from_index: int) -> SkipTarget:
    """Find the next required step after ``from_index``.

    Scans ``steps[from_index + 1:]`` while the steps are optional. Returns the
    index of the first required step, or COMPLETED when the scan runs off the
    end (including when ``from_index`` is already the last step).
    """
    i = from_index + 1
    while i < len(steps) and steps[i].is_optional:
        i += 1

    if i >= len(steps):
        return COMPLETED
    return i
