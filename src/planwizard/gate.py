"""Validation gate: may the wizard move forward from a step?"""

from __future__ import annotations

from planwizard.steps import StepDescriptor


def can_proceed(step: StepDescriptor) -> bool:
    """Evaluate ``step``'s predicate now.

    Never cached: the predicate reads caller-owned data that may have
    changed since the last call. A step without a predicate always passes.
    """
    if step.validate is None:
        return True
    return bool(step.validate())
