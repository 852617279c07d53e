"""Step descriptors and the ordered step registry."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, replace

from planwizard.core.errors import DuplicateStepError, StepDefinitionError

Validator = Callable[[], bool]


@dataclass(frozen=True)
class StepDescriptor:
    """One page of the wizard.

    ``label`` and ``icon`` are presentation hints the engine never reads.
    ``validate`` closes over caller-owned data; ``None`` means always valid.
    """

    id: str
    label: str
    icon: str = ""
    is_optional: bool = False
    validate: Validator | None = None

    @property
    def is_required(self) -> bool:
        return not self.is_optional

    def with_validator(self, validate: Validator | None) -> StepDescriptor:
        """Return a copy of this step using ``validate`` as its gate."""
        return replace(self, validate=validate)


class StepRegistry:
    """Ordered, immutable sequence of steps with unique ids.

    Raises:
        StepDefinitionError: On an empty list or a blank id
        DuplicateStepError: When two steps share an id
    """

    def __init__(self, steps: Iterable[StepDescriptor]) -> None:
        self._steps: tuple[StepDescriptor, ...] = tuple(steps)
        if not self._steps:
            raise StepDefinitionError(
                "A wizard needs at least one step",
                "Pass a non-empty list of StepDescriptor objects",
            )

        self._index: dict[str, int] = {}
        for i, step in enumerate(self._steps):
            if not step.id or not step.id.strip():
                raise StepDefinitionError(f"Step at index {i} has a blank id")
            if step.id in self._index:
                raise DuplicateStepError(step.id)
            self._index[step.id] = i

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[StepDescriptor]:
        return iter(self._steps)

    def __getitem__(self, index: int) -> StepDescriptor:
        return self._steps[index]

    @property
    def steps(self) -> tuple[StepDescriptor, ...]:
        return self._steps

    def contains_index(self, index: object) -> bool:
        """True for an ``int`` (not ``bool``) in ``0..len - 1``."""
        if not isinstance(index, int) or isinstance(index, bool):
            return False
        return 0 <= index < len(self._steps)

    def index_of(self, step_id: str) -> int | None:
        """Return the index of ``step_id``, or None when unknown."""
        return self._index.get(step_id)
