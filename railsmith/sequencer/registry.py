"""Ordered registry of scaffolding steps."""

from __future__ import annotations

from enum import Enum
from typing import Iterator

from pydantic import BaseModel, Field

from railsmith.actions.models import Action


class Phase(str, Enum):
    """Where a step sits relative to dependency installation."""

    PRE_INSTALL = "pre-install"
    INSTALL = "install"
    POST_INSTALL = "post-install"


_PHASE_ORDER: dict[Phase, int] = {
    Phase.PRE_INSTALL: 0,
    Phase.INSTALL: 1,
    Phase.POST_INSTALL: 2,
}


class Step(BaseModel):
    """A named, ordered group of actions.

    ``ordinal`` is assigned by the registry on registration.
    """

    name: str = Field(..., min_length=1)
    phase: Phase = Phase.PRE_INSTALL
    body: list[Action] = Field(default_factory=list)
    ordinal: int = Field(default=0, ge=0)


class StepRegistry:
    """Holds the author-declared sequence of steps.

    Registration enforces the install barrier's shape: phases never move
    backwards, there is at most one install step, and post-install steps
    can only follow it.
    """

    def __init__(self) -> None:
        self._steps: list[Step] = []

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(self._steps)

    def register(self, step: Step) -> Step:
        """Append *step* and assign its ordinal (1-based).

        Raises:
            ValueError: On a duplicate name or a phase out of order.
        """
        if any(s.name == step.name for s in self._steps):
            raise ValueError(f"Duplicate step name: {step.name}")

        if self._steps:
            last = self._steps[-1].phase
            if _PHASE_ORDER[step.phase] < _PHASE_ORDER[last]:
                raise ValueError(
                    f"Step {step.name!r} ({step.phase.value}) cannot follow a "
                    f"{last.value} step"
                )
        if step.phase is Phase.INSTALL and self.install_step() is not None:
            raise ValueError(f"Only one install step is allowed (got {step.name!r})")
        if step.phase is Phase.POST_INSTALL and self.install_step() is None:
            raise ValueError(
                f"Post-install step {step.name!r} registered before any install step"
            )

        registered = step.model_copy(update={"ordinal": len(self._steps) + 1})
        self._steps.append(registered)
        return registered

    def all(self) -> list[Step]:
        """Return the steps in registration order."""
        return list(self._steps)

    def get(self, name: str) -> Step:
        for step in self._steps:
            if step.name == name:
                return step
        raise KeyError(name)

    def install_step(self) -> Step | None:
        """The dependency-installation step, if one is registered."""
        for step in self._steps:
            if step.phase is Phase.INSTALL:
                return step
        return None
