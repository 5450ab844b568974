"""Step registry and executor.

Quick usage::

    from railsmith.sequencer import Executor, Phase, Step, StepRegistry

    registry = StepRegistry()
    registry.register(Step(name="pin ruby", body=[...]))
    report = Executor(ctx).run(registry)
"""

from railsmith.sequencer.executor import (
    ActionRecord,
    Executor,
    RunReport,
    RunState,
    StepFailed,
)
from railsmith.sequencer.registry import Phase, Step, StepRegistry

__all__ = [
    "ActionRecord",
    "Executor",
    "Phase",
    "RunReport",
    "RunState",
    "Step",
    "StepFailed",
    "StepRegistry",
]
