"""Sequential, fail-fast execution of a step registry.

The executor is a three-state machine::

    IDLE --run()--> RUNNING --all steps ok--> COMPLETED
                        \\--first error-----> FAILED

Steps run strictly by ordinal on the calling thread.  The first failing
action stops the run; nothing is retried, skipped or rolled back.  Steps in
the post-install phase only run once the install step has succeeded.
"""

from __future__ import annotations

import time
import traceback
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field
from rich.markup import escape
from rich.panel import Panel

from railsmith.actions.commands import CommandRunner, SubprocessRunner, run_external_command
from railsmith.actions.errors import ActionError
from railsmith.actions.files import apply_file_action
from railsmith.actions.models import Action, ExternalCommand, FileAction
from railsmith.context import ProjectContext
from railsmith.utils import (
    console,
    format_argv,
    format_duration,
    print_action,
    print_error,
    print_step_header,
    print_warning,
)

from .registry import Phase, Step, StepRegistry


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class ActionRecord(BaseModel):
    """One line of the execution log."""

    step: str
    ordinal: int
    action: str
    status: str = Field(..., description="ok, ignored or failed")
    verb: str = Field(default="", description="Thor-style status shown to the user")
    detail: str = ""


class RunReport(BaseModel):
    """Outcome of a run, including the transient execution log."""

    state: RunState = RunState.IDLE
    records: list[ActionRecord] = Field(default_factory=list)
    steps_completed: list[str] = Field(default_factory=list)
    failed_step: Optional[str] = None
    failed_action: Optional[str] = None
    error: Optional[str] = None
    duration_seconds: float = 0.0

    @computed_field  # type: ignore[misc]
    @property
    def exit_code(self) -> int:
        """Process exit code for this outcome (0 only when completed)."""
        return 0 if self.state is RunState.COMPLETED else 1


class StepFailed(Exception):
    """Wraps the error that stopped a run with the step and action that raised it."""

    def __init__(self, step: Step, action: str, cause: BaseException) -> None:
        self.step = step
        self.action = action
        self.cause = cause
        super().__init__(f"Step {step.ordinal} ({step.name}) failed at '{action}': {cause}")


class Executor:
    """Runs every registered step, in order, against one project.

    Attributes:
        context: The project being scaffolded.
        runner: Capability used for external commands.
        state: Current position in the state machine.
        report: The execution log and final outcome.
    """

    def __init__(self, context: ProjectContext, runner: CommandRunner | None = None) -> None:
        self.context = context
        self.runner: CommandRunner = runner or SubprocessRunner()
        self.report = RunReport()
        self._installed = False

    @property
    def state(self) -> RunState:
        return self.report.state

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, registry: StepRegistry) -> RunReport:
        """Execute *registry* once and return the report.

        Raises:
            RuntimeError: If this executor has already run.
        """
        if self.report.state is not RunState.IDLE:
            raise RuntimeError(f"Executor already ran (state: {self.report.state.value})")

        self.report.state = RunState.RUNNING
        started = time.monotonic()

        try:
            for step in registry.all():
                self._run_step(step)
                self.report.steps_completed.append(step.name)
        except StepFailed as exc:
            self.report.state = RunState.FAILED
            self.report.failed_step = exc.step.name
            self.report.failed_action = exc.action
            self.report.error = str(exc.cause)
            print_error(f"Step {exc.step.ordinal} ({exc.step.name}) FAILED")
            print_error(f"  action: {exc.action}")
            print_error(f"  error : {exc.cause}")
            if not isinstance(exc.cause, ActionError):
                console.print(
                    "".join(traceback.format_exception(exc.cause)), style="dim", highlight=False
                )
        else:
            self.report.state = RunState.COMPLETED
        finally:
            self.report.duration_seconds = time.monotonic() - started

        self._print_final_summary()
        return self.report

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _run_step(self, step: Step) -> None:
        print_step_header(step.ordinal, step.name, step.phase.value)

        if step.phase is Phase.POST_INSTALL and not self._installed:
            raise StepFailed(
                step,
                "wait for dependency installation",
                RuntimeError("dependency installation has not completed"),
            )

        if not step.body:
            console.print("  [dim]nothing to do[/dim]")

        for action in step.body:
            self._run_action(step, action)

        if step.phase is Phase.INSTALL:
            self._installed = True

    def _run_action(self, step: Step, action: Action) -> None:
        description = action.describe()
        try:
            status = "ok"
            if isinstance(action, FileAction):
                verb = apply_file_action(self.context, action)
                print_action(verb, action.path)
            elif isinstance(action, ExternalCommand):
                print_action("run", format_argv(action.argv))
                result = run_external_command(self.context, action, self.runner)
                verb = "run"
                if not result.ok:
                    verb = status = "ignored"
                    print_warning(f"  exit {result.returncode} ignored, continuing")
            else:
                raise TypeError(f"Unknown action type: {type(action).__name__}")
        except Exception as exc:
            self._record(step, description, "failed", "failed", str(exc))
            raise StepFailed(step, description, exc) from exc

        self._record(step, description, status, verb)

    def _record(
        self, step: Step, action: str, status: str, verb: str, detail: str = ""
    ) -> None:
        self.report.records.append(
            ActionRecord(
                step=step.name,
                ordinal=step.ordinal,
                action=action,
                status=status,
                verb=verb,
                detail=detail,
            )
        )

    def _print_final_summary(self) -> None:
        report = self.report
        if report.state is RunState.COMPLETED:
            border_style = "bold green"
            status_text = "[bold green]SCAFFOLD COMPLETED[/bold green]"
        else:
            border_style = "bold red"
            status_text = "[bold red]SCAFFOLD FAILED[/bold red]"

        lines = [
            status_text,
            "",
            f"Project  : {escape(str(self.context.root))}",
            f"Duration : {format_duration(report.duration_seconds)}",
            f"Steps    : {len(report.steps_completed)} completed",
            f"Actions  : {len(report.records)}",
        ]
        if report.failed_step:
            lines.append(f"Failed   : {escape(report.failed_step)}")

        console.print()
        console.print(
            Panel("\n".join(lines), title="[bold]railsmith[/bold]", border_style=border_style)
        )
