"""External command execution behind a ``CommandRunner`` capability.

The executor depends only on the protocol, so tests can substitute a double
that simulates generator output or failures without spawning processes.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from railsmith.context import ProjectContext
from railsmith.utils import run_command

from .errors import CommandFailed
from .models import ExternalCommand


@dataclass(frozen=True)
class CommandResult:
    """Exit status and (optionally captured) output of one command."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@runtime_checkable
class CommandRunner(Protocol):
    """Anything that can run an argument vector in a directory and wait for it."""

    def run(self, argv: list[str], cwd: Path) -> CommandResult: ...


class SubprocessRunner:
    """Runs commands as real child processes, blocking until they exit.

    Output is streamed to the terminal unless *capture* is set, in which case
    it is kept on the ``CommandResult`` instead.
    """

    def __init__(self, capture: bool = False, env: dict[str, str] | None = None) -> None:
        self.capture = capture
        self.env = env

    def run(self, argv: list[str], cwd: Path) -> CommandResult:
        returncode, stdout, stderr = run_command(
            argv, cwd=cwd, capture=self.capture, env=self.env
        )
        return CommandResult(returncode=returncode, stdout=stdout, stderr=stderr)


def run_external_command(
    ctx: ProjectContext, command: ExternalCommand, runner: CommandRunner
) -> CommandResult:
    """Run *command* in the project root.

    Raises:
        CommandFailed: On a non-zero exit when ``command.must_succeed`` is set.
    """
    ctx.root.mkdir(parents=True, exist_ok=True)
    result = runner.run(list(command.argv), ctx.root)
    if not result.ok and command.must_succeed:
        raise CommandFailed(command.argv, result.returncode, result.stderr)
    return result
