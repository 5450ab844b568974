"""Shared utility functions for railsmith.

Provides synchronous command execution, JSON I/O, name helpers and Rich-based
console reporting.  Every step of a scaffolding run reports through the
module-level ``console`` so output stays consistent.
"""

from __future__ import annotations

import json
import os
import re
import subprocess
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule

console = Console()
err_console = Console(stderr=True)

# ---------------------------------------------------------------------------
# Command execution
# ---------------------------------------------------------------------------


def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    capture: bool = False,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run a command synchronously and wait for it to exit.

    No timeout is applied: generators such as ``bundle install`` may take as
    long as they need.

    Args:
        cmd: Argument vector; the first element is the executable.
        cwd: Working directory for the child process.
        capture: Whether to capture stdout/stderr (if ``False`` they inherit
            the parent's streams so generator output is shown live).
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  If *capture* is ``False``
        the stdout/stderr strings will be empty.  A missing executable is
        reported as return code 127, like a POSIX shell does.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            env=merged_env,
            text=True,
            capture_output=capture,
        )
    except FileNotFoundError:
        return 127, "", f"command not found: {cmd[0]}"

    return proc.returncode, proc.stdout or "", proc.stderr or ""


# ---------------------------------------------------------------------------
# JSON helpers
# ---------------------------------------------------------------------------


def save_json(data: dict[str, Any] | list[Any], path: str | Path) -> Path:
    """Save data as pretty-printed JSON, creating parent directories."""
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(
        json.dumps(data, indent=2, ensure_ascii=False, default=str) + "\n",
        encoding="utf-8",
    )
    return file_path


# ---------------------------------------------------------------------------
# Argv helpers
# ---------------------------------------------------------------------------


def format_argv(argv: list[str]) -> str:
    """Render an argument vector the way a user would type it."""
    parts = []
    for arg in argv:
        if not arg or re.search(r"[\s'\"]", arg):
            parts.append("'" + arg.replace("'", "'\\''") + "'")
        else:
            parts.append(arg)
    return " ".join(parts)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
        format_duration(3661.0) -> "1h 1m 1s"
    """
    if seconds < 0:
        return "0.0s"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = seconds % 60

    parts: list[str] = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")

    if hours > 0 or minutes > 0:
        parts.append(f"{int(secs)}s")
    else:
        parts.append(f"{secs:.1f}s")

    return " ".join(parts)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


# Thor-style status verbs and their colours.
ACTION_COLORS: dict[str, str] = {
    "create": "green",
    "force": "yellow",
    "append": "green",
    "inject": "green",
    "identical": "blue",
    "remove": "red",
    "run": "cyan",
    "ignored": "yellow",
    "failed": "bold red",
}


def print_step_header(ordinal: int, name: str, phase: str) -> None:
    """Print a rule announcing the start of a step."""
    console.print()
    console.print(
        Rule(
            f"[bold bright_cyan] {ordinal}. {escape(name)} [/bold bright_cyan]"
            f"[dim]({phase})[/dim]",
            style="bright_cyan",
        )
    )


def print_action(verb: str, target: str) -> None:
    """Print one right-aligned, coloured status line (``   create  path``)."""
    color = ACTION_COLORS.get(verb, "white")
    console.print(f"[{color}]{verb:>12}[/{color}]  {escape(target)}", highlight=False)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message to stderr."""
    err_console.print(f"[bold red]{escape(message)}[/bold red]", highlight=False)


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
