"""Errors raised by action primitives.

Every error aborts the scaffolding run; the executor attaches the failing
step and action when it reports them.
"""

from __future__ import annotations

from pathlib import Path


class ActionError(Exception):
    """Base class for unrecoverable action failures."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = str(path) if path is not None else None
        super().__init__(message)


class PathConflict(ActionError):
    """The target file already exists and overwriting was not requested."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(f"File already exists: {path}", path)


class NotFound(ActionError):
    """A file the action expects to modify does not exist."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(f"File not found: {path}", path)


class AnchorNotFound(ActionError):
    """The injection anchor is absent from the target file.

    Usually means the file produced by a framework generator no longer has
    the structure the template expects.
    """

    def __init__(self, path: str | Path, anchor: str) -> None:
        self.anchor = anchor
        super().__init__(f"Anchor {anchor!r} not found in {path}", path)


class CommandFailed(ActionError):
    """An external command exited with a non-zero status."""

    def __init__(self, argv: list[str], exit_code: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.exit_code = exit_code
        self.stderr = stderr
        message = f"Command failed (exit {exit_code}): {' '.join(argv)}"
        if stderr:
            message += f"\n{stderr.strip()}"
        super().__init__(message)
