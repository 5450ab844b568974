"""Filesystem action primitives.

Each function takes effect immediately; nothing is batched or rolled back.
Files are read and written with ``newline=""`` so existing line endings
survive edits byte-for-byte.
"""

from __future__ import annotations

import shutil
import stat
from pathlib import Path

from railsmith.context import ProjectContext

from .errors import AnchorNotFound, NotFound, PathConflict
from .models import FileAction, FileMode

_EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def _read(path: Path) -> str:
    with path.open("r", encoding="utf-8", newline="") as fh:
        return fh.read()


def _write(path: Path, content: str, mode: str = "w") -> None:
    with path.open(mode, encoding="utf-8", newline="") as fh:
        fh.write(content)


def write_file(
    ctx: ProjectContext,
    path: str | Path,
    content: str,
    overwrite: bool = False,
    executable: bool = False,
) -> Path:
    """Write *content* to *path*, creating parent directories as needed.

    Args:
        ctx: The project being scaffolded.
        path: Project-relative file path.
        content: Exact file body.
        overwrite: Replace an existing file instead of failing.
        executable: Add execute permission for owner, group and others.

    Returns:
        The absolute path written.

    Raises:
        PathConflict: If the file exists and *overwrite* is false.
    """
    target = ctx.resolve(path)
    if target.exists() and not overwrite:
        raise PathConflict(path)

    target.parent.mkdir(parents=True, exist_ok=True)
    _write(target, content)
    if executable:
        target.chmod(target.stat().st_mode | _EXEC_BITS)
    return target


def append_to_file(ctx: ProjectContext, path: str | Path, content: str) -> Path:
    """Append *content* to an existing file.

    Raises:
        NotFound: If the file does not exist.
    """
    target = ctx.resolve(path)
    if not target.is_file():
        raise NotFound(path)
    _write(target, content, mode="a")
    return target


def inject_after_anchor(
    ctx: ProjectContext, path: str | Path, anchor: str, content: str
) -> bool:
    """Insert *content* right after the first literal occurrence of *anchor*.

    Applying the same injection twice is detected: when *content* already
    follows the anchor the file is left untouched.

    Returns:
        ``True`` if the file changed, ``False`` if the content was present.

    Raises:
        NotFound: If the file does not exist.
        AnchorNotFound: If *anchor* does not occur in the file.
    """
    if not anchor:
        raise ValueError("anchor must be a non-empty string")

    target = ctx.resolve(path)
    if not target.is_file():
        raise NotFound(path)

    text = _read(target)
    index = text.find(anchor)
    if index == -1:
        raise AnchorNotFound(path, anchor)

    split = index + len(anchor)
    if text.startswith(content, split):
        return False

    _write(target, text[:split] + content + text[split:])
    return True


def remove_path(ctx: ProjectContext, path: str | Path) -> bool:
    """Remove a file or a directory tree.  A missing path is not an error.

    Returns:
        ``True`` if something was removed.
    """
    target = ctx.resolve(path)
    if target == ctx.root.resolve():
        raise ValueError("Refusing to remove the project root")
    if target.is_dir():
        shutil.rmtree(target)
        return True
    if target.exists():
        target.unlink()
        return True
    return False


def apply_file_action(ctx: ProjectContext, action: FileAction) -> str:
    """Dispatch *action* to its primitive.

    Returns:
        The Thor-style status verb describing what happened (``create``,
        ``force``, ``append``, ``inject``, ``identical`` or ``remove``).
    """
    if action.mode is FileMode.CREATE:
        write_file(ctx, action.path, action.content, executable=action.executable)
        return "create"
    if action.mode is FileMode.OVERWRITE:
        existed = ctx.resolve(action.path).exists()
        write_file(
            ctx, action.path, action.content, overwrite=True, executable=action.executable
        )
        return "force" if existed else "create"
    if action.mode is FileMode.APPEND:
        append_to_file(ctx, action.path, action.content)
        return "append"
    if action.mode is FileMode.INJECT:
        if not action.anchor:
            raise ValueError(f"inject action on {action.path} has no anchor")
        changed = inject_after_anchor(ctx, action.path, action.anchor, action.content)
        return "inject" if changed else "identical"
    if action.mode is FileMode.REMOVE:
        removed = remove_path(ctx, action.path)
        return "remove" if removed else "identical"
    raise ValueError(f"Unsupported file mode: {action.mode}")
