"""Action primitives: the only code that touches the project tree.

Quick usage::

    from railsmith.actions import FileAction, FileMode, apply_file_action

    action = FileAction(path=".ruby-version", mode=FileMode.CREATE, content="3.4.4")
    apply_file_action(ctx, action)
"""

from railsmith.actions.commands import (
    CommandResult,
    CommandRunner,
    SubprocessRunner,
    run_external_command,
)
from railsmith.actions.errors import (
    ActionError,
    AnchorNotFound,
    CommandFailed,
    NotFound,
    PathConflict,
)
from railsmith.actions.files import (
    append_to_file,
    apply_file_action,
    inject_after_anchor,
    remove_path,
    write_file,
)
from railsmith.actions.manifest import (
    DependencyDeclaration,
    DependencyGroup,
    DependencyManifest,
)
from railsmith.actions.models import Action, ExternalCommand, FileAction, FileMode

__all__ = [
    "Action",
    "ActionError",
    "AnchorNotFound",
    "CommandFailed",
    "CommandResult",
    "CommandRunner",
    "DependencyDeclaration",
    "DependencyGroup",
    "DependencyManifest",
    "ExternalCommand",
    "FileAction",
    "FileMode",
    "NotFound",
    "PathConflict",
    "SubprocessRunner",
    "append_to_file",
    "apply_file_action",
    "inject_after_anchor",
    "remove_path",
    "run_external_command",
    "write_file",
]
