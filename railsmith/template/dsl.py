"""Action builders mirroring the Rails application-template helpers.

Each helper returns plain action data; nothing happens until the executor
runs the step that holds it.  Anchors match what current Rails generators
write, so a drifted generator surfaces as ``AnchorNotFound``.
"""

from __future__ import annotations

from railsmith.actions.models import ExternalCommand, FileAction, FileMode

ROUTES_FILE = "config/routes.rb"
ROUTES_ANCHOR = "Rails.application.routes.draw do\n"
ENVIRONMENT_ANCHOR = "Rails.application.configure do\n"


def create_file(path: str, content: str, executable: bool = False) -> FileAction:
    return FileAction(path=path, mode=FileMode.CREATE, content=content, executable=executable)


def force_file(path: str, content: str, executable: bool = False) -> FileAction:
    """Create or replace *path*."""
    return FileAction(
        path=path, mode=FileMode.OVERWRITE, content=content, executable=executable
    )


def append_file(path: str, content: str) -> FileAction:
    return FileAction(path=path, mode=FileMode.APPEND, content=content)


def inject_into_file(path: str, content: str, after: str) -> FileAction:
    return FileAction(path=path, mode=FileMode.INJECT, content=content, anchor=after)


def remove(path: str) -> FileAction:
    return FileAction(path=path, mode=FileMode.REMOVE)


def initializer(filename: str, content: str) -> FileAction:
    """Create ``config/initializers/<filename>``."""
    return create_file(f"config/initializers/{filename}", content)


def environment(data: str, env: str) -> FileAction:
    """Add one line of configuration to ``config/environments/<env>.rb``."""
    return inject_into_file(
        f"config/environments/{env}.rb", f"  {data}\n", after=ENVIRONMENT_ANCHOR
    )


def route(routing_code: str) -> FileAction:
    """Add a line to the top of the route set."""
    return inject_into_file(ROUTES_FILE, f"  {routing_code}\n", after=ROUTES_ANCHOR)


def run(*argv: str, must_succeed: bool = True) -> ExternalCommand:
    return ExternalCommand(argv=list(argv), must_succeed=must_succeed)


def rails_command(*args: str) -> ExternalCommand:
    """``bin/rails <task>``, e.g. ``db:create``."""
    return run("bin/rails", *args)


def generate(*args: str) -> ExternalCommand:
    """``bin/rails generate <generator> [args]``."""
    return rails_command("generate", *args)


def bundle(*args: str) -> ExternalCommand:
    return run("bundle", *args)


def git(*args: str) -> ExternalCommand:
    return run("git", *args)
