"""railsmith command-line interface.

Usage::

    railsmith new ./blog --database postgresql
    railsmith apply ./existing-app --no-kamal --report report.json
    railsmith steps --no-tailwind
    python -m railsmith new ./blog
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from rich.panel import Panel
from rich.table import Table

from railsmith import __version__
from railsmith.actions.commands import SubprocessRunner
from railsmith.config import Config
from railsmith.sequencer.executor import Executor
from railsmith.template.rails import RailsTemplate
from railsmith.utils import console, print_error, print_success, save_json

EXIT_USAGE = 2
EXIT_INTERRUPTED = 130

_SKIP_FLAGS: dict[str, str] = {
    "no_api": "api",
    "no_tailwind": "tailwind",
    "no_kamal": "kamal",
    "no_database": "database_setup",
    "no_git": "git",
}


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", type=Path, default=None,
                        help="JSON file with saved settings (CLI options override it)")
    common.add_argument("--app-name", default=None,
                        help="Application name (default: the directory name)")
    common.add_argument("--database", default=None,
                        help="Database adapter passed to rails new (default: postgresql)")
    common.add_argument("--javascript", default=None,
                        help="JavaScript approach passed to rails new (default: bun)")
    common.add_argument("--ruby-version", default=None,
                        help="Ruby version written to .ruby-version (default: 3.4.4)")
    common.add_argument("--no-api", action="store_true", help="Skip rack-cors setup")
    common.add_argument("--no-tailwind", action="store_true", help="Skip Tailwind CSS setup")
    common.add_argument("--no-kamal", action="store_true", help="Skip Kamal setup")
    common.add_argument("--no-database", action="store_true",
                        help="Skip db:create and db:migrate")
    common.add_argument("--no-git", action="store_true",
                        help="Skip git init and the initial commit")

    parser = argparse.ArgumentParser(
        prog="railsmith",
        description="railsmith -- scaffold a pre-configured Rails application",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  railsmith new ./blog\n"
            "  railsmith apply ./existing-app --no-kamal --report report.json\n"
            "  railsmith steps --no-tailwind\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    new = sub.add_parser("new", parents=[common],
                         help="Run rails new in PATH, then apply the template")
    new.add_argument("path", type=Path, help="Directory for the new application")
    new.add_argument("--report", type=Path, default=None,
                     help="Write the execution report as JSON to this file")

    apply = sub.add_parser("apply", parents=[common],
                           help="Apply the template to an existing Rails application")
    apply.add_argument("path", type=Path, help="Root of the Rails application")
    apply.add_argument("--report", type=Path, default=None,
                       help="Write the execution report as JSON to this file")

    steps = sub.add_parser("steps", parents=[common], help="Print the step plan and exit")
    steps.add_argument("path", type=Path, nargs="?", default=Path("."),
                       help="Project root the plan is built for (default: .)")
    steps.add_argument("--bootstrap", action="store_true",
                       help="Include the rails new step in the plan")

    return parser


def build_config(args: argparse.Namespace) -> Config:
    """Merge saved/environment settings with explicit command-line options.

    Nothing is validated until the command-line options have been layered
    on top, so an option can correct a saved or environment value.
    """
    base = Config.read_settings(args.config) if args.config else Config.env_settings()

    updates: dict[str, Any] = {"project_root": args.path}
    for option, field in (
        ("app_name", "app_name"),
        ("database", "database"),
        ("javascript", "javascript"),
        ("ruby_version", "ruby_version"),
    ):
        value = getattr(args, option)
        if value is not None:
            updates[field] = value

    if args.command == "new":
        updates["bootstrap"] = True
    elif args.command == "steps":
        updates["bootstrap"] = args.bootstrap
    else:
        updates["bootstrap"] = False

    options = dict(base.get("options") or {})
    for flag, option in _SKIP_FLAGS.items():
        if getattr(args, flag):
            options[option] = False
    updates["options"] = options

    return Config.model_validate({**base, **updates})


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _check_target(config: Config, command: str) -> str | None:
    """Return an error message if the project root is unusable for *command*."""
    root = config.project_root
    if command == "new":
        if root.exists() and (not root.is_dir() or any(root.iterdir())):
            return f"Target directory is not empty: {root}"
    elif command == "apply":
        if not (root / "Gemfile").is_file():
            return f"Not a Rails application (no Gemfile): {root}"
    return None


def _print_plan(config: Config) -> None:
    registry = RailsTemplate(config.to_context()).build_registry()
    table = Table(title="Step plan", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Step")
    table.add_column("Phase")
    table.add_column("Actions", justify="right")
    for step in registry:
        actions = str(len(step.body)) if step.body else "[dim]skipped[/dim]"
        table.add_row(str(step.ordinal), step.name, step.phase.value, actions)
    console.print(table)


def _scaffold(config: Config, report_path: Path | None) -> int:
    context = config.to_context()
    console.print(
        Panel(
            f"[bold bright_cyan]railsmith {__version__}[/bold bright_cyan]\n"
            f"App      : {context.app_name}\n"
            f"Root     : {context.root}\n"
            f"Database : {context.database}\n"
            f"JS       : {context.javascript}",
            title="[bold]Scaffold Start[/bold]",
            border_style="bright_cyan",
        )
    )

    registry = RailsTemplate(context).build_registry()
    executor = Executor(context, SubprocessRunner())
    report = executor.run(registry)

    if report_path is not None:
        save_json(report.model_dump(mode="json"), report_path)

    if report.exit_code == 0:
        print_success("Template application setup is complete!")
        console.print("To start your server, run `bin/dev`")
    return report.exit_code


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``railsmith`` and ``python -m railsmith``."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
    except (ValidationError, ValueError, OSError) as exc:
        print_error(f"Error: invalid configuration: {exc}")
        sys.exit(EXIT_USAGE)

    if args.command == "steps":
        _print_plan(config)
        sys.exit(0)

    problem = _check_target(config, args.command)
    if problem:
        print_error(f"Error: {problem}")
        sys.exit(EXIT_USAGE)

    try:
        code = _scaffold(config, args.report)
    except KeyboardInterrupt:
        print_error("Interrupted by user")
        sys.exit(EXIT_INTERRUPTED)

    sys.exit(code)


if __name__ == "__main__":
    main()
