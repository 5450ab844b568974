"""Shared pytest fixtures for the railsmith test suite.

Provides reusable fixtures for:
- Temporary project directories and contexts
- A recording ``CommandRunner`` double that never spawns processes
- A Rails simulator: the same double, primed to write the files that
  ``rails new`` and the generators used by the template would create
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from railsmith.actions.commands import CommandResult
from railsmith.config import Config, TemplateOptions
from railsmith.context import ProjectContext


# ---------------------------------------------------------------------------
# Paths & contexts
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Empty directory standing in for the project root (auto-cleanup)."""
    project_dir = tmp_path / "blog"
    project_dir.mkdir()
    yield project_dir


@pytest.fixture
def project_context(tmp_project_dir: Path) -> ProjectContext:
    """Context with every feature flag enabled, rooted at ``tmp_project_dir``."""
    return ProjectContext(
        root=tmp_project_dir,
        app_name="blog",
        flags={
            "api": True,
            "tailwind": True,
            "kamal": True,
            "database_setup": True,
            "git": True,
            "bootstrap": False,
        },
    )


@pytest.fixture
def make_config() -> Callable[..., Config]:
    """Factory for a ``Config`` rooted at a given directory."""

    def _make(root: Path, bootstrap: bool = False, **options: bool) -> Config:
        return Config(
            project_root=root,
            app_name="blog",
            bootstrap=bootstrap,
            options=TemplateOptions(**options),
        )

    return _make


# ---------------------------------------------------------------------------
# Command runner doubles
# ---------------------------------------------------------------------------

Effect = Callable[[Path], None]


class RecordingRunner:
    """``CommandRunner`` double.

    Records every call.  ``fail_on`` maps an argv prefix to the exit code to
    return; ``effects`` maps an argv prefix to a callback that mutates the
    project tree, simulating what the real command would write.
    """

    def __init__(
        self,
        fail_on: dict[tuple[str, ...], int] | None = None,
        effects: dict[tuple[str, ...], Effect] | None = None,
    ) -> None:
        self.fail_on = dict(fail_on or {})
        self.effects = dict(effects or {})
        self.calls: list[list[str]] = []

    def run(self, argv: list[str], cwd: Path) -> CommandResult:
        self.calls.append(list(argv))
        for prefix, code in self.fail_on.items():
            if tuple(argv[: len(prefix)]) == prefix:
                return CommandResult(returncode=code, stderr=f"simulated failure: {argv[0]}")
        for prefix, effect in self.effects.items():
            if tuple(argv[: len(prefix)]) == prefix:
                effect(cwd)
                break
        return CommandResult(returncode=0)

    def ran(self, *argv: str) -> bool:
        """True if a call started with *argv*."""
        return any(tuple(call[: len(argv)]) == argv for call in self.calls)


def _write(root: Path, rel: str, content: str) -> None:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


GEMFILE = 'source "https://rubygems.org"\n\ngem "rails", "~> 8.0.2"\ngem "pg", "~> 1.1"\n'
ROUTES = (
    "Rails.application.routes.draw do\n"
    '  get "up" => "rails/health#show", as: :rails_health_check\n'
    "end\n"
)
DEVELOPMENT_RB = (
    'require "active_support/core_ext/integer/time"\n'
    "\n"
    "Rails.application.configure do\n"
    "  config.enable_reloading = true\n"
    "end\n"
)
RAILS_HELPER = (
    "require 'spec_helper'\n"
    "ENV['RAILS_ENV'] ||= 'test'\n"
    "RSpec.configure do |config|\n"
    "  config.fixture_paths = [Rails.root.join('spec/fixtures')]\n"
    "end\n"
)


def simulate_rails_new(root: Path) -> None:
    _write(root, "Gemfile", GEMFILE)
    _write(root, ".ruby-version", "ruby-3.4.4\n")
    _write(root, "config/routes.rb", ROUTES)
    _write(root, "config/environments/development.rb", DEVELOPMENT_RB)
    _write(root, "test/test_helper.rb", 'ENV["RAILS_ENV"] ||= "test"\n')


def simulate_javascript_install(root: Path) -> None:
    _write(root, "Procfile.dev", "web: env RUBY_DEBUG_OPEN=true bin/rails server\njs: bun run build --watch\n")
    _write(root, "bin/dev", "#!/usr/bin/env sh\nexec foreman start -f Procfile.dev\n")


def simulate_rspec_install(root: Path) -> None:
    _write(root, "spec/spec_helper.rb", "RSpec.configure do |config|\nend\n")
    _write(root, "spec/rails_helper.rb", RAILS_HELPER)


def simulate_welcome_controller(root: Path) -> None:
    _write(root, "app/controllers/welcome_controller.rb",
           "class WelcomeController < ApplicationController\n  def index\n  end\nend\n")
    _write(root, "app/views/welcome/index.html.erb", "<h1>Welcome#index</h1>\n")
    routes = root / "config/routes.rb"
    text = routes.read_text(encoding="utf-8")
    anchor = "Rails.application.routes.draw do\n"
    routes.write_text(text.replace(anchor, anchor + '  get "welcome/index"\n', 1), encoding="utf-8")


RAILS_EFFECTS: dict[tuple[str, ...], Effect] = {
    ("rails", "new"): simulate_rails_new,
    ("bin/rails", "javascript:install:bun"): simulate_javascript_install,
    ("bin/rails", "generate", "rspec:install"): simulate_rspec_install,
    ("bin/rails", "generate", "controller", "Welcome", "index"): simulate_welcome_controller,
}


@pytest.fixture
def make_runner() -> Callable[..., RecordingRunner]:
    """Factory for a bare ``RecordingRunner``."""
    return RecordingRunner


@pytest.fixture
def make_rails_runner() -> Callable[..., RecordingRunner]:
    """Factory for a runner that simulates ``rails new`` and the generators."""

    def _make(fail_on: dict[tuple[str, ...], int] | None = None) -> RecordingRunner:
        return RecordingRunner(fail_on=fail_on, effects=RAILS_EFFECTS)

    return _make


@pytest.fixture
def rails_app(tmp_project_dir: Path) -> Path:
    """A project directory that already looks like ``rails new --javascript=bun`` output."""
    simulate_rails_new(tmp_project_dir)
    simulate_javascript_install(tmp_project_dir)
    return tmp_project_dir
