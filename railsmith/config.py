"""railsmith configuration.

Centralised, typed configuration for a scaffolding run. All settings use
Pydantic v2 models so they can be validated at construction time and serialised
to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from railsmith.context import ProjectContext

# Adapters accepted by ``rails new --database``.
DatabaseAdapter = Literal[
    "postgresql",
    "mysql",
    "trilogy",
    "sqlite3",
    "mariadb-mysql",
    "mariadb-trilogy",
]

JavascriptTool = Literal["bun", "importmap", "webpack", "esbuild", "rollup"]


class TemplateOptions(BaseModel):
    """Feature switches consulted inside step bodies.

    A disabled feature keeps its step in the plan but yields an empty body.
    """

    api: bool = Field(default=True, description="Configure rack-cors for API access")
    tailwind: bool = Field(default=True, description="Install Tailwind CSS through postcss")
    kamal: bool = Field(default=True, description="Add kamal and run `kamal init` for deployment")
    database_setup: bool = Field(default=True, description="Run db:create and db:migrate")
    git: bool = Field(default=True, description="Initialise git and make the first commit")

    def as_flags(self) -> dict[str, bool]:
        """Return a plain ``{option: enabled}`` mapping."""
        return self.model_dump()


class Config(BaseModel):
    """Global railsmith configuration.

    Instances are typically created once by the CLI entry point and then
    turned into an immutable ``ProjectContext`` for the sequencer.
    """

    project_root: Path = Field(default=Path("."))
    app_name: str = Field(default="", description="Defaults to the project root's directory name")
    ruby_version: str = Field(default="3.4.4", pattern=r"^\d+\.\d+\.\d+$")
    database: DatabaseAdapter = Field(default="postgresql")
    javascript: JavascriptTool = Field(default="bun")
    bootstrap: bool = Field(default=False, description="Run `rails new` before the template")
    commit_message: str = Field(
        default="Initial commit: Rails app configured with custom template"
    )
    options: TemplateOptions = Field(default_factory=TemplateOptions)

    @field_validator("commit_message")
    @classmethod
    def _non_blank_message(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("commit_message must not be blank")
        return value

    @model_validator(mode="after")
    def _tailwind_needs_bun(self) -> "Config":
        # Tailwind is installed with `bun add` and watched through Procfile.dev.
        if self.options.tailwind and self.javascript != "bun":
            raise ValueError("the tailwind option requires javascript='bun'")
        return self

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def resolved_app_name(self) -> str:
        """The explicit app name, or the project root's directory name."""
        return self.app_name or self.project_root.resolve().name

    def to_context(self) -> ProjectContext:
        """Freeze this configuration into the context handed to every action."""
        return ProjectContext(
            root=self.project_root.resolve(),
            app_name=self.resolved_app_name,
            database=self.database,
            javascript=self.javascript,
            ruby_version=self.ruby_version,
            commit_message=self.commit_message,
            flags={**self.options.as_flags(), "bootstrap": self.bootstrap},
        )

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        return cls.model_validate(cls.read_settings(path))

    @staticmethod
    def read_settings(path: Path) -> dict[str, Any]:
        """Return the raw, unvalidated settings stored in a JSON file."""
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError(f"Expected a JSON object in {path}")
        return raw

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables."""
        return cls.model_validate(cls.env_settings())

    @staticmethod
    def env_settings() -> dict[str, Any]:
        """Collect raw settings from environment variables.

        Values are not validated here so callers can layer overrides on top
        before building a ``Config``.

        Recognised variables (all optional):
            RAILSMITH_PROJECT_ROOT, RAILSMITH_APP_NAME, RAILSMITH_RUBY_VERSION,
            RAILSMITH_DATABASE, RAILSMITH_JAVASCRIPT, RAILSMITH_BOOTSTRAP,
            RAILSMITH_SKIP (comma-separated option names to disable, e.g.
            ``kamal,git``).

        Raises:
            ValueError: If RAILSMITH_SKIP names an unknown option.
        """
        settings: dict[str, Any] = {}
        if os.environ.get("RAILSMITH_PROJECT_ROOT"):
            settings["project_root"] = Path(os.environ["RAILSMITH_PROJECT_ROOT"])
        if os.environ.get("RAILSMITH_APP_NAME"):
            settings["app_name"] = os.environ["RAILSMITH_APP_NAME"]
        if os.environ.get("RAILSMITH_RUBY_VERSION"):
            settings["ruby_version"] = os.environ["RAILSMITH_RUBY_VERSION"]
        if os.environ.get("RAILSMITH_DATABASE"):
            settings["database"] = os.environ["RAILSMITH_DATABASE"]
        if os.environ.get("RAILSMITH_JAVASCRIPT"):
            settings["javascript"] = os.environ["RAILSMITH_JAVASCRIPT"]
        if os.environ.get("RAILSMITH_BOOTSTRAP"):
            settings["bootstrap"] = os.environ["RAILSMITH_BOOTSTRAP"].strip().lower() in (
                "1",
                "true",
                "yes",
            )

        skipped = [
            s.strip() for s in os.environ.get("RAILSMITH_SKIP", "").split(",") if s.strip()
        ]
        unknown = [s for s in skipped if s not in TemplateOptions.model_fields]
        if unknown:
            raise ValueError(f"Unknown option(s) in RAILSMITH_SKIP: {', '.join(unknown)}")
        settings["options"] = {s: False for s in skipped}

        return settings
