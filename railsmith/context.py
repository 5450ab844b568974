"""The project context handed to every action primitive.

Rails templates read the "current project" from ambient generator state.
Here that state is an explicit, immutable value built once from ``Config``.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class ProjectContext(BaseModel):
    """Root path, generation choices and feature flags for one run."""

    model_config = ConfigDict(frozen=True)

    root: Path
    app_name: str = Field(..., min_length=1)
    database: str = "postgresql"
    javascript: str = "bun"
    ruby_version: str = "3.4.4"
    commit_message: str = "Initial commit"
    flags: dict[str, bool] = Field(default_factory=dict)

    def flag(self, name: str) -> bool:
        """Return whether feature *name* is enabled (unknown flags are off)."""
        return self.flags.get(name, False)

    def resolve(self, path: str | Path) -> Path:
        """Map a project-relative *path* to an absolute path under ``root``.

        Raises:
            ValueError: If *path* is absolute or escapes the project root.
        """
        rel = Path(path)
        if rel.is_absolute():
            raise ValueError(f"Expected a project-relative path, got: {path}")
        root = self.root.resolve()
        target = (root / rel).resolve()
        if target != root and root not in target.parents:
            raise ValueError(f"Path escapes the project root: {path}")
        return target
