"""Dependency declarations and their rendering into a Gemfile.

Steps declare gems while the template is being defined; the manifest turns
the declarations into Bundler syntax that is appended to the project's
Gemfile.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DependencyGroup(str, Enum):
    """Bundler group a gem belongs to (``runtime`` means no group)."""

    RUNTIME = "runtime"
    DEVELOPMENT = "development"
    TEST = "test"


class DependencyDeclaration(BaseModel):
    """A single gem requirement in one group."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, pattern=r"^[A-Za-z0-9_.-]+$")
    group: DependencyGroup = DependencyGroup.RUNTIME
    version: Optional[str] = Field(default=None, description="e.g. '~> 6.1'")
    require: Optional[bool] = Field(default=None, description="Bundler's require: option")

    @property
    def key(self) -> tuple[str, DependencyGroup]:
        return (self.name, self.group)

    def gem_line(self) -> str:
        """Render this declaration as a ``gem`` line (without indentation)."""
        parts = [f'gem "{self.name}"']
        if self.version:
            parts.append(f'"{self.version}"')
        if self.require is not None:
            parts.append(f"require: {'true' if self.require else 'false'}")
        return ", ".join(parts)


class DependencyManifest:
    """Ordered, duplicate-free collection of dependency declarations."""

    def __init__(self) -> None:
        self._declarations: list[DependencyDeclaration] = []
        self._keys: set[tuple[str, DependencyGroup]] = set()

    def __len__(self) -> int:
        return len(self._declarations)

    def __iter__(self):
        return iter(self._declarations)

    def declare(
        self,
        name: str,
        *groups: DependencyGroup | str,
        version: str | None = None,
        require: bool | None = None,
    ) -> list[DependencyDeclaration]:
        """Declare *name* in each of *groups* (runtime when none are given).

        Raises:
            ValueError: If ``(name, group)`` was already declared.
        """
        resolved = [DependencyGroup(g) for g in groups] or [DependencyGroup.RUNTIME]
        created: list[DependencyDeclaration] = []
        for group in resolved:
            decl = DependencyDeclaration(
                name=name, group=group, version=version, require=require
            )
            if decl.key in self._keys:
                raise ValueError(f"Dependency {name!r} already declared in group {group.value!r}")
            created.append(decl)

        for decl in created:
            self._keys.add(decl.key)
            self._declarations.append(decl)
        return created

    def names(self, group: DependencyGroup | str | None = None) -> list[str]:
        """Return declared gem names, optionally limited to one group."""
        wanted = DependencyGroup(group) if group is not None else None
        seen: list[str] = []
        for decl in self._declarations:
            if wanted is not None and decl.group is not wanted:
                continue
            if decl.name not in seen:
                seen.append(decl.name)
        return seen

    def render(self) -> str:
        """Render every declaration as Gemfile text.

        Runtime gems come first, one ``gem`` line each.  Grouped gems are
        collected per distinct group combination, in first-declaration order,
        into ``group :a, :b do ... end`` blocks.  The text starts with a blank
        line so it can be appended to an existing Gemfile.
        """
        if not self._declarations:
            return ""

        runtime: list[DependencyDeclaration] = []
        first_decl: dict[str, DependencyDeclaration] = {}
        groups_of: dict[str, list[DependencyGroup]] = {}
        for decl in self._declarations:
            if decl.group is DependencyGroup.RUNTIME:
                runtime.append(decl)
                continue
            first_decl.setdefault(decl.name, decl)
            groups_of.setdefault(decl.name, []).append(decl.group)

        blocks: dict[tuple[DependencyGroup, ...], list[DependencyDeclaration]] = {}
        for name, groups in groups_of.items():
            blocks.setdefault(tuple(groups), []).append(first_decl[name])

        chunks: list[str] = []
        if runtime:
            chunks.append("".join(f"{d.gem_line()}\n" for d in runtime))
        for groups, decls in blocks.items():
            header = ", ".join(f":{g.value}" for g in groups)
            body = "".join(f"  {d.gem_line()}\n" for d in decls)
            chunks.append(f"group {header} do\n{body}end\n")

        return "\n" + "\n".join(chunks)
