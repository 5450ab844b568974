"""Pydantic models describing the actions a step performs.

Actions are plain data: they are built when the template is defined and only
take effect when the executor hands them to a primitive.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from railsmith.utils import format_argv


class FileMode(str, Enum):
    """How a ``FileAction`` touches its target."""

    CREATE = "create"
    OVERWRITE = "overwrite"
    APPEND = "append"
    INJECT = "inject"
    REMOVE = "remove"


class FileAction(BaseModel):
    """A single filesystem effect relative to the project root."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., min_length=1, description="Project-relative target path")
    mode: FileMode
    content: str = Field(default="")
    anchor: Optional[str] = Field(
        default=None, description="Literal text to insert after (inject mode only)"
    )
    executable: bool = Field(default=False, description="Set execute bits after writing")

    @model_validator(mode="after")
    def _check_anchor(self) -> "FileAction":
        if self.mode is FileMode.INJECT and not self.anchor:
            raise ValueError(f"inject action on {self.path} requires an anchor")
        if self.mode is not FileMode.INJECT and self.anchor is not None:
            raise ValueError(f"anchor is only valid for inject actions ({self.path})")
        if self.executable and self.mode not in (FileMode.CREATE, FileMode.OVERWRITE):
            raise ValueError(f"executable only applies to written files ({self.path})")
        return self

    def describe(self) -> str:
        if self.mode is FileMode.INJECT:
            return f"inject into {self.path} after {self.anchor!r}"
        return f"{self.mode.value} {self.path}"


class ExternalCommand(BaseModel):
    """Delegation to a framework generator, package manager or git."""

    model_config = ConfigDict(frozen=True)

    argv: list[str] = Field(..., min_length=1)
    must_succeed: bool = True

    def describe(self) -> str:
        return f"run {format_argv(self.argv)}"


Action = Union[FileAction, ExternalCommand]
