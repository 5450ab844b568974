"""Unit tests for ProjectContext (railsmith.context)."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from railsmith.context import ProjectContext


class TestProjectContext:
    @pytest.mark.unit
    def test_unknown_flag_is_off(self, project_context):
        assert project_context.flag("api") is True
        assert project_context.flag("bootstrap") is False
        assert project_context.flag("nonexistent") is False

    @pytest.mark.unit
    def test_resolve_relative(self, project_context, tmp_project_dir):
        assert project_context.resolve("config/routes.rb") == (
            tmp_project_dir.resolve() / "config/routes.rb"
        )

    @pytest.mark.unit
    def test_resolve_rejects_absolute(self, project_context):
        with pytest.raises(ValueError, match="project-relative"):
            project_context.resolve(Path("/etc/passwd").resolve())

    @pytest.mark.unit
    def test_resolve_rejects_escape(self, project_context):
        with pytest.raises(ValueError, match="escapes"):
            project_context.resolve("config/../../outside")

    @pytest.mark.unit
    def test_resolve_root_itself(self, project_context, tmp_project_dir):
        assert project_context.resolve(".") == tmp_project_dir.resolve()

    @pytest.mark.unit
    def test_immutable(self, project_context):
        with pytest.raises(ValidationError):
            project_context.app_name = "other"

    @pytest.mark.unit
    def test_app_name_required(self, tmp_path):
        with pytest.raises(ValidationError):
            ProjectContext(root=tmp_path, app_name="")
