"""Unit tests for action data models and errors (railsmith.actions.models/errors)."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from railsmith.actions.errors import ActionError, AnchorNotFound, CommandFailed, PathConflict
from railsmith.actions.models import ExternalCommand, FileAction, FileMode


class TestFileAction:
    @pytest.mark.unit
    def test_inject_requires_anchor(self):
        with pytest.raises(ValidationError):
            FileAction(path="config/routes.rb", mode=FileMode.INJECT, content="x")

    @pytest.mark.unit
    def test_anchor_only_for_inject(self):
        with pytest.raises(ValidationError):
            FileAction(path="Gemfile", mode=FileMode.APPEND, content="x", anchor="y")

    @pytest.mark.unit
    def test_executable_only_for_written_files(self):
        with pytest.raises(ValidationError):
            FileAction(path="Procfile.dev", mode=FileMode.APPEND, executable=True)
        action = FileAction(path="bin/dev", mode=FileMode.OVERWRITE, executable=True)
        assert action.executable is True

    @pytest.mark.unit
    def test_empty_path_rejected(self):
        with pytest.raises(ValidationError):
            FileAction(path="", mode=FileMode.CREATE)

    @pytest.mark.unit
    def test_frozen(self):
        action = FileAction(path="a", mode=FileMode.CREATE)
        with pytest.raises(ValidationError):
            action.path = "b"

    @pytest.mark.unit
    def test_describe(self):
        assert FileAction(path="Gemfile", mode=FileMode.APPEND).describe() == "append Gemfile"
        inject = FileAction(path="r.rb", mode=FileMode.INJECT, anchor="do\n")
        assert inject.describe() == "inject into r.rb after 'do\\n'"


class TestExternalCommand:
    @pytest.mark.unit
    def test_defaults_to_must_succeed(self):
        assert ExternalCommand(argv=["bundle", "install"]).must_succeed is True

    @pytest.mark.unit
    def test_empty_argv_rejected(self):
        with pytest.raises(ValidationError):
            ExternalCommand(argv=[])

    @pytest.mark.unit
    def test_describe_quotes_arguments(self):
        cmd = ExternalCommand(argv=["git", "commit", "-m", "Initial commit"])
        assert cmd.describe() == "run git commit -m 'Initial commit'"


class TestActionErrors:
    @pytest.mark.unit
    def test_hierarchy(self):
        for exc in (
            PathConflict("a"),
            AnchorNotFound("a", "b"),
            CommandFailed(["x"], 1),
        ):
            assert isinstance(exc, ActionError)

    @pytest.mark.unit
    def test_command_failed_message_includes_stderr(self):
        exc = CommandFailed(["bundle", "install"], 5, "Could not find gem 'nope'\n")
        assert exc.exit_code == 5
        assert exc.argv == ["bundle", "install"]
        assert "exit 5" in str(exc)
        assert "Could not find gem 'nope'" in str(exc)
