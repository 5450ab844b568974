"""Unit tests for the command-line interface (railsmith.cli).

External commands never run: ``SubprocessRunner`` is patched with the
recording double from ``conftest.py``.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from railsmith.cli import _build_parser, build_config, main


def _exit_code(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("RAILSMITH_PROJECT_ROOT", "RAILSMITH_APP_NAME", "RAILSMITH_RUBY_VERSION",
                 "RAILSMITH_DATABASE", "RAILSMITH_JAVASCRIPT", "RAILSMITH_BOOTSTRAP",
                 "RAILSMITH_SKIP"):
        monkeypatch.delenv(name, raising=False)


# ---------------------------------------------------------------------------
# build_config
# ---------------------------------------------------------------------------


class TestBuildConfig:
    @pytest.mark.unit
    def test_new_sets_bootstrap(self, tmp_path: Path):
        args = _build_parser().parse_args(["new", str(tmp_path / "blog")])
        config = build_config(args)
        assert config.bootstrap is True
        assert config.resolved_app_name == "blog"

    @pytest.mark.unit
    def test_apply_overrides_and_skips(self, tmp_path: Path):
        args = _build_parser().parse_args(
            ["apply", str(tmp_path), "--database", "sqlite3", "--no-kamal", "--no-git",
             "--app-name", "shop"]
        )
        config = build_config(args)
        assert config.bootstrap is False
        assert config.database == "sqlite3"
        assert config.app_name == "shop"
        assert config.options.kamal is False
        assert config.options.git is False
        assert config.options.api is True

    @pytest.mark.unit
    def test_config_file_is_base(self, tmp_path: Path, make_config):
        saved = make_config(tmp_path / "elsewhere", tailwind=False)
        saved = saved.model_copy(update={"javascript": "importmap"})
        saved_path = saved.save(tmp_path / "railsmith.json")

        args = _build_parser().parse_args(
            ["apply", str(tmp_path / "blog"), "--config", str(saved_path)]
        )
        config = build_config(args)

        assert config.project_root == tmp_path / "blog"
        assert config.javascript == "importmap"
        assert config.options.tailwind is False

    @pytest.mark.unit
    def test_option_completes_environment_settings(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("RAILSMITH_JAVASCRIPT", "importmap")
        args = _build_parser().parse_args(["steps", str(tmp_path), "--no-tailwind"])
        config = build_config(args)
        assert config.javascript == "importmap"
        assert config.options.tailwind is False

    @pytest.mark.unit
    def test_option_overrides_invalid_environment_value(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("RAILSMITH_DATABASE", "oracle")
        monkeypatch.setenv("RAILSMITH_SKIP", "kamal")
        args = _build_parser().parse_args(["apply", str(tmp_path), "--database", "sqlite3"])
        config = build_config(args)
        assert config.database == "sqlite3"
        assert config.options.kamal is False

    @pytest.mark.unit
    def test_option_corrects_saved_settings(self, tmp_path: Path):
        saved_path = tmp_path / "railsmith.json"
        saved_path.write_text(json.dumps({"javascript": "importmap"}))
        args = _build_parser().parse_args(
            ["apply", str(tmp_path), "--config", str(saved_path), "--no-tailwind"]
        )
        config = build_config(args)
        assert config.javascript == "importmap"
        assert config.options.tailwind is False


# ---------------------------------------------------------------------------
# main
# ---------------------------------------------------------------------------


class TestMain:
    @pytest.mark.unit
    def test_steps_prints_plan(self, tmp_path: Path, capsys):
        assert _exit_code(["steps", str(tmp_path), "--no-tailwind"]) == 0
        out = capsys.readouterr().out
        assert "install dependencies" in out
        assert "initial commit" in out

    @pytest.mark.unit
    def test_steps_with_environment_and_skip_flag(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("RAILSMITH_JAVASCRIPT", "importmap")
        assert _exit_code(["steps", str(tmp_path), "--no-tailwind"]) == 0

    @pytest.mark.unit
    def test_invalid_option_is_usage_error(self, tmp_path: Path):
        assert _exit_code(["new", str(tmp_path / "blog"), "--database", "oracle"]) == 2

    @pytest.mark.unit
    def test_tailwind_without_bun_is_usage_error(self, tmp_path: Path):
        assert _exit_code(["new", str(tmp_path / "blog"), "--javascript", "importmap"]) == 2

    @pytest.mark.unit
    def test_new_refuses_non_empty_dir(self, rails_app: Path, capsys):
        assert _exit_code(["new", str(rails_app)]) == 2
        assert "not empty" in capsys.readouterr().err

    @pytest.mark.unit
    def test_apply_requires_gemfile(self, tmp_project_dir: Path, capsys):
        assert _exit_code(["apply", str(tmp_project_dir)]) == 2
        assert "no Gemfile" in capsys.readouterr().err

    @pytest.mark.unit
    def test_new_runs_full_sequence(self, tmp_path: Path, make_rails_runner, capsys):
        runner = make_rails_runner()
        target = tmp_path / "blog"
        report_path = tmp_path / "report.json"

        with patch("railsmith.cli.SubprocessRunner", return_value=runner):
            code = _exit_code(["new", str(target), "--report", str(report_path)])

        assert code == 0
        assert runner.calls[0][:2] == ["rails", "new"]
        assert runner.calls[-1][:2] == ["git", "commit"]
        assert (target / "config/initializers/cors.rb").is_file()
        assert "bin/dev" in capsys.readouterr().out

        report = json.loads(report_path.read_text())
        assert report["state"] == "completed"
        assert report["exit_code"] == 0
        assert len(report["steps_completed"]) == 13

    @pytest.mark.unit
    def test_apply_failure_exit_code(self, rails_app: Path, make_rails_runner):
        runner = make_rails_runner(fail_on={("bundle", "install"): 1})
        with patch("railsmith.cli.SubprocessRunner", return_value=runner):
            code = _exit_code(["apply", str(rails_app)])
        assert code == 1
        assert not runner.ran("bin/rails")

    @pytest.mark.unit
    def test_keyboard_interrupt(self, rails_app: Path):
        with patch("railsmith.cli._scaffold", side_effect=KeyboardInterrupt):
            assert _exit_code(["apply", str(rails_app)]) == 130

    @pytest.mark.unit
    def test_version(self, capsys):
        assert _exit_code(["--version"]) == 0
        assert "railsmith" in capsys.readouterr().out
