"""End-to-end tests through :func:`ci_cli.cli.app.main` and the
:func:`ci_cli.cli.app.cli` error boundary.

Only commands that stay on the local filesystem are exercised for
real; git is patched out of idea-store resolution.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from ci_cli.cli import exit_codes
from ci_cli.cli.app import cli, main
from ci_cli.exceptions import ValidationError


def _run_cli(monkeypatch: pytest.MonkeyPatch, *argv: str) -> int:
    monkeypatch.setattr("sys.argv", ["ci", *argv])
    with pytest.raises(SystemExit) as exc_info:
        cli()
    return exc_info.value.code  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# ci config
# ---------------------------------------------------------------------------

class TestConfigCommands:
    def test_init_get_set_show(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        project = str(tmp_path)
        assert main(["config", "init", project, "--project-name", "demo", "--agents", "Athena, Analyst"]) == 0
        assert (tmp_path / ".ci-config.json").is_file()
        capsys.readouterr()

        main(["config", "agents", project])
        assert capsys.readouterr().out.strip() == "Athena, Analyst"

        main(["config", "set", project, "--key", "fast_activation", "--value", "no"])
        main(["config", "get", project, "--key", "fast_activation"])
        assert capsys.readouterr().out.strip() == "false"

        main(["config", "show", project, "--format", "json"])
        data = json.loads(capsys.readouterr().out)
        assert data["project_name"] == "demo"
        assert data["fast_activation"] is False

    def test_init_twice(self, tmp_path: Path) -> None:
        main(["config", "init", str(tmp_path)])
        with pytest.raises(ValidationError, match="already exists"):
            main(["config", "init", str(tmp_path)])

    def test_nearest_config_from_subdirectory(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main(["config", "init", str(tmp_path), "--project-name", "outer"])
        nested = tmp_path / "src" / "pkg"
        nested.mkdir(parents=True)
        capsys.readouterr()
        main(["config", "project", str(nested)])
        assert capsys.readouterr().out.strip() == "outer"

    def test_get_requires_key(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError, match="Key parameter is required"):
            main(["config", "get", str(tmp_path)])


# ---------------------------------------------------------------------------
# ci idea
# ---------------------------------------------------------------------------

@patch("ci_cli.infra.idea_store.is_work_tree", return_value=False)
class TestIdeaCommands:
    def test_add_list_view_delete(
        self,
        _mock_git: MagicMock,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
        monkeypatch.chdir(tmp_path)

        main(["idea", "add", "-t", "Offline mode", "-c", "Features", "--tags", "cache, memory"])
        idea_id = capsys.readouterr().out.strip().splitlines()[-1]
        assert (tmp_path / "data" / "ci" / "ideas.json").is_file()

        main(["idea", "update", "-i", idea_id, "-s", "development", "-p", "high"])
        main(["idea", "list", "-f", "offline"])
        assert "[In Development] Offline mode" in capsys.readouterr().out

        main(["idea", "view", "-i", idea_id])
        out = capsys.readouterr().out
        assert f"ID: {idea_id}" in out
        assert "Tags: cache, memory" in out

        main(["idea", "tags"])
        assert capsys.readouterr().out.split() == ["cache", "memory"]

        main(["idea", "delete", "-i", idea_id, "--yes"])
        capsys.readouterr()
        main(["idea", "list"])
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "No ideas found" in captured.err


# ---------------------------------------------------------------------------
# Error boundary
# ---------------------------------------------------------------------------

class TestErrorBoundary:
    def test_ci_error_exits_one_with_hint(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = _run_cli(monkeypatch, "config", "show", str(tmp_path))
        assert code == exit_codes.GENERAL_ERROR
        err = capsys.readouterr().err
        assert "Error:" in err
        assert "ci config init" in err

    @patch("ci_cli.cli.app.main", side_effect=KeyboardInterrupt)
    def test_keyboard_interrupt(
        self, _mock: MagicMock, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert _run_cli(monkeypatch, "agents") == exit_codes.KEYBOARD_INTERRUPT
        assert "Aborted by user" in capsys.readouterr().err

    @patch("ci_cli.cli.app.main", side_effect=RuntimeError("boom"))
    def test_unexpected_error(
        self, _mock: MagicMock, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert _run_cli(monkeypatch, "agents") == exit_codes.UNEXPECTED_ERROR
        assert "RuntimeError: boom" in capsys.readouterr().err

    @patch("ci_cli.cli.app.main", return_value=exit_codes.GENERAL_ERROR)
    def test_command_exit_code_passes_through(self, _mock: MagicMock, monkeypatch: pytest.MonkeyPatch) -> None:
        assert _run_cli(monkeypatch, "brain", "test") == exit_codes.GENERAL_ERROR


# ---------------------------------------------------------------------------
# Routing
# ---------------------------------------------------------------------------

class TestRouting:
    @patch("ci_cli.cli.brain.run_status", return_value=0)
    def test_brain_defaults_to_status(self, mock_status: MagicMock) -> None:
        assert main(["brain"]) == 0
        mock_status.assert_called_once_with()

    @patch("ci_cli.cli.agents.run_load", return_value=0)
    def test_load_options(self, mock_load: MagicMock) -> None:
        main(["load", "Athena", "Documentor*3", "--parallel", "-c", "review"])
        args, kwargs = mock_load.call_args
        assert args == (["Athena", "Documentor*3"],)
        assert kwargs["parallel"] is True
        assert kwargs["context"] == "review"

    @patch("ci_cli.cli.source_control.run_commit", return_value=0)
    def test_commit_message(self, mock_commit: MagicMock) -> None:
        main(["commit", "-m", "Fix"])
        mock_commit.assert_called_once_with("Fix")

    @patch("ci_cli.cli.visualize.run_visualize", return_value=0)
    def test_visualize_options(self, mock_visualize: MagicMock) -> None:
        main(["visualize", "commands", "--group", "System", "--format", "mermaid"])
        args, kwargs = mock_visualize.call_args
        assert args == ("commands",)
        assert kwargs["fmt"] == "mermaid"
        assert kwargs["group"] == "System"
        assert "category" not in kwargs

    @patch("ci_cli.cli.legacy.run_legacy", return_value=0)
    def test_legacy_remainder(self, mock_legacy: MagicMock) -> None:
        main(["legacy", "push", "--force"])
        args, _kwargs = mock_legacy.call_args
        assert args == ("push", ["--force"])

    @patch("ci_cli.cli.docs.run_deploy", return_value=0)
    def test_docs_deploy_local(self, mock_deploy: MagicMock) -> None:
        main(["docs", "deploy", "local", "./public", "--symlink"])
        args, kwargs = mock_deploy.call_args
        assert args == ("local",)
        assert kwargs["path"] == "./public"
        assert kwargs["symlink"] is True
