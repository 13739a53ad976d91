"""Regression tests for optional CLI UI dependencies (rich/questionary).

These tests verify bootstrap commands are resilient when optional UI
packages are missing, and interactive flows fail cleanly only when a
prompt is actually reached.
"""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from ci_cli.cli import exit_codes
from ci_cli.cli.app import main
from ci_cli.core.commit_message import StagedChange
from ci_cli.exceptions import EnvironmentError


def _hide_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "rich", None)
    monkeypatch.setitem(sys.modules, "rich.console", None)
    monkeypatch.setitem(sys.modules, "rich.markup", None)
    monkeypatch.setitem(sys.modules, "rich.table", None)
    monkeypatch.setitem(sys.modules, "rich.tree", None)


def _hide_questionary(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "questionary", None)


def test_help_works_without_rich_or_questionary(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)
    _hide_questionary(monkeypatch)

    with pytest.raises(SystemExit) as exc_info:
        main(["--help"])
    assert exc_info.value.code == 0


def test_version_works_without_rich_or_questionary(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)
    _hide_questionary(monkeypatch)

    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])
    assert exc_info.value.code == 0


def test_doctor_works_without_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)

    code = main(["doctor"])
    assert code in (exit_codes.SUCCESS, exit_codes.GENERAL_ERROR)


def test_tree_view_falls_back_without_rich(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _hide_rich(monkeypatch)

    assert main(["visualize", "commands", "--tree"]) == exit_codes.SUCCESS
    assert "doctor" in capsys.readouterr().out


@patch("ci_cli.cli.source_control.git")
def test_commit_prompt_errors_cleanly_when_questionary_missing(
    mock_git: MagicMock,
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    _hide_questionary(monkeypatch)
    monkeypatch.chdir(tmp_path)
    mock_git.has_staged_changes.return_value = True
    mock_git.staged_changes.return_value = [StagedChange("M", "README.md")]

    with pytest.raises(EnvironmentError, match="questionary is not installed"):
        main(["commit"])
    mock_git.commit.assert_not_called()


def test_explicit_commit_message_needs_no_prompt(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _hide_questionary(monkeypatch)
    monkeypatch.chdir(tmp_path)

    with patch("ci_cli.cli.source_control.git") as mock_git:
        mock_git.has_staged_changes.return_value = True
        assert main(["commit", "-m", "Update docs"]) == exit_codes.SUCCESS
    mock_git.commit.assert_called_once()
