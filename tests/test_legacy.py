"""Tests for legacy command names (core/legacy.py, infra/legacy_links.py,
cli/legacy.py) and the symlink dispatch in cli/app.py.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from ci_cli.cli import exit_codes
from ci_cli.cli.app import _invoked_as_legacy
from ci_cli.cli.legacy import process, run_legacy
from ci_cli.core.legacy import (
    LEGACY_COMMANDS,
    build_legacy_invocation,
    grouped_commands,
    is_legacy_command,
    map_legacy_command,
)
from ci_cli.exceptions import CommandFailedError, NotFoundError, UnknownCommandError
from ci_cli.infra.legacy_links import create_links, installed_links, remove_links
from ci_cli.infra.process import ProcessResult
from ci_cli.infra.settings import Settings


def _bin_dir(tmp_path: Path) -> Path:
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    (bin_dir / "ci").write_text("#!/bin/sh\n", encoding="utf-8")
    return bin_dir


# ---------------------------------------------------------------------------
# Mapping
# ---------------------------------------------------------------------------

class TestMapping:
    @pytest.mark.parametrize(
        ("old", "new"),
        [
            ("status", "status"),
            ("init", "init"),
            ("verify", "verify"),
            ("push", "deploy"),
            ("stage-commit", "commit"),
            ("stage-commit-push", "deploy"),
            ("update-gitignore", "ignore"),
        ],
    )
    def test_known(self, old: str, new: str) -> None:
        assert map_legacy_command(old) == new

    def test_unknown(self) -> None:
        assert not is_legacy_command("teleport")
        with pytest.raises(UnknownCommandError, match="Unknown legacy command: teleport"):
            map_legacy_command("teleport")

    def test_invocation(self) -> None:
        assert build_legacy_invocation("push", ["--dry"]) == ["ci", "deploy", "--dry"]

    def test_groups_cover_every_command_once(self) -> None:
        groups = grouped_commands()
        assert [title for title, _ in groups] == ["Basic Commands", "Project Lifecycle", "Git Operations"]
        listed = [old for _, commands in groups for old, _ in commands]
        assert sorted(listed) == sorted(LEGACY_COMMANDS)
        assert len(listed) == len(set(listed))

    @pytest.mark.parametrize("name", ["evolve", "key", "local", "build", "install"])
    def test_names_without_a_current_command_are_not_mapped(self, name: str) -> None:
        assert not is_legacy_command(name)

    def test_every_target_is_a_ci_command(self) -> None:
        from ci_cli.cli.app import _build_parser

        subparsers = next(
            action for action in _build_parser()._actions if isinstance(action, argparse._SubParsersAction)
        )
        assert set(LEGACY_COMMANDS.values()) <= set(subparsers.choices)


# ---------------------------------------------------------------------------
# Symlinks
# ---------------------------------------------------------------------------

class TestLinks:
    def test_create_requires_ci_binary(self, tmp_path: Path) -> None:
        with pytest.raises(NotFoundError, match="CI binary not found"):
            create_links(tmp_path)

    def test_create_then_remove(self, tmp_path: Path) -> None:
        bin_dir = _bin_dir(tmp_path)
        report = create_links(bin_dir)
        assert sorted(report.changed) == sorted(LEGACY_COMMANDS)
        assert (bin_dir / "push").resolve() == (bin_dir / "ci").resolve()
        assert installed_links(bin_dir) == sorted(LEGACY_COMMANDS)

        removed = remove_links(bin_dir)
        assert sorted(removed.changed) == sorted(LEGACY_COMMANDS)
        assert (bin_dir / "ci").exists()
        assert installed_links(bin_dir) == []

    def test_existing_entries_are_left_alone(self, tmp_path: Path) -> None:
        bin_dir = _bin_dir(tmp_path)
        (bin_dir / "status").write_text("someone else's script", encoding="utf-8")
        report = create_links(bin_dir)
        assert "status" in report.skipped
        assert (bin_dir / "status").read_text(encoding="utf-8") == "someone else's script"

    def test_remove_ignores_foreign_links(self, tmp_path: Path) -> None:
        bin_dir = _bin_dir(tmp_path)
        other = tmp_path / "other"
        other.write_text("", encoding="utf-8")
        (bin_dir / "push").symlink_to(other)
        report = remove_links(bin_dir)
        assert "push" in report.skipped
        assert (bin_dir / "push").is_symlink()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

class TestProcess:
    @patch("ci_cli.cli.legacy.run_command")
    def test_forwards_mapped_command(self, mock_run: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
        mock_run.return_value = ProcessResult(args=("ci",), returncode=0)
        assert process("push", ["origin"]) == exit_codes.SUCCESS
        mock_run.assert_called_once_with(["ci", "deploy", "origin"], capture=False)
        assert "'push' is now 'ci deploy'" in capsys.readouterr().err

    @patch("ci_cli.cli.legacy.run_command")
    def test_failure(self, mock_run: MagicMock) -> None:
        mock_run.return_value = ProcessResult(args=("ci",), returncode=4)
        with pytest.raises(CommandFailedError, match="exit status 4") as exc_info:
            process("status", [])
        assert exc_info.value.returncode == 4

    @patch("ci_cli.cli.legacy.run_command")
    def test_unknown_never_runs(self, mock_run: MagicMock) -> None:
        with pytest.raises(UnknownCommandError):
            process("teleport", [])
        mock_run.assert_not_called()


class TestRunLegacy:
    def test_list(self, settings: Settings, capsys: pytest.CaptureFixture[str]) -> None:
        assert run_legacy(list_commands=True, settings=settings) == exit_codes.SUCCESS
        out = capsys.readouterr().out
        assert "stage-commit-push" in out
        assert "→ ci deploy" in out

    def test_create_and_remove(self, settings: Settings, tmp_path: Path) -> None:
        bin_dir = _bin_dir(tmp_path)
        assert run_legacy(create=True, bin_dir=str(bin_dir), settings=settings) == exit_codes.SUCCESS
        assert (bin_dir / "push").is_symlink()
        assert run_legacy(remove=True, bin_dir=str(bin_dir), settings=settings) == exit_codes.SUCCESS
        assert not (bin_dir / "push").exists()

    def test_list_marks_linked(self, settings: Settings, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        bin_dir = _bin_dir(tmp_path)
        create_links(bin_dir)
        run_legacy(bin_dir=str(bin_dir), settings=settings)
        assert "(linked)" in capsys.readouterr().out


class TestInvokedAsLegacy:
    @pytest.mark.parametrize(
        ("argv0", "expected"),
        [
            ("/home/me/.local/bin/push", "push"),
            ("/home/me/.local/bin/ci", None),
            ("/usr/bin/python3", None),
        ],
    )
    def test_detection(self, argv0: str, expected: str | None) -> None:
        assert _invoked_as_legacy(argv0) == expected

    @patch("ci_cli.cli.app.main", return_value=0)
    def test_cli_forwards(self, mock_main: MagicMock, monkeypatch: pytest.MonkeyPatch) -> None:
        from ci_cli.cli.app import cli

        monkeypatch.setattr("sys.argv", ["/usr/local/bin/update-gitignore", "-x"])
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == 0
        mock_main.assert_called_once_with(["legacy", "update-gitignore", "-x"])
