"""Tests for tool detection (infra/tool_detector.py), subprocess
execution (infra/process.py) and settings (infra/settings.py).

All tests mock :func:`shutil.which` and :mod:`subprocess`; nothing is
actually spawned.

Coverage:
* ``detect_tool`` / ``require_tool`` with and without the executable.
* Platform-specific install commands.
* ``run_command`` result mapping and OS error translation.
* ``run_checked`` message composition.
* ``Settings`` CI path resolution and environment loading.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from ci_cli.exceptions import CommandFailedError, ConfigurationError, ToolNotFoundError
from ci_cli.infra.process import ProcessResult, run_checked, run_command, spawn_detached
from ci_cli.infra.settings import Settings, load_settings
from ci_cli.infra.tool_detector import ToolStatus, _platform_install_commands, detect_tool, require_tool


def _completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(args=["git"], returncode=returncode, stdout=stdout, stderr=stderr)


# ---------------------------------------------------------------------------
# detect_tool / require_tool
# ---------------------------------------------------------------------------

class TestDetectTool:
    @patch("ci_cli.infra.tool_detector.shutil.which", return_value="/usr/bin/git")
    def test_found(self, _mock: MagicMock) -> None:
        status = detect_tool("git")
        assert status.found is True
        assert isinstance(status.path, Path)
        assert status.install_commands == ()

    @patch("ci_cli.infra.tool_detector.shutil.which", return_value=None)
    def test_not_found(self, _mock: MagicMock) -> None:
        status = detect_tool("gh")
        assert status.found is False
        assert status.path is None
        assert len(status.install_commands) > 0

    def test_status_is_frozen(self) -> None:
        status = ToolStatus(name="git", found=False, path=None, install_commands=())
        with pytest.raises(AttributeError):
            status.found = True  # type: ignore[misc]


class TestRequireTool:
    @patch("ci_cli.infra.tool_detector.shutil.which", return_value="/usr/bin/npm")
    def test_found_returns_path(self, _mock: MagicMock) -> None:
        assert isinstance(require_tool("npm"), Path)

    @patch("ci_cli.infra.tool_detector.shutil.which", return_value=None)
    def test_missing_raises_with_hint(self, _mock: MagicMock) -> None:
        with pytest.raises(ToolNotFoundError, match="vercel is not installed") as exc_info:
            require_tool("vercel")
        assert exc_info.value.hint is not None
        assert "npm install -g vercel" in exc_info.value.hint


class TestInstallCommands:
    @patch("ci_cli.infra.tool_detector.platform.system", return_value="Linux")
    def test_linux(self, _mock: MagicMock) -> None:
        assert _platform_install_commands("git") == ("sudo apt install git", "sudo dnf install git")

    @patch("ci_cli.infra.tool_detector.platform.system", return_value="Darwin")
    def test_macos(self, _mock: MagicMock) -> None:
        assert _platform_install_commands("npm") == ("brew install node",)

    def test_platform_independent(self) -> None:
        assert _platform_install_commands("claude") == ("npm install -g @anthropic-ai/claude-code",)

    @patch("ci_cli.infra.tool_detector.platform.system", return_value="Plan9")
    def test_unknown_platform_points_at_download_page(self, _mock: MagicMock) -> None:
        (line,) = _platform_install_commands("gh")
        assert "https://cli.github.com/" in line

    def test_unknown_tool(self) -> None:
        assert _platform_install_commands("frobnicate") == (
            "Please install frobnicate and make sure it is on PATH",
        )


# ---------------------------------------------------------------------------
# run_command / run_checked / spawn_detached
# ---------------------------------------------------------------------------

class TestRunCommand:
    @patch("ci_cli.infra.process.subprocess.run")
    @patch("ci_cli.infra.process.shutil.which", return_value="/usr/bin/git")
    def test_result_mapping(self, _mock_which: MagicMock, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _completed(0, "out", "err")
        result = run_command(["git", "status"], cwd=tmp_path)

        assert result == ProcessResult(args=("git", "status"), returncode=0, stdout="out", stderr="err")
        assert result.ok
        args, kwargs = mock_run.call_args
        assert args[0] == ["/usr/bin/git", "status"]
        assert kwargs["cwd"] == tmp_path
        assert kwargs["env"] is None

    @patch("ci_cli.infra.process.subprocess.run")
    @patch("ci_cli.infra.process.shutil.which", return_value="/usr/bin/git")
    def test_uncaptured_output_is_empty(self, _mock_which: MagicMock, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed(3, None, None)  # type: ignore[arg-type]
        result = run_command(["git", "push"], capture=False)
        assert result.stdout == ""
        assert not result.ok

    @patch("ci_cli.infra.process.subprocess.run")
    @patch("ci_cli.infra.process.shutil.which", return_value="/usr/bin/git")
    def test_extra_env_is_layered(
        self,
        _mock_which: MagicMock,
        mock_run: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("EXISTING", "1")
        mock_run.return_value = _completed()
        run_command(["git"], env={"CI_AGENT": "Athena"})
        env = mock_run.call_args.kwargs["env"]
        assert env["CI_AGENT"] == "Athena"
        assert env["EXISTING"] == "1"

    @patch("ci_cli.infra.tool_detector.shutil.which", return_value=None)
    def test_missing_program(self, _mock: MagicMock) -> None:
        with pytest.raises(ToolNotFoundError, match="gh is not installed"):
            run_command(["gh", "repo", "view"])

    @patch("ci_cli.infra.process.subprocess.run", side_effect=PermissionError("denied"))
    @patch("ci_cli.infra.process.shutil.which", return_value="/usr/bin/git")
    def test_os_error(self, _mock_which: MagicMock, _mock_run: MagicMock) -> None:
        with pytest.raises(CommandFailedError, match="Failed to run git: denied"):
            run_command(["git"])

    def test_empty_command(self) -> None:
        with pytest.raises(ValueError):
            run_command([])


class TestRunChecked:
    @patch("ci_cli.infra.process.run_command")
    def test_success_passes_through(self, mock_run: MagicMock) -> None:
        expected = ProcessResult(args=("git",), returncode=0)
        mock_run.return_value = expected
        assert run_checked(["git"]) is expected

    @patch("ci_cli.infra.process.run_command")
    def test_default_message(self, mock_run: MagicMock) -> None:
        mock_run.return_value = ProcessResult(args=("npm", "ci"), returncode=1)
        with pytest.raises(CommandFailedError, match="Command failed: npm ci") as exc_info:
            run_checked(["npm", "ci"], hint="Check package.json")
        assert exc_info.value.returncode == 1
        assert exc_info.value.hint == "Check package.json"


class TestSpawnDetached:
    @patch("ci_cli.infra.process.subprocess.Popen")
    def test_spawn(self, mock_popen: MagicMock) -> None:
        spawn_detached(["claude"], env={"CI_AGENT": "Athena"})
        args, kwargs = mock_popen.call_args
        assert args[0] == ["claude"]
        assert kwargs["env"]["CI_AGENT"] == "Athena"

    @patch("ci_cli.infra.process.subprocess.Popen", side_effect=OSError("boom"))
    def test_failure(self, _mock: MagicMock) -> None:
        with pytest.raises(CommandFailedError, match="Failed to start claude"):
            spawn_detached(["claude"])


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class TestSettings:
    def test_override_wins(self, tmp_path: Path, ci_repo: Path) -> None:
        settings = Settings(home=tmp_path, ci_path_override=str(ci_repo))
        assert settings.ci_path == ci_repo

    def test_missing_override_falls_back_to_defaults(self, tmp_path: Path) -> None:
        checkout = tmp_path / "Projects" / "CollaborativeIntelligence"
        checkout.mkdir(parents=True)
        (checkout / "CLAUDE.md").write_text("", encoding="utf-8")
        settings = Settings(home=tmp_path, ci_path_override=str(tmp_path / "gone"))
        assert settings.ci_path == checkout

    def test_candidate_requires_marker(self, tmp_path: Path) -> None:
        (tmp_path / "CollaborativeIntelligence").mkdir()
        settings = Settings(home=tmp_path)
        with patch("ci_cli.infra.settings._SYSTEM_LOCATION", tmp_path / "system"):
            with pytest.raises(ConfigurationError, match="CI repository path not found") as exc_info:
                settings.ci_path
        assert "CI_PATH" in (exc_info.value.hint or "")

    def test_data_dir(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        settings = Settings(home=tmp_path)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        assert settings.data_dir == tmp_path / ".local" / "share"
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))
        assert settings.data_dir == tmp_path / "xdg"

    def test_home_relative_paths(self, tmp_path: Path) -> None:
        settings = Settings(home=tmp_path)
        assert settings.brain_config_file == tmp_path / ".ci_brain_config"
        assert settings.bin_dir == tmp_path / ".local" / "bin"

    def test_load_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CI_PATH", "/opt/ci")
        monkeypatch.setenv("CI_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("CI_PARALLEL_DELAY", "0.5")
        settings = load_settings()
        assert settings.ci_path_override == "/opt/ci"
        assert settings.log_level == "DEBUG"
        assert settings.parallel_launch_delay == 0.5

    @pytest.mark.parametrize(("raw", "expected"), [("soon", 2.0), ("-3", 0.0)])
    def test_parallel_delay_parsing(self, raw: str, expected: float, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("CI_PATH", raising=False)
        monkeypatch.setenv("CI_PARALLEL_DELAY", raw)
        assert load_settings().parallel_launch_delay == expected
