"""Tests for project integration: file templates and checks
(core/integration.py), project files (infra/project_files.py) and
``ci init|integrate|verify|fix`` (cli/lifecycle.py).

git is never run; ``init_repository`` and ``is_work_tree`` are patched.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from ci_cli.cli import exit_codes
from ci_cli.cli.app import main
from ci_cli.cli.lifecycle import run_fix, run_init, run_integrate, run_verify
from ci_cli.core import integration
from ci_cli.core.integration import (
    OVERRIDE_DIRECTIVE,
    CheckStatus,
    add_override_directive,
    agent_template,
    check_claude_local_md,
    check_claude_md,
    check_git_repository,
    check_gitignore,
    set_env_ci_path,
)
from ci_cli.exceptions import ConfigurationError, NotFoundError, ValidationError
from ci_cli.infra import project_files
from ci_cli.infra.settings import Settings

WHEN = "2024-05-01 09:30:00"


def _config(directory: Path) -> dict:
    return json.loads((directory / ".ci-config.json").read_text(encoding="utf-8"))


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

class TestOverrideDirective:
    def test_inserted_after_headers(self) -> None:
        content = "# Project: demo\n# Owner: me\n\nUse tabs.\n"
        assert add_override_directive(content) == (
            "# Project: demo\n# Owner: me\n\n"
            "# Load CI Configuration\n_CI.load('CLAUDE.i.md')_\n\n"
            "Use tabs.\n"
        )

    def test_applied_twice_is_unchanged(self) -> None:
        once = add_override_directive("# Project: demo\n\nBody\n")
        assert add_override_directive(once) == once
        assert once.count(OVERRIDE_DIRECTIVE) == 1

    def test_headers_only(self) -> None:
        assert add_override_directive("# Project: demo\n").endswith(
            "# Project: demo\n\n# Load CI Configuration\n_CI.load('CLAUDE.i.md')_\n",
        )

    def test_empty_file(self) -> None:
        assert add_override_directive("") == "# Load CI Configuration\n_CI.load('CLAUDE.i.md')_\n"

    def test_body_without_headers(self) -> None:
        assert add_override_directive("Body\n").startswith("# Load CI Configuration\n")


class TestEnvFile:
    def test_new_file(self) -> None:
        assert set_env_ci_path(None, "/ci") == "CI_PATH=/ci\n"

    @pytest.mark.parametrize("old", ["CI_PATH=/old", "CI_REPO_PATH=/old"])
    def test_replaces_in_place(self, old: str) -> None:
        assert set_env_ci_path(f"A=1\n{old}\nB=2\n", "/ci") == "A=1\nCI_PATH=/ci\nB=2\n"

    def test_appends(self) -> None:
        assert set_env_ci_path("A=1", "/ci") == "A=1\nCI_PATH=/ci\n"

    def test_current_value_kept(self) -> None:
        assert set_env_ci_path("CI_PATH=/ci\n", "/ci") == "CI_PATH=/ci\n"


class TestTemplates:
    def test_known_agents_have_their_own_template(self) -> None:
        assert agent_template("athena").startswith("# Athena - Primary System Agent")
        assert agent_template("ProjectArchitect").startswith("# ProjectArchitect - Structure")

    def test_other_agents_get_a_generic_template(self) -> None:
        assert agent_template("Scout").startswith("# Scout - CI Agent")

    def test_generated_files_pass_their_checks(self) -> None:
        standalone = integration.standalone_claude_md("demo", ["Athena"], WHEN)
        assert "_CI.load_agents('Athena')_" in standalone
        assert check_claude_md(standalone, None).status is CheckStatus.PASSED

        minimal = integration.minimal_override_claude_md("demo", WHEN)
        override = integration.override_claude_md("demo", "/ci", WHEN)
        assert "1. Load /ci/CLAUDE.md" in override
        assert check_claude_md(minimal, override).status is CheckStatus.PASSED

        local = integration.local_claude_md("demo", "/ci", WHEN)
        assert check_claude_local_md(local).status is CheckStatus.PASSED

    def test_metadata(self) -> None:
        data = json.loads(integration.standalone_metadata("demo", ("Athena",), False, "t"))
        assert data["integration_type"] == "standalone"
        assert data["active_agents"] == ["Athena"]
        assert data["fast_activation"] is False


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------

class TestChecks:
    def test_missing_claude_md(self) -> None:
        check = check_claude_md(None, None)
        assert check.is_issue
        assert check.message == "CLAUDE.md not found"

    def test_directive_without_override_file(self) -> None:
        check = check_claude_md(f"# Project: x\n{OVERRIDE_DIRECTIVE}\n", None)
        assert check.is_issue
        assert "does not exist" in check.message

    def test_claude_md_without_sections(self) -> None:
        assert check_claude_md("Just notes\n", None).is_issue

    def test_missing_local_file_is_only_a_warning(self) -> None:
        check = check_claude_local_md(None)
        assert check.status is CheckStatus.WARNING
        assert not check.is_issue

    def test_stale_local_file(self) -> None:
        assert check_claude_local_md("# Project: x\n").is_issue

    def test_git(self) -> None:
        assert check_git_repository(False).is_issue
        assert not check_git_repository(True).is_issue

    @pytest.mark.parametrize(
        ("content", "issue"),
        [(None, True), ("node_modules/\n", True), ("CLAUDE.local.md\n", False), (".ci/\n", False)],
    )
    def test_gitignore(self, content: str | None, issue: bool) -> None:
        assert check_gitignore(content).is_issue is issue


# ---------------------------------------------------------------------------
# infra/project_files.py
# ---------------------------------------------------------------------------

class TestProjectFiles:
    def test_create_refuses_existing_directory(self, tmp_path: Path) -> None:
        (tmp_path / "demo").mkdir()
        with pytest.raises(ValidationError, match="Directory 'demo' already exists") as exc_info:
            project_files.create_project_directory(tmp_path, "demo")
        assert "ci integrate" in (exc_info.value.hint or "")

    def test_create_refuses_blank_name(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError, match="cannot be empty"):
            project_files.create_project_directory(tmp_path, "  ")

    def test_create_makes_standard_directories(self, tmp_path: Path) -> None:
        project = project_files.create_project_directory(tmp_path, "demo")
        assert sorted(p.name for p in project.iterdir()) == ["docs", "src", "tests"]

    def test_config_update_keeps_user_settings(self, tmp_path: Path) -> None:
        (tmp_path / ".ci-config.json").write_text(
            json.dumps({
                "project_name": "mine",
                "created_at": "2020-01-01T00:00:00+00:00",
                "active_agents": ["Scout"],
                "auto_accept": {"agent_load": True},
                "metadata": {"integration_type": "override", "team": "core"},
            }),
            encoding="utf-8",
        )
        config = project_files.save_integration_config(tmp_path, "ignored", fast_activation=False)
        assert config.project_name == "mine"
        assert config.active_agents == ("Scout",)
        assert config.auto_accept.agent_load
        assert config.fast_activation is False
        data = _config(tmp_path)
        assert data["created_at"] == "2020-01-01T00:00:00+00:00"
        assert data["metadata"] == {"integration_type": "override", "team": "core"}

    def test_config_defaults_to_standalone(self, tmp_path: Path) -> None:
        config = project_files.save_integration_config(tmp_path, "demo")
        assert config.metadata["integration_type"] == "standalone"
        assert config.active_agents == ("Athena", "ProjectArchitect")

    def test_standalone_backs_up_existing_claude_md(self, tmp_path: Path) -> None:
        (tmp_path / "CLAUDE.md").write_text("my notes\n", encoding="utf-8")
        config = project_files.save_integration_config(tmp_path, "demo", agents=["Athena", "Scout"])
        backup = project_files.write_standalone(tmp_path, config)
        assert backup == tmp_path / "CLAUDE.md.bak"
        assert backup.read_text(encoding="utf-8") == "my notes\n"
        assert "# Integration: Standalone" in (tmp_path / "CLAUDE.md").read_text(encoding="utf-8")
        assert sorted(p.name for p in (tmp_path / ".ci" / "agents").iterdir()) == ["Athena.md", "Scout.md"]
        assert (tmp_path / ".ci" / "metadata.json").is_file()

    def test_override_keeps_existing_claude_md(self, tmp_path: Path) -> None:
        (tmp_path / "CLAUDE.md").write_text("# Project: demo\n\nUse tabs.\n", encoding="utf-8")
        assert not project_files.write_override(tmp_path, "demo", Path("/ci"))
        assert not project_files.write_override(tmp_path, "demo", Path("/ci"))
        content = (tmp_path / "CLAUDE.md").read_text(encoding="utf-8")
        assert content.count(OVERRIDE_DIRECTIVE) == 1
        assert "Use tabs." in content
        assert "Load /ci/CLAUDE.md" in (tmp_path / "CLAUDE.i.md").read_text(encoding="utf-8")

    def test_env_only_written_when_changed(self, tmp_path: Path) -> None:
        assert project_files.update_env(tmp_path, Path("/ci"))
        assert not project_files.update_env(tmp_path, Path("/ci"))

    @patch("ci_cli.infra.project_files.is_work_tree")
    def test_inspect_without_git_directory_skips_git(self, mock_tree: MagicMock, tmp_path: Path) -> None:
        checks = project_files.inspect(tmp_path)
        assert [c.subject for c in checks] == ["CLAUDE.md", "CLAUDE.local.md", "git", ".gitignore"]
        assert checks[2].is_issue
        mock_tree.assert_not_called()


# ---------------------------------------------------------------------------
# ci init
# ---------------------------------------------------------------------------

@patch("ci_cli.infra.git.init_repository", return_value=True)
class TestRunInit:
    def test_creates_standalone_project(
        self, _mock_git: MagicMock, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert run_init("demo", agents="Athena, Scout", fast_activation=False, parent=tmp_path) == exit_codes.SUCCESS
        project = tmp_path / "demo"
        for name in ("CLAUDE.md", "README.md", ".gitignore", ".ci-config.json", "src", "docs", "tests"):
            assert (project / name).exists(), name
        data = _config(project)
        assert data["project_name"] == "demo"
        assert data["active_agents"] == ["Athena", "Scout"]
        assert data["fast_activation"] is False
        assert data["metadata"]["integration_type"] == "standalone"
        err = capsys.readouterr().err
        assert "Successfully initialized 'demo'" in err
        assert "Next steps:" in err
        assert "• cd demo" in err

    def test_existing_directory(self, mock_git: MagicMock, tmp_path: Path) -> None:
        (tmp_path / "demo").mkdir()
        with pytest.raises(ValidationError, match="already exists"):
            run_init("demo", parent=tmp_path)
        mock_git.assert_not_called()

    def test_git_failure_only_warns(
        self, mock_git: MagicMock, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        mock_git.return_value = False
        assert run_init("demo", parent=tmp_path) == exit_codes.SUCCESS
        assert "Could not initialize a git repository" in capsys.readouterr().err
        assert (tmp_path / "demo" / "CLAUDE.md").is_file()

    @patch("ci_cli.infra.project_files.is_work_tree", return_value=True)
    def test_new_project_verifies(self, _mock_tree: MagicMock, _mock_git: MagicMock, tmp_path: Path) -> None:
        run_init("demo", parent=tmp_path)
        (tmp_path / "demo" / ".git").mkdir()
        assert run_verify(tmp_path / "demo") == exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# ci integrate
# ---------------------------------------------------------------------------

class TestRunIntegrate:
    def test_standalone(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (tmp_path / "CLAUDE.md").write_text("old\n", encoding="utf-8")
        assert run_integrate(tmp_path) == exit_codes.SUCCESS
        assert (tmp_path / "CLAUDE.md.bak").read_text(encoding="utf-8") == "old\n"
        assert _config(tmp_path)["metadata"]["integration_type"] == "standalone"
        assert "CLAUDE.local.md" in (tmp_path / ".gitignore").read_text(encoding="utf-8")
        assert "Existing CLAUDE.md kept as CLAUDE.md.bak" in capsys.readouterr().err

    def test_override_uses_ci_repository(self, tmp_path: Path, settings: Settings, ci_repo: Path) -> None:
        project = tmp_path / "project"
        project.mkdir()
        (project / "CLAUDE.md").write_text("# Project: mine\n\nRules.\n", encoding="utf-8")
        assert run_integrate(project, integration="override", settings=settings) == exit_codes.SUCCESS
        assert OVERRIDE_DIRECTIVE in (project / "CLAUDE.md").read_text(encoding="utf-8")
        assert f"Load {ci_repo}/CLAUDE.md" in (project / "CLAUDE.i.md").read_text(encoding="utf-8")
        assert not (project / "CLAUDE.md.bak").exists()
        assert _config(project)["metadata"]["integration_type"] == "override"

    def test_override_without_ci_repository_writes_nothing(self, tmp_path: Path) -> None:
        project = tmp_path / "project"
        project.mkdir()
        home = tmp_path / "home"
        home.mkdir()
        settings = Settings(home=home, ci_path_override=str(tmp_path / "missing"))
        with pytest.raises(ConfigurationError, match="CI repository path not found"):
            run_integrate(project, integration="override", settings=settings)
        assert list(project.iterdir()) == []

    def test_unknown_integration_type(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError, match="Invalid integration type: embedded"):
            run_integrate(tmp_path, integration="embedded")

    def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(NotFoundError, match="does not exist"):
            run_integrate(tmp_path / "nope")


# ---------------------------------------------------------------------------
# ci verify
# ---------------------------------------------------------------------------

class TestRunVerify:
    def test_empty_directory_reports_issues(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert run_verify(tmp_path) == exit_codes.GENERAL_ERROR
        err = capsys.readouterr().err
        assert "Checking CLAUDE.md..." in err
        assert "CLAUDE.md not found" in err
        assert "• Run 'ci integrate' or 'ci fix'." in err
        assert "Verification completed with 3 issue(s)" in err

    @patch("ci_cli.infra.project_files.is_work_tree", return_value=True)
    def test_integrated_project(self, _mock: MagicMock, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        run_integrate(tmp_path)
        (tmp_path / ".git").mkdir()
        capsys.readouterr()
        assert run_verify(tmp_path) == exit_codes.SUCCESS
        err = capsys.readouterr().err
        assert "CLAUDE.local.md not found" in err
        assert "Verification successful" in err

    def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(NotFoundError):
            run_verify(tmp_path / "nope")


# ---------------------------------------------------------------------------
# ci fix
# ---------------------------------------------------------------------------

class TestRunFix:
    def test_writes_local_files(self, tmp_path: Path, settings: Settings, ci_repo: Path) -> None:
        project = tmp_path / "project"
        project.mkdir()
        (project / ".env").write_text("DEBUG=1\nCI_REPO_PATH=/old\n", encoding="utf-8")
        assert run_fix(project, settings=settings) == exit_codes.SUCCESS
        assert (project / ".env").read_text(encoding="utf-8") == f"DEBUG=1\nCI_PATH={ci_repo}\n"
        local = (project / "CLAUDE.local.md").read_text(encoding="utf-8")
        assert f"1. Load {ci_repo}/CLAUDE.md" in local
        assert "# Integration: Standalone" in (project / "CLAUDE.md").read_text(encoding="utf-8")
        assert ".ci-config.json" in (project / ".gitignore").read_text(encoding="utf-8")

    def test_existing_standalone_claude_md_is_left_alone(self, tmp_path: Path, settings: Settings) -> None:
        project = tmp_path / "project"
        project.mkdir()
        (project / "CLAUDE.md").write_text("# Project: mine\nConfiguration by hand\n", encoding="utf-8")
        run_fix(project, settings=settings)
        assert (project / "CLAUDE.md").read_text(encoding="utf-8") == "# Project: mine\nConfiguration by hand\n"
        assert not (project / "CLAUDE.md.bak").exists()

    def test_override_project_gets_its_directive_back(self, tmp_path: Path, settings: Settings) -> None:
        project = tmp_path / "project"
        project.mkdir()
        run_integrate(project, integration="override", settings=settings)
        (project / "CLAUDE.i.md").unlink()
        run_fix(project, settings=settings)
        assert (project / "CLAUDE.i.md").is_file()
        assert (project / "CLAUDE.md").read_text(encoding="utf-8").count(OVERRIDE_DIRECTIVE) == 1

    @patch("ci_cli.infra.project_files.is_work_tree", return_value=True)
    def test_verify_afterwards(
        self, _mock: MagicMock, tmp_path: Path, settings: Settings, capsys: pytest.CaptureFixture[str],
    ) -> None:
        project = tmp_path / "project"
        (project / ".git").mkdir(parents=True)
        assert run_fix(project, verify=True, settings=settings) == exit_codes.SUCCESS
        err = capsys.readouterr().err
        assert "CLAUDE.local.md references the CI system" in err
        assert "Verification successful" in err


# ---------------------------------------------------------------------------
# Through the parser
# ---------------------------------------------------------------------------

class TestCommandLine:
    def test_integrate_then_verify(self, tmp_path: Path) -> None:
        assert main(["integrate", str(tmp_path), "--agents", "Scout", "--no-fast"]) == exit_codes.SUCCESS
        data = _config(tmp_path)
        assert data["active_agents"] == ["Scout"]
        assert data["fast_activation"] is False
        # no .git directory
        assert main(["verify", str(tmp_path)]) == exit_codes.GENERAL_ERROR

    def test_integrate_keeps_fast_activation_unless_asked(self, tmp_path: Path) -> None:
        main(["integrate", str(tmp_path), "--no-fast"])
        main(["integrate", str(tmp_path)])
        assert _config(tmp_path)["fast_activation"] is False

    @patch("ci_cli.cli.lifecycle.run_init", return_value=0)
    def test_init_arguments(self, mock_init: MagicMock) -> None:
        assert main(["init", "demo", "--agents", "Athena", "--no-fast"]) == 0
        mock_init.assert_called_once_with("demo", agents="Athena", fast_activation=False)

    @patch("ci_cli.cli.lifecycle.run_fix", return_value=0)
    def test_fix_arguments(self, mock_fix: MagicMock) -> None:
        main(["fix", "--verify"])
        mock_fix.assert_called_once_with(Path("."), verify=True)
