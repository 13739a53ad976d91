"""``ci init|integrate|verify|fix``: adding CI to projects and checking it."""

from __future__ import annotations

from pathlib import Path

from ci_cli.cli import exit_codes
from ci_cli.cli.console import console
from ci_cli.cli.output import (
    print_command_header,
    print_error,
    print_info,
    print_section,
    print_status,
    print_success,
    print_warning,
)
from ci_cli.core.integration import CLAUDE_MD, Check, CheckStatus
from ci_cli.core.project_config import parse_agents, validate_integration_type
from ci_cli.exceptions import NotFoundError
from ci_cli.infra import git, project_files
from ci_cli.infra.settings import Settings, load_settings

_HEADER_CATEGORY = "Project Lifecycle"


def _existing_directory(path: Path) -> Path:
    target = path.resolve()
    if not target.is_dir():
        raise NotFoundError(f"Target directory '{path}' does not exist")
    return target


def _gitignore(directory: Path) -> None:
    update = git.update_gitignore(directory)
    if update.changed:
        print_success(f"Added {len(update.added)} patterns to .gitignore")
    else:
        print_info(".gitignore already contains the CI patterns")


# ---------------------------------------------------------------------------
# ci init
# ---------------------------------------------------------------------------

def run_init(
    project_name: str,
    agents: str | None = None,
    fast_activation: bool = True,
    parent: Path | None = None,
) -> int:
    """Create ``<parent>/<project_name>`` as a new standalone CI project."""
    print_command_header(f"Initializing project: {project_name}", "🚀", _HEADER_CATEGORY, "blue")
    project = project_files.create_project_directory((parent or Path.cwd()).resolve(), project_name)
    print_success(f"Created project directory: {project}")

    if git.init_repository(project):
        print_success("Git repository initialized")
    else:
        print_warning("Could not initialize a git repository")
    _gitignore(project)

    config = project_files.save_integration_config(
        project,
        project_name,
        integration_type="standalone",
        agents=parse_agents(agents),
        fast_activation=fast_activation,
    )
    project_files.write_standalone(project, config)
    print_success("Created CLAUDE.md (standalone integration)")
    project_files.write_readme(project, project_name)
    print_success("Created README.md")

    console.print()
    print_success(f"Successfully initialized '{project_name}' with Collaborative Intelligence")
    print_section("Next steps:")
    print_status(f"cd {project_name}")
    print_status("ci verify          check the integration")
    print_status("ci agents          list available agents")
    print_status("ci load <agent>    start working with an agent")
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# ci integrate
# ---------------------------------------------------------------------------

def run_integrate(
    path: Path,
    agents: str | None = None,
    fast_activation: bool | None = None,
    integration: str = "standalone",
    settings: Settings | None = None,
) -> int:
    """Add CI to the existing project at *path*.

    ``standalone`` rewrites ``CLAUDE.md`` (the old one is kept as
    ``CLAUDE.md.bak``); ``override`` keeps it and adds a directive that
    loads ``CLAUDE.i.md``, which needs the CI repository location.
    """
    target = _existing_directory(path)
    kind = validate_integration_type(integration)
    ci_path = (settings or load_settings()).ci_path if kind == "override" else None

    name = target.name or "project"
    print_command_header(f"Integrating CI into project: {name}", "🔗", _HEADER_CATEGORY, "blue")
    print_info(f"Target directory: {target}")
    print_info(f"Integration: {kind}")

    config = project_files.save_integration_config(
        target,
        name,
        integration_type=kind,
        agents=parse_agents(agents),
        fast_activation=fast_activation,
    )
    print_info(f"Agents: {', '.join(config.active_agents)}")
    print_success("Saved .ci-config.json")

    if ci_path is None:
        previous = project_files.write_standalone(target, config)
        if previous is not None:
            print_info(f"Existing CLAUDE.md kept as {previous.name}")
        print_success("Wrote standalone CLAUDE.md")
    else:
        created = project_files.write_override(target, config.project_name, ci_path)
        if created:
            print_success("Created CLAUDE.md with the CI load directive")
        else:
            print_success("Added the CI load directive to CLAUDE.md")
        print_success("Created CLAUDE.i.md")
    _gitignore(target)

    console.print()
    print_success(f"CI integrated into project: {config.project_name}")
    print_info("Run 'ci verify' to check the integration")
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# ci verify
# ---------------------------------------------------------------------------

def _print_check(check: Check) -> None:
    if check.status is CheckStatus.PASSED:
        print_success(check.message)
    elif check.status is CheckStatus.WARNING:
        print_warning(check.message)
    else:
        print_error(check.message)
    if check.hint and check.status is not CheckStatus.PASSED:
        print_status(check.hint)


def run_verify(path: Path) -> int:
    """Check the integration files; non-zero exit when any check fails."""
    target = _existing_directory(path)
    print_command_header(f"Verifying CI integration: {target.name}", "🔍", _HEADER_CATEGORY, "blue")

    checks = project_files.inspect(target)
    for check in checks:
        print_section(f"Checking {check.subject}...")
        _print_check(check)

    issues = [check for check in checks if check.is_issue]
    console.print()
    if issues:
        print_warning(f"Verification completed with {len(issues)} issue(s)")
        console.print("Run [cyan]ci fix[/cyan] to repair the integration files.")
        return exit_codes.GENERAL_ERROR
    print_success("Verification successful")
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# ci fix
# ---------------------------------------------------------------------------

def run_fix(path: Path, verify: bool = False, settings: Settings | None = None) -> int:
    """Rewrite the local integration files of the project at *path*.

    Writes ``CLAUDE.local.md``, points ``CI_PATH`` in ``.env`` at the CI
    repository, merges the ``.gitignore`` patterns and restores a missing
    ``CLAUDE.md`` for the stored integration type.
    """
    target = _existing_directory(path)
    ci_path = (settings or load_settings()).ci_path
    name = target.name or "project"
    print_command_header(f"Repairing CI integration: {name}", "🔧", _HEADER_CATEGORY, "blue")
    print_info(f"CI repository: {ci_path}")

    config = project_files.save_integration_config(target, name)
    print_success("Updated .ci-config.json")

    if config.metadata.get("integration_type") == "override":
        project_files.write_override(target, config.project_name, ci_path)
        print_success("Refreshed CLAUDE.i.md and its load directive")
    elif not (target / CLAUDE_MD).exists():
        project_files.write_standalone(target, config)
        print_success("Restored standalone CLAUDE.md")

    if project_files.write_local(target, config.project_name, ci_path):
        print_success("Updated CLAUDE.local.md")
    else:
        print_success("Created CLAUDE.local.md")
    if project_files.update_env(target, ci_path):
        print_success("Set CI_PATH in .env")
    _gitignore(target)

    if verify:
        console.print()
        return run_verify(target)
    print_section("To pick up the new configuration:")
    print_status("Restart any running Claude Code sessions")
    print_status("Run 'ci verify' to check the integration")
    return exit_codes.SUCCESS
