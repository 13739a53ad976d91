"""Infrastructure: git operations used by the source-control commands."""

from __future__ import annotations

import logging
from pathlib import Path

from ci_cli.core.commit_message import StagedChange, parse_name_status
from ci_cli.core.gitignore import GitignoreUpdate, merge_patterns
from ci_cli.exceptions import CommandFailedError, ConfigurationError, ToolNotFoundError, ValidationError
from ci_cli.infra.process import ProcessResult, run_checked, run_command

logger = logging.getLogger(__name__)

GITIGNORE: str = ".gitignore"


def is_work_tree(directory: Path) -> bool:
    """Whether *directory* is inside a git work tree; ``False`` without git."""
    try:
        result = run_command(["git", "rev-parse", "--is-inside-work-tree"], cwd=directory)
    except ToolNotFoundError:
        return False
    return result.ok and result.stdout.strip() == "true"


def init_repository(directory: Path) -> bool:
    """Run ``git init`` in *directory*; ``False`` when git is missing or fails."""
    try:
        result = run_command(["git", "init", "-q"], cwd=directory)
    except ToolNotFoundError:
        logger.info("git not found; %s left without a repository", directory)
        return False
    if not result.ok:
        logger.info("git init exited with %s: %s", result.returncode, result.stderr.strip())
    return result.ok


def require_work_tree(directory: Path) -> None:
    if not is_work_tree(directory):
        raise ValidationError(
            "Not a git repository",
            hint="Run 'git init' first, or change to a repository directory.",
        )


def update_gitignore(directory: Path) -> GitignoreUpdate:
    """Merge the recommended CI patterns into ``<directory>/.gitignore``."""
    path = directory / GITIGNORE
    try:
        existing = path.read_text(encoding="utf-8") if path.exists() else None
    except OSError as exc:
        raise ConfigurationError(f"Failed to read {path}: {exc}") from exc

    update = merge_patterns(existing)
    if update.changed:
        try:
            path.write_text(update.content, encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Failed to write {path}: {exc}") from exc
        logger.info("Added %d patterns to %s", len(update.added), path)
    return update


def add_all(directory: Path) -> None:
    run_checked(["git", "add", "."], cwd=directory, error="Failed to stage changes")


def has_staged_changes(directory: Path) -> bool:
    # --quiet exits 1 when there are differences
    result = run_command(["git", "diff", "--staged", "--quiet"], cwd=directory)
    return not result.ok


def staged_changes(directory: Path) -> list[StagedChange]:
    result = run_checked(
        ["git", "diff", "--staged", "--name-status"],
        cwd=directory,
        error="Failed to list staged files",
    )
    return parse_name_status(result.stdout)


def commit(directory: Path, message: str) -> ProcessResult:
    return run_checked(
        ["git", "commit", "-m", message],
        cwd=directory,
        error="Failed to commit changes",
    )


def push(directory: Path) -> ProcessResult:
    """Run ``git push``; the result is returned even on failure."""
    result = run_command(["git", "push"], cwd=directory)
    if not result.ok:
        logger.info("git push exited with %s", result.returncode)
    return result


def init_and_force_push(directory: Path, remote: str, branch: str, message: str) -> None:
    """Publish *directory* as the only commit on *branch* of *remote*.

    Raises
    ------
    CommandFailedError
        When any git step fails.
    """
    steps = (
        ["git", "init", "-q"],
        ["git", "checkout", "-q", "-b", branch],
        ["git", "add", "."],
        ["git", "commit", "-q", "-m", message],
        ["git", "push", "--force", remote, f"{branch}:{branch}"],
    )
    for args in steps:
        run_checked(args, cwd=directory, error=f"git {args[1]} failed")


def remote_url(directory: Path, name: str = "origin") -> str:
    result = run_command(["git", "remote", "get-url", name], cwd=directory)
    if not result.ok or not result.stdout.strip():
        raise CommandFailedError(
            f"No git remote named '{name}'",
            hint="Pass --repo with the repository URL to publish to.",
        )
    return result.stdout.strip()
