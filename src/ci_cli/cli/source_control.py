"""``ci status|ignore|stage|commit|deploy``: git helpers for CI projects."""

from __future__ import annotations

from pathlib import Path

from ci_cli.cli import exit_codes
from ci_cli.cli.console import console, escape
from ci_cli.cli.output import print_command_header, print_info, print_success, print_warning
from ci_cli.core.commit_message import change_summary, suggest_message
from ci_cli.exceptions import ValidationError
from ci_cli.infra import git

_HEADER_CATEGORY = "Source Control"


def _mark(ok: bool | None) -> str:
    if ok is None:
        return "[bold yellow]![/bold yellow]"
    return "[bold green]✓[/bold green]" if ok else "[bold red]✗[/bold red]"


def _line(ok: bool | None, message: str) -> None:
    console.print(f"{_mark(ok)} {escape(message)}")


def _read(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except OSError:
        return None


def run_status(directory: Path | None = None) -> int:
    """Report how far the current project is integrated with CI."""
    target = (directory or Path.cwd()).resolve()
    print_command_header("CI Integration Status", "📊", _HEADER_CATEGORY, "green")
    console.print(f"Project path: [cyan]{escape(str(target))}[/cyan]")
    console.print()

    claude_md = target / "CLAUDE.md"
    if claude_md.exists():
        _line(True, "CLAUDE.md file exists")
        content = _read(claude_md)
        if content is None:
            _line(False, "Failed to read CLAUDE.md")
        elif "Project:" in content and "Integrat" in content:
            _line(True, "CI integration confirmed in CLAUDE.md")
        else:
            _line(None, "CLAUDE.md exists but may not be properly configured")
    else:
        _line(False, "CLAUDE.md file not found")
        console.print("Run [cyan]ci integrate[/cyan] to integrate CI into this project")

    if (target / "CLAUDE.local.md").exists():
        _line(True, "CLAUDE.local.md file exists (local overrides)")
    else:
        _line(None, "No local CI configuration overrides")

    if not (target / ".git").exists():
        _line(None, "Not a git repository")
        return exit_codes.SUCCESS

    _line(True, "Git repository found")
    gitignore = target / git.GITIGNORE
    if not gitignore.exists():
        _line(None, "No .gitignore file found")
        console.print("Run [cyan]ci ignore[/cyan] to create proper .gitignore for CI")
        return exit_codes.SUCCESS

    content = _read(gitignore) or ""
    if "CLAUDE.local.md" in content:
        _line(True, ".gitignore properly configured for CI")
    else:
        _line(None, ".gitignore should exclude CLAUDE.local.md")
        console.print("Run [cyan]ci ignore[/cyan] to fix .gitignore configuration")
    return exit_codes.SUCCESS


def _ignore(directory: Path) -> None:
    git.require_work_tree(directory)
    console.print(f"Updating .gitignore in: [cyan]{escape(str(directory))}[/cyan]")
    existed = (directory / git.GITIGNORE).exists()
    update = git.update_gitignore(directory)
    if not update.changed:
        print_success(".gitignore already contains all recommended patterns")
        return
    if not existed:
        print_info("Created new .gitignore file")
    print_success(f"Added {len(update.added)} new patterns to .gitignore")
    for pattern in update.added:
        console.print(f"  [green]+[/green] {escape(pattern)}")


def _stage(directory: Path) -> None:
    _ignore(directory)
    git.add_all(directory)
    print_success("Files staged successfully")


def _choose_message(directory: Path) -> str:
    from ci_cli.cli.prompts import ask_text, confirm

    changes = git.staged_changes(directory)
    suggestion = suggest_message(changes)
    summary = change_summary(changes)
    if summary:
        print_info(f"Staged: {summary}")
    for change in changes[:10]:
        console.print(f"  [dim]{change.status}[/dim] {escape(change.path)}")
    if len(changes) > 10:
        console.print(f"  [dim]... and {len(changes) - 10} more[/dim]")
    console.print(f"Suggested message: [bold]{escape(suggestion)}[/bold]")

    if confirm("Use the suggested commit message?", default=True):
        return suggestion
    message = ask_text("Enter commit message").strip()
    if not message:
        raise ValidationError("Commit message cannot be empty")
    return message


def run_ignore(directory: Path | None = None) -> int:
    print_command_header("Update .gitignore with CI patterns", "📊", _HEADER_CATEGORY, "green")
    _ignore((directory or Path.cwd()).resolve())
    return exit_codes.SUCCESS


def run_stage(directory: Path | None = None) -> int:
    print_command_header("Stage files for commit", "📊", _HEADER_CATEGORY, "green")
    _stage((directory or Path.cwd()).resolve())
    return exit_codes.SUCCESS


def run_commit(message: str | None = None, directory: Path | None = None) -> int:
    """Commit staged changes, proposing a message when none is given."""
    print_command_header("Create a commit with staged changes", "📊", _HEADER_CATEGORY, "green")
    target = (directory or Path.cwd()).resolve()
    git.require_work_tree(target)
    if not git.has_staged_changes(target):
        raise ValidationError(
            "No staged changes to commit",
            hint="Stage files first with 'ci stage' or 'git add'.",
        )
    text = message if message else _choose_message(target)
    git.commit(target, text)
    print_success(f"Commit created: {text}")
    return exit_codes.SUCCESS


def run_deploy(directory: Path | None = None) -> int:
    """Update .gitignore, stage everything, commit and push."""
    print_command_header("Deploy changes: stage, commit, and push", "📊", _HEADER_CATEGORY, "green")
    target = (directory or Path.cwd()).resolve()
    _stage(target)
    if not git.has_staged_changes(target):
        print_info("Nothing to commit; working tree is clean")
        return exit_codes.SUCCESS

    text = _choose_message(target)
    git.commit(target, text)
    print_success(f"Commit created: {text}")

    result = git.push(target)
    if not result.ok:
        print_warning(f"Failed to push to remote: {result.stderr.strip()}")
        print_info("You may need to configure a remote first with 'git remote add origin <url>'")
        return exit_codes.SUCCESS
    print_success("Changes deployed successfully")
    return exit_codes.SUCCESS
