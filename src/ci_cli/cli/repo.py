"""``ci repo``: GitHub repository management through ``gh``."""

from __future__ import annotations

from ci_cli.cli import exit_codes
from ci_cli.cli.console import console, out
from ci_cli.cli.output import print_command_header, print_info, print_success
from ci_cli.exceptions import UnknownCommandError, ValidationError
from ci_cli.infra import github
from ci_cli.utils.text import truncate

SUBCOMMANDS: tuple[str, ...] = ("list", "create", "clone", "view")
DESCRIPTION_LIMIT: int = 47


def _list() -> int:
    print_info("Fetching repositories...")
    repos = github.list_repos()
    if not repos:
        print_info("No repositories found")
        return exit_codes.SUCCESS

    out.print()
    out.print(f"{'Name':<30} {'Description':<50} {'Visibility':<15}")
    out.print(f"{'----':<30} {'-----------':<50} {'----------':<15}")
    for repo in repos:
        description = truncate(repo.description or "", DESCRIPTION_LIMIT)
        out.print(f"{repo.name:<30} {description:<50} {repo.visibility:<15}".rstrip())
    print_success(f"Listed {len(repos)} repositories")
    return exit_codes.SUCCESS


def _create(name: str, description: str | None, private: bool, assume_yes: bool) -> int:
    from ci_cli.cli.prompts import ask_text, confirm

    print_info(f"Creating repository '{name}'...")
    repo = github.create_repo(name, description, private)
    print_success("Repository created successfully:")
    out.print()
    out.print(f"Name: {repo.name}")
    if repo.url:
        out.print(f"URL:  {repo.url}")
    if repo.description:
        out.print(f"Description: {repo.description}")
    out.print(f"Visibility: {repo.visibility}")

    if assume_yes or not confirm("Would you like to clone this repository now?", default=False):
        return exit_codes.SUCCESS
    directory = ask_text("Clone directory (leave empty for default)").strip()
    target = github.clone_repo(repo.name, directory or None)
    print_success("Repository cloned successfully")
    out.print(f"Cloned to: {target}")
    return exit_codes.SUCCESS


def _clone(repo: str, directory: str | None) -> int:
    print_info(f"Cloning repository '{repo}'...")
    target = github.clone_repo(repo, directory)
    print_success(f"Repository '{repo}' cloned successfully")
    out.print()
    out.print(f"Cloned to: {target}")
    return exit_codes.SUCCESS


def _view(repo: str) -> int:
    print_info(f"Fetching details for repository '{repo}'...")
    details = github.view_repo(repo)
    console.print()
    console.print("[bold]Repository Details:[/bold]")
    out.print(f"Name:        {details.name}")
    if details.description:
        out.print(f"Description: {details.description}")
    out.print(f"URL:         {details.url}")
    out.print(f"Visibility:  {details.visibility}")
    out.print(f"Owner:       {details.owner}")
    out.print(f"Stars:       {details.stars}")
    out.print(f"Forks:       {details.forks}")
    if details.default_branch:
        out.print(f"Default Branch: {details.default_branch}")
    out.print(f"Created:     {details.created_at}")
    out.print(f"Updated:     {details.updated_at}")
    if details.languages:
        out.print()
        out.print("Languages:")
        for language in details.languages:
            out.print(f"  • {language}")
    if details.is_archived:
        console.print()
        console.print("[yellow]This repository is archived[/yellow]")
    if details.is_fork:
        console.print()
        console.print("[cyan]This repository is a fork[/cyan]")
    print_success("Repository details displayed")
    return exit_codes.SUCCESS


def run_repo(
    subcommand: str | None = None,
    *,
    name: str | None = None,
    description: str | None = None,
    private: bool = False,
    repo: str | None = None,
    directory: str | None = None,
    assume_yes: bool = False,
) -> int:
    """Dispatch one ``ci repo`` subcommand; ``list`` when none is given."""
    subcommand = subcommand or "list"
    if subcommand not in SUBCOMMANDS:
        raise UnknownCommandError(
            f"Unknown repo subcommand: {subcommand}. Valid options: {', '.join(SUBCOMMANDS)}",
        )
    print_command_header("GitHub Repository Management", "🐙", "Source Control", "blue")
    github.require_gh()

    if subcommand == "list":
        return _list()
    if subcommand == "create":
        if not name:
            raise ValidationError("Repository name is required for create command")
        return _create(name, description, private, assume_yes)
    if not repo:
        raise ValidationError(f"Repository is required for {subcommand} command")
    if subcommand == "clone":
        return _clone(repo, directory)
    return _view(repo)
