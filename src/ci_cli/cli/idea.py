"""``ci idea``: the idea tracker."""

from __future__ import annotations

from pathlib import Path

from ci_cli.cli import exit_codes
from ci_cli.cli.console import out
from ci_cli.cli.output import print_command_header, print_info, print_success
from ci_cli.core.idea_service import IdeaService
from ci_cli.core.ideas import format_detail, format_short, parse_priority, parse_status
from ci_cli.exceptions import UnknownCommandError
from ci_cli.infra.idea_store import JsonIdeaRepository, resolve_ideas_path
from ci_cli.infra.settings import Settings, load_settings
from ci_cli.utils.text import split_csv

SUBCOMMANDS: tuple[str, ...] = ("list", "add", "view", "update", "delete", "categories", "tags")


def _service(settings: Settings | None) -> IdeaService:
    settings = settings or load_settings()
    return IdeaService(JsonIdeaRepository(resolve_ideas_path(Path.cwd(), settings.data_dir)))


def _list(service: IdeaService, text: str | None, category: str | None, status: str | None) -> int:
    ideas = service.search(text, category, parse_status(status) if status else None)
    if not ideas:
        print_info("No ideas found")
        return exit_codes.SUCCESS
    for idea in ideas:
        out.print(format_short(idea))
    print_info(f"{len(ideas)} idea(s)")
    return exit_codes.SUCCESS


def run_idea(
    subcommand: str,
    *,
    title: str | None = None,
    description: str | None = None,
    category: str | None = None,
    tags: str | None = None,
    idea_id: str | None = None,
    status: str | None = None,
    priority: str | None = None,
    filter_text: str | None = None,
    notes: str | None = None,
    related: str | None = None,
    assume_yes: bool = False,
    settings: Settings | None = None,
) -> int:
    """Dispatch one ``ci idea`` subcommand."""
    if subcommand not in SUBCOMMANDS:
        raise UnknownCommandError(
            f"Unknown idea subcommand: {subcommand}. Valid options: {', '.join(SUBCOMMANDS)}",
        )
    print_command_header("Idea Management", "💡", "Workflow", "yellow")
    service = _service(settings)

    if subcommand == "list":
        return _list(service, filter_text, category, status)

    if subcommand == "add":
        idea = service.add(title, description, category, split_csv(tags))
        print_success(f"Idea added with ID: {idea.id}")
        out.print(idea.id)
        return exit_codes.SUCCESS

    if subcommand == "view":
        for line in format_detail(service.get(idea_id)):
            out.print(line)
        return exit_codes.SUCCESS

    if subcommand == "update":
        idea = service.update(
            idea_id,
            title=title,
            description=description,
            category=category,
            tags=split_csv(tags) if tags is not None else None,
            status=parse_status(status) if status else None,
            priority=parse_priority(priority) if priority else None,
            notes=notes,
            related_ideas=split_csv(related) if related is not None else None,
        )
        print_success(f"Idea updated: {idea.title}")
        return exit_codes.SUCCESS

    if subcommand == "delete":
        target = service.get(idea_id)
        if not assume_yes:
            from ci_cli.cli.prompts import confirm

            if not confirm(f"Delete idea '{target.title}'?", default=False):
                print_info("Deletion cancelled")
                return exit_codes.SUCCESS
        service.delete(idea_id)
        print_success(f"Idea deleted: {target.title}")
        return exit_codes.SUCCESS

    values = service.categories() if subcommand == "categories" else service.tags()
    if not values:
        print_info(f"No {subcommand} found")
    for value in values:
        out.print(value)
    return exit_codes.SUCCESS
