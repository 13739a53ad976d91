"""``ci legacy``: compatibility with pre-1.0 command names."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from ci_cli.cli import exit_codes
from ci_cli.cli.console import console, escape, out
from ci_cli.cli.output import print_command_header, print_error, print_info, print_success, print_warning
from ci_cli.core.legacy import build_legacy_invocation, grouped_commands, map_legacy_command
from ci_cli.exceptions import CommandFailedError
from ci_cli.infra.legacy_links import LinkReport, create_links, installed_links, remove_links
from ci_cli.infra.process import run_command
from ci_cli.infra.settings import Settings, load_settings


def process(command: str, args: Sequence[str]) -> int:
    """Run legacy *command* as ``ci <mapped> <args>``.

    Raises
    ------
    UnknownCommandError
        When *command* is not a legacy name.
    CommandFailedError
        When the forwarded command exits non-zero.
    """
    mapped = map_legacy_command(command)
    if mapped != command:
        console.print(f"[dim]'{escape(command)}' is now 'ci {escape(mapped)}'[/dim]")
    result = run_command(build_legacy_invocation(command, list(args)), capture=False)
    if not result.ok:
        raise CommandFailedError(
            f"Legacy command failed: {command} (exit status {result.returncode})",
            returncode=result.returncode,
        )
    return exit_codes.SUCCESS


def _print_help(installed: Sequence[str]) -> None:
    console.print("Legacy command names are forwarded to their current equivalents.")
    for group, commands in grouped_commands():
        console.print()
        console.print(f"[bold]{escape(group)}:[/bold]")
        for old, new in commands:
            marker = "  (linked)" if old in installed else ""
            out.print(f"  {old:<20} → ci {new}{marker}")
    console.print()
    console.print("[bold]Usage:[/bold]")
    console.print("  ci legacy <command> \\[args...]   Run a legacy command")
    console.print("  ci legacy --create              Create legacy symlinks")
    console.print("  ci legacy --remove              Remove legacy symlinks")


def _report(report: LinkReport, verb: str) -> int:
    for name in report.changed:
        console.print(f"  [green]✓[/green] {escape(name)}")
    for name, reason in report.failed:
        print_error(f"{name}: {reason}")
    if report.changed:
        print_success(f"{verb} {len(report.changed)} legacy command link(s)")
    else:
        print_info(f"No legacy command links {verb.lower()}")
    if report.failed:
        print_warning(f"{len(report.failed)} link(s) could not be {verb.lower()}")
        return exit_codes.GENERAL_ERROR
    return exit_codes.SUCCESS


def run_legacy(
    command: str | None = None,
    args: Sequence[str] = (),
    *,
    list_commands: bool = False,
    create: bool = False,
    remove: bool = False,
    bin_dir: str | None = None,
    settings: Settings | None = None,
) -> int:
    """Manage legacy links, list the mapping, or forward one legacy command."""
    settings = settings or load_settings()
    directory = Path(bin_dir).expanduser() if bin_dir else settings.bin_dir

    if create:
        print_command_header("Create Legacy Commands", "🔗", "System Management", "yellow")
        return _report(create_links(directory), "Created")
    if remove:
        print_command_header("Remove Legacy Commands", "🔗", "System Management", "yellow")
        return _report(remove_links(directory), "Removed")
    if command and not list_commands:
        return process(command, args)

    print_command_header("Legacy Commands", "🔗", "System Management", "yellow")
    _print_help(installed_links(directory) if directory.is_dir() else [])
    return exit_codes.SUCCESS
