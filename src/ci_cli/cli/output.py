"""Status-line helpers shared by every command.

All of these write decorative output to stderr through
:data:`~ci_cli.cli.console.console`; command results go through
:data:`~ci_cli.cli.console.out` instead.
"""

from __future__ import annotations

from ci_cli.cli.console import console, escape

DIVIDER_WIDTH: int = 70

_HEADER_COLORS = frozenset({"blue", "green", "yellow", "cyan", "magenta", "red", "purple"})


def print_command_header(title: str, emoji: str, category: str, color: str = "cyan") -> None:
    """Boxed header: emoji and bold title, a rule, then the category."""
    style = "magenta" if color == "purple" else color
    if style not in _HEADER_COLORS:
        style = "bold"
    console.print(f"{emoji} [bold {style}]{escape(title)}[/bold {style}]")
    console.print(f"[{style}]{'=' * len(title)}[/{style}]")
    if category:
        console.print(f"[dim]{escape(category)}[/dim]")
    console.print()


def print_success(message: str) -> None:
    console.print(f"[bold green]✓[/bold green] [green]{escape(message)}[/green]")


def print_error(message: str) -> None:
    console.print(f"[bold red]✗[/bold red] [red]{escape(message)}[/red]")


def print_warning(message: str) -> None:
    console.print(f"[bold yellow]![/bold yellow] [yellow]{escape(message)}[/yellow]")


def print_info(message: str) -> None:
    console.print(f"[blue]ℹ[/blue] {escape(message)}")


def print_status(message: str) -> None:
    console.print(f"  • {escape(message)}")


def print_divider() -> None:
    console.print(f"[dim]{'═' * DIVIDER_WIDTH}[/dim]")


def print_section(title: str) -> None:
    console.print()
    console.print(f"[bold]{escape(title)}[/bold]")
