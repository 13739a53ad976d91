"""``ci doctor``: environment diagnostics command.

Gathers system information and renders a Rich table summarising
whether the runtime environment satisfies ci's requirements.

This module lives in the CLI layer; it may import from ``infra`` and
``core``, and it renders via Rich.  No business logic resides here; it
purely collects and displays diagnostic data.
"""

from __future__ import annotations

import platform
import sys

from ci_cli.cli import exit_codes
from ci_cli.cli.console import console
from ci_cli.exceptions import ConfigurationError
from ci_cli.infra.settings import Settings, load_settings
from ci_cli.infra.tool_detector import ToolStatus, detect_tool
from ci_cli.version import __version__

REQUIRED_TOOLS: tuple[str, ...] = ("git",)
OPTIONAL_TOOLS: tuple[str, ...] = ("gh", "npm", "vercel", "claude")


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _ci_version_check() -> tuple[str, str, str]:
    return "ci", __version__, "[green]OK[/green]"


def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _ci_path_check(settings: Settings) -> tuple[str, str, str]:
    """The CI repository is only needed by some commands, so absence warns."""
    try:
        return "CI repository", str(settings.ci_path), "[green]OK[/green]"
    except ConfigurationError:
        return "CI repository", "not found (set CI_PATH)", "[yellow]WARN[/yellow]"


def _tool_check(status: ToolStatus, required: bool) -> tuple[str, str, str]:
    if status.found:
        return status.name, str(status.path) if status.path else "found", "[green]OK[/green]"
    if required:
        return status.name, "not found", "[red]FAIL[/red]"
    return status.name, "not found", "[yellow]WARN[/yellow]"


def _os_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the OS row."""
    system_raw = platform.system()
    system_display = {
        "Windows": "Windows",
        "Linux": "Linux",
        "Darwin": "macOS",
    }.get(system_raw, system_raw)
    value = f"{system_display} {platform.release()} ({platform.machine()})"
    return "OS", value, "[green]OK[/green]"


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    if "FAIL" in status:
        return "FAIL"
    if "WARN" in status:
        return "WARN"
    if "OK" in status:
        return "OK"
    return status


def _print_plain_doctor_table(checks: list[tuple[str, str, str]]) -> None:
    """Render doctor output without Rich."""
    print("\nci doctor", file=sys.stderr)
    print("=" * 64, file=sys.stderr)
    print(f"{'Component':<14} {'Value':<38} {'Status':<8}", file=sys.stderr)
    print("-" * 64, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<14} {value:<38} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


def _install_guidance(missing: list[ToolStatus], rich_available: bool) -> None:
    for status in missing:
        if not status.install_commands:
            continue
        if rich_available:
            console.print(f"[yellow]{status.name} is not installed.[/yellow] Install using one of:")
            for cmd in status.install_commands:
                console.print(f"  [bold]{cmd}[/bold]")
        else:
            print(f"{status.name} is not installed. Install using one of:", file=sys.stderr)
            for cmd in status.install_commands:
                print(f"  {cmd}", file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(settings: Settings | None = None) -> int:
    """Execute all diagnostic checks and render a Rich summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all critical checks pass,
        :data:`exit_codes.GENERAL_ERROR` if a critical check fails.
    """
    settings = settings or load_settings()
    tool_statuses = [(detect_tool(name), name in REQUIRED_TOOLS) for name in (*REQUIRED_TOOLS, *OPTIONAL_TOOLS)]

    checks = [
        _ci_version_check(),
        _python_version_check(),
        _ci_path_check(settings),
        *(_tool_check(status, required) for status, required in tool_statuses),
        _os_check(),
    ]
    has_failure = any("FAIL" in status for _, _, status in checks)

    rich_available = True
    try:
        from rich.table import Table
    except ModuleNotFoundError:
        rich_available = False

    if rich_available:
        table = Table(
            title="ci doctor",
            show_header=True,
            header_style="bold cyan",
            border_style="dim",
        )
        table.add_column("Component", style="bold", min_width=14)
        table.add_column("Value", min_width=20)
        table.add_column("Status", justify="center", min_width=8)

        for label, value, status in checks:
            table.add_row(label, value, status)

        console.print()
        console.print(table)
        console.print()
    else:
        _print_plain_doctor_table(checks)

    _install_guidance([status for status, _ in tool_statuses if not status.found], rich_available)

    if has_failure:
        if rich_available:
            console.print("[bold red]Some checks failed.[/bold red]")
        else:
            print("Some checks failed.", file=sys.stderr)
        return exit_codes.GENERAL_ERROR

    if rich_available:
        console.print("[bold green]All required checks passed.[/bold green]")
    else:
        print("All required checks passed.", file=sys.stderr)
    return exit_codes.SUCCESS
