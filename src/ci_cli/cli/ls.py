"""``ci ls``: grouped two-column directory listing."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ci_cli.cli import exit_codes
from ci_cli.cli.console import console, console_width, escape, out
from ci_cli.core.listing import COLUMN_SEPARATOR, ListingLine, column_width_for, group_entries, layout_columns
from ci_cli.exceptions import EnvironmentError
from ci_cli.infra.directory_scanner import scan_directory


def _import_rich_text() -> type[Any]:
    """Import rich text lazily for styled rows."""
    try:
        from rich.text import Text
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Text


def _styled_cell(text_class: type[Any], line: ListingLine, width: int) -> Any:
    cell = text_class(no_wrap=True)
    for text, style in line.segments:
        cell.append(text, style=style or None)
    cell.truncate(width, overflow="ellipsis", pad=True)
    return cell


def _plain_cell(line: ListingLine, width: int) -> str:
    text = line.plain
    if len(text) > width:
        text = text[: max(width - 1, 0)] + "…"
    return text.ljust(width)


def run_ls(directory: str | None = None) -> int:
    target = Path(directory or ".")
    entries = scan_directory(target)
    if not entries:
        console.print(f"[dim]Directory is empty: {escape(str(target))}[/dim]")
        return exit_codes.SUCCESS

    width = column_width_for(console_width())
    left, right = layout_columns(group_entries(entries), width)

    try:
        text_class = _import_rich_text()
    except EnvironmentError:
        for left_line, right_line in zip(left, right):
            out.print((_plain_cell(left_line, width) + COLUMN_SEPARATOR + right_line.plain).rstrip())
        return exit_codes.SUCCESS

    for left_line, right_line in zip(left, right):
        row = text_class(no_wrap=True)
        row.append_text(_styled_cell(text_class, left_line, width))
        row.append(COLUMN_SEPARATOR, style="bright_black")
        row.append_text(_styled_cell(text_class, right_line, width))
        row.rstrip()
        out.print(row)
    return exit_codes.SUCCESS
