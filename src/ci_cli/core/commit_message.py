"""Commit message suggestions from ``git diff --staged --name-status`` output."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

_ACTIONS: dict[str, str] = {
    "A": "Add",
    "M": "Update",
    "D": "Remove",
    "R": "Rename",
    "C": "Copy",
    "T": "Change type of",
}
_PAST_TENSE: dict[str, str] = {
    "A": "added",
    "M": "modified",
    "D": "removed",
    "R": "renamed",
}


@dataclass(frozen=True, slots=True)
class StagedChange:
    status: str
    """First letter of git's status column (``A``, ``M``, ``D``, ``R``...)."""

    path: str


def parse_name_status(output: str) -> list[StagedChange]:
    """Parse ``--name-status`` lines; renames report their new path."""
    changes: list[StagedChange] = []
    for line in output.splitlines():
        parts = line.split("\t")
        if len(parts) < 2 or not parts[0]:
            continue
        changes.append(StagedChange(status=parts[0][0].upper(), path=parts[-1]))
    return changes


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def change_summary(changes: Sequence[StagedChange]) -> str:
    """``"2 files added, 1 file modified"``."""
    parts = []
    for status, verb in _PAST_TENSE.items():
        count = sum(1 for change in changes if change.status == status)
        if count:
            parts.append(f"{_plural(count, 'file')} {verb}")
    return ", ".join(parts)


def suggest_message(changes: Sequence[StagedChange]) -> str:
    """One-line commit subject describing *changes*."""
    if not changes:
        return "Update project files"
    if len(changes) == 1:
        change = changes[0]
        return f"{_ACTIONS.get(change.status, 'Update')} {change.path}"

    statuses = {change.status for change in changes}
    if statuses == {"A"}:
        action = "Add"
    elif statuses == {"D"}:
        action = "Remove"
    elif "A" in statuses and "D" in statuses:
        action = "Refactor"
    else:
        action = "Update"

    top_dirs = {change.path.split("/", 1)[0] for change in changes if "/" in change.path}
    if len(top_dirs) == 1 and all("/" in change.path for change in changes):
        return f"{action} {top_dirs.pop()} ({len(changes)} files)"
    return f"{action} {len(changes)} files"
