"""Mapping from pre-1.0 command names to current ``ci`` commands."""

from __future__ import annotations

from ci_cli.exceptions import UnknownCommandError

LEGACY_COMMANDS: dict[str, str] = {
    "status": "status",
    "init": "init",
    "integrate": "integrate",
    "fix": "fix",
    "verify": "verify",
    "agents": "agents",
    "load": "load",
    "commit": "commit",
    "push": "deploy",
    "stage-commit": "commit",
    "stage-commit-push": "deploy",
    "update-gitignore": "ignore",
}

_HELP_GROUPS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Basic Commands", ("status", "agents", "load")),
    ("Project Lifecycle", ("init", "integrate", "verify", "fix")),
    ("Git Operations", ("commit", "push", "stage-commit", "stage-commit-push", "update-gitignore")),
)

def is_legacy_command(name: str) -> bool:
    return name in LEGACY_COMMANDS


def map_legacy_command(name: str) -> str:
    """Current command name for legacy *name*.

    Raises
    ------
    UnknownCommandError
        When *name* has no mapping.
    """
    try:
        return LEGACY_COMMANDS[name]
    except KeyError:
        raise UnknownCommandError(
            f"Unknown legacy command: {name}",
            hint="Run 'ci legacy --list' to see supported names.",
        ) from None


def build_legacy_invocation(name: str, args: list[str]) -> list[str]:
    """``["ci", <mapped>, *args]`` for legacy command *name*."""
    return ["ci", map_legacy_command(name), *args]


def grouped_commands() -> list[tuple[str, list[tuple[str, str]]]]:
    """Legacy commands grouped for help output as ``(group, [(old, new)])``.

    Every name in :data:`LEGACY_COMMANDS` belongs to exactly one group.
    """
    return [(title, [(n, LEGACY_COMMANDS[n]) for n in names]) for title, names in _HELP_GROUPS]
