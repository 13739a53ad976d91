"""Infrastructure: external tool detection and platform guidance.

Locates executables (``git``, ``gh``, ``npm``, ``vercel``, ``claude``)
on the system PATH and provides platform-specific installation
guidance when one is missing.

Rules
-----
* Detection via :func:`shutil.which` only; no subprocess.
* No automatic installation.
* No ``print()``; callers handle user-facing output.
"""

from __future__ import annotations

import platform
import shutil
from dataclasses import dataclass
from pathlib import Path

from ci_cli.exceptions import ToolNotFoundError


# ---------------------------------------------------------------------------
# Detection result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ToolStatus:
    """Result of a PATH probe for one executable.

    Attributes
    ----------
    name : str
        Executable name that was searched for.
    found : bool
        Whether the executable was located on PATH.
    path : Path | None
        Absolute path to the binary, or ``None``.
    install_commands : tuple[str, ...]
        Suggested install commands for the current platform.  Empty
        when the tool is already present.
    """

    name: str
    found: bool
    path: Path | None
    install_commands: tuple[str, ...]


# ---------------------------------------------------------------------------
# Install guidance
# ---------------------------------------------------------------------------

_INSTALL_COMMANDS: dict[str, dict[str, tuple[str, ...]]] = {
    "git": {
        "windows": ("winget install Git.Git",),
        "linux": ("sudo apt install git", "sudo dnf install git"),
        "darwin": ("brew install git",),
    },
    "gh": {
        "windows": ("winget install GitHub.cli",),
        "linux": ("sudo apt install gh", "sudo dnf install gh"),
        "darwin": ("brew install gh",),
    },
    "npm": {
        "windows": ("winget install OpenJS.NodeJS",),
        "linux": ("sudo apt install npm", "sudo dnf install npm"),
        "darwin": ("brew install node",),
    },
    "vercel": {"*": ("npm install -g vercel",)},
    "claude": {"*": ("npm install -g @anthropic-ai/claude-code",)},
}

_DOWNLOAD_PAGES: dict[str, str] = {
    "git": "https://git-scm.com/downloads",
    "gh": "https://cli.github.com/",
    "npm": "https://nodejs.org/",
    "vercel": "https://vercel.com/docs/cli",
    "claude": "https://docs.anthropic.com/en/docs/claude-code",
}


def _platform_install_commands(name: str) -> tuple[str, ...]:
    """Return install commands for *name* appropriate for the current OS."""
    table = _INSTALL_COMMANDS.get(name, {})
    if "*" in table:
        return table["*"]
    system = platform.system().lower()
    if system in table:
        return table[system]
    page = _DOWNLOAD_PAGES.get(name)
    if page:
        return (f"Please install {name} from {page}",)
    return (f"Please install {name} and make sure it is on PATH",)


# ---------------------------------------------------------------------------
# Detection logic
# ---------------------------------------------------------------------------

def detect_tool(name: str) -> ToolStatus:
    """Probe PATH for *name*.

    Returns a :class:`ToolStatus` regardless of whether the tool is
    present; the caller decides whether to abort or merely warn.
    """
    result = shutil.which(name)
    if result is not None:
        return ToolStatus(
            name=name,
            found=True,
            path=Path(result).resolve(),
            install_commands=(),
        )
    return ToolStatus(
        name=name,
        found=False,
        path=None,
        install_commands=_platform_install_commands(name),
    )


def require_tool(name: str) -> Path:
    """Locate *name* or raise :class:`ToolNotFoundError` with install hints."""
    status = detect_tool(name)
    if not status.found or status.path is None:
        hint_lines = [f"Install {name} using one of:"]
        hint_lines.extend(f"  {cmd}" for cmd in status.install_commands)
        raise ToolNotFoundError(
            f"{name} is not installed or not on PATH.",
            hint="\n".join(hint_lines),
        )
    return status.path
