"""Infrastructure: opening files and URLs with the platform's default handler."""

from __future__ import annotations

import logging
import platform
import shutil

from ci_cli.exceptions import CIError
from ci_cli.infra.process import spawn_detached

logger = logging.getLogger(__name__)


def opener_command(target: str, system: str | None = None) -> list[str]:
    """``open`` on macOS, ``cmd /c start`` on Windows, ``xdg-open`` elsewhere."""
    system = (system or platform.system()).lower()
    if system == "darwin":
        return ["open", target]
    if system == "windows":
        return ["cmd", "/c", "start", "", target]
    return ["xdg-open", target]


def open_in_browser(target: str) -> bool:
    """Ask the desktop to open *target*; ``False`` when that was impossible.

    Failing to open a browser never aborts a command.
    """
    args = opener_command(target)
    if shutil.which(args[0]) is None:
        logger.info("No %s executable; cannot open %s", args[0], target)
        return False
    try:
        spawn_detached(args)
    except CIError as exc:
        logger.info("Could not open %s: %s", target, exc)
        return False
    return True
