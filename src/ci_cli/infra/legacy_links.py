"""Infrastructure: symlinks that expose legacy command names.

Each link ``<bin_dir>/<legacy name>`` points at ``<bin_dir>/ci``; the
entry point recognises the name it was invoked under and forwards the
call (see :func:`ci_cli.cli.app.cli`).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from ci_cli.core.legacy import LEGACY_COMMANDS
from ci_cli.exceptions import NotFoundError

logger = logging.getLogger(__name__)

CI_EXECUTABLE: str = "ci"


@dataclass
class LinkReport:
    """Per-name outcome of a create or remove pass."""

    changed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)
    """``(name, reason)`` pairs."""


def _points_at(link: Path, target: Path) -> bool:
    if not link.is_symlink():
        return False
    destination = Path(os.readlink(link))
    if not destination.is_absolute():
        destination = link.parent / destination
    return destination.resolve() == target.resolve()


def create_links(bin_dir: Path) -> LinkReport:
    """Link every legacy name in *bin_dir* to ``<bin_dir>/ci``.

    Existing entries are left alone.

    Raises
    ------
    NotFoundError
        When ``<bin_dir>/ci`` does not exist.
    """
    ci_binary = bin_dir / CI_EXECUTABLE
    if not ci_binary.exists():
        raise NotFoundError(
            f"CI binary not found in {bin_dir}",
            hint="Install ci into that directory first, or pass --bin-dir.",
        )

    report = LinkReport()
    for name in sorted(LEGACY_COMMANDS):
        link = bin_dir / name
        if link.exists() or link.is_symlink():
            report.skipped.append(name)
            continue
        try:
            link.symlink_to(ci_binary)
        except OSError as exc:
            report.failed.append((name, str(exc)))
            continue
        logger.debug("Linked %s -> %s", link, ci_binary)
        report.changed.append(name)
    return report


def remove_links(bin_dir: Path) -> LinkReport:
    """Remove legacy links in *bin_dir* that point at ``<bin_dir>/ci``."""
    ci_binary = bin_dir / CI_EXECUTABLE
    report = LinkReport()
    for name in sorted(LEGACY_COMMANDS):
        link = bin_dir / name
        if not _points_at(link, ci_binary):
            report.skipped.append(name)
            continue
        try:
            link.unlink()
        except OSError as exc:
            report.failed.append((name, str(exc)))
            continue
        report.changed.append(name)
    return report


def installed_links(bin_dir: Path) -> list[str]:
    ci_binary = bin_dir / CI_EXECUTABLE
    return [name for name in sorted(LEGACY_COMMANDS) if _points_at(bin_dir / name, ci_binary)]
