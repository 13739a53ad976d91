"""Infrastructure: reading a directory for ``ci ls``."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ci_cli.core.listing import classify, is_listed
from ci_cli.core.models import FileEntry
from ci_cli.exceptions import ConfigurationError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _child_count(path: Path) -> int | None:
    try:
        with os.scandir(path) as entries:
            return sum(1 for _ in entries)
    except OSError:
        return None


def scan_directory(directory: Path) -> list[FileEntry]:
    """Classified entries of *directory*, hidden ones filtered out.

    Raises
    ------
    NotFoundError
        When *directory* does not exist.
    ValidationError
        When *directory* is not a directory.
    ConfigurationError
        When it cannot be read.
    """
    if not directory.exists():
        raise NotFoundError(f"Directory does not exist: {directory}")
    if not directory.is_dir():
        raise ValidationError(f"Path is not a directory: {directory}")

    entries: list[FileEntry] = []
    try:
        with os.scandir(directory) as it:
            for item in it:
                if not is_listed(item.name):
                    continue
                try:
                    is_dir = item.is_dir()
                    size = 0 if is_dir else item.stat().st_size
                except OSError as exc:
                    logger.debug("Skipping %s: %s", item.path, exc)
                    continue
                entries.append(
                    FileEntry(
                        name=item.name,
                        kind=classify(item.name, is_dir),
                        is_dir=is_dir,
                        size=size,
                        item_count=_child_count(Path(item.path)) if is_dir else None,
                    )
                )
    except OSError as exc:
        raise ConfigurationError(f"Failed to read directory: {directory}: {exc}") from exc
    return entries
