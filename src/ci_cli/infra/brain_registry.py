"""Infrastructure: BRAIN registration and inspection.

The registered location is kept as plain text in ``~/.ci_brain_config``.
A valid location contains a ``BRAIN/`` directory holding markdown files
either directly or one sub-directory deep.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from ci_cli.exceptions import BrainError, NotFoundError

logger = logging.getLogger(__name__)

BRAIN_DIRNAME: str = "BRAIN"
NOT_REGISTERED_MESSAGE: str = "BRAIN not registered. Use 'ci brain register <path>' first."
_READABILITY_SAMPLE = 3
_ENV_PROBE = ("CI_BRAIN_TEST", "test_value")


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class BrainCheck:
    """One health or self-test probe."""

    label: str
    passed: bool
    detail: str = ""


@dataclass(frozen=True, slots=True)
class BrainSources:
    """What ``ci brain source`` lists."""

    root_files: tuple[tuple[str, int], ...]
    """``(file name, size in KB)`` for markdown files directly in ``BRAIN/``."""

    directories: tuple[tuple[str, int], ...]
    """``(directory name, markdown count)`` for non-empty sub-directories."""

    @property
    def total(self) -> int:
        return len(self.root_files) + sum(count for _, count in self.directories)


# ---------------------------------------------------------------------------
# Filesystem helpers
# ---------------------------------------------------------------------------

def _is_markdown(path: Path) -> bool:
    return path.is_file() and path.suffix == ".md"


def _markdown_in(directory: Path) -> list[Path]:
    try:
        return sorted(p for p in directory.iterdir() if _is_markdown(p))
    except OSError:
        return []


def _subdirectories(directory: Path) -> list[Path]:
    try:
        return sorted(p for p in directory.iterdir() if p.is_dir())
    except OSError:
        return []


def count_brain_files(brain_dir: Path) -> int:
    """Markdown files in *brain_dir* plus those in its immediate sub-directories."""
    total = len(_markdown_in(brain_dir))
    for subdirectory in _subdirectories(brain_dir):
        total += len(_markdown_in(subdirectory))
    return total


def _readable_markdown(brain_dir: Path, limit: int) -> int:
    """How many of the first *limit* root markdown files have content."""
    readable = 0
    for path in _markdown_in(brain_dir)[:limit]:
        try:
            if path.read_text(encoding="utf-8").strip():
                readable += 1
        except (OSError, UnicodeDecodeError):
            logger.debug("Unreadable BRAIN file %s", path)
    return readable


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class BrainRegistry:
    """Registration file access plus the checks run against a BRAIN.

    Parameters
    ----------
    config_file:
        Location of the plain-text registration file.
    """

    def __init__(self, config_file: Path) -> None:
        self.config_file: Path = config_file

    def registered_path(self) -> Path | None:
        try:
            text = self.config_file.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise BrainError(f"Failed to read BRAIN config: {self.config_file}: {exc}") from exc
        return Path(text) if text else None

    def require_registered(self) -> Path:
        path = self.registered_path()
        if path is None:
            raise BrainError(NOT_REGISTERED_MESSAGE)
        return path

    def register(self, path: Path) -> int:
        """Validate *path* and record it; return its markdown file count.

        Raises
        ------
        NotFoundError
            When *path* does not exist.
        BrainError
            When it has no ``BRAIN/`` directory or no markdown files.
        """
        if not path.exists():
            raise NotFoundError(f"Path does not exist: {path}")
        brain_dir = path / BRAIN_DIRNAME
        if not brain_dir.is_dir():
            raise BrainError(
                f"Path does not contain a BRAIN directory: {path}\nExpected: {brain_dir}",
            )
        count = count_brain_files(brain_dir)
        if count == 0:
            raise BrainError("BRAIN directory contains no markdown files")
        try:
            self.config_file.write_text(str(path), encoding="utf-8")
        except OSError as exc:
            raise BrainError(f"Failed to write BRAIN config: {self.config_file}: {exc}") from exc
        logger.info("Registered BRAIN at %s (%d files)", path, count)
        return count

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @staticmethod
    def health_checks(path: Path) -> list[BrainCheck]:
        """Run the health probes in order, stopping at the first failure."""
        brain_dir = path / BRAIN_DIRNAME
        checks: list[BrainCheck] = []

        checks.append(BrainCheck("BRAIN path accessible", path.exists(), str(path)))
        if not checks[-1].passed:
            return checks

        checks.append(BrainCheck("BRAIN directory found", brain_dir.is_dir(), str(brain_dir)))
        if not checks[-1].passed:
            return checks

        count = count_brain_files(brain_dir)
        checks.append(BrainCheck("BRAIN files found", count > 0, f"{count} markdown files"))
        if not checks[-1].passed:
            return checks

        readable = _readable_markdown(brain_dir, _READABILITY_SAMPLE)
        checks.append(BrainCheck("BRAIN files readable", readable > 0, f"{readable} files tested"))
        return checks

    @staticmethod
    def sources(path: Path) -> BrainSources:
        brain_dir = path / BRAIN_DIRNAME
        if not brain_dir.is_dir():
            raise BrainError(f"BRAIN directory missing: {brain_dir}")
        root_files = tuple(
            (file.name, file.stat().st_size // 1024) for file in _markdown_in(brain_dir)
        )
        directories = tuple(
            (sub.name, len(_markdown_in(sub)))
            for sub in _subdirectories(brain_dir)
            if _markdown_in(sub)
        )
        return BrainSources(root_files=root_files, directories=directories)

    @staticmethod
    def self_test(path: Path) -> list[BrainCheck]:
        """The four functionality tests; all run regardless of failures."""
        brain_dir = path / BRAIN_DIRNAME
        name, value = _ENV_PROBE
        os.environ[name] = value
        env_ok = os.environ.get(name) == value
        os.environ.pop(name, None)
        return [
            BrainCheck("Path accessibility", path.exists()),
            BrainCheck("BRAIN directory exists", brain_dir.is_dir()),
            BrainCheck("Files are readable", _readable_markdown(brain_dir, len(_markdown_in(brain_dir))) > 0),
            BrainCheck("Environment variables work", env_ok),
        ]
