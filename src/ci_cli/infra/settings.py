"""Runtime settings resolved from the environment.

Priority: environment variables > defaults.  There is no settings file;
per-project configuration lives in ``.ci-config.json``
(:mod:`ci_cli.infra.config_store`).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from ci_cli.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

REPOSITORY_MARKER: str = "CLAUDE.md"
"""File whose presence identifies a CollaborativeIntelligence checkout."""

_CANDIDATE_LOCATIONS: tuple[tuple[str, ...], ...] = (
    ("Documents", "Projects", "CollaborativeIntelligence"),
    ("Projects", "CollaborativeIntelligence"),
    ("CollaborativeIntelligence",),
)
_SYSTEM_LOCATION = Path("/usr/local/share/CollaborativeIntelligence")


@dataclass
class Settings:
    """Process-wide settings.

    ``ci_path`` is resolved lazily so that commands which never touch
    the CI repository keep working without one.
    """

    home: Path = field(default_factory=Path.home)
    ci_path_override: str | None = None
    log_level: str = "WARNING"
    parallel_launch_delay: float = 2.0
    _ci_path: Path | None = field(default=None, init=False, repr=False)

    def candidate_paths(self) -> list[Path]:
        """Default checkout locations, in search order."""
        paths = [self.home.joinpath(*parts) for parts in _CANDIDATE_LOCATIONS]
        paths.append(_SYSTEM_LOCATION)
        return paths

    @property
    def ci_path(self) -> Path:
        """The CollaborativeIntelligence repository root.

        Raises
        ------
        ConfigurationError
            When neither ``CI_PATH`` nor any default location is usable.
        """
        if self._ci_path is None:
            self._ci_path = self._resolve_ci_path()
        return self._ci_path

    def _resolve_ci_path(self) -> Path:
        if self.ci_path_override:
            override = Path(self.ci_path_override).expanduser()
            if override.exists():
                logger.debug("Using CI_PATH=%s", override)
                return override
            logger.info("CI_PATH=%s does not exist; searching defaults", override)

        for candidate in self.candidate_paths():
            if (candidate / REPOSITORY_MARKER).exists():
                logger.debug("Found CI repository at %s", candidate)
                return candidate

        raise ConfigurationError(
            "CI repository path not found",
            hint="Set CI_PATH to your CollaborativeIntelligence checkout.",
        )

    @property
    def brain_config_file(self) -> Path:
        return self.home / ".ci_brain_config"

    @property
    def data_dir(self) -> Path:
        """Per-user data directory (``$XDG_DATA_HOME`` or ``~/.local/share``)."""
        xdg = os.environ.get("XDG_DATA_HOME")
        if xdg:
            return Path(xdg)
        return self.home / ".local" / "share"

    @property
    def bin_dir(self) -> Path:
        return self.home / ".local" / "bin"


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return max(float(raw), 0.0)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r", name, raw)
        return default


def load_settings() -> Settings:
    """Build :class:`Settings` from ``CI_PATH``, ``CI_LOG_LEVEL`` and ``CI_PARALLEL_DELAY``."""
    return Settings(
        ci_path_override=os.environ.get("CI_PATH") or None,
        log_level=os.environ.get("CI_LOG_LEVEL", "WARNING"),
        parallel_launch_delay=_float_env("CI_PARALLEL_DELAY", 2.0),
    )
