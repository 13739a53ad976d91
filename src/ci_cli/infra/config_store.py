"""Infrastructure: reading and writing ``.ci-config.json``."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ci_cli.core.models import ProjectConfig
from ci_cli.core.project_config import CONFIG_FILENAME, config_from_dict, config_to_json, touch
from ci_cli.exceptions import ConfigurationError, ValidationError

logger = logging.getLogger(__name__)


def config_path(directory: Path) -> Path:
    return directory / CONFIG_FILENAME


def load_config(path: Path) -> ProjectConfig:
    """Parse the config file at *path*.

    Raises
    ------
    ConfigurationError
        When the file cannot be read or is not a valid config.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Failed to read config file: {path}: {exc}") from exc
    try:
        return config_from_dict(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ConfigurationError(
            f"Failed to parse config file: {path}",
            hint=str(exc),
        ) from exc


def save_config(path: Path, config: ProjectConfig) -> ProjectConfig:
    """Write *config* to *path* with a fresh ``updated_at``; return what was written."""
    stamped = touch(config)
    try:
        path.write_text(config_to_json(stamped), encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Failed to write config file: {path}: {exc}") from exc
    logger.debug("Saved project config to %s", path)
    return stamped


def find_nearest_config(start: Path) -> tuple[Path, ProjectConfig] | None:
    """Search *start* and its parents for ``.ci-config.json``.

    Returns the first ``(path, config)`` found, or ``None``.
    """
    current = start.resolve()
    for directory in (current, *current.parents):
        candidate = config_path(directory)
        if candidate.is_file():
            logger.debug("Nearest project config: %s", candidate)
            return candidate, load_config(candidate)
    return None
