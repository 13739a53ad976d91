"""Pure operations on :class:`~ci_cli.core.models.ProjectConfig`.

Covers construction, JSON mapping, auto-accept decisions and the value
parsing used by ``ci config set``.  Reading and writing the file lives
in :mod:`ci_cli.infra.config_store`.
"""

from __future__ import annotations

import json
from dataclasses import replace
from typing import Any

from ci_cli.core.models import DEFAULT_ACTIVE_AGENTS, AutoAcceptConfig, ProjectConfig
from ci_cli.exceptions import ValidationError
from ci_cli.utils.text import split_csv
from ci_cli.utils.timestamps import now_local
from ci_cli.version import __version__

CONFIG_FILENAME: str = ".ci-config.json"

BUILTIN_KEYS: tuple[str, ...] = (
    "project_name",
    "ci_version",
    "created_at",
    "updated_at",
    "active_agents",
    "fast_activation",
)
"""Keys stored as top-level fields rather than inside ``metadata``."""

INTEGRATION_TYPES: tuple[str, ...] = ("standalone", "override")

_TRUE_WORDS = frozenset({"true", "yes", "1", "on"})
_FALSE_WORDS = frozenset({"false", "no", "0", "off"})


# ---------------------------------------------------------------------------
# Construction & JSON mapping
# ---------------------------------------------------------------------------

def new_project_config(
    project_name: str,
    active_agents: list[str] | None = None,
    fast_activation: bool = True,
) -> ProjectConfig:
    """Build a fresh config stamped with the current time and version."""
    now = now_local()
    return ProjectConfig(
        project_name=project_name,
        ci_version=__version__,
        created_at=now,
        updated_at=now,
        active_agents=tuple(active_agents) if active_agents else DEFAULT_ACTIVE_AGENTS,
        fast_activation=fast_activation,
    )


def config_to_dict(config: ProjectConfig) -> dict[str, Any]:
    return {
        "project_name": config.project_name,
        "ci_version": config.ci_version,
        "created_at": config.created_at,
        "updated_at": config.updated_at,
        "active_agents": list(config.active_agents),
        "fast_activation": config.fast_activation,
        "auto_accept": config.auto_accept.to_dict(),
        "metadata": dict(config.metadata),
    }


def config_from_dict(data: dict[str, Any]) -> ProjectConfig:
    """Build a config from parsed JSON, filling defaults for missing keys.

    Raises
    ------
    ValidationError
        When ``project_name`` is missing or the payload is not an object.
    """
    if not isinstance(data, dict) or "project_name" not in data:
        raise ValidationError("Configuration is missing the 'project_name' field")
    now = now_local()
    agents = data.get("active_agents")
    metadata = data.get("metadata") or {}
    return ProjectConfig(
        project_name=str(data["project_name"]),
        ci_version=str(data.get("ci_version", __version__)),
        created_at=str(data.get("created_at", now)),
        updated_at=str(data.get("updated_at", now)),
        active_agents=tuple(str(a) for a in agents) if agents is not None else DEFAULT_ACTIVE_AGENTS,
        fast_activation=bool(data.get("fast_activation", True)),
        auto_accept=AutoAcceptConfig.from_dict(data.get("auto_accept") or {}),
        metadata=dict(metadata) if isinstance(metadata, dict) else {},
    )


def config_to_json(config: ProjectConfig) -> str:
    """Pretty-printed JSON text as written to disk."""
    return json.dumps(config_to_dict(config), indent=2)


# ---------------------------------------------------------------------------
# Transformations
# ---------------------------------------------------------------------------

def touch(config: ProjectConfig) -> ProjectConfig:
    """Return a copy with ``updated_at`` set to now."""
    return replace(config, updated_at=now_local())


def set_metadata(config: ProjectConfig, key: str, value: Any) -> ProjectConfig:
    metadata = dict(config.metadata)
    metadata[key] = value
    return replace(config, metadata=metadata)


def get_metadata(config: ProjectConfig, key: str) -> Any | None:
    return config.metadata.get(key)


def merge(base: ProjectConfig, other: ProjectConfig) -> ProjectConfig:
    """Overlay *other* onto *base*.

    ``created_at`` is kept from *base*; metadata keys are merged with
    *other* winning; every other field comes from *other*.
    """
    metadata = dict(base.metadata)
    metadata.update(other.metadata)
    return replace(
        other,
        created_at=base.created_at,
        updated_at=now_local(),
        metadata=metadata,
    )


def should_auto_accept(config: ProjectConfig, agent_name: str, command: str) -> bool:
    """Decide whether *command* for *agent_name* skips the confirmation.

    Precedence: the global switch, then the case-insensitive agent
    list, then the per-command flag (``load`` / ``activate``).
    """
    rules = config.auto_accept
    if rules.global_:
        return True
    wanted = agent_name.lower()
    if any(agent.lower() == wanted for agent in rules.agents):
        return True
    if command == "load":
        return rules.agent_load
    if command == "activate":
        return rules.agent_activate
    return False


# ---------------------------------------------------------------------------
# Value parsing for ``ci config set``
# ---------------------------------------------------------------------------

def parse_bool(value: str) -> bool:
    """Parse ``true/yes/1/on`` and ``false/no/0/off`` (case-insensitive).

    Raises
    ------
    ValidationError
        For any other string.
    """
    lowered = value.strip().lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    raise ValidationError(
        f"Invalid boolean value for fast_activation: {value}",
        hint="Use one of: true, false, yes, no, 1, 0, on, off",
    )


def parse_agents(value: str) -> list[str]:
    """Comma-split an agent list, trimming whitespace."""
    return split_csv(value)


def parse_metadata_value(value: str) -> Any:
    """Interpret *value* as JSON, falling back to the raw string."""
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


def validate_integration_type(value: str) -> str:
    if value not in INTEGRATION_TYPES:
        raise ValidationError(
            f"Invalid integration type: {value}. Valid options: standalone, override",
        )
    return value


def apply_setting(config: ProjectConfig, key: str, value: str) -> ProjectConfig:
    """Return *config* with ``key`` set from the string *value*.

    Built-in fields are converted to their typed form; ``integration_type``
    is validated; anything else is stored in ``metadata``.
    """
    if key == "project_name":
        return replace(config, project_name=value)
    if key == "active_agents":
        return replace(config, active_agents=tuple(parse_agents(value)))
    if key == "fast_activation":
        return replace(config, fast_activation=parse_bool(value))
    if key == "integration_type":
        return set_metadata(config, key, validate_integration_type(value))
    return set_metadata(config, key, parse_metadata_value(value))


def read_setting(config: ProjectConfig, key: str) -> str | None:
    """Render one setting as display text, or ``None`` when absent."""
    if key == "project_name":
        return config.project_name
    if key == "ci_version":
        return config.ci_version
    if key == "created_at":
        return config.created_at
    if key == "updated_at":
        return config.updated_at
    if key == "active_agents":
        return ", ".join(config.active_agents)
    if key == "fast_activation":
        return "true" if config.fast_activation else "false"
    if key in config.metadata:
        return json.dumps(config.metadata[key], indent=2)
    return None
