"""Infrastructure: writing and inspecting CI integration files in a project.

The file contents come from :mod:`ci_cli.core.integration`; this module
only decides where they go and turns ``OSError`` into
:class:`~ci_cli.exceptions.ConfigurationError`.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path

from ci_cli.core import integration
from ci_cli.core.integration import CLAUDE_LOCAL_MD, CLAUDE_MD, CLAUDE_OVERRIDE_MD, Check
from ci_cli.core.models import ProjectConfig
from ci_cli.core.project_config import new_project_config, set_metadata
from ci_cli.exceptions import ConfigurationError, ValidationError
from ci_cli.infra.config_store import config_path, load_config, save_config
from ci_cli.infra.git import GITIGNORE, is_work_tree
from ci_cli.utils.timestamps import format_local, now_local

logger = logging.getLogger(__name__)


def _now() -> str:
    return format_local(now_local())


# ---------------------------------------------------------------------------
# Low-level I/O
# ---------------------------------------------------------------------------

def read_text(path: Path) -> str | None:
    """Content of *path*, or ``None`` when it does not exist."""
    if not path.is_file():
        return None
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Failed to read {path}: {exc}") from exc


def write_text(path: Path, content: str) -> Path:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Failed to write {path}: {exc}") from exc
    logger.debug("Wrote %s", path)
    return path


def backup(path: Path) -> Path | None:
    """Rename *path* to ``<name>.bak``, replacing an older backup."""
    if not path.exists():
        return None
    target = path.with_name(path.name + integration.BACKUP_SUFFIX)
    try:
        path.replace(target)
    except OSError as exc:
        raise ConfigurationError(f"Failed to back up {path}: {exc}") from exc
    logger.info("Backed up %s to %s", path, target)
    return target


# ---------------------------------------------------------------------------
# Project creation
# ---------------------------------------------------------------------------

def create_project_directory(parent: Path, name: str) -> Path:
    """Create ``<parent>/<name>`` with the standard sub-directories.

    Raises
    ------
    ValidationError
        When *name* is empty or the directory already exists.
    """
    if not name.strip():
        raise ValidationError("Project name cannot be empty")
    project = parent / name
    if project.exists():
        raise ValidationError(
            f"Directory '{name}' already exists",
            hint="Use 'ci integrate' to add CI to an existing project.",
        )
    try:
        for sub in integration.PROJECT_DIRECTORIES:
            (project / sub).mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigurationError(f"Failed to create project directory {project}: {exc}") from exc
    return project


def write_readme(directory: Path, project_name: str) -> Path:
    return write_text(directory / "README.md", integration.project_readme(project_name))


# ---------------------------------------------------------------------------
# Integration files
# ---------------------------------------------------------------------------

def save_integration_config(
    directory: Path,
    project_name: str,
    *,
    integration_type: str | None = None,
    agents: Sequence[str] | None = None,
    fast_activation: bool | None = None,
) -> ProjectConfig:
    """Create or update ``.ci-config.json`` for an integrated project.

    An existing file keeps its project name, creation time and
    auto-accept rules; only the values passed here are changed.  Without
    an *integration_type* the stored one is kept, defaulting to
    ``standalone``.
    """
    path = config_path(directory)
    if path.is_file():
        config = load_config(path)
    else:
        config = new_project_config(project_name)
    changes: dict[str, object] = {}
    if agents:
        changes["active_agents"] = tuple(agents)
    if fast_activation is not None:
        changes["fast_activation"] = fast_activation
    config = replace(config, **changes)
    kind = integration_type or config.metadata.get("integration_type") or "standalone"
    return save_config(path, set_metadata(config, "integration_type", kind))


def write_standalone(directory: Path, config: ProjectConfig) -> Path | None:
    """Write the standalone ``CLAUDE.md`` and ``.ci`` templates.

    Returns the backup of a previous ``CLAUDE.md``, if there was one.
    """
    ci_dir = directory / integration.CI_DIR
    write_text(
        ci_dir / "metadata.json",
        integration.standalone_metadata(
            config.project_name, config.active_agents, config.fast_activation, now_local(),
        ),
    )
    for agent in config.active_agents:
        write_text(ci_dir / "agents" / f"{agent}.md", integration.agent_template(agent))

    claude_md = directory / CLAUDE_MD
    previous = backup(claude_md)
    write_text(claude_md, integration.standalone_claude_md(config.project_name, config.active_agents, _now()))
    return previous


def write_override(directory: Path, project_name: str, ci_path: Path) -> bool:
    """Hook ``CLAUDE.i.md`` into the project's ``CLAUDE.md``.

    Returns ``True`` when ``CLAUDE.md`` had to be created.
    """
    claude_md = directory / CLAUDE_MD
    existing = read_text(claude_md)
    if existing is None:
        write_text(claude_md, integration.minimal_override_claude_md(project_name, _now()))
    else:
        updated = integration.add_override_directive(existing)
        if updated != existing:
            write_text(claude_md, updated)
    write_text(
        directory / CLAUDE_OVERRIDE_MD,
        integration.override_claude_md(project_name, str(ci_path), _now()),
    )
    return existing is None


def write_local(directory: Path, project_name: str, ci_path: Path) -> bool:
    """Write ``CLAUDE.local.md``; ``True`` when an older one was replaced."""
    path = directory / CLAUDE_LOCAL_MD
    existed = path.exists()
    write_text(path, integration.local_claude_md(project_name, str(ci_path), _now()))
    return existed


def update_env(directory: Path, ci_path: Path) -> bool:
    """Point ``CI_PATH`` in ``.env`` at *ci_path*; ``True`` when the file changed."""
    path = directory / integration.ENV_FILE
    existing = read_text(path)
    updated = integration.set_env_ci_path(existing, str(ci_path))
    if updated == existing:
        return False
    write_text(path, updated)
    return True


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------

def inspect(directory: Path) -> list[Check]:
    """Run every integration check against *directory*."""
    is_repository = (directory / ".git").exists() and is_work_tree(directory)
    return [
        integration.check_claude_md(
            read_text(directory / CLAUDE_MD),
            read_text(directory / CLAUDE_OVERRIDE_MD),
        ),
        integration.check_claude_local_md(read_text(directory / CLAUDE_LOCAL_MD)),
        integration.check_git_repository(is_repository),
        integration.check_gitignore(read_text(directory / GITIGNORE)),
    ]
