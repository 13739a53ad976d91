"""Infrastructure: the agent files inside the CI repository.

Layout under ``<ci_path>``::

    AGENTS.md
    AGENTS/Manager/AGENTS_FULL.md
    AGENTS/<name>/<name>.md | <name>_memory.md
    AGENTS/<name>/README.md
    AGENTS/<name>/metadata.json
    AGENTS/<name>/ContinuousLearning.md
    AGENTS/<name>/sessions/<unix_ts>.json
    AGENTS/<name>/working_<unix_ts>.md
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from ci_cli.core.agent_markdown import extract_agent_description
from ci_cli.core.agent_session import (
    LEARNING_FILENAME,
    metadata_from_dict,
    metadata_to_dict,
    session_to_dict,
)
from ci_cli.core.models import AgentMetadata, AgentSession
from ci_cli.exceptions import ConfigurationError, ValidationError

logger = logging.getLogger(__name__)

AGENTS_DIRNAME: str = "AGENTS"
AGENTS_INDEX: str = "AGENTS.md"
MANAGER_DIRNAME: str = "Manager"
FULL_INDEX: str = "AGENTS_FULL.md"


@dataclass(frozen=True, slots=True)
class AgentDirectory:
    """An ``AGENTS/<name>`` directory found by :meth:`AgentWorkspace.scan_agent_directories`."""

    name: str
    path: Path
    description: str | None


class AgentWorkspace:
    """Filesystem-backed agent storage.

    Satisfies :class:`~ci_cli.core.protocols.AgentRepository`.  Every
    ``OSError`` is re-raised as :class:`ConfigurationError`.

    Parameters
    ----------
    ci_path:
        Root of the CollaborativeIntelligence checkout.
    """

    def __init__(self, ci_path: Path) -> None:
        self.ci_path: Path = ci_path

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    @property
    def agents_dir(self) -> Path:
        return self.ci_path / AGENTS_DIRNAME

    @property
    def index_path(self) -> Path:
        return self.ci_path / AGENTS_INDEX

    @property
    def full_index_path(self) -> Path:
        return self.agents_dir / MANAGER_DIRNAME / FULL_INDEX

    def toolkit_dir(self, agent_name: str) -> Path:
        return self.agents_dir / agent_name

    # ------------------------------------------------------------------
    # Low-level I/O
    # ------------------------------------------------------------------

    @staticmethod
    def _read(path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Failed to read {path}: {exc}") from exc

    @staticmethod
    def _write(path: Path, content: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Failed to write {path}: {exc}") from exc
        logger.debug("Wrote %s", path)

    # ------------------------------------------------------------------
    # AgentRepository
    # ------------------------------------------------------------------

    def read_agent_source(self, agent_name: str) -> tuple[str, str] | None:
        toolkit = self.toolkit_dir(agent_name)
        for candidate in (toolkit / f"{agent_name}.md", toolkit / f"{agent_name}_memory.md"):
            if candidate.is_file():
                logger.debug("Agent %s memory from %s", agent_name, candidate)
                return str(candidate), self._read(candidate)
        return None

    def read_agents_index(self) -> str | None:
        if not self.index_path.is_file():
            return None
        return self._read(self.index_path)

    def toolkit_path(self, agent_name: str) -> str:
        return str(self.toolkit_dir(agent_name))

    def write_memory(self, agent_name: str, content: str, target: str | None = None) -> str:
        path = Path(target) if target else self.toolkit_dir(agent_name) / f"{agent_name}_memory.md"
        self._write(path, content)
        return str(path)

    def load_metadata(self, agent_name: str) -> AgentMetadata | None:
        path = self.toolkit_dir(agent_name) / "metadata.json"
        if not path.is_file():
            return None
        try:
            return metadata_from_dict(json.loads(self._read(path)))
        except (json.JSONDecodeError, ValidationError) as exc:
            logger.warning("Ignoring unreadable metadata %s: %s", path, exc)
            return None

    def save_metadata(self, agent_name: str, metadata: AgentMetadata) -> None:
        path = self.toolkit_dir(agent_name) / "metadata.json"
        self._write(path, json.dumps(metadata_to_dict(metadata), indent=2))

    def read_learning(self, agent_name: str) -> str | None:
        path = self.toolkit_dir(agent_name) / LEARNING_FILENAME
        if not path.is_file():
            return None
        return self._read(path)

    def save_session(self, agent_name: str, session: AgentSession, timestamp: int) -> str:
        path = self.toolkit_dir(agent_name) / "sessions" / f"{timestamp}.json"
        self._write(path, json.dumps(session_to_dict(session), indent=2))
        return str(path)

    def write_working_memory(self, agent_name: str, content: str, timestamp: int) -> str:
        path = self.toolkit_dir(agent_name) / f"working_{timestamp}.md"
        self._write(path, content)
        return str(path)

    # ------------------------------------------------------------------
    # Listing helpers for ``ci agents`` and friends
    # ------------------------------------------------------------------

    def read_agent_listing(self) -> tuple[Path, str] | None:
        """``AGENTS_FULL.md`` if present, else ``AGENTS.md``."""
        for path in (self.full_index_path, self.index_path):
            if path.is_file():
                return path, self._read(path)
        return None

    def scan_agent_directories(self) -> list[AgentDirectory]:
        """Agent sub-directories, skipping dot-directories and ``Manager``."""
        if not self.agents_dir.is_dir():
            return []
        try:
            children = sorted(self.agents_dir.iterdir(), key=lambda p: p.name.lower())
        except OSError as exc:
            raise ConfigurationError(f"Failed to read {self.agents_dir}: {exc}") from exc

        found: list[AgentDirectory] = []
        for child in children:
            if not child.is_dir() or child.name.startswith(".") or child.name == MANAGER_DIRNAME:
                continue
            readme = child / "README.md"
            description = None
            if readme.is_file():
                description = extract_agent_description(self._read(readme))
            found.append(AgentDirectory(name=child.name, path=child, description=description))
        return found

    def agent_names(self) -> list[str]:
        return [entry.name for entry in self.scan_agent_directories()]

    def usage_count(self, agent_name: str) -> int:
        metadata = self.load_metadata(agent_name)
        return metadata.usage_count if metadata is not None else 0

    def searched_locations(self) -> list[Path]:
        return [self.full_index_path, self.index_path, self.agents_dir]
