"""Domain models for ci.

All models are **frozen** dataclasses or enums, immutable value objects
with no behaviour beyond data access and their JSON shape.  Updates go
through :func:`dataclasses.replace` in the service modules.  They carry
zero I/O and must remain pure across the entire lifecycle.

JSON field names match the files already written by earlier releases
(``.ci-config.json``, ``ideas.json``, ``metadata.json`` and session
files), so existing projects keep loading.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


DEFAULT_ACTIVE_AGENTS: tuple[str, ...] = ("Athena", "ProjectArchitect")
"""Agents enabled in a freshly initialised project."""


# ---------------------------------------------------------------------------
# Project configuration (.ci-config.json)
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class AutoAcceptConfig:
    """Which agent prompts are accepted without asking the user."""

    agent_load: bool = False
    """Skip the confirmation before launching a loaded agent."""

    agent_activate: bool = False
    """Skip the confirmation before activating an agent."""

    agents: tuple[str, ...] = ()
    """Agents whose prompts are always accepted (case-insensitive)."""

    global_: bool = False
    """Accept every prompt.  Serialised as ``global``."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "agent_load": self.agent_load,
            "agent_activate": self.agent_activate,
            "agents": list(self.agents),
            "global": self.global_,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AutoAcceptConfig:
        return cls(
            agent_load=bool(data.get("agent_load", False)),
            agent_activate=bool(data.get("agent_activate", False)),
            agents=tuple(str(a) for a in data.get("agents", []) or []),
            global_=bool(data.get("global", False)),
        )


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    """Per-project settings stored in ``.ci-config.json``."""

    project_name: str
    """Display name; defaults to the directory name on ``config init``."""

    ci_version: str
    """Version of ci that created or last rewrote the file."""

    created_at: str
    """RFC 3339 creation time (local offset)."""

    updated_at: str
    """RFC 3339 time of the last save."""

    active_agents: tuple[str, ...] = DEFAULT_ACTIVE_AGENTS
    """Agents enabled for this project."""

    fast_activation: bool = True
    """Whether agents activate without the full memory preamble."""

    auto_accept: AutoAcceptConfig = field(default_factory=AutoAcceptConfig)
    """Prompt auto-accept rules."""

    metadata: dict[str, Any] = field(default_factory=dict)
    """Free-form key/value data (``integration_type`` and user keys)."""


# ---------------------------------------------------------------------------
# Ideas (ideas.json)
# ---------------------------------------------------------------------------

class IdeaStatus(Enum):
    """Lifecycle state of an idea.  Values are the stored JSON strings."""

    NEW = "New"
    EXPLORING = "Exploring"
    IN_DEVELOPMENT = "InDevelopment"
    IMPLEMENTED = "Implemented"
    ON_HOLD = "OnHold"
    ARCHIVED = "Archived"
    REJECTED = "Rejected"

    @property
    def display(self) -> str:
        """Human-readable label (``"In Development"``, ``"On Hold"``)."""
        return {
            IdeaStatus.IN_DEVELOPMENT: "In Development",
            IdeaStatus.ON_HOLD: "On Hold",
        }.get(self, self.value)


class IdeaPriority(Enum):
    """Relative importance of an idea.  Values are the stored JSON strings."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    @property
    def display(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Idea:
    """A single tracked idea."""

    id: str
    """UUID4 string; looked up by exact match."""

    title: str
    description: str
    category: str
    tags: tuple[str, ...]
    status: IdeaStatus
    priority: IdeaPriority
    created_at: str
    updated_at: str

    related_ideas: tuple[str, ...] = ()
    """Ids of other ideas this one links to."""

    notes: str | None = None


# ---------------------------------------------------------------------------
# Agents
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class AgentEntry:
    """An agent declared by a ``### Name - description`` heading."""

    name: str
    """Text before the first `` - `` of the heading, trimmed."""

    description: str
    """Text after the first `` - ``, or ``""``."""

    heading: str
    """Full heading text without the ``### `` prefix."""


@dataclass(frozen=True, slots=True)
class AgentMetadata:
    """Per-agent bookkeeping stored in ``AGENTS/<name>/metadata.json``."""

    name: str
    description: str
    created_at: str
    last_used: str
    toolkit_path: str
    memory_path: str
    learning_path: str
    capabilities: tuple[str, ...] = ()
    usage_count: int = 0
    version: str = "1.0"
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class AgentSession:
    """One ``ci load`` run, stored under ``AGENTS/<name>/sessions/``."""

    agent_name: str
    start_time: str
    context: str | None = None
    end_time: str | None = None
    output_path: str | None = None


# ---------------------------------------------------------------------------
# Directory listing
# ---------------------------------------------------------------------------

class FileKind(Enum):
    """Listing category.  Each member carries (title, colour, icon, rank)."""

    DIRECTORY = ("Directories", "bright_blue", "📁", 0)
    SOURCE = ("Source Code", "green", "📝", 1)
    CONFIG = ("Configuration", "blue", "⚙️", 2)
    BUILD = ("Build Files", "yellow", "🔧", 3)
    DOCUMENTATION = ("Documentation", "cyan", "📚", 4)
    GIT = ("Git Files", "magenta", "🌿", 5)
    BINARY = ("Binaries", "red", "⚡", 6)
    ARCHIVE = ("Archives", "bright_yellow", "📦", 7)
    MEDIA = ("Media Files", "bright_magenta", "🎨", 8)
    BACKUP = ("Backup Files", "bright_black", "💾", 9)
    OTHER = ("Other Files", "white", "📄", 10)

    @property
    def title(self) -> str:
        return self.value[0]

    @property
    def color(self) -> str:
        return self.value[1]

    @property
    def icon(self) -> str:
        return self.value[2]

    @property
    def rank(self) -> int:
        """Group ordering; lower ranks are listed first."""
        return self.value[3]


@dataclass(frozen=True, slots=True)
class FileEntry:
    """A single directory entry as seen by ``ci ls``."""

    name: str
    kind: FileKind
    is_dir: bool = False
    size: int = 0
    """File size in bytes; ignored for directories."""

    item_count: int | None = None
    """Number of children for directories, ``None`` when unreadable."""

    @property
    def extension(self) -> str:
        """Lower-cased extension without the dot, or ``""``."""
        stem, dot, ext = self.name.rpartition(".")
        if not dot or not stem:
            return ""
        return ext.lower()
