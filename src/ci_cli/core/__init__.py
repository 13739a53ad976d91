"""Core / service layer: pure business logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No filesystem, subprocess or network I/O.
* No imports from ``cli`` or ``infra``.
"""

from ci_cli.core.agent_loader import AgentLoadService, PreparedAgent
from ci_cli.core.idea_service import IdeaService
from ci_cli.core.models import (
    AgentEntry,
    AgentMetadata,
    AgentSession,
    AutoAcceptConfig,
    FileEntry,
    FileKind,
    Idea,
    IdeaPriority,
    IdeaStatus,
    ProjectConfig,
)
from ci_cli.core.protocols import AgentRepository, IdeaRepository

__all__: list[str] = [
    "AgentEntry",
    "AgentLoadService",
    "AgentMetadata",
    "AgentRepository",
    "AgentSession",
    "AutoAcceptConfig",
    "FileEntry",
    "FileKind",
    "Idea",
    "IdeaPriority",
    "IdeaRepository",
    "IdeaService",
    "IdeaStatus",
    "PreparedAgent",
    "ProjectConfig",
]
