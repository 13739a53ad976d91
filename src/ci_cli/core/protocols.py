"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core services depend ONLY on these protocols, never on concrete
implementations, so they can be exercised with in-memory fakes.
"""

from __future__ import annotations

from typing import Protocol

from ci_cli.core.models import AgentMetadata, AgentSession, Idea


class AgentRepository(Protocol):
    """Storage for agent memory files, metadata and sessions.

    Implementations must map filesystem errors to
    :class:`~ci_cli.exceptions.CIError` subclasses.
    """

    def read_agent_source(self, agent_name: str) -> tuple[str, str] | None:
        """Return ``(path, text)`` of the agent's own memory file, if any.

        ``<name>.md`` is preferred over ``<name>_memory.md``.
        """
        ...  # pragma: no cover

    def read_agents_index(self) -> str | None:
        """Return the text of ``AGENTS.md``, or ``None`` when absent."""
        ...  # pragma: no cover

    def toolkit_path(self, agent_name: str) -> str:
        """Return the agent's toolkit directory without creating it.

        The directory comes into existence with the first file written
        into it.
        """
        ...  # pragma: no cover

    def write_memory(self, agent_name: str, content: str, target: str | None = None) -> str:
        """Persist extracted memory (to *target* when given) and return its path."""
        ...  # pragma: no cover

    def load_metadata(self, agent_name: str) -> AgentMetadata | None:
        """Return stored metadata, or ``None`` when missing or unreadable."""
        ...  # pragma: no cover

    def save_metadata(self, agent_name: str, metadata: AgentMetadata) -> None:
        ...  # pragma: no cover

    def read_learning(self, agent_name: str) -> str | None:
        """Return ``ContinuousLearning.md`` text, or ``None``."""
        ...  # pragma: no cover

    def save_session(self, agent_name: str, session: AgentSession, timestamp: int) -> str:
        """Write ``sessions/<timestamp>.json`` and return its path."""
        ...  # pragma: no cover

    def write_working_memory(self, agent_name: str, content: str, timestamp: int) -> str:
        """Write ``working_<timestamp>.md`` and return its path."""
        ...  # pragma: no cover


class IdeaRepository(Protocol):
    """Persistence for the idea list."""

    def load(self) -> list[Idea]:
        """Return all ideas; a missing or empty file yields ``[]``."""
        ...  # pragma: no cover

    def save(self, ideas: list[Idea]) -> None:
        ...  # pragma: no cover
