"""Core agent-load service: turns an agent name into a working memory.

The service resolves the agent's memory text, maintains its metadata and
session records and assembles the working memory handed to Claude Code.
All storage goes through an injected
:class:`~ci_cli.core.protocols.AgentRepository`.

Guarantees
----------
* Pure orchestration: no ``print()``, no subprocesses.
* Only :class:`~ci_cli.exceptions.CIError` subclasses escape.
"""

from __future__ import annotations

from dataclasses import dataclass

from ci_cli.core.agent_markdown import agent_exists, extract_agent_memory, list_available_agents
from ci_cli.core.agent_session import (
    agent_environment,
    assemble_working_memory,
    build_agent_context,
    close_session,
    new_agent_metadata,
    new_session,
    record_usage,
)
from ci_cli.core.models import AgentMetadata, AgentSession
from ci_cli.core.protocols import AgentRepository
from ci_cli.exceptions import AgentNotFoundError, NotFoundError
from ci_cli.utils.timestamps import unix_timestamp


@dataclass(frozen=True, slots=True)
class PreparedAgent:
    """Everything needed to launch a loaded agent."""

    name: str
    toolkit_path: str
    memory_path: str
    working_path: str
    content: str
    """Full working memory text (also written to ``working_path``)."""

    environment: dict[str, str]
    """Variables to export for the launched process."""

    metadata: AgentMetadata
    session: AgentSession
    timestamp: int
    """Session id; names both the session file and the working file."""


class AgentLoadService:
    """Prepare agents for a Claude Code session.

    Parameters
    ----------
    repository:
        Any object satisfying the :class:`AgentRepository` protocol.
    """

    def __init__(self, repository: AgentRepository) -> None:
        self._repository: AgentRepository = repository

    # ------------------------------------------------------------------
    # Memory resolution
    # ------------------------------------------------------------------

    def resolve_memory(
        self,
        agent_name: str,
        toolkit_path: str,
        memory_target: str | None = None,
    ) -> tuple[str, str]:
        """Return ``(memory_path, memory_text)`` for *agent_name*.

        Lookup order: the agent's own ``<name>.md`` / ``<name>_memory.md``,
        then its section of ``AGENTS.md`` (written out as a memory file).

        Raises
        ------
        AgentNotFoundError
            When ``AGENTS.md`` exists but has no such agent.
        NotFoundError
            When no source of agent definitions exists at all.
        """
        source = self._repository.read_agent_source(agent_name)
        if source is not None:
            return source

        index = self._repository.read_agents_index()
        if index is None:
            raise NotFoundError(
                "Agent source files not found",
                hint="Expected AGENTS/<name>/<name>.md or AGENTS.md in the CI repository.",
            )
        if not agent_exists(index, agent_name):
            available = list_available_agents(index)
            raise AgentNotFoundError(
                f"Agent '{agent_name}' not found in AGENTS.md",
                hint="Available agents: " + (", ".join(available) if available else "none"),
            )
        memory = extract_agent_memory(index, agent_name, toolkit_path)
        path = self._repository.write_memory(agent_name, memory, memory_target)
        return path, memory

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def prepare(
        self,
        agent_name: str,
        *,
        context: str | None = None,
        memory_target: str | None = None,
        working_directory: str = ".",
    ) -> PreparedAgent:
        """Resolve, record and assemble the working memory for *agent_name*.

        Nothing is written until the memory source has been resolved, so
        an unknown agent leaves no toolkit directory behind.
        """
        repository = self._repository
        toolkit_path = repository.toolkit_path(agent_name)
        memory_path, memory = self.resolve_memory(agent_name, toolkit_path, memory_target)

        metadata = repository.load_metadata(agent_name)
        if metadata is None:
            metadata = new_agent_metadata(agent_name, memory, toolkit_path, memory_path)
        metadata = record_usage(metadata)
        repository.save_metadata(agent_name, metadata)

        timestamp = unix_timestamp()
        session = new_session(agent_name, context)
        repository.save_session(agent_name, session, timestamp)

        content = assemble_working_memory(
            memory,
            repository.read_learning(agent_name),
            build_agent_context(metadata, context, working_directory),
        )
        working_path = repository.write_working_memory(agent_name, content, timestamp)

        return PreparedAgent(
            name=agent_name,
            toolkit_path=toolkit_path,
            memory_path=memory_path,
            working_path=working_path,
            content=content,
            environment=agent_environment(agent_name, toolkit_path, context),
            metadata=metadata,
            session=session,
            timestamp=timestamp,
        )

    def finish(self, prepared: PreparedAgent) -> AgentSession:
        """Stamp ``end_time`` on the prepared agent's session record."""
        closed = close_session(prepared.session, prepared.working_path)
        self._repository.save_session(prepared.name, closed, prepared.timestamp)
        return closed
