"""Agent load bookkeeping: metadata, sessions and the working memory.

Everything here is a pure transform; the files themselves are read and
written by :class:`ci_cli.infra.agent_workspace.AgentWorkspace`.
"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Any

from ci_cli.core.agent_markdown import description_from_memory
from ci_cli.core.models import AgentMetadata, AgentSession
from ci_cli.exceptions import ValidationError
from ci_cli.utils.timestamps import now_local, now_utc

LEARNING_FILENAME: str = "ContinuousLearning.md"

_SPEC_RE = re.compile(r"^\s*(?P<name>[^*\s]+)\s*(?:\*\s*(?P<count>\d+))?\s*$")


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------

def new_agent_metadata(
    agent_name: str,
    memory: str,
    toolkit_path: str,
    memory_path: str,
) -> AgentMetadata:
    """Metadata for an agent loaded for the first time."""
    now = now_local()
    return AgentMetadata(
        name=agent_name,
        description=description_from_memory(memory, agent_name),
        created_at=now,
        last_used=now,
        toolkit_path=toolkit_path,
        memory_path=memory_path,
        learning_path=f"{toolkit_path.rstrip('/')}/{LEARNING_FILENAME}",
    )


def record_usage(metadata: AgentMetadata) -> AgentMetadata:
    """Bump ``usage_count`` and stamp ``last_used``."""
    return replace(metadata, last_used=now_local(), usage_count=metadata.usage_count + 1)


def metadata_to_dict(metadata: AgentMetadata) -> dict[str, Any]:
    return {
        "name": metadata.name,
        "description": metadata.description,
        "capabilities": list(metadata.capabilities),
        "created_at": metadata.created_at,
        "last_used": metadata.last_used,
        "usage_count": metadata.usage_count,
        "version": metadata.version,
        "toolkit_path": metadata.toolkit_path,
        "memory_path": metadata.memory_path,
        "learning_path": metadata.learning_path,
        "attributes": dict(metadata.attributes),
    }


def metadata_from_dict(data: dict[str, Any]) -> AgentMetadata:
    """Rebuild metadata from ``metadata.json``.

    Raises
    ------
    ValidationError
        When a required field is missing; callers then start afresh.
    """
    try:
        return AgentMetadata(
            name=str(data["name"]),
            description=str(data["description"]),
            created_at=str(data["created_at"]),
            last_used=str(data.get("last_used") or data["created_at"]),
            toolkit_path=str(data["toolkit_path"]),
            memory_path=str(data["memory_path"]),
            learning_path=str(data["learning_path"]),
            capabilities=tuple(str(c) for c in data.get("capabilities", [])),
            usage_count=int(data.get("usage_count", 0)),
            version=str(data.get("version", "1.0")),
            attributes={str(k): str(v) for k, v in (data.get("attributes") or {}).items()},
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise ValidationError(f"Invalid agent metadata: {exc}") from exc


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

def new_session(agent_name: str, context: str | None) -> AgentSession:
    return AgentSession(agent_name=agent_name, start_time=now_local(), context=context)


def close_session(session: AgentSession, output_path: str | None = None) -> AgentSession:
    return replace(session, end_time=now_local(), output_path=output_path or session.output_path)


def session_to_dict(session: AgentSession) -> dict[str, Any]:
    return {
        "agent_name": session.agent_name,
        "start_time": session.start_time,
        "context": session.context,
        "end_time": session.end_time,
        "output_path": session.output_path,
    }


# ---------------------------------------------------------------------------
# Working memory
# ---------------------------------------------------------------------------

def build_agent_context(
    metadata: AgentMetadata,
    context_type: str | None,
    working_directory: str,
) -> str:
    """The ``# Agent Context Information`` block appended to the memory."""
    parts = [
        "# Agent Context Information\n\n",
        f"## Agent: {metadata.name}\n\n",
        f"Role: {metadata.description}\n\n",
    ]
    if metadata.capabilities:
        parts.append("### Capabilities\n\n")
        parts.extend(f"- {capability}\n" for capability in metadata.capabilities)
        parts.append("\n")

    parts.append("### Session Information\n\n")
    parts.append(f"- Started: {now_utc()}\n")
    if context_type:
        parts.append(f"- Context: {context_type}\n")
    parts.append(f"- Previous sessions: {metadata.usage_count}\n")
    if metadata.last_used:
        parts.append(f"- Last used: {metadata.last_used}\n")
    parts.append("\n")

    parts.append("### Environment\n\n")
    parts.append(f"- Toolkit path: {metadata.toolkit_path}\n")
    parts.append(f"- Working directory: {working_directory}\n")

    parts.append("\n### Usage Instructions\n\n")
    parts.append("This agent has its own toolkit directory and capabilities.\n")
    parts.append("When working with this agent, refer to its specific role and capabilities.\n")
    parts.append("The agent will prioritize its own resources before checking parent repositories.\n")
    return "".join(parts)


def assemble_working_memory(
    memory: str,
    learning: str | None,
    context_block: str,
) -> str:
    """Memory, then optional continuous-learning notes, then the context block."""
    text = memory
    if learning:
        text += "\n\n# Continuous Learning\n\n" + learning
    return text + "\n\n" + context_block


def agent_environment(
    agent_name: str,
    toolkit_path: str,
    context_type: str | None,
) -> dict[str, str]:
    """Variables exported for the launched ``claude`` process."""
    env = {
        "CI_AGENT_CONTEXT": "true",
        "CI_AGENT_TOOLKIT_PATH": toolkit_path,
        "CI_AGENT_NAME": agent_name,
    }
    if context_type:
        env["CI_AGENT_CONTEXT_TYPE"] = context_type
    return env


# ---------------------------------------------------------------------------
# Parallel loads
# ---------------------------------------------------------------------------

def expand_agent_specs(specs: list[str]) -> list[str]:
    """Expand ``["Documentor*3", "Analyst"]`` into one name per instance.

    Raises
    ------
    ValidationError
        For an empty spec, a malformed ``*`` suffix or a zero count.
    """
    names: list[str] = []
    for spec in specs:
        match = _SPEC_RE.match(spec)
        if match is None:
            raise ValidationError(
                f"Invalid agent specification: {spec!r}",
                hint="Use an agent name, optionally followed by *N (e.g. Documentor*3).",
            )
        count = int(match.group("count") or 1)
        if count < 1:
            raise ValidationError(f"Instance count must be at least 1: {spec!r}")
        names.extend([match.group("name")] * count)
    return names
