"""Heuristic scanning of agent markdown.

Agents are declared in ``AGENTS.md`` by level-three headings of the form
``### Name - short description``.  A section runs until the next ``### ``
or ``## `` heading.  Scanning is line-prefix matching only; malformed
input never raises, it simply yields fewer agents.
"""

from __future__ import annotations

from ci_cli.core.models import AgentEntry

AGENT_HEADING_PREFIX: str = "### "
SECTION_HEADING_PREFIX: str = "## "

TOOLKIT_PLACEHOLDER: str = "[Will be set when the agent is loaded]"

_USAGE_FOOTER_HEAD: str = (
    "\n\n## Agent Usage Instructions\n\n"
    "This agent has been loaded into the current Claude Code session.\n"
    "You can interact with it as usual, and the agent will have access to "
    "its own memory and capabilities.\n\n"
    "The agent has its own toolkit directory at:\n"
)

_USAGE_FOOTER_TAIL: str = (
    "**IMPORTANT:** The agent will prioritize resources in its own toolkit "
    "before checking the parent repository.\n"
    "This allows the agent to operate with its own specialized tools and knowledge.\n"
)


# ---------------------------------------------------------------------------
# Headings
# ---------------------------------------------------------------------------

def parse_agent_heading(line: str) -> AgentEntry | None:
    """Return the agent declared by *line*, or ``None`` for other lines."""
    if not line.startswith(AGENT_HEADING_PREFIX):
        return None
    heading = line[len(AGENT_HEADING_PREFIX):].strip()
    parts = heading.split(" - ")
    name = parts[0].strip()
    description = parts[1].strip() if len(parts) > 1 else ""
    return AgentEntry(name=name, description=description, heading=heading)


def iter_agent_entries(content: str) -> list[AgentEntry]:
    """All agents declared in *content*, in document order."""
    entries: list[AgentEntry] = []
    for line in content.splitlines():
        entry = parse_agent_heading(line)
        if entry is not None:
            entries.append(entry)
    return entries


def agent_exists(content: str, agent_name: str) -> bool:
    """Case-insensitive check for an agent heading named *agent_name*."""
    wanted = agent_name.lower()
    return any(entry.name.lower() == wanted for entry in iter_agent_entries(content))


def list_available_agents(content: str) -> list[str]:
    return sorted(entry.name for entry in iter_agent_entries(content))


# ---------------------------------------------------------------------------
# Section extraction
# ---------------------------------------------------------------------------

def _is_section_boundary(line: str) -> bool:
    return line.startswith(AGENT_HEADING_PREFIX) or line.startswith(SECTION_HEADING_PREFIX)


def section_lines(content: str, agent_name: str) -> list[str]:
    """Non-blank body lines of the first section declaring *agent_name*."""
    lines = content.splitlines()
    wanted = agent_name.lower()
    for index, line in enumerate(lines):
        entry = parse_agent_heading(line)
        if entry is None or entry.name.lower() != wanted:
            continue
        body: list[str] = []
        for candidate in lines[index + 1:]:
            if _is_section_boundary(candidate):
                break
            if candidate.strip():
                body.append(candidate)
        return body
    return []


def extract_agent_memory(
    content: str,
    agent_name: str,
    toolkit_path: str | None = None,
) -> str:
    """Build the memory document for *agent_name* from ``AGENTS.md`` text.

    The result starts with ``# Agent Memory: <name>``, re-levels the
    agent heading to ``## ``, copies the section body (inserting an
    extra blank line where an empty line precedes text) and ends with
    the usage-instructions footer naming *toolkit_path*.

    Parameters
    ----------
    content:
        Full text of ``AGENTS.md``.
    agent_name:
        Agent to extract; matched case-insensitively.
    toolkit_path:
        Path shown in the footer; a placeholder is used when ``None``.

    Returns
    -------
    str
        The memory document.  When the agent is absent only the header
        and footer are present; callers check :func:`agent_exists` first.
    """
    lines = content.splitlines()
    wanted = agent_name.lower()
    parts: list[str] = [f"# Agent Memory: {agent_name}\n\n"]
    collecting = False

    for index, line in enumerate(lines):
        entry = parse_agent_heading(line)
        if entry is not None:
            if entry.name.lower() == wanted:
                collecting = True
                parts.append(f"## {entry.heading}\n\n")
            else:
                collecting = False
            continue
        if line.startswith(SECTION_HEADING_PREFIX):
            collecting = False
            continue
        if not collecting:
            continue
        parts.append(line + "\n")
        if not line and index + 1 < len(lines) and lines[index + 1]:
            parts.append("\n")

    parts.append(_USAGE_FOOTER_HEAD)
    parts.append(f"```\n{toolkit_path or TOOLKIT_PLACEHOLDER}\n```\n\n")
    parts.append(_USAGE_FOOTER_TAIL)
    return "".join(parts)


# ---------------------------------------------------------------------------
# Descriptions
# ---------------------------------------------------------------------------

def extract_agent_description(readme: str) -> str | None:
    """First prose line after the ``# `` title of an agent README.

    Falls back to a ``**Role**:`` or ``**Expertise**:`` line (with or
    without a leading ``- ``), returning the text after the label.
    """
    lines = readme.splitlines()
    seen_title = False
    for line in lines:
        stripped = line.strip()
        if stripped.startswith("# "):
            seen_title = True
            continue
        if seen_title and stripped and not stripped.startswith("#"):
            return stripped

    for line in lines:
        stripped = line.strip()
        for label in ("- **Role**:", "**Role**:", "- **Expertise**:", "**Expertise**:"):
            if stripped.startswith(label):
                return stripped[len(label):].strip()
    return None


def summary_description(body: list[str]) -> str | None:
    """Pick the description shown by ``ci agents --summary``.

    A ``**Description**:`` / ``**Role**:`` line wins (text after the
    first colon); otherwise the first body line; ``None`` when empty.
    """
    if not body:
        return None
    for line in body:
        if "**Description**:" in line or "**Role**:" in line or (
            line.startswith("*") and "descri" in line
        ):
            if ":" in line:
                return line.split(":")[1].strip()
            return line.strip()
    return body[0]


def description_from_memory(memory: str, agent_name: str) -> str:
    """Description stored in new agent metadata.

    Uses the first line containing ``Description:`` or ``Role:`` (the
    text after its first colon), else ``"Agent <name>"``.
    """
    for line in memory.splitlines():
        if "Description:" in line or "Role:" in line:
            _, _, rest = line.partition(":")
            return rest.strip()
    return f"Agent {agent_name}"
