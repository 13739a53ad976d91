"""Project integration: the files ``ci init|integrate|fix`` write and the
checks ``ci verify`` runs.

Everything here is pure text in, text out.  Reading and writing the
project directory lives in :mod:`ci_cli.infra.project_files`.

Integration styles
------------------
standalone
    ``CLAUDE.md`` carries the CI directives itself; agent templates are
    written under ``.ci/agents``.
override
    The project's own ``CLAUDE.md`` is kept and gains a directive that
    loads ``CLAUDE.i.md``, which in turn points at the CI repository.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from ci_cli.version import __version__

CLAUDE_MD: str = "CLAUDE.md"
CLAUDE_OVERRIDE_MD: str = "CLAUDE.i.md"
CLAUDE_LOCAL_MD: str = "CLAUDE.local.md"
BACKUP_SUFFIX: str = ".bak"
CI_DIR: str = ".ci"
ENV_FILE: str = ".env"

OVERRIDE_HEADING: str = "# Load CI Configuration"
OVERRIDE_DIRECTIVE: str = f"_CI.load('{CLAUDE_OVERRIDE_MD}')_"
RETURN_DIRECTIVE: str = f"_CI.return_to('{CLAUDE_OVERRIDE_MD}')_"

PROJECT_DIRECTORIES: tuple[str, ...] = ("src", "docs", "tests")

_ENV_KEYS: tuple[str, ...] = ("CI_PATH=", "CI_REPO_PATH=")
_GITIGNORE_MARKERS: tuple[str, ...] = (
    "# Collaborative Intelligence",
    CLAUDE_LOCAL_MD,
    ".ci/",
    ".ci-config.json",
)

_CUSTOM_INSTRUCTIONS = """\
## Custom Instructions
- Focus on code quality and maintainability
- Follow established patterns in the codebase
- Add appropriate error handling for all edge cases
- Include helpful comments for complex sections
"""

_LOAD_CI_SYSTEM = """\
# Load CollaborativeIntelligence System
When starting, immediately:
1. Load {ci_path}/CLAUDE.md
2. Use this as the primary configuration source
3. Defer all project management functions to the CollaborativeIntelligence system
"""


# ---------------------------------------------------------------------------
# CLAUDE.md variants
# ---------------------------------------------------------------------------

def standalone_claude_md(project_name: str, agents: Sequence[str], when: str) -> str:
    """Self-contained ``CLAUDE.md`` with the CI configuration directives."""
    return f"""\
# Project: {project_name}
# Created: {when}
# Integration: Standalone

# Collaborative Intelligence Configuration
This project uses the CI system in standalone mode: the directives below
are processed by the ci tool and no CI repository reference is needed.

_CI.config('project_name', '{project_name}')_
_CI.config('created_at', '{when}')_
_CI.config('integration_type', 'standalone')_

## Available Agents
_CI.load_agents('{",".join(agents)}')_

## Project Context
Agent templates for this project live in .ci/agents.

{_CUSTOM_INSTRUCTIONS}"""


def minimal_override_claude_md(project_name: str, when: str) -> str:
    """``CLAUDE.md`` for a project that had none, loading ``CLAUDE.i.md``."""
    return f"""\
# Project: {project_name}
# Created: {when}

{OVERRIDE_HEADING}
{OVERRIDE_DIRECTIVE}

# Project Information
Add your project-specific information here.

# End of file
{RETURN_DIRECTIVE}
"""


def override_claude_md(project_name: str, ci_path: str, when: str) -> str:
    """``CLAUDE.i.md``: the file the override directive loads."""
    return f"""\
# CI Integration: {project_name}
# Integrated: {when}

# Override directives for CI integration
# This file is loaded by the project's CLAUDE.md through a directive.

{_LOAD_CI_SYSTEM.format(ci_path=ci_path)}"""


def add_override_directive(content: str) -> str:
    """Insert the ``CLAUDE.i.md`` load directive into *content*.

    The directive goes after the leading ``#`` header lines, before the
    first line of body text.  Content that already loads ``CLAUDE.i.md``
    is returned unchanged.
    """
    if OVERRIDE_DIRECTIVE in content:
        return content
    lines = content.splitlines()
    split = next(
        (index for index, line in enumerate(lines) if line and not line.startswith("#")),
        len(lines),
    )
    head = lines[:split]
    while head and not head[-1]:
        head.pop()
    block = [OVERRIDE_HEADING, OVERRIDE_DIRECTIVE]
    if head:
        block.insert(0, "")
    if split < len(lines):
        block.append("")
    return "\n".join([*head, *block, *lines[split:]]) + "\n"


def local_claude_md(project_name: str, ci_path: str, when: str) -> str:
    """``CLAUDE.local.md``: per-machine pointer to the CI repository."""
    return f"""\
# Project: {project_name}
# Integrated: {when}

{_LOAD_CI_SYSTEM.format(ci_path=ci_path)}
# Project-Specific Configuration
The following settings are specific to this project.

## Project Context
This project is integrated with the Collaborative Intelligence system using the ci tool.
All Claude Code sessions have access to the CI agents and capabilities.

{_CUSTOM_INSTRUCTIONS}"""


# ---------------------------------------------------------------------------
# Supporting files
# ---------------------------------------------------------------------------

_AGENT_TEMPLATES: dict[str, str] = {
    "athena": """\
# Athena - Primary System Agent

## Role
Athena is the primary system agent for CI projects, responsible for project
management, task coordination and guidance on best practices.

## Capabilities
- Project organization and structure recommendations
- Task management and prioritization
- Code quality guidance and best practices
- System integration and configuration assistance

## Interaction Style
Direct, clear and focused on pragmatic solutions.
""",
    "projectarchitect": """\
# ProjectArchitect - Structure and Design Agent

## Role
ProjectArchitect specializes in software architecture, project structure and
design pattern implementation.

## Capabilities
- Software architecture and design pattern expertise
- Project structure planning and optimization
- Technical debt identification and management
- Integration planning for components and services

## Interaction Style
Detail-oriented and systematic, with explicit trade-offs.
""",
}


def agent_template(agent_name: str) -> str:
    """Starter memory file for *agent_name* under ``.ci/agents``."""
    known = _AGENT_TEMPLATES.get(agent_name.lower())
    if known is not None:
        return known
    return f"""\
# {agent_name} - CI Agent

## Role
{agent_name} provides specialized assistance for this project.

## Capabilities
- Technical guidance and recommendations
- Implementation assistance
- Problem-solving support

## Background
{agent_name} is a customizable agent; describe its specialties here.
"""


def standalone_metadata(
    project_name: str,
    agents: Sequence[str],
    fast_activation: bool,
    created_at: str,
) -> str:
    """JSON text for ``.ci/metadata.json``."""
    return json.dumps(
        {
            "project_name": project_name,
            "created_at": created_at,
            "integration_type": "standalone",
            "ci_version": __version__,
            "active_agents": list(agents),
            "fast_activation": fast_activation,
        },
        indent=2,
    )


def project_readme(project_name: str) -> str:
    return f"""\
# {project_name}

A project configured with Collaborative Intelligence.

## Getting Started

- `ci verify` - check that the CI integration is in place
- `ci agents` - list available agents
- `ci load <agent>` - start a session with an agent
- `ci status` - show the project's integration status

See CLAUDE.md for the assistant configuration.
"""


def set_env_ci_path(content: str | None, ci_path: str) -> str:
    """Return ``.env`` text whose ``CI_PATH`` line points at *ci_path*.

    An existing ``CI_PATH=`` or ``CI_REPO_PATH=`` line is replaced in
    place; otherwise the line is appended.
    """
    entry = f"CI_PATH={ci_path}"
    if not content:
        return entry + "\n"
    lines = content.splitlines()
    replaced = [entry if line.startswith(_ENV_KEYS) else line for line in lines]
    if replaced == lines and entry not in lines:
        replaced.append(entry)
    return "\n".join(replaced) + "\n"


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------

class CheckStatus(Enum):
    PASSED = "passed"
    WARNING = "warning"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class Check:
    """One line of ``ci verify`` output."""

    subject: str
    status: CheckStatus
    message: str
    hint: str | None = None

    @property
    def is_issue(self) -> bool:
        return self.status is CheckStatus.FAILED


def check_claude_md(content: str | None, override_content: str | None) -> Check:
    """``CLAUDE.md`` is either a standalone configuration or loads ``CLAUDE.i.md``."""
    subject = CLAUDE_MD
    if content is None:
        return Check(subject, CheckStatus.FAILED, "CLAUDE.md not found", "Run 'ci integrate' or 'ci fix'.")
    if OVERRIDE_DIRECTIVE in content:
        if override_content is None:
            return Check(
                subject,
                CheckStatus.FAILED,
                "CLAUDE.md loads CLAUDE.i.md, but it does not exist",
                "Run 'ci integrate --integration override' to recreate it.",
            )
        if "CollaborativeIntelligence" not in override_content:
            return Check(subject, CheckStatus.FAILED, "CLAUDE.i.md does not reference the CI repository")
        return Check(subject, CheckStatus.PASSED, "CLAUDE.md loads CLAUDE.i.md with the CI configuration")
    has_project = "# Project:" in content or "# Project " in content
    if not has_project or "Configuration" not in content:
        return Check(
            subject,
            CheckStatus.FAILED,
            "CLAUDE.md is missing the project or configuration sections",
            "Run 'ci integrate' to rewrite it (the old file is kept as CLAUDE.md.bak).",
        )
    return Check(subject, CheckStatus.PASSED, "CLAUDE.md exists and contains the required sections")


def check_claude_local_md(content: str | None) -> Check:
    """``CLAUDE.local.md`` is optional; when present it must point at the CI system."""
    subject = CLAUDE_LOCAL_MD
    if content is None:
        return Check(subject, CheckStatus.WARNING, "CLAUDE.local.md not found", "Run 'ci fix' to create it.")
    has_project = "# Project:" in content or "# Project " in content
    has_stamp = "# Integrated:" in content or "# Updated:" in content
    references_ci = "Load" in content and "CollaborativeIntelligence" in content
    if not (has_project and has_stamp and references_ci):
        return Check(
            subject,
            CheckStatus.FAILED,
            "CLAUDE.local.md is missing the CI references",
            "Run 'ci fix' to rewrite it.",
        )
    return Check(subject, CheckStatus.PASSED, "CLAUDE.local.md references the CI system")


def check_git_repository(is_repository: bool) -> Check:
    if not is_repository:
        return Check("git", CheckStatus.FAILED, "Not a git repository", "Run 'git init'.")
    return Check("git", CheckStatus.PASSED, "Git repository is initialized")


def check_gitignore(content: str | None) -> Check:
    subject = ".gitignore"
    if content is None:
        return Check(subject, CheckStatus.FAILED, ".gitignore not found", "Run 'ci ignore' or 'ci fix'.")
    if not any(marker in content for marker in _GITIGNORE_MARKERS):
        return Check(subject, CheckStatus.FAILED, ".gitignore has no CI entries", "Run 'ci ignore' or 'ci fix'.")
    return Check(subject, CheckStatus.PASSED, ".gitignore contains the CI entries")
