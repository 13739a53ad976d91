"""Infrastructure layer: external system integration.

This layer wraps all interaction with the filesystem, environment
variables and external programs (``git``, ``gh``, ``npm``, ``vercel``,
``claude``).  Every raw ``OSError``, JSON or subprocess failure must be
caught here and re-raised as a :class:`~ci_cli.exceptions.CIError`
subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core and cli layers.
"""

from ci_cli.infra.agent_workspace import AgentWorkspace
from ci_cli.infra.brain_registry import BrainRegistry
from ci_cli.infra.idea_store import JsonIdeaRepository
from ci_cli.infra.settings import Settings, load_settings
from ci_cli.infra.tool_detector import ToolStatus, detect_tool, require_tool

__all__: list[str] = [
    "AgentWorkspace",
    "BrainRegistry",
    "JsonIdeaRepository",
    "Settings",
    "ToolStatus",
    "detect_tool",
    "load_settings",
    "require_tool",
]
