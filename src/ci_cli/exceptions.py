"""Custom exception hierarchy for ci.

All exceptions that cross layer boundaries must inherit from
:class:`CIError`.  Raw ``OSError``, ``json`` and ``subprocess`` failures
must NEVER propagate beyond the infrastructure layer; they must be
caught and re-raised as a typed subclass defined here.

Hierarchy
---------
CIError
├── ConfigurationError
├── ValidationError
├── NotFoundError
│   └── AgentNotFoundError
├── BrainError
├── ToolNotFoundError
├── CommandFailedError
├── UnknownCommandError
└── EnvironmentError
"""

from __future__ import annotations


class CIError(Exception):
    """Base exception for all ci errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Configuration ---------------------------------------------------------

class ConfigurationError(CIError):
    """Raised when the CI repository or a project config cannot be used."""


class ValidationError(CIError):
    """Raised when user input fails validation (enum strings, booleans, ...)."""


# --- Lookups ---------------------------------------------------------------

class NotFoundError(CIError):
    """Raised when a file, directory or record does not exist."""


class AgentNotFoundError(NotFoundError):
    """Raised when an agent name has no memory file or AGENTS.md entry."""


class BrainError(CIError):
    """Raised when the BRAIN is unregistered or fails a health check."""


# --- External processes ----------------------------------------------------

class ToolNotFoundError(CIError):
    """Raised when an external executable cannot be located on PATH."""


class CommandFailedError(CIError):
    """Raised when an external command terminates with a non-zero status."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        returncode: int | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.returncode: int | None = returncode
        """Exit status of the failed process, when one was produced."""


class UnknownCommandError(CIError):
    """Raised for unknown subcommands and unmapped legacy command names."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(CIError):
    """Raised when a required runtime dependency is not available."""
