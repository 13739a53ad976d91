"""Interactive prompts for the CLI layer.

Confirmation and free-text questions are asked through questionary.  A
cancelled prompt (Esc / Ctrl+C inside questionary, which returns
``None``) is reported as a :class:`ValidationError`.
"""

from __future__ import annotations

from typing import Any

from ci_cli.exceptions import EnvironmentError, ValidationError


def _import_questionary() -> Any:
    """Import questionary lazily for interactive prompts."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


def _cancelled(what: str) -> ValidationError:
    return ValidationError(f"No {what} given.", hint="Re-run the command and answer the prompt.")


def confirm(message: str, default: bool = False) -> bool:
    """Ask a yes/no question."""
    questionary = _import_questionary()
    answer: bool | None = questionary.confirm(message, default=default).ask()
    if answer is None:
        raise _cancelled("answer")
    return answer


def ask_text(message: str, default: str = "") -> str:
    questionary = _import_questionary()
    answer: str | None = questionary.text(message, default=default).ask()
    if answer is None:
        raise _cancelled("input")
    return answer
