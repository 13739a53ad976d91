"""Infrastructure: subprocess execution.

Every external program ci drives (``git``, ``gh``, ``npm``, ``vercel``,
``claude``, browser openers) is started through this module so that
missing executables and OS errors surface as typed
:class:`~ci_cli.exceptions.CIError` subclasses.

Rules
-----
* No ``print()``; child output is either captured or inherited.
* Executables are resolved with :func:`shutil.which` first.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from ci_cli.exceptions import CommandFailedError, ToolNotFoundError
from ci_cli.infra.tool_detector import require_tool

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProcessResult:
    """Outcome of a finished child process."""

    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _resolve(args: Sequence[str]) -> list[str]:
    if not args:
        raise ValueError("empty command")
    executable = shutil.which(args[0])
    if executable is None:
        # raises ToolNotFoundError with install hints
        require_tool(args[0])
    return [executable or args[0], *args[1:]]


def _merged_env(env: Mapping[str, str] | None) -> dict[str, str] | None:
    if env is None:
        return None
    merged = dict(os.environ)
    merged.update(env)
    return merged


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | str | None = None,
    capture: bool = True,
    env: Mapping[str, str] | None = None,
    stdin_path: Path | str | None = None,
) -> ProcessResult:
    """Run *args* to completion.

    Parameters
    ----------
    args:
        Program and arguments; the program is looked up on PATH.
    cwd:
        Working directory for the child.
    capture:
        Capture stdout/stderr as text.  When ``False`` the child shares
        the terminal and the result carries empty output.
    env:
        Extra environment variables layered over the current ones.
    stdin_path:
        File fed to the child's standard input.

    Raises
    ------
    ToolNotFoundError
        When the program is not on PATH.
    CommandFailedError
        When the program cannot be started.
    """
    resolved = _resolve(args)
    logger.debug("Running %s (cwd=%s)", " ".join(resolved), cwd or ".")
    try:
        if stdin_path is not None:
            with open(stdin_path, encoding="utf-8") as stdin:
                completed = subprocess.run(
                    resolved,
                    cwd=cwd,
                    env=_merged_env(env),
                    stdin=stdin,
                    capture_output=capture,
                    text=True,
                    check=False,
                )
        else:
            completed = subprocess.run(
                resolved,
                cwd=cwd,
                env=_merged_env(env),
                capture_output=capture,
                text=True,
                check=False,
            )
    except FileNotFoundError as exc:
        raise ToolNotFoundError(f"{args[0]} is not installed or not on PATH.") from exc
    except OSError as exc:
        raise CommandFailedError(f"Failed to run {args[0]}: {exc}") from exc

    logger.debug("%s exited with %s", args[0], completed.returncode)
    return ProcessResult(
        args=tuple(args),
        returncode=completed.returncode,
        stdout=(completed.stdout or "") if capture else "",
        stderr=(completed.stderr or "") if capture else "",
    )


def run_checked(
    args: Sequence[str],
    *,
    cwd: Path | str | None = None,
    capture: bool = True,
    env: Mapping[str, str] | None = None,
    error: str | None = None,
    hint: str | None = None,
) -> ProcessResult:
    """Like :func:`run_command` but raise on a non-zero exit status.

    The raised :class:`CommandFailedError` carries *error* (or a default
    message) followed by the child's stderr when it was captured.
    """
    result = run_command(args, cwd=cwd, capture=capture, env=env)
    if not result.ok:
        message = error or f"Command failed: {' '.join(args)}"
        detail = result.stderr.strip()
        if detail:
            message = f"{message}\n{detail}"
        raise CommandFailedError(message, hint=hint, returncode=result.returncode)
    return result


def spawn_detached(
    args: Sequence[str],
    *,
    cwd: Path | str | None = None,
    env: Mapping[str, str] | None = None,
) -> subprocess.Popen[bytes]:
    """Start *args* without waiting for it.

    The child inherits the terminal; the caller never joins it.

    Raises
    ------
    CommandFailedError
        When the process cannot be started.
    """
    logger.debug("Spawning %s", " ".join(args))
    try:
        return subprocess.Popen(list(args), cwd=cwd, env=_merged_env(env))
    except OSError as exc:
        raise CommandFailedError(f"Failed to start {args[0]}: {exc}") from exc
