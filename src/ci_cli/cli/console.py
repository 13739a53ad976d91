"""CLI console helpers with optional Rich support.

This module intentionally avoids module-level imports of optional UI
dependencies so bootstrap paths (``--help``, ``--version``) remain
functional even when Rich is not installed.

Two proxies are exported: ``console`` writes decorative output
(headers, status lines, errors) to stderr; ``out`` writes command
results (config values, agent memory, listings) to stdout so they can
be piped.
"""

from __future__ import annotations

import shutil
import sys
from typing import Any

from ci_cli.exceptions import EnvironmentError


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise EnvironmentError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console(stderr: bool = True) -> Any:
	"""Create a Rich console instance targeting stderr (or stdout)."""
	console_class = _load_rich_console_class()
	return console_class(stderr=stderr)


def escape(text: str) -> str:
	"""Escape Rich markup in user-supplied *text*."""
	try:
		from rich.markup import escape as rich_escape
	except ModuleNotFoundError:
		return text
	return rich_escape(text)


def console_width(default: int = 80) -> int:
	"""Terminal width as Rich sees it, else as the OS reports it."""
	try:
		return int(get_rich_console(stderr=False).width)
	except EnvironmentError:
		return shutil.get_terminal_size((default, 24)).columns


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with Rich fallback."""

	def __init__(self, stderr: bool = True, **defaults: Any) -> None:
		self._stderr = stderr
		self._defaults = defaults

	def print(self, *objects: object, **kwargs: Any) -> None:
		"""Render with Rich when available, else plain print."""
		try:
			rich_console = get_rich_console(stderr=self._stderr)
		except EnvironmentError:
			stream = sys.stderr if self._stderr else sys.stdout
			print(*objects, file=stream)
			return
		rich_console.print(*objects, **{**self._defaults, **kwargs})


console = _ConsoleProxy()
out = _ConsoleProxy(stderr=False, markup=False, highlight=False, soft_wrap=True)
