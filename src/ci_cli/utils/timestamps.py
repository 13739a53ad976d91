"""RFC 3339 timestamp helpers shared by the JSON record types."""

from __future__ import annotations

import time
from datetime import datetime, timezone

DISPLAY_FORMAT: str = "%Y-%m-%d %H:%M:%S"
"""Local-time rendering used by human-readable listings."""


def now_local() -> str:
    """Return the current local time as an RFC 3339 string with offset."""
    return datetime.now().astimezone().isoformat()


def now_utc() -> str:
    """Return the current UTC time as an RFC 3339 string ending in ``Z``."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def unix_timestamp() -> int:
    """Whole seconds since the epoch, used to name session files."""
    return int(time.time())


def parse_timestamp(value: str) -> datetime | None:
    """Parse an RFC 3339 string, tolerating a trailing ``Z``.

    Returns ``None`` for empty or malformed input instead of raising, so
    display code can fall back to the raw string.
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # fromisoformat rejects more than six fractional digits before 3.11
    if "." in text:
        head, _, tail = text.partition(".")
        digits = ""
        rest = ""
        for index, char in enumerate(tail):
            if not char.isdigit():
                rest = tail[index:]
                break
            digits += char
        text = f"{head}.{digits[:6].ljust(6, '0')}{rest}"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def format_local(value: str) -> str:
    """Render an RFC 3339 string in local time, or echo it when unparsable."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return value
    return parsed.astimezone().strftime(DISPLAY_FORMAT)
