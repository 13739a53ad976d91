"""Small string helpers for comma-separated option values."""

from __future__ import annotations


def split_csv(value: str | None) -> list[str]:
    """Split ``"a, b,,c"`` into ``["a", "b", "c"]``.

    Items are trimmed and empty items dropped; ``None`` yields ``[]``.
    """
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def truncate(value: str, limit: int, suffix: str = "...") -> str:
    """Cut *value* to *limit* characters followed by *suffix* when longer."""
    if len(value) <= limit:
        return value
    return value[:limit] + suffix
