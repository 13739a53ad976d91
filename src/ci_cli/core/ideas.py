"""Idea tracker logic: parsing, filtering and formatting.

Storage location and file access live in :mod:`ci_cli.infra.idea_store`;
everything here operates on in-memory :class:`~ci_cli.core.models.Idea`
values.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Sequence
from dataclasses import replace
from typing import Any

from ci_cli.core.models import Idea, IdeaPriority, IdeaStatus
from ci_cli.exceptions import NotFoundError, ValidationError
from ci_cli.utils.timestamps import format_local, now_utc

DEFAULT_CATEGORY: str = "Uncategorized"

_STATUS_ALIASES: dict[str, IdeaStatus] = {
    "new": IdeaStatus.NEW,
    "exploring": IdeaStatus.EXPLORING,
    "development": IdeaStatus.IN_DEVELOPMENT,
    "indevelopment": IdeaStatus.IN_DEVELOPMENT,
    "in-development": IdeaStatus.IN_DEVELOPMENT,
    "in_development": IdeaStatus.IN_DEVELOPMENT,
    "implemented": IdeaStatus.IMPLEMENTED,
    "complete": IdeaStatus.IMPLEMENTED,
    "completed": IdeaStatus.IMPLEMENTED,
    "done": IdeaStatus.IMPLEMENTED,
    "onhold": IdeaStatus.ON_HOLD,
    "on-hold": IdeaStatus.ON_HOLD,
    "on_hold": IdeaStatus.ON_HOLD,
    "hold": IdeaStatus.ON_HOLD,
    "archived": IdeaStatus.ARCHIVED,
    "archive": IdeaStatus.ARCHIVED,
    "rejected": IdeaStatus.REJECTED,
    "reject": IdeaStatus.REJECTED,
}

_PRIORITY_ALIASES: dict[str, IdeaPriority] = {
    "low": IdeaPriority.LOW,
    "l": IdeaPriority.LOW,
    "medium": IdeaPriority.MEDIUM,
    "med": IdeaPriority.MEDIUM,
    "m": IdeaPriority.MEDIUM,
    "high": IdeaPriority.HIGH,
    "h": IdeaPriority.HIGH,
    "critical": IdeaPriority.CRITICAL,
    "crit": IdeaPriority.CRITICAL,
    "c": IdeaPriority.CRITICAL,
}


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_status(value: str) -> IdeaStatus:
    """Map a user-supplied status (or alias) to :class:`IdeaStatus`.

    Raises
    ------
    ValidationError
        When *value* is not a known status or alias.
    """
    try:
        return _STATUS_ALIASES[value.strip().lower()]
    except KeyError:
        raise ValidationError(
            f"Invalid status: {value}. Valid options: new, exploring, development, "
            "implemented, onhold, archived, rejected",
        ) from None


def parse_priority(value: str) -> IdeaPriority:
    try:
        return _PRIORITY_ALIASES[value.strip().lower()]
    except KeyError:
        raise ValidationError(
            f"Invalid priority: {value}. Valid options: low, medium, high, critical",
        ) from None


# ---------------------------------------------------------------------------
# JSON mapping
# ---------------------------------------------------------------------------

def idea_to_dict(idea: Idea) -> dict[str, Any]:
    return {
        "id": idea.id,
        "title": idea.title,
        "description": idea.description,
        "category": idea.category,
        "tags": list(idea.tags),
        "status": idea.status.value,
        "priority": idea.priority.value,
        "created_at": idea.created_at,
        "updated_at": idea.updated_at,
        "related_ideas": list(idea.related_ideas),
        "notes": idea.notes,
    }


def idea_from_dict(data: dict[str, Any]) -> Idea:
    """Build an :class:`Idea` from a stored record.

    Raises
    ------
    ValidationError
        When *data* is not an object, a required field is missing or an
        enum value is unknown.  ``null`` tag and related-idea lists read
        as empty.
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Invalid idea record: expected an object, got {type(data).__name__}")
    try:
        return Idea(
            id=str(data["id"]),
            title=str(data["title"]),
            description=str(data.get("description") or ""),
            category=str(data.get("category") or DEFAULT_CATEGORY),
            tags=tuple(str(t) for t in data.get("tags") or ()),
            status=IdeaStatus(data.get("status", IdeaStatus.NEW.value)),
            priority=IdeaPriority(data.get("priority", IdeaPriority.MEDIUM.value)),
            created_at=str(data["created_at"]),
            updated_at=str(data.get("updated_at", data["created_at"])),
            related_ideas=tuple(str(r) for r in data.get("related_ideas") or ()),
            notes=data.get("notes"),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid idea record: {exc}") from exc


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

def new_idea(
    title: str,
    description: str = "",
    category: str | None = None,
    tags: Sequence[str] = (),
) -> Idea:
    """Create an idea with a fresh UUID4, status ``New`` and priority ``Medium``."""
    now = now_utc()
    return Idea(
        id=str(uuid.uuid4()),
        title=title,
        description=description,
        category=category or DEFAULT_CATEGORY,
        tags=tuple(tags),
        status=IdeaStatus.NEW,
        priority=IdeaPriority.MEDIUM,
        created_at=now,
        updated_at=now,
    )


def update_idea(
    idea: Idea,
    *,
    title: str | None = None,
    description: str | None = None,
    category: str | None = None,
    tags: Sequence[str] | None = None,
    status: IdeaStatus | None = None,
    priority: IdeaPriority | None = None,
    notes: str | None = None,
    related_ideas: Sequence[str] | None = None,
) -> Idea:
    """Apply the non-``None`` fields and refresh ``updated_at``."""
    changes: dict[str, Any] = {"updated_at": now_utc()}
    if title is not None:
        changes["title"] = title
    if description is not None:
        changes["description"] = description
    if category is not None:
        changes["category"] = category
    if tags is not None:
        changes["tags"] = tuple(tags)
    if status is not None:
        changes["status"] = status
    if priority is not None:
        changes["priority"] = priority
    if notes is not None:
        changes["notes"] = notes
    if related_ideas is not None:
        changes["related_ideas"] = tuple(related_ideas)
    return replace(idea, **changes)


def find_idea(ideas: Iterable[Idea], idea_id: str) -> Idea:
    """Exact-match lookup by id.

    Raises
    ------
    NotFoundError
        When no idea carries *idea_id*.
    """
    for idea in ideas:
        if idea.id == idea_id:
            return idea
    raise NotFoundError(
        f"Idea not found with ID: {idea_id}",
        hint="Ideas are matched by their full id, as printed by 'ci idea add'.",
    )


def filter_ideas(
    ideas: Iterable[Idea],
    text: str | None = None,
    category: str | None = None,
    status: IdeaStatus | None = None,
) -> list[Idea]:
    """Keep ideas matching every supplied criterion.

    *text* matches title, description or any tag case-insensitively;
    *category* is a case-insensitive equality test.
    """
    needle = text.lower() if text else None
    wanted_category = category.lower() if category else None
    result: list[Idea] = []
    for idea in ideas:
        if needle is not None and not (
            needle in idea.title.lower()
            or needle in idea.description.lower()
            or any(needle in tag.lower() for tag in idea.tags)
        ):
            continue
        if wanted_category is not None and idea.category.lower() != wanted_category:
            continue
        if status is not None and idea.status is not status:
            continue
        result.append(idea)
    return result


def all_categories(ideas: Iterable[Idea]) -> list[str]:
    return sorted({idea.category for idea in ideas})


def all_tags(ideas: Iterable[Idea]) -> list[str]:
    return sorted({tag for idea in ideas for tag in idea.tags})


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def format_short(idea: Idea) -> str:
    """One-line summary: ``abcd1234 [New] Title - description…``."""
    return f"{idea.id[:8]} [{idea.status.display}] {idea.title} - {idea.description[:50]}"


def format_detail(idea: Idea) -> list[str]:
    """Lines rendered by ``ci idea view``."""
    lines = [
        f"ID: {idea.id}",
        f"Title: {idea.title}",
        f"Category: {idea.category}",
        f"Status: {idea.status.display}",
        f"Priority: {idea.priority.display}",
        f"Created: {format_local(idea.created_at)}",
        f"Updated: {format_local(idea.updated_at)}",
    ]
    if idea.tags:
        lines.append(f"Tags: {', '.join(idea.tags)}")
    if idea.description:
        lines.extend(["", "Description:", idea.description])
    if idea.notes:
        lines.extend(["", "Notes:", idea.notes])
    if idea.related_ideas:
        lines.extend(["", "Related Ideas:"])
        lines.extend(f"- {related[:8]}" for related in idea.related_ideas)
    return lines
