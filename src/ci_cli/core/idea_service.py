"""Core idea service: CRUD over an injected idea repository."""

from __future__ import annotations

from collections.abc import Sequence

from ci_cli.core.ideas import (
    all_categories,
    all_tags,
    filter_ideas,
    find_idea,
    new_idea,
    update_idea,
)
from ci_cli.core.models import Idea, IdeaPriority, IdeaStatus
from ci_cli.core.protocols import IdeaRepository
from ci_cli.exceptions import ValidationError


class IdeaService:
    """Idea tracker operations.

    Every mutating call loads the full list, applies the change and saves
    the list back; the file is small and single-user.
    """

    def __init__(self, repository: IdeaRepository) -> None:
        self._repository: IdeaRepository = repository

    def add(
        self,
        title: str | None,
        description: str | None = None,
        category: str | None = None,
        tags: Sequence[str] = (),
    ) -> Idea:
        if not title:
            raise ValidationError("Title is required for adding an idea")
        ideas = self._repository.load()
        idea = new_idea(title, description or "", category, tags)
        ideas.append(idea)
        self._repository.save(ideas)
        return idea

    def search(
        self,
        text: str | None = None,
        category: str | None = None,
        status: IdeaStatus | None = None,
    ) -> list[Idea]:
        return filter_ideas(self._repository.load(), text, category, status)

    def get(self, idea_id: str | None) -> Idea:
        if not idea_id:
            raise ValidationError("ID is required for viewing an idea")
        return find_idea(self._repository.load(), idea_id)

    def update(
        self,
        idea_id: str | None,
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
        if not idea_id:
            raise ValidationError("ID is required for updating an idea")
        ideas = self._repository.load()
        current = find_idea(ideas, idea_id)
        updated = update_idea(
            current,
            title=title,
            description=description,
            category=category,
            tags=tags,
            status=status,
            priority=priority,
            notes=notes,
            related_ideas=related_ideas,
        )
        self._repository.save([updated if idea.id == idea_id else idea for idea in ideas])
        return updated

    def delete(self, idea_id: str | None) -> Idea:
        if not idea_id:
            raise ValidationError("ID is required for deleting an idea")
        ideas = self._repository.load()
        target = find_idea(ideas, idea_id)
        self._repository.save([idea for idea in ideas if idea.id != idea_id])
        return target

    def categories(self) -> list[str]:
        return all_categories(self._repository.load())

    def tags(self) -> list[str]:
        return all_tags(self._repository.load())
