"""Infrastructure: JSON file storage for ideas."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ci_cli.core.ideas import idea_from_dict, idea_to_dict
from ci_cli.core.models import Idea
from ci_cli.exceptions import ConfigurationError
from ci_cli.infra.git import is_work_tree

logger = logging.getLogger(__name__)

IDEAS_FILENAME: str = "ideas.json"


def resolve_ideas_path(cwd: Path, data_dir: Path) -> Path:
    """``<cwd>/.ci/ideas.json`` inside a git work tree, else ``<data_dir>/ci/ideas.json``."""
    if is_work_tree(cwd):
        return cwd / ".ci" / IDEAS_FILENAME
    return data_dir / "ci" / IDEAS_FILENAME


class JsonIdeaRepository:
    """Idea list persisted as a pretty-printed JSON array.

    Satisfies :class:`~ci_cli.core.protocols.IdeaRepository`.
    """

    def __init__(self, path: Path) -> None:
        self.path: Path = path

    def load(self) -> list[Idea]:
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Failed to read ideas file: {self.path}: {exc}") from exc
        if not raw.strip():
            return []
        try:
            records = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(
                f"Failed to parse ideas file: {self.path}",
                hint=str(exc),
            ) from exc
        if not isinstance(records, list):
            raise ConfigurationError(f"Ideas file is not a JSON array: {self.path}")
        return [idea_from_dict(record) for record in records]

    def save(self, ideas: list[Idea]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps([idea_to_dict(idea) for idea in ideas], indent=2),
                encoding="utf-8",
            )
        except OSError as exc:
            raise ConfigurationError(f"Failed to write ideas file: {self.path}: {exc}") from exc
        logger.debug("Saved %d ideas to %s", len(ideas), self.path)
