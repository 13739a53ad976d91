"""Shared pytest fixtures and configuration for the ci test suite.

Guidelines
----------
* No internet access in any test.
* External programs (git, gh, npm, vercel, claude) are mocked at the
  ``infra`` boundary; nothing is actually spawned.
* Core tests must be pure: no side effects.
* Filesystem tests work under ``tmp_path`` only, never the real home.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from ci_cli.infra.settings import Settings

AGENTS_INDEX = """\
# Agents

## Core Agents

### Athena - Memory architect

Athena keeps the memory system coherent.
- **Role**: Memory system architect

### Analyst - Data analysis specialist

Analyst finds patterns in data.

## Appendix

Notes that belong to nobody.
"""


@pytest.fixture
def ci_repo(tmp_path: Path) -> Path:
    """A minimal CollaborativeIntelligence checkout."""
    root = tmp_path / "CollaborativeIntelligence"
    (root / "AGENTS").mkdir(parents=True)
    (root / "CLAUDE.md").write_text("# CI\n", encoding="utf-8")
    (root / "AGENTS.md").write_text(AGENTS_INDEX, encoding="utf-8")
    return root


@pytest.fixture
def settings(tmp_path: Path, ci_repo: Path, monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Settings rooted in a temporary home with ``ci_repo`` as the CI path."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.delenv("XDG_DATA_HOME", raising=False)
    return Settings(home=home, ci_path_override=str(ci_repo))

