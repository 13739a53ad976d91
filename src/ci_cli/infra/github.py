"""Infrastructure: GitHub repositories through the ``gh`` CLI."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ci_cli.exceptions import CommandFailedError
from ci_cli.infra.process import run_checked
from ci_cli.infra.tool_detector import require_tool

logger = logging.getLogger(__name__)

LIST_FIELDS: str = "name,description,url,visibility,isArchived,isFork"
VIEW_FIELDS: str = (
    "name,description,url,visibility,stargazerCount,forkCount,defaultBranchRef,"
    "isArchived,isFork,owner,createdAt,updatedAt,languages"
)
_URL_RE = re.compile(r"https?://\S+")


@dataclass(frozen=True, slots=True)
class GitHubRepo:
    name: str
    url: str
    visibility: str
    description: str | None = None
    is_archived: bool = False
    is_fork: bool = False


@dataclass(frozen=True, slots=True)
class GitHubRepoDetails:
    """Fields shown by ``ci repo view``."""

    name: str
    url: str
    visibility: str
    owner: str
    stars: int
    forks: int
    created_at: str
    updated_at: str
    description: str | None = None
    default_branch: str | None = None
    languages: tuple[str, ...] = ()
    is_archived: bool = False
    is_fork: bool = False


# ---------------------------------------------------------------------------
# JSON mapping
# ---------------------------------------------------------------------------

def _parse_json(raw: str, what: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise CommandFailedError(f"Failed to parse GitHub {what} data", hint=str(exc)) from exc


def _repo_from_json(data: dict[str, Any]) -> GitHubRepo:
    return GitHubRepo(
        name=str(data.get("name", "")),
        url=str(data.get("url", "")),
        visibility=str(data.get("visibility", "")),
        description=data.get("description") or None,
        is_archived=bool(data.get("isArchived", False)),
        is_fork=bool(data.get("isFork", False)),
    )


def _language_name(entry: Any) -> str:
    if isinstance(entry, dict):
        if "node" in entry and isinstance(entry["node"], dict):
            return str(entry["node"].get("name", ""))
        return str(entry.get("name", ""))
    return str(entry)


def _details_from_json(data: dict[str, Any]) -> GitHubRepoDetails:
    owner = data.get("owner") or {}
    branch = data.get("defaultBranchRef") or {}
    return GitHubRepoDetails(
        name=str(data.get("name", "")),
        url=str(data.get("url", "")),
        visibility=str(data.get("visibility", "")),
        owner=str(owner.get("login", "")) if isinstance(owner, dict) else str(owner),
        stars=int(data.get("stargazerCount", 0) or 0),
        forks=int(data.get("forkCount", 0) or 0),
        created_at=str(data.get("createdAt", "")),
        updated_at=str(data.get("updatedAt", "")),
        description=data.get("description") or None,
        default_branch=(branch.get("name") or None) if isinstance(branch, dict) else None,
        languages=tuple(
            name for name in (_language_name(e) for e in data.get("languages") or []) if name
        ),
        is_archived=bool(data.get("isArchived", False)),
        is_fork=bool(data.get("isFork", False)),
    )


# ---------------------------------------------------------------------------
# gh wrappers
# ---------------------------------------------------------------------------

def require_gh() -> Path:
    """Locate ``gh`` or raise :class:`ToolNotFoundError` with install hints."""
    return require_tool("gh")


def list_repos() -> list[GitHubRepo]:
    result = run_checked(
        ["gh", "repo", "list", "--json", LIST_FIELDS],
        error="Failed to list GitHub repositories",
        hint="Run 'gh auth login' if you are not authenticated.",
    )
    records = _parse_json(result.stdout, "repository")
    if not isinstance(records, list):
        raise CommandFailedError("Unexpected output from 'gh repo list'")
    return [_repo_from_json(record) for record in records]


def create_repo(name: str, description: str | None = None, private: bool = False) -> GitHubRepo:
    """Create *name* on GitHub.

    ``gh repo create`` has no ``--json`` flag, so the repository URL is
    taken from what ``gh`` prints.
    """
    args = ["gh", "repo", "create", name, "--private" if private else "--public"]
    if description:
        args.extend(["--description", description])
    result = run_checked(args, error=f"Failed to create GitHub repository: {name}")
    match = _URL_RE.search(result.stdout) or _URL_RE.search(result.stderr)
    url = match.group(0) if match else ""
    logger.debug("Created repository %s at %s", name, url or "<unknown url>")
    return GitHubRepo(
        name=name,
        url=url,
        visibility="PRIVATE" if private else "PUBLIC",
        description=description,
    )


def clone_target(repo: str, directory: str | None = None) -> str:
    """Directory ``gh repo clone`` writes to: *directory* or the repo's last path segment."""
    if directory:
        return directory
    return repo.rstrip("/").split("/")[-1]


def clone_repo(repo: str, directory: str | None = None) -> str:
    args = ["gh", "repo", "clone", repo]
    if directory:
        args.append(directory)
    run_checked(args, error=f"Failed to clone GitHub repository: {repo}")
    return clone_target(repo, directory)


def view_repo(repo: str) -> GitHubRepoDetails:
    result = run_checked(
        ["gh", "repo", "view", repo, "--json", VIEW_FIELDS],
        error=f"Failed to view GitHub repository: {repo}",
    )
    data = _parse_json(result.stdout, "repository details")
    if not isinstance(data, dict):
        raise CommandFailedError("Unexpected output from 'gh repo view'")
    return _details_from_json(data)
