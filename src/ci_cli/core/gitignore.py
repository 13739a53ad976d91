"""Recommended ``.gitignore`` patterns and their idempotent injection."""

from __future__ import annotations

from dataclasses import dataclass

APPEND_MARKER: str = "# Added by Collaborative Intelligence"
NEW_FILE_HEADER: str = "# Collaborative Intelligence - Generated .gitignore\n\n"

RECOMMENDED_PATTERNS: tuple[str, ...] = (
    # CI
    ".ci/",
    ".ci-config.json",
    "CLAUDE.local.md",
    # environment
    ".env",
    ".env.local",
    ".env.development.local",
    ".env.test.local",
    ".env.production.local",
    # secrets
    "*.pem",
    "*.key",
    "*.crt",
    # logs
    "logs/",
    "*.log",
    "npm-debug.log*",
    "yarn-debug.log*",
    "yarn-error.log*",
    # build output
    "dist/",
    "build/",
    "out/",
    # dependencies
    "node_modules/",
    "__pycache__/",
    "target/",
    "vendor/",
    # lock files
    "package-lock.json",
    "yarn.lock",
    "Cargo.lock",
    # OS
    ".DS_Store",
    "Thumbs.db",
    # editors
    ".idea/",
    ".vscode/",
    "*.swp",
    "*.swo",
    ".vim/",
    "*.sublime-workspace",
    # caches
    ".cache/",
    ".pytest_cache/",
    ".eslintcache",
    ".parcel-cache/",
    # Python
    "*.py[cod]",
    "*$py.class",
    ".Python",
    "env/",
    "venv/",
    "ENV/",
    "*.egg-info/",
    "*.egg",
)


@dataclass(frozen=True, slots=True)
class GitignoreUpdate:
    """Outcome of merging the recommended patterns into a file."""

    content: str
    """Full new file content (unchanged when nothing was added)."""

    added: tuple[str, ...]
    """Patterns appended, in recommendation order."""

    @property
    def changed(self) -> bool:
        return bool(self.added)


def existing_patterns(content: str) -> set[str]:
    """Active patterns in *content*: trimmed, non-blank, non-comment lines."""
    return {
        line.strip()
        for line in content.splitlines()
        if line.strip() and not line.strip().startswith("#")
    }


def merge_patterns(
    content: str | None,
    patterns: tuple[str, ...] = RECOMMENDED_PATTERNS,
) -> GitignoreUpdate:
    """Append the *patterns* missing from *content*.

    ``None`` means the file does not exist yet, so a header is written
    instead of the append marker.  Running the merge on its own output
    adds nothing.
    """
    present = existing_patterns(content or "")
    missing = tuple(p for p in dict.fromkeys(patterns) if p not in present)
    if not missing:
        return GitignoreUpdate(content=content or "", added=())

    if content is None:
        new_content = NEW_FILE_HEADER
    else:
        new_content = content
        if new_content and not new_content.endswith("\n"):
            new_content += "\n"
        new_content += f"\n{APPEND_MARKER}\n"
    new_content += "".join(f"{pattern}\n" for pattern in missing)
    return GitignoreUpdate(content=new_content, added=missing)
