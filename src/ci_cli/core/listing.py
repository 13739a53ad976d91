"""Grouped two-column directory listing used by ``ci ls``.

Entries are classified into :class:`~ci_cli.core.models.FileKind`
groups, each group is rendered into styled lines, and whole groups are
dealt into two balanced columns.  Lines are plain ``(text, style)``
segments; the CLI layer turns them into Rich text and fits them to the
column width.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ci_cli.core.models import FileEntry, FileKind

VISIBLE_HIDDEN_NAMES: frozenset[str] = frozenset({".git", ".gitignore", ".env"})
"""Dot-entries that are listed anyway."""

COLUMN_SEPARATOR: str = " │ "

_BACKUP_EXTENSIONS = frozenset({"bak", "backup", "old", "tmp", "orig", "swp"})
_SOURCE_EXTENSIONS = frozenset({
    "rs", "js", "ts", "jsx", "tsx", "py", "java", "cpp", "c", "h", "hpp",
    "cs", "php", "rb", "go", "swift", "kt", "scala", "clj", "hs", "ml",
    "elm", "dart", "vue", "svelte", "sol", "zig", "nim",
})
_CONFIG_EXTENSIONS = frozenset({
    "json", "toml", "yaml", "yml", "ini", "conf", "config", "xml", "env", "properties",
})
_CONFIG_NAMES = frozenset({"dockerfile", "makefile", ".env", ".envrc", "config", "settings"})
_BUILD_NAMES = frozenset({
    "cargo.toml", "package.json", "pom.xml", "build.gradle", "makefile", "cmakelists.txt",
    "build.sh", "build.py", "gulpfile.js", "webpack.config.js", "rollup.config.js",
})
_DOC_EXTENSIONS = frozenset({"md", "txt", "rst", "adoc", "org", "tex", "pdf", "doc", "docx"})
_DOC_NAMES = frozenset({"readme", "changelog", "license", "authors", "contributors"})
_BINARY_EXTENSIONS = frozenset({
    "exe", "bin", "so", "dll", "dylib", "a", "lib", "deb", "rpm", "msi", "pkg",
})
_MEDIA_EXTENSIONS = frozenset({
    "png", "jpg", "jpeg", "gif", "svg", "bmp", "ico", "webp",
    "mp4", "avi", "mov", "mkv", "webm",
    "mp3", "wav", "flac", "ogg", "m4a",
})
_ARCHIVE_EXTENSIONS = frozenset({"zip", "tar", "gz", "bz2", "xz", "7z", "rar", "dmg", "iso"})

_FAMILIES: dict[str, tuple[str, int]] = {
    "rs": ("Rust", 1),
    "js": ("JavaScript/TypeScript", 2),
    "ts": ("JavaScript/TypeScript", 2),
    "jsx": ("JavaScript/TypeScript", 2),
    "tsx": ("JavaScript/TypeScript", 2),
    "py": ("Python", 3),
    "json": ("Config", 4),
    "toml": ("Config", 4),
    "yaml": ("Config", 4),
    "yml": ("Config", 4),
    "ini": ("Config", 4),
    "md": ("Documentation", 5),
    "txt": ("Documentation", 5),
    "rst": ("Documentation", 5),
    "png": ("Images", 6),
    "jpg": ("Images", 6),
    "jpeg": ("Images", 6),
    "gif": ("Images", 6),
    "svg": ("Images", 6),
    "zip": ("Archives", 7),
    "tar": ("Archives", 7),
    "gz": ("Archives", 7),
    "7z": ("Archives", 7),
}
_NO_EXTENSION_FAMILY = ("No Extension", 8)
_OTHER_FAMILY = ("Other", 9)

_PREFIXES: dict[str, str] = {
    "rs": "🦀 ",
    "js": "📜 ",
    "ts": "📜 ",
    "py": "🐍 ",
    "json": "⚙️ ",
    "toml": "⚙️ ",
    "yaml": "⚙️ ",
    "yml": "⚙️ ",
    "md": "📄 ",
    "txt": "📄 ",
    "git": "🌿 ",
    "gitignore": "🌿 ",
    "png": "🖼️ ",
    "jpg": "🖼️ ",
    "jpeg": "🖼️ ",
    "gif": "🖼️ ",
    "zip": "📦 ",
    "tar": "📦 ",
    "gz": "📦 ",
}
_DEFAULT_PREFIX = "📋 "
_DIRECTORY_PREFIX = "📁 "

_SEPARATOR_CHARS: dict[FileKind, str] = {
    FileKind.DIRECTORY: "━",
    FileKind.SOURCE: "─",
    FileKind.CONFIG: "┄",
    FileKind.DOCUMENTATION: "┈",
}


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ListingLine:
    """One rendered row: a sequence of ``(text, rich style)`` segments."""

    segments: tuple[tuple[str, str], ...] = ()

    @property
    def plain(self) -> str:
        return "".join(text for text, _ in self.segments)


@dataclass(frozen=True, slots=True)
class FileGroup:
    """All entries of one :class:`FileKind`, sorted case-insensitively."""

    kind: FileKind
    entries: tuple[FileEntry, ...]


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def _path_extension(name: str) -> str:
    """Extension as a path library sees it: none for dot-files."""
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem:
        return ""
    return ext.lower()


def _last_suffix(name: str) -> str:
    """Text after the last dot, so ``.gitignore`` yields ``gitignore``."""
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1].lower()


def is_listed(name: str) -> bool:
    """Hidden entries are skipped except a few well-known ones."""
    return not name.startswith(".") or name in VISIBLE_HIDDEN_NAMES


def classify(name: str, is_dir: bool = False) -> FileKind:
    """Assign a :class:`FileKind` from the entry's name and extension."""
    if is_dir:
        return FileKind.DIRECTORY
    lowered = name.lower()
    ext = _path_extension(lowered)

    if lowered.startswith(".git") or lowered == "gitignore" or ext == "gitignore":
        return FileKind.GIT
    if ext in _BACKUP_EXTENSIONS or lowered.endswith((".bak", ".backup")):
        return FileKind.BACKUP
    if ext in _SOURCE_EXTENSIONS:
        return FileKind.SOURCE
    if ext in _CONFIG_EXTENSIONS or lowered in _CONFIG_NAMES:
        return FileKind.CONFIG
    if lowered in _BUILD_NAMES or "build" in lowered or "make" in lowered:
        return FileKind.BUILD
    if ext in _DOC_EXTENSIONS or lowered in _DOC_NAMES:
        return FileKind.DOCUMENTATION
    if ext in _BINARY_EXTENSIONS:
        return FileKind.BINARY
    if ext in _MEDIA_EXTENSIONS:
        return FileKind.MEDIA
    if ext in _ARCHIVE_EXTENSIONS:
        return FileKind.ARCHIVE
    return FileKind.OTHER


def group_entries(entries: Iterable[FileEntry]) -> list[FileGroup]:
    """Bucket entries by kind; order groups by rank, then larger first."""
    buckets: dict[FileKind, list[FileEntry]] = {}
    for entry in entries:
        buckets.setdefault(entry.kind, []).append(entry)
    groups = [
        FileGroup(kind=kind, entries=tuple(sorted(items, key=lambda e: e.name.lower())))
        for kind, items in buckets.items()
    ]
    groups.sort(key=lambda g: (g.kind.rank, -len(g.entries)))
    return groups


# ---------------------------------------------------------------------------
# Size labels
# ---------------------------------------------------------------------------

def format_size(size: int | None) -> str:
    """Six-character size label; files under 1 KiB show blanks."""
    if size is None or size < 1024:
        return " " * 6
    if size < 1024 ** 2:
        return f"{size / 1024:>5.1f}K"
    if size < 1024 ** 3:
        return f"{size / 1024 ** 2:>5.1f}M"
    return f"{size / 1024 ** 3:>5.1f}G"


def directory_label(item_count: int | None) -> str:
    """Six-character child-count label for a directory (``?`` if unreadable)."""
    if item_count is None:
        label = "?"
    elif item_count == 0:
        label = "empty"
    elif item_count < 10:
        label = f"{item_count}item{'' if item_count == 1 else 's'}"
    elif item_count < 100:
        label = f"{item_count}+"
    else:
        label = "many"
    return f"{label:>6}"


def file_prefix(name: str) -> str:
    return _PREFIXES.get(_last_suffix(name), _DEFAULT_PREFIX)


# ---------------------------------------------------------------------------
# Sub-grouping
# ---------------------------------------------------------------------------

def _family(name: str) -> tuple[str, int]:
    suffix = _last_suffix(name)
    if not suffix:
        return _NO_EXTENSION_FAMILY
    return _FAMILIES.get(suffix, _OTHER_FAMILY)


def split_files(files: Sequence[FileEntry]) -> list[tuple[str, list[FileEntry]]]:
    """Split regular files into extension families.

    Six or fewer files stay together.  Families are ordered by priority,
    then size; a family over ten entries is cut into two chunks, the
    second named ``"<family> (continued)"``.  A single resulting chunk
    is left unnamed.
    """
    if len(files) <= 6:
        return [("", list(files))]

    families: dict[str, list[FileEntry]] = {}
    priorities: dict[str, int] = {}
    for entry in files:
        name, priority = _family(entry.name)
        families.setdefault(name, []).append(entry)
        priorities[name] = priority

    ordered = sorted(families.items(), key=lambda item: (priorities[item[0]], -len(item[1])))
    result: list[tuple[str, list[FileEntry]]] = []
    for name, members in ordered:
        if len(members) > 10:
            chunk = (len(members) + 1) // 2
            for index in range(0, len(members), chunk):
                label = name if index == 0 else f"{name} (continued)"
                result.append((label, members[index:index + chunk]))
        else:
            result.append((name, members))

    if len(result) == 1:
        result[0] = ("", result[0][1])
    return result


def organize_group(entries: Sequence[FileEntry]) -> list[tuple[str, list[FileEntry]]]:
    """Named sub-groups of a group: directories first, then file families."""
    directories = [e for e in entries if e.is_dir]
    files = [e for e in entries if not e.is_dir]
    result: list[tuple[str, list[FileEntry]]] = []

    if directories:
        if len(directories) > 8:
            middle = len(directories) // 2
            result.append(("Directories (Part 1)", directories[:middle]))
            result.append(("Directories (Part 2)", directories[middle:]))
        else:
            result.append(("Directories", directories))

    for name, members in split_files(files) if files else []:
        if not name:
            display = "Files" if directories else ""
        else:
            display = f"Files - {name}"
        result.append((display, members))
    return result


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _truncate_name(name: str, width: int) -> str:
    if width <= 0 or len(name) <= width:
        return name
    return name[: max(width - 1, 0)] + "…"


def render_group(group: FileGroup, column_width: int) -> list[ListingLine]:
    """Header, separator and entry rows for one group."""
    kind = group.kind
    total = len(group.entries)
    lines = [
        ListingLine((
            (f"{kind.icon} {kind.title.upper()} ", f"bold {kind.color}"),
            (f"({total})", "bright_black"),
        )),
        ListingLine((
            ("  ", ""),
            (_SEPARATOR_CHARS.get(kind, "─") * max(column_width - 4, 0), f"dim {kind.color}"),
        )),
    ]

    name_width = max(column_width - 12, 0)
    for subgroup_name, members in organize_group(group.entries):
        labelled = bool(subgroup_name) and len(members) < total
        if labelled:
            lines.append(ListingLine((("  ▸ ", "bright_black"), (subgroup_name, "bright_black"))))
        for entry in members:
            if entry.is_dir:
                size, prefix, color = directory_label(entry.item_count), _DIRECTORY_PREFIX, "bright_blue"
            else:
                size, prefix, color = format_size(entry.size), file_prefix(entry.name), kind.color
            lines.append(ListingLine((
                ("  ", ""),
                (size, "bright_black"),
                (" ", ""),
                (prefix, "bright_black"),
                (_truncate_name(entry.name, name_width), color),
            )))
        if labelled:
            lines.append(ListingLine())
    return lines


def layout_columns(
    groups: Sequence[FileGroup],
    column_width: int,
) -> tuple[list[ListingLine], list[ListingLine]]:
    """Deal whole groups into the currently shorter column.

    Groups sharing a column are separated by a blank row; both columns
    are padded to the same height.
    """
    left: list[ListingLine] = []
    right: list[ListingLine] = []
    for group in groups:
        block = render_group(group, column_width)
        target = left if len(left) <= len(right) else right
        if target:
            target.append(ListingLine())
        target.extend(block)

    height = max(len(left), len(right))
    left.extend(ListingLine() for _ in range(height - len(left)))
    right.extend(ListingLine() for _ in range(height - len(right)))
    return left, right


def column_width_for(terminal_width: int) -> int:
    """Width of each column for a terminal *terminal_width* cells wide."""
    return max((terminal_width - len(COLUMN_SEPARATOR)) // 2, 1)
