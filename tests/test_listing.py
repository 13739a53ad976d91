"""Tests for the grouped directory listing (core/listing.py,
infra/directory_scanner.py, cli/ls.py).
"""

from __future__ import annotations

from pathlib import Path

import pytest

from ci_cli.cli import exit_codes
from ci_cli.cli.ls import run_ls
from ci_cli.core.listing import (
    FileGroup,
    classify,
    column_width_for,
    directory_label,
    file_prefix,
    format_size,
    group_entries,
    is_listed,
    layout_columns,
    organize_group,
    render_group,
    split_files,
)
from ci_cli.core.models import FileEntry, FileKind
from ci_cli.exceptions import NotFoundError, ValidationError
from ci_cli.infra.directory_scanner import scan_directory


def _file(name: str, size: int = 10) -> FileEntry:
    return FileEntry(name=name, kind=classify(name), size=size)


def _dir(name: str, count: int | None = 3) -> FileEntry:
    return FileEntry(name=name, kind=FileKind.DIRECTORY, is_dir=True, item_count=count)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

class TestClassify:
    @pytest.mark.parametrize(
        ("name", "kind"),
        [
            ("main.py", FileKind.SOURCE),
            ("app.TSX", FileKind.SOURCE),
            ("settings.yaml", FileKind.CONFIG),
            ("Dockerfile", FileKind.CONFIG),
            ("build.sh", FileKind.BUILD),
            ("README.md", FileKind.DOCUMENTATION),
            ("LICENSE", FileKind.DOCUMENTATION),
            (".gitignore", FileKind.GIT),
            ("tool.exe", FileKind.BINARY),
            ("release.zip", FileKind.ARCHIVE),
            ("logo.png", FileKind.MEDIA),
            ("notes.bak", FileKind.BACKUP),
            ("data.parquet", FileKind.OTHER),
        ],
    )
    def test_kinds(self, name: str, kind: FileKind) -> None:
        assert classify(name) is kind

    def test_directory_wins(self) -> None:
        assert classify("main.py", is_dir=True) is FileKind.DIRECTORY

    @pytest.mark.parametrize(
        ("name", "listed"),
        [(".git", True), (".env", True), (".cache", False), ("visible", True)],
    )
    def test_hidden_entries(self, name: str, listed: bool) -> None:
        assert is_listed(name) is listed


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------

class TestLabels:
    @pytest.mark.parametrize(
        ("size", "label"),
        [
            (0, "      "),
            (1023, "      "),
            (1536, "  1.5K"),
            (5 * 1024 ** 2, "  5.0M"),
            (3 * 1024 ** 3, "  3.0G"),
        ],
    )
    def test_format_size(self, size: int, label: str) -> None:
        assert format_size(size) == label

    @pytest.mark.parametrize(
        ("count", "label"),
        [(None, "     ?"), (0, " empty"), (1, " 1item"), (4, "4items"), (42, "   42+"), (500, "  many")],
    )
    def test_directory_label(self, count: int | None, label: str) -> None:
        assert directory_label(count) == label

    def test_prefixes(self) -> None:
        assert file_prefix("main.py") == "🐍 "
        assert file_prefix(".gitignore") == "🌿 "
        assert file_prefix("unknown.xyz") == "📋 "


# ---------------------------------------------------------------------------
# Grouping
# ---------------------------------------------------------------------------

class TestGrouping:
    def test_groups_ordered_by_rank(self) -> None:
        groups = group_entries([_file("README.md"), _dir("src"), _file("main.py")])
        assert [g.kind for g in groups] == [FileKind.DIRECTORY, FileKind.SOURCE, FileKind.DOCUMENTATION]

    def test_entries_sorted_case_insensitively(self) -> None:
        (group,) = group_entries([_file("b.py"), _file("A.py"), _file("c.py")])
        assert [e.name for e in group.entries] == ["A.py", "b.py", "c.py"]

    def test_small_sets_stay_together(self) -> None:
        files = [_file(f"f{i}.py") for i in range(6)]
        assert split_files(files) == [("", files)]

    def test_families_by_priority(self) -> None:
        files = [_file(f"{i}.md") for i in range(4)] + [_file(f"{i}.py") for i in range(3)]
        assert [name for name, _ in split_files(files)] == ["Python", "Documentation"]

    def test_large_family_is_split(self) -> None:
        files = [_file(f"{i:02}.py") for i in range(12)]
        result = split_files(files)
        assert [name for name, _ in result] == ["Python", "Python (continued)"]
        assert [len(members) for _, members in result] == [6, 6]

    def test_many_directories_split_in_two(self) -> None:
        dirs = [_dir(f"d{i}") for i in range(10)]
        names = [name for name, _ in organize_group(dirs)]
        assert names == ["Directories (Part 1)", "Directories (Part 2)"]


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

class TestRendering:
    def test_group_header_and_rows(self) -> None:
        group = FileGroup(kind=FileKind.SOURCE, entries=(_file("main.py", 2048),))
        lines = render_group(group, 40)
        assert lines[0].plain == "📝 SOURCE CODE (1)"
        assert set(lines[1].plain.strip()) == {"─"}
        assert lines[2].plain == "    2.0K 🐍 main.py"

    def test_long_names_are_truncated(self) -> None:
        group = FileGroup(kind=FileKind.OTHER, entries=(_file("x" * 50 + ".dat"),))
        row = render_group(group, 30)[-1].plain
        assert row.endswith("…")

    def test_columns_are_balanced(self) -> None:
        groups = group_entries([_dir("src"), _file("main.py"), _file("README.md")])
        left, right = layout_columns(groups, 30)
        assert len(left) == len(right)
        assert left[0].plain.startswith("📁 DIRECTORIES")
        assert right[0].plain.startswith("📝 SOURCE CODE")

    def test_column_width(self) -> None:
        assert column_width_for(83) == 40
        assert column_width_for(2) == 1


# ---------------------------------------------------------------------------
# Scanning and the command
# ---------------------------------------------------------------------------

class TestScanDirectory:
    def test_classifies_and_filters(self, tmp_path: Path) -> None:
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "a.py").write_text("x", encoding="utf-8")
        (tmp_path / "main.py").write_text("print()", encoding="utf-8")
        (tmp_path / ".cache").mkdir()
        (tmp_path / ".gitignore").write_text("", encoding="utf-8")

        entries = {e.name: e for e in scan_directory(tmp_path)}
        assert set(entries) == {"src", "main.py", ".gitignore"}
        assert entries["src"].item_count == 1
        assert entries["main.py"].size == 7
        assert entries[".gitignore"].kind is FileKind.GIT

    def test_missing(self, tmp_path: Path) -> None:
        with pytest.raises(NotFoundError, match="Directory does not exist"):
            scan_directory(tmp_path / "nope")

    def test_not_a_directory(self, tmp_path: Path) -> None:
        target = tmp_path / "file.txt"
        target.write_text("", encoding="utf-8")
        with pytest.raises(ValidationError, match="not a directory"):
            scan_directory(target)


class TestRunLs:
    def test_lists_entries(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (tmp_path / "main.py").write_text("", encoding="utf-8")
        (tmp_path / "docs").mkdir()
        assert run_ls(str(tmp_path)) == exit_codes.SUCCESS
        out = capsys.readouterr().out
        assert "main.py" in out
        assert "docs" in out

    def test_empty_directory(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert run_ls(str(tmp_path)) == exit_codes.SUCCESS
        assert "Directory is empty" in capsys.readouterr().err

    def test_plain_output_without_rich(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        import sys

        for name in ("rich", "rich.console", "rich.text", "rich.markup"):
            monkeypatch.setitem(sys.modules, name, None)
        (tmp_path / "main.py").write_text("", encoding="utf-8")
        assert run_ls(str(tmp_path)) == exit_codes.SUCCESS
        assert "main.py" in capsys.readouterr().out
