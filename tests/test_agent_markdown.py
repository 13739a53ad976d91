"""Tests for agent markdown scanning (core/agent_markdown.py).

Pure functions only; no filesystem access.
"""

from __future__ import annotations

import pytest

from ci_cli.core.agent_markdown import (
    TOOLKIT_PLACEHOLDER,
    agent_exists,
    description_from_memory,
    extract_agent_description,
    extract_agent_memory,
    iter_agent_entries,
    list_available_agents,
    parse_agent_heading,
    section_lines,
    summary_description,
)


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


# ---------------------------------------------------------------------------
# Headings
# ---------------------------------------------------------------------------

class TestParseAgentHeading:
    def test_name_and_description(self) -> None:
        entry = parse_agent_heading("### Athena - Memory architect")
        assert entry is not None
        assert entry.name == "Athena"
        assert entry.description == "Memory architect"
        assert entry.heading == "Athena - Memory architect"

    def test_name_only(self) -> None:
        entry = parse_agent_heading("### Solo")
        assert entry is not None
        assert entry.name == "Solo"
        assert entry.description == ""

    @pytest.mark.parametrize("line", ["## Core Agents", "#### Deep", "Athena - x", ""])
    def test_other_lines(self, line: str) -> None:
        assert parse_agent_heading(line) is None


class TestIndexQueries:
    def test_entries_in_document_order(self) -> None:
        assert [e.name for e in iter_agent_entries(AGENTS_INDEX)] == ["Athena", "Analyst"]

    def test_list_is_sorted(self) -> None:
        assert list_available_agents(AGENTS_INDEX) == ["Analyst", "Athena"]

    def test_exists_is_case_insensitive(self) -> None:
        assert agent_exists(AGENTS_INDEX, "athena")
        assert not agent_exists(AGENTS_INDEX, "Zeus")

    def test_malformed_input_yields_nothing(self) -> None:
        assert iter_agent_entries("no headings here\n##not-a-heading") == []


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

class TestExtractAgentMemory:
    def test_header_and_section(self) -> None:
        memory = extract_agent_memory(AGENTS_INDEX, "Athena", "/ci/AGENTS/Athena")
        assert memory.startswith("# Agent Memory: Athena\n\n## Athena - Memory architect\n\n")
        assert "Athena keeps the memory system coherent.\n" in memory
        assert "- **Role**: Memory system architect\n" in memory

    def test_section_stops_at_next_agent(self) -> None:
        memory = extract_agent_memory(AGENTS_INDEX, "Athena")
        assert "Analyst finds patterns" not in memory

    def test_section_stops_at_level_two_heading(self) -> None:
        memory = extract_agent_memory(AGENTS_INDEX, "Analyst")
        assert "Analyst finds patterns in data.\n" in memory
        assert "Notes that belong to nobody" not in memory

    def test_footer_names_toolkit(self) -> None:
        memory = extract_agent_memory(AGENTS_INDEX, "Athena", "/ci/AGENTS/Athena")
        assert "## Agent Usage Instructions" in memory
        assert "```\n/ci/AGENTS/Athena\n```" in memory
        assert memory.endswith("operate with its own specialized tools and knowledge.\n")

    def test_footer_placeholder_without_toolkit(self) -> None:
        memory = extract_agent_memory(AGENTS_INDEX, "Athena")
        assert f"```\n{TOOLKIT_PLACEHOLDER}\n```" in memory

    def test_unknown_agent_has_header_and_footer_only(self) -> None:
        memory = extract_agent_memory(AGENTS_INDEX, "Zeus")
        assert memory.startswith("# Agent Memory: Zeus\n\n\n\n## Agent Usage Instructions")


class TestSectionLines:
    def test_non_blank_body(self) -> None:
        assert section_lines(AGENTS_INDEX, "Athena") == [
            "Athena keeps the memory system coherent.",
            "- **Role**: Memory system architect",
        ]

    def test_missing_agent(self) -> None:
        assert section_lines(AGENTS_INDEX, "Zeus") == []


# ---------------------------------------------------------------------------
# Descriptions
# ---------------------------------------------------------------------------

class TestDescriptions:
    def test_readme_first_prose_line(self) -> None:
        readme = "# Athena\n\nMemory system architect.\n\n## Details\n"
        assert extract_agent_description(readme) == "Memory system architect."

    def test_readme_role_fallback(self) -> None:
        readme = "## Overview\n- **Role**: Debugging specialist\n"
        assert extract_agent_description(readme) == "Debugging specialist"

    def test_readme_without_description(self) -> None:
        assert extract_agent_description("## Only headings\n") is None

    def test_summary_prefers_role_line(self) -> None:
        body = section_lines(AGENTS_INDEX, "Athena")
        assert summary_description(body) == "Memory system architect"

    def test_summary_falls_back_to_first_line(self) -> None:
        assert summary_description(["First line", "Second"]) == "First line"
        assert summary_description([]) is None

    def test_description_from_memory(self) -> None:
        assert description_from_memory("Role: Guardian of memory\n", "Athena") == "Guardian of memory"
        assert description_from_memory("nothing useful", "Athena") == "Agent Athena"
