"""Diagram models and text renderers for ``ci visualize``.

A view is first reduced to a :class:`Diagram` (titled sections of
``(label, detail)`` items), which is then rendered as Mermaid, SVG or a
standalone HTML page.  Terminal rendering with Rich lives in
:mod:`ci_cli.cli.visualize`.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from html import escape

from ci_cli.core.catalog import (
    COMMAND_CATEGORIES,
    COMPONENTS,
    agent_category_counts,
    group_agents,
    select_workflows,
)
from ci_cli.exceptions import ValidationError

FORMATS: tuple[str, ...] = ("terminal", "web", "svg", "mermaid", "auto")
THEMES: tuple[str, ...] = ("dark", "light", "contrast", "terminal")
VIEWS: tuple[str, ...] = ("overview", "commands", "agents", "workflows", "project")

ARCHITECTURE_ART: str = """\
┌──────────────────────────────────────────────────────────┐
│                      User Interface                      │
│   ┌────────────┐   ┌────────────┐   ┌────────────────┐   │
│   │  ci (CLI)  │   │  Web docs  │   │ Claude Code    │   │
│   └────────────┘   └────────────┘   └────────────────┘   │
└────────────────────────────┬─────────────────────────────┘
                             │
┌────────────────────────────┴─────────────────────────────┐
│                       Core Engine                        │
│   ┌────────────┐   ┌────────────┐   ┌────────────────┐   │
│   │  Commands  │   │  Projects  │   │    Sessions    │   │
│   └────────────┘   └────────────┘   └────────────────┘   │
└────────────────────────────┬─────────────────────────────┘
                             │
┌────────────────────────────┴─────────────────────────────┐
│                    Intelligence Layer                    │
│   ┌────────────┐   ┌────────────┐   ┌────────────────┐   │
│   │   Agents   │   │   Memory   │   │     BRAIN      │   │
│   └────────────┘   └────────────┘   └────────────────┘   │
└──────────────────────────────────────────────────────────┘"""

_PALETTES: dict[str, dict[str, str]] = {
    "dark": {"background": "#0f172a", "surface": "#1e293b", "text": "#e2e8f0", "accent": "#38bdf8", "muted": "#94a3b8"},
    "light": {"background": "#f8fafc", "surface": "#ffffff", "text": "#1e293b", "accent": "#2563eb", "muted": "#64748b"},
    "contrast": {"background": "#000000", "surface": "#000000", "text": "#ffffff", "accent": "#ffff00", "muted": "#ffffff"},
    "terminal": {"background": "#000000", "surface": "#0a0a0a", "text": "#33ff33", "accent": "#33ff33", "muted": "#1f9f1f"},
}


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Section:
    """A titled list of ``(label, detail)`` items."""

    title: str
    items: tuple[tuple[str, str], ...]


@dataclass(frozen=True, slots=True)
class Diagram:
    """Renderer-independent description of one view."""

    view: str
    title: str
    sections: tuple[Section, ...]
    art: str | None = None


# ---------------------------------------------------------------------------
# Option resolution
# ---------------------------------------------------------------------------

def resolve_format(fmt: str | None, *, web: bool = False, svg: bool = False) -> str:
    """Shortcut flags win over ``--format``; ``auto`` means terminal.

    Raises
    ------
    ValidationError
        For an unknown format name.
    """
    if web:
        return "web"
    if svg:
        return "svg"
    chosen = (fmt or "terminal").lower()
    if chosen not in FORMATS:
        raise ValidationError(
            f"Invalid format: {fmt}. Valid options: {', '.join(FORMATS)}",
        )
    return "terminal" if chosen == "auto" else chosen


def resolve_theme(theme: str | None, *, dark: bool = False, light: bool = False) -> str:
    if dark:
        return "dark"
    if light:
        return "light"
    chosen = (theme or "dark").lower()
    if chosen not in THEMES:
        raise ValidationError(
            f"Invalid theme: {theme}. Valid options: {', '.join(THEMES)}",
        )
    return chosen


def output_filename(view: str, fmt: str) -> str:
    """``ci_<view>.html`` or ``ci_<view>.svg``."""
    return f"ci_{view}.{'svg' if fmt == 'svg' else 'html'}"


# ---------------------------------------------------------------------------
# Diagram builders
# ---------------------------------------------------------------------------

def _command_sections(group: str | None = None) -> tuple[Section, ...]:
    wanted = group.lower() if group else None
    sections = tuple(
        Section(category.name, tuple((c.name, c.summary) for c in category.commands))
        for category in COMMAND_CATEGORIES
        if wanted is None or category.name.lower() == wanted
    )
    if wanted is not None and not sections:
        names = ", ".join(c.name for c in COMMAND_CATEGORIES)
        raise ValidationError(f"Unknown command group: {group}. Valid options: {names}")
    return sections


def ecosystem_bar(count: int) -> str:
    """Bar of one block per three agents, at least one."""
    return "█" * max(count // 3, 1)


def overview_diagram(agent_names: Sequence[str]) -> Diagram:
    sections = [
        Section("Core Components", COMPONENTS),
        Section(
            "Command Categories",
            tuple(
                (category.name, ", ".join(c.name for c in category.commands))
                for category in COMMAND_CATEGORIES
            ),
        ),
    ]
    counts = agent_category_counts(agent_names)
    if counts:
        sections.append(Section(
            f"Agent Ecosystem ({len(agent_names)} agents)",
            tuple((category, f"{ecosystem_bar(n)} {n}") for category, n in counts),
        ))
    return Diagram("overview", "CI Ecosystem Architecture", tuple(sections), art=ARCHITECTURE_ART)


def commands_diagram(group: str | None = None) -> Diagram:
    return Diagram("commands", "CI Command Structure", _command_sections(group))


def agents_diagram(agent_names: Iterable[str], category: str | None = None) -> Diagram:
    grouped = group_agents(agent_names)
    wanted = category.lower() if category else None
    sections = tuple(
        Section(f"{name} ({len(members)})", tuple((member, name) for member in members))
        for name, members in sorted(grouped.items(), key=lambda item: (-len(item[1]), item[0]))
        if wanted is None or name.lower() == wanted
    )
    return Diagram("agents", "CI Agent Ecosystem", sections)


def workflows_diagram(beginner: bool = False, category: str | None = None) -> Diagram:
    sections = tuple(
        Section(
            f"{workflow.name} [{workflow.category}]",
            tuple((f"{index}.", step) for index, step in enumerate(workflow.steps, start=1)),
        )
        for workflow in select_workflows(beginner=beginner, category=category)
    )
    title = "CI Workflows for Beginners" if beginner else "CI Workflows"
    return Diagram("workflows", title, sections)


def project_diagram(facts: Sequence[tuple[str, str]], checks: Sequence[tuple[str, str]] = ()) -> Diagram:
    """Project overview; *checks* are included only for ``--detailed``."""
    sections = [Section("Project Overview", tuple(facts))]
    if checks:
        sections.append(Section("Integration Checks", tuple(checks)))
    return Diagram("project", "CI Project Analysis", tuple(sections))


# ---------------------------------------------------------------------------
# Text renderers
# ---------------------------------------------------------------------------

def _mermaid_id(*parts: str) -> str:
    return "_".join(re.sub(r"[^0-9A-Za-z]+", "_", part).strip("_") or "x" for part in parts)


def _mermaid_label(text: str) -> str:
    return text.replace('"', "'")


def render_mermaid(diagram: Diagram) -> str:
    """Mermaid flowchart: root → sections → items."""
    root = _mermaid_id(diagram.view, "root")
    lines = ["flowchart TD", f'    {root}["{_mermaid_label(diagram.title)}"]']
    for index, section in enumerate(diagram.sections):
        section_id = _mermaid_id(diagram.view, f"s{index}")
        lines.append(f'    {root} --> {section_id}["{_mermaid_label(section.title)}"]')
        for item_index, (label, _detail) in enumerate(section.items):
            item_id = _mermaid_id(diagram.view, f"s{index}", f"i{item_index}")
            lines.append(f'    {section_id} --> {item_id}["{_mermaid_label(label)}"]')
    return "\n".join(lines) + "\n"


def render_svg(diagram: Diagram, theme: str = "dark") -> str:
    """Stacked section boxes, one text row per item."""
    palette = _PALETTES.get(theme, _PALETTES["dark"])
    width = 900
    row = 22
    y = 60
    body: list[str] = []
    for section in diagram.sections:
        height = 40 + row * len(section.items)
        body.append(
            f'<rect x="20" y="{y}" width="{width - 40}" height="{height}" rx="10" '
            f'fill="{palette["surface"]}" stroke="{palette["accent"]}"/>'
        )
        body.append(
            f'<text x="40" y="{y + 26}" fill="{palette["accent"]}" font-size="18" '
            f'font-weight="bold">{escape(section.title)}</text>'
        )
        for index, (label, detail) in enumerate(section.items):
            ty = y + 50 + index * row
            body.append(
                f'<text x="50" y="{ty}" fill="{palette["text"]}" font-size="14">{escape(label)}</text>'
                f'<text x="300" y="{ty}" fill="{palette["muted"]}" font-size="14">{escape(detail)}</text>'
            )
        y += height + 20
    total_height = y + 20
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{total_height}" '
        f'viewBox="0 0 {width} {total_height}" font-family="monospace">\n'
        f'<rect width="100%" height="100%" fill="{palette["background"]}"/>\n'
        f'<text x="20" y="36" fill="{palette["text"]}" font-size="24" '
        f'font-weight="bold">{escape(diagram.title)}</text>\n'
        + "\n".join(body)
        + "\n</svg>\n"
    )


def render_html(diagram: Diagram, theme: str = "dark") -> str:
    """Standalone page with collapsible sections."""
    palette = _PALETTES.get(theme, _PALETTES["dark"])
    parts = []
    if diagram.art:
        parts.append(f"<pre>{escape(diagram.art)}</pre>")
    for section in diagram.sections:
        rows = "".join(
            f"<tr><td>{escape(label)}</td><td>{escape(detail)}</td></tr>"
            for label, detail in section.items
        )
        parts.append(
            f"<details open><summary>{escape(section.title)}</summary>"
            f"<table>{rows}</table></details>"
        )
    return (
        "<!DOCTYPE html>\n<html lang=\"en\">\n<head>\n<meta charset=\"UTF-8\">\n"
        f"<title>{escape(diagram.title)}</title>\n<style>\n"
        f"body {{ background: {palette['background']}; color: {palette['text']}; "
        "font-family: -apple-system, 'Segoe UI', sans-serif; padding: 2rem; }\n"
        f"h1, summary {{ color: {palette['accent']}; }}\n"
        f"details {{ background: {palette['surface']}; border-radius: 8px; "
        "padding: 1rem; margin: 1rem 0; }\n"
        "summary { cursor: pointer; font-weight: bold; font-size: 1.2rem; }\n"
        f"td {{ padding: 0.2rem 1rem; }} td:last-child {{ color: {palette['muted']}; }}\n"
        "pre { font-size: 0.8rem; }\n"
        "</style>\n</head>\n<body>\n"
        f"<h1>{escape(diagram.title)}</h1>\n"
        + "\n".join(parts)
        + "\n</body>\n</html>\n"
    )
