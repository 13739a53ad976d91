"""``ci visualize``: diagrams of the CI ecosystem.

Terminal output is drawn with Rich; web, SVG and Mermaid output comes
from the renderers in :mod:`ci_cli.core.visualize`.
"""

from __future__ import annotations

import tempfile
import threading
from pathlib import Path
from typing import Any

from ci_cli.cli import exit_codes
from ci_cli.cli.console import console, escape, out
from ci_cli.cli.output import print_info, print_success, print_warning
from ci_cli.core import visualize as diagrams
from ci_cli.core.catalog import COMMAND_CATEGORIES
from ci_cli.exceptions import ConfigurationError, EnvironmentError, UnknownCommandError
from ci_cli.infra.agent_workspace import AgentWorkspace
from ci_cli.infra.browser import open_in_browser
from ci_cli.infra.config_store import find_nearest_config
from ci_cli.infra.docs_publisher import write_page
from ci_cli.infra.settings import Settings, load_settings

TEMP_FILE_LIFETIME: float = 2.0

_ACCENTS: dict[str, str] = {
    "dark": "cyan",
    "light": "blue",
    "contrast": "bold bright_white",
    "terminal": "green",
}

_EXPLORE_HINTS: tuple[tuple[str, str], ...] = (
    ("commands", "explore command structure"),
    ("agents", "browse agent capabilities"),
    ("workflows", "see process flows"),
    ("project", "analyze current project"),
)


def _import_rich_tree() -> type[Any]:
    """Import rich tree lazily for hierarchical views."""
    try:
        from rich.tree import Tree
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Tree


# ---------------------------------------------------------------------------
# Data gathering
# ---------------------------------------------------------------------------

def _agent_names(settings: Settings) -> list[str]:
    try:
        ci_path = settings.ci_path
    except ConfigurationError:
        return []
    return AgentWorkspace(ci_path).agent_names()


def _project_facts(name: str | None, detailed: bool) -> tuple[list[tuple[str, str]], list[tuple[str, str]]]:
    cwd = Path.cwd()
    found = find_nearest_config(cwd)
    project_name = name or (found[1].project_name if found else cwd.name)
    claude_md = (cwd / "CLAUDE.md").exists()
    facts = [
        ("Project Name", project_name),
        ("CI Integration", "Active" if claude_md or found else "Not integrated"),
        ("Location", str(cwd)),
    ]
    if found:
        facts.append(("Active Agents", ", ".join(found[1].active_agents)))
    if not detailed:
        return facts, []

    gitignore = cwd / ".gitignore"
    try:
        ignores_local = gitignore.is_file() and "CLAUDE.local.md" in gitignore.read_text(encoding="utf-8")
    except OSError:
        ignores_local = False
    checks = [
        ("Configuration Files", "✅ CLAUDE.md present" if claude_md else "⚠️ CLAUDE.md missing"),
        ("CI Config", f"✅ {found[0]}" if found else "⚠️ No .ci-config.json"),
        ("Git Repository", "✅ Found" if (cwd / ".git").exists() else "⚠️ Not a git repository"),
        (".gitignore", "✅ Excludes CLAUDE.local.md" if ignores_local else "⚠️ Run 'ci ignore'"),
    ]
    return facts, checks


# ---------------------------------------------------------------------------
# Terminal rendering
# ---------------------------------------------------------------------------

def _print_sections(diagram: diagrams.Diagram, accent: str) -> None:
    console.print(f"[{accent}]{'═' * 60}[/{accent}]")
    console.print(f"[{accent}]{escape(diagram.title.center(60))}[/{accent}]")
    console.print(f"[{accent}]{'═' * 60}[/{accent}]")
    if diagram.art:
        console.print()
        out.print(diagram.art)
    for section in diagram.sections:
        console.print()
        console.print(f"[bold {accent}]{escape(section.title)}[/bold {accent}]")
        width = max((len(label) for label, _ in section.items), default=0)
        for label, detail in section.items:
            out.print(f"  {label:<{width}}  {detail}".rstrip())


def _print_tree(diagram: diagrams.Diagram, accent: str) -> None:
    try:
        tree_class = _import_rich_tree()
    except EnvironmentError:
        _print_sections(diagram, accent)
        return
    tree = tree_class(f"[bold {accent}]{escape(diagram.title)}[/bold {accent}]")
    for section in diagram.sections:
        branch = tree.add(f"[bold]{escape(section.title)}[/bold]")
        for label, detail in section.items:
            suffix = f" [dim]{escape(detail)}[/dim]" if detail and detail != section.title else ""
            branch.add(f"{escape(label)}{suffix}")
    console.print(tree)


def _print_explore_hints(current: str) -> None:
    console.print()
    console.print("[bold cyan]Interactive Mode:[/bold cyan]")
    for view, purpose in _EXPLORE_HINTS:
        if view != current:
            console.print(f"[blue]→[/blue] Use 'ci visualize {view}' to {purpose}")


# ---------------------------------------------------------------------------
# File output
# ---------------------------------------------------------------------------

def _render(diagram: diagrams.Diagram, fmt: str, theme: str) -> str:
    if fmt == "svg":
        return diagrams.render_svg(diagram, theme)
    return diagrams.render_html(diagram, theme)


def _remove_later(path: Path, delay: float = TEMP_FILE_LIFETIME) -> threading.Timer:
    """Delete *path* after *delay* seconds, once the browser has read it."""
    timer = threading.Timer(delay, path.unlink, kwargs={"missing_ok": True})
    timer.start()
    return timer


def _write_and_open(diagram: diagrams.Diagram, fmt: str, theme: str, save: bool) -> None:
    filename = diagrams.output_filename(diagram.view, fmt)
    target = Path(filename) if save else Path(tempfile.gettempdir()) / filename
    write_page(target, _render(diagram, fmt, theme))
    if save:
        print_success(f"Saved {fmt.upper()} visualization to {target}")
    if open_in_browser(str(target.resolve())):
        print_info(f"Opened {target.name} in your browser")
    else:
        print_warning(f"Could not open a browser; open {target} manually")
        # keep the file around when nothing will read it
        return
    if not save:
        _remove_later(target)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def _build(view: str, options: dict[str, Any], settings: Settings) -> diagrams.Diagram:
    if view == "overview":
        return diagrams.overview_diagram(_agent_names(settings))
    if view == "commands":
        return diagrams.commands_diagram(options.get("group"))
    if view == "agents":
        return diagrams.agents_diagram(_agent_names(settings), options.get("category"))
    if view == "workflows":
        return diagrams.workflows_diagram(
            beginner=bool(options.get("beginner")),
            category=options.get("category"),
        )
    facts, checks = _project_facts(options.get("name"), bool(options.get("detailed")))
    return diagrams.project_diagram(facts, checks)


def run_visualize(
    view: str,
    *,
    fmt: str | None = None,
    theme: str | None = None,
    web: bool = False,
    svg: bool = False,
    dark: bool = False,
    light: bool = False,
    save: bool = False,
    settings: Settings | None = None,
    **options: Any,
) -> int:
    """Render one view.

    Parameters
    ----------
    view:
        One of :data:`~ci_cli.core.visualize.VIEWS`.
    options:
        Per-view flags: ``interactive``, ``export``, ``group``, ``tree``,
        ``category``, ``network``, ``beginner``, ``name``, ``detailed``.
    """
    if view not in diagrams.VIEWS:
        raise UnknownCommandError(
            f"Unknown visualization: {view}. Valid options: {', '.join(diagrams.VIEWS)}",
        )
    settings = settings or load_settings()
    output_format = diagrams.resolve_format(fmt, web=web, svg=svg)
    chosen_theme = diagrams.resolve_theme(theme, dark=dark, light=light)
    diagram = _build(view, options, settings)

    export = options.get("export")
    if view == "overview" and export:
        export_path = Path(export)
        if export_path.suffix not in (".html", ".svg"):
            print_warning("Unknown export format. Use .html or .svg extension")
        else:
            export_format = "svg" if export_path.suffix == ".svg" else "web"
            write_page(export_path, _render(diagram, export_format, chosen_theme))
            print_success(f"Exported {export_format.upper()} to: {export_path}")
            return exit_codes.SUCCESS

    if output_format == "mermaid":
        out.print(diagrams.render_mermaid(diagram), end="")
        return exit_codes.SUCCESS
    if output_format in ("web", "svg"):
        _write_and_open(diagram, output_format, chosen_theme, save)
        return exit_codes.SUCCESS

    accent = _ACCENTS.get(chosen_theme, "cyan")
    if view == "agents" and not diagram.sections:
        print_info("No agents found; set CI_PATH to your CollaborativeIntelligence repository")
        return exit_codes.SUCCESS
    if options.get("tree") or options.get("network"):
        _print_tree(diagram, accent)
    else:
        _print_sections(diagram, accent)
    if view == "commands" and not options.get("group"):
        total = sum(len(category.commands) for category in COMMAND_CATEGORIES)
        console.print()
        console.print(f"[dim]{total} commands in {len(COMMAND_CATEGORIES)} categories[/dim]")
    if options.get("interactive"):
        _print_explore_hints(view)
    return exit_codes.SUCCESS
