"""Static documentation site rendering for ``ci docs``.

Produces HTML, CSS and JavaScript text only; writing the files, serving
them and deploying them is the job of :mod:`ci_cli.infra.docs_publisher`.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from html import escape

from ci_cli.core.catalog import COMMAND_CATEGORIES, WORKFLOWS, all_commands, group_agents
from ci_cli.core.models import AgentEntry
from ci_cli.version import __version__

THEMES: dict[str, dict[str, str]] = {
    "light": {"background": "#f8fafc", "surface": "#ffffff", "text": "#1e293b", "border": "#e2e8f0"},
    "dark": {"background": "#0f172a", "surface": "#1e293b", "text": "#e2e8f0", "border": "#334155"},
}
THEMES["auto"] = THEMES["light"]

_BASE_CSS = """\
/* CI Documentation Styles */
:root {{
    --primary: #3b82f6;
    --secondary: #64748b;
    --accent: #06b6d4;
    --background: {background};
    --surface: {surface};
    --text: {text};
    --border: {border};
}}
* {{ margin: 0; padding: 0; box-sizing: border-box; }}
body {{
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
    line-height: 1.6;
    color: var(--text);
    background: var(--background);
}}
.header {{
    background: linear-gradient(135deg, var(--primary), var(--accent));
    color: white;
    padding: 3rem 2rem;
    text-align: center;
}}
.header h1 {{ font-size: 2.5rem; margin-bottom: 0.5rem; }}
.container {{ max-width: 1200px; margin: 0 auto; padding: 2rem; }}
.grid {{
    display: grid;
    grid-template-columns: repeat(auto-fit, minmax(300px, 1fr));
    gap: 2rem;
    margin: 2rem 0;
}}
.card {{
    background: var(--surface);
    border: 1px solid var(--border);
    border-radius: 12px;
    padding: 1.5rem;
}}
.card h3 {{ color: var(--primary); margin-bottom: 1rem; }}
.command {{
    background: #1e293b;
    color: #e2e8f0;
    padding: 0.75rem 1rem;
    border-radius: 8px;
    font-family: 'Fira Code', monospace;
    margin: 0.5rem 0;
    cursor: pointer;
}}
.command .prompt {{ color: var(--accent); }}
.agents-grid {{
    display: grid;
    grid-template-columns: repeat(auto-fill, minmax(250px, 1fr));
    gap: 1rem;
}}
.agent-card {{
    background: var(--surface);
    border: 1px solid var(--border);
    border-radius: 8px;
    padding: 1rem;
}}
.agent-card .name {{ font-weight: 600; color: var(--primary); }}
.agent-card .description {{ font-size: 0.9rem; color: var(--secondary); }}
footer {{ text-align: center; color: var(--secondary); padding: 2rem; }}
"""

_COPY_SCRIPT = """\
document.querySelectorAll('.command').forEach(cmd => {
    cmd.addEventListener('click', () => {
        navigator.clipboard.writeText(cmd.textContent.replace('$ ', '').trim());
        cmd.style.background = '#10b981';
        setTimeout(() => { cmd.style.background = '#1e293b'; }, 500);
    });
});
"""


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------

def stylesheet(theme: str = "auto") -> str:
    """CSS for *theme* (``light``, ``dark`` or ``auto``); unknown themes fall back to auto."""
    return _BASE_CSS.format(**THEMES.get(theme, THEMES["auto"]))


def _page(title: str, body: str, *, inline_css: str | None = None, scripts: Sequence[str] = ()) -> str:
    head_style = (
        f"<style>\n{inline_css}</style>" if inline_css is not None
        else '<link rel="stylesheet" href="assets/style.css">'
    )
    script_tags = "".join(f'<script src="{escape(src)}"></script>\n' for src in scripts)
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n<head>\n'
        '<meta charset="UTF-8">\n'
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        f"<title>{escape(title)}</title>\n{head_style}\n</head>\n<body>\n"
        f"{body}\n"
        f"<footer>Generated by ci {escape(__version__)}</footer>\n"
        f"<script>\n{_COPY_SCRIPT}</script>\n{script_tags}"
        "</body>\n</html>\n"
    )


def _command_block(example: str) -> str:
    return f'<div class="command"><span class="prompt">$</span> {escape(example)}</div>'


def _agent_cards(agents: Sequence[AgentEntry]) -> str:
    if not agents:
        return "<p>No agents found. Set CI_PATH to your CollaborativeIntelligence checkout.</p>"
    cards = []
    for agent in sorted(agents, key=lambda a: a.name.lower()):
        cards.append(
            '<div class="agent-card">'
            f'<div class="name">{escape(agent.name)}</div>'
            f'<div class="description">{escape(agent.description or "No description available")}</div>'
            "</div>"
        )
    return f'<div class="agents-grid">{"".join(cards)}</div>'


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------

def render_index(agents: Sequence[AgentEntry] = (), *, standalone: bool = True, theme: str = "auto") -> str:
    """Main documentation page.

    With *standalone* the stylesheet is inlined so the single file can
    be served or opened on its own (``ci docs serve``).
    """
    cards = []
    for category in COMMAND_CATEGORIES:
        rows = "".join(
            f"<p><strong>{escape(c.name)}</strong> — {escape(c.summary)}</p>{_command_block(c.example)}"
            for c in category.commands
        )
        cards.append(f'<div class="card"><h3>{escape(category.name)}</h3>{rows}</div>')

    quick_start = "".join(_command_block(example) for example in (
        "ci load Athena",
        'ci load "Documentor*3" --parallel',
        "ci agents",
    ))
    body = (
        '<div class="header"><h1>🤖 CI Documentation</h1>'
        "<p>Collaborative Intelligence CLI</p></div>\n"
        '<div class="container">\n'
        f'<div class="card"><h3>🚀 Quick Start</h3>{quick_start}</div>\n'
        f'<div class="grid">{"".join(cards)}</div>\n'
        f"<h2>Agents ({len(agents)})</h2>\n{_agent_cards(agents)}\n"
        "</div>"
    )
    return _page(
        "CI - Collaborative Intelligence CLI Documentation",
        body,
        inline_css=stylesheet(theme) if standalone else None,
    )


def render_interactive() -> str:
    """Workflow walkthrough page with copyable command steps."""
    sections = []
    for workflow in WORKFLOWS:
        steps = "".join(_command_block(step) for step in workflow.steps)
        sections.append(
            f'<div class="card"><h3>{escape(workflow.name)}</h3>'
            f"<p>{escape(workflow.category)}</p>{steps}</div>"
        )
    body = (
        '<div class="header"><h1>Interactive Examples</h1>'
        "<p>Click any command to copy it.</p></div>\n"
        f'<div class="container"><div class="grid">{"".join(sections)}</div></div>'
    )
    return _page("CI - Interactive Examples", body)


def render_agents_gallery(agents: Sequence[AgentEntry]) -> str:
    """Agents grouped by category."""
    by_name = {agent.name: agent for agent in agents}
    sections = []
    for category, names in sorted(group_agents(by_name).items()):
        members = [by_name[name] for name in names]
        sections.append(f"<h2>{escape(category)} ({len(members)})</h2>{_agent_cards(members)}")
    body = (
        '<div class="header"><h1>Agent Gallery</h1>'
        f"<p>{len(agents)} agents</p></div>\n"
        f'<div class="container">{"".join(sections) or _agent_cards(())}</div>'
    )
    return _page("CI - Agent Gallery", body)


def render_web_app(
    agents: Sequence[AgentEntry],
    *,
    interactive: bool = False,
    examples: bool = False,
    visualizer: bool = False,
) -> str:
    """Single-page app shell; optional panels are wired to the generated scripts."""
    panels = ['<div class="card"><h3>Commands</h3>']
    panels.extend(
        f"<p><strong>{escape(c.name)}</strong> — {escape(c.summary)}</p>" for c in all_commands()
    )
    panels.append("</div>")
    scripts: list[str] = []
    if interactive:
        panels.append(
            '<div class="card"><h3>Command Builder</h3>'
            '<select id="builder-command"></select> '
            '<input id="builder-args" placeholder="arguments">'
            '<div class="command" id="builder-output"><span class="prompt">$</span> ci</div></div>'
        )
        scripts.append("command-builder.js")
    if examples:
        for workflow in WORKFLOWS:
            steps = "".join(_command_block(step) for step in workflow.steps)
            panels.append(f'<div class="card"><h3>{escape(workflow.name)}</h3>{steps}</div>')
    if visualizer:
        panels.append('<div class="card"><h3>Agent Visualizer</h3><div id="agent-visualizer"></div></div>')
        scripts.append("agent-visualizer.js")
    body = (
        '<div class="header"><h1>⚡ CI Web App</h1>'
        f"<p>{len(agents)} agents available</p></div>\n"
        f'<div class="container"><div class="grid">{"".join(panels)}</div></div>'
    )
    return _page("CI - Web App", body, scripts=scripts)


def command_builder_js() -> str:
    commands = [c.name for c in all_commands()]
    return (
        f"const CI_COMMANDS = {json.dumps(commands)};\n"
        "const select = document.getElementById('builder-command');\n"
        "const args = document.getElementById('builder-args');\n"
        "const output = document.getElementById('builder-output');\n"
        "CI_COMMANDS.forEach(name => {\n"
        "    const option = document.createElement('option');\n"
        "    option.value = name;\n"
        "    option.textContent = name;\n"
        "    select.appendChild(option);\n"
        "});\n"
        "function render() {\n"
        "    const extra = args.value.trim();\n"
        "    output.innerHTML = '<span class=\"prompt\">$</span> ci ' + select.value + (extra ? ' ' + extra : '');\n"
        "}\n"
        "select.addEventListener('change', render);\n"
        "args.addEventListener('input', render);\n"
        "render();\n"
    )


def agent_visualizer_js(agents: Sequence[AgentEntry]) -> str:
    grouped = group_agents(agent.name for agent in agents)
    return (
        f"const CI_AGENTS = {json.dumps(grouped, sort_keys=True)};\n"
        "const root = document.getElementById('agent-visualizer');\n"
        "Object.keys(CI_AGENTS).forEach(category => {\n"
        "    const heading = document.createElement('h4');\n"
        "    heading.textContent = category + ' (' + CI_AGENTS[category].length + ')';\n"
        "    root.appendChild(heading);\n"
        "    const list = document.createElement('p');\n"
        "    list.textContent = CI_AGENTS[category].join(', ');\n"
        "    root.appendChild(list);\n"
        "});\n"
    )


# ---------------------------------------------------------------------------
# Site bundles
# ---------------------------------------------------------------------------

def build_docs_site(
    agents: Sequence[AgentEntry],
    *,
    interactive: bool = False,
    include_agents: bool = False,
    theme: str = "auto",
) -> dict[str, str]:
    """Relative path → content for ``ci docs generate``."""
    files = {
        "index.html": render_index(agents, standalone=False),
        "assets/style.css": stylesheet(theme),
    }
    if interactive:
        files["interactive.html"] = render_interactive()
    if include_agents:
        files["agents.html"] = render_agents_gallery(agents)
    return files


def build_web_app(
    agents: Sequence[AgentEntry],
    *,
    interactive: bool = False,
    examples: bool = False,
    visualizer: bool = False,
) -> dict[str, str]:
    """Relative path → content for ``ci docs app``."""
    files = {
        "index.html": render_web_app(
            agents, interactive=interactive, examples=examples, visualizer=visualizer,
        ),
        "assets/style.css": stylesheet("auto"),
    }
    if interactive:
        files["command-builder.js"] = command_builder_js()
    if visualizer:
        files["agent-visualizer.js"] = agent_visualizer_js(agents)
    return files
