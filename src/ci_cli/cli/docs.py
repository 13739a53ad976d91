"""``ci docs``: generate, serve and publish the HTML command reference."""

from __future__ import annotations

import tempfile
from pathlib import Path

from ci_cli.cli import exit_codes
from ci_cli.cli.console import console, escape
from ci_cli.cli.output import print_command_header, print_info, print_success, print_warning
from ci_cli.core.agent_markdown import iter_agent_entries
from ci_cli.core.docs_site import build_docs_site, build_web_app, render_index
from ci_cli.core.models import AgentEntry
from ci_cli.exceptions import ConfigurationError, UnknownCommandError, ValidationError
from ci_cli.infra import docs_publisher
from ci_cli.infra.agent_workspace import AgentWorkspace
from ci_cli.infra.browser import open_in_browser
from ci_cli.infra.settings import Settings, load_settings

DEFAULT_OUTPUT: str = "docs"
DEFAULT_APP_OUTPUT: str = "ci-app"
DEPLOY_TARGETS: tuple[str, ...] = ("github-pages", "vercel", "local")


def _yes_no(flag: bool) -> str:
    return "[green]Yes[/green]" if flag else "[red]No[/red]"


def _agents(settings: Settings) -> list[AgentEntry]:
    """Agents listed in the CI repository's AGENTS.md; empty without a repository."""
    try:
        ci_path = settings.ci_path
    except ConfigurationError:
        return []
    content = AgentWorkspace(ci_path).read_agents_index()
    return iter_agent_entries(content) if content else []


def run_serve(
    *,
    temp: bool = False,
    port: int = docs_publisher.DEFAULT_PORT,
    open_browser: bool = False,
    watch: bool = False,
    settings: Settings | None = None,
) -> int:
    """Write ``index.html`` and serve it on localhost until Ctrl+C."""
    settings = settings or load_settings()
    print_command_header("CI Documentation Server", "📚", "Documentation", "cyan")
    console.print(f"📝 Mode: {'[yellow]Temporary[/yellow]' if temp else '[green]Persistent[/green]'}")
    console.print(f"🌐 Port: [cyan]{port}[/cyan]")
    console.print(f"👀 Watch: {'[green]Enabled[/green]' if watch else '[red]Disabled[/red]'}")
    console.print()

    if temp:
        page = Path(tempfile.gettempdir()) / "ci_docs.html"
        console.print(f"📄 Temporary file: {escape(str(page))}")
    else:
        page = settings.ci_path / "docs" / "cli" / "index.html"
        console.print(f"📄 Documentation file: {escape(str(page))}")

    def regenerate() -> None:
        docs_publisher.write_page(page, render_index(_agents(settings)))

    regenerate()
    server = docs_publisher.make_server(
        page.parent,
        port,
        regenerate=regenerate if watch else None,
        page=page.name,
    )
    url = f"http://localhost:{port}/{page.name}"
    console.print(f"🚀 Starting server on port {port}")
    if open_browser:
        console.print("🌐 Opening browser...")
        if not open_in_browser(url):
            print_warning(f"Could not open a browser; visit {url}")
    console.print("💡 Press Ctrl+C to stop the server")
    console.print(f"🌐 Visit: [cyan]{url}[/cyan]")
    try:
        docs_publisher.serve_forever(server)
    except KeyboardInterrupt:
        console.print()
        print_info("Server stopped")
    console.print(f"📋 Documentation ready at: {escape(str(page))}")
    return exit_codes.SUCCESS


def run_generate(
    output: str | None = None,
    *,
    interactive: bool = False,
    agents: bool = False,
    theme: str = "auto",
    settings: Settings | None = None,
) -> int:
    settings = settings or load_settings()
    target = Path(output or DEFAULT_OUTPUT)
    print_command_header("Generate CI Documentation", "📚", "Documentation", "cyan")
    console.print(f"📁 Output: [cyan]{escape(str(target))}[/cyan]")
    console.print(f"🎯 Interactive: {_yes_no(interactive)}")
    console.print(f"🤖 Agent Gallery: {_yes_no(agents)}")
    console.print(f"🎨 Theme: [yellow]{escape(theme)}[/yellow]")
    console.print()

    files = build_docs_site(_agents(settings), interactive=interactive, include_agents=agents, theme=theme)
    docs_publisher.write_site(files, target)
    print_success("Documentation generated successfully!")
    console.print(f"📂 Files created in: {escape(str(target))}")
    return exit_codes.SUCCESS


def run_app(
    output: str | None = None,
    *,
    interactive: bool = False,
    examples: bool = False,
    visualizer: bool = False,
    settings: Settings | None = None,
) -> int:
    settings = settings or load_settings()
    target = Path(output or DEFAULT_APP_OUTPUT)
    print_command_header("Create CI Web App", "🧩", "Documentation", "magenta")
    console.print(f"📁 Output: [cyan]{escape(str(target))}[/cyan]")
    console.print(f"🎯 Interactive Builder: {_yes_no(interactive)}")
    console.print(f"📋 Live Examples: {_yes_no(examples)}")
    console.print(f"📊 Agent Visualizer: {_yes_no(visualizer)}")
    console.print()

    files = build_web_app(
        _agents(settings), interactive=interactive, examples=examples, visualizer=visualizer,
    )
    docs_publisher.write_site(files, target)
    print_success("Interactive web app created!")
    console.print(f"📂 Files created in: {escape(str(target))}")
    return exit_codes.SUCCESS


def run_deploy(
    target: str,
    *,
    repo: str | None = None,
    branch: str = docs_publisher.DEFAULT_PAGES_BRANCH,
    project: str | None = None,
    path: str | None = None,
    symlink: bool = False,
    settings: Settings | None = None,
) -> int:
    """Publish a freshly generated site to GitHub Pages, Vercel or a local path."""
    if target not in DEPLOY_TARGETS:
        raise UnknownCommandError(
            f"Unknown deploy target: {target}. Valid options: {', '.join(DEPLOY_TARGETS)}",
        )
    settings = settings or load_settings()
    print_command_header("Deploy CI Documentation", "🚀", "Documentation", "green")
    files = build_docs_site(_agents(settings), interactive=True, include_agents=True)

    if target == "github-pages":
        remote = docs_publisher.deploy_github_pages(files, repo=repo, branch=branch, cwd=Path.cwd())
        print_success(f"Documentation pushed to {remote} ({branch})")
        return exit_codes.SUCCESS

    if target == "vercel":
        docs_publisher.deploy_vercel(files, project=project)
        print_success("Documentation deployed to Vercel")
        return exit_codes.SUCCESS

    if not path:
        raise ValidationError("A target path is required for local deployment")
    destination = Path(path).expanduser()
    with tempfile.TemporaryDirectory(prefix="ci_docs_") as tmp:
        if symlink:
            # a symlink needs a site that outlives this command
            site = settings.data_dir / "ci" / "docs-site"
        else:
            site = Path(tmp)
        docs_publisher.write_site(files, site)
        docs_publisher.deploy_local(site, destination, symlink=symlink)
    verb = "Linked" if symlink else "Copied"
    print_success(f"{verb} documentation to {destination}")
    return exit_codes.SUCCESS


def run_docs(subcommand: str, **options) -> int:
    if subcommand == "serve":
        return run_serve(**options)
    if subcommand == "generate":
        return run_generate(**options)
    if subcommand == "app":
        return run_app(**options)
    if subcommand == "deploy":
        return run_deploy(**options)
    raise UnknownCommandError(f"Unknown docs subcommand: {subcommand}")
