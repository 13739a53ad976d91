"""``ci web``: run or deploy the CollaborativeIntelligence web portal."""

from __future__ import annotations

from pathlib import Path

from ci_cli.cli import exit_codes
from ci_cli.cli.console import console, escape
from ci_cli.cli.output import print_command_header, print_info, print_success
from ci_cli.exceptions import UnknownCommandError
from ci_cli.infra import web_portal

SUBCOMMANDS: tuple[str, ...] = ("open", "deploy")


def _locate() -> Path:
    web_dir = web_portal.find_web_directory(Path.cwd(), Path.home())
    web_portal.require_package_json(web_dir)
    console.print(f"📂 Web directory: [cyan]{escape(str(web_dir))}[/cyan]")
    return web_dir


def _help() -> int:
    print_command_header("Web Portal", "🌐", "Web", "cyan")
    console.print("[bold]Available Web Commands:[/bold]")
    console.print(f"  [magenta]{'open':<12}[/magenta] Open the web portal (runs development server)")
    console.print(f"  [magenta]{'deploy':<12}[/magenta] Deploy the web portal (build + deploy)")
    console.print()
    console.print("[bold]Options:[/bold]")
    console.print(f"  [magenta]{'--dev':<12}[/magenta] Run in development mode (for open command)")
    console.print()
    console.print("[bold]Examples:[/bold]")
    console.print("  ci web               # Show this help")
    console.print("  ci web open          # Start development server")
    console.print("  ci web open --dev    # Explicitly start development server")
    console.print("  ci web deploy        # Build and deploy the web portal")
    return exit_codes.SUCCESS


def run_open(dev: bool = False) -> int:
    """Start the portal's development server in the foreground.

    ``--dev`` is accepted for symmetry with ``npm start``; both modes run
    the same script.
    """
    print_command_header("Opening Web Portal", "🌐", "Web", "cyan")
    web_dir = _locate()
    console.print("🚀 Starting development server...")
    console.print()
    web_portal.start_dev_server(web_dir)
    print_success("Development server stopped")
    return exit_codes.SUCCESS


def run_deploy() -> int:
    print_command_header("Deploying Web Portal", "🚀", "Web", "green")
    web_dir = _locate()
    console.print("📦 Building project for production...")
    console.print()
    web_portal.build(web_dir)
    console.print()
    print_success("Build completed successfully")

    result = web_portal.deploy(web_dir)
    if result.method == "vercel":
        print_success("Web portal deployed to Vercel successfully")
        console.print("🌐 Your web portal is now live!")
    elif result.method == "script":
        print_success("Web portal deployed successfully")
    else:
        print_info("Build completed. Manual deployment required.")
        if result.build_output is not None:
            console.print(f"   📁 Build output: [cyan]{escape(str(result.build_output))}[/cyan]")
        else:
            console.print("   Build files are available in the project's build/dist directory")
    return exit_codes.SUCCESS


def run_web(subcommand: str | None = None, *, dev: bool = False) -> int:
    if subcommand is None:
        return _help()
    if subcommand == "open":
        return run_open(dev)
    if subcommand == "deploy":
        return run_deploy()
    raise UnknownCommandError(
        f"Unknown web command: {subcommand}. Valid options: {', '.join(SUBCOMMANDS)}",
    )
