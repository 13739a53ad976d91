"""CLI application entry point and command routing for ci.

This module is the **sole error boundary** for the entire application.
It catches :class:`~ci_cli.exceptions.CIError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here.  Every command is delegated to a
  ``run_*`` function in its own ``ci_cli.cli`` module, imported lazily so
  that ``--help`` and ``--version`` work without optional dependencies.
* ``print()`` is forbidden outside the CLI layer; the Rich console proxy
  is used instead.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from ci_cli.cli import exit_codes
from ci_cli.cli.console import console, escape
from ci_cli.exceptions import CIError
from ci_cli.version import __version__

PROG: str = "ci"


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _add_agent_commands(sub: argparse._SubParsersAction) -> None:
    sub.add_parser("intent", help="Show what CI is for.")

    agents = sub.add_parser("agents", help="List available agents.")
    agents.add_argument("--summary", action="store_true", help="Sorted list with usage counts.")

    load = sub.add_parser("load", help="Load one or more agents into Claude Code.")
    load.add_argument("agents", nargs="+", metavar="AGENT", help="Agent name, or Name*N for N instances.")
    load.add_argument("-c", "--context", help="Context passed to the agent session.")
    load.add_argument("-f", "--path", dest="memory_path", help="Write the extracted memory here.")
    load.add_argument("-p", "--prompt", action="store_true", help="Ask before launching Claude Code.")
    load.add_argument("--yes", action="store_true", help="Launch without asking.")
    load.add_argument("--parallel", action="store_true", help="Start every instance as its own process.")


def _add_lifecycle_commands(sub: argparse._SubParsersAction) -> None:
    init = sub.add_parser("init", help="Create a new project with CI integration.")
    init.add_argument("project_name", metavar="NAME")
    init.add_argument("--agents", help="Comma-separated agent names (default: Athena,ProjectArchitect).")
    init.add_argument("--no-fast", dest="fast", action="store_false", help="Disable fast activation.")

    integrate = sub.add_parser("integrate", help="Add CI to an existing project.")
    integrate.add_argument("path", nargs="?", default=".", help="Project directory (default: .).")
    integrate.add_argument("--agents", help="Comma-separated agent names.")
    integrate.add_argument("--no-fast", dest="fast", action="store_const", const=False, default=None)
    integrate.add_argument("--integration", choices=("standalone", "override"), default="standalone")

    verify = sub.add_parser("verify", help="Check the CI integration of a project.")
    verify.add_argument("path", nargs="?", default=".")

    fix = sub.add_parser("fix", help="Repair CLAUDE.local.md, .env and .gitignore.")
    fix.add_argument("path", nargs="?", default=".")
    fix.add_argument("--verify", action="store_true", help="Verify the project afterwards.")


def _add_project_commands(sub: argparse._SubParsersAction) -> None:
    brain = sub.add_parser("brain", help="Register and inspect the BRAIN.")
    brain_sub = brain.add_subparsers(dest="brain_command", metavar="COMMAND")
    register = brain_sub.add_parser("register", help="Register a BRAIN location.")
    register.add_argument("path")
    brain_sub.add_parser("health", help="Check BRAIN health.")
    brain_sub.add_parser("source", help="Show BRAIN sources.")
    brain_sub.add_parser("test", help="Test BRAIN functionality.")
    brain_sub.add_parser("status", help="Show the BRAIN registration.")

    config = sub.add_parser("config", help="Manage .ci-config.json.")
    config.add_argument("subcommand", metavar="SUB", help="init, get, set, show, integration, agents, project.")
    config.add_argument("path", nargs="?", default=".", help="Project directory (default: .).")
    config.add_argument("--project-name")
    config.add_argument("--agents", help="Comma-separated agent names.")
    config.add_argument("--fast", action=argparse.BooleanOptionalAction, default=None)
    config.add_argument("--key")
    config.add_argument("--value")
    config.add_argument("--format", dest="output_format", choices=("text", "json"), default="text")

    idea = sub.add_parser("idea", help="Track ideas.")
    idea.add_argument("subcommand", metavar="SUB", help="list, add, view, update, delete, categories, tags.")
    idea.add_argument("-t", "--title")
    idea.add_argument("-d", "--description")
    idea.add_argument("-c", "--category")
    idea.add_argument("--tags", help="Comma-separated tags.")
    idea.add_argument("-i", "--id", dest="idea_id")
    idea.add_argument("-s", "--status")
    idea.add_argument("-p", "--priority")
    idea.add_argument("-f", "--filter", dest="filter_text")
    idea.add_argument("--notes")
    idea.add_argument("--related", help="Comma-separated related idea ids.")
    idea.add_argument("--yes", action="store_true", help="Do not ask before deleting.")

    ls = sub.add_parser("ls", help="Grouped directory listing.")
    ls.add_argument("directory", nargs="?", default=None)


def _add_source_control_commands(sub: argparse._SubParsersAction) -> None:
    sub.add_parser("status", help="Show CI integration status.")
    sub.add_parser("ignore", help="Add CI patterns to .gitignore.")
    sub.add_parser("stage", help="Update .gitignore and stage all changes.")
    commit = sub.add_parser("commit", help="Commit staged changes.")
    commit.add_argument("-m", "--message")
    sub.add_parser("deploy", help="Stage, commit and push.")

    repo = sub.add_parser("repo", help="GitHub repositories (requires gh).")
    repo_sub = repo.add_subparsers(dest="repo_command", metavar="COMMAND")
    repo_sub.add_parser("list", help="List your repositories.")
    create = repo_sub.add_parser("create", help="Create a repository.")
    create.add_argument("name")
    create.add_argument("-d", "--description")
    create.add_argument("--private", action="store_true")
    create.add_argument("--yes", action="store_true", help="Do not offer to clone.")
    clone = repo_sub.add_parser("clone", help="Clone a repository.")
    clone.add_argument("repo")
    clone.add_argument("-d", "--dir", dest="directory")
    view = repo_sub.add_parser("view", help="Show repository details.")
    view.add_argument("repo")


def _add_web_commands(sub: argparse._SubParsersAction) -> None:
    web = sub.add_parser("web", help="Run or deploy the web portal.")
    web_sub = web.add_subparsers(dest="web_command", metavar="COMMAND")
    web_open = web_sub.add_parser("open", help="Start the development server.")
    web_open.add_argument("--dev", action="store_true")
    web_sub.add_parser("deploy", help="Build and deploy.")

    docs = sub.add_parser("docs", help="HTML documentation.")
    docs_sub = docs.add_subparsers(dest="docs_command", metavar="COMMAND", required=True)
    serve = docs_sub.add_parser("serve", help="Serve the documentation locally.")
    serve.add_argument("--temp", action="store_true")
    serve.add_argument("--port", type=int, default=8080)
    serve.add_argument("--open", dest="open_browser", action="store_true")
    serve.add_argument("--watch", action="store_true")
    generate = docs_sub.add_parser("generate", help="Write a static documentation site.")
    generate.add_argument("-o", "--output")
    generate.add_argument("--interactive", action="store_true")
    generate.add_argument("--agents", action="store_true")
    generate.add_argument("--theme", default="auto")
    app = docs_sub.add_parser("app", help="Write the interactive web app.")
    app.add_argument("--interactive", action="store_true")
    app.add_argument("--examples", action="store_true")
    app.add_argument("--visualizer", action="store_true")
    app.add_argument("-o", "--output")
    deploy = docs_sub.add_parser("deploy", help="Publish the documentation.")
    target_sub = deploy.add_subparsers(dest="target", metavar="TARGET", required=True)
    pages = target_sub.add_parser("github-pages")
    pages.add_argument("--repo")
    pages.add_argument("--branch", default="gh-pages")
    vercel = target_sub.add_parser("vercel")
    vercel.add_argument("--project")
    local = target_sub.add_parser("local")
    local.add_argument("path")
    local.add_argument("--symlink", action="store_true")


def _add_visualize_command(sub: argparse._SubParsersAction) -> None:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--format", dest="fmt", choices=("terminal", "web", "svg", "mermaid", "auto"))
    common.add_argument("--theme", choices=("dark", "light", "contrast", "terminal"))
    common.add_argument("--web", action="store_true")
    common.add_argument("--svg", action="store_true")
    common.add_argument("--dark", action="store_true")
    common.add_argument("--light", action="store_true")
    common.add_argument("--save", action="store_true")

    visualize = sub.add_parser("visualize", help="Diagrams of the CI ecosystem.")
    views = visualize.add_subparsers(dest="view", metavar="VIEW", required=True)
    overview = views.add_parser("overview", parents=[common])
    overview.add_argument("--interactive", action="store_true")
    overview.add_argument("--export", metavar="FILE")
    commands = views.add_parser("commands", parents=[common])
    commands.add_argument("--group")
    commands.add_argument("--tree", action="store_true")
    commands.add_argument("--interactive", action="store_true")
    agents = views.add_parser("agents", parents=[common])
    agents.add_argument("--category")
    agents.add_argument("--network", action="store_true")
    agents.add_argument("--interactive", action="store_true")
    workflows = views.add_parser("workflows", parents=[common])
    workflows.add_argument("--beginner", action="store_true")
    workflows.add_argument("--category")
    project = views.add_parser("project", parents=[common])
    project.add_argument("name", nargs="?")
    project.add_argument("--detailed", action="store_true")


def _add_system_commands(sub: argparse._SubParsersAction) -> None:
    legacy = sub.add_parser("legacy", help="Pre-1.0 command names.")
    legacy.add_argument("--list", dest="list_commands", action="store_true")
    legacy.add_argument("--create", action="store_true")
    legacy.add_argument("--remove", action="store_true")
    legacy.add_argument("--bin-dir")
    legacy.add_argument("legacy_command", nargs="?", metavar="COMMAND")
    legacy.add_argument("legacy_args", nargs=argparse.REMAINDER, metavar="ARGS")

    sub.add_parser("doctor", help="Check the environment.")


def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser with one sub-parser per command."""
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Collaborative Intelligence command-line tool.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr.")
    parser.add_argument("-d", "--debug", action="store_true", help="Log debugging detail to stderr.")

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    _add_agent_commands(sub)
    _add_lifecycle_commands(sub)
    _add_project_commands(sub)
    _add_source_control_commands(sub)
    _add_web_commands(sub)
    _add_visualize_command(sub)
    _add_system_commands(sub)
    return parser


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_agents(args: argparse.Namespace) -> int:
    from ci_cli.cli import agents

    if args.command == "intent":
        return agents.run_intent()
    if args.command == "agents":
        return agents.run_agents(summary=args.summary)
    return agents.run_load(
        args.agents,
        context=args.context,
        memory_path=args.memory_path,
        prompt=args.prompt,
        assume_yes=args.yes,
        parallel=args.parallel,
    )


def _handle_lifecycle(args: argparse.Namespace) -> int:
    from ci_cli.cli import lifecycle

    if args.command == "init":
        return lifecycle.run_init(args.project_name, agents=args.agents, fast_activation=args.fast)
    if args.command == "integrate":
        return lifecycle.run_integrate(
            Path(args.path), agents=args.agents, fast_activation=args.fast, integration=args.integration,
        )
    if args.command == "verify":
        return lifecycle.run_verify(Path(args.path))
    return lifecycle.run_fix(Path(args.path), verify=args.verify)


def _handle_brain(args: argparse.Namespace) -> int:
    from ci_cli.cli import brain

    command = args.brain_command or "status"
    if command == "register":
        return brain.run_register(args.path)
    return {
        "health": brain.run_health,
        "source": brain.run_source,
        "test": brain.run_test,
        "status": brain.run_status,
    }[command]()


def _handle_config(args: argparse.Namespace) -> int:
    from ci_cli.cli.config import run_config

    return run_config(
        args.subcommand,
        Path(args.path),
        project_name=args.project_name,
        agents=args.agents,
        fast=args.fast,
        key=args.key,
        value=args.value,
        output_format=args.output_format,
    )


def _handle_idea(args: argparse.Namespace) -> int:
    from ci_cli.cli.idea import run_idea

    return run_idea(
        args.subcommand,
        title=args.title,
        description=args.description,
        category=args.category,
        tags=args.tags,
        idea_id=args.idea_id,
        status=args.status,
        priority=args.priority,
        filter_text=args.filter_text,
        notes=args.notes,
        related=args.related,
        assume_yes=args.yes,
    )


def _handle_source_control(args: argparse.Namespace) -> int:
    from ci_cli.cli import source_control

    if args.command == "commit":
        return source_control.run_commit(args.message)
    return {
        "status": source_control.run_status,
        "ignore": source_control.run_ignore,
        "stage": source_control.run_stage,
        "deploy": source_control.run_deploy,
    }[args.command]()


def _handle_repo(args: argparse.Namespace) -> int:
    from ci_cli.cli.repo import run_repo

    return run_repo(
        args.repo_command,
        name=getattr(args, "name", None),
        description=getattr(args, "description", None),
        private=getattr(args, "private", False),
        repo=getattr(args, "repo", None),
        directory=getattr(args, "directory", None),
        assume_yes=getattr(args, "yes", False),
    )


def _handle_docs(args: argparse.Namespace) -> int:
    from ci_cli.cli import docs

    if args.docs_command == "serve":
        return docs.run_serve(temp=args.temp, port=args.port, open_browser=args.open_browser, watch=args.watch)
    if args.docs_command == "generate":
        return docs.run_generate(args.output, interactive=args.interactive, agents=args.agents, theme=args.theme)
    if args.docs_command == "app":
        return docs.run_app(
            args.output, interactive=args.interactive, examples=args.examples, visualizer=args.visualizer,
        )
    return docs.run_deploy(
        args.target,
        repo=getattr(args, "repo", None),
        branch=getattr(args, "branch", "gh-pages"),
        project=getattr(args, "project", None),
        path=getattr(args, "path", None),
        symlink=getattr(args, "symlink", False),
    )


def _handle_visualize(args: argparse.Namespace) -> int:
    from ci_cli.cli.visualize import run_visualize

    options = {
        key: value
        for key, value in vars(args).items()
        if key in ("interactive", "export", "group", "tree", "category", "network", "beginner", "name", "detailed")
    }
    return run_visualize(
        args.view,
        fmt=args.fmt,
        theme=args.theme,
        web=args.web,
        svg=args.svg,
        dark=args.dark,
        light=args.light,
        save=args.save,
        **options,
    )


def _handle_legacy(args: argparse.Namespace) -> int:
    from ci_cli.cli.legacy import run_legacy

    return run_legacy(
        args.legacy_command,
        args.legacy_args,
        list_commands=args.list_commands,
        create=args.create,
        remove=args.remove,
        bin_dir=args.bin_dir,
    )


def _handle_doctor() -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from ci_cli.cli.doctor import run_doctor

    return run_doctor()


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the ci CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        _setup_logging("DEBUG")
    elif args.verbose:
        _setup_logging("INFO")
    else:
        from ci_cli.infra.settings import load_settings

        _setup_logging(load_settings().log_level)

    command: str | None = args.command
    if command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    if command in ("intent", "agents", "load"):
        return _handle_agents(args)
    if command in ("init", "integrate", "verify", "fix"):
        return _handle_lifecycle(args)
    if command == "brain":
        return _handle_brain(args)
    if command == "config":
        return _handle_config(args)
    if command == "idea":
        return _handle_idea(args)
    if command == "ls":
        from ci_cli.cli.ls import run_ls

        return run_ls(args.directory)
    if command in ("status", "ignore", "stage", "commit", "deploy"):
        return _handle_source_control(args)
    if command == "repo":
        return _handle_repo(args)
    if command == "web":
        from ci_cli.cli.web import run_web

        return run_web(args.web_command, dev=getattr(args, "dev", False))
    if command == "docs":
        return _handle_docs(args)
    if command == "visualize":
        return _handle_visualize(args)
    if command == "legacy":
        return _handle_legacy(args)
    return _handle_doctor()


def _invoked_as_legacy(argv0: str) -> str | None:
    """The legacy command name this process was started under, if any."""
    from ci_cli.core.legacy import is_legacy_command

    name = Path(argv0).name
    if name != PROG and is_legacy_command(name):
        return name
    return None


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.  When started
    through a legacy symlink the call is forwarded to ``ci legacy``.
    """
    try:
        argv = sys.argv[1:]
        legacy_name = _invoked_as_legacy(sys.argv[0])
        if legacy_name is not None:
            argv = ["legacy", legacy_name, *argv]
        code = main(argv)
        sys.exit(code)
    except CIError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(str(exc))}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
