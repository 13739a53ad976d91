"""``ci intent``, ``ci agents`` and ``ci load``.

Renders agent listings and drives the agent-load flow: the
:class:`~ci_cli.core.agent_loader.AgentLoadService` prepares the
working memory, this module prints it and hands it to Claude Code.
"""

from __future__ import annotations

import os
import sys
import time
from pathlib import Path

from ci_cli.cli import exit_codes
from ci_cli.cli.console import console, escape, out
from ci_cli.cli.output import (
    print_command_header,
    print_divider,
    print_info,
    print_success,
    print_warning,
)
from ci_cli.core.agent_loader import AgentLoadService, PreparedAgent
from ci_cli.core.agent_markdown import iter_agent_entries, section_lines, summary_description
from ci_cli.core.agent_session import expand_agent_specs
from ci_cli.core.project_config import should_auto_accept
from ci_cli.infra.agent_workspace import AgentWorkspace
from ci_cli.infra.config_store import find_nearest_config
from ci_cli.infra.process import run_command, spawn_detached
from ci_cli.infra.settings import Settings, load_settings
from ci_cli.infra.tool_detector import detect_tool

INTENT_SECTIONS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Project Integration", (
        "Initialize new projects with CI capabilities",
        "Integrate CI into existing projects",
        "Standalone or override integration alongside an existing CLAUDE.md",
    )),
    ("Agent Management", (
        "Configure AI agents for specific project needs",
        "Access specialized agents like Athena and ProjectArchitect",
        "Customize agent behavior through CLAUDE.md files",
    )),
    ("System Management", (
        "Verify and repair CI integrations with ci verify and ci fix",
        "Manage configuration with the config command",
        "Keep pre-1.0 command names working through ci legacy",
    )),
)


# ---------------------------------------------------------------------------
# ci intent
# ---------------------------------------------------------------------------

def run_intent() -> int:
    out.print("Collaborative Intelligence Tool")
    out.print("=" * 41)
    out.print()
    out.print("The CI tool enables the integration of Collaborative Intelligence into")
    out.print("your projects, enhancing productivity through AI-assisted workflows.")
    out.print()
    out.print("Core Capabilities:")
    for number, (title, items) in enumerate(INTENT_SECTIONS, start=1):
        out.print()
        out.print(f"{number}. {title}")
        for item in items:
            out.print(f"   - {item}")
    out.print()
    out.print("Workflow Integration:")
    out.print("CI integrates with your development workflow by creating and managing")
    out.print("configuration files that provide context and guidance to AI assistants.")
    out.print()
    out.print("Getting Started:")
    out.print("  ci init <name>          # create a new CI project")
    out.print("  ci integrate            # add CI to the current project")
    out.print("  ci agents               # list available agents")
    out.print("  ci load <agent>         # load an agent into Claude Code")
    out.print()
    out.print("For more information on any command, use: ci <command> --help")
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# ci agents
# ---------------------------------------------------------------------------

def _print_summary(workspace: AgentWorkspace, content: str) -> None:
    entries = sorted(iter_agent_entries(content), key=lambda e: e.name.lower())
    print_divider()
    console.print("[bold]Available Agents:[/bold]")
    console.print()
    for entry in entries:
        suffix = f"- {entry.description}" if entry.description else f"[Use: ci load {entry.name}]"
        out.print(f"• {entry.name} {suffix}")
        description = summary_description(section_lines(content, entry.name))
        out.print(f"  {description or 'No description available'}")
        usage = workspace.usage_count(entry.name)
        if usage > 0:
            out.print(f"  Used {usage} times")
    console.print()
    console.print("For more information on a specific agent:")
    console.print("  [cyan]ci load <agent-name>[/cyan]")
    console.print("  [cyan]ci load <agent-name> --context=<context>[/cyan]")


def run_agents(summary: bool = False, settings: Settings | None = None) -> int:
    settings = settings or load_settings()
    workspace = AgentWorkspace(settings.ci_path)

    if summary:
        index = workspace.read_agents_index()
        if index is not None:
            _print_summary(workspace, index)
            return exit_codes.SUCCESS
        print_warning("AGENTS.md not found; listing agent directories instead")
    else:
        listing = workspace.read_agent_listing()
        if listing is not None:
            _, content = listing
            out.print(content, end="")
            return exit_codes.SUCCESS

    directories = workspace.scan_agent_directories()
    if directories:
        console.print("[bold]Available Collaborative Intelligence Agents[/bold]")
        console.print(f"Scanning agent directories from: {escape(str(workspace.agents_dir))}")
        console.print()
        for agent in directories:
            out.print(f"🤖 {agent.name}")
            out.print(f"   {agent.description or 'No description available'}")
            out.print()
        return exit_codes.SUCCESS

    console.print("[bold red]❌ No agents found[/bold red]")
    console.print("Could not locate agent information in:")
    for location in workspace.searched_locations():
        console.print(f"  • {escape(str(location))}")
    console.print("Please check your CI repository path configuration.")
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# ci load
# ---------------------------------------------------------------------------

def _manual_instructions(working_path: str) -> None:
    print_info("To use this agent in Claude Code:")
    print_info(f"  cat {working_path} | claude code")
    print_info("  # or")
    print_info(f"  claude code < {working_path}")


def _should_launch(agent_name: str, prompt: bool, assume_yes: bool) -> bool:
    """Launch unless ``--prompt`` was given and the answer (or config) says no."""
    if assume_yes or not prompt:
        return True
    nearest = find_nearest_config(Path.cwd())
    if nearest is not None and should_auto_accept(nearest[1], agent_name, "load"):
        print_info("Auto-accepting launch (project config)")
        return True
    from ci_cli.cli.prompts import confirm

    return confirm("Launch Claude Code with this agent now?", default=True)


def _launch_claude(service: AgentLoadService, prepared: PreparedAgent) -> None:
    if not detect_tool("claude").found:
        print_warning("Claude CLI not found. Please use one of the following methods:")
        _manual_instructions(prepared.working_path)
        return

    console.print(f"Launching Claude Code with [bold cyan]{escape(prepared.name)}[/bold cyan]...")
    result = run_command(
        ["claude", "code"],
        capture=False,
        env=prepared.environment,
        stdin_path=prepared.working_path,
    )
    if not result.ok:
        print_warning("Claude Code exited with a non-zero status")
    service.finish(prepared)


def load_single(
    agent_name: str,
    *,
    context: str | None = None,
    memory_path: str | None = None,
    prompt: bool = False,
    assume_yes: bool = False,
    settings: Settings | None = None,
) -> int:
    settings = settings or load_settings()
    print_command_header(f"Load agent: {agent_name}", "🧠", "Intelligence & Discovery", "blue")
    if context:
        print_info(f"Context: {context}")
    if memory_path:
        print_info(f"Custom path: {memory_path}")

    service = AgentLoadService(AgentWorkspace(settings.ci_path))
    prepared = service.prepare(
        agent_name,
        context=context,
        memory_target=memory_path,
        working_directory=os.getcwd(),
    )

    print_divider()
    print_info(f"Agent Memory: {agent_name}")
    print_divider()
    out.print(prepared.content)
    print_success(f"Agent {agent_name} loaded successfully")

    if _should_launch(agent_name, prompt, assume_yes):
        _launch_claude(service, prepared)
    else:
        _manual_instructions(prepared.working_path)
    return exit_codes.SUCCESS


def load_parallel(
    agent_names: list[str],
    *,
    context: str | None = None,
    settings: Settings | None = None,
) -> int:
    """Start one independent ``ci load <name> --yes`` process per name.

    Launches are spaced by ``Settings.parallel_launch_delay``; the
    children are never waited on.
    """
    settings = settings or load_settings()
    print_command_header(
        f"Parallel load: {len(agent_names)} agent instances", "🧠", "Intelligence & Discovery", "blue",
    )
    for index, name in enumerate(agent_names, start=1):
        args = [sys.executable, "-m", "ci_cli", "load", name, "--yes"]
        if context:
            args.extend(["--context", context])
        spawn_detached(args)
        print_info(f"[{index}/{len(agent_names)}] Launched {name}")
        if index < len(agent_names) and settings.parallel_launch_delay > 0:
            time.sleep(settings.parallel_launch_delay)
    print_success(f"Started {len(agent_names)} agent sessions")
    return exit_codes.SUCCESS


def run_load(
    specs: list[str],
    *,
    context: str | None = None,
    memory_path: str | None = None,
    prompt: bool = False,
    assume_yes: bool = False,
    parallel: bool = False,
) -> int:
    names = expand_agent_specs(specs)
    if len(names) == 1 and not parallel:
        return load_single(
            names[0],
            context=context,
            memory_path=memory_path,
            prompt=prompt,
            assume_yes=assume_yes,
        )
    return load_parallel(names, context=context)
