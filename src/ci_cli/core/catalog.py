"""Static descriptions of the ci command surface and agent taxonomy.

Shared by ``ci docs`` and ``ci visualize`` so both render the same
picture of the tool.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CommandInfo:
    """A documented command with its one-line summary and an example."""

    name: str
    summary: str
    example: str


@dataclass(frozen=True, slots=True)
class CommandCategory:
    name: str
    color: str
    commands: tuple[CommandInfo, ...]


@dataclass(frozen=True, slots=True)
class Workflow:
    name: str
    category: str
    steps: tuple[str, ...]
    beginner: bool = False


COMMAND_CATEGORIES: tuple[CommandCategory, ...] = (
    CommandCategory("Intelligence", "blue", (
        CommandInfo("intent", "Describe what ci is for", "ci intent"),
        CommandInfo("agents", "List available agents", "ci agents"),
        CommandInfo("load", "Load an agent into a Claude Code session", "ci load Athena"),
        CommandInfo("brain", "Register and inspect the BRAIN knowledge base", "ci brain status"),
    )),
    CommandCategory("Project Lifecycle", "cyan", (
        CommandInfo("init", "Create a new project with CI integration", "ci init my-project"),
        CommandInfo("integrate", "Add CI to an existing project", "ci integrate --integration override"),
        CommandInfo("verify", "Check a project's CI integration", "ci verify"),
        CommandInfo("fix", "Repair CLAUDE.local.md, .env and .gitignore", "ci fix --verify"),
    )),
    CommandCategory("Workflow", "green", (
        CommandInfo("idea", "Capture and track ideas", "ci idea add -t 'New parser'"),
        CommandInfo("status", "Show project integration status", "ci status"),
        CommandInfo("config", "Manage .ci-config.json", "ci config show"),
        CommandInfo("ls", "Grouped two-column file listing", "ci ls src"),
    )),
    CommandCategory("Source Control", "yellow", (
        CommandInfo("ignore", "Add recommended .gitignore patterns", "ci ignore"),
        CommandInfo("stage", "Update .gitignore and stage all changes", "ci stage"),
        CommandInfo("commit", "Commit staged changes", "ci commit -m 'Update docs'"),
        CommandInfo("deploy", "Stage, commit and push", "ci deploy"),
        CommandInfo("repo", "Manage GitHub repositories through gh", "ci repo list"),
    )),
    CommandCategory("Web & Docs", "magenta", (
        CommandInfo("web", "Run or deploy the CI web portal", "ci web open --dev"),
        CommandInfo("docs", "Serve, generate and deploy documentation", "ci docs serve --open"),
        CommandInfo("visualize", "Visualize commands, agents and workflows", "ci visualize overview"),
    )),
    CommandCategory("System", "red", (
        CommandInfo("doctor", "Check the local environment", "ci doctor"),
        CommandInfo("legacy", "Manage legacy command aliases", "ci legacy --list"),
    )),
)

COMPONENTS: tuple[tuple[str, str], ...] = (
    ("Intelligence", "Agent discovery, loading and the BRAIN knowledge base"),
    ("Commands", "Command-line surface and legacy aliases"),
    ("Projects", "Per-project .ci-config.json configuration"),
    ("Sessions", "Agent metadata, session records and working memory"),
    ("Memory", "Agent memory files extracted from AGENTS.md"),
    ("Config", "CI repository discovery through CI_PATH"),
)

WORKFLOWS: tuple[Workflow, ...] = (
    Workflow("Getting Started", "Onboarding", ("ci integrate", "ci verify", "ci agents", "ci load Athena"), beginner=True),
    Workflow("New Project", "Onboarding", ("ci init <name>", "cd <name>", "ci verify", "ci fix")),
    Workflow("Basic Development", "Development", ("ci status", "ci stage", "ci commit"), beginner=True),
    Workflow("Agent Exploration", "Intelligence", ("ci visualize agents", "ci load <agent>", "ci intent"), beginner=True),
    Workflow("Knowledge Base", "Intelligence", ("ci brain register <path>", "ci brain health", "ci brain source")),
    Workflow("Idea Pipeline", "Planning", ("ci idea add -t <title>", "ci idea list", "ci idea update -i <id> -s development")),
    Workflow("Publish Changes", "Source Control", ("ci ignore", "ci stage", "ci commit -m <msg>", "ci deploy")),
    Workflow("Parallel Documentation", "Intelligence", ('ci load "Documentor*3" --parallel',)),
    Workflow("Documentation Site", "Documentation", ("ci docs generate -o site", "ci docs deploy local ./public")),
)

_AGENT_CATEGORY_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Development", ("develop", "engineer", "coder", "programmer", "builder")),
    ("Architecture", ("architect", "designer", "planner")),
    ("Testing", ("test", "debug", "fixer", "verif")),
    ("Analysis", ("analy", "research", "inspector", "athena", "scholar")),
    ("Documentation", ("document", "memory", "knowledge", "sage", "mnemosyne")),
    ("Operations", ("automat", "deploy", "ops", "system", "admin")),
    ("Management", ("manager", "coordinat", "hermes")),
    ("Optimization", ("optim", "performance", "benchmark", "streamlin")),
    ("User Experience", ("ui", "ux", "user", "visual")),
)
DEFAULT_AGENT_CATEGORY: str = "Specialized"


def all_commands() -> list[CommandInfo]:
    return [command for category in COMMAND_CATEGORIES for command in category.commands]


def categorize_agent(name: str) -> str:
    """Bucket an agent by keywords in its name."""
    lowered = name.lower()
    for category, keywords in _AGENT_CATEGORY_RULES:
        if any(keyword in lowered for keyword in keywords):
            return category
    return DEFAULT_AGENT_CATEGORY


def agent_category_counts(names: Iterable[str]) -> list[tuple[str, int]]:
    """``(category, count)`` pairs, largest first, ties alphabetical."""
    counts: dict[str, int] = {}
    for name in names:
        category = categorize_agent(name)
        counts[category] = counts.get(category, 0) + 1
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))


def group_agents(names: Iterable[str]) -> dict[str, list[str]]:
    """Sorted agent names keyed by category."""
    grouped: dict[str, list[str]] = {}
    for name in sorted(names, key=str.lower):
        grouped.setdefault(categorize_agent(name), []).append(name)
    return grouped


def select_workflows(beginner: bool = False, category: str | None = None) -> list[Workflow]:
    """Workflows filtered by beginner flag and case-insensitive category."""
    wanted = category.lower() if category else None
    return [
        workflow
        for workflow in WORKFLOWS
        if (not beginner or workflow.beginner)
        and (wanted is None or workflow.category.lower() == wanted)
    ]
