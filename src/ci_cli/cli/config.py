"""``ci config``: per-project ``.ci-config.json`` management."""

from __future__ import annotations

import json
from pathlib import Path

from ci_cli.cli import exit_codes
from ci_cli.cli.console import out
from ci_cli.cli.output import print_command_header, print_info, print_success
from ci_cli.core.models import ProjectConfig
from ci_cli.core.project_config import (
    apply_setting,
    config_to_json,
    new_project_config,
    parse_agents,
    read_setting,
)
from ci_cli.exceptions import NotFoundError, UnknownCommandError, ValidationError
from ci_cli.infra.config_store import config_path, find_nearest_config, save_config

SUBCOMMANDS: tuple[str, ...] = ("init", "get", "set", "show", "integration", "agents", "project")

# alias subcommand -> the key it reads or writes
_ALIASES: dict[str, str] = {
    "integration": "integration_type",
    "agents": "active_agents",
    "project": "project_name",
}


def _nearest(path: Path) -> tuple[Path, ProjectConfig]:
    found = find_nearest_config(path)
    if found is None:
        raise NotFoundError(
            f"No CI configuration found in {path} or any parent directory",
            hint="Create one with 'ci config init'.",
        )
    print_info(f"Using configuration from: {found[0]}")
    return found


def run_init(
    path: Path,
    project_name: str | None = None,
    agents: str | None = None,
    fast_activation: bool = True,
) -> int:
    if not path.is_dir():
        raise NotFoundError(f"Target directory '{path}' does not exist")
    target = config_path(path)
    if target.exists():
        raise ValidationError(
            f"CI configuration already exists at: {target}",
            hint="Use 'ci config set' to change individual values.",
        )

    name = project_name or path.resolve().name or "project"
    print_command_header(f"Initializing CI configuration for: {name}", "⚙️", "Configuration", "cyan")
    config = save_config(
        target,
        new_project_config(name, parse_agents(agents) if agents else None, fast_activation),
    )
    print_success(f"Created CI configuration at: {target}")
    print_info(f"Project name: {config.project_name}")
    print_info(f"Active agents: {', '.join(config.active_agents)}")
    print_info(f"Fast activation: {'true' if config.fast_activation else 'false'}")
    return exit_codes.SUCCESS


def run_get(path: Path, key: str) -> int:
    print_command_header(f"Get CI configuration value: {key}", "⚙️", "Configuration", "cyan")
    _, config = _nearest(path)
    value = read_setting(config, key)
    if value is None:
        raise NotFoundError(f"Configuration key not found: {key}")
    out.print(value)
    return exit_codes.SUCCESS


def run_set(path: Path, key: str, value: str) -> int:
    print_command_header(f"Set CI configuration value: {key}", "⚙️", "Configuration", "cyan")
    target, config = _nearest(path)
    save_config(target, apply_setting(config, key, value))
    if key == "integration_type":
        print_info(f"Integration type set to: {value}")
        print_info("Note: changing the integration type does not rewrite CLAUDE.md")
    print_success(f"Updated configuration value: {key} = {value}")
    return exit_codes.SUCCESS


def run_show(path: Path, output_format: str = "text") -> int:
    print_command_header("CI configuration", "⚙️", "Configuration", "cyan")
    _, config = _nearest(path)
    if output_format == "json":
        out.print(config_to_json(config))
        return exit_codes.SUCCESS

    out.print(f"Project name: {config.project_name}")
    out.print(f"CI version: {config.ci_version}")
    out.print(f"Created at: {config.created_at}")
    out.print(f"Updated at: {config.updated_at}")
    out.print(f"Active agents: {', '.join(config.active_agents)}")
    out.print(f"Fast activation: {'true' if config.fast_activation else 'false'}")
    if config.metadata:
        out.print()
        out.print("Metadata:")
        for key, value in config.metadata.items():
            shown = value if isinstance(value, str) else json.dumps(value, indent=2)
            out.print(f"  {key}: {shown}")
    return exit_codes.SUCCESS


def run_config(
    subcommand: str,
    path: Path,
    *,
    project_name: str | None = None,
    agents: str | None = None,
    fast: bool | None = None,
    key: str | None = None,
    value: str | None = None,
    output_format: str = "text",
) -> int:
    """Dispatch one ``ci config`` subcommand."""
    if subcommand == "init":
        return run_init(path, project_name, agents, True if fast is None else fast)
    if subcommand == "get":
        if not key:
            raise ValidationError("Key parameter is required for get command")
        return run_get(path, key)
    if subcommand == "set":
        if not key or value is None:
            raise ValidationError("Key and value parameters are required for set command")
        return run_set(path, key, value)
    if subcommand == "show":
        return run_show(path, output_format)
    if subcommand in _ALIASES:
        alias_key = _ALIASES[subcommand]
        if value is not None:
            return run_set(path, alias_key, value)
        return run_get(path, alias_key)
    raise UnknownCommandError(
        f"Unknown config subcommand: {subcommand}. Valid options: {', '.join(SUBCOMMANDS)}",
    )
