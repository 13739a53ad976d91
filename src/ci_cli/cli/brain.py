"""``ci brain``: register and inspect the BRAIN knowledge directory."""

from __future__ import annotations

import os
from pathlib import Path

from ci_cli.cli import exit_codes
from ci_cli.cli.console import console, escape, out
from ci_cli.cli.output import print_command_header, print_error, print_success
from ci_cli.exceptions import BrainError
from ci_cli.infra.brain_registry import BRAIN_DIRNAME, BrainCheck, BrainRegistry, count_brain_files
from ci_cli.infra.settings import Settings, load_settings


def _registry(settings: Settings | None) -> BrainRegistry:
    settings = settings or load_settings()
    return BrainRegistry(settings.brain_config_file)


def _print_check(check: BrainCheck) -> None:
    mark = "[green]✓[/green]" if check.passed else "[red]✗[/red]"
    detail = f" [dim]({escape(check.detail)})[/dim]" if check.detail else ""
    console.print(f"  {mark} {escape(check.label)}{detail}")


def run_register(path: str, settings: Settings | None = None) -> int:
    print_command_header("Register BRAIN", "🧠", "BRAIN Management", "cyan")
    target = Path(path).expanduser().resolve()
    count = _registry(settings).register(target)
    print_success(f"BRAIN registered: {target}")
    console.print(f"📚 Found {count} BRAIN files")
    return exit_codes.SUCCESS


def run_health(settings: Settings | None = None) -> int:
    print_command_header("BRAIN Health Check", "🩺", "BRAIN Management", "green")
    path = _registry(settings).require_registered()
    checks = BrainRegistry.health_checks(path)
    for check in checks:
        _print_check(check)
    failed = next((c for c in checks if not c.passed), None)
    if failed is not None:
        raise BrainError(f"BRAIN health check failed: {failed.label.lower()} ({failed.detail})")
    print_success("BRAIN is healthy")
    return exit_codes.SUCCESS


def run_source(settings: Settings | None = None) -> int:
    print_command_header("BRAIN Sources", "📚", "BRAIN Management", "blue")
    path = _registry(settings).require_registered()
    sources = BrainRegistry.sources(path)
    console.print(f"📂 {escape(str(path / BRAIN_DIRNAME))}")
    console.print()
    if sources.root_files:
        console.print("[bold]Root files:[/bold]")
        for name, size_kb in sources.root_files:
            out.print(f"  📄 {name} ({size_kb} KB)")
    if sources.directories:
        console.print("[bold]Directories:[/bold]")
        for name, count in sources.directories:
            out.print(f"  📁 {name}/ ({count} files)")
    console.print()
    out.print(f"Total: {sources.total} markdown files")
    return exit_codes.SUCCESS


def run_test(settings: Settings | None = None) -> int:
    """Run the four functionality tests; non-zero exit when any fails."""
    print_command_header("BRAIN Functionality Test", "🧪", "BRAIN Management", "yellow")
    path = _registry(settings).require_registered()
    checks = BrainRegistry.self_test(path)
    for number, check in enumerate(checks, start=1):
        console.print(f"Test {number}: {escape(check.label)}")
        _print_check(check)
    passed = sum(1 for c in checks if c.passed)
    total = len(checks)
    console.print()
    if passed == total:
        print_success(f"All tests passed! ({passed}/{total} tests passed)")
        return exit_codes.SUCCESS
    print_error(f"Some tests failed ({passed}/{total} tests passed, {passed / total * 100:.1f}%)")
    return exit_codes.GENERAL_ERROR


def run_status(settings: Settings | None = None) -> int:
    print_command_header("BRAIN Status", "📋", "BRAIN Management", "white")
    registry = _registry(settings)
    path = registry.registered_path()

    if path is None:
        console.print("❌ [bold red]BRAIN not registered[/bold red]")
        console.print()
        console.print("To register BRAIN location:")
        console.print("  [yellow]ci brain register /path/to/CollaborativeIntelligence[/yellow]")
        console.print()
        console.print("Available commands:")
        console.print("  [cyan]ci brain register <path>[/cyan] - Register BRAIN location")
        console.print("  [cyan]ci brain health[/cyan] - Check BRAIN health")
        console.print("  [cyan]ci brain source[/cyan] - Show BRAIN information")
        console.print("  [cyan]ci brain test[/cyan] - Test BRAIN functionality")
        return exit_codes.SUCCESS

    brain_dir = path / BRAIN_DIRNAME
    accessible = path.exists()
    console.print("🔍 [bold cyan]Current BRAIN Configuration:[/bold cyan]")
    console.print()
    out.print(f"📍 Registered Path: {path}")
    out.print(f"📂 BRAIN Directory: {brain_dir}")
    out.print(f"🔧 Config File: {registry.config_file}")
    out.print(f"🔓 Accessible: {'Yes' if accessible else 'No'}")
    if accessible:
        out.print(f"📚 BRAIN Files: {count_brain_files(brain_dir)}")
        env_path = os.environ.get("CI_BRAIN_PATH", "")
        env_available = os.environ.get("CI_BRAIN_AVAILABLE", "")
        if env_path or env_available:
            out.print()
            out.print("🌐 Environment Variables:")
            if env_path:
                out.print(f"   CI_BRAIN_PATH: {env_path}")
            if env_available:
                out.print(f"   CI_BRAIN_AVAILABLE: {env_available}")
    return exit_codes.SUCCESS
