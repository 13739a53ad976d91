"""Infrastructure: the CollaborativeIntelligence web portal (an npm project)."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from ci_cli.exceptions import ConfigurationError, NotFoundError
from ci_cli.infra.process import run_checked

logger = logging.getLogger(__name__)

PROJECT_DIRNAME: str = "CollaborativeIntelligence"
WEB_DIRNAME: str = "web"
BUILD_OUTPUT_DIRS: tuple[str, ...] = ("build", "dist", "out")


@dataclass(frozen=True, slots=True)
class DeployResult:
    """How ``ci web deploy`` published the build."""

    method: str
    """``"vercel"``, ``"script"`` or ``"manual"``."""

    build_output: Path | None = None
    """First existing build directory, reported for manual deployment."""


def find_web_directory(start: Path, home: Path) -> Path:
    """Locate ``CollaborativeIntelligence/web``.

    Walks up from *start* (stopping at *home*), then tries
    ``~/Documents/Projects/CollaborativeIntelligence/web``.

    Raises
    ------
    NotFoundError
        When no web directory exists.
    """
    current = start.resolve()
    home = home.resolve()
    while True:
        candidate = current / PROJECT_DIRNAME / WEB_DIRNAME
        if candidate.is_dir():
            logger.debug("Web portal at %s", candidate)
            return candidate
        if current == home or current.parent == current:
            break
        current = current.parent

    fallback = home / "Documents" / "Projects" / PROJECT_DIRNAME / WEB_DIRNAME
    if fallback.is_dir():
        return fallback
    raise NotFoundError(
        "Could not find CollaborativeIntelligence/web directory",
        hint="Run this command from inside (or next to) your CollaborativeIntelligence checkout.",
    )


def require_package_json(web_dir: Path) -> Path:
    package_json = web_dir / "package.json"
    if not package_json.is_file():
        raise NotFoundError(f"package.json not found in web directory: {web_dir}")
    return package_json


def has_deploy_script(web_dir: Path) -> bool:
    package_json = require_package_json(web_dir)
    try:
        data = json.loads(package_json.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"Failed to read {package_json}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Failed to parse {package_json}", hint=str(exc)) from exc
    scripts = data.get("scripts") if isinstance(data, dict) else None
    return isinstance(scripts, dict) and "deploy" in scripts


def build_output_dir(web_dir: Path) -> Path | None:
    for name in BUILD_OUTPUT_DIRS:
        path = web_dir / name
        if path.exists():
            return path
    return None


def start_dev_server(web_dir: Path) -> None:
    """Run ``npm start`` in the foreground until it exits."""
    run_checked(
        ["npm", "start"],
        cwd=web_dir,
        capture=False,
        error="Failed to start development server",
    )


def build(web_dir: Path) -> None:
    run_checked(
        ["npm", "run", "build"],
        cwd=web_dir,
        capture=False,
        error="Build failed. Cannot proceed with deployment",
    )


def deploy(web_dir: Path) -> DeployResult:
    """Publish an already built portal.

    ``vercel --prod --yes`` when ``.vercel/`` exists, else ``npm run
    deploy`` when package.json defines it, else nothing (manual).
    """
    if (web_dir / ".vercel").exists():
        run_checked(
            ["vercel", "--prod", "--yes"],
            cwd=web_dir,
            capture=False,
            error="Vercel deployment failed",
        )
        return DeployResult(method="vercel")
    if has_deploy_script(web_dir):
        run_checked(
            ["npm", "run", "deploy"],
            cwd=web_dir,
            capture=False,
            error="Deployment script failed",
        )
        return DeployResult(method="script")
    return DeployResult(method="manual", build_output=build_output_dir(web_dir))
