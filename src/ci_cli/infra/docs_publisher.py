"""Infrastructure: writing, serving and publishing generated documentation."""

from __future__ import annotations

import logging
import shutil
import tempfile
import threading
from collections.abc import Callable, Mapping
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

from ci_cli.exceptions import CommandFailedError, ConfigurationError, ValidationError
from ci_cli.infra.git import init_and_force_push, remote_url
from ci_cli.infra.process import run_checked

logger = logging.getLogger(__name__)

DEFAULT_PORT: int = 8080
DEFAULT_PAGES_BRANCH: str = "gh-pages"


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------

def write_site(files: Mapping[str, str], output_dir: Path) -> list[Path]:
    """Write ``relative path → content`` under *output_dir*; return the paths written."""
    written: list[Path] = []
    for relative, content in files.items():
        path = output_dir / relative
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Failed to write {path}: {exc}") from exc
        written.append(path)
    logger.debug("Wrote %d documentation files to %s", len(written), output_dir)
    return written


def write_page(path: Path, content: str) -> Path:
    return write_site({path.name: content}, path.parent)[0]


# ---------------------------------------------------------------------------
# Serving
# ---------------------------------------------------------------------------

def make_server(
    directory: Path,
    port: int = DEFAULT_PORT,
    *,
    regenerate: Callable[[], None] | None = None,
    page: str | None = None,
) -> ThreadingHTTPServer:
    """An HTTP server for *directory* on localhost.

    When *regenerate* is given it is called before every GET so that
    each page load sees freshly generated content.  Requests are handled
    on separate threads, so regeneration and the read that follows it
    run under one lock.  When *page* is given only that file is served,
    also under ``/``.

    Raises
    ------
    CommandFailedError
        When the port cannot be bound.
    """

    lock = threading.Lock()

    class _DocsHandler(SimpleHTTPRequestHandler):
        def __init__(self, *args, **kwargs) -> None:
            super().__init__(*args, directory=str(directory), **kwargs)

        def do_GET(self) -> None:  # noqa: N802
            if page is not None:
                if self.path.split("?", 1)[0] not in ("/", f"/{page}"):
                    self.send_error(404)
                    return
                self.path = f"/{page}"
            if regenerate is None:
                super().do_GET()
                return
            with lock:
                regenerate()
                super().do_GET()

        def log_message(self, format: str, *args) -> None:  # noqa: A002
            logger.debug("docs server: " + format, *args)

    try:
        return ThreadingHTTPServer(("127.0.0.1", port), _DocsHandler)
    except OSError as exc:
        raise CommandFailedError(
            f"Cannot serve documentation on port {port}: {exc}",
            hint="Choose another port with --port.",
        ) from exc


def serve_forever(server: ThreadingHTTPServer) -> None:
    """Serve until interrupted; ``KeyboardInterrupt`` propagates after cleanup."""
    try:
        server.serve_forever()
    finally:
        server.server_close()


# ---------------------------------------------------------------------------
# Deploy targets
# ---------------------------------------------------------------------------

def deploy_github_pages(
    files: Mapping[str, str],
    *,
    repo: str | None,
    branch: str = DEFAULT_PAGES_BRANCH,
    cwd: Path,
) -> str:
    """Force-push *files* as the sole commit of *branch*; return the remote used."""
    remote = repo or remote_url(cwd)
    with tempfile.TemporaryDirectory(prefix="ci_docs_") as tmp:
        site = Path(tmp)
        write_site(files, site)
        # disable Jekyll processing on GitHub Pages
        (site / ".nojekyll").touch()
        init_and_force_push(site, remote, branch, "Update CI documentation")
    logger.info("Published documentation to %s (%s)", remote, branch)
    return remote


def deploy_vercel(files: Mapping[str, str], *, project: str | None = None) -> None:
    with tempfile.TemporaryDirectory(prefix="ci_docs_") as tmp:
        site = Path(tmp)
        write_site(files, site)
        args = ["vercel", "--prod", "--yes"]
        if project:
            args.extend(["--name", project])
        run_checked(args, cwd=site, capture=False, error="Vercel deployment failed")


def deploy_local(site_dir: Path, target: Path, *, symlink: bool = False) -> Path:
    """Copy (or symlink) a generated site directory to *target*.

    Raises
    ------
    ValidationError
        When *target* already exists and a symlink was requested.
    ConfigurationError
        On filesystem errors.
    """
    try:
        if symlink:
            if target.exists() or target.is_symlink():
                raise ValidationError(f"Target already exists: {target}")
            target.parent.mkdir(parents=True, exist_ok=True)
            target.symlink_to(site_dir.resolve(), target_is_directory=True)
        else:
            shutil.copytree(site_dir, target, dirs_exist_ok=True)
    except OSError as exc:
        raise ConfigurationError(f"Failed to deploy documentation to {target}: {exc}") from exc
    return target
