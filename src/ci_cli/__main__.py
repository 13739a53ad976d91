"""Allow ``python -m ci_cli`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m ci_cli`` behaves identically to the ``ci`` console
script.  Parallel agent loads re-enter the CLI through this module.
"""

from __future__ import annotations

from ci_cli.cli.app import cli

if __name__ == "__main__":
    cli()
