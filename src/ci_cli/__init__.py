"""ci: Collaborative Intelligence command-line interface.

Manages agent memory files, project configuration, a registered BRAIN
knowledge base and a handful of git/gh/npm convenience wrappers, laid
out in the same cli/core/infra layers throughout.
"""

from ci_cli.version import __version__

__all__: list[str] = ["__version__"]
