"""flagdash-bootstrap CLI package.

This package provides the command-line interface for flagdash-bootstrap.
"""

from __future__ import annotations

from typing import Iterable, Optional

from flagdash_bootstrap.cli.runner import CLIRunner, get_version
from flagdash_bootstrap.cli.arguments import build_parser
from flagdash_bootstrap.cli.exit_codes import (
    EXIT_SUCCESS,
    EXIT_NOT_INSTALLED,
    EXIT_INVALID_USAGE,
    EXIT_BOOTSTRAP_FAILURE,
    EXIT_INTERRUPTED,
)


def main(argv: Optional[Iterable[str]] = None) -> int:
    """CLI entrypoint.

    Returns an exit code suitable for use as a console script.

    Args:
        argv: Command-line arguments (defaults to sys.argv).

    Returns:
        Exit code.
    """
    runner = CLIRunner()
    return runner.run(argv)


__all__ = [
    "main",
    "build_parser",
    "get_version",
    "CLIRunner",
    "EXIT_SUCCESS",
    "EXIT_NOT_INSTALLED",
    "EXIT_INVALID_USAGE",
    "EXIT_BOOTSTRAP_FAILURE",
    "EXIT_INTERRUPTED",
]


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
