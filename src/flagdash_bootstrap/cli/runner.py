"""CLI runner: argument parsing, config loading and command dispatch."""

from __future__ import annotations

import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Dict, Iterable, Optional

from flagdash_bootstrap.cli.arguments import build_parser
from flagdash_bootstrap.cli.commands import (
    Command,
    InstallCommand,
    ResolveCommand,
    StatusCommand,
)
from flagdash_bootstrap.cli.config_bridge import ConfigBridge
from flagdash_bootstrap.cli.exit_codes import (
    EXIT_BOOTSTRAP_FAILURE,
    EXIT_INTERRUPTED,
    EXIT_INVALID_USAGE,
    EXIT_SUCCESS,
)
from flagdash_bootstrap.config.loader import ConfigError, load_config
from flagdash_bootstrap.core.errors import BootstrapError
from flagdash_bootstrap.core.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)


def get_version() -> str:
    try:
        return version("flagdash-bootstrap")
    except PackageNotFoundError:
        # Fallback for editable installs that have not yet built metadata.
        from flagdash_bootstrap import __version__

        return __version__


class CLIRunner:
    """Parses arguments and runs the selected command."""

    def __init__(self) -> None:
        self._commands: Dict[str, Command] = {
            command.name: command
            for command in (InstallCommand(), ResolveCommand(), StatusCommand())
        }

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Command-line arguments (defaults to sys.argv).

        Returns:
            Exit code.
        """
        parser = build_parser()
        argv_list = list(argv) if argv is not None else None

        try:
            args = parser.parse_args(argv_list)
        except SystemExit as e:
            # argparse exits 0 for --help and 2 for usage errors
            return EXIT_SUCCESS if e.code in (0, None) else EXIT_INVALID_USAGE

        configure_logging(debug=args.debug, verbose=args.verbose, quiet=args.quiet)

        if args.version:
            print(get_version())
            return EXIT_SUCCESS

        command = self._commands.get(args.command or "")
        if command is None:
            parser.print_help()
            return EXIT_SUCCESS

        try:
            config = load_config(
                project_root=Path.cwd(),
                cli_config_path=args.config,
                cli_overrides=ConfigBridge.args_to_overrides(args),
            )
        except ConfigError as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_INVALID_USAGE

        try:
            return command.execute(args, config)
        except BootstrapError as e:
            print(f"Error: {e}", file=sys.stderr)
            if args.debug:
                LOGGER.debug("Bootstrap failure", exc_info=True)
            return EXIT_BOOTSTRAP_FAILURE
        except KeyboardInterrupt:
            print("\nInterrupted.", file=sys.stderr)
            return EXIT_INTERRUPTED
