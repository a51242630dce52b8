"""Install command implementation."""

from __future__ import annotations

import sys
from argparse import Namespace
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

import questionary
from questionary import Style

if TYPE_CHECKING:
    from flagdash_bootstrap.config.models import BootstrapConfig

from flagdash_bootstrap.bootstrap.install import Installer, SudoWriter
from flagdash_bootstrap.cli.commands import Command
from flagdash_bootstrap.cli.exit_codes import EXIT_SUCCESS
from flagdash_bootstrap.core.logging import get_logger
from flagdash_bootstrap.core.progress import ConsoleProgressHandler
from flagdash_bootstrap.pipeline import BootstrapPipeline

LOGGER = get_logger(__name__)

STYLE = Style([
    ("qmark", "fg:cyan bold"),
    ("question", "bold"),
    ("answer", "fg:cyan"),
])


def confirm_escalation(install_dir: Path) -> bool:
    """Ask the user before writing to ``install_dir`` with sudo."""
    answer = questionary.confirm(
        f"{install_dir} is not writable. Install with sudo?",
        default=True,
        style=STYLE,
    ).ask()
    return bool(answer)


class InstallCommand(Command):
    """Downloads the release artifact and installs the binary."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "install"

    def execute(self, args: Namespace, config: "BootstrapConfig") -> int:
        """Execute the install command.

        Prints one progress line per stage and a final confirmation.

        Args:
            args: Parsed command-line arguments.
            config: Loaded bootstrap configuration.

        Returns:
            Exit code.
        """
        progress = ConsoleProgressHandler(use_rich=sys.stdout.isatty())
        installer = Installer(
            privileged_writer=SudoWriter() if config.install.allow_sudo else None,
            confirm_escalation=self._get_confirm(args),
            progress=progress,
        )
        pipeline = BootstrapPipeline(config, installer=installer, progress=progress)

        result = pipeline.run(
            system=getattr(args, "target_os", None),
            machine=getattr(args, "target_arch", None),
            expected_sha256=getattr(args, "sha256", None),
        )

        print()
        print(f"Run '{result.installed_path.name} --help' to get started.")
        return EXIT_SUCCESS

    def _get_confirm(self, args: Namespace) -> Optional[Callable[[Path], bool]]:
        """Only prompt when someone is at the terminal."""
        if getattr(args, "yes", False) or not sys.stdin.isatty():
            return None
        return confirm_escalation
