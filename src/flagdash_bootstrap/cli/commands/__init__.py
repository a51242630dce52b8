"""CLI commands package.

This module provides the base Command class and exports all command implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flagdash_bootstrap.config.models import BootstrapConfig


class Command(ABC):
    """Base class for CLI commands.

    All CLI commands should inherit from this class and implement
    the execute method. Pipeline failures propagate as BootstrapError
    and are turned into exit codes by the runner.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Command identifier.

        Returns:
            String name of the command.
        """

    @abstractmethod
    def execute(self, args: Namespace, config: "BootstrapConfig") -> int:
        """Execute the command.

        Args:
            args: Parsed command-line arguments.
            config: Loaded bootstrap configuration.

        Returns:
            Exit code (0 for success, non-zero for error).
        """


# Import command implementations for convenience
# ruff: noqa: E402
from flagdash_bootstrap.cli.commands.install import InstallCommand
from flagdash_bootstrap.cli.commands.resolve import ResolveCommand
from flagdash_bootstrap.cli.commands.status import StatusCommand

__all__ = [
    "Command",
    "InstallCommand",
    "ResolveCommand",
    "StatusCommand",
]
