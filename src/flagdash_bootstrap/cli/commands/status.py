"""Status command implementation."""

from __future__ import annotations

import json
from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flagdash_bootstrap.config.models import BootstrapConfig

from flagdash_bootstrap.bootstrap.validation import ToolStatus, check_installed
from flagdash_bootstrap.cli.commands import Command
from flagdash_bootstrap.cli.exit_codes import EXIT_NOT_INSTALLED, EXIT_SUCCESS


class StatusCommand(Command):
    """Reports whether the binary is installed and executable."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "status"

    def execute(self, args: Namespace, config: "BootstrapConfig") -> int:
        path = config.install_dir / config.binary_name
        report = check_installed(path, run_version=getattr(args, "check_version", False))

        if getattr(args, "json", False):
            print(json.dumps(report.to_dict(), indent=2))
        elif report.status == ToolStatus.PRESENT:
            suffix = f" ({report.version_output})" if report.version_output else ""
            print(f"{config.binary_name}: installed at {path}{suffix}")
        elif report.status == ToolStatus.NOT_EXECUTABLE:
            print(f"{config.binary_name}: {path} exists but is not executable")
        else:
            print(f"{config.binary_name}: not installed (expected at {path})")

        return EXIT_SUCCESS if report.is_valid() else EXIT_NOT_INSTALLED
