"""Resolve command implementation."""

from __future__ import annotations

import json
from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flagdash_bootstrap.config.models import BootstrapConfig

from flagdash_bootstrap.cli.commands import Command
from flagdash_bootstrap.cli.exit_codes import EXIT_SUCCESS
from flagdash_bootstrap.pipeline import BootstrapPipeline


class ResolveCommand(Command):
    """Shows the platform, release and artifact that install would use."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "resolve"

    def execute(self, args: Namespace, config: "BootstrapConfig") -> int:
        """Execute the resolve command.

        Queries the release feed (unless a tag is pinned) but downloads
        nothing.

        Args:
            args: Parsed command-line arguments.
            config: Loaded bootstrap configuration.

        Returns:
            Exit code.
        """
        plan = BootstrapPipeline(config).plan(
            system=getattr(args, "target_os", None),
            machine=getattr(args, "target_arch", None),
        )

        if getattr(args, "json", False):
            print(json.dumps({
                "platform": plan.platform.key,
                "version": plan.version,
                "filename": plan.artifact.filename,
                "url": plan.artifact.url,
            }, indent=2))
            return EXIT_SUCCESS

        print(f"Platform: {plan.platform}")
        print(f"Version:  {plan.version}")
        print(f"Artifact: {plan.artifact.filename}")
        print(f"URL:      {plan.artifact.url}")
        return EXIT_SUCCESS
