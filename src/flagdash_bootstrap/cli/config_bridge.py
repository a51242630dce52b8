"""Bridge between CLI arguments and configuration models."""

from __future__ import annotations

import argparse
from typing import Any, Dict


class ConfigBridge:
    """Translates CLI arguments to configuration overrides."""

    @staticmethod
    def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
        """Convert CLI arguments to config override dict.

        Only options that were given on the command line are included, so
        config file values survive. Uses getattr because each subcommand
        defines a different subset of options.

        Args:
            args: Parsed CLI arguments.

        Returns:
            Dictionary of config overrides.
        """
        overrides: Dict[str, Any] = {}

        simple = {
            "pinned_version": "version",
            "repo": "repo",
            "binary_name": "binary_name",
            "release_host": "release_host",
            "install_dir": "install_dir",
        }
        for attr, key in simple.items():
            value = getattr(args, attr, None)
            if value is not None:
                overrides[key] = str(value)

        timeout = getattr(args, "timeout", None)
        if timeout is not None:
            overrides["network"] = {"timeout": timeout}

        install: Dict[str, Any] = {}
        if getattr(args, "no_sudo", False):
            install["allow_sudo"] = False
        if getattr(args, "verify", False):
            install["verify"] = True
        if install:
            overrides["install"] = install

        return overrides
