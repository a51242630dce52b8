"""Argument parser for the flagdash-bootstrap CLI."""

from __future__ import annotations

import argparse
from pathlib import Path


def _add_release_options(parser: argparse.ArgumentParser) -> None:
    """Options that decide which artifact gets resolved."""
    parser.add_argument(
        "--tag",
        dest="pinned_version",
        metavar="TAG",
        help="Release tag to install (default: latest release, e.g. cli-v0.2.0).",
    )
    parser.add_argument(
        "--repo",
        metavar="OWNER/NAME",
        help="Repository publishing the releases (default: flagdash/flagdash-cli).",
    )
    parser.add_argument(
        "--binary-name",
        metavar="NAME",
        help="Executable name inside the archive (default: flagdash).",
    )
    parser.add_argument(
        "--release-host",
        metavar="HOST",
        help="Release host (default: github.com).",
    )
    parser.add_argument(
        "--os",
        dest="target_os",
        metavar="OS",
        help="Resolve for this operating system instead of the current host.",
    )
    parser.add_argument(
        "--arch",
        dest="target_arch",
        metavar="ARCH",
        help="Resolve for this architecture instead of the current host.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        metavar="SECONDS",
        help="Network timeout in seconds (default: 30).",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="flagdash-bootstrap",
        description="flagdash-bootstrap - Install the flagdash CLI from GitHub releases.",
    )

    # Global options
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show flagdash-bootstrap version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (info-level) logging.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Reduce logging output to errors only.",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        help="Path to config file (default: flagdash-bootstrap.yml in the current directory).",
    )

    subparsers = parser.add_subparsers(dest="command")

    # install
    install = subparsers.add_parser(
        "install",
        help="Download and install the flagdash binary.",
    )
    _add_release_options(install)
    install.add_argument(
        "--install-dir",
        type=Path,
        metavar="DIR",
        help="Directory to install into (default: /usr/local/bin).",
    )
    install.add_argument(
        "--sha256",
        metavar="HEX",
        help="Expected SHA-256 of the downloaded archive.",
    )
    install.add_argument(
        "--no-sudo",
        action="store_true",
        help="Never escalate privileges; fail if the install directory is not writable.",
    )
    install.add_argument(
        "-y", "--yes",
        action="store_true",
        help="Do not ask for confirmation before using sudo.",
    )
    install.add_argument(
        "--verify",
        action="store_true",
        help="Run '<binary> --version' after installing.",
    )

    # resolve
    resolve = subparsers.add_parser(
        "resolve",
        help="Show which artifact would be installed, without downloading it.",
    )
    _add_release_options(resolve)
    resolve.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON.",
    )

    # status
    status = subparsers.add_parser(
        "status",
        help="Check whether the binary is installed and executable.",
    )
    status.add_argument(
        "--install-dir",
        type=Path,
        metavar="DIR",
        help="Directory to check (default: /usr/local/bin).",
    )
    status.add_argument(
        "--binary-name",
        metavar="NAME",
        help="Executable name (default: flagdash).",
    )
    status.add_argument(
        "--check-version",
        action="store_true",
        help="Also run '<binary> --version'.",
    )
    status.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON.",
    )

    return parser
