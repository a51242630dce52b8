"""Checks on an installed binary.

Reports whether the executable is present and runnable, and optionally
runs it with ``--version`` as a smoke test.
"""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

from flagdash_bootstrap.core.errors import InstallIOError
from flagdash_bootstrap.core.logging import get_logger

LOGGER = get_logger(__name__)

VERIFY_TIMEOUT = 30


class ToolStatus(str, Enum):
    """Status of an installed binary."""

    PRESENT = "present"
    MISSING = "missing"
    NOT_EXECUTABLE = "not_executable"


@dataclass
class BinaryStatus:
    """Status report for one installed binary."""

    path: Path
    status: ToolStatus
    version_output: Optional[str] = None

    def is_valid(self) -> bool:
        return self.status == ToolStatus.PRESENT

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Convert to dictionary for JSON serialization."""
        return {
            "path": str(self.path),
            "status": self.status.value,
            "version": self.version_output,
        }


def validate_binary(path: Path) -> ToolStatus:
    """Validate a single binary file.

    Args:
        path: Path to the binary file.

    Returns:
        ToolStatus indicating whether the binary is present and executable.
    """
    if not path.is_file():
        return ToolStatus.MISSING

    if not os.access(path, os.X_OK):
        return ToolStatus.NOT_EXECUTABLE

    return ToolStatus.PRESENT


def run_version_check(path: Path, timeout: int = VERIFY_TIMEOUT) -> str:
    """Run ``<path> --version`` and return its first output line.

    Raises:
        InstallIOError: If the binary can't be run or exits non-zero.
    """
    cmd = [str(path), "--version"]
    LOGGER.debug(f"Running: {' '.join(cmd)}")

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        raise InstallIOError(path, f"'--version' timed out after {timeout}s") from e
    except OSError as e:
        raise InstallIOError(path, f"cannot run installed binary: {e}") from e

    if result.returncode != 0:
        detail = (result.stderr or result.stdout or "").strip()
        raise InstallIOError(
            path, f"'--version' exited with code {result.returncode}: {detail}"
        )

    lines = (result.stdout or "").strip().splitlines()
    return lines[0] if lines else ""


def check_installed(path: Path, run_version: bool = False) -> BinaryStatus:
    """Build a status report for an installed binary.

    Args:
        path: Expected install path.
        run_version: Also run the binary with ``--version`` when present.

    Returns:
        BinaryStatus for the path.
    """
    status = validate_binary(path)
    report = BinaryStatus(path=path, status=status)
    if run_version and status == ToolStatus.PRESENT:
        report.version_output = run_version_check(path)
    return report
