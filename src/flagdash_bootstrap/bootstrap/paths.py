"""Path management for flagdash-bootstrap.

Handles the ~/.flagdash directory (global config and logs) and the
default install location.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

# Default directory name under user home
DEFAULT_HOME_DIR_NAME = ".flagdash"

# Environment variable to override home directory
FLAGDASH_HOME_ENV = "FLAGDASH_HOME"

DEFAULT_INSTALL_DIR = Path("/usr/local/bin")


def get_flagdash_home() -> Path:
    """Get the flagdash home directory path.

    Resolution order:
    1. FLAGDASH_HOME environment variable (if set)
    2. ~/.flagdash (default)

    Returns:
        Path to the flagdash home directory.
    """
    env_home = os.environ.get(FLAGDASH_HOME_ENV)
    if env_home:
        return Path(env_home)
    return Path.home() / DEFAULT_HOME_DIR_NAME


@dataclass
class FlagdashPaths:
    """Manages paths within the flagdash home directory.

    Directory structure:
        ~/.flagdash/
            config/
                bootstrap.yml   - Global bootstrap configuration
    """

    home: Path

    _CONFIG_DIR: ClassVar[str] = "config"
    _GLOBAL_CONFIG_NAME: ClassVar[str] = "bootstrap.yml"

    @classmethod
    def default(cls) -> "FlagdashPaths":
        """Create paths from the default flagdash home."""
        return cls(get_flagdash_home())

    @property
    def config_dir(self) -> Path:
        """Directory for configuration files."""
        return self.home / self._CONFIG_DIR

    @property
    def global_config(self) -> Path:
        """Global bootstrap config file."""
        return self.config_dir / self._GLOBAL_CONFIG_NAME
