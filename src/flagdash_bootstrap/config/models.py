"""Configuration data models for flagdash-bootstrap.

Defines the typed configuration that replaces hard-coded repository,
binary and install-location constants. Mirrors the bootstrap.yml structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from flagdash_bootstrap.bootstrap.download import (
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
)
from flagdash_bootstrap.bootstrap.paths import DEFAULT_INSTALL_DIR
from flagdash_bootstrap.core.models import PlatformKey

DEFAULT_REPO = "flagdash/flagdash-cli"
DEFAULT_BINARY_NAME = "flagdash"
DEFAULT_RELEASE_HOST = "github.com"


@dataclass
class NetworkConfig:
    """HTTP settings shared by the metadata query and the download."""

    timeout: float = DEFAULT_TIMEOUT  # Seconds, connect and read
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    user_agent: str = DEFAULT_USER_AGENT


@dataclass
class InstallConfig:
    """Install step behaviour."""

    allow_sudo: bool = True  # Fall back to sudo when install_dir isn't writable
    verify: bool = False  # Run `<binary> --version` after installing


@dataclass
class BootstrapConfig:
    """Complete bootstrap configuration.

    Built from defaults, config files, environment variables and CLI flags
    by ``load_config``. Every pipeline component receives what it needs
    from here instead of reading module constants.
    """

    repo: str = DEFAULT_REPO
    binary_name: str = DEFAULT_BINARY_NAME
    install_dir: Path = DEFAULT_INSTALL_DIR
    release_host: str = DEFAULT_RELEASE_HOST
    api_host: Optional[str] = None  # None = "api." + release_host
    version: Optional[str] = None  # Pinned release tag; None = latest

    network: NetworkConfig = field(default_factory=NetworkConfig)
    install: InstallConfig = field(default_factory=InstallConfig)

    # Expected SHA-256 per platform, keyed "os-arch"
    checksums: Dict[str, str] = field(default_factory=dict)

    # Where the values came from, for --debug output
    _config_sources: List[str] = field(default_factory=list, repr=False)

    @property
    def resolved_api_host(self) -> str:
        """Host serving the releases metadata API."""
        return self.api_host or f"api.{self.release_host}"

    def checksum_for(self, platform_key: PlatformKey) -> Optional[str]:
        """Expected SHA-256 for a platform, if configured."""
        return self.checksums.get(platform_key.key)

    def get_sources(self) -> List[str]:
        """Config sources that contributed to this configuration."""
        return list(self._config_sources)
