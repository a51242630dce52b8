"""Configuration module for flagdash-bootstrap.

Provides configuration file loading, parsing, and validation with support for:
- Global config (~/.flagdash/config/bootstrap.yml)
- Project config (flagdash-bootstrap.yml)
- FLAGDASH_* environment overrides and ${VAR} expansion
"""

from flagdash_bootstrap.config.models import (
    BootstrapConfig,
    InstallConfig,
    NetworkConfig,
    DEFAULT_BINARY_NAME,
    DEFAULT_REPO,
)
from flagdash_bootstrap.config.loader import (
    ConfigError,
    load_config,
    find_project_config,
    find_global_config,
)
from flagdash_bootstrap.config.validation import validate_config, ConfigValidationWarning

__all__ = [
    "BootstrapConfig",
    "InstallConfig",
    "NetworkConfig",
    "DEFAULT_BINARY_NAME",
    "DEFAULT_REPO",
    "ConfigError",
    "load_config",
    "find_project_config",
    "find_global_config",
    "validate_config",
    "ConfigValidationWarning",
]
