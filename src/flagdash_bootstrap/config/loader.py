"""Configuration file loading and merging.

Handles loading configuration from YAML files with:
- Global config (~/.flagdash/config/bootstrap.yml)
- Project config (flagdash-bootstrap.yml) or an explicit --config file
- FLAGDASH_* environment variable overrides
- Environment variable expansion (${VAR})
- Config merging with proper precedence
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from flagdash_bootstrap.bootstrap.paths import FlagdashPaths
from flagdash_bootstrap.config.models import (
    BootstrapConfig,
    InstallConfig,
    NetworkConfig,
)
from flagdash_bootstrap.config.validation import validate_config
from flagdash_bootstrap.core.logging import get_logger

LOGGER = get_logger(__name__)

# Config file names
PROJECT_CONFIG_NAMES = [
    "flagdash-bootstrap.yml",
    "flagdash-bootstrap.yaml",
    ".flagdash-bootstrap.yml",
    ".flagdash-bootstrap.yaml",
]

# Environment variables that override config keys
ENV_OVERRIDES: Dict[str, str] = {
    "FLAGDASH_REPO": "repo",
    "FLAGDASH_VERSION": "version",
    "FLAGDASH_INSTALL_DIR": "install_dir",
    "FLAGDASH_RELEASE_HOST": "release_host",
}

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")

REPO_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")


class ConfigError(Exception):
    """Configuration loading or parsing error."""

    pass


def load_config(
    project_root: Path,
    cli_config_path: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> BootstrapConfig:
    """Load configuration with proper precedence.

    Precedence (highest to lowest):
    1. CLI flags (cli_overrides)
    2. FLAGDASH_* environment variables
    3. Custom config file (cli_config_path) OR project config
    4. Global config (~/.flagdash/config/bootstrap.yml)
    5. Built-in defaults

    Args:
        project_root: Directory searched for a project config file.
        cli_config_path: Optional path to custom config file (--config flag).
        cli_overrides: Dict of CLI flag overrides.
        environ: Environment mapping (defaults to os.environ).

    Returns:
        Merged BootstrapConfig instance.

    Raises:
        ConfigError: If an explicit config file is missing, any config file
            has invalid YAML, or a known key has the wrong type.
    """
    env = os.environ if environ is None else environ
    sources: List[str] = []
    merged: Dict[str, Any] = {}

    # Layer 1: Global config
    global_path = find_global_config()
    if global_path is not None:
        try:
            global_dict = load_yaml_file(global_path)
            validate_config(global_dict, source=str(global_path))
            merged = merge_configs(merged, global_dict)
            sources.append(f"global:{global_path}")
            LOGGER.debug(f"Loaded global config from {global_path}")
        except (yaml.YAMLError, ConfigError, OSError) as e:
            LOGGER.warning(f"Failed to load global config: {e}")

    # Layer 2: Project or custom config
    if cli_config_path:
        if not cli_config_path.exists():
            raise ConfigError(f"Config file not found: {cli_config_path}")
        merged = _merge_file(merged, cli_config_path, "custom", sources)
    else:
        project_path = find_project_config(project_root)
        if project_path is not None:
            merged = _merge_file(merged, project_path, "project", sources)

    # Layer 3: Environment overrides
    env_dict = {key: env[var] for var, key in ENV_OVERRIDES.items() if env.get(var)}
    if env_dict:
        merged = merge_configs(merged, env_dict)
        sources.append("env")
        LOGGER.debug(f"Applied environment overrides: {sorted(env_dict)}")

    # Layer 4: CLI overrides
    if cli_overrides:
        merged = merge_configs(merged, cli_overrides)
        sources.append("cli")
        LOGGER.debug("Applied CLI overrides")

    config = dict_to_config(merged)
    config._config_sources = sources

    LOGGER.debug(f"Config loaded from sources: {sources}")
    return config


def _merge_file(
    merged: Dict[str, Any],
    path: Path,
    label: str,
    sources: List[str],
) -> Dict[str, Any]:
    try:
        data = load_yaml_file(path)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    validate_config(data, source=str(path))
    sources.append(f"{label}:{path}")
    LOGGER.debug(f"Loaded {label} config from {path}")
    return merge_configs(merged, data)


def find_project_config(project_root: Path) -> Optional[Path]:
    """Find config file in project root.

    Args:
        project_root: Directory to search in.

    Returns:
        Path to config file if found, None otherwise.
    """
    for name in PROJECT_CONFIG_NAMES:
        config_path = project_root / name
        if config_path.is_file():
            return config_path
    return None


def find_global_config() -> Optional[Path]:
    """Find global config at ~/.flagdash/config/bootstrap.yml.

    Returns:
        Path to global config if it exists, None otherwise.
    """
    config_path = FlagdashPaths.default().global_config
    if config_path.is_file():
        return config_path
    return None


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML config file.

    Performs environment variable expansion on string values.

    Args:
        path: Path to YAML file.

    Returns:
        Parsed dictionary.

    Raises:
        yaml.YAMLError: If YAML parsing fails.
        ConfigError: If the document is not a mapping.
    """
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()

    data = yaml.safe_load(content)

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")

    return expand_env_vars(data)


def expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in config values.

    Supports ${VAR} and ${VAR:-default} syntax.

    Args:
        data: Config data (dict, list, or scalar).

    Returns:
        Data with environment variables expanded.
    """
    if isinstance(data, dict):
        return {k: expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        return ENV_VAR_PATTERN.sub(_env_var_replacer, data)
    else:
        return data


def _env_var_replacer(match: re.Match[str]) -> str:
    """Replace environment variable reference with its value."""
    var_name = match.group(1)
    default_value = match.group(2)

    value = os.environ.get(var_name)
    if value is not None:
        return value
    if default_value is not None:
        return default_value

    LOGGER.warning(f"Environment variable ${var_name} is not set and has no default")
    return ""


def merge_configs(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two config dicts, with overlay taking precedence.

    Rules:
    - Scalar values: overlay replaces base
    - Lists: overlay replaces base (no merging)
    - Dicts: recursive merge

    Args:
        base: Base configuration dictionary.
        overlay: Overlay configuration to merge on top.

    Returns:
        Merged configuration dictionary.
    """
    result = base.copy()

    for key, overlay_value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(overlay_value, dict):
            result[key] = merge_configs(result[key], overlay_value)
        else:
            result[key] = overlay_value

    return result


def dict_to_config(data: Dict[str, Any]) -> BootstrapConfig:
    """Convert a merged dict to a typed BootstrapConfig.

    Args:
        data: Configuration dictionary.

    Returns:
        Typed BootstrapConfig instance.

    Raises:
        ConfigError: If a known key has the wrong type or value.
    """
    defaults = BootstrapConfig()

    repo = _get_str(data, "repo", defaults.repo)
    if not REPO_PATTERN.match(repo):
        raise ConfigError(f"'repo' must look like 'owner/name', got {repo!r}")

    binary_name = _get_str(data, "binary_name", defaults.binary_name)
    if not binary_name or "/" in binary_name or binary_name in (".", ".."):
        raise ConfigError(f"'binary_name' must be a plain file name, got {binary_name!r}")

    install_dir = data.get("install_dir", defaults.install_dir)
    if not isinstance(install_dir, (str, Path)) or not str(install_dir):
        raise ConfigError(f"'install_dir' must be a path, got {install_dir!r}")

    version = data.get("version")
    if version is not None:
        version = str(version).strip() or None

    network_data = _get_section(data, "network")
    network = NetworkConfig(
        timeout=_get_number(network_data, "network.timeout", "timeout", defaults.network.timeout),
        max_redirects=int(_get_number(
            network_data, "network.max_redirects", "max_redirects", defaults.network.max_redirects,
        )),
        user_agent=_get_str(network_data, "user_agent", defaults.network.user_agent),
    )
    if network.timeout <= 0:
        raise ConfigError("'network.timeout' must be positive")
    if network.max_redirects < 0:
        raise ConfigError("'network.max_redirects' must not be negative")

    install_data = _get_section(data, "install")
    install = InstallConfig(
        allow_sudo=_get_bool(install_data, "install.allow_sudo", "allow_sudo", defaults.install.allow_sudo),
        verify=_get_bool(install_data, "install.verify", "verify", defaults.install.verify),
    )

    checksums_data = data.get("checksums") or {}
    if not isinstance(checksums_data, dict):
        raise ConfigError("'checksums' must be a mapping of platform to sha256")
    checksums = {str(k): str(v) for k, v in checksums_data.items() if v}

    api_host = data.get("api_host")

    return BootstrapConfig(
        repo=repo,
        binary_name=binary_name,
        install_dir=Path(install_dir).expanduser(),
        release_host=_get_str(data, "release_host", defaults.release_host),
        api_host=str(api_host) if api_host else None,
        version=version,
        network=network,
        install=install,
        checksums=checksums,
    )


def _get_section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be a mapping, got {type(section).__name__}")
    return section


def _get_str(data: Dict[str, Any], key: str, default: str) -> str:
    value = data.get(key, default)
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' must be a string, got {type(value).__name__}")
    return value.strip()


def _get_number(data: Dict[str, Any], label: str, key: str, default: float) -> float:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"'{label}' must be a number, got {value!r}")
    return float(value) if isinstance(value, float) else value


def _get_bool(data: Dict[str, Any], label: str, key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"'{label}' must be a boolean, got {value!r}")
    return value
