"""Configuration validation for flagdash-bootstrap.

Warns on unknown keys with close-match suggestions. Validation never
raises; type problems on known keys are reported again as ConfigError
when the dict is converted to a BootstrapConfig.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from typing import Any, Dict, List, Optional, Set

from flagdash_bootstrap.bootstrap.platform import supported_platform_names
from flagdash_bootstrap.core.logging import get_logger

LOGGER = get_logger(__name__)

# Valid top-level keys
VALID_TOP_LEVEL_KEYS: Set[str] = {
    "repo",
    "binary_name",
    "install_dir",
    "release_host",
    "api_host",
    "version",
    "network",
    "install",
    "checksums",
}

# Valid keys under network section
VALID_NETWORK_KEYS: Set[str] = {
    "timeout",
    "max_redirects",
    "user_agent",
}

# Valid keys under install section
VALID_INSTALL_KEYS: Set[str] = {
    "allow_sudo",
    "verify",
}

SECTION_KEYS: Dict[str, Set[str]] = {
    "network": VALID_NETWORK_KEYS,
    "install": VALID_INSTALL_KEYS,
}


@dataclass
class ConfigValidationWarning:
    """A validation warning for configuration."""

    message: str
    source: str
    key: Optional[str] = None
    suggestion: Optional[str] = None


def validate_config(
    data: Dict[str, Any],
    source: str,
) -> List[ConfigValidationWarning]:
    """Validate configuration dictionary.

    Args:
        data: Config dictionary to validate.
        source: Source file path for warning messages.

    Returns:
        List of validation warnings.
    """
    warnings: List[ConfigValidationWarning] = []

    if not isinstance(data, dict):
        warnings.append(ConfigValidationWarning(
            message=f"Config must be a mapping, got {type(data).__name__}",
            source=source,
        ))
        return warnings

    for key in data.keys():
        if key not in VALID_TOP_LEVEL_KEYS:
            _add(warnings, ConfigValidationWarning(
                message=f"Unknown top-level key '{key}'",
                source=source,
                key=key,
                suggestion=_suggest_key(key, VALID_TOP_LEVEL_KEYS),
            ))

    for section, valid_keys in SECTION_KEYS.items():
        value = data.get(section)
        if value is None:
            continue
        if not isinstance(value, dict):
            _add(warnings, ConfigValidationWarning(
                message=f"'{section}' must be a mapping, got {type(value).__name__}",
                source=source,
                key=section,
            ))
            continue
        for key in value.keys():
            if key not in valid_keys:
                _add(warnings, ConfigValidationWarning(
                    message=f"Unknown key '{section}.{key}'",
                    source=source,
                    key=f"{section}.{key}",
                    suggestion=_suggest_key(key, valid_keys),
                ))

    repo = data.get("repo")
    if repo is not None and (not isinstance(repo, str) or repo.count("/") != 1):
        _add(warnings, ConfigValidationWarning(
            message=f"'repo' must look like 'owner/name', got {repo!r}",
            source=source,
            key="repo",
        ))

    checksums = data.get("checksums")
    if checksums is not None:
        if not isinstance(checksums, dict):
            _add(warnings, ConfigValidationWarning(
                message=f"'checksums' must be a mapping, got {type(checksums).__name__}",
                source=source,
                key="checksums",
            ))
        else:
            platforms = set(supported_platform_names())
            for platform_name in checksums.keys():
                if platform_name not in platforms:
                    _add(warnings, ConfigValidationWarning(
                        message=f"Unknown platform '{platform_name}' in 'checksums'",
                        source=source,
                        key=f"checksums.{platform_name}",
                        suggestion=_suggest_key(str(platform_name), platforms),
                    ))

    return warnings


def _add(warnings: List[ConfigValidationWarning], warning: ConfigValidationWarning) -> None:
    warnings.append(warning)
    _log_warning(warning)


def _suggest_key(invalid_key: str, valid_keys: Set[str]) -> Optional[str]:
    """Suggest a valid key for a potential typo.

    Args:
        invalid_key: The invalid key entered.
        valid_keys: Set of valid keys.

    Returns:
        Closest matching valid key, or None if no good match.
    """
    matches = get_close_matches(invalid_key, list(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _log_warning(warning: ConfigValidationWarning) -> None:
    """Log a validation warning."""
    msg = f"{warning.message} in {warning.source}"
    if warning.suggestion:
        msg += f" (did you mean '{warning.suggestion}'?)"
    LOGGER.warning(msg)
