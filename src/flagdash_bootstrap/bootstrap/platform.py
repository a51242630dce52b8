"""Host platform detection.

Maps the raw ``uname``-style OS and machine names to one of the supported
(os, arch) pairs. Anything unrecognized fails immediately.
"""

from __future__ import annotations

import platform
from typing import Dict, Optional

from flagdash_bootstrap.core.errors import UnsupportedPlatformError
from flagdash_bootstrap.core.logging import get_logger
from flagdash_bootstrap.core.models import Architecture, OperatingSystem, PlatformKey

LOGGER = get_logger(__name__)

# Raw platform.system() values, matched case-insensitively
OS_ALIASES: Dict[str, OperatingSystem] = {
    "linux": OperatingSystem.LINUX,
    "darwin": OperatingSystem.DARWIN,
}

# Raw platform.machine() values, matched case-insensitively
ARCH_ALIASES: Dict[str, Architecture] = {
    "x86_64": Architecture.AMD64,
    "amd64": Architecture.AMD64,
    "aarch64": Architecture.ARM64,
    "arm64": Architecture.ARM64,
}

SUPPORTED_PLATFORMS = [
    PlatformKey(os_name.value, arch.value)
    for os_name in OperatingSystem
    for arch in Architecture
]


def supported_platform_names() -> list[str]:
    """Return ``os-arch`` names of every supported platform."""
    return [p.key for p in SUPPORTED_PLATFORMS]


def normalize_os(raw: str) -> OperatingSystem:
    """Map a raw OS name (e.g. ``Linux``) to an OperatingSystem."""
    os_name = OS_ALIASES.get(raw.strip().lower())
    if os_name is None:
        raise UnsupportedPlatformError(
            raw, axis="operating system", supported=supported_platform_names()
        )
    return os_name


def normalize_arch(raw: str) -> Architecture:
    """Map a raw machine name (e.g. ``x86_64``) to an Architecture."""
    arch = ARCH_ALIASES.get(raw.strip().lower())
    if arch is None:
        raise UnsupportedPlatformError(
            raw, axis="architecture", supported=supported_platform_names()
        )
    return arch


def get_platform_info(
    system: Optional[str] = None,
    machine: Optional[str] = None,
) -> PlatformKey:
    """Resolve the platform key for this host.

    Args:
        system: Raw OS name override (default: ``platform.system()``).
        machine: Raw machine name override (default: ``platform.machine()``).

    Returns:
        Normalized PlatformKey.

    Raises:
        UnsupportedPlatformError: If either value is not recognized.
    """
    raw_system = system if system is not None else platform.system()
    raw_machine = machine if machine is not None else platform.machine()

    key = PlatformKey(normalize_os(raw_system).value, normalize_arch(raw_machine).value)
    LOGGER.debug(f"Resolved platform {raw_system}/{raw_machine} -> {key}")
    return key
