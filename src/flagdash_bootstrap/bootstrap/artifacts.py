"""Artifact naming and download URL composition.

Release assets are named ``<binary>-<os>-<arch>.<ext>``. The extension is
chosen per table entry, not sniffed at runtime.
"""

from __future__ import annotations

from typing import Dict

from flagdash_bootstrap.core.errors import UnsupportedPlatformError
from flagdash_bootstrap.core.models import (
    Architecture,
    ArchiveFormat,
    ArtifactDescriptor,
    OperatingSystem,
    PlatformKey,
)

ARTIFACT_FORMATS: Dict[PlatformKey, ArchiveFormat] = {
    PlatformKey(OperatingSystem.DARWIN.value, Architecture.ARM64.value): ArchiveFormat.TAR_GZ,
    PlatformKey(OperatingSystem.DARWIN.value, Architecture.AMD64.value): ArchiveFormat.TAR_GZ,
    PlatformKey(OperatingSystem.LINUX.value, Architecture.ARM64.value): ArchiveFormat.TAR_GZ,
    PlatformKey(OperatingSystem.LINUX.value, Architecture.AMD64.value): ArchiveFormat.TAR_GZ,
}


def artifact_filename(platform_key: PlatformKey, binary_name: str) -> str:
    """Return the release asset filename for a platform.

    Args:
        platform_key: Resolved platform.
        binary_name: Executable name, e.g. ``flagdash``.

    Returns:
        Filename such as ``flagdash-linux-amd64.tar.gz``.

    Raises:
        UnsupportedPlatformError: If the platform has no published artifact.
    """
    archive_format = ARTIFACT_FORMATS.get(platform_key)
    if archive_format is None:
        raise UnsupportedPlatformError(
            str(platform_key),
            supported=[p.key for p in ARTIFACT_FORMATS],
        )
    return f"{binary_name}-{platform_key.os}-{platform_key.arch}.{archive_format.value}"


def download_url(release_host: str, repo: str, version: str, filename: str) -> str:
    """Compose the release asset download URL."""
    return f"https://{release_host}/{repo}/releases/download/{version}/{filename}"


def resolve_artifact(
    platform_key: PlatformKey,
    binary_name: str,
    repo: str,
    version: str,
    release_host: str = "github.com",
) -> ArtifactDescriptor:
    """Build the full artifact descriptor for a platform and release."""
    filename = artifact_filename(platform_key, binary_name)
    return ArtifactDescriptor(
        platform=platform_key,
        filename=filename,
        url=download_url(release_host, repo, version, filename),
    )
