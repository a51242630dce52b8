"""Value types passed between the bootstrap pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class OperatingSystem(str, Enum):
    """Operating systems we publish artifacts for."""

    LINUX = "linux"
    DARWIN = "darwin"


class Architecture(str, Enum):
    """CPU architectures we publish artifacts for."""

    AMD64 = "amd64"
    ARM64 = "arm64"


class ArchiveFormat(str, Enum):
    """Archive formats the extractor understands."""

    TAR_GZ = "tar.gz"
    ZIP = "zip"


@dataclass(frozen=True)
class PlatformKey:
    """(os, arch) pair identifying which artifact a host needs.

    Values are plain strings so keys built by other entry points can be
    checked against the artifact table. The platform resolver only ever
    produces OperatingSystem/Architecture values.
    """

    os: str
    arch: str

    @property
    def key(self) -> str:
        """Table key form, e.g. ``linux-amd64``."""
        return f"{self.os}-{self.arch}"

    def __str__(self) -> str:
        return f"{self.os}/{self.arch}"


@dataclass(frozen=True)
class ArtifactDescriptor:
    """Artifact filename and download URL for one platform and release."""

    platform: PlatformKey
    filename: str
    url: str


@dataclass
class DownloadedArtifact:
    """Raw archive bytes paired with the filename that encodes their format."""

    filename: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class InstallResult:
    """Outcome of a successful bootstrap run."""

    version: str
    platform: PlatformKey
    artifact: ArtifactDescriptor
    installed_path: Path
