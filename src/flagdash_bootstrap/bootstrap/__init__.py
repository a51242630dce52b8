"""
Bootstrap components for installing the flagdash binary.

This package handles:
- Platform detection (OS + architecture)
- Release tag lookup and artifact naming
- Download, checksum verification and extraction
- Installing and validating the executable

The pipeline executor wires these together in order.
"""

from flagdash_bootstrap.bootstrap.platform import get_platform_info, SUPPORTED_PLATFORMS
from flagdash_bootstrap.bootstrap.artifacts import artifact_filename, resolve_artifact
from flagdash_bootstrap.bootstrap.download import Fetcher, secure_urlopen
from flagdash_bootstrap.bootstrap.releases import ReleaseLocator
from flagdash_bootstrap.bootstrap.extract import ArchiveExtractor
from flagdash_bootstrap.bootstrap.install import Installer, PrivilegedWriter, SudoWriter
from flagdash_bootstrap.bootstrap.paths import get_flagdash_home, FlagdashPaths
from flagdash_bootstrap.bootstrap.validation import validate_binary, ToolStatus

__all__ = [
    "get_platform_info",
    "SUPPORTED_PLATFORMS",
    "artifact_filename",
    "resolve_artifact",
    "Fetcher",
    "secure_urlopen",
    "ReleaseLocator",
    "ArchiveExtractor",
    "Installer",
    "PrivilegedWriter",
    "SudoWriter",
    "get_flagdash_home",
    "FlagdashPaths",
    "validate_binary",
    "ToolStatus",
]
