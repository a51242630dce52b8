"""SHA-256 verification of downloaded artifacts."""

from __future__ import annotations

import hashlib
from typing import Optional

from flagdash_bootstrap.core.errors import ChecksumMismatchError
from flagdash_bootstrap.core.logging import get_logger
from flagdash_bootstrap.core.models import DownloadedArtifact

LOGGER = get_logger(__name__)


def normalize_digest(digest: Optional[str]) -> str:
    """Lowercase a hex digest and strip an optional ``sha256:`` prefix."""
    value = (digest or "").strip().lower()
    if value.startswith("sha256:"):
        value = value[len("sha256:"):].strip()
    return value


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def verify_artifact(artifact: DownloadedArtifact, expected: Optional[str]) -> bool:
    """Check an artifact against an expected SHA-256 digest.

    Args:
        artifact: Downloaded archive.
        expected: Expected hex digest; None or empty skips verification.

    Returns:
        True if a digest was checked, False if verification was skipped.

    Raises:
        ChecksumMismatchError: If the digest does not match.
    """
    expected_hex = normalize_digest(expected)
    if not expected_hex:
        LOGGER.debug(f"No checksum configured for {artifact.filename}, skipping verification")
        return False

    actual = sha256_hex(artifact.data)
    if actual != expected_hex:
        raise ChecksumMismatchError(artifact.filename, expected_hex, actual)

    LOGGER.debug(f"SHA256 verified for {artifact.filename}")
    return True
