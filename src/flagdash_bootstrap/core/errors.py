"""Exception hierarchy for the bootstrap pipeline.

Every pipeline failure is a ``BootstrapError`` subclass carrying the context
needed to diagnose it (platform, URL, status code or path). None of them are
retried; the CLI reports the message and exits non-zero.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional


class BootstrapError(Exception):
    """Base class for all bootstrap pipeline failures."""


class UnsupportedPlatformError(BootstrapError):
    """Host OS or architecture is outside the supported set."""

    def __init__(
        self,
        raw_value: str,
        axis: str = "platform",
        supported: Optional[Iterable[str]] = None,
    ) -> None:
        self.raw_value = raw_value
        self.axis = axis
        self.supported = sorted(supported) if supported else []
        message = f"Unsupported {axis}: {raw_value}"
        if self.supported:
            message += f" (supported platforms: {', '.join(self.supported)})"
        super().__init__(message)


class NoReleaseFoundError(BootstrapError):
    """Release metadata was empty, malformed or lacked a tag."""

    def __init__(self, repo: str, reason: str) -> None:
        self.repo = repo
        self.reason = reason
        super().__init__(f"Could not determine latest release of {repo}: {reason}")


class NetworkError(BootstrapError):
    """A request failed before a usable response was received."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Network error fetching {url}: {reason}")


class TransportError(NetworkError):
    """Connection-level failure (DNS, TLS, timeout, reset)."""


class HttpError(BootstrapError):
    """Final response after redirects had a non-2xx status."""

    def __init__(self, url: str, status: int) -> None:
        self.url = url
        self.status = status
        super().__init__(f"HTTP {status} for {url}")


class ChecksumMismatchError(BootstrapError):
    """Downloaded artifact digest does not match the expected SHA-256."""

    def __init__(self, filename: str, expected: str, actual: str) -> None:
        self.filename = filename
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"SHA256 mismatch for {filename}: expected {expected}, got {actual}"
        )


class UnsupportedFormatError(BootstrapError):
    """Archive extension is not one we know how to unpack."""

    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__(f"Unsupported archive format: {filename}")


class ExtractionError(BootstrapError):
    """Archive was corrupt, truncated, unsafe, or could not be written."""

    def __init__(self, filename: str, reason: str) -> None:
        self.filename = filename
        self.reason = reason
        super().__init__(f"Failed to extract {filename}: {reason}")


class BinaryNotFoundError(BootstrapError):
    """Extracted archive does not contain the expected executable."""

    def __init__(self, expected_path: Path) -> None:
        self.expected_path = expected_path
        super().__init__(f"Binary not found after extraction: {expected_path}")


class PermissionDeniedError(BootstrapError):
    """Destination could not be written, even with elevated privileges."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Permission denied writing {path}: {reason}")


class InstallIOError(BootstrapError):
    """Any other filesystem failure while installing."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to install {path}: {reason}")
