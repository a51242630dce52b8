"""Tests for flagdash_bootstrap.bootstrap.checksum."""

from __future__ import annotations

import hashlib

import pytest

from flagdash_bootstrap.bootstrap.checksum import normalize_digest, sha256_hex, verify_artifact
from flagdash_bootstrap.core.errors import ChecksumMismatchError
from flagdash_bootstrap.core.models import DownloadedArtifact

DATA = b"flagdash release archive"
DIGEST = hashlib.sha256(DATA).hexdigest()


class TestNormalizeDigest:
    def test_strips_prefix_and_case(self) -> None:
        assert normalize_digest(f"SHA256:{DIGEST.upper()}") == DIGEST

    def test_strips_whitespace(self) -> None:
        assert normalize_digest(f"  {DIGEST}\n") == DIGEST

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty(self, value) -> None:
        assert normalize_digest(value) == ""


class TestVerifyArtifact:
    """Tests for verify_artifact."""

    def test_match(self) -> None:
        artifact = DownloadedArtifact(filename="flagdash_linux_amd64.tar.gz", data=DATA)
        assert verify_artifact(artifact, DIGEST) is True

    def test_match_with_prefix(self) -> None:
        artifact = DownloadedArtifact(filename="a.tar.gz", data=DATA)
        assert verify_artifact(artifact, f"sha256:{DIGEST}") is True

    @pytest.mark.parametrize("expected", [None, ""])
    def test_skipped_without_digest(self, expected) -> None:
        artifact = DownloadedArtifact(filename="a.tar.gz", data=DATA)
        assert verify_artifact(artifact, expected) is False

    def test_mismatch(self) -> None:
        artifact = DownloadedArtifact(filename="a.tar.gz", data=b"tampered")
        with pytest.raises(ChecksumMismatchError) as exc_info:
            verify_artifact(artifact, DIGEST)

        error = exc_info.value
        assert error.filename == "a.tar.gz"
        assert error.expected == DIGEST
        assert error.actual == sha256_hex(b"tampered")
        assert DIGEST in str(error)
