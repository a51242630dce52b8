"""Tests for flagdash_bootstrap.pipeline.executor."""

from __future__ import annotations

import hashlib
import stat
from pathlib import Path
from typing import Callable, Dict, List
from unittest.mock import MagicMock, patch

import pytest

from flagdash_bootstrap.bootstrap.download import Fetcher
from flagdash_bootstrap.bootstrap.extract import ArchiveExtractor
from flagdash_bootstrap.bootstrap.install import Installer
from flagdash_bootstrap.config.models import BootstrapConfig, InstallConfig
from flagdash_bootstrap.core.errors import (
    BinaryNotFoundError,
    ChecksumMismatchError,
    HttpError,
    NoReleaseFoundError,
    UnsupportedPlatformError,
)
from flagdash_bootstrap.core.progress import CallbackProgressHandler, ProgressEvent, Stage
from flagdash_bootstrap.pipeline.executor import BootstrapPipeline

LATEST_URL = "https://api.github.com/repos/flagdash/flagdash-cli/releases/latest"
ARTIFACT_URL = (
    "https://github.com/flagdash/flagdash-cli/releases/download/"
    "cli-v0.2.0/flagdash-linux-amd64.tar.gz"
)
BINARY = b"#!/bin/sh\necho 'flagdash 0.2.0'\n"


def _fake_fetcher(responses: Dict[str, bytes]) -> MagicMock:
    fetcher = MagicMock(spec=Fetcher)

    def get(url: str, accept=None) -> bytes:
        if url not in responses:
            raise HttpError(url, 404)
        return responses[url]

    fetcher.get.side_effect = get
    return fetcher


@pytest.fixture
def archive(tar_gz_factory: Callable) -> bytes:
    return tar_gz_factory({"flagdash": BINARY, "LICENSE": (b"MIT", 0o644)})


@pytest.fixture
def config(tmp_path: Path) -> BootstrapConfig:
    return BootstrapConfig(install_dir=tmp_path / "bin")


@pytest.fixture
def work_root(tmp_path: Path) -> Path:
    path = tmp_path / "work"
    path.mkdir()
    return path


class TestRun:
    """Tests for BootstrapPipeline.run."""

    def test_installs_latest_release(
        self, config: BootstrapConfig, archive: bytes, work_root: Path
    ) -> None:
        fetcher = _fake_fetcher({LATEST_URL: b'{"tag_name": "cli-v0.2.0"}', ARTIFACT_URL: archive})
        events: List[ProgressEvent] = []
        pipeline = BootstrapPipeline(
            config,
            fetcher=fetcher,
            progress=CallbackProgressHandler(events.append),
            work_root=work_root,
        )

        result = pipeline.run(system="Linux", machine="x86_64")

        installed = config.install_dir / "flagdash"
        assert result.installed_path == installed
        assert result.version == "cli-v0.2.0"
        assert result.artifact.filename == "flagdash-linux-amd64.tar.gz"
        assert installed.read_bytes() == BINARY
        assert stat.S_IMODE(installed.stat().st_mode) == 0o755
        assert not (config.install_dir / "LICENSE").exists()
        assert list(work_root.iterdir()) == []
        assert [e.message for e in events] == [
            "Detected platform: linux/amd64",
            "Installing flagdash cli-v0.2.0...",
            f"Downloading {ARTIFACT_URL}...",
            "Extracting...",
            f"flagdash cli-v0.2.0 installed to {installed}",
        ]

    def test_pinned_version_skips_metadata(
        self, config: BootstrapConfig, archive: bytes, work_root: Path
    ) -> None:
        config.version = "cli-v0.2.0"
        fetcher = _fake_fetcher({ARTIFACT_URL: archive})

        BootstrapPipeline(config, fetcher=fetcher, work_root=work_root).run("linux", "amd64")

        assert [c.args[0] for c in fetcher.get.call_args_list] == [ARTIFACT_URL]

    def test_unsupported_platform_stops_before_network(self, config: BootstrapConfig) -> None:
        fetcher = _fake_fetcher({})
        with pytest.raises(UnsupportedPlatformError):
            BootstrapPipeline(config, fetcher=fetcher).run(system="Windows", machine="x86_64")
        fetcher.get.assert_not_called()

    def test_no_release(self, config: BootstrapConfig) -> None:
        fetcher = _fake_fetcher({LATEST_URL: b"{}"})
        extractor = MagicMock(spec=ArchiveExtractor)
        with pytest.raises(NoReleaseFoundError):
            BootstrapPipeline(config, fetcher=fetcher, extractor=extractor).run("linux", "amd64")
        assert fetcher.get.call_count == 1
        extractor.extract.assert_not_called()

    def test_download_404_skips_extraction(self, config: BootstrapConfig, work_root: Path) -> None:
        fetcher = _fake_fetcher({LATEST_URL: b'{"tag_name": "cli-v0.2.0"}'})
        extractor = MagicMock(spec=ArchiveExtractor)

        with pytest.raises(HttpError) as exc_info:
            BootstrapPipeline(
                config, fetcher=fetcher, extractor=extractor, work_root=work_root
            ).run("linux", "amd64")

        assert exc_info.value.status == 404
        assert exc_info.value.url == ARTIFACT_URL
        extractor.extract.assert_not_called()
        assert list(work_root.iterdir()) == []

    def test_missing_binary_leaves_install_dir_untouched(
        self, config: BootstrapConfig, tar_gz_factory: Callable, work_root: Path
    ) -> None:
        config.version = "cli-v0.2.0"
        fetcher = _fake_fetcher({ARTIFACT_URL: tar_gz_factory({"README.md": b"docs"})})

        with pytest.raises(BinaryNotFoundError):
            BootstrapPipeline(config, fetcher=fetcher, work_root=work_root).run("linux", "amd64")

        assert not config.install_dir.exists()
        assert list(work_root.iterdir()) == []

    def test_interrupt_during_install_cleans_workdir(
        self, config: BootstrapConfig, archive: bytes, work_root: Path
    ) -> None:
        config.version = "cli-v0.2.0"
        installer = MagicMock(spec=Installer)
        installer.install.side_effect = KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            BootstrapPipeline(
                config,
                fetcher=_fake_fetcher({ARTIFACT_URL: archive}),
                installer=installer,
                work_root=work_root,
            ).run("linux", "amd64")

        assert list(work_root.iterdir()) == []


class TestChecksums:
    """Tests for checksum verification inside the pipeline."""

    def test_configured_checksum_verified(
        self, config: BootstrapConfig, archive: bytes, work_root: Path
    ) -> None:
        config.version = "cli-v0.2.0"
        config.checksums = {"linux-amd64": hashlib.sha256(archive).hexdigest()}
        events: List[ProgressEvent] = []

        BootstrapPipeline(
            config,
            fetcher=_fake_fetcher({ARTIFACT_URL: archive}),
            progress=CallbackProgressHandler(events.append),
            work_root=work_root,
        ).run("linux", "amd64")

        assert [e.stage for e in events if e.stage == Stage.VERIFY] == [Stage.VERIFY]

    def test_mismatch_aborts_before_extraction(self, config: BootstrapConfig, archive: bytes) -> None:
        config.version = "cli-v0.2.0"
        config.checksums = {"linux-amd64": "0" * 64}
        extractor = MagicMock(spec=ArchiveExtractor)

        with pytest.raises(ChecksumMismatchError):
            BootstrapPipeline(
                config, fetcher=_fake_fetcher({ARTIFACT_URL: archive}), extractor=extractor
            ).run("linux", "amd64")

        extractor.extract.assert_not_called()
        assert not config.install_dir.exists()

    def test_explicit_digest_overrides_config(
        self, config: BootstrapConfig, archive: bytes, work_root: Path
    ) -> None:
        config.version = "cli-v0.2.0"
        config.checksums = {"linux-amd64": hashlib.sha256(archive).hexdigest()}

        with pytest.raises(ChecksumMismatchError):
            BootstrapPipeline(
                config, fetcher=_fake_fetcher({ARTIFACT_URL: archive}), work_root=work_root
            ).run("linux", "amd64", expected_sha256="f" * 64)


class TestVerify:
    def test_runs_version_check_when_enabled(
        self, tmp_path: Path, archive: bytes, work_root: Path
    ) -> None:
        config = BootstrapConfig(
            install_dir=tmp_path / "bin",
            version="cli-v0.2.0",
            install=InstallConfig(verify=True),
        )
        with patch(
            "flagdash_bootstrap.pipeline.executor.run_version_check", return_value="flagdash 0.2.0"
        ) as mock_check:
            result = BootstrapPipeline(
                config, fetcher=_fake_fetcher({ARTIFACT_URL: archive}), work_root=work_root
            ).run("linux", "amd64")

        mock_check.assert_called_once_with(result.installed_path)

    def test_skipped_by_default(self, config: BootstrapConfig, archive: bytes, work_root: Path) -> None:
        config.version = "cli-v0.2.0"
        with patch("flagdash_bootstrap.pipeline.executor.run_version_check") as mock_check:
            BootstrapPipeline(
                config, fetcher=_fake_fetcher({ARTIFACT_URL: archive}), work_root=work_root
            ).run("linux", "amd64")
        mock_check.assert_not_called()


class TestPlan:
    def test_plan_does_not_download(self, config: BootstrapConfig) -> None:
        fetcher = _fake_fetcher({LATEST_URL: b'{"tag_name": "cli-v0.2.0"}'})

        plan = BootstrapPipeline(config, fetcher=fetcher).plan("Darwin", "arm64")

        assert str(plan.platform) == "darwin/arm64"
        assert plan.version == "cli-v0.2.0"
        assert plan.artifact.url.endswith("/cli-v0.2.0/flagdash-darwin-arm64.tar.gz")
        assert fetcher.get.call_count == 1

    def test_custom_hosts(self, tmp_path: Path) -> None:
        config = BootstrapConfig(
            repo="acme/fd",
            release_host="ghe.example.com",
            api_host="ghe.example.com/api/v3",
        )
        fetcher = _fake_fetcher({
            "https://ghe.example.com/api/v3/repos/acme/fd/releases/latest": b'{"tag_name": "v1"}',
        })

        plan = BootstrapPipeline(config, fetcher=fetcher).plan("linux", "aarch64")

        assert plan.artifact.url == (
            "https://ghe.example.com/acme/fd/releases/download/v1/flagdash-linux-arm64.tar.gz"
        )
