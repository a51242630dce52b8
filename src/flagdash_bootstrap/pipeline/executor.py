"""Pipeline executor for a bootstrap run."""

from __future__ import annotations

import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from flagdash_bootstrap.bootstrap.artifacts import resolve_artifact
from flagdash_bootstrap.bootstrap.checksum import verify_artifact
from flagdash_bootstrap.bootstrap.download import Fetcher
from flagdash_bootstrap.bootstrap.extract import ArchiveExtractor
from flagdash_bootstrap.bootstrap.install import Installer, SudoWriter
from flagdash_bootstrap.bootstrap.platform import get_platform_info
from flagdash_bootstrap.bootstrap.releases import ReleaseLocator
from flagdash_bootstrap.bootstrap.validation import run_version_check
from flagdash_bootstrap.config.models import BootstrapConfig
from flagdash_bootstrap.core.logging import get_logger
from flagdash_bootstrap.core.models import (
    ArtifactDescriptor,
    DownloadedArtifact,
    InstallResult,
    PlatformKey,
)
from flagdash_bootstrap.core.progress import (
    NullProgressHandler,
    ProgressEvent,
    ProgressHandler,
    Stage,
)

LOGGER = get_logger(__name__)

WORKDIR_PREFIX = "flagdash-bootstrap-"


@dataclass
class BootstrapPlan:
    """Everything resolved before the download starts."""

    platform: PlatformKey
    version: str
    artifact: ArtifactDescriptor


class BootstrapPipeline:
    """Runs the bootstrap stages strictly in order.

    Pipeline stages:
    1. Platform resolution
    2. Release lookup (skipped when a version is pinned)
    3. Artifact naming
    4. Download and optional checksum verification
    5. Extraction into a temporary directory
    6. Installation (and optional --version smoke test)

    The temporary directory is removed on every exit path, including
    KeyboardInterrupt.
    """

    def __init__(
        self,
        config: BootstrapConfig,
        fetcher: Optional[Fetcher] = None,
        extractor: Optional[ArchiveExtractor] = None,
        installer: Optional[Installer] = None,
        progress: Optional[ProgressHandler] = None,
        work_root: Optional[Path] = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            config: Bootstrap configuration.
            fetcher: HTTP fetcher (default: built from config.network).
            extractor: Archive extractor.
            installer: Installer (default: sudo fallback if allowed).
            progress: Receives user-facing progress events.
            work_root: Parent directory for the temporary extraction dir.
        """
        self._config = config
        self._progress = progress or NullProgressHandler()
        self._fetcher = fetcher or Fetcher(
            timeout=config.network.timeout,
            max_redirects=config.network.max_redirects,
            user_agent=config.network.user_agent,
        )
        self._locator = ReleaseLocator(self._fetcher, api_host=config.resolved_api_host)
        self._extractor = extractor or ArchiveExtractor()
        self._installer = installer or Installer(
            privileged_writer=SudoWriter() if config.install.allow_sudo else None,
            progress=self._progress,
        )
        self._work_root = work_root

    def plan(self, system: Optional[str] = None, machine: Optional[str] = None) -> BootstrapPlan:
        """Resolve platform, version and artifact without downloading it."""
        platform_key = get_platform_info(system, machine)
        self._emit(Stage.PLATFORM, f"Detected platform: {platform_key}")

        version = self._locator.resolve(self._config.repo, pinned=self._config.version)

        artifact = resolve_artifact(
            platform_key,
            binary_name=self._config.binary_name,
            repo=self._config.repo,
            version=version,
            release_host=self._config.release_host,
        )
        return BootstrapPlan(platform=platform_key, version=version, artifact=artifact)

    def run(
        self,
        system: Optional[str] = None,
        machine: Optional[str] = None,
        expected_sha256: Optional[str] = None,
    ) -> InstallResult:
        """Execute the whole pipeline.

        Args:
            system: Raw OS name override (default: this host).
            machine: Raw machine name override (default: this host).
            expected_sha256: Digest to check; overrides config.checksums.

        Returns:
            InstallResult describing the installed binary.

        Raises:
            BootstrapError: The first failure from any stage.
        """
        config = self._config
        plan = self.plan(system, machine)
        self._emit(Stage.RELEASE, f"Installing {config.binary_name} {plan.version}...")

        artifact = self._download(plan)

        expected = expected_sha256 or config.checksum_for(plan.platform)
        if verify_artifact(artifact, expected):
            self._emit(Stage.VERIFY, "Checksum verified.")

        with tempfile.TemporaryDirectory(prefix=WORKDIR_PREFIX, dir=self._work_root) as workdir:
            work_path = Path(workdir)
            LOGGER.debug(f"Extracting into {work_path}")
            self._emit(Stage.EXTRACT, "Extracting...")
            self._extractor.extract(artifact.data, artifact.filename, work_path)

            installed = self._installer.install(
                work_path, config.binary_name, config.install_dir
            )

        if config.install.verify:
            version_line = run_version_check(installed)
            LOGGER.info(f"Installed binary reports: {version_line}")

        self._emit(
            Stage.DONE,
            f"{config.binary_name} {plan.version} installed to {installed}",
        )
        return InstallResult(
            version=plan.version,
            platform=plan.platform,
            artifact=plan.artifact,
            installed_path=installed,
        )

    def _download(self, plan: BootstrapPlan) -> DownloadedArtifact:
        self._emit(Stage.DOWNLOAD, f"Downloading {plan.artifact.url}...")
        artifact = DownloadedArtifact(
            filename=plan.artifact.filename,
            data=self._fetcher.get(plan.artifact.url),
        )
        LOGGER.info(f"Downloaded {artifact.filename} ({artifact.size} bytes)")
        return artifact

    def _emit(self, stage: Stage, message: str) -> None:
        self._progress.emit(ProgressEvent(stage=stage, message=message))
