"""Placing the extracted executable at its install location.

The installer first tries a plain write. If the destination is not
writable it hands the copy to a ``PrivilegedWriter`` supplied by the host
environment; the default one shells out to ``sudo install``.
"""

from __future__ import annotations

import os
import shutil
import subprocess
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, List, Optional

from flagdash_bootstrap.core.errors import (
    BinaryNotFoundError,
    InstallIOError,
    PermissionDeniedError,
)
from flagdash_bootstrap.core.logging import get_logger
from flagdash_bootstrap.core.progress import (
    NullProgressHandler,
    ProgressEvent,
    ProgressHandler,
    Stage,
)

LOGGER = get_logger(__name__)

EXECUTABLE_MODE = 0o755


class PrivilegedWriter(ABC):
    """Capability for writing a file somewhere the current user can't."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short name shown to the user, e.g. ``sudo``."""

    @abstractmethod
    def write(self, source: Path, destination: Path, mode: int) -> None:
        """Copy ``source`` to ``destination`` with ``mode`` as a privileged user.

        Raises:
            PermissionDeniedError: If elevation was refused or failed.
            InstallIOError: For any other failure.
        """


class SudoWriter(PrivilegedWriter):
    """Runs ``sudo install -m <mode> <src> <dest>``."""

    def __init__(self, sudo: str = "sudo") -> None:
        self._sudo = sudo

    @property
    def name(self) -> str:
        return self._sudo

    def write(self, source: Path, destination: Path, mode: int) -> None:
        sudo_path = shutil.which(self._sudo)
        if sudo_path is None:
            raise PermissionDeniedError(destination, f"{self._sudo} is not available")

        # install(1) does not create missing directories on every platform
        if not destination.parent.is_dir():
            self._run([sudo_path, "mkdir", "-p", str(destination.parent)], destination)
        self._run(
            [sudo_path, "install", "-m", f"{mode:o}", str(source), str(destination)],
            destination,
        )

    def _run(self, cmd: List[str], destination: Path) -> None:
        LOGGER.debug(f"Running: {' '.join(cmd)}")

        # stdin stays attached so sudo can prompt for a password
        result = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            check=False,
        )
        if result.returncode == 0:
            return

        stderr = (result.stderr or "").strip()
        reason = stderr or f"{self._sudo} exited with code {result.returncode}"
        lowered = stderr.lower()
        if "permission" in lowered or "password" in lowered or "not allowed" in lowered:
            raise PermissionDeniedError(destination, reason)
        raise InstallIOError(destination, reason)


class Installer:
    """Copies the executable out of an extracted tree into the install dir."""

    def __init__(
        self,
        privileged_writer: Optional[PrivilegedWriter] = None,
        confirm_escalation: Optional[Callable[[Path], bool]] = None,
        progress: Optional[ProgressHandler] = None,
    ) -> None:
        """Initialize Installer.

        Args:
            privileged_writer: Fallback for unwritable destinations. None
                disables escalation.
            confirm_escalation: Asked before escalating; returning False
                aborts with PermissionDeniedError.
            progress: Receives the escalation notice.
        """
        self._privileged_writer = privileged_writer
        self._confirm_escalation = confirm_escalation
        self._progress = progress or NullProgressHandler()

    def install(self, extracted_tree: Path, binary_name: str, install_dir: Path) -> Path:
        """Install ``binary_name`` from ``extracted_tree`` into ``install_dir``.

        Only the top level of the tree is searched. An existing binary at
        the destination is replaced.

        Returns:
            Path of the installed executable.

        Raises:
            BinaryNotFoundError: If the tree has no such file.
            PermissionDeniedError: If neither write path was allowed.
            InstallIOError: If the binary links outside the tree, or for other
                filesystem failures.
        """
        source = extracted_tree / binary_name
        if not source.resolve().is_relative_to(extracted_tree.resolve()):
            raise InstallIOError(source, "resolves outside the extracted archive")
        if not source.is_file():
            raise BinaryNotFoundError(source)

        destination = install_dir / binary_name

        if self._is_writable(install_dir):
            try:
                self._write_direct(source, destination)
                LOGGER.debug(f"Installed {destination}")
                return destination
            except PermissionError as e:
                LOGGER.debug(f"Direct write to {destination} denied: {e}")
            except OSError as e:
                raise InstallIOError(destination, str(e)) from e

        self._write_privileged(source, destination)
        return destination

    def _is_writable(self, install_dir: Path) -> bool:
        if install_dir.is_dir():
            return os.access(install_dir, os.W_OK)
        try:
            install_dir.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            return False
        except OSError as e:
            raise InstallIOError(install_dir, str(e)) from e
        return True

    def _write_direct(self, source: Path, destination: Path) -> None:
        """Copy to a sibling temp file, chmod, then rename over the target."""
        tmp = tempfile.NamedTemporaryFile(
            dir=destination.parent, prefix=f".{destination.name}.", delete=False
        )
        tmp_path = Path(tmp.name)
        try:
            with tmp, open(source, "rb") as src:
                shutil.copyfileobj(src, tmp)
            os.chmod(tmp_path, EXECUTABLE_MODE)
            os.replace(tmp_path, destination)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

    def _write_privileged(self, source: Path, destination: Path) -> None:
        install_dir = destination.parent
        if self._privileged_writer is None:
            raise PermissionDeniedError(
                install_dir, "directory is not writable and privilege escalation is disabled"
            )

        self._progress.emit(ProgressEvent(
            Stage.INSTALL,
            f"Installing to {install_dir} (requires {self._privileged_writer.name})...",
        ))

        if self._confirm_escalation is not None and not self._confirm_escalation(install_dir):
            raise PermissionDeniedError(install_dir, "privilege escalation declined")

        self._privileged_writer.write(source, destination, EXECUTABLE_MODE)
        LOGGER.debug(f"Installed {destination} via {self._privileged_writer.name}")
