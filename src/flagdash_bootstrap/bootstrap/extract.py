"""In-process archive extraction.

The format comes from the filename extension only. Every member is checked
so nothing can be written outside the destination directory.
"""

from __future__ import annotations

import io
import os
import posixpath
import shutil
import tarfile
import zipfile
import zlib
from pathlib import Path, PurePosixPath
from typing import List

from flagdash_bootstrap.core.errors import ExtractionError, UnsupportedFormatError
from flagdash_bootstrap.core.logging import get_logger
from flagdash_bootstrap.core.models import ArchiveFormat

LOGGER = get_logger(__name__)

FORMAT_SUFFIXES = {
    ".tar.gz": ArchiveFormat.TAR_GZ,
    ".tgz": ArchiveFormat.TAR_GZ,
    ".zip": ArchiveFormat.ZIP,
}


def archive_format_for(filename: str) -> ArchiveFormat:
    """Select the archive format from a filename.

    Raises:
        UnsupportedFormatError: For any other extension.
    """
    lowered = filename.lower()
    for suffix, archive_format in FORMAT_SUFFIXES.items():
        if lowered.endswith(suffix):
            return archive_format
    raise UnsupportedFormatError(filename)


def clear_directory(directory: Path) -> None:
    """Remove everything inside ``directory`` but keep the directory."""
    if not directory.is_dir():
        return
    for child in directory.iterdir():
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child, ignore_errors=True)
        else:
            child.unlink(missing_ok=True)


class ArchiveExtractor:
    """Unpacks tar.gz and zip archives held in memory."""

    def extract(self, data: bytes, filename: str, dest_dir: Path) -> List[Path]:
        """Extract an archive into ``dest_dir``.

        Args:
            data: Archive bytes.
            filename: Archive filename; its extension selects the format.
            dest_dir: Directory to extract into (created if missing).

        Returns:
            Relative paths of the extracted files and directories.

        Raises:
            UnsupportedFormatError: If the extension is not recognized.
            ExtractionError: If the archive is corrupt, unsafe, or can't be
                written. ``dest_dir`` is emptied before this is raised.
        """
        archive_format = archive_format_for(filename)
        dest_dir.mkdir(parents=True, exist_ok=True)
        root = dest_dir.resolve()

        try:
            if archive_format == ArchiveFormat.TAR_GZ:
                extracted = self._extract_tar(data, filename, root)
            else:
                extracted = self._extract_zip(data, filename, root)
        except ExtractionError:
            clear_directory(dest_dir)
            raise
        except (tarfile.TarError, zipfile.BadZipFile, zlib.error, EOFError, OSError) as e:
            clear_directory(dest_dir)
            raise ExtractionError(filename, str(e) or type(e).__name__) from e

        LOGGER.debug(f"Extracted {len(extracted)} entries from {filename} into {dest_dir}")
        return extracted

    def _extract_tar(self, data: bytes, filename: str, root: Path) -> List[Path]:
        extracted: List[Path] = []
        with tarfile.open(fileobj=io.BytesIO(data), mode="r:gz") as tar:
            for member in tar.getmembers():
                target = _safe_target(root, member.name, filename)

                if member.isdir():
                    target.mkdir(parents=True, exist_ok=True)
                elif member.isfile():
                    source = tar.extractfile(member)
                    if source is None:
                        raise ExtractionError(filename, f"cannot read member {member.name}")
                    target.parent.mkdir(parents=True, exist_ok=True)
                    with source, open(target, "wb") as out:
                        shutil.copyfileobj(source, out)
                    os.chmod(target, member.mode & 0o777)
                elif member.issym():
                    _check_symlink(member.name, member.linkname, filename)
                    target.parent.mkdir(parents=True, exist_ok=True)
                    target.unlink(missing_ok=True)
                    os.symlink(member.linkname, target)
                    resolved = _resolve(target, filename)
                    if resolved != root and not resolved.is_relative_to(root):
                        raise ExtractionError(
                            filename,
                            f"symlink {member.name} points outside archive: {member.linkname}",
                        )
                elif member.islnk():
                    link_source = _safe_target(root, member.linkname, filename)
                    if not link_source.is_file():
                        raise ExtractionError(
                            filename, f"hard link {member.name} points to missing {member.linkname}"
                        )
                    target.parent.mkdir(parents=True, exist_ok=True)
                    shutil.copy2(link_source, target)
                else:
                    LOGGER.debug(f"Skipping special member {member.name} in {filename}")
                    continue

                extracted.append(target.relative_to(root))
        return extracted

    def _extract_zip(self, data: bytes, filename: str, root: Path) -> List[Path]:
        extracted: List[Path] = []
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            for info in zf.infolist():
                target = _safe_target(root, info.filename, filename)

                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                else:
                    target.parent.mkdir(parents=True, exist_ok=True)
                    with zf.open(info) as source, open(target, "wb") as out:
                        shutil.copyfileobj(source, out)
                    mode = (info.external_attr >> 16) & 0o777
                    if mode:
                        os.chmod(target, mode)

                extracted.append(target.relative_to(root))
        return extracted


def _safe_target(root: Path, member_name: str, filename: str) -> Path:
    """Return the destination of a member, rejecting anything that escapes ``root``."""
    member = PurePosixPath(member_name.replace("\\", "/"))
    if member.is_absolute() or ".." in member.parts:
        raise ExtractionError(filename, f"path traversal detected: {member_name}")

    target = root / member
    resolved = _resolve(target, filename)
    if resolved != root and not resolved.is_relative_to(root):
        raise ExtractionError(filename, f"path traversal detected: {member_name}")
    return target


def _resolve(path: Path, filename: str) -> Path:
    """Resolve symlinks in ``path``; a link loop is an extraction failure."""
    try:
        return path.resolve()
    except (OSError, RuntimeError) as e:
        raise ExtractionError(filename, f"cannot resolve {path.name}: {e}") from e


def _check_symlink(member_name: str, link_name: str, filename: str) -> None:
    """Reject symlinks whose target lies outside the archive root."""
    joined = posixpath.normpath(posixpath.join(posixpath.dirname(member_name), link_name))
    if posixpath.isabs(link_name) or joined == ".." or joined.startswith("../"):
        raise ExtractionError(filename, f"symlink {member_name} points outside archive: {link_name}")
