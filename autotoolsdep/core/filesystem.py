"""
File system utilities for autotoolsdep.

This module provides the filesystem side of the pipeline:
- Path canonicalization (absolute, symlink-free)
- Streaming tar extraction with directory traversal checks
- Scoped temporary directories with guaranteed best-effort cleanup
- Safe directory removal

Archive extraction is not transactional: if it fails part way, whatever was
already written stays on disk.
"""

import logging
import shutil
import tarfile
import tempfile
import zlib
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from autotoolsdep.core.exceptions import (
    ArchiveExtractionError,
    AutotoolsDepError,
    FilesystemError,
    InsecureArchiveError,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Path Utilities
# ============================================================================


def canonicalize(path: Union[str, Path]) -> Path:
    """
    Resolve a path to its absolute, symlink-free form.

    Unlike Path.resolve(), the path must exist.

    Args:
        path: Path to canonicalize

    Returns:
        Canonical absolute path

    Raises:
        FilesystemError: If the path does not exist or cannot be resolved

    Example:
        >>> canonicalize("build/../prefix")  # build and prefix both exist
        PosixPath('/absolute/path/to/prefix')
    """
    try:
        return Path(path).resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise FilesystemError(f"Failed to canonicalize '{path}': {e}") from e


def is_relative_to(path: Path, parent: Path) -> bool:
    """Check if path is relative to (under) parent directory."""
    return path.is_relative_to(parent)


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path, base: Optional[Path] = None) -> None:
    """
    Validate that an archive path resolves inside the destination.

    Args:
        path: Member path or link target from archive
        destination: Canonical extraction destination
        base: Directory path is relative to (default: destination)

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = ((base or destination) / path).resolve()

    if not is_relative_to(member_path, destination):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def _validate_member(member: tarfile.TarInfo, destination: Path) -> None:
    _validate_archive_path(member.name, destination)
    # Hard link targets name another member; symlink targets are relative
    # to the directory holding the link.
    if member.islnk():
        _validate_archive_path(member.linkname, destination)
    elif member.issym():
        link_dir = (destination / member.name).parent
        _validate_archive_path(member.linkname, destination, base=link_dir)


def _validated_members(
    tar: tarfile.TarFile, destination: Path
) -> Iterator[tarfile.TarInfo]:
    # Members are validated one at a time as the stream yields them.
    for member in tar:
        _validate_member(member, destination)
        yield member


def extract_stream(stream: BinaryIO, destination: Union[str, Path]) -> None:
    """
    Extract a tar archive read sequentially from a byte stream.

    The stream is consumed in a single forward pass, so the archive is never
    buffered in memory or on disk as a whole. Relative paths, directories and
    file modes are recreated under the destination.

    Args:
        stream: Readable byte stream with an uncompressed tar payload
        destination: Existing directory to extract into

    Raises:
        FilesystemError: If destination is not an existing directory
        InsecureArchiveError: If a member or link target resolves outside
            destination
        ArchiveExtractionError: If the archive is malformed or a member
            cannot be written

    Example:
        >>> with open("pkg-1.0.tar", "rb") as f:
        ...     extract_stream(f, "/tmp/src")
    """
    destination = Path(destination)

    if not destination.is_dir():
        raise FilesystemError(
            f"Extraction destination is not a directory: {destination}"
        )

    dest_root = destination.resolve()

    try:
        with tarfile.open(fileobj=stream, mode="r|") as tar:
            members = _validated_members(tar, dest_root)
            if hasattr(tarfile, "data_filter"):
                tar.extractall(dest_root, members=members, filter="data")
            else:
                tar.extractall(dest_root, members=members)
    except AutotoolsDepError:
        raise
    except (tarfile.TarError, zlib.error, EOFError, OSError) as e:
        raise ArchiveExtractionError(
            f"Failed to extract archive into {dest_root}: {e}"
        ) from e


# ============================================================================
# Safe Directory Operations
# ============================================================================


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Safely remove a directory tree with safeguards.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails

    Example:
        >>> safe_rmtree('/tmp/autotoolsdep-build-x1y2', require_prefix='/tmp')
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not is_relative_to(path, require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        shutil.rmtree(path)
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


@contextmanager
def temporary_directory(prefix: str = "autotoolsdep-") -> Iterator[Path]:
    """
    Context manager for a uniquely named temporary directory.

    The directory is removed when the block exits, whether it exits normally,
    with an exception, or through KeyboardInterrupt. Removal is best-effort:
    a failure to remove is logged and never replaces the error that is
    already propagating.

    Args:
        prefix: Prefix for the directory name

    Yields:
        Canonical path to the temporary directory

    Raises:
        FilesystemError: If the directory cannot be created

    Example:
        >>> with temporary_directory("autotoolsdep-dl-") as tmp:
        ...     (tmp / 'file.txt').write_text('test')
    """
    try:
        temp_dir = Path(tempfile.mkdtemp(prefix=prefix)).resolve()
    except OSError as e:
        raise FilesystemError(f"Failed to create temporary directory: {e}") from e

    logger.debug(f"Created temporary directory {temp_dir}")
    try:
        yield temp_dir
    finally:
        try:
            safe_rmtree(temp_dir)
            logger.debug(f"Removed temporary directory {temp_dir}")
        except FilesystemError as e:
            logger.warning(f"Could not remove temporary directory: {e}")


__all__ = [
    "canonicalize",
    "is_relative_to",
    "extract_stream",
    "safe_rmtree",
    "temporary_directory",
]
