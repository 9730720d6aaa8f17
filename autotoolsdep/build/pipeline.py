"""
Dependency build pipeline.

build_local_dependency() runs configure, make and make install against a
source tree already on disk. fetch_build_dependency() first materializes that
tree from a remote .tar.gz in an ephemeral download directory, then builds it
in an ephemeral build directory. Both return the canonical install prefix and
raise DependencyBuildError on failure.

Ephemeral directories are removed when the call returns. Caller-supplied
directories, including the install prefix, are never removed.
"""

import logging
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import Iterator, Mapping, Optional, Sequence, TextIO, Union

from autotoolsdep.build.autotools import DEFAULT_MAKE, run_configure, run_make
from autotoolsdep.core.download import Timeout, fetch_and_extract
from autotoolsdep.core.exceptions import (
    BuildError,
    BuildStage,
    DependencyBuildError,
    FetchError,
    FilesystemError,
    SourceDirectoryNotFoundError,
)
from autotoolsdep.core.filesystem import canonicalize, temporary_directory

logger = logging.getLogger(__name__)

DOWNLOAD_DIR_PREFIX = "autotoolsdep-dl-"
BUILD_DIR_PREFIX = "autotoolsdep-build-"


@contextmanager
def _stage(stage: BuildStage) -> Iterator[None]:
    """Wrap fetch/build errors raised in the block as DependencyBuildError."""
    try:
        yield
    except (FetchError, BuildError) as e:
        raise DependencyBuildError(stage, e) from e


@contextmanager
def _working_directory(supplied: Optional[Path], prefix: str) -> Iterator[Path]:
    # A caller-supplied directory is adopted as-is and left in place.
    if supplied is not None:
        yield canonicalize(supplied)
    else:
        with temporary_directory(prefix=prefix) as temp_dir:
            yield temp_dir


def build_local_dependency(
    source_dir: Union[str, Path],
    build_dir: Union[str, Path],
    output_dir: Union[str, Path],
    configure_args: Sequence[str],
    env: Mapping[str, str],
    parallelism: int,
    make: str = DEFAULT_MAKE,
    output: Optional[TextIO] = None,
) -> Path:
    """
    Configure, build and install a source tree that is already on disk.

    Steps run in strict order and stop at the first failure; nothing is
    retried or rolled back.

    Args:
        source_dir: Directory containing the configure script
        build_dir: Directory to configure and build in
        output_dir: Installation prefix (must exist)
        configure_args: Extra configure flags
        env: Environment overlay for every step
        parallelism: make -j level
        make: Name or path of the make program
        output: Diagnostic stream for tool stdout (default: sys.stderr)

    Returns:
        Canonical path of output_dir

    Raises:
        DependencyBuildError: Wrapping the failing step's error

    Example:
        >>> build_local_dependency("src/zlib-1.3", "build", "prefix", [], {}, 4)
        PosixPath('/abs/prefix')
    """
    with _stage(BuildStage.CANONICALIZE):
        source_dir_abs = canonicalize(source_dir)
        build_dir_abs = canonicalize(build_dir)
        output_dir_abs = canonicalize(output_dir)

    logger.info("Running configure...")
    with _stage(BuildStage.CONFIGURE):
        run_configure(
            output_dir_abs,
            build_dir_abs,
            source_dir_abs,
            configure_args,
            env,
            output=output,
        )

    logger.info("Running make...")
    with _stage(BuildStage.BUILD):
        run_make(build_dir_abs, [], env, parallelism, make=make, output=output)

    logger.info("Running make install...")
    with _stage(BuildStage.INSTALL):
        run_make(
            build_dir_abs, ["install"], env, parallelism, make=make, output=output
        )

    logger.info(f"Installed into {output_dir_abs}")
    return output_dir_abs


def fetch_build_dependency(
    url: str,
    output_dir: Union[str, Path],
    source_dirname: Union[str, Path],
    configure_args: Sequence[str],
    env: Mapping[str, str],
    timeout: Timeout,
    parallelism: int,
    download_dir: Optional[Path] = None,
    build_dir: Optional[Path] = None,
    make: str = DEFAULT_MAKE,
    output: Optional[TextIO] = None,
) -> Path:
    """
    Download a .tar.gz source archive, then configure, build and install it.

    Args:
        url: URL of the gzip-compressed tar archive
        output_dir: Installation prefix (must exist)
        source_dirname: Path of the source tree inside the archive,
            e.g. "binutils-2.41"
        configure_args: Extra configure flags
        env: Environment overlay for every step
        timeout: Fetch timeout in seconds (0 disables it)
        parallelism: make -j level
        download_dir: Extract here instead of an ephemeral directory
        build_dir: Build here instead of an ephemeral directory
        make: Name or path of the make program
        output: Diagnostic stream for tool stdout (default: sys.stderr)

    Returns:
        Canonical path of output_dir

    Raises:
        DependencyBuildError: Wrapping the failing step's error. Use
            is_fetch_failure / is_build_failure to branch on it.
    """
    with _stage(BuildStage.CANONICALIZE):
        output_dir_abs = canonicalize(output_dir)

    with ExitStack() as stack:
        with _stage(BuildStage.FETCH):
            dl_dir_abs = stack.enter_context(
                _working_directory(download_dir, DOWNLOAD_DIR_PREFIX)
            )
            logger.debug(f"Download directory: {dl_dir_abs}")
            fetch_and_extract(url, dl_dir_abs, timeout)

        with _stage(BuildStage.LOCATE_SOURCE):
            source_dir_abs = _locate_source(dl_dir_abs, source_dirname)
        logger.debug(f"Downloaded source: {source_dir_abs}")

        with _stage(BuildStage.CANONICALIZE):
            build_dir_abs = stack.enter_context(
                _working_directory(build_dir, BUILD_DIR_PREFIX)
            )
        logger.debug(f"Build directory: {build_dir_abs}")

        return build_local_dependency(
            source_dir_abs,
            build_dir_abs,
            output_dir_abs,
            configure_args,
            env,
            parallelism,
            make=make,
            output=output,
        )


def _locate_source(download_dir: Path, source_dirname: Union[str, Path]) -> Path:
    candidate = download_dir / source_dirname
    try:
        source_dir = canonicalize(candidate)
    except FilesystemError as e:
        raise SourceDirectoryNotFoundError(str(source_dirname), str(download_dir)) from e
    if not source_dir.is_dir():
        raise SourceDirectoryNotFoundError(str(source_dirname), str(download_dir))
    return source_dir


__all__ = [
    "BUILD_DIR_PREFIX",
    "DOWNLOAD_DIR_PREFIX",
    "build_local_dependency",
    "fetch_build_dependency",
]
