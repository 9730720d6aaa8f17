"""
configure/make drivers.

Thin wrappers over run_command() that compose the autotools command lines:
the configure script always receives the install prefix as its last
argument, and make always receives exactly one leading -j flag.
"""

import logging
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, TextIO

from autotoolsdep.core.filesystem import canonicalize
from autotoolsdep.core.process import CommandResult, run_command

logger = logging.getLogger(__name__)

CONFIGURE_SCRIPT = "configure"
DEFAULT_MAKE = "make"


def configure_arguments(args: Sequence[str], prefix_dir: Path) -> List[str]:
    """
    Compose configure arguments with the prefix flag appended last.

    A "--prefix" already present in args is left in place; ours still comes
    last.

    Example:
        >>> configure_arguments(["--disable-nls"], Path("/opt/dep"))
        ['--disable-nls', '--prefix', '/opt/dep']
    """
    return [*args, "--prefix", str(prefix_dir)]


def make_arguments(args: Sequence[str], parallelism: int) -> List[str]:
    """
    Compose make arguments with a single parallelism flag first.

    Example:
        >>> make_arguments(["install"], 4)
        ['-j4', 'install']
    """
    return [f"-j{parallelism}", *args]


def run_configure(
    prefix_dir: Path,
    build_dir: Path,
    source_dir: Path,
    args: Sequence[str],
    env: Mapping[str, str],
    output: Optional[TextIO] = None,
) -> CommandResult:
    """
    Run <source_dir>/configure from build_dir with --prefix set.

    Args:
        prefix_dir: Installation prefix (must exist)
        build_dir: Working directory for the configure run
        source_dir: Source tree containing the configure script
        args: Extra configure flags, passed through in order
        env: Environment overlay
        output: Diagnostic stream for the script's stdout

    Raises:
        FilesystemError: If source_dir or prefix_dir cannot be canonicalized
        ProcessInvocationError: If the script cannot be started
        CommandFailedError: If the script exits non-zero
    """
    abs_source_dir = canonicalize(source_dir)
    abs_prefix_dir = canonicalize(prefix_dir)
    configure_path = abs_source_dir / CONFIGURE_SCRIPT

    logger.debug(f"Source directory: {abs_source_dir}")
    logger.debug(f"Configure script: {configure_path}")

    return run_command(
        configure_path,
        configure_arguments(args, abs_prefix_dir),
        cwd=build_dir,
        env=env,
        output=output,
    )


def run_make(
    cwd: Path,
    args: Sequence[str],
    env: Mapping[str, str],
    parallelism: int,
    make: str = DEFAULT_MAKE,
    output: Optional[TextIO] = None,
) -> CommandResult:
    """
    Run make in cwd with a -j<parallelism> flag prepended to args.

    Args:
        cwd: Build directory
        args: Targets and variables, e.g. [] or ["install"]
        env: Environment overlay
        parallelism: Number of parallel jobs requested from make
        make: Name or path of the make program
        output: Diagnostic stream for make's stdout

    Raises:
        ProcessInvocationError: If make cannot be started
        CommandFailedError: If make exits non-zero
    """
    return run_command(
        make,
        make_arguments(args, parallelism),
        cwd=cwd,
        env=env,
        output=output,
    )


__all__ = [
    "CONFIGURE_SCRIPT",
    "DEFAULT_MAKE",
    "configure_arguments",
    "make_arguments",
    "run_configure",
    "run_make",
]
