"""
Centralized exception hierarchy for autotoolsdep.

Errors are layered: fetch-class errors (URL parsing, transport, filesystem)
and build-class errors (process invocation, failed commands) are raised by
the low-level modules, and the pipeline wraps them once in a
DependencyBuildError so callers can tell a network/archive failure from a
toolchain failure without inspecting message text.
"""

from enum import Enum
from typing import Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class AutotoolsDepError(Exception):
    """Base exception for all autotoolsdep errors."""

    pass


# ============================================================================
# Fetch-class Exceptions
# ============================================================================


class FetchError(AutotoolsDepError):
    """Base exception for failures while acquiring the source tree."""

    pass


class UrlParseError(FetchError):
    """The supplied URL is not well-formed. Raised before any network I/O."""

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        msg = f"Invalid URL: {url!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class TransportError(FetchError):
    """Request, connection, timeout or HTTP status failure."""

    def __init__(self, url: str, reason: str):
        self.url = url
        super().__init__(f"Failed to download {url}: {reason}")


class FilesystemError(FetchError):
    """Base exception for filesystem operations."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


class SourceDirectoryNotFoundError(FilesystemError):
    """The extracted archive does not contain the expected source directory."""

    def __init__(self, source_dirname: str, search_root: str):
        self.source_dirname = source_dirname
        self.search_root = search_root
        super().__init__(
            f"Source directory '{source_dirname}' not found in extracted archive "
            f"at {search_root}"
        )


# ============================================================================
# Build-class Exceptions
# ============================================================================


class BuildError(AutotoolsDepError):
    """Base exception for failures of the external build toolchain."""

    pass


class ProcessInvocationError(BuildError):
    """The external executable could not be started."""

    def __init__(self, executable: str, reason: str):
        self.executable = executable
        super().__init__(f"Failed to execute '{executable}': {reason}")


class CommandFailedError(BuildError):
    """The external executable ran but exited with a non-zero status."""

    def __init__(self, command: str, returncode: int):
        self.command = command
        self.returncode = returncode
        super().__init__(f"Command '{command}' failed with exit code {returncode}")


# ============================================================================
# Pipeline Exceptions
# ============================================================================


class BuildStage(Enum):
    """Pipeline step in which a dependency build failed."""

    CANONICALIZE = "canonicalize"
    FETCH = "fetch"
    LOCATE_SOURCE = "locate-source"
    CONFIGURE = "configure"
    BUILD = "build"
    INSTALL = "install"


class DependencyBuildError(AutotoolsDepError):
    """
    Composite failure of a dependency build.

    Wraps exactly one fetch-class or build-class error.

    Attributes:
        stage: Pipeline step that failed
        cause: The wrapped FetchError or BuildError
    """

    def __init__(self, stage: BuildStage, cause: AutotoolsDepError):
        self.stage = stage
        self.cause = cause
        super().__init__(f"Dependency build failed during {stage.value}: {cause}")

    @property
    def is_fetch_failure(self) -> bool:
        """True if the network, archive or filesystem failed."""
        return isinstance(self.cause, FetchError)

    @property
    def is_build_failure(self) -> bool:
        """True if the configure/make toolchain failed."""
        return isinstance(self.cause, BuildError)

    @property
    def returncode(self) -> Optional[int]:
        if isinstance(self.cause, CommandFailedError):
            return self.cause.returncode
        return None


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(AutotoolsDepError):
    """Recipe parsing or validation error."""

    pass


__all__ = [
    "AutotoolsDepError",
    "FetchError",
    "UrlParseError",
    "TransportError",
    "FilesystemError",
    "ArchiveExtractionError",
    "InsecureArchiveError",
    "SourceDirectoryNotFoundError",
    "BuildError",
    "ProcessInvocationError",
    "CommandFailedError",
    "BuildStage",
    "DependencyBuildError",
    "ConfigError",
]
