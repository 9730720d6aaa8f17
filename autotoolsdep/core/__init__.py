"""
Core functionality for autotoolsdep.

This package contains the foundational modules the build pipeline depends on:
downloads, archive extraction, process execution and the error hierarchy.
"""

from .exceptions import (
    AutotoolsDepError,
    FetchError,
    UrlParseError,
    TransportError,
    FilesystemError,
    ArchiveExtractionError,
    InsecureArchiveError,
    SourceDirectoryNotFoundError,
    BuildError,
    ProcessInvocationError,
    CommandFailedError,
    BuildStage,
    DependencyBuildError,
    ConfigError,
)

from .download import (
    ArchiveStream,
    parse_url,
    fetch_decompress,
    fetch_and_extract,
)

from .filesystem import (
    canonicalize,
    extract_stream,
    temporary_directory,
)

from .process import (
    CommandResult,
    format_command,
    run_command,
)

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
    "ArchiveStream",
    "parse_url",
    "fetch_decompress",
    "fetch_and_extract",
    "canonicalize",
    "extract_stream",
    "temporary_directory",
    "CommandResult",
    "format_command",
    "run_command",
]
