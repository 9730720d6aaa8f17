"""
Shared utilities for CLI commands.

Turns the repeatable build options into the values the pipeline expects and
reports pipeline failures consistently.
"""

import logging
from typing import Dict, List, Optional

from autotoolsdep.config.recipe import parse_parallelism
from autotoolsdep.core.exceptions import ConfigError, DependencyBuildError

logger = logging.getLogger(__name__)


def parse_env_assignments(assignments: Optional[List[str]]) -> Dict[str, str]:
    """
    Parse NAME=VALUE strings into an environment overlay.

    Later assignments to the same name win.

    Raises:
        ConfigError: If an assignment has no '=' or an empty name

    Example:
        >>> parse_env_assignments(["CC=clang", "CFLAGS=-O2 -g"])
        {'CC': 'clang', 'CFLAGS': '-O2 -g'}
    """
    env: Dict[str, str] = {}
    for assignment in assignments or []:
        name, sep, value = assignment.partition("=")
        if not sep or not name:
            raise ConfigError(
                f"Invalid environment assignment '{assignment}' (expected NAME=VALUE)"
            )
        env[name] = value
    return env


def resolve_parallelism(value: Optional[str], default: Optional[int] = None) -> int:
    """Parallelism from the -j option, falling back to default, then 'auto'."""
    if value is None:
        return default if default is not None else parse_parallelism("auto")
    return parse_parallelism(value)


def report_build_failure(error: DependencyBuildError) -> int:
    """
    Log a pipeline failure and return the command exit code.

    Returns:
        Always 1
    """
    if error.is_fetch_failure:
        logger.error(f"Fetching the dependency failed ({error.stage.value}): {error.cause}")
    else:
        logger.error(f"Building the dependency failed ({error.stage.value}): {error.cause}")
    return 1
