"""
Build command implementation.

Configures, builds and installs a source tree that is already on disk.
"""

import logging
from contextlib import ExitStack

from autotoolsdep.build.pipeline import BUILD_DIR_PREFIX, build_local_dependency
from autotoolsdep.cli.utils import (
    parse_env_assignments,
    report_build_failure,
    resolve_parallelism,
)
from autotoolsdep.core.exceptions import DependencyBuildError
from autotoolsdep.core.filesystem import temporary_directory

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the build command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    env = parse_env_assignments(args.env)
    parallelism = resolve_parallelism(args.parallelism)

    with ExitStack() as stack:
        build_dir = args.build_dir
        if build_dir is None:
            build_dir = stack.enter_context(temporary_directory(BUILD_DIR_PREFIX))

        try:
            prefix = build_local_dependency(
                args.source,
                build_dir,
                args.prefix,
                args.configure_args or [],
                env,
                parallelism,
                make=args.make,
            )
        except DependencyBuildError as e:
            return report_build_failure(e)

    print(prefix)
    return 0
