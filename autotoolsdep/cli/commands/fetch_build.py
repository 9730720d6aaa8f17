"""
Fetch-build command implementation.

Runs the full pipeline for a dependency given either a YAML recipe or
--url/--source-dir. Command-line options override recipe values.
"""

import logging

from autotoolsdep.build.pipeline import fetch_build_dependency
from autotoolsdep.cli.utils import (
    parse_env_assignments,
    report_build_failure,
    resolve_parallelism,
)
from autotoolsdep.config.recipe import DependencyRecipe, parse_recipe
from autotoolsdep.core.exceptions import ConfigError, DependencyBuildError

logger = logging.getLogger(__name__)


def load_recipe(args) -> DependencyRecipe:
    """
    Build the effective recipe from --recipe and command-line overrides.

    Raises:
        ConfigError: If neither a recipe nor --url/--source-dir are given
    """
    if args.recipe is not None:
        recipe = parse_recipe(args.recipe)
        url = args.url or recipe.url
        source_dir = args.source_dir or recipe.source_dir
        configure_args = recipe.configure_args + (args.configure_args or [])
        env = {**recipe.env, **parse_env_assignments(args.env)}
        timeout = args.timeout if args.timeout is not None else recipe.timeout
        parallelism = resolve_parallelism(args.parallelism, recipe.parallelism)
        name = recipe.name
    else:
        if not args.url or not args.source_dir:
            raise ConfigError("fetch-build needs --recipe or both --url and --source-dir")
        url = args.url
        source_dir = args.source_dir
        configure_args = args.configure_args or []
        env = parse_env_assignments(args.env)
        timeout = args.timeout
        parallelism = resolve_parallelism(args.parallelism)
        name = None

    kwargs = {}
    if timeout is not None:
        kwargs["timeout"] = timeout

    return DependencyRecipe(
        url=url,
        source_dir=source_dir,
        name=name,
        configure_args=configure_args,
        env=env,
        parallelism=parallelism,
        **kwargs,
    )


def run(args) -> int:
    """
    Run the fetch-build command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    recipe = load_recipe(args)
    logger.info(f"Building {recipe.name or recipe.source_dir} from {recipe.url}")

    try:
        prefix = fetch_build_dependency(
            recipe.url,
            args.prefix,
            recipe.source_dir,
            recipe.configure_args,
            recipe.env,
            recipe.timeout,
            recipe.parallelism,
            download_dir=args.download_dir,
            build_dir=args.build_dir,
            make=args.make,
        )
    except DependencyBuildError as e:
        return report_build_failure(e)

    print(prefix)
    return 0
