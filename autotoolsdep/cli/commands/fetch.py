"""
Fetch command implementation.

Downloads a .tar.gz archive and extracts it without building anything.
"""

import logging

from autotoolsdep.config.recipe import DEFAULT_TIMEOUT
from autotoolsdep.core.download import fetch_and_extract
from autotoolsdep.core.exceptions import FetchError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the fetch command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    timeout = args.timeout if args.timeout is not None else DEFAULT_TIMEOUT

    try:
        dest = fetch_and_extract(args.url, args.dest, timeout)
    except FetchError as e:
        logger.error(f"Fetch failed: {e}")
        return 1

    logger.info(f"Extracted {args.url} into {dest}")
    return 0
