"""
autotoolsdep CLI argument parser.

This module implements the command-line interface for autotoolsdep using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

try:
    from importlib.metadata import version

    __version__ = version("autotoolsdep")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """autotoolsdep command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="autotoolsdep",
            description="autotoolsdep - fetch and build configure/make dependencies",
            epilog='Use "autotoolsdep COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument(
            "--version", action="version", version=f"autotoolsdep {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_fetch_command(subparsers)
        self._add_build_command(subparsers)
        self._add_fetch_build_command(subparsers)

        return parser

    def _add_fetch_command(self, subparsers):
        """Add 'fetch' subcommand."""
        parser = subparsers.add_parser(
            "fetch",
            help="Download and extract a .tar.gz archive",
            description="Stream a .tar.gz archive from URL and extract it into DEST",
        )
        parser.add_argument("url", metavar="URL", help="Archive URL")
        parser.add_argument(
            "--dest",
            type=Path,
            required=True,
            metavar="DIR",
            help="Existing directory to extract into",
        )
        parser.add_argument(
            "--timeout",
            type=float,
            default=None,
            metavar="SECONDS",
            help="Download timeout in seconds, 0 for none (default: 30)",
        )

    def _add_build_options(self, parser):
        """Options shared by 'build' and 'fetch-build'."""
        parser.add_argument(
            "--prefix",
            type=Path,
            required=True,
            metavar="DIR",
            help="Existing installation prefix",
        )
        parser.add_argument(
            "--build-dir",
            type=Path,
            metavar="DIR",
            help="Build directory (default: temporary directory)",
        )
        parser.add_argument(
            "--configure-arg",
            action="append",
            dest="configure_args",
            default=None,
            metavar="ARG",
            help="Extra configure flag, repeatable (use --configure-arg=--flag)",
        )
        parser.add_argument(
            "--env",
            action="append",
            default=None,
            metavar="NAME=VALUE",
            help="Environment variable for configure/make, repeatable",
        )
        parser.add_argument(
            "-j",
            "--jobs",
            dest="parallelism",
            metavar="N",
            help="Parallel make jobs, or 'auto' (default: auto)",
        )
        parser.add_argument(
            "--make",
            default="make",
            metavar="PROG",
            help="make program to run (default: make)",
        )

    def _add_build_command(self, subparsers):
        """Add 'build' subcommand."""
        parser = subparsers.add_parser(
            "build",
            help="Build a source tree already on disk",
            description="Run configure, make and make install for a local source tree",
        )
        parser.add_argument(
            "--source",
            type=Path,
            required=True,
            metavar="DIR",
            help="Source directory containing the configure script",
        )
        self._add_build_options(parser)

    def _add_fetch_build_command(self, subparsers):
        """Add 'fetch-build' subcommand."""
        parser = subparsers.add_parser(
            "fetch-build",
            help="Download, configure, build and install a dependency",
            description="Fetch a .tar.gz source archive and build it into PREFIX",
        )
        parser.add_argument(
            "--recipe",
            type=Path,
            metavar="PATH",
            help="YAML dependency recipe",
        )
        parser.add_argument("--url", metavar="URL", help="Archive URL")
        parser.add_argument(
            "--source-dir",
            metavar="NAME",
            help="Source directory inside the archive, e.g. pkg-1.0",
        )
        parser.add_argument(
            "--download-dir",
            type=Path,
            metavar="DIR",
            help="Extraction directory (default: temporary directory)",
        )
        parser.add_argument(
            "--timeout",
            type=float,
            default=None,
            metavar="SECONDS",
            help="Download timeout in seconds, 0 for none (default: 30)",
        )
        self._add_build_options(parser)

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "fetch": "autotoolsdep.cli.commands.fetch",
            "build": "autotoolsdep.cli.commands.build",
            "fetch-build": "autotoolsdep.cli.commands.fetch_build",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
