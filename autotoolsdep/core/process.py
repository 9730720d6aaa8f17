"""
External command execution.

run_command() is the only place autotoolsdep talks to external build tools.
Standard input is closed, standard output is forwarded live to a diagnostic
stream, standard error is inherited, and a non-zero exit becomes a
CommandFailedError. There is no timeout: a hung child blocks the caller.
"""

import logging
import os
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence, TextIO, Union

from autotoolsdep.core.exceptions import CommandFailedError, ProcessInvocationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a successful command."""

    command: str
    returncode: int


def format_command(executable: Union[str, Path], args: Sequence[str]) -> str:
    """
    Reconstruct the command line for logs and error messages.

    Example:
        >>> format_command("make", ["-j4", "install"])
        'make -j4 install'
    """
    return " ".join([str(executable), *args])


def run_command(
    executable: Union[str, Path],
    args: Sequence[str],
    cwd: Path,
    env: Mapping[str, str],
    output: Optional[TextIO] = None,
) -> CommandResult:
    """
    Run an external command, streaming its stdout to a diagnostic stream.

    Args:
        executable: Program name (looked up on PATH) or path
        args: Arguments, not including the program itself
        cwd: Working directory for the child
        env: Variables overlaid on the current environment
        output: Where the child's stdout goes (default: sys.stderr)

    Returns:
        CommandResult with exit status 0

    Raises:
        ProcessInvocationError: If the program cannot be started
        CommandFailedError: If the program exits with a non-zero status
    """
    sink = output if output is not None else sys.stderr
    command = format_command(executable, args)
    child_env = {**os.environ, **env}

    logger.info(f"Running command (in cwd {cwd}) '{command}'")

    try:
        process = subprocess.Popen(
            [str(executable), *args],
            cwd=str(cwd),
            env=child_env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            text=True,
            errors="replace",
        )
    except OSError as e:
        raise ProcessInvocationError(str(executable), str(e)) from e

    with process:
        for line in process.stdout:
            sink.write(line)
            sink.flush()
        returncode = process.wait()

    if returncode != 0:
        raise CommandFailedError(command, returncode)

    return CommandResult(command=command, returncode=returncode)


__all__ = [
    "CommandResult",
    "format_command",
    "run_command",
]
