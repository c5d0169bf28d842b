"""Process invocation for the container CLI.

Commands run synchronously with stdin and stderr attached to the caller's
terminal so build progress stays visible; only stdout is captured.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass

from cdk8s_image.errors import EXECUTION_ERROR, ShellCommandError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Result of a finished command.

    Attributes:
        command: Executable that was run.
        args: Arguments passed to the executable.
        stdout: Captured standard output.
        exit_code: Process exit code.
    """

    command: str
    args: tuple[str, ...]
    stdout: str
    exit_code: int

    @property
    def success(self) -> bool:
        return self.exit_code == 0


def run_command(command: str, args: Sequence[str]) -> CommandResult:
    """Run a command and capture its stdout.

    Args:
        command: Executable name or path.
        args: Arguments for the executable.

    Returns:
        CommandResult with the captured output and exit code.

    Raises:
        ShellCommandError: If the process cannot be started.
    """
    argv = [command, *args]
    logger.info("Executing: %s", shlex.join(argv))

    try:
        proc = subprocess.run(
            argv,
            stdout=subprocess.PIPE,
            text=True,
            check=False,
        )
    except OSError as e:
        message = f"Failed to execute {command}: {e}"
        logger.error(message)
        raise ShellCommandError(
            message,
            command=command,
            arguments=args,
            code=EXECUTION_ERROR,
        ) from e

    return CommandResult(
        command=command,
        args=tuple(args),
        stdout=proc.stdout or "",
        exit_code=proc.returncode,
    )


def shell(command: str, *args: str) -> str:
    """Run a command and return its stdout, failing on non-zero exit.

    Raises:
        ShellCommandError: If the command cannot be started or exits non-zero.
    """
    result = run_command(command, args)
    if not result.success:
        message = (
            f"{shlex.join([command, *args])} failed with exit code {result.exit_code}"
        )
        logger.error(message)
        raise ShellCommandError(
            message,
            command=command,
            arguments=args,
            exit_code=result.exit_code,
            output=result.stdout,
        )
    return result.stdout


__all__ = ["CommandResult", "run_command", "shell"]
