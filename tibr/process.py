"""
External command execution.

Every shell-out (npx, npm, docker-compose, psql) goes through run_command so
the CLI can surface the child's exit code unchanged.
"""

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from tibr.errors import CommandFailedError

logger = logging.getLogger(__name__)

# Shell convention for "command not found"
COMMAND_NOT_FOUND = 127

# Shell convention for a child killed by signal N: 128 + N
SIGNAL_EXIT_BASE = 128


@dataclass
class CommandResult:
    """Outcome of one external command."""
    command: str
    args: List[str]
    returncode: int
    stdout: Optional[str] = None
    stderr: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def command_line(self) -> str:
        return " ".join([self.command, *self.args])


def exit_status(returncode: int) -> int:
    """Exit code for this process to report a child's returncode.

    subprocess gives -N for a child killed by signal N, which sys.exit would
    wrap to 256-N.
    """
    if returncode < 0:
        return SIGNAL_EXIT_BASE - returncode
    return returncode


def run_command(
    command: str,
    args: Sequence[str] = (),
    inherit_io: bool = True,
    cwd: Optional[Union[str, Path]] = None,
    check: bool = False,
) -> CommandResult:
    """Run an external command and wait for it to exit.

    Args:
        command: Executable name, looked up on PATH
        args: Ordered argument list
        inherit_io: Stream the child's output to this terminal instead of capturing it
        cwd: Working directory for the child
        check: Raise CommandFailedError on a non-zero exit

    Returns:
        CommandResult with the child's exit code (and output when captured)
    """
    args = [str(a) for a in args]
    executable = shutil.which(command) or command
    logger.info(f"Running: {command} {' '.join(args)}")

    try:
        completed = subprocess.run(
            [executable, *args],
            cwd=str(cwd) if cwd else None,
            capture_output=not inherit_io,
            text=True,
        )
    except FileNotFoundError:
        logger.error(f"Executable not found: {command}")
        result = CommandResult(command, args, COMMAND_NOT_FOUND, stderr=f"{command}: command not found")
    else:
        result = CommandResult(
            command,
            args,
            completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )

    if not result.success:
        logger.warning(f"{result.command_line} exited with code {result.returncode}")
        if check:
            raise CommandFailedError(result.command_line, result.returncode)

    return result
