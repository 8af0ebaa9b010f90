"""
Async execution of a single external command.

All methods use asyncio.create_subprocess_exec with array arguments, so no
caller-supplied string is ever interpreted by a shell. run_command never
raises for process-level failures: a missing binary or a permission error
is turned into a CommandResult with a shell-style exit code (127/126) and
the OS error text in stderr.

There is no timeout. A hung tool hangs the awaiting coroutine until the
caller cancels it.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Shell conventions for "could not run the program"
EXIT_NOT_FOUND = 127
EXIT_CANNOT_EXECUTE = 126


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one finished external command.

    Attributes:
        args: The argument list that was executed
        returncode: Process exit code (127/126 when spawning failed)
        stdout: Captured standard output, UTF-8 decoded
        stderr: Captured standard error, UTF-8 decoded
        spawned: False when the program could not be launched at all
    """

    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    spawned: bool = True

    @property
    def ok(self) -> bool:
        """True if the process exited with status zero."""
        return self.returncode == 0


CommandRunner = Callable[..., Awaitable[CommandResult]]
"""Signature of run_command; components accept one so tests can inject fakes."""


def _decode(data: bytes | None) -> str:
    return data.decode("utf-8", errors="replace") if data else ""


async def run_command(*args: str) -> CommandResult:
    """
    Run a command to completion and capture its output.

    Args:
        *args: Program followed by its arguments

    Returns:
        CommandResult with exit code and decoded stdout/stderr
    """
    logger.debug("Executing process: %s", " ".join(args))
    try:
        proc = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await proc.communicate()
    except FileNotFoundError as exc:
        logger.error("Failed to run %s: %s", args[0], exc)
        return CommandResult(
            args=args, returncode=EXIT_NOT_FOUND, stderr=str(exc), spawned=False
        )
    except OSError as exc:
        logger.error("Failed to run %s: %s", args[0], exc)
        return CommandResult(
            args=args, returncode=EXIT_CANNOT_EXECUTE, stderr=str(exc), spawned=False
        )

    logger.debug("Process %s exited with code %s", args[0], proc.returncode)
    return CommandResult(
        args=args,
        returncode=proc.returncode,
        stdout=_decode(stdout),
        stderr=_decode(stderr),
    )
