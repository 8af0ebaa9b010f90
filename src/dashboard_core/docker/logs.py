"""
Lazy, cancellable streaming of container log lines.

LogStream wraps one `docker logs` subprocess behind an async iterator.
Lifecycle rules:

- The subprocess is spawned on the first __anext__, not on construction
- Lines are read from stdout until EOF; stderr is drained concurrently so
  a noisy stderr cannot block the child on a full pipe
- After stdout closes, collected stderr is yielded as one "Error: ..." line
- The stream is single-use: once finished or closed it yields nothing more
- aclose(), leaving `async with`, or cancelling the consuming task
  terminates the subprocess (SIGTERM -> wait -> SIGKILL, always reaped)

Example:
    async with monitor.stream_logs("web", follow=True) as lines:
        async for line in lines:
            print(line)
            if should_stop():
                break  # process is terminated on exit from `async with`
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence

logger = logging.getLogger(__name__)


class LogStream:
    """
    Single-use async iterator over the stdout lines of one command.

    Args:
        command: Program and arguments to run
        rejection: If set, the stream yields only this line and never
            spawns anything (used for invalid container ids)
        stop_timeout: Seconds to wait after SIGTERM before SIGKILL
    """

    def __init__(
        self,
        command: Sequence[str],
        *,
        rejection: str | None = None,
        stop_timeout: float = 5.0,
    ) -> None:
        self._command = tuple(command)
        self._rejection = rejection
        self._stop_timeout = stop_timeout
        self._process: asyncio.subprocess.Process | None = None
        self._lines = self._generate()
        self._closed = False

    @property
    def process(self) -> asyncio.subprocess.Process | None:
        """The backing subprocess, or None if it has not been spawned."""
        return self._process

    @property
    def closed(self) -> bool:
        """True once the stream has been closed explicitly."""
        return self._closed

    def __aiter__(self) -> "LogStream":
        return self

    async def __anext__(self) -> str:
        if self._closed:
            raise StopAsyncIteration
        return await self._lines.__anext__()

    async def __aenter__(self) -> "LogStream":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Stop iteration and terminate the subprocess if it is still running."""
        self._closed = True
        # Terminating first makes a consumer blocked in readline() see EOF
        await self._terminate()
        if not self._lines.ag_running:
            await self._lines.aclose()

    async def _generate(self) -> AsyncIterator[str]:
        if self._rejection is not None:
            yield self._rejection
            return

        logger.debug("Streaming process: %s", " ".join(self._command))
        try:
            self._process = await asyncio.create_subprocess_exec(
                *self._command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            logger.error("Failed to start %s: %s", self._command[0], exc)
            yield f"Error: {exc}"
            return

        proc = self._process
        stderr_task = asyncio.create_task(proc.stderr.read())
        try:
            while True:
                chunk = await proc.stdout.readline()
                if not chunk or self._closed:
                    break
                yield chunk.decode("utf-8", errors="replace").rstrip("\r\n")

            stderr = (await stderr_task).decode("utf-8", errors="replace").strip()
            await proc.wait()
            if stderr and not self._closed:
                yield f"Error: {stderr}"
        finally:
            if not stderr_task.done():
                stderr_task.cancel()
            await self._terminate()

    async def _terminate(self) -> None:
        """
        Terminate the subprocess if it is still running.

        Sends SIGTERM, waits up to stop_timeout, escalates to SIGKILL.
        Always awaits wait() so no zombie is left behind.
        """
        proc = self._process
        if proc is None or proc.returncode is not None:
            return

        try:
            proc.terminate()
        except ProcessLookupError:
            # Exited between the returncode check and the signal
            await proc.wait()
            return

        try:
            await asyncio.wait_for(proc.wait(), timeout=self._stop_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Process %s ignored SIGTERM for %.1fs, killing",
                self._command[0],
                self._stop_timeout,
            )
            proc.kill()
            await proc.wait()
