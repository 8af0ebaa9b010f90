"""Container monitor built on the docker command-line tool.

The docker CLI is invoked directly (not through the HostExecutor): inside
the dashboard container the engine is reachable through the mounted
socket, so no namespace indirection is needed.

All methods return plain values. Listing degrades to an empty list,
lifecycle commands return bool, and log fetching embeds errors in the
returned text, because results feed straight into a display surface.
"""

import asyncio
import logging

from dashboard_core.config import Settings
from dashboard_core.config import settings as default_settings
from dashboard_core.docker.logs import LogStream
from dashboard_core.docker.parsing import (
    CONTAINER_FORMAT,
    STATS_FORMAT,
    parse_containers,
    parse_stats,
)
from dashboard_core.process import CommandRunner, run_command
from dashboard_core.types import ContainerRecord
from dashboard_core.validation import is_valid_identifier

logger = logging.getLogger(__name__)

INVALID_CONTAINER_ID = "Invalid container ID"


class ContainerMonitor:
    """Lists, controls and reads logs of containers via the docker CLI.

    Args:
        settings: Configuration (docker binary, default tail, stop timeout)
        runner: Command runner, replaceable in tests
    """

    def __init__(
        self,
        settings: Settings | None = None,
        runner: CommandRunner = run_command,
    ) -> None:
        self._settings = settings or default_settings
        self._run = runner

    @property
    def docker(self) -> str:
        return self._settings.docker_binary

    async def list_containers(self) -> list[ContainerRecord]:
        """Return every container (running or not) with CPU/memory usage.

        The container listing and the stats snapshot are independent
        commands and run concurrently. Stats are joined by container id;
        containers without a stats entry get the "--" placeholder.

        Returns:
            List of ContainerRecord, or [] if the listing failed or was empty
        """
        listing, usage = await asyncio.gather(
            self._run(
                self.docker,
                "container",
                "ls",
                "--all",
                "--no-trunc",
                "--format",
                CONTAINER_FORMAT,
            ),
            self._run(
                self.docker,
                "stats",
                "--all",
                "--no-stream",
                "--no-trunc",
                "--format",
                STATS_FORMAT,
            ),
        )

        if not listing.ok:
            logger.warning(
                "docker container ls failed with code %s: %s",
                listing.returncode,
                listing.stderr.strip(),
            )
            return []
        if not listing.stdout.strip():
            return []

        stats = {}
        if usage.ok:
            stats = parse_stats(usage.stdout)
        else:
            logger.warning(
                "docker stats failed with code %s: %s",
                usage.returncode,
                usage.stderr.strip(),
            )

        return parse_containers(listing.stdout, stats)

    async def start_container(self, container_id: str) -> bool:
        """Start the container; True if docker exited with status 0."""
        return await self._run_lifecycle("start", container_id)

    async def stop_container(self, container_id: str) -> bool:
        """Stop the container; True if docker exited with status 0."""
        return await self._run_lifecycle("stop", container_id)

    async def restart_container(self, container_id: str) -> bool:
        """Restart the container; True if docker exited with status 0."""
        return await self._run_lifecycle("restart", container_id)

    async def get_logs(self, container_id: str, tail: int | None = None) -> str:
        """Return the last lines of a container's log.

        Args:
            container_id: Container id or name
            tail: Number of lines (default: settings.log_tail)

        Returns:
            Log text, or a human-readable error text. Never raises.
        """
        if not is_valid_identifier(container_id):
            logger.warning("Rejected docker logs for invalid container id: %r", container_id)
            return INVALID_CONTAINER_ID

        lines = self._settings.log_tail if tail is None else tail
        result = await self._run(self.docker, "logs", "--tail", str(lines), container_id)
        if result.ok:
            return result.stdout
        return f"Error getting logs: {result.stderr}"

    def stream_logs(self, container_id: str, follow: bool = False) -> LogStream:
        """Return a lazy stream of a container's log lines.

        Nothing is spawned until the stream is first iterated. With
        follow=True the stream only ends when docker exits or the consumer
        closes/cancels it; closing terminates the docker process.

        Args:
            container_id: Container id or name
            follow: Keep streaming new lines (docker logs --follow)

        Returns:
            LogStream; for an invalid id it yields a single error line
        """
        if not is_valid_identifier(container_id):
            logger.warning("Rejected log stream for invalid container id: %r", container_id)
            return LogStream((), rejection=INVALID_CONTAINER_ID)

        command = [self.docker, "logs"]
        if follow:
            command.append("--follow")
        command.append(container_id)
        return LogStream(command, stop_timeout=self._settings.stream_stop_timeout)

    async def _run_lifecycle(self, command: str, container_id: str) -> bool:
        if not is_valid_identifier(container_id):
            logger.warning(
                "Rejected docker %s due to invalid container id: %r", command, container_id
            )
            return False

        result = await self._run(self.docker, command, container_id)
        if not result.ok:
            logger.warning(
                "docker %s failed for %s with code %s: %s",
                command,
                container_id,
                result.returncode,
                result.stderr.strip(),
            )
        return result.ok
