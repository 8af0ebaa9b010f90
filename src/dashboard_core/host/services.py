"""Discovery and control of the dashboard's host systemd service.

The dashboard manages one well-known unit family (e.g. vllm-*.service)
that may be installed or removed at any time, so the unit name is looked
up again on every operation instead of being cached.

All host commands go through HostExecutor, which picks nsenter, a helper
container or direct execution as appropriate.
"""

import logging
import shlex
from pathlib import PurePosixPath

from dashboard_core.config import Settings
from dashboard_core.config import settings as default_settings
from dashboard_core.host.executor import HostExecutor
from dashboard_core.validation import is_valid_identifier

logger = logging.getLogger(__name__)

INVALID_CONTAINER_NAME = "Invalid container name"
INVALID_LINE_COUNT = "Invalid line count"


def service_not_found_message(settings: Settings) -> str:
    """Text shown when no matching unit is installed, with a remediation hint."""
    return (
        f"No {settings.service_prefix}-* systemd service found in {settings.service_dir}.\n\n"
        "To create one, use:\n"
        "  ./run-recipe.sh <recipe> --install-service"
    )


class ServiceLocator:
    """
    Finds the first host unit named <prefix>-*<suffix>.

    Args:
        executor: Shared HostExecutor
        settings: Supplies service_dir, service_prefix and service_suffix
    """

    def __init__(self, executor: HostExecutor, settings: Settings | None = None) -> None:
        self._executor = executor
        self._settings = settings or default_settings

    async def find_service(self) -> str | None:
        """
        Return the base name of the first matching unit file.

        Example: /etc/systemd/system/vllm-node.service -> "vllm-node"

        Returns:
            Unit name without directory or suffix, or None if the host is
            unreachable, nothing matches, or the name is not a safe identifier
        """
        s = self._settings
        # The glob needs a shell; every piece of it comes from settings
        directory = shlex.quote(s.service_dir.rstrip("/"))
        pattern = f"{directory}/{s.service_prefix}-*{shlex.quote(s.service_suffix)}"
        output = await self._executor.run("sh", "-c", f"ls {pattern} 2>/dev/null | head -1")
        if not output:
            return None

        first = next((line.strip() for line in output.splitlines() if line.strip()), "")
        if not first:
            return None

        name = PurePosixPath(first).name.removesuffix(s.service_suffix)
        if not is_valid_identifier(name):
            logger.warning("Ignoring unit with unsafe name: %r", name)
            return None
        return name


class ServiceController:
    """
    start/stop/status/logs for the located host service.

    Every call re-runs discovery. When no unit is installed, start/stop
    return False and status/logs return service_not_found_message().

    Args:
        executor: Shared HostExecutor
        locator: ServiceLocator (built from executor if omitted)
        settings: Configuration
    """

    def __init__(
        self,
        executor: HostExecutor,
        locator: ServiceLocator | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._executor = executor
        self._settings = settings or default_settings
        self._locator = locator or ServiceLocator(executor, self._settings)

    async def start_service(self) -> bool:
        """Start the located unit with systemctl start."""
        return await self._systemctl("start")

    async def stop_service(self) -> bool:
        """Stop the located unit with systemctl stop."""
        return await self._systemctl("stop")

    async def get_status(self) -> str | None:
        """
        Return the unit's systemctl is-active state.

        Returns:
            "active", "inactive", "failed", ... ; the not-found text when no
            unit is installed; None if the host command could not run
        """
        name = await self._locator.find_service()
        if name is None:
            return service_not_found_message(self._settings)

        output = await self._executor.run("systemctl", "is-active", name)
        if output is None:
            return None
        return output.strip()

    async def get_logs(self, container_name: str, lines: int | None = None) -> str:
        """
        Return the unit's recent journal entries.

        Args:
            container_name: Container the logs are displayed for; only
                validated, the unit is found by discovery
            lines: Number of journal lines (default: settings.service_log_lines)

        Returns:
            Journal text, or a human-readable error text. Never raises.
        """
        if not is_valid_identifier(container_name):
            logger.warning("Rejected service logs for invalid container name: %r", container_name)
            return INVALID_CONTAINER_NAME

        count = self._settings.service_log_lines if lines is None else lines
        if count < 1:
            return INVALID_LINE_COUNT

        name = await self._locator.find_service()
        if name is None:
            return service_not_found_message(self._settings)

        output = await self._executor.run(
            "journalctl", "-u", name, "-n", str(count), "--no-pager"
        )
        if output is None:
            return (
                f"Error getting service logs for {name}.\n\n"
                "Ensure the dashboard is running with --pid=host "
                "or can start a privileged helper container."
            )
        if not output.strip():
            return f"No logs available for {name}"
        return output

    async def _systemctl(self, command: str) -> bool:
        name = await self._locator.find_service()
        if name is None:
            logger.warning(
                "systemctl %s skipped: no %s-* service found",
                command,
                self._settings.service_prefix,
            )
            return False

        if not is_valid_identifier(name):
            logger.warning("Rejected systemctl %s due to invalid service name: %r", command, name)
            return False

        output = await self._executor.run("systemctl", command, name)
        return output is not None
