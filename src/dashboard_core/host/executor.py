"""Host command execution from inside a (possibly) sandboxed container.

The dashboard usually runs in a container but has to run systemctl and
journalctl against the physical host. HostExecutor finds a way to reach
the host's root namespaces and remembers it:

1. NSENTER: nsenter into PID 1's namespaces directly
   (works when the container has --pid=host and enough privilege)
2. HELPER_CONTAINER: start a short-lived privileged sibling container from
   our own image with --pid=host and nsenter from there
   (works when only the docker socket is mounted)
3. DIRECT: run the command as-is (dashboard not containerized)

Each strategy is checked with a canary that succeeds only where the host
marker directory exists. A sandbox that merely runs the command inside its
own filesystem fails the canary, so a strategy that "works" but does not
reach the host is never selected.

The first strategy to pass is cached for the life of the executor. If all
three fail nothing is cached and the next request probes again.

Example:
    executor = HostExecutor()
    status = await executor.run("systemctl", "is-active", "vllm-node")
    if status is None:
        ...  # host unreachable or command failed
"""

import logging
import shlex
from collections.abc import Awaitable, Callable
from dataclasses import replace

from dashboard_core.config import Settings
from dashboard_core.config import settings as default_settings
from dashboard_core.host.image import resolve_own_image
from dashboard_core.process import CommandResult, CommandRunner, run_command
from dashboard_core.types import HostExecStrategy

logger = logging.getLogger(__name__)

PROBE_ORDER = (
    HostExecStrategy.NSENTER,
    HostExecStrategy.HELPER_CONTAINER,
    HostExecStrategy.DIRECT,
)

PROBE_TOKEN = "host-ok"

# Mount, UTS, IPC, network and PID namespaces of the host's init
NSENTER_ARGS = ("-t", "1", "-m", "-u", "-i", "-n", "-p", "--")

# systemctl is-active exits non-zero (3) for inactive units but its stdout
# is still the answer
NONZERO_OK_TOKEN = "is-active"

# Exit codes meaning the wrapped program never ran: nsenter reports 126/127
# when exec fails, docker run adds 125 for its own errors
LAUNCH_FAILURE_CODES = {
    HostExecStrategy.NSENTER: frozenset({126, 127}),
    HostExecStrategy.HELPER_CONTAINER: frozenset({125, 126, 127}),
}

ImageResolver = Callable[[Settings], Awaitable[str | None]]


class HostExecutor:
    """Runs commands in the host's root namespace via a cached strategy.

    Args:
        settings: Configuration (binaries, marker dir, image fallback)
        runner: Command runner, replaceable in tests
        image_resolver: Coroutine returning our own image reference
    """

    def __init__(
        self,
        settings: Settings | None = None,
        runner: CommandRunner = run_command,
        image_resolver: ImageResolver = resolve_own_image,
    ) -> None:
        self._settings = settings or default_settings
        self._run = runner
        self._resolve_image = image_resolver
        self._strategy = HostExecStrategy.NOT_PROBED
        self._own_image: str | None = None
        self._image_resolved = False

    @property
    def strategy(self) -> HostExecStrategy:
        """The cached strategy (NOT_PROBED until a probe has succeeded)."""
        return self._strategy

    def reset(self) -> None:
        """Forget the cached strategy and image so the next call re-probes."""
        self._strategy = HostExecStrategy.NOT_PROBED
        self._own_image = None
        self._image_resolved = False

    async def resolve_strategy(self) -> HostExecStrategy:
        """
        Return the cached strategy, probing in PROBE_ORDER if needed.

        Two concurrent first calls may both probe; both reach the same
        answer, so the race is harmless and no lock is taken.

        Returns:
            The first strategy whose canary passed, or NOT_PROBED if none did
        """
        if self._strategy is not HostExecStrategy.NOT_PROBED:
            return self._strategy

        for candidate in PROBE_ORDER:
            if await self._probe(candidate):
                logger.info("Host commands will run via %s", candidate.value)
                self._strategy = candidate
                return candidate

        logger.warning("No host execution strategy reached the host namespace")
        return HostExecStrategy.NOT_PROBED

    async def own_image(self) -> str | None:
        """Return our own image reference, resolving it once."""
        if not self._image_resolved:
            self._own_image = await self._resolve_image(self._settings)
            self._image_resolved = True
        return self._own_image

    async def run(self, *command: str) -> str | None:
        """
        Run a command on the host and return its stdout.

        Args:
            *command: Program followed by its arguments

        Returns:
            Captured stdout on success. None if the host is unreachable, the
            command could not be launched, or it exited non-zero. A command
            containing "is-active" returns its stdout for any exit code
            once it has actually run.
        """
        strategy = await self.resolve_strategy()
        if strategy is HostExecStrategy.NOT_PROBED:
            logger.warning("Host unreachable, not running: %s", " ".join(command))
            return None

        result = await self._execute(strategy, command)
        if result is None:
            return None

        tolerated = result.spawned and NONZERO_OK_TOKEN in command
        if not result.ok and not tolerated:
            logger.warning(
                "Host command %s failed with code %s: %s",
                " ".join(command),
                result.returncode,
                result.stderr.strip(),
            )
            return None
        return result.stdout

    async def _probe(self, strategy: HostExecStrategy) -> bool:
        marker = shlex.quote(self._settings.host_marker_dir)
        canary = ("sh", "-c", f"test -d {marker} && echo {PROBE_TOKEN}")
        result = await self._execute(strategy, canary)
        passed = result is not None and result.ok and result.stdout.strip() == PROBE_TOKEN
        logger.debug("Probe %s: %s", strategy.value, "passed" if passed else "failed")
        return passed

    async def _execute(
        self, strategy: HostExecStrategy, command: tuple[str, ...]
    ) -> CommandResult | None:
        if strategy is HostExecStrategy.NSENTER:
            result = await self._run(self._settings.nsenter_binary, *NSENTER_ARGS, *command)
            return self._mark_launch_failure(strategy, result)

        if strategy is HostExecStrategy.HELPER_CONTAINER:
            image = await self.own_image()
            if image is None:
                logger.warning("Helper container unavailable: own image unknown")
                return None
            result = await self._run(
                self._settings.docker_binary,
                "run",
                "--rm",
                "--pid=host",
                "--privileged",
                "--net=host",
                "--entrypoint",
                "nsenter",
                image,
                *NSENTER_ARGS,
                *command,
            )
            return self._mark_launch_failure(strategy, result)

        if strategy is HostExecStrategy.DIRECT:
            return await self._run(*command)

        raise ValueError(f"Cannot execute with strategy {strategy.value}")

    @staticmethod
    def _mark_launch_failure(strategy: HostExecStrategy, result: CommandResult) -> CommandResult:
        if result.spawned and result.returncode in LAUNCH_FAILURE_CODES[strategy]:
            return replace(result, spawned=False)
        return result
