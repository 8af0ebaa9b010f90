"""Shared fixtures for dashboard core tests."""

from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from dashboard_core.config import Settings
from dashboard_core.process import CommandResult


class FakeRunner:
    """
    Stand-in for run_command that records every argument list.

    The handler maps an argument tuple to a CommandResult; by default every
    command succeeds with empty output.
    """

    def __init__(self, handler: Callable[[tuple[str, ...]], CommandResult] | None = None):
        self.calls: list[tuple[str, ...]] = []
        self._handler = handler or (lambda args: CommandResult(args=args, returncode=0))

    async def __call__(self, *args: str) -> CommandResult:
        self.calls.append(args)
        return self._handler(args)


def ok(args: tuple[str, ...], stdout: str = "") -> CommandResult:
    return CommandResult(args=args, returncode=0, stdout=stdout)


def fail(args: tuple[str, ...], code: int = 1, stderr: str = "boom") -> CommandResult:
    return CommandResult(args=args, returncode=code, stderr=stderr)


@pytest.fixture
def settings() -> Settings:
    """Settings with explicit values, independent of the environment."""
    return Settings(
        docker_binary="docker",
        nsenter_binary="nsenter",
        host_marker_dir="/run/systemd/system",
        helper_image_fallback="dashboard:latest",
        service_dir="/etc/systemd/system",
        service_prefix="vllm",
        service_suffix=".service",
        log_tail=100,
        service_log_lines=200,
        stream_stop_timeout=2.0,
    )


def make_fake_process(stdout_lines: list[bytes], stderr: bytes = b"", returncode: int = 0):
    """
    Build a MagicMock shaped like asyncio.subprocess.Process.

    stdout.readline() returns each line and then b""; wait() sets returncode
    so termination logic sees an exited process.
    """
    proc = MagicMock()
    proc.returncode = None
    proc.stdout.readline = AsyncMock(side_effect=[*stdout_lines, b""])
    proc.stderr.read = AsyncMock(return_value=stderr)

    async def _wait():
        proc.returncode = returncode
        return returncode

    proc.wait = AsyncMock(side_effect=_wait)
    return proc


@pytest.fixture
def fake_process():
    """Factory fixture for fake subprocesses fed to create_subprocess_exec."""
    return make_fake_process
