"""Tests for ContainerMonitor listing, lifecycle and log operations."""

from unittest.mock import patch

import pytest

from conftest import FakeRunner, fail, ok
from dashboard_core.docker.monitor import INVALID_CONTAINER_ID, ContainerMonitor
from test_validation import INVALID_IDENTIFIERS

LISTING = "\n".join(
    [
        "aaa111|vllm/vllm-openai:latest|\"vllm serve\"|2024-05-01|Up 2 hours|0.0.0.0:8000->8000/tcp|vllm_node",
        "bbb222|redis:7|\"redis-server\"|2024-05-01|Exited (0) 3 days ago||cache",
        "not|enough",
        "ccc333|dashboard:latest|\"dart bin/main.dart\"|2024-05-02|Up 5 minutes||dashboard",
    ]
)
STATS = "aaa111|85.20%|10.5GiB / 119.7GiB\ngarbage\n"


def docker_handler(listing=None, stats=None):
    """Route `docker container ls` and `docker stats` to canned results."""

    def handler(args):
        if args[1] == "container":
            return listing(args) if listing else ok(args, LISTING)
        if args[1] == "stats":
            return stats(args) if stats else ok(args, STATS)
        return ok(args)

    return handler


# ===== list_containers =====


class TestListContainers:
    """Tests for the joined container listing."""

    @pytest.mark.asyncio
    async def test_runs_both_listings_with_fixed_formats(self, settings):
        runner = FakeRunner(docker_handler())
        monitor = ContainerMonitor(settings, runner=runner)

        await monitor.list_containers()

        assert (
            "docker",
            "container",
            "ls",
            "--all",
            "--no-trunc",
            "--format",
            "{{.ID}}|{{.Image}}|{{.Command}}|{{.CreatedAt}}|{{.Status}}|{{.Ports}}|{{.Names}}",
        ) in runner.calls
        assert (
            "docker",
            "stats",
            "--all",
            "--no-stream",
            "--no-trunc",
            "--format",
            "{{.ID}}|{{.CPUPerc}}|{{.MemUsage}}",
        ) in runner.calls

    @pytest.mark.asyncio
    async def test_joins_stats_subset(self, settings):
        """N well-formed lines, M with stats: N records, N-M placeholders."""
        monitor = ContainerMonitor(settings, runner=FakeRunner(docker_handler()))

        records = await monitor.list_containers()

        assert [r.id for r in records] == ["aaa111", "bbb222", "ccc333"]
        assert (records[0].cpu, records[0].memory) == ("85.20%", "10.5GiB / 119.7GiB")
        assert all(r.cpu == "--" and r.memory == "--" for r in records[1:])

    @pytest.mark.asyncio
    async def test_primary_listing_failure_returns_empty(self, settings, caplog):
        runner = FakeRunner(docker_handler(listing=lambda args: fail(args, 1, "daemon down")))
        monitor = ContainerMonitor(settings, runner=runner)

        assert await monitor.list_containers() == []
        assert "docker container ls failed" in caplog.text

    @pytest.mark.asyncio
    async def test_empty_listing_returns_empty(self, settings):
        runner = FakeRunner(docker_handler(listing=lambda args: ok(args, "  \n")))
        monitor = ContainerMonitor(settings, runner=runner)

        assert await monitor.list_containers() == []

    @pytest.mark.asyncio
    async def test_stats_failure_degrades_to_placeholders(self, settings, caplog):
        runner = FakeRunner(docker_handler(stats=lambda args: fail(args, 1)))
        monitor = ContainerMonitor(settings, runner=runner)

        records = await monitor.list_containers()

        assert len(records) == 3
        assert all(r.cpu == "--" for r in records)
        assert "docker stats failed" in caplog.text

    @pytest.mark.asyncio
    async def test_missing_docker_binary_returns_empty(self, settings):
        """Spawn failure is absorbed by run_command and degrades to []."""
        settings.docker_binary = "/nonexistent/docker"
        monitor = ContainerMonitor(settings)

        assert await monitor.list_containers() == []


# ===== start / stop / restart =====


class TestLifecycle:
    """Tests for start/stop/restart."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("action", ["start", "stop", "restart"])
    async def test_runs_single_argument_subcommand(self, settings, action):
        runner = FakeRunner()
        monitor = ContainerMonitor(settings, runner=runner)

        result = await getattr(monitor, f"{action}_container")("vllm_node")

        assert result is True
        assert runner.calls == [("docker", action, "vllm_node")]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("action", ["start", "stop", "restart"])
    async def test_nonzero_exit_returns_false(self, settings, action, caplog):
        runner = FakeRunner(lambda args: fail(args, 1, "No such container"))
        monitor = ContainerMonitor(settings, runner=runner)

        assert await getattr(monitor, f"{action}_container")("ghost") is False
        assert f"docker {action} failed for ghost" in caplog.text

    @pytest.mark.asyncio
    @pytest.mark.parametrize("action", ["start", "stop", "restart"])
    @pytest.mark.parametrize("container_id", INVALID_IDENTIFIERS)
    async def test_invalid_id_never_spawns(self, settings, action, container_id):
        runner = FakeRunner()
        monitor = ContainerMonitor(settings, runner=runner)

        assert await getattr(monitor, f"{action}_container")(container_id) is False
        assert runner.calls == []

    @pytest.mark.asyncio
    async def test_invalid_id_logged_as_warning(self, settings, caplog):
        monitor = ContainerMonitor(settings, runner=FakeRunner())

        await monitor.stop_container("web; reboot")

        assert any(
            r.levelname == "WARNING" and "invalid container id" in r.getMessage()
            for r in caplog.records
        )


# ===== get_logs =====


class TestGetLogs:
    @pytest.mark.asyncio
    async def test_returns_stdout_with_default_tail(self, settings):
        runner = FakeRunner(lambda args: ok(args, "line 1\nline 2\n"))
        monitor = ContainerMonitor(settings, runner=runner)

        assert await monitor.get_logs("vllm_node") == "line 1\nline 2\n"
        assert runner.calls == [("docker", "logs", "--tail", "100", "vllm_node")]

    @pytest.mark.asyncio
    async def test_custom_tail(self, settings):
        runner = FakeRunner()
        monitor = ContainerMonitor(settings, runner=runner)

        await monitor.get_logs("vllm_node", tail=5)

        assert runner.calls == [("docker", "logs", "--tail", "5", "vllm_node")]

    @pytest.mark.asyncio
    async def test_failure_embeds_stderr(self, settings):
        runner = FakeRunner(lambda args: fail(args, 1, "Error: No such container: ghost"))
        monitor = ContainerMonitor(settings, runner=runner)

        text = await monitor.get_logs("ghost")

        assert text == "Error getting logs: Error: No such container: ghost"

    @pytest.mark.asyncio
    async def test_spawn_failure_is_text_not_exception(self, settings):
        settings.docker_binary = "/nonexistent/docker"
        monitor = ContainerMonitor(settings)

        text = await monitor.get_logs("web")

        assert text.startswith("Error getting logs: ")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("container_id", INVALID_IDENTIFIERS)
    async def test_invalid_id(self, settings, container_id):
        runner = FakeRunner()
        monitor = ContainerMonitor(settings, runner=runner)

        assert await monitor.get_logs(container_id) == INVALID_CONTAINER_ID
        assert runner.calls == []


# ===== stream_logs =====


class TestStreamLogs:
    """Tests for stream_logs command construction and rejection."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("container_id", ["", "a b", "$(id)", "../x"])
    async def test_invalid_id_yields_single_error_line(self, settings, container_id):
        monitor = ContainerMonitor(settings)

        with patch("dashboard_core.docker.logs.asyncio.create_subprocess_exec") as mock_exec:
            lines = [line async for line in monitor.stream_logs(container_id)]

        assert lines == [INVALID_CONTAINER_ID]
        mock_exec.assert_not_called()

    def test_nothing_spawned_until_iterated(self, settings):
        monitor = ContainerMonitor(settings)

        with patch("dashboard_core.docker.logs.asyncio.create_subprocess_exec") as mock_exec:
            stream = monitor.stream_logs("web", follow=True)

        assert stream.process is None
        mock_exec.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "follow,expected",
        [
            (False, ("docker", "logs", "web")),
            (True, ("docker", "logs", "--follow", "web")),
        ],
    )
    async def test_command_shape(self, settings, fake_process, follow, expected):
        monitor = ContainerMonitor(settings)

        with patch(
            "dashboard_core.docker.logs.asyncio.create_subprocess_exec",
            return_value=fake_process([b"hello\n"]),
        ) as mock_exec:
            lines = [line async for line in monitor.stream_logs("web", follow=follow)]

        assert lines == ["hello"]
        assert mock_exec.call_args.args == expected
