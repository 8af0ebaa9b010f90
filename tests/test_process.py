"""Tests for run_command."""

import sys
from unittest.mock import patch

import pytest

from dashboard_core.process import EXIT_CANNOT_EXECUTE, EXIT_NOT_FOUND, run_command


@pytest.mark.asyncio
async def test_captures_exit_code_and_both_streams():
    script = "import sys; print('out'); print('err', file=sys.stderr); sys.exit(3)"

    result = await run_command(sys.executable, "-c", script)

    assert result.returncode == 3
    assert result.ok is False
    assert result.stdout == "out\n"
    assert result.stderr == "err\n"
    assert result.args == (sys.executable, "-c", script)


@pytest.mark.asyncio
async def test_arguments_are_not_shell_interpreted():
    result = await run_command(sys.executable, "-c", "import sys; print(sys.argv[1])", "$(id); ls")

    assert result.ok
    assert result.stdout.strip() == "$(id); ls"
    assert result.spawned is True


@pytest.mark.asyncio
async def test_undecodable_output_is_replaced():
    result = await run_command(
        sys.executable, "-c", "import sys; sys.stdout.buffer.write(b'ok\\xff')"
    )

    assert result.stdout == "ok�"


@pytest.mark.asyncio
async def test_missing_binary_maps_to_127(caplog):
    result = await run_command("/nonexistent/definitely-not-here", "--version")

    assert result.returncode == EXIT_NOT_FOUND
    assert result.spawned is False
    assert result.stdout == ""
    assert result.stderr
    assert "Failed to run /nonexistent/definitely-not-here" in caplog.text


@pytest.mark.asyncio
async def test_permission_error_maps_to_126():
    with patch(
        "dashboard_core.process.asyncio.create_subprocess_exec",
        side_effect=PermissionError(13, "Permission denied"),
    ):
        result = await run_command("/usr/local/bin/locked")

    assert result.returncode == EXIT_CANNOT_EXECUTE
    assert "Permission denied" in result.stderr
