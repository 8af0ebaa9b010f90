"""Tests for resolve_own_image."""

from unittest.mock import MagicMock, patch

import pytest
from python_on_whales.exceptions import DockerException

from dashboard_core.host.image import resolve_own_image


@pytest.mark.asyncio
async def test_inspects_configured_container(settings):
    settings.self_container = "dashboard-1"
    container = MagicMock()
    container.config.image = "ghcr.io/example/dashboard:1.2"

    with patch("dashboard_core.host.image.docker") as mock_docker:
        mock_docker.container.inspect.return_value = container
        image = await resolve_own_image(settings)

    assert image == "ghcr.io/example/dashboard:1.2"
    mock_docker.container.inspect.assert_called_once_with("dashboard-1")


@pytest.mark.asyncio
async def test_defaults_to_hostname(settings):
    container = MagicMock()
    container.config.image = "dashboard:dev"

    with (
        patch("dashboard_core.host.image.socket.gethostname", return_value="3f9a1c2b"),
        patch("dashboard_core.host.image.docker") as mock_docker,
    ):
        mock_docker.container.inspect.return_value = container
        await resolve_own_image(settings)

    mock_docker.container.inspect.assert_called_once_with("3f9a1c2b")


@pytest.mark.asyncio
async def test_inspect_failure_uses_fallback(settings, caplog):
    with patch("dashboard_core.host.image.docker") as mock_docker:
        mock_docker.container.inspect.side_effect = DockerException(
            ["docker", "container", "inspect", "x"], 1
        )
        image = await resolve_own_image(settings)

    assert image == "dashboard:latest"
    assert "Falling back to helper image dashboard:latest" in caplog.text


@pytest.mark.asyncio
async def test_empty_fallback_returns_none(settings):
    settings.helper_image_fallback = ""

    with patch("dashboard_core.host.image.docker") as mock_docker:
        mock_docker.container.inspect.side_effect = DockerException(
            ["docker", "container", "inspect", "x"], 1
        )
        image = await resolve_own_image(settings)

    assert image is None
