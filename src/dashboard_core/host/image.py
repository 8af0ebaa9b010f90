"""Resolution of the image this process is running from.

The helper-container strategy launches a privileged sibling container from
the dashboard's own image, since that image is known to contain nsenter.
Docker sets a container's hostname to its short id, so inspecting the
hostname finds our own container.

python-on-whales calls are blocking, so inspection runs in the default
executor to keep the event loop free.
"""

import asyncio
import logging
import socket

from python_on_whales import docker
from python_on_whales.client_config import ClientNotFoundError
from python_on_whales.exceptions import DockerException

from dashboard_core.config import Settings

logger = logging.getLogger(__name__)


async def resolve_own_image(settings: Settings) -> str | None:
    """
    Find the image reference of the container running this process.

    Args:
        settings: Supplies self_container and helper_image_fallback

    Returns:
        The image reference from `docker inspect`, else the configured
        fallback, else None when the fallback is empty
    """
    target = settings.self_container or socket.gethostname()
    loop = asyncio.get_running_loop()

    def _blocking_inspect() -> str:
        container = docker.container.inspect(target)
        return container.config.image

    try:
        image = await loop.run_in_executor(None, _blocking_inspect)
    except (DockerException, ClientNotFoundError, OSError) as exc:
        logger.warning("Could not inspect own container %s: %s", target, exc)
        image = None

    if image:
        return image

    fallback = settings.helper_image_fallback or None
    if fallback:
        logger.warning("Falling back to helper image %s", fallback)
    return fallback
