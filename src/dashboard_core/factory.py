"""
Factory for wiring the dashboard core components.

The cached host strategy and own-image reference live on a single
HostExecutor. create_dashboard builds that executor once and hands the same
instance to every component that needs host access, so callers share one
probe result without any module-level global.
"""

from dataclasses import dataclass

from dashboard_core.config import Settings
from dashboard_core.config import settings as default_settings
from dashboard_core.docker.monitor import ContainerMonitor
from dashboard_core.host.executor import HostExecutor
from dashboard_core.host.services import ServiceController, ServiceLocator


@dataclass
class Dashboard:
    """
    The components a dashboard front end calls into.

    Attributes:
        settings: Configuration shared by all components
        host: The shared HostExecutor (owns the cached strategy)
        containers: Docker CLI container monitor
        locator: Host service discovery
        services: Host service controller
    """

    settings: Settings
    host: HostExecutor
    containers: ContainerMonitor
    locator: ServiceLocator
    services: ServiceController


def create_dashboard(settings: Settings | None = None) -> Dashboard:
    """
    Build a Dashboard around one shared HostExecutor.

    Args:
        settings: Configuration, defaults to the environment-derived settings

    Returns:
        Dashboard with all components wired
    """
    settings = settings or default_settings
    host = HostExecutor(settings)
    locator = ServiceLocator(host, settings)
    return Dashboard(
        settings=settings,
        host=host,
        containers=ContainerMonitor(settings),
        locator=locator,
        services=ServiceController(host, locator, settings),
    )
