"""Container monitoring through the docker CLI."""

from dashboard_core.docker.logs import LogStream
from dashboard_core.docker.monitor import ContainerMonitor

__all__ = ["ContainerMonitor", "LogStream"]
