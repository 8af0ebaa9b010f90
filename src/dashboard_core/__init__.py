"""
Dashboard Core Library

Host command execution and container/service monitoring for the system
dashboard. This package provides:

- Identifier validation: the single gate in front of every external command
- HostExecutor: probes and caches the strategy that reaches the host namespace
- ContainerMonitor: docker CLI listing, lifecycle commands and log streaming
- ServiceLocator / ServiceController: host systemd unit discovery and control
- create_dashboard: wires the components around one shared HostExecutor
"""

__version__ = "0.1.0"

from dashboard_core.config import Settings
from dashboard_core.docker.logs import LogStream
from dashboard_core.docker.monitor import ContainerMonitor
from dashboard_core.exceptions import InvalidIdentifierError
from dashboard_core.factory import Dashboard, create_dashboard
from dashboard_core.host.executor import HostExecutor
from dashboard_core.host.services import ServiceController, ServiceLocator
from dashboard_core.types import ContainerRecord, ContainerStats, HostExecStrategy
from dashboard_core.validation import is_valid_identifier, validate_identifier

__all__ = [
    "__version__",
    # Configuration
    "Settings",
    # Data types
    "ContainerRecord",
    "ContainerStats",
    "HostExecStrategy",
    # Validation
    "InvalidIdentifierError",
    "is_valid_identifier",
    "validate_identifier",
    # Components
    "ContainerMonitor",
    "LogStream",
    "HostExecutor",
    "ServiceLocator",
    "ServiceController",
    # Wiring
    "Dashboard",
    "create_dashboard",
]
