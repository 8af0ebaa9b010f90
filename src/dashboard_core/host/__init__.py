"""Host-level command execution and systemd service management.

Provides HostExecutor for reaching the host's root namespace (nsenter,
helper container or direct), and ServiceLocator/ServiceController for the
dashboard's systemd unit.
"""

from dashboard_core.host.executor import PROBE_ORDER, PROBE_TOKEN, HostExecutor
from dashboard_core.host.services import (
    ServiceController,
    ServiceLocator,
    service_not_found_message,
)

__all__ = [
    "HostExecutor",
    "PROBE_ORDER",
    "PROBE_TOKEN",
    "ServiceController",
    "ServiceLocator",
    "service_not_found_message",
]
