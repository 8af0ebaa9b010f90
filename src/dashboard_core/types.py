"""
Shared data types for dashboard core.

Internal types are plain dataclasses; Pydantic is reserved for settings.
ContainerRecord and ContainerStats are frozen because every listing call
builds fresh snapshots and nothing downstream may mutate them.
"""

from dataclasses import dataclass
from enum import Enum

STATS_PLACEHOLDER = "--"
"""CPU/memory text for containers that have no entry in docker stats."""


class HostExecStrategy(str, Enum):
    """
    How host commands reach the host's root namespace.

    NOT_PROBED is the initial state and also the state after a probe round
    in which every strategy failed. The other three values are terminal:
    once resolved, the executor keeps using that strategy.
    """

    NOT_PROBED = "not_probed"
    NSENTER = "nsenter"
    HELPER_CONTAINER = "helper_container"
    DIRECT = "direct"


@dataclass(frozen=True)
class ContainerStats:
    """
    Resource usage for one container as reported by docker stats.

    Attributes:
        cpu: CPU percentage text (e.g. "0.52%")
        memory: Memory usage text (e.g. "12.5MiB / 7.6GiB")
    """

    cpu: str
    memory: str


@dataclass(frozen=True)
class ContainerRecord:
    """
    Snapshot of a single container from docker container ls.

    All fields are the engine's text, unparsed. created is whatever
    {{.CreatedAt}} printed and is treated as opaque.

    Attributes:
        id: Full (untruncated) container id
        image: Image reference
        command: Quoted command line
        created: Creation timestamp text
        status: Status text (e.g. "Up 2 hours", "Exited (0) 3 days ago")
        ports: Port mapping text, empty when nothing is published
        name: Container name(s)
        cpu: CPU usage text, or STATS_PLACEHOLDER
        memory: Memory usage text, or STATS_PLACEHOLDER
    """

    id: str
    image: str
    command: str
    created: str
    status: str
    ports: str
    name: str
    cpu: str = STATS_PLACEHOLDER
    memory: str = STATS_PLACEHOLDER
