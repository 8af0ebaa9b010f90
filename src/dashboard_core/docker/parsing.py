"""
Parsers for docker CLI listing output.

Both listings are requested with a pipe-delimited --format template, one
container per line. A line whose field count does not match the template
(for instance a command line that itself contains '|') is skipped rather
than guessed at.
"""

from dashboard_core.types import STATS_PLACEHOLDER, ContainerRecord, ContainerStats

CONTAINER_FORMAT = (
    "{{.ID}}|{{.Image}}|{{.Command}}|{{.CreatedAt}}|{{.Status}}|{{.Ports}}|{{.Names}}"
)
STATS_FORMAT = "{{.ID}}|{{.CPUPerc}}|{{.MemUsage}}"

CONTAINER_FIELDS = 7
STATS_FIELDS = 3


def parse_stats(output: str) -> dict[str, ContainerStats]:
    """
    Parse docker stats output into a mapping keyed by container id.

    Args:
        output: Raw stdout of docker stats with STATS_FORMAT

    Returns:
        Dict of container id -> ContainerStats, malformed lines omitted
    """
    stats: dict[str, ContainerStats] = {}
    for line in output.strip().splitlines():
        parts = line.split("|")
        if len(parts) != STATS_FIELDS:
            continue
        container_id, cpu, memory = parts
        stats[container_id] = ContainerStats(cpu=cpu, memory=memory)
    return stats


def parse_containers(
    output: str,
    stats: dict[str, ContainerStats] | None = None,
) -> list[ContainerRecord]:
    """
    Parse docker container ls output and join each record with its stats.

    Args:
        output: Raw stdout of docker container ls with CONTAINER_FORMAT
        stats: Optional result of parse_stats for the same moment

    Returns:
        One ContainerRecord per well-formed line, in listing order.
        Containers missing from stats get STATS_PLACEHOLDER for cpu/memory.
    """
    stats = stats or {}
    records: list[ContainerRecord] = []
    for line in output.strip().splitlines():
        parts = line.split("|")
        if len(parts) != CONTAINER_FIELDS:
            continue
        container_id, image, command, created, status, ports, name = parts
        usage = stats.get(container_id)
        records.append(
            ContainerRecord(
                id=container_id,
                image=image,
                command=command,
                created=created,
                status=status,
                ports=ports,
                name=name,
                cpu=usage.cpu if usage else STATS_PLACEHOLDER,
                memory=usage.memory if usage else STATS_PLACEHOLDER,
            )
        )
    return records
