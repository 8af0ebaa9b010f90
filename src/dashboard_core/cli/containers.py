"""CLI commands for containers.

- list: Table of all containers with CPU/memory usage
- start / stop / restart: Lifecycle commands (exit code 1 on failure)
- logs: Recent log lines, or a live stream with --follow
"""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from dashboard_core.exceptions import InvalidIdentifierError
from dashboard_core.factory import create_dashboard
from dashboard_core.validation import validate_identifier

containers_app = typer.Typer(help="Inspect and control containers")
console = Console()


def _require_id(container_id: str) -> str:
    try:
        return validate_identifier(container_id, "container ID")
    except InvalidIdentifierError as exc:
        console.print(f"[red]{exc}[/red]", highlight=False)
        raise typer.Exit(1)


@containers_app.command("list")
def list_containers() -> None:
    """List all containers, running or not."""
    dashboard = create_dashboard()
    records = asyncio.run(dashboard.containers.list_containers())

    if not records:
        console.print("[dim]No containers found.[/dim]")
        return

    table = Table(title="Containers")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Image")
    table.add_column("Status", style="yellow")
    table.add_column("CPU", justify="right")
    table.add_column("Memory", justify="right")
    table.add_column("Ports", style="dim")

    for record in records:
        status_style = "green" if record.status.startswith("Up") else "red"
        table.add_row(
            record.id[:12],
            record.name,
            record.image,
            f"[{status_style}]{record.status}[/{status_style}]",
            record.cpu,
            record.memory,
            record.ports or "-",
        )

    console.print(table)


def _lifecycle(action: str, container_id: str) -> None:
    container_id = _require_id(container_id)
    dashboard = create_dashboard()
    operation = {
        "start": dashboard.containers.start_container,
        "stop": dashboard.containers.stop_container,
        "restart": dashboard.containers.restart_container,
    }[action]

    if asyncio.run(operation(container_id)):
        console.print(f"[green]{action} {container_id}: ok[/green]")
    else:
        console.print(f"[red]{action} {container_id}: failed[/red]")
        raise typer.Exit(1)


@containers_app.command("start")
def start_container(
    container_id: str = typer.Argument(..., help="Container ID or name"),
) -> None:
    """Start a container."""
    _lifecycle("start", container_id)


@containers_app.command("stop")
def stop_container(
    container_id: str = typer.Argument(..., help="Container ID or name"),
) -> None:
    """Stop a container."""
    _lifecycle("stop", container_id)


@containers_app.command("restart")
def restart_container(
    container_id: str = typer.Argument(..., help="Container ID or name"),
) -> None:
    """Restart a container."""
    _lifecycle("restart", container_id)


@containers_app.command("logs")
def container_logs(
    container_id: str = typer.Argument(..., help="Container ID or name"),
    tail: int = typer.Option(None, "--tail", "-n", min=1, help="Number of lines to show"),
    follow: bool = typer.Option(False, "--follow", "-f", help="Stream new lines until Ctrl+C"),
) -> None:
    """Show a container's logs."""
    container_id = _require_id(container_id)
    dashboard = create_dashboard()

    if not follow:
        typer.echo(asyncio.run(dashboard.containers.get_logs(container_id, tail=tail)), nl=False)
        return

    async def _follow() -> None:
        async with dashboard.containers.stream_logs(container_id, follow=True) as lines:
            async for line in lines:
                typer.echo(line)

    try:
        asyncio.run(_follow())
    except KeyboardInterrupt:
        # asyncio.run cancelled the stream, which terminated docker logs
        pass
