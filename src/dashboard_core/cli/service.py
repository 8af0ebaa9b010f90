"""CLI commands for the dashboard's host systemd service."""

import asyncio

import typer
from rich.console import Console

from dashboard_core.factory import create_dashboard

service_app = typer.Typer(help="Manage the host systemd service")
console = Console()


@service_app.command("status")
def service_status() -> None:
    """Show the service's systemctl is-active state."""
    dashboard = create_dashboard()
    status = asyncio.run(dashboard.services.get_status())
    if status is None:
        console.print("[red]Could not query the host. Is the host namespace reachable?[/red]")
        raise typer.Exit(1)

    style = {"active": "green", "inactive": "yellow", "failed": "red"}.get(status, "white")
    console.print(f"[{style}]{status}[/{style}]", highlight=False)


@service_app.command("start")
def service_start() -> None:
    """Start the service."""
    dashboard = create_dashboard()
    if not asyncio.run(dashboard.services.start_service()):
        console.print("[red]Failed to start service[/red]")
        raise typer.Exit(1)
    console.print("[green]Service started[/green]")


@service_app.command("stop")
def service_stop() -> None:
    """Stop the service."""
    dashboard = create_dashboard()
    if not asyncio.run(dashboard.services.stop_service()):
        console.print("[red]Failed to stop service[/red]")
        raise typer.Exit(1)
    console.print("[yellow]Service stopped[/yellow]")


@service_app.command("logs")
def service_logs(
    lines: int = typer.Option(None, "--lines", "-n", min=1, help="Number of journal lines"),
    container: str = typer.Option(
        "dashboard", "--container", help="Container the logs are shown for"
    ),
) -> None:
    """Show the service's journal."""
    dashboard = create_dashboard()
    typer.echo(asyncio.run(dashboard.services.get_logs(container, lines=lines)))
