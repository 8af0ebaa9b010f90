"""CLI commands for host reachability."""

import asyncio

import typer
from rich.console import Console

from dashboard_core.factory import create_dashboard
from dashboard_core.types import HostExecStrategy

host_app = typer.Typer(help="Check how the host namespace is reached")
console = Console()


@host_app.command("probe")
def probe() -> None:
    """Probe nsenter, helper container and direct execution in order."""

    async def _probe() -> tuple[HostExecStrategy, str | None]:
        dashboard = create_dashboard()
        strategy = await dashboard.host.resolve_strategy()
        image = None
        if strategy is HostExecStrategy.HELPER_CONTAINER:
            image = await dashboard.host.own_image()
        return strategy, image

    strategy, image = asyncio.run(_probe())
    if strategy is HostExecStrategy.NOT_PROBED:
        console.print("[red]No strategy reached the host namespace[/red]")
        raise typer.Exit(1)

    console.print(f"Strategy: [green]{strategy.value}[/green]")
    if image:
        console.print(f"Helper image: [cyan]{image}[/cyan]")
