"""Dashboard core CLI - inspect containers and the host service from a shell."""

import logging

import typer
from rich.logging import RichHandler

from dashboard_core.cli.containers import containers_app
from dashboard_core.cli.host import host_app
from dashboard_core.cli.service import service_app
from dashboard_core.config import settings

app = typer.Typer(
    name="dashboard-core",
    help="Containers and host service diagnostics for the system dashboard",
    no_args_is_help=True,
)

# Add command groups
app.add_typer(containers_app, name="containers")
app.add_typer(service_app, name="service")
app.add_typer(host_app, name="host")


@app.callback()
def configure(
    log_level: str = typer.Option(
        settings.log_level,
        "--log-level",
        "-l",
        envvar="DASHBOARD_LOG_LEVEL",
        help="Logging level (DEBUG shows every executed command)",
    ),
) -> None:
    """Configure logging before any command runs."""
    level = log_level.upper()
    if level not in logging.getLevelNamesMapping():
        raise typer.BadParameter(f"Unknown log level '{log_level}'", param_hint="--log-level")

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
