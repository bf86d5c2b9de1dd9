"""Main CLI entry point."""

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from . import dependencies, labels, time_tracking
from ..config import DashboardConfig
from ..utils.log_setup import setup_logging

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="issue-dashboard",
    help="GitHub issue dependency graphs, time tracking and label metadata",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log debug messages"
    ),
) -> None:
    """Configure logging before any command runs."""
    try:
        config = DashboardConfig()
        config.validate()
    except ValueError as e:
        console.print(f"❌ [red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    setup_logging("DEBUG" if verbose else config.numeric_log_level, config.log_file)


app.add_typer(dependencies.app, name="deps")
app.add_typer(time_tracking.app, name="time")
app.add_typer(labels.app, name="labels")


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def serve(
    host: str | None = typer.Option(None, "--host", help="Interface to bind"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to listen on"),
) -> None:
    """Run the HTTP API.

    Host and port default to DASHBOARD_HOST and DASHBOARD_PORT.
    """
    import uvicorn

    from ..api.app import create_app
    from ..services import DashboardServices

    config = DashboardConfig()
    host = host or config.host
    port = port or config.port
    console.print(f"🚀 [green]Serving the dashboard API on http://{host}:{port}[/green]")
    uvicorn.run(
        create_app(DashboardServices.init(config)),
        host=host,
        port=port,
        log_level=config.log_level.lower(),
    )


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def version() -> None:
    """Show version information."""
    from github_issue_dashboard import __version__

    console.print(f"GitHub Issue Dashboard v{__version__}")


if __name__ == "__main__":
    app()
