"""
CLI tool for running and inspecting the todo server.

Example:
    python cli.py serve --reload
    python cli.py routes
"""

import logging

import typer
import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from starlette.routing import WebSocketRoute

from todo_app.livereload.build_identity import BuildIdentity
from todo_app.routing import collect_subrouters
from todo_app.settings import app_settings
from todo_app.uvicorn_filters import ExcludePathsFilter

typer_app = typer.Typer(
    name="todo-cli",
    help="Todo server CLI - run the server and inspect its routes",
    add_completion=False,
)
console = Console()


@typer_app.command()
def serve(
    host: str = typer.Option(app_settings.HOST, help="Bind address"),
    port: int = typer.Option(app_settings.PORT, help="Bind port"),
    reload: bool = typer.Option(False, help="Restart on code changes"),
):
    """
    Run the server with uvicorn.

    Assets, store and render mode come from the environment (see
    `todo_app.settings`).
    """
    logging.getLogger("uvicorn.access").addFilter(ExcludePathsFilter())

    console.print(
        Panel.fit(
            f"[bold cyan]Todo server[/bold cyan] on http://{host}:{port}\n"
            f"render mode: [yellow]{app_settings.RENDER_MODE}[/yellow], "
            f"dev mode: [yellow]{app_settings.DEV_MODE}[/yellow]",
            border_style="cyan",
        )
    )
    uvicorn.run(
        "todo_app:application",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


@typer_app.command()
def routes():
    """
    Display a table of all HTTP and WebSocket routes.

    Example:
        python cli.py routes
    """
    table = Table("Kind", "Path", "Methods", "Endpoint", title="Routes")

    for route in collect_subrouters().routes:
        endpoint = getattr(route, "endpoint", None)
        endpoint_path = (
            f"{endpoint.__module__}.[yellow]{endpoint.__name__}[/yellow]"
            if endpoint is not None
            else ""
        )
        if isinstance(route, WebSocketRoute):
            table.add_row("[magenta]WS[/magenta]", route.path, "", endpoint_path)
        else:
            methods = ", ".join(sorted(getattr(route, "methods", None) or []))
            table.add_row("[green]HTTP[/green]", route.path, methods, endpoint_path)

    console.print()
    console.print(table)
    console.print()


@typer_app.command(name="build-id")
def build_id():
    """Print a fresh build identity tag."""
    console.print(BuildIdentity.generate().tag)


if __name__ == "__main__":
    typer_app()
