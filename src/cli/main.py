"""CLI de stubby-client (Typer).

Comandos:
- `get` / `post`: tráfico contra stubby (o cualquier endpoint HTTP(S)).
- `serve`: arranca stubby4j y espera a Ctrl-C.
- `doctor`: diagnóstico del entorno.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable

import httpx
import typer
from rich.console import Console

from cli import doctor
from cli.ui_components import configure_logging, print_response
from core.config import AppSettings
from core.domain.errors import StubbyLifecycleError
from core.domain.models import ClientHttpResponse
from core.services.lifecycle import StubbyServer
from core.services.stubby_client import StubbyClient

app = typer.Typer(no_args_is_help=True, help="Start stubby and send requests to it.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
) -> None:
    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level, console=Console(stderr=True))


def _send(action: Callable[[], ClientHttpResponse]) -> ClientHttpResponse:
    try:
        return action()
    except httpx.TransportError as exc:
        _console.print(f"[red]Request failed:[/red] {str(exc) or exc.__class__.__name__}")
        raise typer.Exit(code=1) from exc


@app.command()
def get(
    uri: str = typer.Argument(..., help="Request path, e.g. /hello"),
    host: str | None = typer.Option(None, "--host", help="Defaults to STUBBY_CLIENT_DEFAULT_HOST."),
    port: int | None = typer.Option(
        None, "--port", help="Defaults to the stubs port. Not allowed with --ssl."
    ),
    ssl: bool = typer.Option(False, "--ssl", help="GET over HTTPS on the fixed TLS port."),
    credentials: str | None = typer.Option(
        None, "--credentials", help="Base64 of username:password for Basic auth."
    ),
) -> None:
    """Send a GET request and print the response."""

    if ssl and port is not None:
        raise typer.BadParameter("--port cannot be combined with --ssl (TLS uses the fixed TLS port)")

    client = StubbyClient()
    settings = client.settings
    target_host = host or settings.default_host

    if ssl:
        response = _send(lambda: client.do_get_over_ssl(target_host, uri, credentials))
    else:
        target_port = port or settings.default_stubs_port
        response = _send(lambda: client.do_get(target_host, uri, target_port, credentials))

    print_response(_console, response)


@app.command()
def post(
    uri: str = typer.Argument(..., help="Request path, e.g. /items"),
    data: str = typer.Option(..., "--data", "-d", help="Request body."),
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port"),
    credentials: str | None = typer.Option(None, "--credentials"),
) -> None:
    """Send a POST request and print the response."""

    client = StubbyClient()
    settings = client.settings
    target_host = host or settings.default_host
    target_port = port or settings.default_stubs_port

    response = _send(lambda: client.do_post(target_host, uri, target_port, data, credentials))
    print_response(_console, response)


@app.command()
def serve(
    config: Path = typer.Argument(..., help="stubby YAML configuration."),
    client_port: int | None = typer.Option(None, "--client-port"),
    admin_port: int | None = typer.Option(None, "--admin-port"),
) -> None:
    """Start stubby and keep it running until Ctrl-C."""

    server = StubbyServer(config)
    try:
        session = server.start(client_port, admin_port)
    except StubbyLifecycleError as exc:
        _console.print(f"[red]Could not start stubby:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    _console.print(
        f"[green]stubby running[/green] stubs={session.client_port} admin={session.admin_port} (Ctrl-C to stop)"
    )
    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        pass
    finally:
        server.stop()
        _console.print("[yellow]stubby stopped[/yellow]")


def run() -> None:
    app()
