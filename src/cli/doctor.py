"""Doctor command for environment diagnostics."""

from __future__ import annotations

import shutil

import httpx
import typer
from rich.console import Console
from rich.table import Table

from core.config import AppSettings
from core.services.stubby_client import StubbyClient

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_stub_port(client: StubbyClient) -> tuple[bool, str]:
    try:
        response = client.do_get_using_defaults("/")
        return True, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc) or exc.__class__.__name__


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    if settings.http_timeout_seconds is None:
        # El doctor no debe quedarse colgado aunque la config no tenga timeout.
        settings = settings.model_copy(update={"http_timeout_seconds": 3.0})

    table = Table(title="stubby-client Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Java / jar
    java = shutil.which(settings.java_executable)
    table.add_row("Java", "OK" if java else "FAIL", java or f"{settings.java_executable} not on PATH")
    if settings.stubby_jar is None:
        table.add_row("stubby jar", "OPTIONAL", "Not set -> `serve` unavailable")
    elif settings.stubby_jar.is_file():
        table.add_row("stubby jar", "OK", str(settings.stubby_jar))
    else:
        table.add_row("stubby jar", "FAIL", f"{settings.stubby_jar} does not exist")

    # TLS policy
    table.add_row(
        "Stub TLS",
        "INSECURE" if settings.insecure_stub_tls else "VERIFY",
        "Certificates are not verified" if settings.insecure_stub_tls else "Normal certificate checks",
    )

    # Connectivity (best-effort)
    ok_http, detail_http = _check_stub_port(StubbyClient(settings))
    target = f"{settings.default_host}:{settings.default_stubs_port}"
    table.add_row(f"Stubs {target}", "OK" if ok_http else "DOWN", detail_http)

    _console.print(table)

    if not ok_http:
        _console.print("\n[yellow]Note:[/yellow] Start a server with `stubby-client serve <config.yaml>`.")

