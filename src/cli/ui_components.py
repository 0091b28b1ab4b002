"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import ClientHttpResponse


def configure_logging(level: str, console: Console | None = None) -> None:
    """Instala un `RichHandler` en el logger raíz (solo desde la CLI)."""

    root = logging.getLogger()
    root.setLevel(level.upper())
    if any(isinstance(handler, RichHandler) for handler in root.handlers):
        return
    handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root.addHandler(handler)


def build_response_table(response: ClientHttpResponse) -> Table:
    """Tabla con status y headers de una respuesta."""

    style = "green" if response.is_success else "red"
    table = Table(title=f"HTTP {response.status_code} {response.status_message}".strip(), title_style=style)
    table.add_column("Header", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    for name, value in response.headers.items():
        table.add_row(name, value)
    return table


def build_body_panel(response: ClientHttpResponse) -> Panel:
    body = Text(response.body) if response.body else Text("(empty)", style="dim")
    return Panel(body, title=Text("Body", style="bold"), border_style="cyan")


def print_response(console: Console, response: ClientHttpResponse) -> None:
    console.print(build_response_table(response))
    console.print(build_body_panel(response))
