"""Contratos del Server Manager.

Por qué Protocol:
- El servidor real (stubby4j, un fake en tests, etc.) es un colaborador
  externo y opaco: solo necesitamos `construct`, `start` y `stop`.
- Permite sustituir el proceso Java por un doble de test sin herencia.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Protocol, runtime_checkable


@runtime_checkable
class ServerManager(Protocol):
    """Dueño de los sockets y del estado de stubs."""

    def start(self) -> None:
        """Arranca y vuelve cuando el servidor está listo (o lanza)."""

        ...

    def stop(self) -> None:
        ...


@runtime_checkable
class ServerManagerFactory(Protocol):
    def construct(self, config_path: Path | str | None, params: Mapping[str, str]) -> ServerManager:
        """Construye un manager a partir del YAML y del mapa de opciones."""

        ...
