"""Errores del ciclo de vida del servidor.

Los errores de transporte no se envuelven: llegan tal cual como
`httpx.TransportError` (ConnectError, ReadError, ...).
"""

from __future__ import annotations


class StubbyLifecycleError(RuntimeError):
    """Base para fallos propios del arranque/parada de stubby."""


class ServerStartupError(StubbyLifecycleError):
    """El Server Manager no llegó a estar listo."""


class ServerAlreadyRunningError(StubbyLifecycleError):
    """`start` con un servidor ya en marcha y política `raise`."""
