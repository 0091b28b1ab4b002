"""Ciclo de vida del stub server.

`StubbyServer` es el facade: traduce `(config_path, client_port, admin_port)`
al mapa de opciones que espera el Server Manager, lo construye, lo arranca y
lo para. Toda la lógica de servidor (YAML, matching, sockets) es del manager.

Estados: STOPPED -> start() -> RUNNING -> stop() -> STOPPED (re-entrable).
Las transiciones van serializadas con un lock; el handle (`ServerSession`) es
propio de cada instancia, así que varios servidores pueden convivir.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from pathlib import Path
from types import TracebackType
from typing import Callable

from core.config import AppSettings, DoubleStartPolicy
from core.domain.errors import ServerAlreadyRunningError
from core.domain.models import ServerParams
from core.interfaces.server_manager import ServerManager, ServerManagerFactory

logger = logging.getLogger(__name__)


class ServerState(str, Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class ServerSession:
    """Handle de un Server Manager arrancado.

    `on_stop` avisa al facade dueño cuando el handle se para directamente.
    """

    def __init__(
        self,
        manager: ServerManager,
        params: ServerParams,
        on_stop: Callable[[ServerSession], None] | None = None,
    ) -> None:
        self._manager = manager
        self._params = params
        self._on_stop = on_stop
        self._stopped = False

    @property
    def manager(self) -> ServerManager:
        return self._manager

    @property
    def client_port(self) -> int:
        return self._params.client_port

    @property
    def admin_port(self) -> int:
        return self._params.admin_port

    @property
    def stopped(self) -> bool:
        return self._stopped

    def stop(self) -> None:
        if self._stopped:
            return
        self._manager.stop()
        self._stopped = True
        if self._on_stop is not None:
            self._on_stop(self)


class StubbyServer:
    """Facade de arranque/parada de stubby.

    Política ante doble `start` (`double_start`):
    - `leak`: se construye y arranca otro manager; el anterior queda sin
      referencia (comportamiento histórico).
    - `raise`: `ServerAlreadyRunningError`.
    - `restart`: para el anterior y arranca uno nuevo.
    """

    def __init__(
        self,
        config_path: Path | str | None,
        factory: ServerManagerFactory | None = None,
        *,
        settings: AppSettings | None = None,
        double_start: DoubleStartPolicy | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._config_path = config_path
        if factory is None:
            from adapters.stubby_process import StubbyProcessFactory  # noqa: PLC0415

            factory = StubbyProcessFactory(self._settings)
        self._factory = factory
        self._double_start = double_start or self._settings.double_start
        # Reentrante: `ServerSession.stop` vuelve a entrar vía `_session_stopped`.
        self._lock = threading.RLock()
        self._state = ServerState.STOPPED
        self._session: ServerSession | None = None

    @property
    def state(self) -> ServerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is ServerState.RUNNING

    @property
    def session(self) -> ServerSession | None:
        return self._session

    @property
    def double_start(self) -> DoubleStartPolicy:
        return self._double_start

    def start(self, client_port: int | None = None, admin_port: int | None = None) -> ServerSession:
        """Arranca stubby en los puertos dados (o los de configuración).

        Los errores de `construct`/`start` del manager se propagan tal cual y
        el estado queda como estaba.
        """

        params = ServerParams(
            client_port=client_port if client_port is not None else self._settings.default_stubs_port,
            admin_port=admin_port if admin_port is not None else self._settings.default_admin_port,
        )

        with self._lock:
            if self._state is ServerState.RUNNING and self._session is not None:
                if self._double_start is DoubleStartPolicy.RAISE:
                    raise ServerAlreadyRunningError(
                        f"stubby already running on ports {self._session.client_port}/{self._session.admin_port}"
                    )
                if self._double_start is DoubleStartPolicy.RESTART:
                    logger.info("Restarting stubby on ports %s/%s", params.client_port, params.admin_port)
                    self._session.stop()
                    self._session = None
                    self._state = ServerState.STOPPED
                else:
                    logger.warning(
                        "start() while running: previous server on ports %s/%s is left running",
                        self._session.client_port,
                        self._session.admin_port,
                    )

            manager = self._factory.construct(self._config_path, params.as_options())
            manager.start()

            self._session = ServerSession(manager, params, on_stop=self._session_stopped)
            self._state = ServerState.RUNNING
            logger.info("stubby started (stubs=%s, admin=%s)", params.client_port, params.admin_port)
            return self._session

    def stop(self) -> None:
        """Para el servidor si está en marcha. Sin servidor, no hace nada."""

        with self._lock:
            session = self._session
            if session is None:
                return
            session.stop()
            logger.info("stubby stopped (stubs=%s, admin=%s)", session.client_port, session.admin_port)

    def _session_stopped(self, session: ServerSession) -> None:
        with self._lock:
            if self._session is not session:
                return
            self._session = None
            self._state = ServerState.STOPPED

    def __enter__(self) -> "StubbyServer":
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()
