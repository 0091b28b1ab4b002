"""Server Manager por defecto: stubby4j como proceso hijo.

Por qué un proceso:
- stubby4j es Java; desde Python no se puede embeber, así que se lanza el jar
  y se espera a que el puerto de stubs acepte conexiones.

Comando:
    <java> -jar <stubby_jar> --data <config> --clientport N --adminport M
"""

from __future__ import annotations

import logging
import socket
import subprocess
import time
from pathlib import Path
from typing import Mapping

from core.config import AppSettings
from core.domain.errors import ServerStartupError
from core.domain.models import OPTION_ADMINPORT, OPTION_CLIENTPORT

logger = logging.getLogger(__name__)

_POLL_INTERVAL_SECONDS = 0.1
# El proceso hijo escucha en la máquina local, sea cual sea `default_host`.
_READY_HOST = "localhost"


def _port_open(host: str, port: int) -> bool:
    try:
        with socket.create_connection((host, port), timeout=_POLL_INTERVAL_SECONDS):
            return True
    except OSError:
        return False


class StubbyProcessManager:
    """Arranca/para un proceso stubby4j."""

    def __init__(
        self,
        config_path: Path | None,
        params: Mapping[str, str],
        settings: AppSettings | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._config_path = config_path
        self._params = dict(params)
        self._process: subprocess.Popen[bytes] | None = None

    @property
    def client_port(self) -> int:
        return int(self._params[OPTION_CLIENTPORT])

    @property
    def admin_port(self) -> int:
        return int(self._params[OPTION_ADMINPORT])

    @property
    def running(self) -> bool:
        return self._process is not None and self._process.poll() is None

    def command(self) -> list[str]:
        jar = self._settings.stubby_jar
        if jar is None:
            raise ServerStartupError("stubby jar not configured (STUBBY_CLIENT_STUBBY_JAR)")

        cmd = [self._settings.java_executable, "-jar", str(jar)]
        if self._config_path is not None:
            cmd += ["--data", str(self._config_path)]
        for option, value in self._params.items():
            cmd += [f"--{option}", value]
        return cmd

    def start(self) -> None:
        cmd = self.command()
        jar = self._settings.stubby_jar
        if jar is not None and not Path(jar).is_file():
            raise ServerStartupError(f"stubby jar not found: {jar}")
        if self._config_path is not None and not Path(self._config_path).is_file():
            raise ServerStartupError(f"stubby config not found: {self._config_path}")

        logger.info("Launching stubby: %s", " ".join(cmd))
        try:
            self._process = subprocess.Popen(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=None,
            )
        except OSError as exc:
            raise ServerStartupError(f"could not launch stubby: {exc}") from exc

        self._wait_until_ready()

    def _wait_until_ready(self) -> None:
        if self._process is None:
            raise ServerStartupError("stubby process was not launched")
        deadline = time.monotonic() + self._settings.startup_timeout_seconds
        while time.monotonic() < deadline:
            code = self._process.poll()
            if code is not None:
                self._process = None
                raise ServerStartupError(f"stubby exited early with code {code}")
            if _port_open(_READY_HOST, self.client_port):
                logger.debug("stubby ready on port %s", self.client_port)
                return
            time.sleep(_POLL_INTERVAL_SECONDS)

        self.stop()
        raise ServerStartupError(
            f"stubby did not open port {self.client_port} within "
            f"{self._settings.startup_timeout_seconds}s"
        )

    def stop(self) -> None:
        process = self._process
        if process is None:
            return
        self._process = None
        if process.poll() is None:
            process.terminate()
            try:
                process.wait(timeout=self._settings.shutdown_timeout_seconds)
            except subprocess.TimeoutExpired:
                logger.warning("stubby did not exit after terminate(); killing pid %s", process.pid)
                process.kill()
                process.wait()


class StubbyProcessFactory:
    """`ServerManagerFactory` que produce `StubbyProcessManager`."""

    def __init__(self, settings: AppSettings | None = None) -> None:
        self._settings = settings or AppSettings()

    def construct(self, config_path: Path | str | None, params: Mapping[str, str]) -> StubbyProcessManager:
        path = Path(config_path) if config_path is not None else None
        return StubbyProcessManager(path, params, self._settings)
