"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (transporte HTTP, proceso stubby4j) lean config de
  forma consistente.
"""

from __future__ import annotations

import os
import sys
from enum import Enum
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_HOST = "localhost"
DEFAULT_STUBS_PORT = 8882
DEFAULT_ADMIN_PORT = 8889
DEFAULT_SSL_PORT = 7443


class DoubleStartPolicy(str, Enum):
    """Qué hacer si se llama a `start` con un servidor ya en marcha."""

    LEAK = "leak"
    RAISE = "raise"
    RESTART = "restart"


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "stubby-client"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "stubby-client"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "stubby-client"
    return Path.home() / ".config" / "stubby-client"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Configuración central del cliente.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="STUBBY_CLIENT_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    default_host: str = Field(
        default=DEFAULT_HOST,
        min_length=1,
        description="Host usado por las llamadas 'using defaults'.",
    )
    default_stubs_port: int = Field(
        default=DEFAULT_STUBS_PORT,
        ge=1,
        le=65535,
        description="Puerto de stubs (tráfico de clientes) por defecto.",
    )
    default_admin_port: int = Field(
        default=DEFAULT_ADMIN_PORT,
        ge=1,
        le=65535,
        description="Puerto de administración por defecto.",
    )
    default_ssl_port: int = Field(
        default=DEFAULT_SSL_PORT,
        ge=1,
        le=65535,
        description="Puerto TLS fijo usado por `do_get_over_ssl`.",
    )

    http_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Timeout por request (segundos). None = sin timeout.",
    )
    insecure_stub_tls: bool = Field(
        default=True,
        description=(
            "Acepta cualquier certificado (y cualquier hostname) en HTTPS. "
            "Solo para el stub server local, nunca para tráfico real."
        ),
    )
    chunked_body: bool = Field(
        default=False,
        description="Envía el body con Transfer-Encoding: chunked.",
    )
    user_agent: str = Field(
        default="stubby-client/0.1",
        min_length=1,
        description="User-Agent de las peticiones.",
    )

    double_start: DoubleStartPolicy = Field(
        default=DoubleStartPolicy.LEAK,
        description="Política ante un `start` con el servidor ya arrancado.",
    )

    stubby_jar: Path | None = Field(
        default=None,
        description="Ruta al jar de stubby4j que arranca el Server Manager por defecto.",
    )
    java_executable: str = Field(
        default="java",
        min_length=1,
        description="Ejecutable de Java para lanzar stubby4j.",
    )
    startup_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Tiempo máximo esperando a que el puerto de stubs acepte conexiones.",
    )
    shutdown_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Tiempo de gracia tras terminate() antes de kill().",
    )

    log_level: str = Field(
        default="WARNING",
        min_length=1,
        description="Nivel de logging que instala la CLI.",
    )
