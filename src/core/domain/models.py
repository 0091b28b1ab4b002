"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- `frozen=True` hace que peticiones y respuestas sean inmutables una vez
  construidas.

Nota:
- Estos modelos describen *qué* se envía y se recibe, no *cómo*.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.config import ConfigDict


OPTION_CLIENTPORT = "clientport"
OPTION_ADMINPORT = "adminport"


class HttpScheme(str, Enum):
    HTTP = "http"
    HTTPS = "https"


class HttpMethod(str, Enum):
    GET = "GET"
    HEAD = "HEAD"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"

    @property
    def carries_body(self) -> bool:
        return self in (HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH)


class ClientHttpRequest(BaseModel):
    """Descriptor inmutable de una petición HTTP contra stubby.

    Reglas:
    - `body` existe si y solo si el método lleva payload (POST/PUT/PATCH).
    - `uri` siempre empieza por `/` (se normaliza si no).
    - `encoded_credentials` es opaco: ya viene en Base64 (`username:password`).
    """

    model_config = ConfigDict(frozen=True)

    scheme: HttpScheme = Field(
        ...,
        description="Esquema: http o https.",
    )
    method: HttpMethod = Field(
        ...,
        description="Método HTTP.",
    )
    uri: str = Field(
        ...,
        description="Path (y query) de la petición.",
    )
    host: str = Field(
        ...,
        min_length=1,
        description="Host donde corre stubby.",
    )
    port: int = Field(
        ...,
        ge=1,
        le=65535,
        description="Puerto destino.",
    )
    encoded_credentials: str | None = Field(
        default=None,
        description="Credenciales Basic ya codificadas en Base64.",
    )
    body: str | None = Field(
        default=None,
        description="Payload a enviar (solo métodos con body).",
    )

    @field_validator("uri")
    @classmethod
    def _root_uri(cls, value: str) -> str:
        if not value.startswith("/"):
            return "/" + value
        return value

    @model_validator(mode="before")
    @classmethod
    def _default_body(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("body") is None:
            try:
                method = HttpMethod(data.get("method"))
            except ValueError:
                return data
            if method.carries_body:
                return {**data, "body": ""}
        return data

    @model_validator(mode="after")
    def _body_matches_method(self) -> "ClientHttpRequest":
        if not self.method.carries_body and self.body is not None:
            raise ValueError(f"{self.method.value} requests do not carry a body")
        return self

    @property
    def url(self) -> str:
        return f"{self.scheme.value}://{self.host}:{self.port}{self.uri}"


class ClientHttpResponse(BaseModel):
    """Respuesta completamente leída (status, headers, body).

    Por qué un modelo propio:
    - Desacopla a los llamadores de httpx.
    - Un status no-2xx es una respuesta normal, no un error.
    """

    model_config = ConfigDict(frozen=True)

    status_code: int = Field(
        ...,
        ge=100,
        le=999,
        description="Código de estado HTTP.",
    )
    status_message: str = Field(
        default="",
        description="Reason phrase tal como llegó.",
    )
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Headers con el case recibido; repetidos unidos con ', '.",
    )
    body: str = Field(
        default="",
        description="Body completo (vacío si el servidor no envió nada).",
    )

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def header(self, name: str) -> str | None:
        """Busca un header sin distinguir mayúsculas/minúsculas."""

        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


class ServerParams(BaseModel):
    """Parámetros de arranque que se pasan al Server Manager."""

    model_config = ConfigDict(frozen=True)

    client_port: int = Field(..., ge=1, le=65535)
    admin_port: int = Field(..., ge=1, le=65535)

    def as_options(self) -> dict[str, str]:
        """Mapa opción -> valor (strings), el formato que espera `construct`."""

        return {
            OPTION_CLIENTPORT: str(self.client_port),
            OPTION_ADMINPORT: str(self.admin_port),
        }
