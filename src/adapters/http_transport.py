"""Transporte: de `ClientHttpRequest` a una conexión viva.

Flujo:
1. `ClientHttpTransport.construct_http_connection()` prepara cliente + request
   (URL, método, headers, body) sin tocar la red.
2. `HttpConnection.connect()` envía la petición y recibe la cabecera de la
   respuesta (el body queda sin leer, `stream=True`).
3. `HttpConnection.disconnect()` libera respuesta y cliente. Idempotente.

Los fallos de red/DNS/TLS salen como `httpx.TransportError` sin reintentos.
"""

from __future__ import annotations

import logging
from typing import Iterator

import httpx

from adapters.credentials import AUTHORIZATION_HEADER, basic_authorization
from adapters.http_client import build_http_client
from core.config import AppSettings
from core.domain.models import ClientHttpRequest

logger = logging.getLogger(__name__)


def _single_chunk(payload: bytes) -> Iterator[bytes]:
    # Un iterador (sin longitud conocida) hace que httpx use chunked.
    yield payload


class HttpConnection:
    """Conexión de un solo uso: construir, `connect()`, leer, `disconnect()`."""

    def __init__(self, client: httpx.Client, request: httpx.Request) -> None:
        self._client = client
        self._request = request
        self._response: httpx.Response | None = None
        self._closed = False

    @property
    def request(self) -> httpx.Request:
        return self._request

    @property
    def headers(self) -> httpx.Headers:
        """Headers salientes; se pueden modificar hasta `connect()`."""

        return self._request.headers

    @property
    def response(self) -> httpx.Response:
        if self._response is None:
            raise RuntimeError("connection is not connected")
        return self._response

    @property
    def connected(self) -> bool:
        return self._response is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def connect(self) -> httpx.Response:
        if self._closed:
            raise RuntimeError("connection already released")
        if self._response is not None:
            raise RuntimeError("connection already connected")
        self._response = self._client.send(self._request, stream=True)
        return self._response

    def disconnect(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            if self._response is not None:
                self._response.close()
        finally:
            self._client.close()

    def __enter__(self) -> "HttpConnection":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.disconnect()


class ClientHttpTransport:
    """Convierte un descriptor en una `HttpConnection` lista para conectar."""

    def __init__(self, request: ClientHttpRequest, settings: AppSettings | None = None) -> None:
        self._request = request
        self._settings = settings or AppSettings()

    def construct_http_connection(self) -> HttpConnection:
        request = self._request
        client = build_http_client(request.scheme, self._settings)

        headers: dict[str, str] = {}
        authorization = basic_authorization(request.encoded_credentials)
        if authorization is not None:
            headers[AUTHORIZATION_HEADER] = authorization

        content: bytes | Iterator[bytes] | None = None
        if request.body is not None:
            payload = request.body.encode("utf-8")
            content = _single_chunk(payload) if self._settings.chunked_body else payload

        try:
            http_request = client.build_request(
                request.method.value,
                request.url,
                headers=headers,
                content=content,
            )
        except Exception:
            client.close()
            raise

        return HttpConnection(client, http_request)
