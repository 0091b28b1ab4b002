"""Materializa la respuesta de una `HttpConnection` ya conectada.

Reglas:
- Un 4xx/5xx se lee igual que un 2xx (no se llama a `raise_for_status`).
- Sin body => `""`, nunca `None`.
- Los headers conservan el case recibido; los repetidos se unen con ", ".
- No cierra la conexión: eso lo hace quien la abrió, en un `finally`.
"""

from __future__ import annotations

import httpx

from adapters.http_transport import HttpConnection
from core.domain.models import ClientHttpResponse


def _raw_headers(response: httpx.Response) -> dict[str, str]:
    headers: dict[str, str] = {}
    for raw_name, raw_value in response.headers.raw:
        name = raw_name.decode("latin-1")
        value = raw_value.decode("latin-1")
        if name in headers:
            headers[name] = f"{headers[name]}, {value}"
        else:
            headers[name] = value
    return headers


class ClientHttpResponseFactory:
    def __init__(self, connection: HttpConnection) -> None:
        self._connection = connection

    def construct(self) -> ClientHttpResponse:
        response = self._connection.response
        response.read()

        return ClientHttpResponse(
            status_code=response.status_code,
            status_message=response.reason_phrase,
            headers=_raw_headers(response),
            body=response.text,
        )
