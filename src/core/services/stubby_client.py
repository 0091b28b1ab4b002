"""Cliente de peticiones contra stubby.

Este módulo expone la API de tráfico (GET/POST) con los defaults de stubby:
- `*_using_defaults` => `localhost:8882` por HTTP.
- `do_get_over_ssl` => HTTPS en el puerto fijo `7443`.

Cada llamada es síncrona e independiente: construye su propio descriptor,
transporte y conexión, así que se puede usar desde varios hilos a la vez.
"""

from __future__ import annotations

import logging

from adapters.http_transport import ClientHttpTransport
from adapters.response_factory import ClientHttpResponseFactory
from core.config import AppSettings
from core.domain.models import ClientHttpRequest, ClientHttpResponse, HttpMethod, HttpScheme

logger = logging.getLogger(__name__)


class StubbyClient:
    """Genera tráfico HTTP(S) para stubby (o cualquier endpoint)."""

    def __init__(self, settings: AppSettings | None = None) -> None:
        self._settings = settings or AppSettings()

    @property
    def settings(self) -> AppSettings:
        return self._settings

    def do_get(
        self,
        host: str,
        uri: str,
        stubs_port: int,
        encoded_credentials: str | None = None,
    ) -> ClientHttpResponse:
        """GET por HTTP plano a `host:stubs_port`.

        `encoded_credentials` debe venir ya en Base64 (`username:password`).
        """

        request = ClientHttpRequest(
            scheme=HttpScheme.HTTP,
            method=HttpMethod.GET,
            uri=uri,
            host=host,
            port=stubs_port,
            encoded_credentials=encoded_credentials,
        )
        return self.make_request(request)

    def do_get_over_ssl(
        self,
        host: str,
        uri: str,
        encoded_credentials: str | None = None,
    ) -> ClientHttpResponse:
        """GET por HTTPS al puerto TLS por defecto (7443)."""

        request = ClientHttpRequest(
            scheme=HttpScheme.HTTPS,
            method=HttpMethod.GET,
            uri=uri,
            host=host,
            port=self._settings.default_ssl_port,
            encoded_credentials=encoded_credentials,
        )
        return self.make_request(request)

    def do_get_using_defaults(self, uri: str, encoded_credentials: str | None = None) -> ClientHttpResponse:
        return self.do_get(
            self._settings.default_host,
            uri,
            self._settings.default_stubs_port,
            encoded_credentials,
        )

    def do_post(
        self,
        host: str,
        uri: str,
        stubs_port: int,
        post: str,
        encoded_credentials: str | None = None,
    ) -> ClientHttpResponse:
        """POST por HTTP plano con `post` como body (UTF-8)."""

        request = ClientHttpRequest(
            scheme=HttpScheme.HTTP,
            method=HttpMethod.POST,
            uri=uri,
            host=host,
            port=stubs_port,
            encoded_credentials=encoded_credentials,
            body=post,
        )
        return self.make_request(request)

    def do_post_using_defaults(
        self,
        uri: str,
        post: str,
        encoded_credentials: str | None = None,
    ) -> ClientHttpResponse:
        return self.do_post(
            self._settings.default_host,
            uri,
            self._settings.default_stubs_port,
            post,
            encoded_credentials,
        )

    def make_request(self, request: ClientHttpRequest) -> ClientHttpResponse:
        """Envía `request` y devuelve la respuesta ya leída.

        La conexión se libera siempre, también si falla la lectura.
        """

        connection = ClientHttpTransport(request, self._settings).construct_http_connection()
        logger.debug("%s %s", request.method.value, request.url)
        try:
            connection.connect()
            response = ClientHttpResponseFactory(connection).construct()
        finally:
            connection.disconnect()

        logger.debug("%s %s -> %s", request.method.value, request.url, response.status_code)
        return response
