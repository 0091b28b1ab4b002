"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y la política TLS para el tráfico hacia stubby.
- Facilita testeo: se puede sustituir por un stub/mocked client.

Nota: un cliente por llamada. No hay pool ni reutilización de conexiones
entre peticiones.
"""

from __future__ import annotations

import logging

import httpx

from core.config import AppSettings
from core.domain.models import HttpScheme

logger = logging.getLogger(__name__)


def build_http_client(
    scheme: HttpScheme,
    settings: AppSettings | None = None,
) -> httpx.Client:
    """Crea un `httpx.Client` de un solo uso para `scheme`.

    Política TLS:
    - Solo aplica a HTTPS.
    - Con `insecure_stub_tls` se acepta cualquier certificado y cualquier
      hostname (certificados autofirmados del stub server local).
    - Sin ella se usa la verificación normal de httpx.
    """

    settings = settings or AppSettings()
    headers = {"User-Agent": settings.user_agent}

    verify = True
    if scheme is HttpScheme.HTTPS and settings.insecure_stub_tls:
        logger.debug("TLS verification disabled for stub traffic")
        verify = False

    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=False,
        verify=verify,
        headers=headers,
    )
