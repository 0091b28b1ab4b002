"""Header de autenticación Basic.

Las credenciales llegan ya codificadas en Base64 (`username:password`). No se
validan ni se recodifican: si son incorrectas, lo dirá el servidor con un 401.
"""

from __future__ import annotations

AUTHORIZATION_HEADER = "Authorization"


def basic_authorization(encoded_credentials: str | None) -> str | None:
    if encoded_credentials is None:
        return None
    return f"Basic {encoded_credentials}"
