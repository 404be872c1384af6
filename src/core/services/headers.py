"""Filtrado de cabeceras de respuesta.

El bundle se inyecta en páginas del host; su CSP lo bloquearía.
"""

from __future__ import annotations

from typing import Mapping, TypeVar

V = TypeVar("V")

CSP_HEADER_PREFIX = "content-security-policy"


def is_csp_header(name: str) -> bool:
    return name.lower().startswith(CSP_HEADER_PREFIX)


def strip_csp_headers(headers: Mapping[str, V]) -> dict[str, V]:
    """Copia de `headers` sin ninguna variante de Content-Security-Policy.

    Cubre también `Content-Security-Policy-Report-Only`. No muta la entrada.
    """

    return {name: value for name, value in headers.items() if not is_csp_header(name)}
