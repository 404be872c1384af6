"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y redirects para todas las peticiones.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings
from core.domain.errors import FetchStatusError, FetchTransportError


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con los defaults del proyecto.

    `http_timeout_seconds=None` desactiva el timeout: una conexión colgada
    bloquea al llamador.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "*/*",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


async def get_or_raise(
    client: httpx.AsyncClient,
    url: str,
) -> httpx.Response:
    """GET que traduce los fallos a la taxonomía del dominio.

    - status != 200 -> `FetchStatusError`
    - `httpx.HTTPError` (DNS, conexión, TLS, redirects) o `httpx.InvalidURL`
      (URL mal formada) -> `FetchTransportError`, con la excepción original
      en `__cause__`
    """

    try:
        resp = await client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise FetchTransportError(url=url, reason=str(exc) or type(exc).__name__) from exc

    if resp.status_code != 200:
        raise FetchStatusError(url=url, status_code=resp.status_code)
    return resp
