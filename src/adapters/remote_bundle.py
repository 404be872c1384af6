"""Fuente remota del bundle (HTTP).

Implementa `core.interfaces.bundle_source.BundleFetcher` sobre httpx.
"""

from __future__ import annotations

import httpx

from adapters.http_client import build_async_client, get_or_raise
from core.config import AppSettings


class HttpBundleFetcher:
    """Descarga `settings.bundle_url` completo.

    Lanza `FetchStatusError` o `FetchTransportError`; quien decide absorberlos
    es `BundleProvider`.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    @property
    def source_url(self) -> str:
        return self._settings.bundle_url

    async def fetch(self) -> str:
        async with build_async_client(self._settings, transport=self._transport) as client:
            resp = await get_or_raise(client, self.source_url)
        # bytes inválidos -> U+FFFD
        return resp.content.decode("utf-8", errors="replace")
