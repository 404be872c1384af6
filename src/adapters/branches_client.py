"""Cliente de ramas disponibles del servidor de actualizaciones.

Endpoint: `<endpoint>/sheltupdate_branches` -> lista JSON de ramas.
A diferencia del bundle, aquí los errores se propagan al llamador (IPC/CLI).
"""

from __future__ import annotations

from typing import Any

import httpx

from adapters.http_client import build_async_client, get_or_raise
from core.config import AppSettings
from core.domain.models import Branch

BRANCHES_PATH = "sheltupdate_branches"


def branches_url(endpoint: str) -> str:
    return f"{endpoint.rstrip('/')}/{BRANCHES_PATH}"


async def fetch_branches(
    endpoint: str,
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[Branch]:
    settings = settings or AppSettings()
    url = branches_url(endpoint)

    async with build_async_client(
        settings,
        extra_headers={"Accept": "application/json"},
        transport=transport,
    ) as client:
        resp = await get_or_raise(client, url)

    data = resp.json()
    if not isinstance(data, list):
        raise ValueError(f"unexpected branches payload from {url}: {type(data).__name__}")
    return [Branch.model_validate(item) for item in data]


async def fetch_available_branches(
    endpoint: str,
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, dict[str, Any]]:
    """Ramas indexadas por nombre técnico, en la forma que espera el renderer."""

    branches = await fetch_branches(endpoint, settings, transport=transport)
    return {b.name: b.to_renderer_entry() for b in branches}
