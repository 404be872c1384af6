"""Compuerta de navegación para las ventanas del host.

En vez de parchear la clase de ventana del host, quien llama envuelve con
`with_bundle_gate` lo que construye sus ventanas. Así el `load_url` de cada
ventana espera al bundle antes de navegar a la app objetivo.
"""

from __future__ import annotations

import functools
import inspect
from typing import Any, Awaitable, Callable, TypeVar

from core.log import get_logger
from core.services.bundle_provider import BundleProvider

logger = get_logger(__name__)

W = TypeVar("W")


def gate_load_url(
    load_url: Callable[..., Any],
    provider: BundleProvider,
    *,
    app_url_marker: str,
) -> Callable[..., Awaitable[Any]]:
    """Envuelve `load_url` para que navegar a la app espere a una descarga terminada.

    Cualquier otra URL se delega de inmediato. Acepta `load_url` síncrono o
    async; el wrapper siempre es async.
    """

    @functools.wraps(load_url)
    async def gated(url: str, *args: Any, **kwargs: Any) -> Any:
        if app_url_marker in url and not provider.has_bundle:
            logger.debug("Holding navigation to %s until the bundle settles", url)
            await provider.ensure_bundle()

        result = load_url(url, *args, **kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result

    return gated


def with_bundle_gate(
    window_factory: Callable[..., W],
    provider: BundleProvider,
    *,
    app_url_marker: str,
    attribute: str = "load_url",
) -> Callable[..., W]:
    """Devuelve una factory cuyas ventanas tienen el `load_url` con compuerta."""

    def build(*args: Any, **kwargs: Any) -> W:
        window = window_factory(*args, **kwargs)
        original = getattr(window, attribute)
        setattr(window, attribute, gate_load_url(original, provider, app_url_marker=app_url_marker))
        return window

    return build
