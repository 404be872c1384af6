"""Ciclo de vida del bundle remoto.

Por qué un servicio:
- `BundleProvider` es el dueño del script del loader durante todo el proceso.
- `refresh()` lo descarga y nunca propaga fallos de red: se registran y el
  bundle guardado queda intacto.
- `get_current()` responde de forma síncrona con, por orden de precedencia, el
  override local, el último bundle descargado o `FALLBACK_BUNDLE`.

Solo hay una descarga en vuelo. Los `refresh()` concurrentes (típicamente el
arranque y el hook de navegación) esperan la misma tarea, y el bundle se
reemplaza con una única asignación cuando la respuesta llegó completa.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

from adapters.local_bundle import read_local_bundle
from adapters.remote_bundle import HttpBundleFetcher
from core.config import AppSettings
from core.domain.errors import BundleFetchError, FetchStatusError
from core.domain.models import FALLBACK_BUNDLE, BundleState, RemoteBundle
from core.domain.source_map import SOURCE_MAP_MARKER, file_map_url, remote_map_url, with_source_map
from core.interfaces.bundle_source import BundleFetcher, LocalBundleReader
from core.log import get_logger

logger = get_logger(__name__)


class BundleProvider:
    """Entrega el bundle del loader bajo demanda; si no hay, degrada al fallback."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        fetcher: BundleFetcher | None = None,
        local_reader: LocalBundleReader | None = None,
        platform: str | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._fetcher: BundleFetcher = fetcher or HttpBundleFetcher(self._settings)
        self._local_reader: LocalBundleReader = local_reader or read_local_bundle
        self._platform = platform or sys.platform

        self._bundle = RemoteBundle(source_url=self._fetcher.source_url)
        self._state = BundleState.UNINITIALIZED
        self._inflight: asyncio.Task[None] | None = None

    @property
    def state(self) -> BundleState:
        return self._state

    @property
    def bundle(self) -> RemoteBundle:
        return self._bundle

    @property
    def has_bundle(self) -> bool:
        return self._bundle.is_present

    @property
    def local_override(self) -> Path | None:
        return self._settings.dist_path

    @property
    def in_flight(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    def start(self) -> asyncio.Task[None] | None:
        """Lanza la descarga de arranque sin esperarla.

        Requiere un event loop en marcha. Devuelve `None` con el override local
        configurado: en ese caso nunca se usa la red.
        """

        logger.info("Loading...")
        if self.local_override is not None:
            logger.info("Using local bundle from %s", self.local_override)
            return None
        return self._ensure_inflight()

    async def refresh(self) -> None:
        """Descarga el bundle, uniéndose a la descarga en vuelo si la hay.

        Cancelar al llamador no cancela la descarga compartida.
        """

        await asyncio.shield(self._ensure_inflight())

    async def ensure_bundle(self) -> None:
        """Espera a que una descarga termine, salvo que no haga falta descargar."""

        if self.local_override is not None or self.has_bundle:
            return
        await self.refresh()

    def get_current(self) -> str:
        """Texto actual del bundle.

        Lanza `LocalReadError` si el override está configurado pero no se puede leer.
        """

        dist_path = self.local_override
        if dist_path is not None:
            text = self._local_reader(dist_path)
            return f"{text}\n{SOURCE_MAP_MARKER}{file_map_url(dist_path, self._platform)}"

        text = self._bundle.source_text
        if text is not None:
            return text
        return FALLBACK_BUNDLE

    def _ensure_inflight(self) -> asyncio.Task[None]:
        task = self._inflight
        if task is None or task.done():
            task = asyncio.get_running_loop().create_task(self._fetch_once())
            self._inflight = task
        return task

    async def _fetch_once(self) -> None:
        source_url = self._bundle.source_url
        self._state = BundleState.FETCHING
        try:
            body = await self._fetcher.fetch()
        except FetchStatusError as exc:
            logger.warning("Remote bundle unavailable: %s", exc)
        except BundleFetchError as exc:
            logger.error("Error fetching remote bundle: %s", exc)
        else:
            self._bundle = RemoteBundle(
                source_url=source_url,
                source_text=with_source_map(body, remote_map_url(source_url)),
            )
            logger.debug("Fetched remote bundle (%d chars)", self._bundle.size)
        finally:
            self._state = BundleState.AVAILABLE if self._bundle.is_present else BundleState.UNAVAILABLE
