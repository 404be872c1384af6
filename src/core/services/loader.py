"""Arranque del loader.

Por qué aquí:
- Compone lo que necesita el proceso host: un único `BundleProvider`
  compartido, los canales IPC y la compuerta de navegación de sus ventanas.
- Cuando el módulo de settings del host está disponible, añade los canales
  del endpoint de actualizaciones y el overlay de DevTools.

Nada de esto parchea el host: es el host quien llama a estas piezas.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, MutableMapping, TypeVar

from core.config import AppSettings
from core.log import get_logger
from core.services.bundle_provider import BundleProvider
from core.services.ipc import (
    BranchesClient,
    IpcRouter,
    MessageBox,
    register_branch_handlers,
    register_bundle_handlers,
)
from core.services.navigation import with_bundle_gate
from core.services.update_endpoint import DevToolsOverlay, SettingsApi, UpdateEndpointSettings

logger = get_logger(__name__)

W = TypeVar("W")


@dataclass
class LoaderRuntime:
    """Lo que el host conserva tras `bootstrap`."""

    settings: AppSettings
    provider: BundleProvider
    router: IpcRouter
    endpoint_settings: UpdateEndpointSettings | None = None
    settings_store: MutableMapping[str, Any] | None = None
    warnings: list[str] = field(default_factory=list)

    def gate_windows(self, window_factory: Callable[..., W]) -> Callable[..., W]:
        return with_bundle_gate(
            window_factory,
            self.provider,
            app_url_marker=self.settings.app_url_marker,
        )

    def attach_host_settings(
        self,
        settings_api: SettingsApi,
        settings_store: MutableMapping[str, Any] | None = None,
        *,
        branches_client: BranchesClient | None = None,
    ) -> MutableMapping[str, Any] | None:
        """Registra los canales de ramas y envuelve el store con el overlay de DevTools.

        Devuelve el store que el host debe usar a partir de ahora (el overlay, o
        el store intacto si no se fuerzan las DevTools). Un solo attach por runtime.
        """

        if self.endpoint_settings is not None:
            raise RuntimeError("host settings are already attached")

        self.endpoint_settings = UpdateEndpointSettings(settings_api)
        if self.endpoint_settings.endpoint is None:
            msg = "No update endpoint in host settings; branch switching is unavailable"
            logger.warning(msg)
            self.warnings.append(msg)

        register_branch_handlers(
            self.router,
            self.endpoint_settings,
            branches_client,
            settings=self.settings,
        )

        if settings_store is not None and self.settings.force_devtools:
            settings_store = DevToolsOverlay(settings_store)
        self.settings_store = settings_store
        return settings_store


def bootstrap(
    settings: AppSettings | None = None,
    *,
    show_message_box: MessageBox,
    provider: BundleProvider | None = None,
    start_fetch: bool = True,
) -> LoaderRuntime:
    """Construye el runtime y, con `start_fetch`, lanza la descarga de arranque.

    Con `start_fetch=True` debe ejecutarse dentro de un event loop.
    """

    settings = settings or AppSettings()
    provider = provider or BundleProvider(settings)
    router = IpcRouter()
    register_bundle_handlers(router, provider, show_message_box)

    if start_fetch:
        provider.start()

    return LoaderRuntime(settings=settings, provider=provider, router=router)
