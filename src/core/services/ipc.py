"""Registro de handlers IPC.

Por qué un router propio:
- Sustituye, sin depender del host, a la tabla `ipcMain.handle` del proceso
  principal: el renderer invoca un canal por nombre y recibe el resultado.
- `register_bundle_handlers` y `register_branch_handlers` montan los canales
  del loader sobre un router.
"""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Sequence

from adapters.branches_client import fetch_available_branches
from core.config import AppSettings
from core.domain.errors import EndpointNotConfiguredError
from core.services.bundle_provider import BundleProvider
from core.services.update_endpoint import UpdateEndpointSettings

SHELTER_BUNDLE_FETCH = "SHELTER_BUNDLE_FETCH"
SHELTER_BRANCHCHANGE_SECURITY_DIALOG = "SHELTER_BRANCHCHANGE_SECURITY_DIALOG"
SHELTER_AVAILABLE_BRANCHES = "SHELTER_AVAILABLE_BRANCHES"
SHELTER_BRANCH_GET = "SHELTER_BRANCH_GET"
SHELTER_BRANCH_SET = "SHELTER_BRANCH_SET"

SECURITY_DIALOG_TITLE = "Sheltupdate mods change"
SECURITY_DIALOG_DETAIL = (
    "We confirm for security reasons that this action is intended by the user. "
    'Only continue if you got here from the shelter "Client Mods" UI.'
)

Handler = Callable[..., Any]
MessageBox = Callable[[dict[str, Any]], Any]
BranchesClient = Callable[[str], Awaitable[dict[str, dict[str, Any]]]]


class IpcRouter:
    """Tabla nombre de canal -> handler."""

    def __init__(self) -> None:
        self._handlers: dict[str, Handler] = {}

    def handle(self, channel: str, handler: Handler) -> None:
        if channel in self._handlers:
            raise ValueError(f"a handler for {channel!r} is already registered")
        self._handlers[channel] = handler

    def remove(self, channel: str) -> None:
        self._handlers.pop(channel, None)

    def channels(self) -> list[str]:
        return sorted(self._handlers)

    async def invoke(self, channel: str, *args: Any) -> Any:
        """Llama al handler de `channel`; `KeyError` si el canal no existe."""

        handler = self._handlers[channel]
        result = handler(*args)
        if inspect.isawaitable(result):
            result = await result
        return result


def security_dialog_options(message: str) -> dict[str, Any]:
    return {
        "message": message,
        "type": "warning",
        "buttons": ["Cancel", "Confirm"],
        "title": SECURITY_DIALOG_TITLE,
        "detail": SECURITY_DIALOG_DETAIL,
    }


def register_bundle_handlers(
    router: IpcRouter,
    provider: BundleProvider,
    show_message_box: MessageBox,
) -> None:
    router.handle(SHELTER_BUNDLE_FETCH, provider.get_current)
    router.handle(
        SHELTER_BRANCHCHANGE_SECURITY_DIALOG,
        lambda message: show_message_box(security_dialog_options(message)),
    )


def register_branch_handlers(
    router: IpcRouter,
    endpoint_settings: UpdateEndpointSettings,
    branches_client: BranchesClient | None = None,
    *,
    settings: AppSettings | None = None,
) -> None:
    """Monta los canales de ramas.

    Sin `branches_client` se usa el cliente HTTP ligado a `settings`.
    """

    app_settings = settings or AppSettings()

    async def http_branches(endpoint: str) -> dict[str, dict[str, Any]]:
        return await fetch_available_branches(endpoint, app_settings)

    client: BranchesClient = branches_client or http_branches

    async def available_branches() -> dict[str, dict[str, Any]]:
        endpoint = endpoint_settings.endpoint
        if endpoint is None:
            raise EndpointNotConfiguredError("no update endpoint found in host settings")
        return await client(endpoint)

    def set_branches(branches: Sequence[str]) -> None:
        endpoint_settings.set_branches(list(branches))

    router.handle(SHELTER_AVAILABLE_BRANCHES, available_branches)
    router.handle(SHELTER_BRANCH_GET, endpoint_settings.get_branches)
    router.handle(SHELTER_BRANCH_SET, set_branches)
