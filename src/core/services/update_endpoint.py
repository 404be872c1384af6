"""Settings del canal de actualizaciones del host.

El host guarda su endpoint como `<base>/<rama1+rama2>`. Cambiar de ramas es
reescribir ese último segmento en `UPDATE_ENDPOINT` y `NEW_UPDATE_ENDPOINT`.

También incluye `DevToolsOverlay`, que fuerza las DevTools sin que la clave
llegue nunca a persistirse en el settings.json del host.
"""

from __future__ import annotations

import re
from typing import Any, Iterator, MutableMapping, Protocol, Sequence, runtime_checkable

from core.domain.errors import EndpointNotConfiguredError

ENDPOINT_RE = re.compile(r"(https?://.+)/([a-zA-Z0-9_+-]+)")

UPDATE_ENDPOINT = "UPDATE_ENDPOINT"
NEW_UPDATE_ENDPOINT = "NEW_UPDATE_ENDPOINT"
ENDPOINT_KEYS: tuple[str, ...] = (UPDATE_ENDPOINT, NEW_UPDATE_ENDPOINT)

DEVTOOLS_KEY = "DANGEROUS_ENABLE_DEVTOOLS_ONLY_ENABLE_IF_YOU_KNOW_WHAT_YOURE_DOING"

BRANCH_SEPARATOR = "+"


@runtime_checkable
class SettingsApi(Protocol):
    """API mínima de settings del host (stock y OpenAsar exponen ambas)."""

    def get(self, key: str) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


def parse_endpoint(value: object) -> tuple[str, list[str]] | None:
    """`"https://host/a+b"` -> `("https://host", ["a", "b"])`; None si no encaja."""

    if not isinstance(value, str):
        return None
    match = ENDPOINT_RE.search(value)
    if not match:
        return None
    return match.group(1), match.group(2).split(BRANCH_SEPARATOR)


class UpdateEndpointSettings:
    """Lee y reescribe las ramas activas sobre `SettingsApi`."""

    def __init__(self, settings_api: SettingsApi) -> None:
        self._api = settings_api
        # Se fija al arrancar: set_branches() reescribe siempre sobre la misma base.
        parsed = self._first_parsed()
        self._endpoint = parsed[0] if parsed else None

    @property
    def endpoint(self) -> str | None:
        return self._endpoint

    def get_branches(self) -> list[str]:
        parsed = self._first_parsed()
        return parsed[1] if parsed else []

    def set_branches(self, branches: Sequence[str]) -> None:
        if not branches:
            self._api.set(UPDATE_ENDPOINT, None)
            self._api.set(NEW_UPDATE_ENDPOINT, None)
            return

        if self._endpoint is None:
            raise EndpointNotConfiguredError("no update endpoint found in host settings")

        joined = BRANCH_SEPARATOR.join(branches)
        self._api.set(UPDATE_ENDPOINT, f"{self._endpoint}/{joined}")
        self._api.set(NEW_UPDATE_ENDPOINT, f"{self._endpoint}/{joined}/")

    def _first_parsed(self) -> tuple[str, list[str]] | None:
        for key in ENDPOINT_KEYS:
            parsed = parse_endpoint(self._api.get(key))
            if parsed is not None:
                return parsed
        return None


class DevToolsOverlay(MutableMapping[str, Any]):
    """Vista sobre el store de settings que fuerza `DEVTOOLS_KEY` a True.

    La clave no aparece al iterar ni en `len()`, así que un volcado del store
    nunca la guarda. Las escrituras a esa clave se ignoran.
    """

    def __init__(self, store: MutableMapping[str, Any], *, enabled: bool = True) -> None:
        self._store = store
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def __getitem__(self, key: str) -> Any:
        if self._enabled and key == DEVTOOLS_KEY:
            return True
        return self._store[key]

    def __setitem__(self, key: str, value: Any) -> None:
        if self._enabled and key == DEVTOOLS_KEY:
            return
        self._store[key] = value

    def __delitem__(self, key: str) -> None:
        if self._enabled and key == DEVTOOLS_KEY:
            return
        del self._store[key]

    def __iter__(self) -> Iterator[str]:
        return (k for k in self._store if not (self._enabled and k == DEVTOOLS_KEY))

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __contains__(self, key: object) -> bool:
        if self._enabled and key == DEVTOOLS_KEY:
            return True
        return key in self._store

    def persistable(self) -> dict[str, Any]:
        return {k: self._store[k] for k in self}

