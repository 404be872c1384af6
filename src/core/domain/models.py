"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación y documentación autocontenida (Field) sin acoplar el Core a
  librerías de I/O.
- `RemoteBundle` es inmutable (`frozen`): un fetch nuevo produce una instancia
  nueva, nunca se reescribe la anterior.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from core.domain.source_map import SOURCE_MAP_MARKER

FALLBACK_BUNDLE = 'console.error("[shelter] bundle could not be fetched in time. Aborting!");'


class BundleState(str, Enum):
    """Ciclo de vida del bundle remoto."""

    UNINITIALIZED = "uninitialized"
    FETCHING = "fetching"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class RemoteBundle(BaseModel):
    """Payload remoto del loader (o su ausencia)."""

    model_config = ConfigDict(frozen=True)

    source_url: str = Field(
        ...,
        min_length=1,
        description="Origen configurado del bundle; fijo durante todo el proceso.",
    )
    source_text: str | None = Field(
        default=None,
        description="Texto del bundle (con trailer de source-map) o None si nunca se obtuvo.",
    )

    @property
    def is_present(self) -> bool:
        return self.source_text is not None

    @property
    def size(self) -> int:
        return len(self.source_text or "")

    @property
    def has_source_map(self) -> bool:
        return SOURCE_MAP_MARKER in (self.source_text or "")


class Branch(BaseModel):
    """Rama publicada por el servidor de actualizaciones (`/sheltupdate_branches`).

    Campos desconocidos se conservan para reenviarlos tal cual al renderer.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = Field(..., min_length=1, description="Identificador técnico de la rama.")
    display_name: str = Field(
        ...,
        alias="displayName",
        description="Nombre legible para la UI.",
    )
    description: str = Field(default="", description="Descripción corta de la rama.")

    def to_renderer_entry(self) -> dict[str, Any]:
        """Forma esperada por la UI de "Client Mods": name=displayName, desc=description."""

        raw = self.model_dump(by_alias=True)
        return {**raw, "name": self.display_name, "desc": self.description}
