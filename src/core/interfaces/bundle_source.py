"""Contratos de fuentes del bundle.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite sustituir el fetch HTTP o la lectura de disco por dobles de test
  sin acoplar `BundleProvider` a implementaciones concretas.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class BundleFetcher(Protocol):
    """Obtiene el texto crudo del bundle remoto.

    Reglas de diseño:
    - `fetch` es asíncrono porque hace I/O (HTTP).
    - Devuelve el cuerpo completo o lanza `BundleFetchError`; nunca un cuerpo parcial.
    """

    source_url: str

    async def fetch(self) -> str:
        """Descarga el bundle y devuelve su texto."""

        ...


@runtime_checkable
class LocalBundleReader(Protocol):
    """Lee el bundle de un directorio local (override de desarrollo)."""

    def __call__(self, dist_path: Path) -> str:
        ...
