"""Errores del dominio.

Política:
- Los errores de red (`BundleFetchError`) se registran y se absorben dentro de
  `BundleProvider.refresh()`: degradan a "no hay bundle".
- `LocalReadError` siempre se propaga: indica un entorno de desarrollo roto.
"""

from __future__ import annotations

from pathlib import Path


class ShelterError(Exception):
    """Base de todos los errores del proyecto."""


class BundleFetchError(ShelterError):
    """Fallo al obtener un recurso remoto."""

    def __init__(self, message: str, *, url: str) -> None:
        super().__init__(message)
        self.url = url


class FetchStatusError(BundleFetchError):
    """Respuesta HTTP distinta de 200."""

    def __init__(self, *, url: str, status_code: int) -> None:
        super().__init__(f"GET {url} returned HTTP {status_code}", url=url)
        self.status_code = status_code


class FetchTransportError(BundleFetchError):
    """Fallo de transporte (DNS, conexión, TLS, lectura).

    La excepción original queda en `__cause__`.
    """

    def __init__(self, *, url: str, reason: str) -> None:
        super().__init__(f"GET {url} failed: {reason}", url=url)
        self.reason = reason


class LocalReadError(ShelterError):
    """El override local está configurado pero el bundle no se puede leer."""

    def __init__(self, *, path: Path, reason: str) -> None:
        super().__init__(f"cannot read local bundle {path}: {reason}")
        self.path = path
        self.reason = reason


class EndpointNotConfiguredError(ShelterError):
    """No se pudo derivar el endpoint de actualizaciones de los settings del host."""
