"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/disco) lean config de forma consistente.
- Los helpers del .env de usuario (`get_user_config_dir`, `write_user_env_vars`)
  existen para `shelter doctor configure`: la config persiste fuera del repo y
  `AppSettings` la lee como segundo `env_file`.

Variables de entorno principales:
- SHELTER_BUNDLE_URL: origen remoto del bundle.
- SHELTER_DIST_PATH: directorio local (desarrollo) que sustituye a la red.
- SHELTER_FORCE_DEVTOOLS: solo el literal "false" lo desactiva.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, PositiveFloat, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BUNDLE_URL = "https://raw.githubusercontent.com/uwu/shelter-builds/main/shelter.js"


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "shelter"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "shelter"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "shelter"
    return Path.home() / ".config" / "shelter"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario.

    Los valores `None` se ignoran (no borran lo existente).
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# shelter user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central del loader.

    Un único contrato de configuración para CLI, servicios y adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="SHELTER_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    bundle_url: str = Field(
        default=DEFAULT_BUNDLE_URL,
        min_length=8,
        description="URL del bundle remoto (shelter.js).",
    )
    dist_path: Path | None = Field(
        default=None,
        description="Directorio local con shelter.js; si está definido, nunca se usa la red.",
    )
    force_devtools: bool = Field(
        default=True,
        description="Fuerza las DevTools del host mediante el overlay de settings.",
    )
    http_timeout_seconds: PositiveFloat | None = Field(
        default=None,
        description="Timeout por request (segundos). None = sin timeout.",
    )
    user_agent: str = Field(
        default="shelter-inject/0.1",
        min_length=1,
        description="User-Agent para las peticiones HTTP.",
    )
    app_url_marker: str = Field(
        default="discord.com/app",
        min_length=1,
        description="Fragmento de URL que identifica la navegación a la app objetivo.",
    )
    log_level: str = Field(
        default="INFO",
        description="Nivel de logging (DEBUG, INFO, WARNING, ...).",
    )

    @field_validator("dist_path", mode="before")
    @classmethod
    def empty_dist_path_is_unset(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("force_devtools", mode="before")
    @classmethod
    def only_false_disables_devtools(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower() != "false"
        return value
