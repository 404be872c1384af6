"""Helpers de logging.

Por qué aquí:
- Todos los loggers llevan el prefijo `[shelter]` para distinguirse en la
  consola del host.
- El render se delega en rich, como el resto de la salida de la CLI.
"""

from __future__ import annotations

import logging
from typing import Any, MutableMapping

from rich.console import Console
from rich.logging import RichHandler

LOG_PREFIX = "[shelter]"

_HANDLER_NAME = "shelter-rich"


class PrefixedLogger(logging.LoggerAdapter):
    """Adapter que antepone `LOG_PREFIX` a cada mensaje."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        return f"{LOG_PREFIX} {msg}", kwargs


def get_logger(name: str) -> PrefixedLogger:
    return PrefixedLogger(logging.getLogger(name), {})


def configure_logging(level: str | int = "INFO", *, console: Console | None = None) -> None:
    """Instala un `RichHandler` en el logger raíz.

    Llamarla de nuevo solo actualiza el nivel.
    """

    root = logging.getLogger()
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)

    if any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        return

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.set_name(_HANDLER_NAME)
    root.addHandler(handler)
