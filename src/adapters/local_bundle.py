"""Lectura del bundle desde disco (override de desarrollo)."""

from __future__ import annotations

from pathlib import Path

from core.domain.errors import LocalReadError
from core.domain.source_map import BUNDLE_FILENAME


def read_local_bundle(dist_path: Path) -> str:
    path = Path(dist_path) / BUNDLE_FILENAME
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LocalReadError(path=path, reason=exc.strerror or str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise LocalReadError(path=path, reason=f"not valid UTF-8 ({exc.reason} at byte {exc.start})") from exc
