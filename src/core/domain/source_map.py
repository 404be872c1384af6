"""Source-map trailer helpers."""

from __future__ import annotations

import os
import sys
from pathlib import Path

SOURCE_MAP_MARKER = "//# sourceMappingURL="

BUNDLE_FILENAME = "shelter.js"
BUNDLE_MAP_FILENAME = "shelter.js.map"


def with_source_map(text: str, map_url: str) -> str:
    """Append a source-map trailer unless `text` already references one."""

    if SOURCE_MAP_MARKER in text:
        return text
    return f"{text}\n{SOURCE_MAP_MARKER}{map_url}"


def remote_map_url(source_url: str) -> str:
    return source_url + ".map"


def file_map_url(dist_path: Path | str, platform: str | None = None) -> str:
    # file:///C:/... on Windows, file:///home/... elsewhere
    platform = platform or sys.platform
    prefix = "/" if platform == "win32" else ""
    return f"file://{prefix}{os.path.join(str(dist_path), BUNDLE_MAP_FILENAME)}"
