from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_FORMAT_VERSION = "7"
DEFAULT_MAP_EXTENSION = ".yml"
GRID_COMPONENT = "MapGrid"


@dataclass(frozen=True)
class ToolSettings:
    format_version: str = DEFAULT_FORMAT_VERSION
    map_extension: str = DEFAULT_MAP_EXTENSION
    grid_component: str = GRID_COMPONENT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ToolSettings":
        format_version = os.environ.get("CONTENT_TOOLS_FORMAT_VERSION", DEFAULT_FORMAT_VERSION).strip()
        map_extension = os.environ.get("CONTENT_TOOLS_MAP_EXTENSION", DEFAULT_MAP_EXTENSION).strip()
        if map_extension and not map_extension.startswith("."):
            map_extension = "." + map_extension
        log_level = os.environ.get("CONTENT_TOOLS_LOG_LEVEL", "INFO").strip().upper() or "INFO"
        return cls(
            format_version=format_version or DEFAULT_FORMAT_VERSION,
            map_extension=map_extension or DEFAULT_MAP_EXTENSION,
            log_level=log_level,
        )
