"""Collapse directional tile variants into base tiles plus a rotation.

For each map the tilemap legend is rewritten to the base tile ids, then every
grid chunk record using one of the rewritten tile ids gets its rotation
advanced by the variant's quarter-turn delta.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional

from yaml.nodes import MappingNode

from .config import ToolSettings
from .emitter import save_map
from .errors import FormatError, UsageError
from .mapfile import (
    collect_map_files,
    get_mapping,
    get_scalar,
    is_supported,
    iter_grid_chunks,
    load_map,
    scalar_pairs,
)
from .rotation import RotatedTileMapping, build_catalog
from .tiles import rewrite_chunk_text

LOG = logging.getLogger(__name__)

Catalog = Mapping[str, RotatedTileMapping]


def rewrite_tilemap(root: MappingNode, catalog: Catalog) -> Dict[int, RotatedTileMapping]:
    tilemap = get_mapping(root, "tilemap")
    if tilemap is None:
        raise FormatError("missing tilemap section")

    rotation_by_tile_id: Dict[int, RotatedTileMapping] = {}
    for key_node, value_node in scalar_pairs(tilemap):
        try:
            tile_id = int(key_node.value)
        except ValueError as exc:
            raise FormatError(f"invalid tilemap id: {key_node.value!r}") from exc
        mapping = catalog.get(value_node.value)
        if mapping is None:
            continue
        value_node.value = mapping.base_id
        rotation_by_tile_id[tile_id] = mapping
    return rotation_by_tile_id


def rewrite_grid_chunks(
    root: MappingNode,
    rotation_by_tile_id: Mapping[int, RotatedTileMapping],
    settings: ToolSettings,
) -> int:
    changed_chunks = 0
    for chunk in iter_grid_chunks(root, settings.format_version, grid_component=settings.grid_component):
        tiles = get_scalar(chunk, "tiles")
        if tiles is None:
            continue
        text, changed = rewrite_chunk_text(tiles.value, rotation_by_tile_id)
        if changed:
            tiles.value = text
            changed_chunks += 1
    return changed_chunks


def process_file(path: Path, catalog: Catalog, settings: Optional[ToolSettings] = None) -> bool:
    settings = settings or ToolSettings()
    try:
        root = load_map(path)
        if not is_supported(root, settings):
            LOG.debug("%s: unsupported map format, skipping", path)
            return False
        rotation_by_tile_id = rewrite_tilemap(root, catalog)
    except FormatError as exc:
        LOG.warning("%s: skipped (%s)", path, exc)
        return False

    if not rotation_by_tile_id:
        LOG.debug("%s: no rotated tiles in tilemap", path)
        return False

    # A tilemap hit counts even when no chunk uses the tile.
    updated = True
    changed_chunks = rewrite_grid_chunks(root, rotation_by_tile_id, settings)

    if not updated:
        return False
    save_map(root, path)
    LOG.info(
        "%s: rewrote %d tilemap entr%s, %d chunk(s)",
        path,
        len(rotation_by_tile_id),
        "y" if len(rotation_by_tile_id) == 1 else "ies",
        changed_chunks,
    )
    return True


def run(
    paths: Iterable[str],
    catalog: Optional[Catalog] = None,
    settings: Optional[ToolSettings] = None,
) -> int:
    settings = settings or ToolSettings()
    files = collect_map_files(paths, settings.map_extension)
    if not files:
        raise UsageError("no map files found")

    catalog = build_catalog() if catalog is None else catalog
    updated = 0
    for path in files:
        if process_file(path, catalog, settings):
            updated += 1
    LOG.debug("processed %d file(s), updated %d", len(files), updated)
    return updated
