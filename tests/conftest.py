from __future__ import annotations

import base64
import struct
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def pack_tiles(records) -> str:
    raw = b"".join(struct.pack("<iBBB", *rec) for rec in records)
    return base64.b64encode(raw).decode("ascii")


def unpack_tiles(text: str):
    raw = base64.b64decode(text)
    return [tuple(rec) for rec in struct.iter_unpack("<iBBB", raw)]


def map_text(tilemap: dict, chunks: dict, *, fmt: str = "7", chunk_version: str = "7") -> str:
    lines = [
        "meta:",
        f"  format: {fmt}",
        "  postmapinit: false",
        "tilemap:",
    ]
    for tile_id, name in tilemap.items():
        lines.append(f"  {tile_id}: {name}")
    lines += [
        "entities:",
        '- proto: ""',
        "  entities:",
        "  - uid: 1",
        "    components:",
        "    - type: MetaData",
        "      name: grid",
        "    - type: Transform",
        "      pos: 0,0",
        "    - type: MapGrid",
        "      chunks:",
    ]
    for key, tiles in chunks.items():
        lines += [
            f"        {key}:",
            f"          ind: {key}",
            f"          tiles: {tiles}",
            f"          version: {chunk_version}",
        ]
    return "\n".join(lines) + "\n"


@pytest.fixture()
def write_map(tmp_path: Path):
    def _write(text: str, name: str = "map.yml") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
