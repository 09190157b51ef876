from __future__ import annotations

import base64
import binascii
import logging
import struct
from dataclasses import dataclass
from typing import List, Mapping, Tuple

from .rotation import RotatedTileMapping, combine_rotation

LOG = logging.getLogger(__name__)

# tile id (int32), flags, variant, rotation
TILE_RECORD = struct.Struct("<iBBB")
TILE_RECORD_BYTES = TILE_RECORD.size


@dataclass
class TileRecord:
    tile_id: int
    flags: int = 0
    variant: int = 0
    rotation: int = 0

    def pack(self) -> bytes:
        return TILE_RECORD.pack(self.tile_id, self.flags, self.variant, self.rotation)


def decode_tiles(payload: bytes) -> List[TileRecord]:
    if len(payload) % TILE_RECORD_BYTES != 0:
        raise ValueError(f"tile payload length {len(payload)} is not a multiple of {TILE_RECORD_BYTES}")
    return [TileRecord(*fields) for fields in TILE_RECORD.iter_unpack(payload)]


def encode_tiles(records: List[TileRecord]) -> bytes:
    out = bytearray(TILE_RECORD_BYTES * len(records))
    for i, rec in enumerate(records):
        TILE_RECORD.pack_into(out, i * TILE_RECORD_BYTES, rec.tile_id, rec.flags, rec.variant, rec.rotation)
    return bytes(out)


def rewrite_chunk(payload: bytes, rotation_by_tile_id: Mapping[int, RotatedTileMapping]) -> Tuple[bytes, bool]:
    """Apply rotation deltas to every record whose tile id is in the map.

    Payloads that are not a whole number of records are returned unchanged.
    """
    if len(payload) % TILE_RECORD_BYTES != 0:
        return payload, False

    changed = False
    records = decode_tiles(payload)
    for rec in records:
        mapping = rotation_by_tile_id.get(rec.tile_id)
        if mapping is None:
            continue
        rec.rotation = combine_rotation(rec.rotation, mapping.rotation)
        changed = True

    if not changed:
        return payload, False
    return encode_tiles(records), True


def rewrite_chunk_text(text: str, rotation_by_tile_id: Mapping[int, RotatedTileMapping]) -> Tuple[str, bool]:
    try:
        payload = base64.b64decode("".join(text.split()), validate=True)
    except (binascii.Error, ValueError) as exc:
        LOG.debug("skipping undecodable tile payload: %s", exc)
        return text, False

    out, changed = rewrite_chunk(payload, rotation_by_tile_id)
    if not changed:
        return text, False
    return base64.b64encode(out).decode("ascii"), True
