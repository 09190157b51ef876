"""Directional tile variants and the rotation algebra used to collapse them.

A tile's rotation byte carries a quarter-turn count in bits 0-1 and a mirror
flag in bit 2. Anything above bit 2 is reserved and is copied through.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Tuple

ROTATION_MASK = 0x3
MIRROR_FLAG = 0x4


class Direction(IntEnum):
    # One step up is one quarter-turn of the tile rotation field.
    SOUTH = 0
    EAST = 1
    NORTH = 2
    WEST = 3


@dataclass(frozen=True)
class RotatedTileMapping:
    base_id: str
    rotation: int


def combine_rotation(current: int, delta: int) -> int:
    turns = ((current & ROTATION_MASK) + delta) & ROTATION_MASK
    return (current & ~ROTATION_MASK & 0xFF) | turns


def rotation_delta(direction: Direction, base_direction: Direction) -> int:
    return (int(direction) - int(base_direction) + 4) % 4


def cardinal_group(
    base_id: str,
    base_direction: Direction,
    variants: Iterable[Tuple[str, Direction]],
) -> Dict[str, RotatedTileMapping]:
    return {
        tile_id: RotatedTileMapping(base_id, rotation_delta(direction, base_direction))
        for tile_id, direction in variants
    }


def diagonal_group(base_id: str, variants: Iterable[Tuple[str, int]]) -> Dict[str, RotatedTileMapping]:
    out: Dict[str, RotatedTileMapping] = {}
    for tile_id, rotation in variants:
        if not 0 <= rotation <= ROTATION_MASK:
            raise ValueError(f"rotation out of range for {tile_id}: {rotation}")
        out[tile_id] = RotatedTileMapping(base_id, rotation)
    return out


def _cardinal_names(prefix: str, base_direction: Direction, *, base_suffix: str | None = None):
    names = {
        Direction.SOUTH: "South",
        Direction.EAST: "East",
        Direction.NORTH: "North",
        Direction.WEST: "West",
    }
    out = []
    for direction in (base_direction,) + tuple(d for d in Direction if d != base_direction):
        if direction == base_direction and base_suffix is not None:
            out.append((prefix + base_suffix, direction))
        else:
            out.append((prefix + names[direction], direction))
    return out


def _groups():
    s, n = Direction.SOUTH, Direction.NORTH
    e, w = Direction.EAST, Direction.WEST
    yield cardinal_group(
        "CMFloorCargoArrowDown",
        s,
        [
            ("CMFloorCargoArrowDown", s),
            ("CMFloorCargoArrowUp", n),
            ("CMFloorCargoArrowRight", e),
            ("CMFloorCargoArrowLeft", w),
        ],
    )
    yield cardinal_group("CMFloorCorsatArrowSouth", s, _cardinal_names("CMFloorCorsatArrow", s))
    yield cardinal_group("RMCFloorAINoBuildArrow", s, _cardinal_names("RMCFloorAINoBuildArrow", s, base_suffix=""))
    yield cardinal_group("CMFloorOuterHullSouth", s, _cardinal_names("CMFloorOuterHull", s))
    yield diagonal_group(
        "CMFloorOuterHullSouthEast",
        [
            ("CMFloorOuterHullSouthEast", 0),
            ("CMFloorOuterHullNorthEast", 1),
            ("CMFloorOuterHullNorthWest", 2),
            ("CMFloorOuterHullSouthWest", 3),
        ],
    )
    yield cardinal_group("CMFloorSteelPrisonRampNorth", n, _cardinal_names("CMFloorSteelPrisonRamp", n))
    yield cardinal_group("RMCFloorHybrisaRampNorth", n, _cardinal_names("RMCFloorHybrisaRamp", n))
    yield cardinal_group("RMCFloorHybrisaStripeRedNorth", n, _cardinal_names("RMCFloorHybrisaStripeRed", n))


def build_catalog(groups: Iterable[Mapping[str, RotatedTileMapping]] | None = None) -> Mapping[str, RotatedTileMapping]:
    """Build the read-only prototype id -> (base id, rotation) table.

    ``groups`` defaults to the directional floor families shipped with the
    game. Each prototype id may appear in only one group.
    """
    mappings: Dict[str, RotatedTileMapping] = {}
    for group in _groups() if groups is None else groups:
        for tile_id, mapping in group.items():
            if tile_id in mappings:
                raise ValueError(f"duplicate rotated tile id: {tile_id}")
            mappings[tile_id] = mapping
    return MappingProxyType(mappings)
