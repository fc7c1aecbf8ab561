"""Neighbor discovery — candidate regions adjacent to a region."""

from __future__ import annotations

from regiongrow.engine.region import Coord, Leaf, Region, leaf_coords
from regiongrow.engine.region_map import RegionMap

# up, right, down, left
_OFFSETS: tuple[Coord, ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))


def four_neighbors(n: int, coord: Coord) -> list[Coord]:
    """Grid-adjacent coordinates of ``coord`` that lie inside the 2^N grid."""
    size = 1 << n
    x, y = coord
    out: list[Coord] = []
    for dx, dy in _OFFSETS:
        nx, ny = x + dx, y + dy
        if 0 <= nx < size and 0 <= ny < size:
            out.append((nx, ny))
    return out


def neighbor_coords(region_map: RegionMap, region: Region) -> list[Coord]:
    """Distinct coordinates bordering ``region`` and outside it, in discovery order."""
    if isinstance(region, Leaf):
        return four_neighbors(region_map.n, region.coord)

    own = set(leaf_coords(region))
    collected: list[Coord] = []
    seen: set[Coord] = set()
    for coord in leaf_coords(region):
        for nb in four_neighbors(region_map.n, coord):
            if nb in own or nb in seen:
                continue
            seen.add(nb)
            collected.append(nb)
    return collected


def candidate_neighbors(region_map: RegionMap, region: Region) -> list[Region]:
    """Root of every neighboring coordinate.

    One entry per coordinate, so a root bordering the region along several
    pixels appears several times.
    """
    return [region_map.root_at(coord) for coord in neighbor_coords(region_map, region)]
