"""Region map — the 2^N x 2^N grid of leaves and root resolution.

The grid of ``Leaf`` objects is built once and never replaced. Segmentation
progress lives entirely in the parent links of ``Merged`` nodes stacked on top
of those leaves.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING

from regiongrow.engine.errors import (
    ChannelCountMismatch,
    CoordinateOutOfBounds,
    InvalidGridSize,
)
from regiongrow.engine.region import Coord, Leaf, Merged, Region

if TYPE_CHECKING:
    from regiongrow.imaging.source import ImageSource

logger = logging.getLogger(__name__)


def validate_grid_exponent(n: object) -> int:
    """Return ``n`` if it is a positive int, else raise InvalidGridSize."""
    if isinstance(n, bool) or not isinstance(n, int) or n < 1:
        raise InvalidGridSize(f"Grid exponent must be a positive integer, got {n!r}")
    return n


def find_root(region: Region) -> Region:
    """Follow parent links up to the region that has none."""
    while region.parent is not None:
        region = region.parent
    return region


class RegionMap:
    """Grid of leaf regions for one segmentation run."""

    def __init__(self, n: int, leaves: list[list[Leaf]]) -> None:
        self.n = validate_grid_exponent(n)
        self.size = 1 << self.n
        if len(leaves) != self.size or any(len(col) != self.size for col in leaves):
            raise InvalidGridSize(f"Leaf grid must be {self.size}x{self.size}")
        # Indexed [x][y]
        self._leaves = leaves

    @classmethod
    def build(cls, image: ImageSource, n: int) -> RegionMap:
        """Decode every pixel of the top-left 2^N square into a leaf."""
        n = validate_grid_exponent(n)
        size = 1 << n
        if image.width < size or image.height < size:
            raise InvalidGridSize(
                f"Image {image.width}x{image.height} is smaller than the "
                f"{size}x{size} grid (N={n})"
            )

        channels: int | None = None
        leaves: list[list[Leaf]] = []
        for x in range(size):
            column: list[Leaf] = []
            for y in range(size):
                bands = list(image.get_color_bands(x, y))
                if channels is None:
                    channels = len(bands)
                elif len(bands) != channels:
                    raise ChannelCountMismatch(
                        f"Pixel {(x, y)} has {len(bands)} channels, expected {channels}"
                    )
                column.append(Leaf((x, y), bands))
            leaves.append(column)

        if not channels:
            raise ChannelCountMismatch("Pixels report no color channels")

        logger.debug("Built %dx%d region map with %d channels", size, size, channels)
        return cls(n, leaves)

    @property
    def cell_count(self) -> int:
        return self.size * self.size

    def in_bounds(self, coord: Coord) -> bool:
        x, y = coord
        return 0 <= x < self.size and 0 <= y < self.size

    def leaf_at(self, coord: Coord) -> Leaf:
        if not self.in_bounds(coord):
            raise CoordinateOutOfBounds(coord, self.size)
        x, y = coord
        return self._leaves[x][y]

    def root_at(self, coord: Coord) -> Region:
        return find_root(self.leaf_at(coord))

    def coordinates(self) -> Iterator[Coord]:
        """All grid coordinates in row-major order."""
        for y in range(self.size):
            for x in range(self.size):
                yield (x, y)

    def roots(self) -> list[Region]:
        """Distinct current roots, in row-major order of first appearance."""
        seen: set[int] = set()
        out: list[Region] = []
        for coord in self.coordinates():
            root = self.root_at(coord)
            if id(root) not in seen:
                seen.add(id(root))
                out.append(root)
        return out

    def merge(self, a: Region, b: Region) -> Merged:
        """Commit a merge of two current roots into a new root."""
        if a.parent is not None or b.parent is not None:
            raise ValueError("Only current roots can be merged")
        return Merged(a, b)
