"""Segmentation error taxonomy.

Structural problems are raised while the region map is being built, before any
merge work starts. A region with no eligible neighbor is not an error: the
growth engine reports it as ``None`` / ``False``.
"""

from __future__ import annotations


class SegmentationError(ValueError):
    """Base class for setup failures of a segmentation run."""


class InvalidGridSize(SegmentationError):
    """Grid exponent is not a positive integer, or the image is smaller than 2^N."""


class ChannelCountMismatch(SegmentationError):
    """Pixels report differing numbers of color channels."""


class CoordinateOutOfBounds(SegmentationError):
    """A coordinate falls outside [0, 2^N) x [0, 2^N)."""

    def __init__(self, coord: tuple[int, int], size: int) -> None:
        self.coord = coord
        self.size = size
        super().__init__(f"Coordinate {coord} outside {size}x{size} grid")
