"""Traversal orders — the sequence of coordinates a sweep visits.

Every order is a standalone function registered via decorator:

    @traversal(name="raster", description="Row-major")
    def raster(n: int) -> list[Coord]:
        ...

The order decides which merges are attempted first. Since a sweep stops at the
first committed merge, it shapes the final partition.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from regiongrow.engine.errors import CoordinateOutOfBounds
from regiongrow.engine.region import Coord

logger = logging.getLogger(__name__)

OrderFn = Callable[[int], list[Coord]]


@dataclass
class TraversalSpec:
    name: str
    fn: OrderFn
    description: str = ""


class TraversalRegistry:
    """Named traversal orders."""

    def __init__(self) -> None:
        self._orders: dict[str, TraversalSpec] = {}

    def register(self, spec: TraversalSpec) -> None:
        if spec.name in self._orders:
            raise ValueError(f"Duplicate traversal order: {spec.name}")
        self._orders[spec.name] = spec
        logger.debug("Registered traversal order %s", spec.name)

    def get(self, name: str) -> TraversalSpec:
        try:
            return self._orders[name]
        except KeyError:
            raise KeyError(
                f"Unknown traversal order {name!r}; available: {', '.join(self.names())}"
            ) from None

    def names(self) -> list[str]:
        return sorted(self._orders)

    @property
    def count(self) -> int:
        return len(self._orders)


# Module-level singleton
_registry = TraversalRegistry()


def get_registry() -> TraversalRegistry:
    return _registry


def traversal(*, name: str, description: str = ""):
    """Decorator to register a traversal order."""

    def decorator(fn: OrderFn) -> OrderFn:
        _registry.register(TraversalSpec(name=name, fn=fn, description=description))
        return fn

    return decorator


def get_traversal(name: str) -> TraversalSpec:
    """Registered order called ``name``; KeyError lists the available names."""
    return _registry.get(name)


def available_traversals() -> list[str]:
    return _registry.names()


def coordinates(n: int, name: str = "dither") -> list[Coord]:
    """Coordinates of the 2^N grid in the named order, validated."""
    order = get_traversal(name).fn(n)
    validate_order(order, n)
    return order


def validate_order(order: list[Coord], n: int) -> None:
    """Every coordinate in bounds, each grid cell exactly once."""
    size = 1 << n
    seen: set[Coord] = set()
    for coord in order:
        x, y = coord
        if not (0 <= x < size and 0 <= y < size):
            raise CoordinateOutOfBounds(coord, size)
        if coord in seen:
            raise ValueError(f"Traversal visits {coord} more than once")
        seen.add(coord)
    if len(seen) != size * size:
        raise ValueError(f"Traversal covers {len(seen)} of {size * size} cells")


# ---------------------------------------------------------------------------
# Built-in orders
# ---------------------------------------------------------------------------

def _bayer_rank(x: int, y: int, n: int) -> int:
    """Position of (x, y) in the 2^N ordered-dither (Bayer) threshold matrix."""
    rank = 0
    for bit in range(n):
        xb = (x >> bit) & 1
        yb = (y >> bit) & 1
        rank = (rank << 2) | ((xb ^ yb) << 1) | yb
    return rank


def _xy_to_hilbert(x: int, y: int, side: int) -> int:
    """Convert (x, y) to Hilbert curve index (d) on a side x side grid."""
    d = 0
    s = side >> 1
    while s > 0:
        rx = 1 if (x & s) > 0 else 0
        ry = 1 if (y & s) > 0 else 0
        d += s * s * ((3 * rx) ^ ry)
        # Rotate
        if ry == 0:
            if rx == 1:
                x = s - 1 - x
                y = s - 1 - y
            x, y = y, x
        s >>= 1
    return d


def _grid(n: int) -> list[Coord]:
    size = 1 << n
    return [(x, y) for y in range(size) for x in range(size)]


@traversal(name="dither", description="Ordered-dither (Bayer) rank order")
def dither(n: int) -> list[Coord]:
    return sorted(_grid(n), key=lambda c: _bayer_rank(c[0], c[1], n))


@traversal(name="raster", description="Row-major, top to bottom")
def raster(n: int) -> list[Coord]:
    return _grid(n)


@traversal(name="hilbert", description="Hilbert space-filling curve")
def hilbert(n: int) -> list[Coord]:
    side = 1 << n
    return sorted(_grid(n), key=lambda c: _xy_to_hilbert(c[0], c[1], side))
