"""Region tree — single-pixel leaves and binary merged regions.

A region is either a ``Leaf`` (one grid pixel) or a ``Merged`` node over two
existing regions. Parent links point upward and are assigned exactly once,
when a ``Merged`` node adopts its children. The statistics helpers below never
touch parent links, so scoring a candidate merge leaves the tree unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

import numpy as np
from numpy.typing import NDArray

Coord = tuple[int, int]


@dataclass(eq=False)
class Leaf:
    """One grid pixel and its color channels."""

    coord: Coord
    color: NDArray[np.float64]
    parent: Merged | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.color = np.array(self.color, dtype=np.float64).reshape(-1)


@dataclass(eq=False)
class Merged:
    """Region formed by merging ``first`` and ``second``; children never change."""

    first: Region
    second: Region
    parent: Merged | None = field(default=None, init=False, repr=False)
    size: int = field(init=False)

    def __post_init__(self) -> None:
        if self.first is self.second:
            raise ValueError("Cannot merge a region with itself")
        for child in (self.first, self.second):
            if child.parent is not None:
                raise ValueError("Region already belongs to a merged parent")
        self.size = segment_size(self.first) + segment_size(self.second)
        self.first.parent = self
        self.second.parent = self


Region = Union[Leaf, Merged]


def segment_size(region: Region | None) -> int:
    """Number of leaves under ``region`` (0 for ``None``)."""
    if region is None:
        return 0
    if isinstance(region, Leaf):
        return 1
    return region.size


def _leaves(region: Region) -> list[Leaf]:
    # Iterative pre-order walk; first child's leaves come before second's.
    out: list[Leaf] = []
    stack: list[Region] = [region]
    while stack:
        node = stack.pop()
        if isinstance(node, Leaf):
            out.append(node)
        else:
            stack.append(node.second)
            stack.append(node.first)
    return out


def flatten(region: Region) -> NDArray[np.float64]:
    """Leaf color vectors under ``region`` as a (size, channels) array."""
    return np.stack([leaf.color for leaf in _leaves(region)])


def leaf_coords(region: Region) -> tuple[Coord, ...]:
    """Leaf coordinates under ``region``, in the same order as ``flatten``."""
    return tuple(leaf.coord for leaf in _leaves(region))


def _weighted_dispersion(samples: NDArray[np.float64]) -> NDArray[np.float64]:
    """Per-channel ``size * population stddev``."""
    if len(samples) == 1:
        return np.zeros(samples.shape[1])
    return len(samples) * samples.std(axis=0)


def channel_stddev(region: Region) -> NDArray[np.float64]:
    """Population standard deviation of each channel over the region's leaves."""
    if isinstance(region, Leaf):
        return np.zeros_like(region.color)
    return flatten(region).std(axis=0)


def merge_cost(a: Region, b: Region) -> float:
    """Increase in size-weighted per-channel dispersion if ``a`` and ``b`` merged.

    cost = sum_c [ |a+b| * sd_c(a+b) - (|a| * sd_c(a) + |b| * sd_c(b)) ]

    Smaller (more negative) is more compatible. No normalization, so large
    regions dominate. Neither region is modified.
    """
    samples_a = flatten(a)
    samples_b = flatten(b)
    combined = _weighted_dispersion(np.concatenate([samples_a, samples_b]))
    separate = _weighted_dispersion(samples_a) + _weighted_dispersion(samples_b)
    return float(np.sum(combined - separate))
