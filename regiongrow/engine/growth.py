"""Growth engine — mutual-best-match region merging to a fixpoint.

One attempt (``try_grow_one``) starts from the root containing a coordinate,
finds that region's best neighbor, then that neighbor's own best neighbor. The
merge is committed only when the two choose each other. A sweep walks the
traversal order and stops at the first committed merge; sweeps repeat until a
full pass commits nothing.

Every attempt rescans neighbors and recomputes costs from scratch. Scoring is
side-effect free, so rejected candidates leave no trace in the tree.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from regiongrow.engine.config import SegmentationConfig, Selection
from regiongrow.engine.neighbors import candidate_neighbors
from regiongrow.engine.region import (
    Coord,
    Region,
    channel_stddev,
    flatten,
    leaf_coords,
    merge_cost,
    segment_size,
)
from regiongrow.engine.region_map import RegionMap
from regiongrow.engine.traversal import coordinates

if TYPE_CHECKING:
    from regiongrow.imaging.source import ImageSource

logger = logging.getLogger(__name__)


@dataclass
class MergeEvent:
    """One committed merge."""
    coord: Coord
    sizes: tuple[int, int]
    cost: float
    sweep: int


@dataclass
class RegionSummary:
    label: int
    size: int
    mean_color: list[float]
    stddev: list[float]
    bbox: tuple[int, int, int, int]        # min_x, min_y, max_x, max_y


@dataclass
class Segmentation:
    """Final region map of a run plus its bookkeeping."""
    region_map: RegionMap
    config: SegmentationConfig
    merges: list[MergeEvent] = field(default_factory=list)
    sweeps: int = 0
    elapsed_ms: float = 0.0

    @property
    def grid_exponent(self) -> int:
        return self.region_map.n

    @property
    def threshold(self) -> float:
        return self.config.threshold

    def root_at(self, x: int, y: int) -> Region:
        return self.region_map.root_at((x, y))

    def roots(self) -> list[Region]:
        return self.region_map.roots()

    @property
    def region_count(self) -> int:
        return len(self.roots())

    def labels(self) -> NDArray[np.int32]:
        """Region label per pixel, indexed [y, x]; labels follow row-major first appearance."""
        size = self.region_map.size
        out = np.empty((size, size), dtype=np.int32)
        ids: dict[int, int] = {}
        for x, y in self.region_map.coordinates():
            root = self.region_map.root_at((x, y))
            out[y, x] = ids.setdefault(id(root), len(ids))
        return out

    def summaries(self) -> list[RegionSummary]:
        out: list[RegionSummary] = []
        for label, root in enumerate(self.roots()):
            coords = leaf_coords(root)
            xs = [c[0] for c in coords]
            ys = [c[1] for c in coords]
            out.append(RegionSummary(
                label=label,
                size=segment_size(root),
                mean_color=[round(float(v), 3) for v in flatten(root).mean(axis=0)],
                stddev=[round(float(v), 3) for v in channel_stddev(root)],
                bbox=(min(xs), min(ys), max(xs), max(ys)),
            ))
        return out


class GrowthEngine:
    """Drives merges over one region map with a fixed threshold."""

    def __init__(self, region_map: RegionMap, config: SegmentationConfig) -> None:
        if config.grid_exponent != region_map.n:
            raise ValueError(
                f"Config grid exponent {config.grid_exponent} does not match "
                f"region map N={region_map.n}"
            )
        self.region_map = region_map
        self.config = config
        self.order = coordinates(region_map.n, config.traversal)
        self.merges: list[MergeEvent] = []
        self.sweeps = 0

    @property
    def threshold(self) -> float:
        return self.config.threshold

    @property
    def selection(self) -> Selection:
        return self.config.selection

    def _scan(self, region: Region) -> tuple[Region | None, float]:
        best: Region | None = None
        best_cost = self.threshold
        costs: dict[int, float] = {}
        for candidate in candidate_neighbors(self.region_map, region):
            key = id(candidate)
            if key not in costs:
                costs[key] = merge_cost(candidate, region)
            cost = costs[key]
            if self.selection == "last":
                # Bar stays at the threshold: the last qualifying candidate wins.
                if cost < self.threshold:
                    best, best_cost = candidate, cost
            elif cost < best_cost:
                best, best_cost = candidate, cost
        return best, best_cost

    def best_neighbor(self, region: Region) -> Region | None:
        """Preferred merge partner of ``region``, or None if no cost is below threshold."""
        return self._scan(region)[0]

    def try_grow_one(self, coord: Coord) -> bool:
        """Merge the region at ``coord`` with its best neighbor if they choose each other."""
        current = self.region_map.root_at(coord)
        best, cost = self._scan(current)
        if best is None:
            return False

        partner = self.best_neighbor(best)
        if partner is None:
            return False

        if set(leaf_coords(current)) != set(leaf_coords(partner)):
            return False

        sizes = (segment_size(current), segment_size(best))
        self.region_map.merge(current, best)
        self.merges.append(MergeEvent(coord=coord, sizes=sizes, cost=cost, sweep=self.sweeps))
        logger.debug(
            "Merged at %s: sizes %d+%d, cost %.3f", coord, sizes[0], sizes[1], cost,
        )
        return True

    def sweep_once(self) -> bool:
        """Walk the traversal order; stop at the first committed merge."""
        self.sweeps += 1
        for coord in self.order:
            if self.try_grow_one(coord):
                return True
        return False

    def grow_to_fixpoint(self) -> int:
        """Sweep until a full pass commits no merge. Returns the merges committed."""
        limit = self.region_map.cell_count - 1
        start = len(self.merges)
        while self.sweep_once():
            if len(self.merges) > limit:
                raise RuntimeError(
                    f"Committed {len(self.merges)} merges on a grid of "
                    f"{self.region_map.cell_count} cells"
                )
        return len(self.merges) - start


def segment_with_config(image: ImageSource, config: SegmentationConfig) -> Segmentation:
    """Build a region map from ``image`` and grow it to a fixpoint."""
    start = time.perf_counter()
    region_map = RegionMap.build(image, config.grid_exponent)
    engine = GrowthEngine(region_map, config)

    logger.info(
        "Segmenting %dx%d grid (threshold %.1f, order %s, selection %s)",
        region_map.size, region_map.size, config.threshold,
        config.traversal, config.selection,
    )
    engine.grow_to_fixpoint()

    elapsed = (time.perf_counter() - start) * 1000
    result = Segmentation(
        region_map=region_map,
        config=config,
        merges=engine.merges,
        sweeps=engine.sweeps,
        elapsed_ms=round(elapsed, 1),
    )
    logger.info(
        "Segmentation complete: %d regions after %d merges, %d sweeps in %.0fms",
        result.region_count, len(result.merges), result.sweeps, elapsed,
    )
    return result


def segment(
    image: ImageSource,
    n: int,
    threshold: float,
    *,
    traversal: str = "dither",
    selection: Selection = "last",
) -> Segmentation:
    """Segment the top-left 2^N x 2^N square of ``image``."""
    config = SegmentationConfig(
        grid_exponent=n,
        threshold=threshold,
        traversal=traversal,
        selection=selection,
    )
    return segment_with_config(image, config)
