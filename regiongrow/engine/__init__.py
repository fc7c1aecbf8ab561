"""Region-growing segmentation engine."""

from regiongrow.engine.config import SegmentationConfig
from regiongrow.engine.errors import (
    ChannelCountMismatch,
    CoordinateOutOfBounds,
    InvalidGridSize,
    SegmentationError,
)
from regiongrow.engine.growth import GrowthEngine, MergeEvent, Segmentation, segment, segment_with_config
from regiongrow.engine.region import Leaf, Merged, Region
from regiongrow.engine.region_map import RegionMap, find_root

__all__ = [
    "SegmentationConfig",
    "SegmentationError",
    "InvalidGridSize",
    "ChannelCountMismatch",
    "CoordinateOutOfBounds",
    "GrowthEngine",
    "MergeEvent",
    "Segmentation",
    "segment",
    "segment_with_config",
    "Leaf",
    "Merged",
    "Region",
    "RegionMap",
    "find_root",
]
