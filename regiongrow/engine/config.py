"""Segmentation run configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from regiongrow.config import Settings

Selection = Literal["last", "minimum"]


@dataclass
class SegmentationConfig:
    """Parameters fixed for the whole of one segmentation run."""

    # Grid is 2^N x 2^N
    grid_exponent: int = 5
    # Merge accepted only when its cost is strictly below this
    threshold: float = 800.0
    # Registered traversal order used by every sweep
    traversal: str = "dither"
    # "last": last qualifying candidate wins (reference behavior)
    # "minimum": cheapest qualifying candidate wins
    selection: Selection = "last"

    def __post_init__(self) -> None:
        if self.selection not in ("last", "minimum"):
            raise ValueError(f"Unknown selection mode: {self.selection!r}")

    @classmethod
    def from_settings(cls, settings: Settings) -> SegmentationConfig:
        return cls(
            grid_exponent=settings.grid_exponent,
            threshold=settings.threshold,
            traversal=settings.traversal,
            selection=settings.selection,
        )
