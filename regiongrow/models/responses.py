"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    traversals: list[str] = Field(default_factory=list)


class RegionInfo(BaseModel):
    label: int
    size: int
    mean_color: list[float]
    stddev: list[float]
    bbox: tuple[int, int, int, int]


class SegmentResponse(BaseModel):
    grid_exponent: int
    threshold: float
    traversal: str
    selection: str
    region_count: int
    merges: int
    sweeps: int
    labels: list[list[int]] = Field(default_factory=list)
    regions: list[RegionInfo] = Field(default_factory=list)
    processing_time_ms: float = 0.0
    overlay_png_b64: str | None = None
