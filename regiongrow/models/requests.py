"""API request models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class SegmentRequest(BaseModel):
    image_b64: str = Field(..., description="Base64-encoded image file (PNG, TIFF, JPEG, ...)")
    grid_exponent: int | None = Field(default=None, description="Grid is 2^N x 2^N; defaults to settings")
    threshold: float | None = Field(default=None, description="Merge cost threshold; defaults to settings")
    traversal: str | None = Field(default=None, description="Sweep traversal order name")
    selection: Literal["last", "minimum"] | None = Field(
        default=None,
        description="Best-neighbor rule: last qualifying or cheapest qualifying candidate",
    )
    include_overlay: bool = Field(default=False, description="Return a PNG boundary overlay")
