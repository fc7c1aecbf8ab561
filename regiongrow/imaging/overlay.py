"""Overlay rendering — visualize a final segmentation and write it to disk."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Literal

import numpy as np
from numpy.typing import NDArray
from PIL import Image
from skimage.segmentation import mark_boundaries

from regiongrow.engine.growth import Segmentation
from regiongrow.imaging.source import ArrayImage

logger = logging.getLogger(__name__)

OverlayMode = Literal["boundaries", "mean"]

# Boundary color, RGB in [0, 1]
_BOUNDARY_COLOR = (1.0, 1.0, 0.0)

# 8-bit channel range
_MAX_CHANNEL = 255.0


def _to_rgb(pixels: NDArray[np.float64]) -> NDArray[np.float64]:
    """(h, w, c) in 0-255 → (h, w, 3) in 0-1. One channel is replicated, extras dropped."""
    if pixels.shape[2] == 1:
        pixels = np.repeat(pixels, 3, axis=2)
    elif pixels.shape[2] == 2:
        pixels = np.concatenate([pixels, pixels[:, :, :1]], axis=2)
    return np.clip(pixels[:, :, :3] / _MAX_CHANNEL, 0.0, 1.0)


def _upscale(arr: NDArray, scale: int) -> NDArray:
    return np.repeat(np.repeat(arr, scale, axis=0), scale, axis=1)


def _mean_fill(pixels: NDArray[np.float64], labels: NDArray[np.int32]) -> NDArray[np.float64]:
    """Paint every pixel with the mean color of its region."""
    k = int(labels.max()) + 1
    flat_labels = labels.reshape(-1)
    flat = pixels.reshape(-1, pixels.shape[2])
    sums = np.zeros((k, flat.shape[1]))
    np.add.at(sums, flat_labels, flat)
    counts = np.bincount(flat_labels, minlength=k)[:, np.newaxis]
    return (sums / counts)[labels]


def render_overlay(
    image: ArrayImage,
    segmentation: Segmentation,
    *,
    scale: int = 8,
    mode: OverlayMode = "boundaries",
) -> Image.Image:
    """Render the segmentation over the segmented part of ``image``."""
    if scale < 1:
        raise ValueError(f"Scale must be >= 1, got {scale}")

    size = segmentation.region_map.size
    pixels = image.crop(size)
    labels = segmentation.labels()

    if mode == "mean":
        pixels = _mean_fill(pixels, labels)
    elif mode != "boundaries":
        raise ValueError(f"Unknown overlay mode: {mode!r}")

    rgb = _upscale(_to_rgb(pixels), scale)
    marked = mark_boundaries(rgb, _upscale(labels, scale), color=_BOUNDARY_COLOR, mode="thick")
    out = np.clip(np.round(marked * _MAX_CHANNEL), 0, _MAX_CHANNEL).astype(np.uint8)
    return Image.fromarray(out)


def write_overlay(
    path: str | Path,
    image: ArrayImage,
    segmentation: Segmentation,
    *,
    scale: int = 8,
    mode: OverlayMode = "boundaries",
) -> Path:
    """Render and save; the file format follows the extension (TIFF, PNG, ...)."""
    path = Path(path)
    rendered = render_overlay(image, segmentation, scale=scale, mode=mode)
    rendered.save(path)
    logger.info(
        "Wrote %dx%d overlay (%d regions) to %s",
        rendered.width, rendered.height, segmentation.region_count, path,
    )
    return path


def overlay_png_bytes(
    image: ArrayImage,
    segmentation: Segmentation,
    *,
    scale: int = 8,
    mode: OverlayMode = "boundaries",
) -> bytes:
    buf = io.BytesIO()
    render_overlay(image, segmentation, scale=scale, mode=mode).save(buf, format="PNG")
    return buf.getvalue()
