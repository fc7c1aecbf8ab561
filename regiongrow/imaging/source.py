"""Image sources — per-pixel color channels for the region map."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Protocol, Sequence

import numpy as np
from numpy.typing import NDArray
from PIL import Image, UnidentifiedImageError

# Pillow modes kept as-is; everything else is converted to RGB
_NATIVE_MODES = {"L", "RGB"}


class ImageSource(Protocol):
    width: int
    height: int

    def get_color_bands(self, x: int, y: int) -> Sequence[float]: ...


class ArrayImage:
    """Image backed by a numpy array of shape (h, w) or (h, w, channels)."""

    def __init__(self, pixels: NDArray | Sequence) -> None:
        arr = np.asarray(pixels, dtype=np.float64)
        if arr.ndim == 2:
            arr = arr[:, :, np.newaxis]
        if arr.ndim != 3:
            raise ValueError(f"Expected (h, w) or (h, w, c) pixels, got shape {arr.shape}")
        self.pixels = arr
        self.height, self.width = arr.shape[:2]

    @property
    def channels(self) -> int:
        return self.pixels.shape[2]

    def get_color_bands(self, x: int, y: int) -> NDArray[np.float64]:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel {(x, y)} outside {self.width}x{self.height} image")
        return self.pixels[y, x]

    def crop(self, size: int) -> NDArray[np.float64]:
        """Top-left ``size`` x ``size`` block, shape (size, size, channels)."""
        return self.pixels[:size, :size]


def _from_pil(img: Image.Image) -> ArrayImage:
    if img.mode not in _NATIVE_MODES:
        img = img.convert("RGB")
    return ArrayImage(np.array(img))


def load_image(path: str | Path) -> ArrayImage:
    """Decode an image file with Pillow. Alpha is dropped; grayscale stays one channel."""
    try:
        with Image.open(path) as img:
            img.load()
            return _from_pil(img)
    except Image.DecompressionBombError as e:
        raise ValueError(f"Image too large: {e}") from e


def decode_image(data: bytes) -> ArrayImage:
    """Decode in-memory image bytes (PNG, TIFF, JPEG, ...)."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return _from_pil(img)
    except UnidentifiedImageError as e:
        raise ValueError(f"Unrecognized image data: {e}") from e
    except Image.DecompressionBombError as e:
        raise ValueError(f"Image too large: {e}") from e
