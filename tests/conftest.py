"""Shared test fixtures."""

from __future__ import annotations

import io

import numpy as np
import pytest
from PIL import Image

from regiongrow.imaging.source import ArrayImage

BLACK = [0, 0, 0]
WHITE = [255, 255, 255]

# Pixel arrays are indexed [y][x]

# All four pixels the same color
UNIFORM_2X2 = [
    [[40, 80, 120], [40, 80, 120]],
    [[40, 80, 120], [40, 80, 120]],
]

# Black and white on the diagonals: no two 4-adjacent pixels match
CHECKER_2X2 = [
    [BLACK, WHITE],
    [WHITE, BLACK],
]

# Left column black, right column white
SPLIT_2X2 = [
    [BLACK, WHITE],
    [BLACK, WHITE],
]

# Single channel; only the top pair is cheap to merge at threshold 1000
PAIR_2X2 = [
    [[0], [10]],
    [[1000], [5000]],
]


def png_bytes(pixels) -> bytes:
    arr = np.asarray(pixels, dtype=np.uint8)
    buf = io.BytesIO()
    Image.fromarray(arr).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def uniform_image() -> ArrayImage:
    return ArrayImage(UNIFORM_2X2)


@pytest.fixture
def checker_image() -> ArrayImage:
    return ArrayImage(CHECKER_2X2)


@pytest.fixture
def split_image() -> ArrayImage:
    return ArrayImage(SPLIT_2X2)


@pytest.fixture
def pair_image() -> ArrayImage:
    return ArrayImage(PAIR_2X2)


@pytest.fixture
def noisy_image() -> ArrayImage:
    """8x8 RGB: four flat quadrants with mild seeded noise."""
    rng = np.random.default_rng(7)
    base = np.zeros((8, 8, 3))
    base[:4, :4] = [200, 30, 30]
    base[:4, 4:] = [30, 200, 30]
    base[4:, :4] = [30, 30, 200]
    base[4:, 4:] = [220, 220, 220]
    return ArrayImage(base + rng.integers(-4, 5, size=base.shape))


@pytest.fixture
def split_png() -> bytes:
    return png_bytes(SPLIT_2X2)
