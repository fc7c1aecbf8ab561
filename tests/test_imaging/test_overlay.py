"""Tests for overlay rendering and export."""

from __future__ import annotations

import io

import numpy as np
import pytest
from PIL import Image

from regiongrow.engine.growth import segment
from regiongrow.imaging.overlay import (
    _mean_fill,
    overlay_png_bytes,
    render_overlay,
    write_overlay,
)

YELLOW = (255, 255, 0)


class TestRenderOverlay:
    def test_size_is_scaled_grid(self, split_image):
        result = segment(split_image, 1, 1.0)
        rendered = render_overlay(split_image, result, scale=4)
        assert rendered.size == (8, 8)
        assert rendered.mode == "RGB"

    def test_marks_region_boundary(self, split_image):
        result = segment(split_image, 1, 1.0)
        rendered = render_overlay(split_image, result, scale=4)
        assert rendered.getpixel((3, 0)) == YELLOW
        assert rendered.getpixel((4, 5)) == YELLOW
        assert rendered.getpixel((0, 0)) == (0, 0, 0)
        assert rendered.getpixel((7, 7)) == (255, 255, 255)

    def test_single_region_has_no_boundary(self, uniform_image):
        result = segment(uniform_image, 1, 1.0)
        rendered = np.array(render_overlay(uniform_image, result, scale=2))
        assert np.all(rendered == [40, 80, 120])

    def test_grayscale_is_replicated(self):
        from regiongrow.imaging.source import ArrayImage

        img = ArrayImage(np.full((2, 2), 100))
        result = segment(img, 1, 1.0)
        assert render_overlay(img, result, scale=1).getpixel((0, 0)) == (100, 100, 100)

    def test_rejects_bad_scale(self, split_image):
        result = segment(split_image, 1, 1.0)
        with pytest.raises(ValueError):
            render_overlay(split_image, result, scale=0)

    def test_rejects_unknown_mode(self, split_image):
        result = segment(split_image, 1, 1.0)
        with pytest.raises(ValueError):
            render_overlay(split_image, result, mode="sparkles")

    def test_mean_mode(self, noisy_image):
        result = segment(noisy_image, 3, 60.0)
        rendered = render_overlay(noisy_image, result, scale=1, mode="mean")
        assert rendered.size == (8, 8)


def test_mean_fill():
    pixels = np.array([[[0.0], [10.0]], [[4.0], [10.0]]])
    labels = np.array([[0, 1], [0, 1]])
    filled = _mean_fill(pixels, labels)
    assert filled[:, :, 0].tolist() == [[2.0, 10.0], [2.0, 10.0]]


def test_write_overlay_tiff(tmp_path, split_image):
    result = segment(split_image, 1, 1.0)
    path = write_overlay(tmp_path / "segmented.tif", split_image, result, scale=8)
    assert path.exists()
    with Image.open(path) as img:
        assert img.format == "TIFF"
        assert img.size == (16, 16)


def test_overlay_png_bytes(split_image):
    result = segment(split_image, 1, 1.0)
    data = overlay_png_bytes(split_image, result, scale=2)
    with Image.open(io.BytesIO(data)) as img:
        assert img.format == "PNG"
        assert img.size == (4, 4)
