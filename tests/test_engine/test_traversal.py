"""Tests for traversal orders."""

from __future__ import annotations

import pytest

from regiongrow.engine.errors import CoordinateOutOfBounds
from regiongrow.engine.traversal import (
    TraversalRegistry,
    TraversalSpec,
    available_traversals,
    coordinates,
    get_registry,
    get_traversal,
    validate_order,
)


def test_builtin_orders_registered():
    assert {"dither", "raster", "hilbert"} <= set(available_traversals())


@pytest.mark.parametrize("name", ["dither", "raster", "hilbert"])
@pytest.mark.parametrize("n", [1, 2, 3, 4])
def test_every_order_visits_each_cell_once(name, n):
    order = coordinates(n, name)
    size = 1 << n
    assert len(order) == size * size
    assert set(order) == {(x, y) for x in range(size) for y in range(size)}


def test_raster_is_row_major():
    assert coordinates(1, "raster") == [(0, 0), (1, 0), (0, 1), (1, 1)]


def test_dither_2x2():
    assert coordinates(1, "dither") == [(0, 0), (1, 1), (1, 0), (0, 1)]


def test_dither_spreads_first_quarter():
    # The first quarter of a 4x4 dither order hits one cell per 2x2 block
    first = coordinates(2, "dither")[:4]
    assert {(x // 2, y // 2) for x, y in first} == {(0, 0), (1, 0), (0, 1), (1, 1)}


def test_hilbert_steps_are_adjacent():
    order = coordinates(3, "hilbert")
    for (x0, y0), (x1, y1) in zip(order, order[1:]):
        assert abs(x0 - x1) + abs(y0 - y1) == 1


def test_get_traversal():
    spec = get_traversal("hilbert")
    assert spec.name == "hilbert"
    assert spec.fn(1) == [(0, 0), (0, 1), (1, 1), (1, 0)]
    with pytest.raises(KeyError, match="dither"):
        get_traversal("spiral")


def test_unknown_order():
    with pytest.raises(KeyError, match="available"):
        coordinates(2, "spiral")


def test_validate_rejects_out_of_bounds():
    with pytest.raises(CoordinateOutOfBounds):
        validate_order([(0, 0), (1, 0), (0, 1), (2, 1)], 1)


def test_validate_rejects_repeats():
    with pytest.raises(ValueError):
        validate_order([(0, 0), (0, 0), (0, 1), (1, 1)], 1)


def test_validate_rejects_missing_cells():
    with pytest.raises(ValueError):
        validate_order([(0, 0), (1, 0), (0, 1)], 1)


def test_registry_rejects_duplicates():
    reg = TraversalRegistry()
    spec = TraversalSpec(name="raster", fn=lambda n: [])
    reg.register(spec)
    with pytest.raises(ValueError):
        reg.register(spec)
    assert reg.count == 1
    assert get_registry().get("raster").name == "raster"
