"""Shared fixtures for overlay tests."""

import pytest

from hexoverlay.h3 import OverlayPolygon, ViewportBounds
from hexoverlay.overlay import ColorTable, HeadlessMap


@pytest.fixture
def triangle():
    """Triangle of roughly 150m x 220m near (48.922, 24.711)."""
    return OverlayPolygon.from_rings(
        1,
        [[
            (48.9215, 24.7100),
            (48.9235, 24.7110),
            (48.9215, 24.7120),
            (48.9215, 24.7100),
        ]],
    )


@pytest.fixture
def second_polygon():
    return OverlayPolygon.from_rings(
        2,
        [[
            (48.9240, 24.7130),
            (48.9250, 24.7130),
            (48.9250, 24.7145),
            (48.9240, 24.7145),
            (48.9240, 24.7130),
        ]],
    )


@pytest.fixture
def unclosed_polygon():
    return OverlayPolygon.from_rings(
        3,
        [[
            (48.9200, 24.7080),
            (48.9205, 24.7085),
            (48.9210, 24.7080),
            (48.9205, 24.7075),
        ]],
    )


@pytest.fixture
def city_bounds():
    """Viewport containing all fixture polygons."""
    return ViewportBounds(south=48.90, west=24.69, north=48.94, east=24.73)


@pytest.fixture
def far_bounds():
    """Viewport far away from all fixture polygons."""
    return ViewportBounds(south=50.00, west=30.00, north=50.10, east=30.10)


@pytest.fixture
def color_table():
    return ColorTable.from_records(
        [
            {"id": 1, "COLOR_HEX": "#ff0000"},
            {"id": 2, "COLOR_HEX": "#00ff00"},
            {"id": 3, "COLOR_HEX": "#0000ff"},
        ]
    )


@pytest.fixture
def headless_map(city_bounds):
    return HeadlessMap(zoom=16, bounds=city_bounds)
