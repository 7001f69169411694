"""Tests for viewport bounds and cell filtering."""

import h3
import pytest

from hexoverlay.h3 import CellSetBuilder, ViewportBounds, ViewportFilter, filter_to_viewport


class TestViewportBounds:
    """Test ViewportBounds."""

    def test_contains_is_inclusive(self):
        bounds = ViewportBounds(south=0, west=0, north=10, east=10)

        assert bounds.contains(5, 5)
        assert bounds.contains(0, 0)
        assert bounds.contains(10, 10)
        assert not bounds.contains(-0.001, 5)
        assert not bounds.contains(5, 10.001)

    def test_from_corners(self):
        bounds = ViewportBounds.from_corners((48.90, 24.69), (48.94, 24.73))

        assert bounds == ViewportBounds(south=48.90, west=24.69, north=48.94, east=24.73)
        assert bounds.south_west == (48.90, 24.69)
        assert bounds.north_east == (48.94, 24.73)

    def test_from_bbox(self):
        bounds = ViewportBounds.from_bbox([48.90, 24.69, 48.94, 24.73])

        assert bounds.west == 24.69
        assert bounds.north == 48.94

    def test_from_bbox_wrong_length(self):
        with pytest.raises(ValueError, match="4 values"):
            ViewportBounds.from_bbox([1, 2, 3])

    def test_inverted_latitudes(self):
        with pytest.raises(ValueError, match="south"):
            ViewportBounds(south=10, west=0, north=0, east=10)

    def test_polygon_and_center(self):
        bounds = ViewportBounds(south=0, west=0, north=10, east=20)

        assert bounds.to_polygon().area == 200
        assert bounds.center() == (5, 10)

    def test_antimeridian_viewport_matches_nothing(self):
        """Wrapped viewports are not handled by the rectangular test."""
        bounds = ViewportBounds(south=-10, west=170, north=10, east=-170)

        assert not bounds.contains(0, 180)
        assert not bounds.contains(0, 175)


class TestViewportFilter:
    """Test ViewportFilter."""

    def test_subset_with_centers_inside(self, triangle):
        cells = CellSetBuilder().build(triangle, 12)
        half = ViewportBounds(south=48.9215, west=24.7100, north=48.9235, east=24.7110)

        visible = ViewportFilter().filter(cells, half)

        assert visible <= cells
        assert 0 < len(visible) < len(cells)
        for cell in visible:
            lat, lng = h3.cell_to_latlng(cell)
            assert half.contains(lat, lng)
        for cell in cells - visible:
            lat, lng = h3.cell_to_latlng(cell)
            assert not half.contains(lat, lng)

    def test_full_viewport_keeps_everything(self, triangle, city_bounds):
        cells = CellSetBuilder().build(triangle, 11)

        assert ViewportFilter().filter(cells, city_bounds) == cells

    def test_far_viewport_drops_everything(self, triangle, far_bounds):
        cells = CellSetBuilder().build(triangle, 11)

        assert filter_to_viewport(cells, far_bounds) == frozenset()

    def test_empty_input(self, city_bounds):
        assert ViewportFilter().filter(frozenset(), city_bounds) == frozenset()

    def test_center_on_edge_is_kept(self):
        cell = h3.latlng_to_cell(48.922, 24.711, 10)
        lat, lng = h3.cell_to_latlng(cell)
        point = ViewportBounds(south=lat, west=lng, north=lat, east=lng)

        assert ViewportFilter().filter({cell}, point) == frozenset([cell])

    def test_boundary_overlap_without_center_is_dropped(self):
        """A cell whose outline reaches into the viewport but whose center is outside is excluded."""
        cell = h3.latlng_to_cell(48.922, 24.711, 9)
        lat, lng = h3.cell_to_latlng(cell)
        # Thin strip just north of the center, still inside the cell outline
        strip = ViewportBounds(south=lat + 0.0001, west=lng - 0.001, north=lat + 0.0002, east=lng + 0.001)

        assert ViewportFilter().filter({cell}, strip) == frozenset()

    def test_containment_uses_cell_center(self, monkeypatch):
        cell = h3.latlng_to_cell(48.922, 24.711, 10)
        monkeypatch.setattr("hexoverlay.h3.viewport.cell_center", lambda c: (0.5, 0.5))
        unit = ViewportBounds(south=0, west=0, north=1, east=1)

        assert ViewportFilter().filter({cell}, unit) == frozenset([cell])
