"""Tests for the headless map widget."""

import pytest

from hexoverlay.common import config
from hexoverlay.h3 import ViewportBounds
from hexoverlay.overlay import HeadlessMap, viewport_around


class TestViewportAround:
    def test_centered(self):
        bounds = viewport_around(48.9225, 24.7110, 12)
        lat, lng = bounds.center()

        assert lat == pytest.approx(48.9225)
        assert lng == pytest.approx(24.7110)
        assert bounds.contains(48.9225, 24.7110)

    def test_higher_zoom_is_smaller(self):
        wide = viewport_around(48.9225, 24.7110, 12)
        narrow = viewport_around(48.9225, 24.7110, 16)

        assert narrow.east - narrow.west < wide.east - wide.west
        assert narrow.north - narrow.south < wide.north - wide.south

    def test_clamped_near_pole(self):
        bounds = viewport_around(89.99, 0.0, 1)

        assert bounds.north <= 90.0


class TestHeadlessMap:
    def test_add_and_remove(self):
        map_widget = HeadlessMap(zoom=10)
        layer = object()

        map_widget.add_layer(layer)
        assert map_widget.layers == [layer]

        with pytest.raises(ValueError):
            map_widget.add_layer(layer)

        map_widget.remove_layer(layer)
        assert map_widget.layers == []

    def test_set_view_notifies_listeners(self):
        map_widget = HeadlessMap(zoom=10)
        calls = []
        map_widget.on_zoom_end(lambda: calls.append(map_widget.current_zoom()))

        map_widget.set_view(14)

        assert calls == [14]
        assert map_widget.current_bounds().contains(*map_widget.bounds.center())

    def test_set_view_with_bounds(self):
        map_widget = HeadlessMap(zoom=10)
        bounds = ViewportBounds(south=1, west=2, north=3, east=4)

        map_widget.set_view(11, bounds)

        assert map_widget.current_bounds() is bounds

    def test_zoom_clamped_to_max_zoom(self):
        map_widget = HeadlessMap(zoom=25, max_zoom=19)
        calls = []
        map_widget.on_zoom_end(lambda: calls.append(map_widget.current_zoom()))

        assert map_widget.current_zoom() == 19

        map_widget.set_view(22)
        map_widget.set_view(-3)

        assert calls == [19, 0]

    def test_max_zoom_defaults_to_config(self, monkeypatch):
        monkeypatch.setattr(config.map, "max_zoom", 15)

        map_widget = HeadlessMap(zoom=18)

        assert map_widget.max_zoom == 15
        assert map_widget.current_zoom() == 15
