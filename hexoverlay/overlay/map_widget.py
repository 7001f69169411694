"""
Map widget collaborator for the hex grid overlay engine.

The orchestrator only needs the current zoom and bounds plus a way to add and
remove layers. HeadlessMap provides that in memory for scripts and tests.
"""

import math
from typing import Callable, List, Optional, Protocol

from ..common import config, get_logger
from ..h3 import ViewportBounds
from .layer import OverlayLayer

logger = get_logger("overlay.map_widget")

TILE_SIZE_PX = 256


class MapWidget(Protocol):
    """Slippy map as seen by the overlay orchestrator."""

    def current_zoom(self) -> int:
        ...

    def current_bounds(self) -> ViewportBounds:
        ...

    def add_layer(self, layer: OverlayLayer) -> None:
        ...

    def remove_layer(self, layer: OverlayLayer) -> None:
        ...


def viewport_around(
    center_lat: float,
    center_lng: float,
    zoom: int,
    width_px: int = 1024,
    height_px: int = 768,
) -> ViewportBounds:
    """
    Approximate the viewport of a web mercator map of the given pixel size.

    Args:
        center_lat: Center latitude
        center_lng: Center longitude
        zoom: Zoom level
        width_px: Viewport width in pixels
        height_px: Viewport height in pixels

    Returns:
        ViewportBounds clamped to valid latitudes
    """
    degrees_per_px = 360.0 / (TILE_SIZE_PX * 2**zoom)
    half_width = width_px / 2 * degrees_per_px
    half_height = height_px / 2 * degrees_per_px * math.cos(math.radians(center_lat))

    return ViewportBounds(
        south=max(-90.0, center_lat - half_height),
        west=center_lng - half_width,
        north=min(90.0, center_lat + half_height),
        east=center_lng + half_width,
    )


class HeadlessMap:
    """In-memory map widget with zoom-end notifications.

    Zoom levels are clamped to [0, max_zoom] like a tile layer's zoom range.
    """

    def __init__(
        self,
        zoom: Optional[int] = None,
        bounds: Optional[ViewportBounds] = None,
        max_zoom: Optional[int] = None,
    ):
        self.max_zoom = config.map.max_zoom if max_zoom is None else max_zoom
        self.zoom = self._clamp_zoom(
            config.map.initial_zoom if zoom is None else zoom
        )
        self.bounds = bounds or viewport_around(
            config.map.center_lat, config.map.center_lng, self.zoom
        )
        self.layers: List[OverlayLayer] = []
        self._zoom_end_listeners: List[Callable[[], None]] = []

    def _clamp_zoom(self, zoom: int) -> int:
        clamped = min(max(zoom, 0), self.max_zoom)
        if clamped != zoom:
            logger.debug(f"Zoom {zoom} clamped to {clamped}")
        return clamped

    def current_zoom(self) -> int:
        return self.zoom

    def current_bounds(self) -> ViewportBounds:
        return self.bounds

    def add_layer(self, layer: OverlayLayer) -> None:
        if any(existing is layer for existing in self.layers):
            raise ValueError("Layer is already on the map")
        self.layers.append(layer)

    def remove_layer(self, layer: OverlayLayer) -> None:
        self.layers = [existing for existing in self.layers if existing is not layer]

    def on_zoom_end(self, callback: Callable[[], None]) -> None:
        """Register a zoom-end listener."""
        self._zoom_end_listeners.append(callback)

    def set_view(self, zoom: int, bounds: Optional[ViewportBounds] = None) -> None:
        """
        Change zoom (and optionally bounds), then notify zoom-end listeners.

        Without explicit bounds the viewport is recentered on the current one.
        """
        zoom = self._clamp_zoom(zoom)
        if bounds is None:
            center_lat, center_lng = self.bounds.center()
            bounds = viewport_around(center_lat, center_lng, zoom)
        self.zoom = zoom
        self.bounds = bounds
        logger.debug(f"Map view changed to zoom {zoom}")
        for callback in list(self._zoom_end_listeners):
            callback()
