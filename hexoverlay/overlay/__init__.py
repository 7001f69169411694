"""
Overlay orchestration for the hex grid overlay engine.

This package ties resolution selection, cell building, viewport filtering and
boundary aggregation into redraw cycles driven by map events.
"""

from .colors import ColorEntry, ColorTable
from .layer import (
    RedrawTrigger,
    OverlayState,
    OverlayGeometry,
    OverlayLayer,
    PolygonOutcome,
    RedrawResult,
)
from .map_widget import MapWidget, HeadlessMap, viewport_around
from .orchestrator import (
    OverlayOrchestrator,
    RedrawRequest,
    create_orchestrator,
    draw_overlay,
)
from .samples import SAMPLE_POLYGONS

__all__ = [
    "ColorEntry",
    "ColorTable",
    "RedrawTrigger",
    "OverlayState",
    "OverlayGeometry",
    "OverlayLayer",
    "PolygonOutcome",
    "RedrawResult",
    "MapWidget",
    "HeadlessMap",
    "viewport_around",
    "OverlayOrchestrator",
    "RedrawRequest",
    "create_orchestrator",
    "draw_overlay",
    "SAMPLE_POLYGONS",
]
