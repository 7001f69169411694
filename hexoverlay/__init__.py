"""
Hex grid overlay engine.

This package keeps an H3 hexagon overlay in sync with a slippy map:
- Common utilities (config, logging, exceptions)
- Zoom to resolution selection, polygon to cell conversion, viewport
  filtering and boundary aggregation on the H3 grid
- Color table ingestion
- Redraw orchestration with atomic layer replacement
"""

# Re-export key components for convenience
from .common import config, logger, get_logger
from .h3 import (
    get_resolution_selector,
    OverlayPolygon,
    CellSetBuilder,
    ViewportBounds,
    ViewportFilter,
    BoundaryAggregator,
)
from .ingest import ColorTableClient, load_color_table_file
from .overlay import (
    ColorTable,
    HeadlessMap,
    OverlayOrchestrator,
    RedrawTrigger,
    draw_overlay,
)

__version__ = "1.0.0"

__all__ = [
    # Configuration and logging
    "config",
    "logger",
    "get_logger",
    # H3 grid
    "get_resolution_selector",
    "OverlayPolygon",
    "CellSetBuilder",
    "ViewportBounds",
    "ViewportFilter",
    "BoundaryAggregator",
    # Ingestion
    "ColorTableClient",
    "load_color_table_file",
    # Orchestration
    "ColorTable",
    "HeadlessMap",
    "OverlayOrchestrator",
    "RedrawTrigger",
    "draw_overlay",
]
