"""
H3 hexagonal grid utilities for the hex grid overlay engine.

This package provides resolution selection, polygon to cell conversion,
viewport filtering, and boundary aggregation.
"""

from .resolution import (
    ZoomResolutionTable,
    CASCADE_TABLE,
    DENSE_TABLE,
    MIN_RESOLUTION,
    MAX_RESOLUTION,
    get_resolution_selector,
    resolution_for_zoom,
)
from .cells import (
    OverlayPolygon,
    CellSetBuilder,
    CellSet,
    build_cell_set,
    cell_center,
)
from .viewport import ViewportBounds, ViewportFilter, filter_to_viewport
from .boundary import BoundaryAggregator, cells_to_feature

__all__ = [
    "ZoomResolutionTable",
    "CASCADE_TABLE",
    "DENSE_TABLE",
    "MIN_RESOLUTION",
    "MAX_RESOLUTION",
    "get_resolution_selector",
    "resolution_for_zoom",
    "OverlayPolygon",
    "CellSetBuilder",
    "CellSet",
    "build_cell_set",
    "cell_center",
    "ViewportBounds",
    "ViewportFilter",
    "filter_to_viewport",
    "BoundaryAggregator",
    "cells_to_feature",
]
