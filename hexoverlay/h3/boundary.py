"""
Dissolving H3 cell sets into outline geometry.

Adjacent cells are merged into contiguous outlines with shared edges removed.
The result is one GeoJSON Feature whose MultiPolygon geometry holds one part
per disjoint island of cells.
"""

import h3
from typing import Any, Dict, Iterable

from ..common import get_logger, GeometryError

logger = get_logger("h3.boundary")


class BoundaryAggregator:
    """Aggregates a cell set into a single MultiPolygon Feature."""

    def aggregate(self, cells: Iterable[str]) -> Dict[str, Any]:
        """
        Dissolve cells into a GeoJSON MultiPolygon Feature.

        Args:
            cells: Non-empty collection of H3 cell ids

        Returns:
            GeoJSON Feature with (lng, lat) MultiPolygon coordinates

        Raises:
            ValueError: If cells is empty
            GeometryError: If h3 rejects the cell set
        """
        cells = list(cells)
        if not cells:
            raise ValueError("Cannot aggregate an empty cell set")

        try:
            shape = h3.cells_to_h3shape(cells, tight=False)
            geometry = h3.h3shape_to_geo(shape)
        except (h3.H3BaseException, ValueError) as e:
            raise GeometryError(f"h3 could not outline cells: {e}")

        logger.debug(
            f"Aggregated {len(cells)} cells into "
            f"{len(geometry['coordinates'])} outline parts"
        )

        return {
            "type": "Feature",
            "properties": {},
            "geometry": {
                "type": "MultiPolygon",
                "coordinates": _as_lists(geometry["coordinates"]),
            },
        }


def _as_lists(coordinates):
    """Convert nested coordinate tuples into JSON-friendly lists."""
    if isinstance(coordinates, (list, tuple)) and coordinates and isinstance(
        coordinates[0], (int, float)
    ):
        return [float(value) for value in coordinates]
    return [_as_lists(item) for item in coordinates]


def cells_to_feature(cells: Iterable[str]) -> Dict[str, Any]:
    """Aggregate cells with the default aggregator."""
    return BoundaryAggregator().aggregate(cells)
