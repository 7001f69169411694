"""
Polygon to H3 cell set conversion for the hex grid overlay engine.

Provides the polygon model used throughout the overlay and the builder that
rasterizes a polygon into H3 cells at a given resolution.
"""

import h3
from typing import Any, Dict, FrozenSet, Optional, Sequence, Tuple
from dataclasses import dataclass
from shapely.geometry import Polygon
from shapely.validation import explain_validity

from ..common import config, get_logger, log_polygon_outcome, GeometryError
from .resolution import MIN_RESOLUTION, MAX_RESOLUTION

logger = get_logger("h3.cells")

LatLng = Tuple[float, float]
CellSet = FrozenSet[str]


@dataclass(frozen=True)
class OverlayPolygon:
    """Polygon to overlay; (lat, lng) rings, the first one is the shell."""

    polygon_id: int
    rings: Tuple[Tuple[LatLng, ...], ...]

    @classmethod
    def from_rings(
        cls, polygon_id: int, rings: Sequence[Sequence[LatLng]]
    ) -> "OverlayPolygon":
        """Create an OverlayPolygon from nested (lat, lng) sequences."""
        return cls(
            polygon_id=polygon_id,
            rings=tuple(
                tuple((float(lat), float(lng)) for lat, lng in ring) for ring in rings
            ),
        )

    @classmethod
    def from_geojson(cls, polygon_id: int, data: Dict[str, Any]) -> "OverlayPolygon":
        """
        Create an OverlayPolygon from a GeoJSON Polygon Feature or geometry.

        Args:
            polygon_id: Stable id used for the color lookup
            data: GeoJSON Feature or Polygon geometry, coordinates in (lng, lat) order

        Returns:
            OverlayPolygon with rings converted to (lat, lng)

        Raises:
            GeometryError: If the geometry is not a Polygon
        """
        geometry = data.get("geometry") if data.get("type") == "Feature" else data
        geometry_type = geometry.get("type") if geometry else None
        if geometry_type != "Polygon":
            raise GeometryError(
                f"Expected a GeoJSON Polygon, got {geometry_type}",
                polygon_id=polygon_id,
            )
        try:
            rings = [
                [(point[1], point[0]) for point in ring]
                for ring in geometry["coordinates"]
            ]
        except (KeyError, IndexError, TypeError) as e:
            raise GeometryError(
                f"Malformed GeoJSON coordinates: {e}", polygon_id=polygon_id
            )
        return cls.from_rings(polygon_id, rings)

    def to_shapely(self) -> Polygon:
        """Convert to a Shapely polygon in (lng, lat) order."""
        shell, *holes = [[(lng, lat) for lat, lng in ring] for ring in self.rings]
        return Polygon(shell, holes)


class CellSetBuilder:
    """Builds the set of H3 cells covering a polygon."""

    def __init__(self, ensure_output: Optional[bool] = None):
        """
        Initialize cell set builder.

        Args:
            ensure_output: Return a cell even for polygons smaller than one cell
        """
        self.ensure_output = (
            config.grid.ensure_output if ensure_output is None else ensure_output
        )
        self.logger = logger

    def build(self, polygon: OverlayPolygon, resolution: int) -> CellSet:
        """
        Build the H3 cell set covering a polygon.

        Args:
            polygon: Polygon to rasterize
            resolution: H3 resolution level

        Returns:
            Frozen set of H3 cell ids at the requested resolution

        Raises:
            ValueError: If resolution is out of range
            GeometryError: If the polygon is malformed or rejected by h3
        """
        if not (MIN_RESOLUTION <= resolution <= MAX_RESOLUTION):
            raise ValueError(
                f"H3 resolution must be between {MIN_RESOLUTION} and "
                f"{MAX_RESOLUTION}, got {resolution}"
            )

        shapely_polygon = self.validate(polygon)

        outer, *holes = [list(ring[:-1]) for ring in polygon.rings]
        try:
            h3_polygon = h3.LatLngPoly(outer, *holes)
            cells = frozenset(h3.h3shape_to_cells(h3_polygon, resolution))
        except (h3.H3BaseException, ValueError) as e:
            raise GeometryError(
                f"h3 rejected polygon: {e}", polygon_id=polygon.polygon_id
            )

        if not cells and self.ensure_output:
            # Polygon is smaller than one cell, use the cell under its centroid
            centroid = shapely_polygon.centroid
            cells = frozenset([h3.latlng_to_cell(centroid.y, centroid.x, resolution)])
            self.logger.debug(
                f"Polygon {polygon.polygon_id} is smaller than one cell, using centroid",
                extra=log_polygon_outcome(
                    polygon.polygon_id, resolution=resolution, total_cells=1
                ),
            )

        return cells

    def validate(self, polygon: OverlayPolygon) -> Polygon:
        """
        Check ring structure and geometric validity.

        Returns:
            Shapely polygon of the input

        Raises:
            GeometryError: If any ring is too short, unclosed, or the polygon is invalid
        """
        if not polygon.rings:
            raise GeometryError("Polygon has no rings", polygon_id=polygon.polygon_id)

        for index, ring in enumerate(polygon.rings):
            if len(ring) < 4:
                raise GeometryError(
                    f"Ring {index} has {len(ring)} points, at least 4 are required",
                    polygon_id=polygon.polygon_id,
                )
            if ring[0] != ring[-1]:
                raise GeometryError(
                    f"Ring {index} is not closed", polygon_id=polygon.polygon_id
                )

        shape = polygon.to_shapely()
        if not shape.is_valid:
            raise GeometryError(
                f"Invalid polygon: {explain_validity(shape)}",
                polygon_id=polygon.polygon_id,
            )
        return shape


def build_cell_set(
    polygon: OverlayPolygon, resolution: int, ensure_output: bool = True
) -> CellSet:
    """Build the cell set for a polygon with a one-off builder."""
    return CellSetBuilder(ensure_output=ensure_output).build(polygon, resolution)


def cell_center(cell: str) -> LatLng:
    """Get the (lat, lng) center of an H3 cell."""
    return h3.cell_to_latlng(cell)
