"""
Viewport bounds and cell filtering for the hex grid overlay engine.

Cells are kept when their center point lies inside the viewport rectangle,
edges inclusive. A cell whose outline overlaps the viewport but whose center
lies outside it is dropped. Viewports crossing the antimeridian are not
handled: bounds with west > east match no cells.
"""

from typing import Iterable, List, Tuple
from dataclasses import dataclass
from shapely.geometry import Polygon

from ..common import get_logger
from .cells import CellSet, LatLng, cell_center

logger = get_logger("h3.viewport")


@dataclass(frozen=True)
class ViewportBounds:
    """Axis-aligned viewport rectangle in (lat, lng) space."""

    south: float
    west: float
    north: float
    east: float

    def __post_init__(self):
        if self.south > self.north:
            raise ValueError(
                f"Invalid viewport: south {self.south} is above north {self.north}"
            )

    @classmethod
    def from_corners(cls, south_west: LatLng, north_east: LatLng) -> "ViewportBounds":
        """Create bounds from south-west and north-east (lat, lng) corners."""
        return cls(
            south=south_west[0],
            west=south_west[1],
            north=north_east[0],
            east=north_east[1],
        )

    @classmethod
    def from_bbox(cls, bbox: List[float]) -> "ViewportBounds":
        """Create bounds from a [min_lat, min_lng, max_lat, max_lng] list."""
        if len(bbox) != 4:
            raise ValueError(
                "Bounding box must have 4 values: [min_lat, min_lng, max_lat, max_lng]"
            )
        return cls(south=bbox[0], west=bbox[1], north=bbox[2], east=bbox[3])

    @property
    def south_west(self) -> LatLng:
        return self.south, self.west

    @property
    def north_east(self) -> LatLng:
        return self.north, self.east

    def contains(self, lat: float, lng: float) -> bool:
        """Inclusive point containment."""
        return self.south <= lat <= self.north and self.west <= lng <= self.east

    def to_polygon(self) -> Polygon:
        """Convert bounds to Shapely polygon."""
        return Polygon(
            [
                (self.west, self.south),
                (self.east, self.south),
                (self.east, self.north),
                (self.west, self.north),
                (self.west, self.south),
            ]
        )

    def center(self) -> Tuple[float, float]:
        """Get center point of the bounds."""
        return (self.south + self.north) / 2, (self.west + self.east) / 2


class ViewportFilter:
    """Keeps the cells whose center falls inside the viewport."""

    def filter(self, cells: Iterable[str], bounds: ViewportBounds) -> CellSet:
        """
        Filter a cell set to the visible viewport.

        Args:
            cells: H3 cell ids
            bounds: Current viewport bounds

        Returns:
            Subset of cells whose center lies within bounds
        """
        visible = set()
        total = 0
        for cell in cells:
            lat, lng = cell_center(cell)
            if bounds.contains(lat, lng):
                visible.add(cell)
            total += 1

        logger.debug(f"Viewport kept {len(visible)} of {total} cells")
        return frozenset(visible)


def filter_to_viewport(cells: Iterable[str], bounds: ViewportBounds) -> CellSet:
    """Filter cells to a viewport with the default filter."""
    return ViewportFilter().filter(cells, bounds)
