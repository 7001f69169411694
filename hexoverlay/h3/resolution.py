"""
Zoom level to H3 resolution selection.

A table is an ordered list of (min_zoom, resolution) steps: the highest step
whose min_zoom is at or below the requested zoom wins. Zoom values that match
no step, or that exceed the table's max_zoom, fall back to the coarsest grid.
"""

from typing import List, Optional, Sequence, Tuple

from ..common import config, get_logger

logger = get_logger("h3.resolution")

MIN_RESOLUTION = 0
MAX_RESOLUTION = 15


class ZoomResolutionTable:
    """Monotonic step table mapping map zoom levels to H3 resolutions."""

    def __init__(
        self,
        name: str,
        steps: Sequence[Tuple[int, int]],
        fallback: int,
        max_zoom: Optional[int] = None,
    ):
        """
        Initialize and validate the table.

        Args:
            name: Table name used in logs
            steps: (min_zoom, resolution) pairs, any order
            fallback: Resolution for zooms outside the table
            max_zoom: Highest zoom covered by the steps (inclusive), None for unbounded

        Raises:
            ValueError: If a resolution is out of range or the table is not monotonic
        """
        self.name = name
        self.steps: List[Tuple[int, int]] = sorted(steps)
        self.fallback = fallback
        self.max_zoom = max_zoom

        if not self.steps:
            raise ValueError(f"Resolution table '{name}' has no steps")

        for _, resolution in self.steps + [(None, fallback)]:
            if not (MIN_RESOLUTION <= resolution <= MAX_RESOLUTION):
                raise ValueError(
                    f"H3 resolution must be between {MIN_RESOLUTION} and "
                    f"{MAX_RESOLUTION}, got {resolution}"
                )

        zooms = [zoom for zoom, _ in self.steps]
        if len(set(zooms)) != len(zooms):
            raise ValueError(f"Resolution table '{name}' repeats a min_zoom")

        resolutions = [resolution for _, resolution in self.steps]
        if any(lower > higher for lower, higher in zip(resolutions, resolutions[1:])):
            raise ValueError(
                f"Resolution table '{name}' is not monotonic: {self.steps}"
            )
        if fallback > resolutions[0]:
            raise ValueError(
                f"Fallback resolution {fallback} is finer than the coarsest step "
                f"of table '{name}'"
            )
        if max_zoom is not None and max_zoom < zooms[-1]:
            raise ValueError(
                f"max_zoom {max_zoom} is below the highest step of table '{name}'"
            )

    def select(self, zoom: int) -> int:
        """
        Select the grid resolution for a zoom level.

        Args:
            zoom: Map zoom level

        Returns:
            H3 resolution, never raises for any integer zoom
        """
        if self.max_zoom is not None and zoom > self.max_zoom:
            return self.fallback

        for min_zoom, resolution in reversed(self.steps):
            if zoom >= min_zoom:
                return resolution

        return self.fallback

    def __call__(self, zoom: int) -> int:
        return self.select(zoom)

    def __repr__(self) -> str:
        return (
            f"ZoomResolutionTable({self.name!r}, steps={len(self.steps)}, "
            f"fallback={self.fallback})"
        )


# Coarse "zoom >= threshold" cascade
CASCADE_TABLE = ZoomResolutionTable(
    "cascade",
    steps=[(5, 4), (7, 5), (10, 8), (12, 9), (14, 10), (16, 11), (18, 12)],
    fallback=3,
)

# Dense per-zoom lookup over the tile layer's zoom range
DENSE_TABLE = ZoomResolutionTable(
    "dense",
    steps=[
        (3, 4), (4, 4), (5, 4), (6, 5), (7, 5), (8, 6), (9, 6),
        (10, 7), (11, 7), (12, 9), (13, 9), (14, 10), (15, 10),
        (16, 11), (17, 11), (18, 12), (19, 13),
    ],
    fallback=4,
    max_zoom=19,
)

RESOLUTION_TABLES = {
    CASCADE_TABLE.name: CASCADE_TABLE,
    DENSE_TABLE.name: DENSE_TABLE,
}


def get_resolution_selector(name: Optional[str] = None) -> ZoomResolutionTable:
    """Get a stock resolution table by name, defaulting to the configured one."""
    table_name = name or config.grid.resolution_table
    try:
        return RESOLUTION_TABLES[table_name]
    except KeyError:
        raise ValueError(
            f"Unknown resolution table '{table_name}', "
            f"expected one of {sorted(RESOLUTION_TABLES)}"
        )


def resolution_for_zoom(zoom: int, table: Optional[str] = None) -> int:
    """Select a resolution using a stock table."""
    return get_resolution_selector(table).select(zoom)
