"""
Overlay layer and redraw result types.

Layers are created fresh on every redraw and replaced as a whole, never
mutated in place.
"""

import pandas as pd
from typing import Any, Dict, List, Optional, Tuple
from dataclasses import dataclass, field, asdict
from enum import Enum
from shapely.geometry import shape

from ..common import config
from ..h3 import ViewportBounds


class RedrawTrigger(Enum):
    """Event that started a redraw cycle."""

    INITIAL_LOAD = "initial_load"
    ZOOM_END = "zoom_end"


class OverlayState(Enum):
    """Orchestrator state within one redraw cycle."""

    IDLE = "idle"
    RESOLUTION_SELECTED = "resolution_selected"
    PER_POLYGON_PROCESSING = "per_polygon_processing"
    RENDERED = "rendered"


@dataclass(frozen=True)
class OverlayGeometry:
    """Dissolved cell outline of one polygon paired with its color."""

    polygon_id: int
    feature: Dict[str, Any]
    color: str
    cell_count: int

    @property
    def outline(self):
        """Shapely MultiPolygon of the outline."""
        return shape(self.feature["geometry"])

    def to_feature(self, fill_opacity: Optional[float] = None) -> Dict[str, Any]:
        """GeoJSON Feature carrying renderer style properties."""
        opacity = config.style.fill_opacity if fill_opacity is None else fill_opacity
        return {
            "type": "Feature",
            "properties": {
                "polygon_id": self.polygon_id,
                "cell_count": self.cell_count,
                "color": self.color,
                "fillColor": self.color,
                "fillOpacity": opacity,
            },
            "geometry": self.feature["geometry"],
        }


@dataclass(frozen=True, eq=False)
class OverlayLayer:
    """Everything drawn by one redraw cycle."""

    geometries: Tuple[OverlayGeometry, ...]
    resolution: int
    zoom: int
    trigger: RedrawTrigger
    fill_opacity: float = field(default_factory=lambda: config.style.fill_opacity)

    def __len__(self) -> int:
        return len(self.geometries)

    def to_feature_collection(self) -> Dict[str, Any]:
        """GeoJSON FeatureCollection of the layer."""
        return {
            "type": "FeatureCollection",
            "properties": {
                "resolution": self.resolution,
                "zoom": self.zoom,
                "trigger": self.trigger.value,
            },
            "features": [g.to_feature(self.fill_opacity) for g in self.geometries],
        }


@dataclass
class PolygonOutcome:
    """What happened to one polygon during a redraw."""

    polygon_id: int
    color: str
    total_cells: int = 0
    visible_cells: int = 0
    rendered: bool = False
    error: Optional[str] = None


@dataclass
class RedrawResult:
    """Output of one pass over all polygons."""

    trigger: RedrawTrigger
    zoom: int
    resolution: int
    bounds: ViewportBounds
    geometries: List[OverlayGeometry] = field(default_factory=list)
    outcomes: List[PolygonOutcome] = field(default_factory=list)

    @property
    def pairs(self) -> List[Tuple[Dict[str, Any], str]]:
        """(geometry feature, color) pairs handed to the renderer."""
        return [(g.feature, g.color) for g in self.geometries]

    @property
    def failures(self) -> List[PolygonOutcome]:
        return [o for o in self.outcomes if o.error is not None]

    def to_dataframe(self) -> pd.DataFrame:
        """
        Per-polygon summary.

        Returns:
            DataFrame with columns: polygon_id, color, total_cells, visible_cells,
            rendered, error, zoom, resolution
        """
        df = pd.DataFrame(
            [asdict(o) for o in self.outcomes],
            columns=[
                "polygon_id",
                "color",
                "total_cells",
                "visible_cells",
                "rendered",
                "error",
            ],
        )
        df["zoom"] = self.zoom
        df["resolution"] = self.resolution
        return df
