"""
Polygon color assignments for the hex grid overlay engine.

The color table is read-only during a draw cycle. Polygons missing from the
table are drawn with the configured default color.
"""

from typing import Any, Dict, Iterable, List, Optional
from pydantic import BaseModel, Field, validator

from ..common import config, get_logger, log_polygon_outcome, ConfigurationError
from ..common.config import HEX_COLOR_PATTERN

logger = get_logger("overlay.colors")


class ColorEntry(BaseModel):
    """One record of the color table."""

    id: int = Field(..., description="Polygon id")
    color_hex: str = Field(..., alias="COLOR_HEX", description="Display color")

    @validator("color_hex")
    def validate_color_hex(cls, v):
        """Colors are CSS hex strings."""
        if not HEX_COLOR_PATTERN.match(v):
            raise ValueError(f"COLOR_HEX must be a hex color like #ff0000, got {v}")
        return v


class ColorTable:
    """Mapping from polygon id to display color."""

    def __init__(
        self, entries: Iterable[ColorEntry] = (), default_color: Optional[str] = None
    ):
        self.default_color = default_color or config.colors.default_color
        self._colors: Dict[int, str] = {}
        for entry in entries:
            # First entry wins on duplicate ids
            self._colors.setdefault(entry.id, entry.color_hex)

    @classmethod
    def from_records(
        cls, records: List[Dict[str, Any]], default_color: Optional[str] = None
    ) -> "ColorTable":
        """
        Build a table from raw {id, COLOR_HEX} records.

        Raises:
            pydantic.ValidationError: If a record is malformed
        """
        return cls(
            [ColorEntry(**record) for record in records], default_color=default_color
        )

    def lookup(self, polygon_id: int) -> str:
        """
        Strict color lookup.

        Raises:
            ConfigurationError: If the polygon has no assigned color
        """
        try:
            return self._colors[polygon_id]
        except KeyError:
            raise ConfigurationError(polygon_id)

    def color_for(self, polygon_id: int) -> str:
        """Color for a polygon, falling back to the default color."""
        try:
            return self.lookup(polygon_id)
        except ConfigurationError as e:
            logger.debug(
                f"{e}, using default {self.default_color}",
                extra=log_polygon_outcome(polygon_id, default_color=self.default_color),
            )
            return self.default_color

    def __contains__(self, polygon_id: int) -> bool:
        return polygon_id in self._colors

    def __len__(self) -> int:
        return len(self._colors)
