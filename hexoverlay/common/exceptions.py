"""
Exception hierarchy for the hex grid overlay engine.

Failures are contained at the smallest possible scope: a GeometryError
only drops its own polygon, a NetworkError only stops drawing until the
color table loads, and a ConfigurationError never leaves the color lookup.
"""

from typing import Optional

USER_FACING_ERROR = "Oops! Something went wrong. Please try again later."


class OverlayError(Exception):
    """Base class for expected overlay runtime failures."""


class NetworkError(OverlayError):
    """Color table could not be fetched or parsed."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url
        self.user_message = USER_FACING_ERROR


class GeometryError(OverlayError):
    """Polygon is malformed or the indexing library rejected it."""

    def __init__(self, message: str, polygon_id: Optional[int] = None):
        super().__init__(message)
        self.polygon_id = polygon_id

    def __str__(self) -> str:
        base = super().__str__()
        if self.polygon_id is None:
            return base
        return f"polygon {self.polygon_id}: {base}"


class ConfigurationError(OverlayError):
    """Polygon id has no entry in the color table."""

    def __init__(self, polygon_id: int):
        super().__init__(f"No color assigned to polygon {polygon_id}")
        self.polygon_id = polygon_id
