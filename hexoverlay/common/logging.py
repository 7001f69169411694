"""
Logging for the hex grid overlay engine.

All module loggers are children of the ``hexoverlay`` logger, which owns the
only handler. Records are JSON by default so redraw cycles, per-polygon
outcomes and color table requests can be filtered by field.
"""

import logging
import sys
import time
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from .config import config

PACKAGE_LOGGER = "hexoverlay"
SERVICE_NAME = "hex-overlay"


class OverlayJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter stamping service, environment and level on each record."""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["level"] = record.levelname
        log_record["service"] = SERVICE_NAME
        log_record["environment"] = config.environment


def configure_logging(
    level: Optional[str] = None, structured: Optional[bool] = None
) -> logging.Logger:
    """
    Attach a single stdout handler to the package logger.

    Args:
        level: Level name, defaults to LOG_LEVEL
        structured: JSON output, defaults to ENABLE_STRUCTURED_LOGGING

    Returns:
        The ``hexoverlay`` logger
    """
    level_name = (level or config.logging.level).upper()
    if structured is None:
        structured = config.logging.enable_structured_logging

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level_name)
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    if structured:
        handler.setFormatter(
            OverlayJsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
    else:
        handler.setFormatter(logging.Formatter(config.logging.format_str))
    package_logger.addHandler(handler)

    # Records stop at the package logger
    package_logger.propagate = False
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Logger for an overlay component, e.g. ``get_logger("h3.cells")``."""
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")


def log_color_request(
    url: str,
    status_code: Optional[int] = None,
    duration_ms: Optional[float] = None,
    **context,
) -> Dict[str, Any]:
    """Extra payload for a color table request."""
    entry = {"event": "color_table_request", "url": url}
    if status_code is not None:
        entry["status_code"] = status_code
    if duration_ms is not None:
        entry["duration_ms"] = round(duration_ms, 2)
    entry.update(context)
    return entry


def log_polygon_outcome(
    polygon_id: int,
    resolution: Optional[int] = None,
    total_cells: Optional[int] = None,
    visible_cells: Optional[int] = None,
    error: Optional[BaseException] = None,
    **context,
) -> Dict[str, Any]:
    """
    Extra payload describing what happened to one polygon.

    Only the fields that are known at the logging site are included.
    """
    entry: Dict[str, Any] = {"event": "polygon_outcome", "polygon_id": polygon_id}
    if resolution is not None:
        entry["resolution"] = resolution
    if total_cells is not None:
        entry["total_cells"] = total_cells
    if visible_cells is not None:
        entry["visible_cells"] = visible_cells
    if error is not None:
        entry["error_type"] = type(error).__name__
        entry["error_message"] = str(error)
    entry.update(context)
    return entry


def log_redraw_summary(
    trigger: str,
    zoom: int,
    resolution: int,
    polygons: int,
    rendered: int,
    failed: int,
) -> Dict[str, Any]:
    """Extra payload summarizing one pass over all polygons."""
    return {
        "event": "redraw_summary",
        "trigger": trigger,
        "zoom": zoom,
        "resolution": resolution,
        "polygons": polygons,
        "rendered": rendered,
        "failed": failed,
        "hidden": polygons - rendered - failed,
    }


class TimedStage:
    """Times a block and logs completion or failure with its duration."""

    def __init__(self, logger: logging.Logger, stage: str, **context):
        self.logger = logger
        self.stage = stage
        self.context = context
        self.duration_ms: Optional[float] = None
        self._start = 0.0

    def __enter__(self):
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration_ms = (time.perf_counter() - self._start) * 1000
        extra = {
            "event": "stage",
            "stage": self.stage,
            "duration_ms": round(self.duration_ms, 2),
            "success": exc_type is None,
            **self.context,
        }
        if exc_type is None:
            self.logger.info(f"{self.stage} finished", extra=extra)
        else:
            extra["error_type"] = exc_type.__name__
            self.logger.error(f"{self.stage} failed: {exc_val}", extra=extra)


logger = configure_logging()
