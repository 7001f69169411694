"""
Common utilities for the hex grid overlay engine.

This package provides shared configuration, logging, and the exception
hierarchy used across all overlay components.
"""

from .config import config, AppConfig, load_config
from .logging import (
    logger,
    get_logger,
    configure_logging,
    TimedStage,
    log_color_request,
    log_polygon_outcome,
    log_redraw_summary,
)
from .exceptions import (
    OverlayError,
    NetworkError,
    GeometryError,
    ConfigurationError,
    USER_FACING_ERROR,
)

__all__ = [
    "config",
    "AppConfig",
    "load_config",
    "logger",
    "get_logger",
    "configure_logging",
    "TimedStage",
    "log_color_request",
    "log_polygon_outcome",
    "log_redraw_summary",
    "OverlayError",
    "NetworkError",
    "GeometryError",
    "ConfigurationError",
    "USER_FACING_ERROR",
]
