"""
Configuration management for the hex grid overlay engine.

This module provides centralized configuration loading and validation using Pydantic.
All environment variables are loaded and validated at import time.
"""

import os
import re
from typing import Literal
from pydantic import BaseModel, validator, Field
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

HEX_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


class MapConfig(BaseModel):
    """Slippy map defaults."""

    center_lat: float = Field(default=48.9225, description="Map center latitude")
    center_lng: float = Field(default=24.7110, description="Map center longitude")
    initial_zoom: int = Field(default=12, description="Initial zoom level")
    max_zoom: int = Field(default=19, description="Highest zoom the map can show")

    @validator("initial_zoom", "max_zoom")
    def validate_zoom(cls, v):
        """Zoom levels are non-negative."""
        if v < 0:
            raise ValueError(f"Zoom level must be non-negative, got {v}")
        return v


class GridConfig(BaseModel):
    """H3 grid configuration."""

    resolution_table: Literal["cascade", "dense"] = Field(
        default="cascade", description="Zoom to resolution table"
    )
    ensure_output: bool = Field(
        default=True, description="Always produce at least one cell per polygon"
    )


class ColorSourceConfig(BaseModel):
    """Color table source configuration."""

    url: str = Field(
        default="http://localhost:4200/assets/data.json",
        description="URL of the polygon color table",
    )
    timeout_seconds: int = Field(default=30, description="Request timeout in seconds")
    default_color: str = Field(
        default="#000000", description="Color for polygons missing from the table"
    )

    @validator("default_color")
    def validate_default_color(cls, v):
        """Default color must be a CSS hex color."""
        if not HEX_COLOR_PATTERN.match(v):
            raise ValueError(f"Default color must be a hex color like #000000, got {v}")
        return v


class StyleConfig(BaseModel):
    """Overlay styling passed through to the renderer."""

    fill_opacity: float = Field(default=0.5, description="Fill opacity of hex shapes")

    @validator("fill_opacity")
    def validate_opacity(cls, v):
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"Fill opacity must be between 0 and 1, got {v}")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Logging level")
    format_str: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )
    enable_structured_logging: bool = Field(
        default=True, description="Enable structured JSON logging"
    )


class AppConfig(BaseModel):
    """Main application configuration."""

    map: MapConfig
    grid: GridConfig
    colors: ColorSourceConfig
    style: StyleConfig
    logging: LoggingConfig

    # Environment
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")


def load_config() -> AppConfig:
    """Load and validate configuration from environment variables."""

    config_dict = {
        "map": {
            "center_lat": float(os.getenv("MAP_CENTER_LAT", "48.9225")),
            "center_lng": float(os.getenv("MAP_CENTER_LNG", "24.7110")),
            "initial_zoom": int(os.getenv("MAP_INITIAL_ZOOM", "12")),
            "max_zoom": int(os.getenv("MAP_MAX_ZOOM", "19")),
        },
        "grid": {
            "resolution_table": os.getenv("RESOLUTION_TABLE", "cascade"),
            "ensure_output": os.getenv("ENSURE_OUTPUT", "true").lower() == "true",
        },
        "colors": {
            "url": os.getenv(
                "COLOR_TABLE_URL", "http://localhost:4200/assets/data.json"
            ),
            "timeout_seconds": int(os.getenv("COLOR_TABLE_TIMEOUT_SECONDS", "30")),
            "default_color": os.getenv("DEFAULT_COLOR", "#000000"),
        },
        "style": {
            "fill_opacity": float(os.getenv("FILL_OPACITY", "0.5")),
        },
        "logging": {
            "level": os.getenv("LOG_LEVEL", "INFO"),
            "enable_structured_logging": os.getenv(
                "ENABLE_STRUCTURED_LOGGING", "true"
            ).lower()
            == "true",
        },
        "environment": os.getenv("ENVIRONMENT", "development"),
        "debug": os.getenv("DEBUG", "false").lower() == "true",
    }

    return AppConfig(**config_dict)


# Global configuration instance
config = load_config()
