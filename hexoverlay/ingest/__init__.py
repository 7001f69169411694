"""
Data ingestion utilities for the hex grid overlay engine.

This package provides the color table client.
"""

from .color_client import (
    ColorTableClient,
    load_color_table_file,
    parse_color_records,
)

__all__ = [
    "ColorTableClient",
    "load_color_table_file",
    "parse_color_records",
]
