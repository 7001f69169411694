"""
Demo polygons near Ivano-Frankivsk, drawn with ids 1-3.
"""

from ..h3 import OverlayPolygon

SAMPLE_POLYGONS = [
    OverlayPolygon.from_rings(
        1,
        [[
            (48.9220, 24.7100),
            (48.9225, 24.7105),
            (48.9230, 24.7110),
            (48.9225, 24.7115),
            (48.9220, 24.7110),
            (48.9220, 24.7100),
        ]],
    ),
    OverlayPolygon.from_rings(
        2,
        [[
            (48.9210, 24.7090),
            (48.9215, 24.7095),
            (48.9220, 24.7100),
            (48.9215, 24.7105),
            (48.9210, 24.7100),
            (48.9210, 24.7090),
        ]],
    ),
    OverlayPolygon.from_rings(
        3,
        [[
            (48.9240, 24.7120),
            (48.9245, 24.7125),
            (48.9250, 24.7130),
            (48.9255, 24.7120),
            (48.9250, 24.7125),
            (48.9240, 24.7120),
        ]],
    ),
]
