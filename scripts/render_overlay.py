#!/usr/bin/env python3
"""
Render the hex grid overlay for one map view.

Loads polygons and the color table, runs a redraw cycle against an in-memory
map and writes the resulting layer as a GeoJSON FeatureCollection.

Usage:
    python render_overlay.py --zoom 16 --colors data/colors.json
    python render_overlay.py --zoom 14 --bbox "48.91,24.70,48.93,24.72" --output overlay.geojson
    python render_overlay.py --colors http://localhost:4200/assets/data.json --stats-csv stats.csv
"""

import sys
import argparse
import json
from pathlib import Path
from typing import List

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from hexoverlay.common import config, get_logger, GeometryError
from hexoverlay.h3 import OverlayPolygon, ViewportBounds, get_resolution_selector
from hexoverlay.ingest import ColorTableClient, load_color_table_file
from hexoverlay.overlay import (
    HeadlessMap,
    OverlayOrchestrator,
    SAMPLE_POLYGONS,
    viewport_around,
)

logger = get_logger("render_overlay")


def parse_arguments():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the H3 hex grid overlay for one map view",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--zoom", type=int, default=config.map.initial_zoom, help="Map zoom level"
    )

    parser.add_argument(
        "--bbox",
        type=str,
        help='Viewport as "min_lat,min_lng,max_lat,max_lng" (default: view around map center)',
    )

    parser.add_argument(
        "--polygons",
        type=str,
        help="GeoJSON FeatureCollection of polygons (default: built-in samples)",
    )

    parser.add_argument(
        "--colors",
        type=str,
        default=config.colors.url,
        help="Color table URL or local JSON file",
    )

    parser.add_argument(
        "--table",
        type=str,
        choices=["cascade", "dense"],
        default=config.grid.resolution_table,
        help="Zoom to resolution table",
    )

    parser.add_argument("--output", type=str, help="Output GeoJSON file path")

    parser.add_argument("--stats-csv", type=str, help="Per-polygon statistics CSV path")

    return parser.parse_args()


def parse_bbox(bbox_str: str) -> ViewportBounds:
    """Parse a comma separated bounding box."""
    try:
        bbox = [float(x.strip()) for x in bbox_str.split(",")]
    except ValueError:
        raise ValueError(
            "Bounding box must be comma-separated floats: 'min_lat,min_lng,max_lat,max_lng'"
        )
    return ViewportBounds.from_bbox(bbox)


def load_polygons(path: str) -> List[OverlayPolygon]:
    """
    Load polygons from a GeoJSON FeatureCollection.

    Polygon ids come from the feature id, then properties.id, then position
    (starting at 1). Features that are not Polygons are skipped.
    """
    with open(path) as f:
        data = json.load(f)

    polygons = []
    for index, feature in enumerate(data.get("features", []), start=1):
        properties = feature.get("properties") or {}
        polygon_id = feature.get("id", properties.get("id", index))
        try:
            polygons.append(OverlayPolygon.from_geojson(int(polygon_id), feature))
        except GeometryError as e:
            logger.warning(f"Skipping feature {index}: {e}")

    logger.info(f"Loaded {len(polygons)} polygons from {path}")
    return polygons


class FileColorSource:
    """Color table source backed by a local file."""

    def __init__(self, path: str):
        self.path = path

    def fetch(self):
        return load_color_table_file(self.path)


def main():
    """Main execution function."""
    args = parse_arguments()

    try:
        polygons = load_polygons(args.polygons) if args.polygons else SAMPLE_POLYGONS

        if args.bbox:
            bounds = parse_bbox(args.bbox)
        else:
            bounds = viewport_around(config.map.center_lat, config.map.center_lng, args.zoom)

        map_widget = HeadlessMap(zoom=args.zoom, bounds=bounds)
        orchestrator = OverlayOrchestrator(
            map_widget, polygons, selector=get_resolution_selector(args.table)
        )

        if args.colors.startswith(("http://", "https://")):
            loaded = orchestrator.load_colors(ColorTableClient(url=args.colors))
        else:
            loaded = orchestrator.load_colors(FileColorSource(args.colors))

        if not loaded:
            print(f"\n❌ FAILED: {orchestrator.last_error}")
            sys.exit(1)

        layer = orchestrator.active_layer
        result = orchestrator.last_result

        if args.output:
            with open(args.output, "w") as f:
                json.dump(layer.to_feature_collection(), f, indent=2)
            print(f"\n✅ Wrote {len(layer)} shapes to {args.output}")
        else:
            print(f"\n✅ Rendered {len(layer)} shapes")

        if args.stats_csv:
            result.to_dataframe().to_csv(args.stats_csv, index=False)
            print(f"   Statistics saved to {args.stats_csv}")

        print(f"\n📊 Overlay Statistics:")
        print(f"   Zoom: {layer.zoom}")
        print(f"   Resolution: {layer.resolution}")
        print(
            f"   Viewport: ({bounds.south:.4f}, {bounds.west:.4f}) to ({bounds.north:.4f}, {bounds.east:.4f})"
        )
        for outcome in result.outcomes:
            if outcome.error:
                status = f"error: {outcome.error}"
            elif outcome.rendered:
                status = "rendered"
            else:
                status = "not visible"
            print(
                f"   Polygon {outcome.polygon_id} {outcome.color}: "
                f"{outcome.visible_cells}/{outcome.total_cells} cells visible, {status}"
            )

    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Overlay rendering failed: {e}")
        print(f"\n❌ ERROR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
