"""
Redraw orchestration for the hex grid overlay engine.

One redraw cycle selects a resolution once, then runs build, viewport filter
and boundary aggregation independently per polygon. A polygon that fails is
logged and skipped. The previous layer is swapped for the new one in a single
guarded step after every polygon has been processed.

Redraw cycles never overlap. A request that arrives while a cycle is running
replaces any pending request and runs once the current cycle finishes. A cycle
that fails as a whole, for example because the map rejects the new layer,
keeps the previous layer and sets ``last_error`` instead of raising.
"""

import threading
from typing import List, Optional, Sequence, Tuple
from dataclasses import dataclass

from ..common import (
    config,
    get_logger,
    TimedStage,
    log_polygon_outcome,
    log_redraw_summary,
    GeometryError,
    NetworkError,
    USER_FACING_ERROR,
)
from ..h3 import (
    ZoomResolutionTable,
    CellSetBuilder,
    ViewportFilter,
    ViewportBounds,
    BoundaryAggregator,
    OverlayPolygon,
    get_resolution_selector,
)
from .colors import ColorTable
from .layer import (
    RedrawTrigger,
    OverlayState,
    OverlayGeometry,
    OverlayLayer,
    PolygonOutcome,
    RedrawResult,
)
from .map_widget import MapWidget, HeadlessMap

logger = get_logger("overlay.orchestrator")


@dataclass(frozen=True)
class RedrawRequest:
    """Pending redraw; None zoom or bounds are read from the map when it runs."""

    trigger: RedrawTrigger
    zoom: Optional[int] = None
    bounds: Optional[ViewportBounds] = None


class OverlayOrchestrator:
    """Owns the active overlay layer and keeps it in sync with the map view."""

    def __init__(
        self,
        map_widget: MapWidget,
        polygons: Sequence[OverlayPolygon],
        color_table: Optional[ColorTable] = None,
        selector: Optional[ZoomResolutionTable] = None,
        builder: Optional[CellSetBuilder] = None,
        viewport_filter: Optional[ViewportFilter] = None,
        aggregator: Optional[BoundaryAggregator] = None,
        fill_opacity: Optional[float] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            map_widget: Map supplying zoom/bounds and receiving layers
            polygons: Polygons to overlay
            color_table: Polygon colors, None until the table has loaded
            selector: Zoom to resolution table (configured table by default)
            builder: Polygon to cell set builder
            viewport_filter: Viewport filter
            aggregator: Cell set to outline aggregator
            fill_opacity: Fill opacity override for rendered layers
        """
        self.map_widget = map_widget
        self.polygons = list(polygons)
        self.color_table = color_table
        self.selector = selector or get_resolution_selector()
        self.builder = builder or CellSetBuilder()
        self.viewport_filter = viewport_filter or ViewportFilter()
        self.aggregator = aggregator or BoundaryAggregator()
        self.fill_opacity = (
            config.style.fill_opacity if fill_opacity is None else fill_opacity
        )
        self.logger = logger

        self.last_error: Optional[str] = None
        self._state = OverlayState.IDLE
        self._active_layer: Optional[OverlayLayer] = None
        self._last_result: Optional[RedrawResult] = None

        self._guard = threading.Lock()
        self._layer_lock = threading.Lock()
        self._running = False
        self._pending: Optional[RedrawRequest] = None

    @property
    def state(self) -> OverlayState:
        return self._state

    @property
    def active_layer(self) -> Optional[OverlayLayer]:
        return self._active_layer

    @property
    def last_result(self) -> Optional[RedrawResult]:
        """Result of the most recently rendered cycle."""
        return self._last_result

    def load_colors(self, client) -> bool:
        """
        Fetch the color table and draw the initial overlay.

        Args:
            client: Object with a fetch() method returning a ColorTable

        Returns:
            True if the table loaded and the overlay was drawn or queued
        """
        try:
            color_table = client.fetch()
        except NetworkError as e:
            self.last_error = e.user_message
            self.logger.error(
                f"Color table unavailable, overlay not drawn: {e}",
                extra={"url": e.url},
            )
            return False

        self.on_initial_load(color_table)
        return self.last_error is None

    def on_initial_load(self, color_table: ColorTable) -> Optional[RedrawResult]:
        """Color data arrived; draw for the current view."""
        self.color_table = color_table
        self.last_error = None
        return self.redraw(RedrawTrigger.INITIAL_LOAD)

    def on_zoom_end(self) -> Optional[RedrawResult]:
        """Map finished zooming; redraw once colors are available."""
        if self.color_table is None:
            self.logger.debug("Zoom ended before color table loaded, skipping redraw")
            return None
        return self.redraw(RedrawTrigger.ZOOM_END)

    def redraw(
        self,
        trigger: RedrawTrigger,
        zoom: Optional[int] = None,
        bounds: Optional[ViewportBounds] = None,
    ) -> Optional[RedrawResult]:
        """
        Run a redraw cycle, or queue it behind the one in progress.

        Args:
            trigger: Event that caused the redraw
            zoom: Zoom override, read from the map when None
            bounds: Bounds override, read from the map when None

        Returns:
            Result of the last cycle this call ran, None if the request was
            queued or that cycle failed
        """
        request = RedrawRequest(trigger, zoom, bounds)

        with self._guard:
            if self._running:
                if self._pending is not None:
                    self.logger.debug(
                        f"Replacing pending {self._pending.trigger.value} redraw"
                    )
                self._pending = request
                return None
            self._running = True

        result = None
        try:
            while request is not None:
                try:
                    result = self._run_cycle(request)
                    self.last_error = None
                except Exception as e:
                    result = None
                    self.last_error = USER_FACING_ERROR
                    self.logger.exception(
                        f"Redraw failed, previous overlay kept: {e}",
                        extra={
                            "event": "redraw_failed",
                            "trigger": request.trigger.value,
                            "error_type": type(e).__name__,
                        },
                    )
                with self._guard:
                    request = self._pending
                    self._pending = None
                    if request is None:
                        self._running = False
        except BaseException:
            with self._guard:
                self._running = False
                self._pending = None
            raise

        return result

    def compute(
        self,
        zoom: int,
        bounds: ViewportBounds,
        trigger: RedrawTrigger = RedrawTrigger.ZOOM_END,
    ) -> RedrawResult:
        """
        Compute overlay geometries without touching the map.

        Args:
            zoom: Map zoom level
            bounds: Viewport bounds
            trigger: Trigger recorded on the result

        Returns:
            RedrawResult with one geometry per visible polygon
        """
        resolution = self.selector.select(zoom)
        return self._process_polygons(trigger, zoom, resolution, bounds)

    def _run_cycle(self, request: RedrawRequest) -> RedrawResult:
        zoom = self.map_widget.current_zoom() if request.zoom is None else request.zoom
        bounds = (
            self.map_widget.current_bounds()
            if request.bounds is None
            else request.bounds
        )

        try:
            with TimedStage(
                self.logger,
                "overlay redraw",
                trigger=request.trigger.value,
                zoom=zoom,
            ):
                resolution = self.selector.select(zoom)
                self._state = OverlayState.RESOLUTION_SELECTED

                self._state = OverlayState.PER_POLYGON_PROCESSING
                result = self._process_polygons(
                    request.trigger, zoom, resolution, bounds
                )

                layer = OverlayLayer(
                    geometries=tuple(result.geometries),
                    resolution=resolution,
                    zoom=zoom,
                    trigger=request.trigger,
                    fill_opacity=self.fill_opacity,
                )
                self._replace_layer(layer)
                self._last_result = result
                self._state = OverlayState.RENDERED
        finally:
            self._state = OverlayState.IDLE

        return result

    def _process_polygons(
        self,
        trigger: RedrawTrigger,
        zoom: int,
        resolution: int,
        bounds: ViewportBounds,
    ) -> RedrawResult:
        colors = self.color_table or ColorTable()
        result = RedrawResult(
            trigger=trigger, zoom=zoom, resolution=resolution, bounds=bounds
        )

        for polygon in self.polygons:
            geometry, outcome = self._process_polygon(
                polygon, resolution, bounds, colors
            )
            result.outcomes.append(outcome)
            if geometry is not None:
                result.geometries.append(geometry)

        self.logger.info(
            f"Processed {len(self.polygons)} polygons at resolution {resolution}",
            extra=log_redraw_summary(
                trigger=trigger.value,
                zoom=zoom,
                resolution=resolution,
                polygons=len(self.polygons),
                rendered=len(result.geometries),
                failed=len(result.failures),
            ),
        )
        return result

    def _process_polygon(
        self,
        polygon: OverlayPolygon,
        resolution: int,
        bounds: ViewportBounds,
        colors: ColorTable,
    ) -> Tuple[Optional[OverlayGeometry], PolygonOutcome]:
        color = colors.color_for(polygon.polygon_id)
        outcome = PolygonOutcome(polygon_id=polygon.polygon_id, color=color)

        try:
            cells = self.builder.build(polygon, resolution)
            outcome.total_cells = len(cells)

            visible = self.viewport_filter.filter(cells, bounds)
            outcome.visible_cells = len(visible)
            if not visible:
                return None, outcome

            feature = self.aggregator.aggregate(visible)
        except GeometryError as e:
            if e.polygon_id is None:
                e.polygon_id = polygon.polygon_id
            outcome.error = str(e)
            self.logger.warning(
                f"Skipping polygon: {e}",
                extra=log_polygon_outcome(
                    polygon.polygon_id,
                    resolution=resolution,
                    total_cells=outcome.total_cells,
                    visible_cells=outcome.visible_cells,
                    error=e,
                ),
            )
            return None, outcome

        outcome.rendered = True
        self.logger.debug(
            f"Polygon {polygon.polygon_id} rendered",
            extra=log_polygon_outcome(
                polygon.polygon_id,
                resolution=resolution,
                total_cells=outcome.total_cells,
                visible_cells=outcome.visible_cells,
            ),
        )
        geometry = OverlayGeometry(
            polygon_id=polygon.polygon_id,
            feature=feature,
            color=color,
            cell_count=len(visible),
        )
        return geometry, outcome

    def _replace_layer(self, layer: OverlayLayer) -> None:
        """Swap the active layer; the old one stays if the new one cannot be added."""
        with self._layer_lock:
            old_layer = self._active_layer
            if old_layer is not None:
                self.map_widget.remove_layer(old_layer)
            try:
                self.map_widget.add_layer(layer)
            except Exception:
                if old_layer is not None:
                    self.map_widget.add_layer(old_layer)
                raise
            self._active_layer = layer

        self.logger.debug(
            f"Overlay layer replaced with {len(layer)} shapes",
            extra={"resolution": layer.resolution, "zoom": layer.zoom},
        )


def create_orchestrator(
    map_widget: MapWidget,
    polygons: Sequence[OverlayPolygon],
    color_table: Optional[ColorTable] = None,
    table: Optional[str] = None,
) -> OverlayOrchestrator:
    """Create an orchestrator with a stock resolution table."""
    return OverlayOrchestrator(
        map_widget,
        polygons,
        color_table=color_table,
        selector=get_resolution_selector(table),
    )


def draw_overlay(
    polygons: List[OverlayPolygon],
    color_table: ColorTable,
    zoom: int,
    bounds: ViewportBounds,
    table: Optional[str] = None,
) -> RedrawResult:
    """Compute overlay geometries for a single view without a map."""
    orchestrator = create_orchestrator(
        HeadlessMap(zoom=zoom, bounds=bounds), polygons, color_table, table
    )
    return orchestrator.compute(zoom, bounds, trigger=RedrawTrigger.INITIAL_LOAD)
