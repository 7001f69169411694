"""Tests for logging helpers."""

import json
import logging
from unittest.mock import Mock

import pytest

from hexoverlay.common import (
    TimedStage,
    config,
    configure_logging,
    get_logger,
    log_color_request,
    log_polygon_outcome,
    log_redraw_summary,
    GeometryError,
)
from hexoverlay.common.logging import OverlayJsonFormatter
from hexoverlay.overlay import OverlayOrchestrator, RedrawTrigger


class TestStructuredLogging:
    def test_formatter_adds_common_fields(self):
        formatter = OverlayJsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        record = logging.LogRecord("hexoverlay.test", logging.INFO, __file__, 1, "hello", None, None)
        record.polygon_id = 7

        output = json.loads(formatter.format(record))

        assert output["service"] == "hex-overlay"
        assert output["environment"] == config.environment
        assert output["level"] == "INFO"
        assert output["message"] == "hello"
        assert output["polygon_id"] == 7

    def test_get_logger_namespaced(self):
        child = get_logger("h3.cells")

        assert child.name == "hexoverlay.h3.cells"
        assert child.handlers == []

    def test_configure_logging_single_handler(self):
        try:
            package_logger = configure_logging(level="debug", structured=False)
            configure_logging(level="debug", structured=False)

            assert package_logger.name == "hexoverlay"
            assert package_logger.level == logging.DEBUG
            assert len(package_logger.handlers) == 1
            assert package_logger.propagate is False
            assert not isinstance(package_logger.handlers[0].formatter, OverlayJsonFormatter)
        finally:
            configure_logging()


class TestLogEntries:
    def test_color_request_entry(self):
        entry = log_color_request("http://x", status_code=200, duration_ms=1.234)

        assert entry == {
            "event": "color_table_request",
            "url": "http://x",
            "status_code": 200,
            "duration_ms": 1.23,
        }

    def test_color_request_failure_context(self):
        entry = log_color_request("http://x", error="refused")

        assert entry == {"event": "color_table_request", "url": "http://x", "error": "refused"}

    def test_polygon_outcome_only_known_fields(self):
        entry = log_polygon_outcome(4, resolution=11, total_cells=20, visible_cells=0)

        assert entry == {
            "event": "polygon_outcome",
            "polygon_id": 4,
            "resolution": 11,
            "total_cells": 20,
            "visible_cells": 0,
        }

    def test_polygon_outcome_with_error(self):
        error = GeometryError("Ring 0 is not closed", polygon_id=3)

        entry = log_polygon_outcome(3, resolution=11, error=error)

        assert entry["error_type"] == "GeometryError"
        assert "not closed" in entry["error_message"]
        assert "total_cells" not in entry

    def test_redraw_summary_counts_hidden(self):
        entry = log_redraw_summary("zoomend", 16, 11, polygons=5, rendered=2, failed=1)

        assert entry["event"] == "redraw_summary"
        assert entry["hidden"] == 2
        assert entry["trigger"] == "zoomend"


class TestTimedStage:
    def test_success(self):
        logger = Mock()

        with TimedStage(logger, "overlay redraw", zoom=12) as stage:
            pass

        logger.info.assert_called_once()
        extra = logger.info.call_args.kwargs["extra"]
        assert extra["success"] is True
        assert extra["stage"] == "overlay redraw"
        assert extra["zoom"] == 12
        assert stage.duration_ms >= 0

    def test_failure(self):
        logger = Mock()

        with pytest.raises(RuntimeError):
            with TimedStage(logger, "overlay redraw"):
                raise RuntimeError("boom")

        extra = logger.error.call_args.kwargs["extra"]
        assert extra["error_type"] == "RuntimeError"
        assert extra["success"] is False
        logger.info.assert_not_called()


class TestOverlayLogRecords:
    def test_skipped_polygon_logs_outcome(
        self, triangle, unclosed_polygon, headless_map, color_table
    ):
        orchestrator = OverlayOrchestrator(
            headless_map, [triangle, unclosed_polygon], color_table
        )
        orchestrator.logger = Mock()

        orchestrator.redraw(RedrawTrigger.INITIAL_LOAD)

        extra = orchestrator.logger.warning.call_args.kwargs["extra"]
        assert extra["event"] == "polygon_outcome"
        assert extra["polygon_id"] == 3
        assert extra["error_type"] == "GeometryError"
        summaries = [
            call.kwargs["extra"]
            for call in orchestrator.logger.info.call_args_list
            if call.kwargs.get("extra", {}).get("event") == "redraw_summary"
        ]
        assert summaries[0]["rendered"] == 1
        assert summaries[0]["failed"] == 1

    def test_failed_redraw_logged(self, triangle, headless_map, color_table):
        orchestrator = OverlayOrchestrator(headless_map, [triangle], color_table)
        orchestrator.logger = Mock()
        headless_map.add_layer = Mock(side_effect=RuntimeError("renderer unavailable"))

        assert orchestrator.redraw(RedrawTrigger.INITIAL_LOAD) is None

        extra = orchestrator.logger.exception.call_args.kwargs["extra"]
        assert extra["event"] == "redraw_failed"
        assert extra["error_type"] == "RuntimeError"
