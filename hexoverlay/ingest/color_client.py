"""
Color table client for the hex grid overlay engine.

Fetches the polygon color table, a JSON array of {id, COLOR_HEX} records,
over HTTP. There is no retry: a failed fetch raises NetworkError and the
overlay is not drawn until the table loads.
"""

import json
import time
import requests
from pathlib import Path
from typing import Optional, Union
from pydantic import ValidationError

from ..common import config, get_logger, log_color_request, NetworkError
from ..overlay.colors import ColorTable

logger = get_logger("ingest.color_client")


class ColorTableClient:
    """Client for the color table endpoint."""

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize color table client.

        Args:
            url: Color table URL
            timeout: Request timeout in seconds
            session: Requests session, created if not given
        """
        self.url = url or config.colors.url
        self.timeout = timeout or config.colors.timeout_seconds
        self.session = session or requests.Session()
        self.logger = logger

        if not self.url.startswith(("http://", "https://")):
            raise ValueError(f"Invalid color table URL: {self.url}")

    def fetch(self) -> ColorTable:
        """
        Fetch and parse the color table.

        Returns:
            ColorTable built from the response body

        Raises:
            NetworkError: On transport failure, error status, or malformed body
        """
        start_time = time.time()

        try:
            response = self.session.get(self.url, timeout=self.timeout)
            duration_ms = (time.time() - start_time) * 1000
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            duration_ms = (time.time() - start_time) * 1000
            response = getattr(e, "response", None)
            self.logger.error(
                f"Color table request failed: {e}",
                extra=log_color_request(
                    self.url,
                    status_code=getattr(response, "status_code", None),
                    duration_ms=duration_ms,
                    error=str(e),
                ),
            )
            raise NetworkError(f"Color table request failed: {e}", url=self.url) from e

        self.logger.debug(
            "Color table request successful",
            extra=log_color_request(
                self.url,
                status_code=response.status_code,
                duration_ms=duration_ms,
            ),
        )

        try:
            records = response.json()
        except ValueError as e:
            self.logger.error(f"Color table body is not JSON: {e}")
            raise NetworkError(
                f"Color table body is not JSON: {e}", url=self.url
            ) from e

        return parse_color_records(records, source=self.url)


def parse_color_records(records, source: str) -> ColorTable:
    """
    Validate a decoded color table body.

    Raises:
        NetworkError: If the body is not a list of valid records
    """
    if not isinstance(records, list):
        logger.error(f"Color table from {source} is not a JSON array")
        raise NetworkError(
            f"Color table must be a JSON array, got {type(records).__name__}",
            url=source,
        )

    try:
        table = ColorTable.from_records(records)
    except (ValidationError, TypeError) as e:
        logger.error(f"Color table from {source} has invalid records: {e}")
        raise NetworkError(f"Invalid color table records: {e}", url=source) from e

    logger.info(
        f"Loaded {len(table)} polygon colors",
        extra={"source": source, "color_count": len(table)},
    )
    return table


def load_color_table_file(path: Union[str, Path]) -> ColorTable:
    """
    Load a color table from a local JSON file.

    Raises:
        NetworkError: If the file cannot be read or parsed
    """
    path = Path(path)
    try:
        with open(path) as f:
            records = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Could not read color table {path}: {e}")
        raise NetworkError(
            f"Could not read color table {path}: {e}", url=str(path)
        ) from e

    return parse_color_records(records, source=str(path))

