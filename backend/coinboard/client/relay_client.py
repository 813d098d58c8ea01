"""HTTP client for the coinboard relay service."""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from urllib.parse import urljoin

import requests

from ..errors import InvalidResponseShape, UpstreamUnavailable
from ..market.models import Quote, SeriesPoint
from ..market.series import DEFAULT_WINDOW

logger = logging.getLogger(__name__)


class RelayClient:
    """Fetch the listing and synthetic series from the relay.

    Calls are blocking ``requests`` calls pushed to a worker thread, so each
    one is an await point for the session. Errors carry the relay's own
    message (``details`` first, then ``error``) when it sent one.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url if base_url.endswith("/") else base_url + "/"
        self._timeout = timeout
        self._session = session or requests.Session()

    async def get_listing(self) -> list[Quote]:
        payload = await asyncio.to_thread(self._get, "listing")
        if not isinstance(payload, list):
            raise InvalidResponseShape("Invalid listing response: expected an array")

        quotes: list[Quote] = []
        for item in payload:
            try:
                quotes.append(Quote.from_listing_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed listing item: %s", e)
        return quotes

    async def get_historical(self, asset_id: int | str, days: int = DEFAULT_WINDOW) -> list[SeriesPoint]:
        logger.debug("Requesting historical data for %s, %d days", asset_id, days)
        payload = await asyncio.to_thread(self._get, f"historical/{asset_id}", {"days": days})
        if not isinstance(payload, list):
            raise InvalidResponseShape("Invalid historical response: expected an array")
        if not payload:
            raise InvalidResponseShape(f"No historical data available for {asset_id}")

        try:
            points = [SeriesPoint.from_dict(item) for item in payload]
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidResponseShape(f"Malformed historical point for {asset_id}: {e}") from e
        logger.debug("Received %d historical points for %s", len(points), asset_id)
        return points

    def close(self) -> None:
        self._session.close()

    # --- Internal ---

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Synchronous GET against the relay. Runs in a thread."""
        url = urljoin(self._base_url, path)
        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
        except requests.RequestException as e:
            raise UpstreamUnavailable(f"Relay request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not response.ok:
            body = payload if isinstance(payload, dict) else {}
            message = body.get("details") or body.get("error") or f"Relay returned HTTP {response.status_code}"
            raise UpstreamUnavailable(message, status_code=response.status_code)
        if payload is None:
            raise InvalidResponseShape(f"Relay returned a non-JSON body for {path}")
        return payload
