"""CoinMarketCap Pro API client for real market data."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import requests

from ..config import DEFAULT_CMC_BASE_URL
from ..errors import InvalidResponseShape, NotFound, RateLimited, UpstreamUnavailable
from .interface import QuoteSource
from .models import CHANGE_WINDOWS, Quote

logger = logging.getLogger(__name__)

LISTINGS_PATH = "/v1/cryptocurrency/listings/latest"
INFO_PATH = "/v2/cryptocurrency/info"
QUOTES_PATH = "/v1/cryptocurrency/quotes/latest"

# status.error_code values CoinMarketCap uses for plan/minute/daily/monthly quota exhaustion
RATE_LIMIT_CODES = frozenset({1008, 1009, 1010, 1011})


class CoinMarketCapSource(QuoteSource):
    """QuoteSource backed by the CoinMarketCap REST API.

    Listing = listings/latest (top N by market cap) + v2 info for logos.
    Quote   = quotes/latest for a single id, converted to USD.

    ``requests`` is synchronous, so every call runs in a worker thread to
    keep the event loop free. No retries: failures surface to the caller.
    """

    name = "coinmarketcap"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_CMC_BASE_URL,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("CoinMarketCap API key is required")
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/json",
                "X-CMC_PRO_API_KEY": api_key,
            }
        )

    async def list_quotes(self, limit: int) -> list[Quote]:
        payload = await asyncio.to_thread(self._get, LISTINGS_PATH, {"limit": limit})
        entries = payload.get("data")
        if not isinstance(entries, list):
            raise InvalidResponseShape("CoinMarketCap listing response has no 'data' array")

        ids = [entry["id"] for entry in entries if isinstance(entry, dict) and "id" in entry]
        logos = await asyncio.to_thread(self._fetch_logos, ids) if ids else {}

        quotes: list[Quote] = []
        for entry in entries:
            try:
                quotes.append(self._parse_quote(entry, logo=logos.get(str(entry["id"]), "")))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(
                    "Skipping listing entry %s: %s",
                    entry.get("id", "???") if isinstance(entry, dict) else "???",
                    e,
                )
        logger.debug("CoinMarketCap listing: %d/%d entries usable", len(quotes), len(entries))
        return quotes

    async def get_quote(self, asset_id: int | str) -> Quote:
        try:
            payload = await asyncio.to_thread(
                self._get, QUOTES_PATH, {"id": asset_id, "convert": "USD"}
            )
        except RateLimited:
            raise
        except UpstreamUnavailable as e:
            # CMC answers 400 'Invalid value for "id"' for ids it does not know
            if e.status_code == 400:
                raise NotFound(asset_id, str(e)) from e
            raise

        data = payload.get("data")
        if not isinstance(data, dict):
            raise InvalidResponseShape("CoinMarketCap quotes response has no 'data' object")

        entry = data.get(str(asset_id))
        quote = entry.get("quote") if isinstance(entry, dict) else None
        if not isinstance(quote, dict) or not isinstance(quote.get("USD"), dict):
            raise NotFound(asset_id)

        try:
            return self._parse_quote(entry)
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidResponseShape(f"Malformed quote for asset {asset_id}: {e}") from e

    async def close(self) -> None:
        self._session.close()
        logger.info("CoinMarketCap session closed")

    # --- Internal ---

    def _get(self, path: str, params: dict[str, Any]) -> dict:
        """Synchronous GET against the API. Runs in a thread."""
        url = f"{self._base_url}{path}"
        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
        except requests.RequestException as e:
            raise UpstreamUnavailable(f"CoinMarketCap request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        status = payload.get("status") if isinstance(payload, dict) else None
        error_code = status.get("error_code") if isinstance(status, dict) else None
        error_message = status.get("error_message") if isinstance(status, dict) else None

        if response.status_code == 429 or error_code in RATE_LIMIT_CODES:
            raise RateLimited(
                error_message or "CoinMarketCap rate limit exceeded",
                status_code=response.status_code,
            )
        if not response.ok:
            raise UpstreamUnavailable(
                error_message or f"CoinMarketCap returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        if not isinstance(payload, dict):
            raise InvalidResponseShape(f"CoinMarketCap returned a non-object body for {path}")
        return payload

    def _fetch_logos(self, ids: list[int | str]) -> dict[str, str]:
        """Map str(id) -> logo URL using the batch metadata endpoint."""
        payload = self._get(INFO_PATH, {"id": ",".join(str(i) for i in ids)})
        data = payload.get("data")
        if not isinstance(data, dict):
            raise InvalidResponseShape("CoinMarketCap info response has no 'data' object")
        return {
            str(key): info.get("logo") or ""
            for key, info in data.items()
            if isinstance(info, dict)
        }

    @staticmethod
    def _parse_quote(entry: dict, logo: str = "") -> Quote:
        usd = entry["quote"]["USD"]
        changes = {
            f"percent_change_{window}": _optional_float(usd.get(f"percent_change_{window}"))
            for window in CHANGE_WINDOWS
        }
        return Quote(
            id=entry["id"],
            name=entry["name"],
            symbol=entry["symbol"],
            price=float(usd["price"]),
            volume_24h=_optional_float(usd.get("volume_24h")),
            market_cap=_optional_float(usd.get("market_cap")),
            logo=logo,
            **changes,
        )


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    return float(value)
