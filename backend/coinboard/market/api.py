"""HTTP endpoints of the relay service."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ..errors import CoinboardError
from .interface import QuoteSource
from .series import generate_series, parse_window

logger = logging.getLogger(__name__)

HISTORICAL_ERROR = "Failed to fetch historical data"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def create_relay_router(
    source: QuoteSource,
    listing_limit: int = 100,
    clock: Callable[[], datetime] = _utcnow,
) -> APIRouter:
    """Create the relay router bound to a quote source.

    The source and clock are injected so the router holds no globals and
    tests can pin "now". Every upstream failure becomes a plain HTTP 500
    with a readable message; nothing is retried.
    """
    router = APIRouter(tags=["relay"])

    @router.get("/listing")
    @router.get("/cripto", include_in_schema=False)
    async def listing() -> JSONResponse:
        """Top assets by market cap with current price, changes and logo."""
        try:
            quotes = await source.list_quotes(listing_limit)
        except CoinboardError as e:
            logger.error("Listing request failed: %s", e)
            return JSONResponse(status_code=500, content={"error": str(e)})
        except Exception as e:
            logger.exception("Listing request failed unexpectedly")
            return JSONResponse(status_code=500, content={"error": str(e)})

        return JSONResponse(content=[quote.to_listing_dict() for quote in quotes])

    @router.get("/historical/{asset_id}")
    async def historical(
        asset_id: str,
        days: str | None = None,
        dias: str | None = None,
    ) -> JSONResponse:
        """Synthetic price series for one asset over 1, 7, 30 or 90 days.

        ``dias`` is accepted as a legacy alias of ``days``. Missing or
        unparseable values mean 30 days; other windows use the 30-day anchors.
        """
        window = parse_window(days if days is not None else dias)
        try:
            quote = await source.get_quote(asset_id)
            series = generate_series(quote, window, clock())
        except CoinboardError as e:
            logger.error("Historical request for %s (%d days) failed: %s", asset_id, window, e)
            return JSONResponse(status_code=500, content={"error": HISTORICAL_ERROR, "details": str(e)})
        except Exception as e:
            logger.exception("Historical request for %s failed unexpectedly", asset_id)
            return JSONResponse(status_code=500, content={"error": HISTORICAL_ERROR, "details": str(e)})

        logger.debug("Historical %s: %d points over %d days", asset_id, len(series), window)
        return JSONResponse(content=[point.to_dict() for point in series])

    @router.get("/health")
    async def health() -> dict:
        return {"status": "ok", "source": source.name}

    return router
