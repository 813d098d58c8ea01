"""Factory for creating quote sources."""

from __future__ import annotations

import logging

from ..config import Settings
from .interface import QuoteSource

logger = logging.getLogger(__name__)


def create_quote_source(settings: Settings | None = None) -> QuoteSource:
    """Create the appropriate quote source for the given settings.

    - cmc_api_key set and non-empty -> CoinMarketCapSource (real market data)
    - Otherwise -> SimulatedQuoteSource (GBM simulation)

    Settings default to the environment (CMC_API_KEY and friends).
    """
    settings = settings or Settings.from_env()
    api_key = settings.cmc_api_key.strip()

    if api_key:
        from .coinmarketcap import CoinMarketCapSource

        logger.info("Quote source: CoinMarketCap API (real data)")
        return CoinMarketCapSource(
            api_key=api_key,
            base_url=settings.cmc_base_url,
            timeout=settings.request_timeout,
        )
    else:
        from .simulator import SimulatedQuoteSource

        logger.info("Quote source: GBM Simulator")
        return SimulatedQuoteSource()
