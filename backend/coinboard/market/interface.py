"""Abstract interface for quote sources."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .models import Quote


class QuoteSource(ABC):
    """Contract for upstream market-data providers.

    The relay calls a source on every request; nothing is cached between
    calls. Implementations raise coinboard.errors types:

        UpstreamUnavailable / RateLimited - transport failure or non-2xx
        NotFound                          - asset id absent from the response
        InvalidResponseShape              - payload missing an expected array/object

    Lifecycle:
        source = create_quote_source(settings)
        quotes = await source.list_quotes(100)
        quote = await source.get_quote(1)
        # ... app shutting down ...
        await source.close()
    """

    name: str = "abstract"

    @abstractmethod
    async def list_quotes(self, limit: int) -> list[Quote]:
        """Return the top ``limit`` assets by market cap, logos included.

        Only the listing fields are guaranteed (price, volume, market cap,
        1h and 24h changes); longer windows may be None.
        """

    @abstractmethod
    async def get_quote(self, asset_id: int | str) -> Quote:
        """Return the current quote for one asset with every percent-change window."""

    async def close(self) -> None:
        """Release resources. Safe to call multiple times."""
