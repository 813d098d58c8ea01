"""Fixtures for client-side tests.

FakeRelay stands in for RelayClient: listing and series come from memory,
individual assets can be made to fail, and per-asset gates let a test hold
a historical fetch open to provoke out-of-order resolution.
"""

import asyncio
from datetime import datetime, timezone

import pytest

from coinboard.client.listing_cache import ListingCache
from coinboard.errors import UpstreamUnavailable
from coinboard.market.models import Quote
from coinboard.market.series import generate_series

NOW = datetime(2024, 2, 10, 16, 0, tzinfo=timezone.utc)


def _make_quote(asset_id, name, symbol, price, change_24h=1.0):
    return Quote(
        id=asset_id,
        name=name,
        symbol=symbol,
        price=price,
        volume_24h=price * 1000,
        market_cap=price * 100000,
        logo=f"https://logo/{asset_id}.png",
        percent_change_1h=0.1,
        percent_change_24h=change_24h,
        percent_change_7d=5.0,
        percent_change_30d=-8.0,
        percent_change_60d=12.0,
        percent_change_90d=20.0,
    )


class FakeRelay:
    """In-memory replacement for RelayClient."""

    def __init__(self, quotes, fail_ids=()) -> None:
        self.quotes = list(quotes)
        self.fail_ids = set(fail_ids)
        self.listing_error: Exception | None = None
        self.gates: dict = {}
        self.calls: list[tuple] = []
        self.closed = False

    async def get_listing(self):
        if self.listing_error:
            raise self.listing_error
        return list(self.quotes)

    async def get_historical(self, asset_id, days=30):
        self.calls.append((asset_id, days))
        gate = self.gates.get(asset_id)
        if gate is not None:
            await gate.wait()
        if asset_id in self.fail_ids:
            raise UpstreamUnavailable(f"Relay returned HTTP 500 for {asset_id}", status_code=500)
        quote = next(q for q in self.quotes if q.id == asset_id)
        return generate_series(quote, days, NOW)

    def hold(self, asset_id) -> asyncio.Event:
        """Block fetches for asset_id until the returned event is set."""
        gate = asyncio.Event()
        self.gates[asset_id] = gate
        return gate

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_quote():
    """Factory for quotes with every window populated."""
    return _make_quote


@pytest.fixture
def quotes():
    return [
        _make_quote(1, "Bitcoin", "BTC", 50000.0, change_24h=2.5),
        _make_quote(1027, "Ethereum", "ETH", 3000.0, change_24h=-1.25),
        _make_quote(74, "Dogecoin", "DOGE", 0.15, change_24h=0.0),
    ]


@pytest.fixture
def listing(quotes):
    cache = ListingCache()
    cache.replace(quotes)
    return cache


@pytest.fixture
def relay(quotes):
    return FakeRelay(quotes)


@pytest.fixture
def relay_factory():
    """Build a FakeRelay over arbitrary quotes."""
    return FakeRelay
