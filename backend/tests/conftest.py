"""Pytest configuration and fixtures."""

from datetime import datetime, timezone

import pytest

from coinboard.market.models import Quote


@pytest.fixture
def event_loop_policy():
    """Use the default event loop policy for all async tests."""
    import asyncio

    return asyncio.DefaultEventLoopPolicy()


@pytest.fixture
def now():
    """A fixed 'now' so series timestamps are predictable."""
    return datetime(2024, 2, 10, 16, 0, tzinfo=timezone.utc)


@pytest.fixture
def btc_quote():
    """A quote with every percent-change window populated."""
    return Quote(
        id=1,
        name="Bitcoin",
        symbol="BTC",
        price=50000.0,
        volume_24h=30_000_000_000.0,
        market_cap=980_000_000_000.0,
        logo="https://example.test/1.png",
        percent_change_1h=0.5,
        percent_change_24h=2.0,
        percent_change_7d=-4.0,
        percent_change_30d=10.0,
        percent_change_60d=25.0,
        percent_change_90d=-20.0,
    )
