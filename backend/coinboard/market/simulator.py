"""GBM-based offline quote simulator."""

from __future__ import annotations

import logging
import math

import numpy as np

from ..errors import NotFound
from .interface import QuoteSource
from .models import CHANGE_WINDOWS, Quote
from .seed_quotes import ASSET_SIGMA, DEFAULT_SIGMA, LOGO_URL, SEED_ASSETS, VOLUME_TO_MCAP

logger = logging.getLogger(__name__)


class QuoteSimulator:
    """Geometric Brownian Motion generator for quote snapshots.

    Each percent-change window is drawn as a GBM return over its horizon:

        change_w = (exp(-sigma^2/2 * dt_w + sigma * sqrt(dt_w) * Z) - 1) * 100

    with dt_w the window length as a fraction of a year (crypto trades 24/7).
    Because exp() is positive every change is > -100%, so back-solving a
    historical price from it is always defined.
    """

    HOURS_PER_YEAR = 365 * 24
    WINDOW_HOURS: dict[str, int] = {
        "1h": 1,
        "24h": 24,
        "7d": 7 * 24,
        "30d": 30 * 24,
        "60d": 60 * 24,
        "90d": 90 * 24,
    }
    # Price move applied by each step(), one minute of GBM
    STEP_DT = 1 / (HOURS_PER_YEAR * 60)

    def __init__(self, assets: list[dict] | None = None, seed: int | None = None) -> None:
        self._rng = np.random.default_rng(seed)
        self._assets = [dict(asset) for asset in (assets if assets is not None else SEED_ASSETS)]
        self._quotes: dict[str, Quote] = {}
        self._snapshot()

    # --- Public API ---

    def step(self) -> list[Quote]:
        """Advance prices by one step and draw fresh percent changes."""
        for asset in self._assets:
            sigma = self._sigma(asset)
            z = self._rng.standard_normal()
            asset["price"] *= math.exp(-0.5 * sigma**2 * self.STEP_DT + sigma * math.sqrt(self.STEP_DT) * z)
        self._snapshot()
        return self.quotes()

    def quotes(self) -> list[Quote]:
        """Current snapshot, largest market cap first."""
        return sorted(self._quotes.values(), key=lambda q: q.market_cap or 0.0, reverse=True)

    def get(self, asset_id: int | str) -> Quote | None:
        return self._quotes.get(str(asset_id))

    # --- Internals ---

    def _snapshot(self) -> None:
        quotes: dict[str, Quote] = {}
        for asset in self._assets:
            sigma = self._sigma(asset)
            z = self._rng.standard_normal(len(CHANGE_WINDOWS))
            changes = {}
            for i, window in enumerate(CHANGE_WINDOWS):
                dt = self.WINDOW_HOURS[window] / self.HOURS_PER_YEAR
                log_return = -0.5 * sigma**2 * dt + sigma * math.sqrt(dt) * z[i]
                changes[f"percent_change_{window}"] = round(math.expm1(log_return) * 100, 6)

            price = float(asset["price"])
            market_cap = price * asset["supply"]
            quotes[str(asset["id"])] = Quote(
                id=asset["id"],
                name=asset["name"],
                symbol=asset["symbol"],
                price=price,
                volume_24h=round(market_cap * VOLUME_TO_MCAP, 2),
                market_cap=round(market_cap, 2),
                logo=LOGO_URL.format(id=asset["id"]),
                **changes,
            )
        self._quotes = quotes

    @staticmethod
    def _sigma(asset: dict) -> float:
        return ASSET_SIGMA.get(asset["symbol"], DEFAULT_SIGMA)


class SimulatedQuoteSource(QuoteSource):
    """QuoteSource backed by the GBM simulator, for running without an API key.

    Every listing request advances the simulation one step, so prices move
    between refreshes the way live quotes do. Quote lookups read the
    current snapshot.
    """

    name = "simulator"

    def __init__(self, seed: int | None = None, assets: list[dict] | None = None) -> None:
        self._sim = QuoteSimulator(assets=assets, seed=seed)

    async def list_quotes(self, limit: int) -> list[Quote]:
        return self._sim.step()[:limit]

    async def get_quote(self, asset_id: int | str) -> Quote:
        quote = self._sim.get(asset_id)
        if quote is None:
            raise NotFound(asset_id)
        return quote
