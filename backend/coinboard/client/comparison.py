"""Comparison-chart recomputation with fan-out fetches and stale-result protection."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime

from ..errors import NotFound, PartialFetchFailure
from ..market.models import SeriesPoint
from ..market.series import DEFAULT_WINDOW
from .listing_cache import ListingCache
from .relay_client import RelayClient

logger = logging.getLogger(__name__)

# ComparisonState.status values
EMPTY = "empty"  # nothing selected
LOADING = "loading"
READY = "ready"
NO_DATA = "no_data"  # every fetch failed


@dataclass(frozen=True, slots=True)
class AssetSeries:
    asset_id: int | str
    name: str
    points: tuple[SeriesPoint, ...]

    @property
    def prices(self) -> list[float]:
        return [point.price for point in self.points]


@dataclass(frozen=True, slots=True)
class ComparisonState:
    """Result of one recomputation, tagged with its generation.

    ``label_timestamps`` come from the first series that resolved; all series
    share the window, so they line up.
    """

    status: str
    generation: int
    window: int
    series: tuple[AssetSeries, ...] = ()
    label_timestamps: tuple[datetime, ...] = ()
    failure: PartialFetchFailure | None = None


Listener = Callable[[ComparisonState], None]


class ComparisonChart:
    """Recomputes the comparison chart for the current selection.

    Each recomputation gets a monotonically increasing generation. Only the
    latest generation's result is applied; anything that resolves later for
    an older generation is discarded. Scheduling a new recomputation also
    cancels the in-flight one.
    """

    def __init__(self, relay: RelayClient, listing: ListingCache) -> None:
        self._relay = relay
        self._listing = listing
        self._generation = 0
        self._state = ComparisonState(status=EMPTY, generation=0, window=DEFAULT_WINDOW)
        self._task: asyncio.Task | None = None
        self._listeners: list[Listener] = []

    # --- Public API ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def schedule(self, members: Sequence[int | str], window: int) -> asyncio.Task:
        """Kick off a recomputation without awaiting it. Must run inside the event loop."""
        if self._task and not self._task.done():
            self._task.cancel()
            logger.debug("Cancelled superseded comparison recomputation")
        self._task = asyncio.create_task(self.recompute(list(members), window), name="comparison-recompute")
        return self._task

    async def recompute(self, members: Sequence[int | str], window: int) -> ComparisonState:
        """Fetch every member's series in parallel and apply the result if still current."""
        self._generation += 1
        generation = self._generation

        if not members:
            return self._apply(ComparisonState(status=EMPTY, generation=generation, window=window))

        self._apply(ComparisonState(status=LOADING, generation=generation, window=window))

        results = await asyncio.gather(
            *(self._fetch(asset_id, window) for asset_id in members),
            return_exceptions=True,
        )

        series: list[AssetSeries] = []
        failed: list[int | str] = []
        for asset_id, result in zip(members, results):
            if isinstance(result, BaseException):
                logger.warning("Historical data for %s unavailable, dropping it from the chart: %s", asset_id, result)
                failed.append(asset_id)
            else:
                series.append(result)

        if generation != self._generation:
            logger.debug("Discarding stale comparison result (generation %d, latest %d)", generation, self._generation)
            return self._state

        if not series:
            return self._apply(
                ComparisonState(
                    status=NO_DATA,
                    generation=generation,
                    window=window,
                    failure=PartialFetchFailure(failed),
                )
            )

        return self._apply(
            ComparisonState(
                status=READY,
                generation=generation,
                window=window,
                series=tuple(series),
                label_timestamps=tuple(point.timestamp for point in series[0].points),
                failure=PartialFetchFailure(failed) if failed else None,
            )
        )

    async def close(self) -> None:
        """Cancel any in-flight recomputation. Safe to call multiple times."""
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None

    @property
    def state(self) -> ComparisonState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    # --- Internal ---

    async def _fetch(self, asset_id: int | str, window: int) -> AssetSeries:
        quote = self._listing.get(asset_id)
        if quote is None:
            raise NotFound(asset_id, f"Asset {asset_id} is not in the current listing")
        points = await self._relay.get_historical(asset_id, window)
        return AssetSeries(asset_id=asset_id, name=quote.name, points=tuple(points))

    def _apply(self, state: ComparisonState) -> ComparisonState:
        self._state = state
        for listener in list(self._listeners):
            listener(state)
        return state
