"""Client session: wires the listing cache, selection and charts to the relay."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from ..config import Settings
from ..errors import CoinboardError, NotFound
from ..market.series import DEFAULT_WINDOW
from .comparison import ComparisonChart, ComparisonState
from .listing_cache import ListingCache
from .relay_client import RelayClient
from .selection import SelectionChange, SelectionTag, SelectionTracker
from .views import (
    CHART_ERROR_MESSAGE,
    LOADING_MESSAGE,
    ChartView,
    DetailView,
    ListItem,
    build_comparison_chart,
    build_detail,
    build_list,
    build_series_chart,
)

logger = logging.getLogger(__name__)

# Panel names passed to session listeners
LIST = "list"
SELECTION = "selection"
COMPARISON = "comparison"
DETAIL = "detail"

Listener = Callable[[str], None]


class ClientSession:
    """One user's view of the market.

    State lives in ListingCache, SelectionTracker and ComparisonChart; the
    session turns their changes into view models (``list_items``, ``tags``,
    ``comparison_chart``, ``detail``, ``detail_chart``) and tells listeners
    which panel changed.

    toggle() and set_window() update state and tags synchronously, then
    schedule the comparison recomputation without awaiting it. Both must be
    called from inside the running event loop.

    Lifecycle:
        session = ClientSession(RelayClient("http://localhost:3000/"))
        await session.load()
        session.toggle(1)
        await session.start_price_updates()   # no-op while refresh_interval == 0
        # ... user closes the view ...
        await session.stop()
    """

    def __init__(
        self,
        relay: RelayClient,
        listing: ListingCache | None = None,
        refresh_interval: float = 0.0,
        window: int = DEFAULT_WINDOW,
        owns_relay: bool = False,
    ) -> None:
        self._relay = relay
        self._owns_relay = owns_relay  # close the relay on stop()
        self._listing = listing if listing is not None else ListingCache()
        self._interval = refresh_interval
        self._task: asyncio.Task | None = None
        self._listeners: list[Listener] = []
        self._query = ""
        self._detail_generation = 0  # bumped by every show_detail()

        self.selection = SelectionTracker(self._listing, window=window)
        self.comparison = ComparisonChart(relay, self._listing)

        self.list_items: list[ListItem] = []
        self.list_error: str | None = None
        self.tags: list[SelectionTag] = []
        self.comparison_chart: ChartView = build_comparison_chart(self.comparison.state)
        self.detail: DetailView | None = None
        self.detail_chart: ChartView | None = None

        self.selection.subscribe(self._on_selection_change)
        self.comparison.subscribe(self._on_comparison_state)

    @classmethod
    def from_settings(cls, settings: Settings) -> ClientSession:
        relay = RelayClient(settings.relay_url, timeout=settings.request_timeout)
        return cls(relay, refresh_interval=settings.refresh_interval, owns_relay=True)

    # --- Public API ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    @property
    def listing(self) -> ListingCache:
        return self._listing

    async def load(self) -> None:
        """Initial listing fetch. On failure the list panel shows the error and it is re-raised."""
        try:
            await self._fetch_listing()
        except CoinboardError as e:
            logger.error("Failed to fetch the asset listing: %s", e)
            self.list_error = str(e)
            self._notify(LIST)
            raise

    async def refresh(self) -> None:
        """Re-fetch the listing, keeping the previous one if the fetch fails."""
        try:
            await self._fetch_listing()
        except CoinboardError as e:
            logger.error("Failed to refresh prices: %s", e)

    def search(self, term: str) -> list[ListItem]:
        """Filter the list panel by name or symbol. An empty term shows everything."""
        self._query = term
        self._render_list()
        return self.list_items

    def toggle(self, asset_id: int | str) -> bool:
        return self.selection.toggle(asset_id)

    def set_window(self, days: int) -> None:
        self.selection.set_window(days)

    async def show_detail(self, asset_id: int | str) -> DetailView:
        """Fill the detail panel, then load its single-asset chart at the current window."""
        quote = self._listing.get(asset_id)
        if quote is None:
            raise NotFound(asset_id, f"Asset {asset_id} is not in the current listing")

        self._detail_generation += 1
        generation = self._detail_generation
        window = self.selection.window
        detail = build_detail(quote)
        self.detail = detail
        self.detail_chart = ChartView(message=LOADING_MESSAGE)
        self._notify(DETAIL)

        try:
            points = await self._relay.get_historical(asset_id, window)
            chart = build_series_chart(quote.name, points, window)
        except CoinboardError as e:
            logger.error("Failed to load chart for %s: %s", asset_id, e)
            chart = ChartView(message=CHART_ERROR_MESSAGE)

        # A later show_detail() owns the panel now
        if generation != self._detail_generation:
            logger.debug("Discarding stale detail chart for %s (generation %d)", asset_id, generation)
            return detail
        self.detail_chart = chart
        self._notify(DETAIL)
        return detail

    async def start_price_updates(self) -> None:
        """Start refreshing the listing every ``refresh_interval`` seconds (0 disables it)."""
        if self._interval <= 0:
            logger.info("Periodic price refresh disabled")
            return
        if self._task and not self._task.done():
            return
        self._task = asyncio.create_task(self._refresh_loop(), name="listing-refresh")
        logger.info("Price refresh started: %.1fs interval", self._interval)

    async def stop(self) -> None:
        """Stop the refresh loop and any in-flight chart work. Safe to call multiple times.

        A relay built by from_settings() is closed too; a relay passed in by
        the caller stays open.
        """
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        await self.comparison.close()
        if self._owns_relay:
            self._relay.close()
            logger.debug("Relay client closed")

    # --- Internal ---

    async def _refresh_loop(self) -> None:
        """Refresh on interval. The initial load happened in load()."""
        while True:
            await asyncio.sleep(self._interval)
            await self.refresh()

    async def _fetch_listing(self) -> None:
        quotes = await self._relay.get_listing()
        self._listing.replace(quotes)
        self.list_error = None
        logger.debug("Listing loaded: %d assets (version %d)", len(quotes), self._listing.version)
        # prune() notifies (and reschedules the chart) only when something vanished
        self.selection.prune()
        self.tags = self.selection.render()
        self._render_list()

    def _render_list(self) -> None:
        self.list_items = build_list(self._listing.search(self._query), self.selection)
        self._notify(LIST)

    def _on_selection_change(self, change: SelectionChange) -> None:
        self.tags = self.selection.render()
        self._notify(SELECTION)
        if change.kind == "toggle":
            self._render_list()
        if change.needs_chart:
            self.comparison.schedule(self.selection.members(), change.window)

    def _on_comparison_state(self, state: ComparisonState) -> None:
        self.comparison_chart = build_comparison_chart(state)
        self._notify(COMPARISON)

    def _notify(self, panel: str) -> None:
        for listener in list(self._listeners):
            listener(panel)
