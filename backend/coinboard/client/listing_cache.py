"""In-memory cache of the last-fetched asset listing."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from threading import Lock

from ..market.models import Quote

DEFAULT_MAX_AGE = 300.0  # seconds


class ListingCache:
    """Thread-safe copy of the last listing returned by the relay, in listing order.

    Writer: ClientSession (initial load and periodic refresh), one at a time.
    Readers: search, the selection tracker, comparison and detail charts.

    The cache is replaced wholesale, never patched. Readers must tolerate it
    being stale between refreshes; ``is_stale()`` reports whether the last
    replace() is older than ``max_age`` seconds (or never happened).
    """

    def __init__(
        self,
        max_age: float = DEFAULT_MAX_AGE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._quotes: list[Quote] = []
        self._by_id: dict[int | str, Quote] = {}
        self._lock = Lock()
        self._version: int = 0  # Monotonically increasing; bumped on every replace
        self._updated_at: float | None = None
        self._max_age = max_age
        self._clock = clock

    def replace(self, quotes: Iterable[Quote]) -> int:
        """Swap in a new listing. Returns the new version."""
        quotes = list(quotes)
        with self._lock:
            self._quotes = quotes
            self._by_id = {quote.id: quote for quote in quotes}
            self._updated_at = self._clock()
            self._version += 1
            return self._version

    def all(self) -> list[Quote]:
        """Snapshot of the listing in listing order. Returns a shallow copy."""
        with self._lock:
            return list(self._quotes)

    def get(self, asset_id: int | str) -> Quote | None:
        """Quote for an id, or None if it is not in the listing."""
        with self._lock:
            return self._by_id.get(asset_id)

    def ids(self) -> list[int | str]:
        with self._lock:
            return [quote.id for quote in self._quotes]

    def search(self, term: str) -> list[Quote]:
        """Case-insensitive substring match on name or symbol. Empty term returns everything."""
        needle = term.strip().lower()
        quotes = self.all()
        if not needle:
            return quotes
        return [q for q in quotes if needle in q.name.lower() or needle in q.symbol.lower()]

    def age(self) -> float | None:
        """Seconds since the last replace(), or None if never loaded."""
        with self._lock:
            if self._updated_at is None:
                return None
            return self._clock() - self._updated_at

    def is_stale(self) -> bool:
        age = self.age()
        return age is None or age > self._max_age

    @property
    def version(self) -> int:
        """Current version counter. Useful for change detection."""
        return self._version

    def __len__(self) -> int:
        with self._lock:
            return len(self._quotes)

    def __contains__(self, asset_id: object) -> bool:
        with self._lock:
            return asset_id in self._by_id
