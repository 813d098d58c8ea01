"""Selection of assets for side-by-side comparison."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from ..errors import NotFound
from ..market.series import DEFAULT_WINDOW, SUPPORTED_WINDOWS
from .listing_cache import ListingCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SelectionChange:
    """Notification sent to subscribers after every state transition.

    ``needs_chart`` tells the owner whether the comparison chart has to be
    recomputed (always after a toggle, after a window change only when
    something is selected).
    """

    kind: str  # 'toggle', 'window' or 'prune'
    window: int
    needs_chart: bool
    asset_id: int | str | None = None
    selected: bool | None = None
    removed: tuple = ()


@dataclass(frozen=True, slots=True)
class SelectionTag:
    """A removable tag for one selected asset. Calling on_remove() equals toggle(asset_id)."""

    asset_id: int | str
    name: str
    logo: str
    on_remove: Callable[[], bool] = field(compare=False, repr=False)


Listener = Callable[[SelectionChange], None]


class SelectionTracker:
    """State machine over the set of asset ids chosen for comparison.

    Pure state: it performs no I/O. Subscribers are notified synchronously
    after each transition and decide what to re-render or re-fetch.

    Invariant: every member is present in the listing cache. toggle() refuses
    ids outside the listing and prune() drops members that vanished after a
    refresh.
    """

    def __init__(self, listing: ListingCache, window: int = DEFAULT_WINDOW) -> None:
        self._listing = listing
        self._selected: set[int | str] = set()
        self._window = self._validate_window(window)
        self._listeners: list[Listener] = []

    # --- Public API ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def toggle(self, asset_id: int | str) -> bool:
        """Remove the id if selected, otherwise add it. Returns the new membership."""
        if asset_id in self._selected:
            self._selected.discard(asset_id)
            selected = False
        else:
            if asset_id not in self._listing:
                raise NotFound(asset_id, f"Asset {asset_id} is not in the current listing")
            self._selected.add(asset_id)
            selected = True

        logger.debug("Selection %s %s (%d selected)", "added" if selected else "removed", asset_id, len(self))
        self._notify(
            SelectionChange(
                kind="toggle",
                window=self._window,
                needs_chart=True,
                asset_id=asset_id,
                selected=selected,
            )
        )
        return selected

    def set_window(self, days: int) -> None:
        """Change the shared comparison window (1, 7, 30 or 90 days)."""
        self._window = self._validate_window(days)
        self._notify(SelectionChange(kind="window", window=self._window, needs_chart=bool(self._selected)))

    def prune(self) -> list[int | str]:
        """Drop members no longer present in the listing. Returns the removed ids."""
        removed = [asset_id for asset_id in self._selected if asset_id not in self._listing]
        if not removed:
            return []
        self._selected.difference_update(removed)
        logger.warning("Dropped %d selected asset(s) missing from the new listing: %s", len(removed), removed)
        self._notify(
            SelectionChange(kind="prune", window=self._window, needs_chart=True, removed=tuple(removed))
        )
        return removed

    def members(self) -> list[int | str]:
        """Selected ids in listing order (not insertion order)."""
        return [asset_id for asset_id in self._listing.ids() if asset_id in self._selected]

    def render(self) -> list[SelectionTag]:
        """One removable tag per selected asset, in listing order."""
        tags = []
        for quote in self._listing.all():
            if quote.id in self._selected:
                tags.append(
                    SelectionTag(
                        asset_id=quote.id,
                        name=quote.name,
                        logo=quote.logo,
                        on_remove=lambda asset_id=quote.id: self.toggle(asset_id),
                    )
                )
        return tags

    @property
    def window(self) -> int:
        return self._window

    def __contains__(self, asset_id: object) -> bool:
        return asset_id in self._selected

    def __len__(self) -> int:
        return len(self._selected)

    # --- Internals ---

    def _notify(self, change: SelectionChange) -> None:
        for listener in list(self._listeners):
            listener(change)

    @staticmethod
    def _validate_window(days: int) -> int:
        if days not in SUPPORTED_WINDOWS:
            raise ValueError(f"Unsupported comparison window {days!r}; expected one of {SUPPORTED_WINDOWS}")
        return days
