"""Synthetic historical price series.

The upstream API only reports the current price plus a handful of
percent-change figures (1h, 24h, 7d, 30d, 60d, 90d). A chartable curve is
synthesized from those figures:

    1. Pick anchors for the window: (offset from now, percent change since then),
       oldest first, always ending at (now, 0%).
    2. Back-solve each anchor's price:  P_anchor = P_now / (1 + change / 100)
    3. Linearly interpolate time and price between consecutive anchors in
       5 equal sub-intervals (6 points per segment, endpoints included).

This is an approximation from a one-step percentage change, not a real
historical reconstruction. Nothing in the output is derived from anything
other than the quote's price and its percent changes.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import numpy as np

from .models import AnchorPoint, Quote, SeriesPoint

logger = logging.getLogger(__name__)

SUPPORTED_WINDOWS: tuple[int, ...] = (1, 7, 30, 90)
DEFAULT_WINDOW = 30
SUB_INTERVALS = 5

_HOUR = timedelta(hours=1)
_DAY = timedelta(days=1)
_NOW = timedelta(0)

# window (days) -> anchors as (offset from now, percent-change key), oldest first.
# A None key is the terminal anchor at 0%.
WINDOW_ANCHORS: dict[int, tuple[tuple[timedelta, str | None], ...]] = {
    1: ((-_DAY, "24h"), (-_HOUR, "1h"), (_NOW, None)),
    7: ((-7 * _DAY, "7d"), (-_DAY, "24h"), (_NOW, None)),
    30: ((-30 * _DAY, "30d"), (-7 * _DAY, "7d"), (-_DAY, "24h"), (_NOW, None)),
    90: (
        (-90 * _DAY, "90d"),
        (-60 * _DAY, "60d"),
        (-30 * _DAY, "30d"),
        (-7 * _DAY, "7d"),
        (_NOW, None),
    ),
}


def parse_window(raw: str | int | None) -> int:
    """Turn a ``days`` query value into a window.

    Missing, unparseable or zero values mean the default 30-day window. Other
    integers are returned as-is: unrecognized windows are not rejected, they
    fall back to the 30-day anchors inside anchors_for_window().
    """
    if raw is None:
        return DEFAULT_WINDOW
    try:
        days = int(str(raw).strip())
    except ValueError:
        return DEFAULT_WINDOW
    return days or DEFAULT_WINDOW


def anchors_for_window(quote: Quote, window: int) -> list[AnchorPoint]:
    """Anchor points for a window, oldest first. Unknown windows use the 30-day set."""
    layout = WINDOW_ANCHORS.get(window)
    if layout is None:
        logger.debug("Window %r not recognized, using %d-day anchors", window, DEFAULT_WINDOW)
        layout = WINDOW_ANCHORS[DEFAULT_WINDOW]
    return [
        AnchorPoint(offset=offset, change=quote.percent_change(key) if key else 0.0)
        for offset, key in layout
    ]


def back_solve(price: float, change: float | None) -> float:
    """Price at an anchor given the percent change from that anchor to now.

    A missing change counts as 0%. A change of -100% or below has no finite
    pre-image, so the current price is used instead.
    """
    if change is None:
        return price
    if change <= -100:
        logger.warning("Cannot back-solve a %.2f%% change, using current price", change)
        return price
    return price / (1 + change / 100)


def generate_series(
    quote: Quote,
    window: int,
    now: datetime,
    *,
    duplicate_boundaries: bool = False,
) -> list[SeriesPoint]:
    """Synthesize a chronological price series covering ``window`` days up to ``now``.

    By default the point shared by two adjacent segments is emitted once, so the
    result has ``5 * (anchors - 1) + 1`` points with strictly increasing
    timestamps. ``duplicate_boundaries=True`` keeps every segment's 6 points,
    repeating each inner boundary.

    The last point is always exactly (now, quote.price).
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    anchors = anchors_for_window(quote, window)
    prices = [back_solve(quote.price, anchor.change) for anchor in anchors]
    prices[-1] = quote.price

    points: list[SeriesPoint] = []
    for i in range(len(anchors) - 1):
        start, end = anchors[i], anchors[i + 1]
        # linspace pins both endpoints exactly, so segment ends never drift
        offsets = np.linspace(start.offset.total_seconds(), end.offset.total_seconds(), SUB_INTERVALS + 1)
        seg_prices = np.linspace(prices[i], prices[i + 1], SUB_INTERVALS + 1)

        first = 1 if (i > 0 and not duplicate_boundaries) else 0
        for offset, price in zip(offsets[first:], seg_prices[first:]):
            points.append(
                SeriesPoint(
                    timestamp=now + timedelta(seconds=float(offset)),
                    price=float(price),
                )
            )

    return points
