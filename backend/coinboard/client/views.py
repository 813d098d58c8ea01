"""Presentation layer: plain view models built from client state.

Nothing here fetches or mutates state. A renderer (web page, terminal,
notebook) subscribes to ClientSession and draws these objects.
"""

from __future__ import annotations

from collections.abc import Container, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime

from ..market.models import Quote, SeriesPoint
from .comparison import EMPTY, LOADING, NO_DATA, ComparisonState

PALETTE: tuple[str, ...] = ("#8bb9ff", "#ff9f7f", "#7fff8e", "#ff7fb6", "#7fddff")
UP_COLOR = "#4caf50"
DOWN_COLOR = "#ff4444"
FILL_ALPHA = "33"

EMPTY_SELECTION_MESSAGE = "Select assets to compare their prices"
LOADING_MESSAGE = "Loading historical data..."
NO_DATA_MESSAGE = "Could not fetch historical data. Please try again later."
CHART_ERROR_MESSAGE = "Error loading the chart. Please try again."


@dataclass(frozen=True, slots=True)
class ListItem:
    asset_id: int | str
    name: str
    symbol: str
    logo: str
    price_text: str
    change_text: str
    change_color: str
    selected: bool


@dataclass(frozen=True, slots=True)
class DetailView:
    asset_id: int | str
    name: str
    symbol: str
    logo: str
    price_text: str
    change_text: str
    change_color: str
    volume_text: str
    market_cap_text: str


@dataclass(frozen=True, slots=True)
class Dataset:
    label: str
    data: tuple[float, ...]
    border_color: str
    background_color: str


@dataclass(frozen=True, slots=True)
class ChartView:
    """Line chart data, or a message to show instead of a chart."""

    labels: tuple[str, ...] = ()
    datasets: tuple[Dataset, ...] = ()
    message: str | None = None

    @property
    def has_chart(self) -> bool:
        return self.message is None and bool(self.datasets)


def format_usd(value: float | None, decimals: int = 2) -> str:
    """Dollar amount with es-ES separators, e.g. $12.345,60 or $1234,56.

    es-ES only groups thousands from five integer digits up.
    """
    if value is None:
        return "n/a"
    if abs(round(value, decimals)) < 10000:
        return "$" + f"{value:.{decimals}f}".replace(".", ",")
    text = f"{value:,.{decimals}f}"
    return "$" + text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_change(change: float | None) -> str:
    if change is None:
        return "n/a"
    return f"{'+' if change >= 0 else ''}{change:.2f}%"


def change_color(change: float | None) -> str:
    return UP_COLOR if (change or 0) >= 0 else DOWN_COLOR


def format_label(ts: datetime, window: int) -> str:
    # Intraday windows need the hour, longer ones only the date
    if window <= 1:
        return ts.strftime("%d/%m %H:%M")
    return ts.strftime("%d/%m/%Y")


def build_list(quotes: Iterable[Quote], selected: Container) -> list[ListItem]:
    return [
        ListItem(
            asset_id=quote.id,
            name=quote.name,
            symbol=quote.symbol,
            logo=quote.logo,
            price_text=format_usd(quote.price),
            change_text=format_change(quote.percent_change_24h),
            change_color=change_color(quote.percent_change_24h),
            selected=quote.id in selected,
        )
        for quote in quotes
    ]


def build_detail(quote: Quote) -> DetailView:
    return DetailView(
        asset_id=quote.id,
        name=quote.name,
        symbol=quote.symbol,
        logo=quote.logo,
        price_text=format_usd(quote.price),
        change_text=format_change(quote.percent_change_24h),
        change_color=change_color(quote.percent_change_24h),
        volume_text=format_usd(quote.volume_24h, decimals=0),
        market_cap_text=format_usd(quote.market_cap, decimals=0),
    )


def _dataset(label: str, prices: Sequence[float], index: int) -> Dataset:
    color = PALETTE[index % len(PALETTE)]
    return Dataset(label=label, data=tuple(prices), border_color=color, background_color=color + FILL_ALPHA)


def build_series_chart(name: str, points: Sequence[SeriesPoint], window: int) -> ChartView:
    """Single-asset chart for the detail panel."""
    return ChartView(
        labels=tuple(format_label(point.timestamp, window) for point in points),
        datasets=(_dataset(name, [point.price for point in points], 0),),
    )


def build_comparison_chart(state: ComparisonState) -> ChartView:
    if state.status == EMPTY:
        return ChartView(message=EMPTY_SELECTION_MESSAGE)
    if state.status == LOADING:
        return ChartView(message=LOADING_MESSAGE)
    if state.status == NO_DATA:
        return ChartView(message=NO_DATA_MESSAGE)
    return ChartView(
        labels=tuple(format_label(ts, state.window) for ts in state.label_timestamps),
        datasets=tuple(_dataset(series.name, series.prices, i) for i, series in enumerate(state.series)),
    )
