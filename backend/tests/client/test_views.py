"""Tests for the presentation view models."""

from datetime import datetime, timezone

from coinboard.client.comparison import EMPTY, LOADING, NO_DATA, READY, AssetSeries, ComparisonState
from coinboard.client.views import (
    DOWN_COLOR,
    EMPTY_SELECTION_MESSAGE,
    LOADING_MESSAGE,
    NO_DATA_MESSAGE,
    PALETTE,
    UP_COLOR,
    build_comparison_chart,
    build_detail,
    build_list,
    build_series_chart,
    format_change,
    format_label,
    format_usd,
)
from coinboard.market.models import SeriesPoint

TS = datetime(2024, 2, 10, 16, 30, tzinfo=timezone.utc)


class TestFormatting:
    """Number and label formatting."""

    def test_format_usd_spanish_separators(self):
        assert format_usd(1234567.891) == "$1.234.567,89"
        assert format_usd(0.15) == "$0,15"

    def test_format_usd_groups_from_five_digits(self):
        assert format_usd(1234.56) == "$1234,56"
        assert format_usd(9999.994) == "$9999,99"
        assert format_usd(12345.6) == "$12.345,60"

    def test_format_usd_no_decimals(self):
        assert format_usd(30_000_000_000.4, decimals=0) == "$30.000.000.000"

    def test_format_usd_missing(self):
        assert format_usd(None) == "n/a"

    def test_format_change(self):
        assert format_change(2.5) == "+2.50%"
        assert format_change(0.0) == "+0.00%"
        assert format_change(-1.256) == "-1.26%"
        assert format_change(None) == "n/a"

    def test_format_label_intraday_shows_time(self):
        assert format_label(TS, 1) == "10/02 16:30"

    def test_format_label_multi_day_shows_date(self):
        assert format_label(TS, 30) == "10/02/2024"


class TestListAndDetail:
    """List panel items and the detail panel."""

    def test_build_list_marks_selection(self, quotes):
        items = build_list(quotes, {1027})
        assert [item.selected for item in items] == [False, True, False]

    def test_build_list_colors(self, quotes):
        items = build_list(quotes, set())
        assert items[0].change_color == UP_COLOR
        assert items[1].change_color == DOWN_COLOR
        assert items[2].change_color == UP_COLOR  # 0% counts as up

    def test_build_list_text(self, quotes):
        item = build_list(quotes, set())[0]
        assert item.price_text == "$50.000,00"
        assert item.change_text == "+2.50%"

    def test_build_detail(self, quotes):
        detail = build_detail(quotes[1])
        assert detail.name == "Ethereum"
        assert detail.symbol == "ETH"
        assert detail.price_text == "$3000,00"
        assert detail.change_text == "-1.25%"
        assert detail.change_color == DOWN_COLOR
        assert detail.volume_text == "$3.000.000"
        assert detail.market_cap_text == "$300.000.000"


class TestCharts:
    """Chart view models."""

    def _series(self, asset_id, name, prices):
        points = tuple(SeriesPoint(timestamp=TS, price=p) for p in prices)
        return AssetSeries(asset_id=asset_id, name=name, points=points)

    def test_single_series_chart(self):
        points = [SeriesPoint(timestamp=TS, price=1.0), SeriesPoint(timestamp=TS, price=2.0)]
        chart = build_series_chart("Bitcoin", points, 30)

        assert chart.has_chart
        assert chart.labels == ("10/02/2024", "10/02/2024")
        assert chart.datasets[0].label == "Bitcoin"
        assert chart.datasets[0].data == (1.0, 2.0)
        assert chart.datasets[0].border_color == PALETTE[0]
        assert chart.datasets[0].background_color == PALETTE[0] + "33"

    def test_comparison_messages(self):
        assert build_comparison_chart(ComparisonState(EMPTY, 1, 30)).message == EMPTY_SELECTION_MESSAGE
        assert build_comparison_chart(ComparisonState(LOADING, 1, 30)).message == LOADING_MESSAGE
        no_data = build_comparison_chart(ComparisonState(NO_DATA, 1, 30))
        assert no_data.message == NO_DATA_MESSAGE
        assert not no_data.has_chart

    def test_comparison_palette_cycles(self):
        series = tuple(self._series(i, f"A{i}", [float(i)]) for i in range(len(PALETTE) + 1))
        state = ComparisonState(READY, 1, 7, series=series, label_timestamps=(TS,))
        chart = build_comparison_chart(state)

        colors = [d.border_color for d in chart.datasets]
        assert colors[: len(PALETTE)] == list(PALETTE)
        assert colors[-1] == PALETTE[0]
        assert chart.labels == ("10/02/2024",)
        assert chart.has_chart
