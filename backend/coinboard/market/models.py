"""Data models for market data."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

# Percent-change windows reported by the upstream API, shortest first
CHANGE_WINDOWS: tuple[str, ...] = ("1h", "24h", "7d", "30d", "60d", "90d")


@dataclass(frozen=True, slots=True)
class Quote:
    """Immutable snapshot of one asset's market data.

    Percent changes are signed percentages (5.0 means +5%) and may be None
    when the upstream API does not report a window. A refresh replaces the
    whole Quote; it is never mutated in place.
    """

    id: int | str
    name: str
    symbol: str
    price: float
    volume_24h: float | None = None
    market_cap: float | None = None
    logo: str = ""
    percent_change_1h: float | None = None
    percent_change_24h: float | None = None
    percent_change_7d: float | None = None
    percent_change_30d: float | None = None
    percent_change_60d: float | None = None
    percent_change_90d: float | None = None

    def percent_change(self, window: str) -> float | None:
        """Percent change for a window key such as '24h' or '90d'."""
        if window not in CHANGE_WINDOWS:
            raise KeyError(window)
        return getattr(self, f"percent_change_{window}")

    def to_listing_dict(self) -> dict:
        """Serialize to the /listing item shape."""
        return {
            "id": self.id,
            "name": self.name,
            "symbol": self.symbol,
            "price": self.price,
            "volume_24h": self.volume_24h,
            "percent_change_1h": self.percent_change_1h,
            "percent_change_24h": self.percent_change_24h,
            "market_cap": self.market_cap,
            "logo": self.logo,
        }

    @classmethod
    def from_listing_dict(cls, data: dict) -> Quote:
        """Inverse of to_listing_dict; used by the client on relay payloads."""
        return cls(
            id=data["id"],
            name=data["name"],
            symbol=data["symbol"],
            price=float(data["price"]),
            volume_24h=data.get("volume_24h"),
            market_cap=data.get("market_cap"),
            logo=data.get("logo") or "",
            percent_change_1h=data.get("percent_change_1h"),
            percent_change_24h=data.get("percent_change_24h"),
        )


@dataclass(frozen=True, slots=True)
class AnchorPoint:
    """Control point for interpolation: an offset from now and the percent change since then."""

    offset: timedelta  # <= 0
    change: float | None


@dataclass(frozen=True, slots=True)
class SeriesPoint:
    """One (timestamp, price) sample of a synthetic series."""

    timestamp: datetime  # timezone-aware, UTC
    price: float

    def to_dict(self) -> dict:
        """Serialize for JSON transmission."""
        return {"timestamp": format_timestamp(self.timestamp), "price": self.price}

    @classmethod
    def from_dict(cls, data: dict) -> SeriesPoint:
        return cls(timestamp=parse_timestamp(data["timestamp"]), price=float(data["price"]))


def format_timestamp(ts: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a 'Z' suffix."""
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting the 'Z' suffix."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    ts = datetime.fromisoformat(value)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts
