"""Error taxonomy shared by the relay service and the client session."""

from __future__ import annotations


class CoinboardError(Exception):
    """Base class for every error raised by coinboard."""


class UpstreamUnavailable(CoinboardError):
    """The upstream market-data API (or the relay) could not be reached or answered non-2xx."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RateLimited(UpstreamUnavailable):
    """The upstream API rejected the call because the quota was exhausted."""


class NotFound(CoinboardError):
    """An asset id is absent from a response or from the current listing."""

    def __init__(self, asset_id: object, message: str | None = None) -> None:
        super().__init__(message or f"No data found for asset {asset_id}")
        self.asset_id = asset_id


class InvalidResponseShape(CoinboardError):
    """A payload is missing the array or object we expected."""


class PartialFetchFailure(CoinboardError):
    """Some (not all) historical fetches for a comparison chart failed.

    Non-fatal: the chart is rendered without the failed series.
    """

    def __init__(self, failed_ids: list) -> None:
        super().__init__(f"Historical fetch failed for {len(failed_ids)} asset(s): {failed_ids}")
        self.failed_ids = list(failed_ids)
