"""Process configuration, read from the environment once at startup."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_CMC_BASE_URL = "https://pro-api.coinmarketcap.com"


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %d", name, raw, default)
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


@dataclass(frozen=True, slots=True)
class Settings:
    """Runtime settings for the relay and the client session.

    The upstream credential is never part of the source tree: it comes from
    CMC_API_KEY. An empty key selects the offline simulated quote source.
    """

    cmc_api_key: str = ""
    cmc_base_url: str = DEFAULT_CMC_BASE_URL
    listing_limit: int = 100
    request_timeout: float = 30.0
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    relay_url: str = "http://localhost:3000/"
    refresh_interval: float = 0.0  # 0 disables the periodic listing refresh

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            cmc_api_key=os.environ.get("CMC_API_KEY", "").strip(),
            cmc_base_url=os.environ.get("CMC_BASE_URL", "").strip() or DEFAULT_CMC_BASE_URL,
            listing_limit=_env_int("CMC_LISTING_LIMIT", 100),
            request_timeout=_env_float("CMC_TIMEOUT", 30.0),
            host=os.environ.get("COINBOARD_HOST", "").strip() or "0.0.0.0",
            port=_env_int("COINBOARD_PORT", 3000),
            log_level=os.environ.get("COINBOARD_LOG_LEVEL", "").strip().upper() or "INFO",
            relay_url=os.environ.get("COINBOARD_RELAY_URL", "").strip() or "http://localhost:3000/",
            refresh_interval=_env_float("COINBOARD_REFRESH_INTERVAL", 0.0),
        )
