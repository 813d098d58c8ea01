"""Market data subsystem of the coinboard relay.

Public API:
    Quote               - Immutable quote snapshot dataclass
    SeriesPoint         - One (timestamp, price) sample of a synthetic series
    QuoteSource         - Abstract interface for upstream providers
    generate_series     - Synthetic series generator
    create_quote_source - Factory that selects CoinMarketCap or the simulator
    create_relay_router - FastAPI router factory for the relay endpoints
"""

from .api import create_relay_router
from .factory import create_quote_source
from .interface import QuoteSource
from .models import AnchorPoint, Quote, SeriesPoint
from .series import anchors_for_window, back_solve, generate_series, parse_window

__all__ = [
    "Quote",
    "AnchorPoint",
    "SeriesPoint",
    "QuoteSource",
    "anchors_for_window",
    "back_solve",
    "generate_series",
    "parse_window",
    "create_quote_source",
    "create_relay_router",
]
