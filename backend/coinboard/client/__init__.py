"""Client side of coinboard: listing cache, comparison selection and view models.

Public API:
    ClientSession     - Wires everything to a RelayClient
    RelayClient       - HTTP client for the relay service
    ListingCache      - Explicitly owned copy of the last-fetched listing
    SelectionTracker  - Set of assets chosen for comparison
    ComparisonChart   - Generation-guarded comparison recomputation
"""

from .comparison import ComparisonChart, ComparisonState
from .listing_cache import ListingCache
from .relay_client import RelayClient
from .selection import SelectionChange, SelectionTag, SelectionTracker
from .session import ClientSession

__all__ = [
    "ClientSession",
    "RelayClient",
    "ListingCache",
    "SelectionTracker",
    "SelectionChange",
    "SelectionTag",
    "ComparisonChart",
    "ComparisonState",
]
