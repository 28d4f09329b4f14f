"""
Data sources - raw market quotes and historical fixings.

Provides:
- MarketDataSource: name -> value store behind the Market cache
- FixingDataSource: (name, date) -> value store for settled fixings
"""

from .market_data import MarketDataSource
from .fixings import FixingDataSource

__all__ = [
    "MarketDataSource",
    "FixingDataSource",
]
