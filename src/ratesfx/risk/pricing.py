"""
Portfolio pricing with per-trade failure isolation.

A failure while pricing one trade never aborts the batch: it is logged,
recorded as TradeValue(nan, "<ExceptionType>: <message>") and the next
trade is priced. Totals only sum the trades that priced.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from ..data.fixings import FixingDataSource
from ..pricers.base import Pricer

if TYPE_CHECKING:
    from ..market import Market

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TradeValue:
    """
    One entry of a price vector.

    Attributes:
        value: Price or sensitivity, nan if the trade failed
        error: "<ExceptionType>: <message>" for a failed trade, else None
    """
    value: float
    error: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return not math.isnan(self.value)

    @classmethod
    def failure(cls, error: str) -> "TradeValue":
        return cls(math.nan, error)


@dataclass
class PortfolioTotal:
    """
    Sum of a price vector with its failures.

    Attributes:
        total: Sum of every valid entry
        failures: (trade index, error message) for every nan entry
    """
    total: float
    failures: List[Tuple[int, str]] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return len(self.failures) > 0

    @property
    def failed_count(self) -> int:
        return len(self.failures)


def price_trade(
    pricer: Pricer,
    market: "Market",
    fixings: Optional[FixingDataSource] = None,
    index: Optional[int] = None,
) -> TradeValue:
    """Price one trade, converting any exception into a failed TradeValue."""
    try:
        return TradeValue(float(pricer.price(market, fixings)))
    except Exception as e:
        message = f"{type(e).__name__}: {e}"
        logger.warning("Trade %s failed to price: %s", index if index is not None else "?", message)
        return TradeValue.failure(message)


def compute_prices(
    pricers: Sequence[Pricer],
    market: "Market",
    fixings: Optional[FixingDataSource] = None,
) -> List[TradeValue]:
    """Price every trade against market, isolating failures per trade."""
    return [price_trade(pricer, market, fixings, i) for i, pricer in enumerate(pricers)]


def portfolio_total(values: Sequence[TradeValue]) -> PortfolioTotal:
    """Total of the valid entries plus the list of failed ones."""
    total = 0.0
    failures = []
    for i, tv in enumerate(values):
        if tv.is_valid:
            total += tv.value
        else:
            failures.append((i, tv.error or ""))
    return PortfolioTotal(total=total, failures=failures)


__all__ = [
    "TradeValue",
    "PortfolioTotal",
    "price_trade",
    "compute_prices",
    "portfolio_total",
]
