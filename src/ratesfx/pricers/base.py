"""
Pricer contract.

A pricer holds one trade and the reporting currency, and prices against
whatever Market it is handed. Pricers never cache market state, so the
same pricer list can be reused across bumped market snapshots.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from ..conventions import canonical_fx_spot_name, validate_ccy
from ..data.fixings import FixingDataSource

if TYPE_CHECKING:
    from ..market import Market


class Pricer(ABC):
    """
    Base class for trade pricers.

    Attributes:
        base_ccy: Currency every price is reported in
    """

    def __init__(self, base_ccy: str):
        self.base_ccy = validate_ccy(base_ccy)

    @abstractmethod
    def price(self, market: "Market", fixings: Optional[FixingDataSource] = None) -> float:
        """
        Present value of the trade in base currency.

        Args:
            market: Market snapshot to price against
            fixings: Historical fixings, needed once a rate has fixed

        Raises:
            RiskEngineError: Any market, curve or fixing failure; callers
                that price a whole portfolio isolate these per trade
        """

    def fx_to_base(self, market: "Market", ccy: str) -> float:
        """Units of base currency per unit of ccy; 1 when ccy is the base."""
        if ccy == self.base_ccy:
            return 1.0
        name = canonical_fx_spot_name(ccy, self.base_ccy, market.quote_ccy)
        return market.get_fx_spot_curve(name).spot()


__all__ = ["Pricer"]
