"""
FX forward pricer.

    PV = quantity * P_ccy2(settle) * (F - strike) * FX(ccy2 -> base)

F is the settlement rate for ccy1/ccy2:
- fixing_date already passed: the historical fixing, which must exist
- fixing_date is today: the fixing if published, else the forward curve
- fixing_date in the future: FX.FWD.<CCY1>.<CCY2> at the fixing date
"""

import logging
from typing import TYPE_CHECKING, Optional

from ..conventions import fx_fwd_name, fx_spot_name, ir_curve_discount_name
from ..data.fixings import FixingDataSource
from ..errors import NotFoundError
from ..portfolio.trades import FXForward
from .base import Pricer

if TYPE_CHECKING:
    from ..market import Market

logger = logging.getLogger(__name__)


class FXForwardPricer(Pricer):
    """Prices an outright FX forward, settled in ccy2."""

    def __init__(self, trade: FXForward, base_ccy: str):
        super().__init__(base_ccy)
        self.trade = trade
        self.fixing_name = fx_spot_name(trade.ccy1, trade.ccy2)

    def settlement_rate(self, market: "Market", fixings: Optional[FixingDataSource] = None) -> float:
        """
        Rate the trade settles at, from fixings or the forward curve.

        Raises:
            NotFoundError: If the fixing date has passed and no fixing exists
        """
        trade = self.trade
        today = market.today()

        if today > trade.fixing_date:
            if fixings is None:
                raise NotFoundError(
                    f"Fixing not found: {self.fixing_name} {trade.fixing_date} "
                    f"(no fixing data available)"
                )
            return fixings.get(self.fixing_name, trade.fixing_date)

        if today == trade.fixing_date and fixings is not None:
            value, found = fixings.lookup(self.fixing_name, trade.fixing_date)
            if found:
                return value
            logger.debug("No fixing yet for %s on %s, using forward curve",
                         self.fixing_name, trade.fixing_date)

        curve = market.get_fx_forward_curve(fx_fwd_name(trade.ccy1, trade.ccy2))
        return curve.fwd(trade.fixing_date)

    def price(self, market: "Market", fixings: Optional[FixingDataSource] = None) -> float:
        trade = self.trade
        fwd = self.settlement_rate(market, fixings)
        df = market.get_discount_curve(ir_curve_discount_name(trade.ccy2)).df(trade.settle_date)
        return trade.quantity * df * (fwd - trade.strike) * self.fx_to_base(market, trade.ccy2)


__all__ = ["FXForwardPricer"]
