"""Payment pricer: PV = quantity * P_ccy(delivery) * FX(ccy -> base)."""

from typing import TYPE_CHECKING, Optional

from ..conventions import ir_curve_discount_name
from ..data.fixings import FixingDataSource
from ..portfolio.trades import Payment
from .base import Pricer

if TYPE_CHECKING:
    from ..market import Market


class PaymentPricer(Pricer):
    """Discounts a single cash flow on its own currency's curve."""

    def __init__(self, trade: Payment, base_ccy: str):
        super().__init__(base_ccy)
        self.trade = trade

    def price(self, market: "Market", fixings: Optional[FixingDataSource] = None) -> float:
        trade = self.trade
        df = market.get_discount_curve(ir_curve_discount_name(trade.ccy)).df(trade.delivery_date)
        return trade.quantity * df * self.fx_to_base(market, trade.ccy)


__all__ = ["PaymentPricer"]
