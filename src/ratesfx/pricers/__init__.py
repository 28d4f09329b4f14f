"""
Pricers module.

Provides:
- Pricer: contract shared by all trade pricers
- PaymentPricer, FXForwardPricer
- get_pricers: one pricer per trade for a reporting currency
"""

from typing import Iterable, List

from ..conventions import CONVENTION_QUOTE_CCY
from ..errors import UnsupportedTypeError
from ..portfolio.trades import FXForward, Payment
from .base import Pricer
from .fx_forward import FXForwardPricer
from .payment import PaymentPricer

PRICERS = {
    Payment: PaymentPricer,
    FXForward: FXForwardPricer,
}


def get_pricer(trade, base_ccy: str = CONVENTION_QUOTE_CCY) -> Pricer:
    """
    Pricer for one trade.

    Raises:
        UnsupportedTypeError: If no pricer handles the trade's type
    """
    try:
        pricer_cls = PRICERS[type(trade)]
    except KeyError:
        raise UnsupportedTypeError(f"No pricer for trade type {type(trade).__name__}") from None
    return pricer_cls(trade, base_ccy)


def get_pricers(portfolio: Iterable, base_ccy: str = CONVENTION_QUOTE_CCY) -> List[Pricer]:
    """Pricers for every trade in portfolio order."""
    return [get_pricer(trade, base_ccy) for trade in portfolio]


__all__ = [
    "Pricer",
    "PaymentPricer",
    "FXForwardPricer",
    "PRICERS",
    "get_pricer",
    "get_pricers",
]
