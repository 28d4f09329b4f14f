"""
FX spot and forward curves.

FXSpotCurve captures one spot rate from the Market's FX matrix when it
is built. FXForwardCurve composes two discount curves and a spot curve
through covered interest-rate parity:

    F(t) = S * P_base(t) / P_quote(t)
"""

import logging
from typing import TYPE_CHECKING

from ..conventions import (
    NameKind,
    canonical_fx_spot_name,
    ir_curve_discount_name,
    parse_name,
)
from ..dates import Date
from ..errors import UnsupportedTypeError
from .base import Curve

if TYPE_CHECKING:
    from ..market import Market

logger = logging.getLogger(__name__)


class FXSpotCurve(Curve):
    """
    Spot rate for one currency pair, frozen at construction.

    Name is FX.SPOT.<BASE>[.<QUOTE>]; an omitted quote currency means the
    Market's convention quote currency.
    """

    kind = NameKind.FX_SPOT

    def __init__(self, market: "Market", anchor_date: Date, name: str):
        super().__init__(anchor_date, name)

        parsed = parse_name(name)
        if parsed.kind is not NameKind.FX_SPOT:
            raise UnsupportedTypeError(f"{name} is not an FX spot name")

        self.base_ccy = parsed.ccy
        self.quote_ccy = parsed.quote_ccy(market.quote_ccy)
        self._rate = market.get_fx_spot(self.base_ccy, self.quote_ccy)

    def spot(self) -> float:
        """Price of one unit of base currency in quote currency."""
        return self._rate


class FXForwardCurve(Curve):
    """
    Forward FX rate for a currency pair, FX.FWD.<BASE>.<QUOTE>.

    Holds the base and quote discount curves and the spot curve resolved
    from the Market; forwards are recomputed on every call.
    """

    kind = NameKind.FX_FORWARD

    def __init__(self, market: "Market", anchor_date: Date, name: str):
        super().__init__(anchor_date, name)

        parsed = parse_name(name)
        if parsed.kind is not NameKind.FX_FORWARD:
            raise UnsupportedTypeError(f"{name} is not an FX forward name")

        self.base_ccy = parsed.ccy
        self.quote_ccy = parsed.ccy2

        self._df_base = market.get_discount_curve(ir_curve_discount_name(self.base_ccy))
        self._df_quote = market.get_discount_curve(ir_curve_discount_name(self.quote_ccy))
        self._spot = market.get_fx_spot_curve(
            canonical_fx_spot_name(self.base_ccy, self.quote_ccy, market.quote_ccy)
        )
        logger.debug("Built %s", name)

    def fwd(self, t: Date) -> float:
        """Forward rate for delivery on date t."""
        return self._spot.spot() * self._df_base.df(t) / self._df_quote.df(t)


__all__ = ["FXSpotCurve", "FXForwardCurve"]
