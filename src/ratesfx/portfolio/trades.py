"""
Trade records.

Trades are plain immutable records; pricing lives in ratesfx.pricers.

Supported trade types:
    payment      Single cash flow of `quantity` units of `ccy` on `delivery_date`
    fx_forward   Buy `quantity` units of `ccy1` for `strike` units of `ccy2` each,
                 rate fixed on `fixing_date`, settled on `settle_date`

Sign convention: positive quantity receives the cash flow (payment) or
buys ccy1 forward (fx_forward).
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional

from ..conventions import validate_ccy
from ..dates import Date
from ..errors import TradeValidationError, UnsupportedTypeError


def _check_ccy(trade_id, field_name: str, ccy: str) -> None:
    try:
        validate_ccy(ccy)
    except UnsupportedTypeError as e:
        raise TradeValidationError(trade_id, f"{field_name}: {e}") from None


@dataclass(frozen=True)
class Payment:
    """Single cash flow in one currency."""
    ccy: str
    quantity: float
    delivery_date: Date
    trade_id: Optional[str] = None

    trade_type: ClassVar[str] = "payment"

    def __post_init__(self):
        _check_ccy(self.trade_id, "ccy", self.ccy)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trade_id": self.trade_id,
            "trade_type": self.trade_type,
            "ccy": self.ccy,
            "quantity": self.quantity,
            "delivery_date": self.delivery_date.to_string(pretty=False),
        }

    def __str__(self) -> str:
        return (f"Payment(ccy={self.ccy}, quantity={self.quantity}, "
                f"delivery_date={self.delivery_date})")


@dataclass(frozen=True)
class FXForward:
    """
    Outright FX forward on the pair ccy1/ccy2.

    Attributes:
        ccy1: Currency bought (for positive quantity)
        ccy2: Currency paid, and the settlement currency
        quantity: Units of ccy1
        strike: Contract rate, ccy2 per unit of ccy1
        fixing_date: Date the settlement rate is observed
        settle_date: Cash settlement date, not before fixing_date
    """
    ccy1: str
    ccy2: str
    quantity: float
    strike: float
    fixing_date: Date
    settle_date: Date
    trade_id: Optional[str] = None

    trade_type: ClassVar[str] = "fx_forward"

    def __post_init__(self):
        _check_ccy(self.trade_id, "ccy1", self.ccy1)
        _check_ccy(self.trade_id, "ccy2", self.ccy2)
        if self.ccy1 == self.ccy2:
            raise TradeValidationError(self.trade_id, f"ccy1 and ccy2 are both {self.ccy1}")
        if self.settle_date < self.fixing_date:
            raise TradeValidationError(
                self.trade_id,
                f"settle_date {self.settle_date} precedes fixing_date {self.fixing_date}",
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trade_id": self.trade_id,
            "trade_type": self.trade_type,
            "ccy1": self.ccy1,
            "ccy2": self.ccy2,
            "quantity": self.quantity,
            "strike": self.strike,
            "fixing_date": self.fixing_date.to_string(pretty=False),
            "settle_date": self.settle_date.to_string(pretty=False),
        }

    def __str__(self) -> str:
        return (f"FXForward({self.ccy1}/{self.ccy2}, quantity={self.quantity}, "
                f"strike={self.strike}, fixing_date={self.fixing_date}, "
                f"settle_date={self.settle_date})")


TRADE_TYPES = {cls.trade_type: cls for cls in (Payment, FXForward)}


__all__ = ["Payment", "FXForward", "TRADE_TYPES"]
