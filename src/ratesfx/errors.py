"""
Exception taxonomy for market data, curves and pricing.

Every exception raised by the library derives from RiskEngineError and
also from the closest builtin, so callers may catch either.

- NotFoundError: missing risk factor, curve or fixing
- InvalidDateError: malformed or out-of-range calendar date
- DisconnectedSourceError: cache miss after the source was disconnected
- UnsupportedTypeError: curve name/type mismatch, malformed currency code
- StaleRequestError: valuation before the anchor or beyond the last tenor
- MarketDataError: corrupt shared input (duplicates, bad quotes)
- TradeValidationError: malformed portfolio record
"""


class RiskEngineError(Exception):
    """Base class for all library errors."""


class NotFoundError(RiskEngineError, LookupError):
    """A risk factor, curve or fixing is not available."""

    def __str__(self) -> str:
        # LookupError would quote the message like a dict key
        return str(self.args[0]) if self.args else ""


class InvalidDateError(RiskEngineError, ValueError):
    """Calendar date is malformed or outside the supported range."""


class DisconnectedSourceError(RiskEngineError, RuntimeError):
    """A cache miss needs the market data source, which has been dropped."""


class UnsupportedTypeError(RiskEngineError, TypeError):
    """Object name does not match the requested kind, or a code is malformed."""


class StaleRequestError(RiskEngineError, ValueError):
    """Curve queried before its anchor date or beyond its last tenor."""


class MarketDataError(RiskEngineError, ValueError):
    """Shared market input is corrupt (duplicated records, bad quotes)."""


class TradeValidationError(RiskEngineError, ValueError):
    """
    Error raised when a portfolio record fails validation.

    Attributes:
        trade_id: Identifier of the failing record (row number if absent)
        reason: What was wrong with it
    """

    def __init__(self, trade_id, reason: str):
        self.trade_id = trade_id
        self.reason = reason
        super().__init__(f"Trade {trade_id}: {reason}")


__all__ = [
    "RiskEngineError",
    "NotFoundError",
    "InvalidDateError",
    "DisconnectedSourceError",
    "UnsupportedTypeError",
    "StaleRequestError",
    "MarketDataError",
    "TradeValidationError",
]
