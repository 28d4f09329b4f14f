"""
Portfolio serialization and explicit trade builders.

=============================================================================
FILE SCHEMA (CSV, one row per trade)
=============================================================================

Common columns:
    - trade_id: optional identifier
    - trade_type: "payment" or "fx_forward" (required)

For PAYMENT:
    - ccy, quantity, delivery_date

For FX_FORWARD:
    - ccy1, ccy2, quantity, strike, fixing_date, settle_date

Dates are persisted as YYYYMMDD. Columns a trade type does not use are
left empty.

=============================================================================
"""

from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

import pandas as pd

from ..dates import Date
from ..errors import InvalidDateError, TradeValidationError
from .trades import FXForward, Payment, TRADE_TYPES

PORTFOLIO_COLUMNS = [
    "trade_id",
    "trade_type",
    "ccy",
    "ccy1",
    "ccy2",
    "quantity",
    "strike",
    "delivery_date",
    "fixing_date",
    "settle_date",
]

Trade = Union[Payment, FXForward]


def _is_missing(val: Any) -> bool:
    if val is None:
        return True
    if isinstance(val, str):
        return val.strip() == ""
    return bool(pd.isna(val))


def _require_field(row: pd.Series, field_name: str, trade_id: Any, trade_type: str) -> Any:
    """Get a required field, raising TradeValidationError if absent or empty."""
    val = row.get(field_name)
    if _is_missing(val):
        raise TradeValidationError(trade_id, f"{trade_type} requires field '{field_name}'")
    return val.strip() if isinstance(val, str) else val


def _parse_float(row: pd.Series, field_name: str, trade_id: Any, trade_type: str) -> float:
    val = _require_field(row, field_name, trade_id, trade_type)
    try:
        return float(val)
    except (TypeError, ValueError):
        raise TradeValidationError(
            trade_id, f"Cannot parse {field_name} '{val}' as a number"
        ) from None


def _parse_date(row: pd.Series, field_name: str, trade_id: Any, trade_type: str) -> Date:
    val = _require_field(row, field_name, trade_id, trade_type)
    try:
        return Date.from_string(str(val))
    except InvalidDateError as e:
        raise TradeValidationError(trade_id, f"{field_name}: {e}") from None


def build_trade_from_row(row: pd.Series, row_number: Optional[int] = None) -> Trade:
    """
    Build one trade from a portfolio row.

    Args:
        row: Row of the portfolio DataFrame
        row_number: Used to identify the row in errors when trade_id is empty

    Returns:
        Payment or FXForward

    Raises:
        TradeValidationError: If the trade type is unknown or a field is
            missing or unparsable
    """
    raw_id = row.get("trade_id")
    trade_id = None if _is_missing(raw_id) else str(raw_id).strip()
    error_id = trade_id if trade_id is not None else f"row {row_number}"

    trade_type = str(_require_field(row, "trade_type", error_id, "trade")).lower()
    if trade_type not in TRADE_TYPES:
        raise TradeValidationError(
            error_id, f"Unknown trade type '{trade_type}'. Must be one of: {sorted(TRADE_TYPES)}"
        )

    if trade_type == Payment.trade_type:
        return Payment(
            ccy=str(_require_field(row, "ccy", error_id, trade_type)).upper(),
            quantity=_parse_float(row, "quantity", error_id, trade_type),
            delivery_date=_parse_date(row, "delivery_date", error_id, trade_type),
            trade_id=trade_id,
        )

    return FXForward(
        ccy1=str(_require_field(row, "ccy1", error_id, trade_type)).upper(),
        ccy2=str(_require_field(row, "ccy2", error_id, trade_type)).upper(),
        quantity=_parse_float(row, "quantity", error_id, trade_type),
        strike=_parse_float(row, "strike", error_id, trade_type),
        fixing_date=_parse_date(row, "fixing_date", error_id, trade_type),
        settle_date=_parse_date(row, "settle_date", error_id, trade_type),
        trade_id=trade_id,
    )


def portfolio_frame(trades: Iterable[Trade]) -> pd.DataFrame:
    """Trades as a DataFrame with the persisted column layout."""
    records = [trade.to_dict() for trade in trades]
    return pd.DataFrame(records, columns=PORTFOLIO_COLUMNS)


def load_portfolio(path: Union[str, Path]) -> List[Trade]:
    """
    Load a portfolio CSV.

    Raises:
        TradeValidationError: For the first malformed row
    """
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    return [build_trade_from_row(row, i) for i, (_, row) in enumerate(df.iterrows())]


def save_portfolio(path: Union[str, Path], trades: Iterable[Trade]) -> None:
    """Write trades to CSV in the layout load_portfolio reads."""
    portfolio_frame(trades).to_csv(path, index=False)


__all__ = [
    "PORTFOLIO_COLUMNS",
    "build_trade_from_row",
    "portfolio_frame",
    "load_portfolio",
    "save_portfolio",
]
