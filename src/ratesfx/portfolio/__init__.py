"""
Portfolio module.

Provides:
- Payment and FXForward trade records
- CSV portfolio loading and saving
"""

from .builders import (
    PORTFOLIO_COLUMNS,
    build_trade_from_row,
    load_portfolio,
    portfolio_frame,
    save_portfolio,
)
from .trades import TRADE_TYPES, FXForward, Payment

__all__ = [
    "Payment",
    "FXForward",
    "TRADE_TYPES",
    "PORTFOLIO_COLUMNS",
    "build_trade_from_row",
    "portfolio_frame",
    "load_portfolio",
    "save_portfolio",
]
