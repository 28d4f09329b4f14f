"""
RatesFX: Multi-currency Pricing & Risk Engine

A modular library for:
- Lazily-built market snapshots over named risk factors
- Discount curves bootstrapped from tenor rates, FX spot and forward curves
- FX cross rates by transitive closure over quoted pairs
- Portfolio pricing with per-trade failure isolation
- Bump-and-revalue PV01 (parallel and bucketed) and FX delta

Scope: payments and outright FX forwards; single-curve discounting.
"""

__version__ = "0.1.0"

# Core modules
from .errors import (
    RiskEngineError,
    NotFoundError,
    InvalidDateError,
    DisconnectedSourceError,
    UnsupportedTypeError,
    StaleRequestError,
    MarketDataError,
    TradeValidationError,
)
from .dates import Date, time_frac
from .conventions import RiskConventions, parse_name

# Market data
from .data import MarketDataSource, FixingDataSource
from .fx_matrix import FXRateMatrix
from .market import Market

# Curves
from .curves import DiscountCurve, FXSpotCurve, FXForwardCurve

# Portfolio and pricers
from .portfolio import Payment, FXForward, load_portfolio, save_portfolio
from .pricers import Pricer, PaymentPricer, FXForwardPricer, get_pricers

# Risk
from .risk import (
    TradeValue,
    compute_prices,
    portfolio_total,
    SensitivityEngine,
    compute_pv01_parallel,
    compute_pv01_bucketed,
    compute_fx_delta,
)

__all__ = [
    "__version__",
    # Errors
    "RiskEngineError",
    "NotFoundError",
    "InvalidDateError",
    "DisconnectedSourceError",
    "UnsupportedTypeError",
    "StaleRequestError",
    "MarketDataError",
    "TradeValidationError",
    # Core
    "Date",
    "time_frac",
    "RiskConventions",
    "parse_name",
    # Market data
    "MarketDataSource",
    "FixingDataSource",
    "FXRateMatrix",
    "Market",
    # Curves
    "DiscountCurve",
    "FXSpotCurve",
    "FXForwardCurve",
    # Portfolio and pricers
    "Payment",
    "FXForward",
    "load_portfolio",
    "save_portfolio",
    "Pricer",
    "PaymentPricer",
    "FXForwardPricer",
    "get_pricers",
    # Risk
    "TradeValue",
    "compute_prices",
    "portfolio_total",
    "SensitivityEngine",
    "compute_pv01_parallel",
    "compute_pv01_bucketed",
    "compute_fx_delta",
]
