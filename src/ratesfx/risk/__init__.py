"""
Risk module.

Provides:
- Portfolio pricing with per-trade failure isolation
- Bump specifications (additive and multiplicative)
- Parallel PV01, bucketed PV01 and FX delta by bump-and-revalue
"""

from .bumping import BASIS_POINT, BumpSpec, BumpType
from .pricing import (
    PortfolioTotal,
    TradeValue,
    compute_prices,
    portfolio_total,
    price_trade,
)
from .sensitivities import (
    FX_DELTA,
    PV01_BUCKETED,
    PV01_PARALLEL,
    SensitivityEngine,
    SensitivityResult,
    bucketed_ir_buckets,
    central_difference,
    compute_fx_delta,
    compute_pv01_bucketed,
    compute_pv01_parallel,
    fx_delta_buckets,
    parallel_ir_buckets,
)

__all__ = [
    "BASIS_POINT",
    "BumpType",
    "BumpSpec",
    "TradeValue",
    "PortfolioTotal",
    "price_trade",
    "compute_prices",
    "portfolio_total",
    "PV01_PARALLEL",
    "PV01_BUCKETED",
    "FX_DELTA",
    "SensitivityResult",
    "SensitivityEngine",
    "central_difference",
    "parallel_ir_buckets",
    "bucketed_ir_buckets",
    "fx_delta_buckets",
    "compute_pv01_parallel",
    "compute_pv01_bucketed",
    "compute_fx_delta",
]
