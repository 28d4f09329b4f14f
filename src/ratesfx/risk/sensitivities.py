"""
Bump-and-revalue sensitivities over a whole portfolio.

Computes three measures, all central differences on a deep Market snapshot:
- Parallel PV01: every rate factor (flat yield and tenors) of one currency
- Bucketed PV01: one tenor rate factor at a time
- FX delta: per currency, its direct spot quote against the quote currency

Per bucket, on the same snapshot and in this order:
    bump up -> price -> bump down -> price -> restore

    sensitivity = (PV_up - PV_down) / (2 * h) * unit

PV01 uses unit = 1bp, so it reads as the PV change for a one basis point
rise. A trade that fails under either shock gets nan with the error
message of the failing leg.

Buckets are discovered from the risk factors the snapshot holds once the
portfolio has been priced on it, so only factors the portfolio actually
depends on are bumped.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from ..conventions import NameKind, RiskConventions, fx_spot_name, ir_rate_name, parse_name
from ..data.fixings import FixingDataSource
from ..market import Market
from ..pricers.base import Pricer
from .bumping import BASIS_POINT, BumpSpec, BumpType
from .pricing import PortfolioTotal, TradeValue, compute_prices, portfolio_total

logger = logging.getLogger(__name__)

PV01_PARALLEL = "PV01 parallel"
PV01_BUCKETED = "PV01 bucketed"
FX_DELTA = "FX delta"


@dataclass
class SensitivityResult:
    """
    Sensitivity of every trade to one bucket.

    Attributes:
        measure: PV01 parallel, PV01 bucketed or FX delta
        bucket: Bucket label (currency yield name, tenor rate or FX spot name)
        factors: Risk factors shocked for this bucket
        values: One TradeValue per trade, portfolio order
    """
    measure: str
    bucket: str
    factors: Tuple[str, ...]
    values: List[TradeValue]

    @property
    def title(self) -> str:
        return f"{self.measure} {self.bucket}"

    @property
    def total(self) -> PortfolioTotal:
        return portfolio_total(self.values)


def central_difference(up: TradeValue, down: TradeValue, h: float, unit: float = 1.0) -> TradeValue:
    """(up - down) / 2h scaled by unit, or nan carrying the first error."""
    if not up.is_valid:
        return TradeValue.failure(up.error)
    if not down.is_valid:
        return TradeValue.failure(down.error)
    return TradeValue((up.value - down.value) / (2.0 * h) * unit)


# =============================================================================
# Bucket discovery
# =============================================================================

def _ir_currencies(market: Market) -> List[str]:
    index = market.index
    return sorted(set(index.currencies(NameKind.YIELD)) | set(index.currencies(NameKind.TENOR_RATE)))


def parallel_ir_buckets(market: Market, bump: float = BASIS_POINT) -> List[BumpSpec]:
    """One bucket per currency holding its flat yield and every tenor rate."""
    index = market.index
    specs = []
    for ccy in _ir_currencies(market):
        factors = index.names(NameKind.YIELD, ccy) + index.names(NameKind.TENOR_RATE, ccy)
        specs.append(BumpSpec(ir_rate_name(ccy), tuple(factors), bump, BumpType.ADDITIVE, BASIS_POINT))
    return specs


def bucketed_ir_buckets(market: Market, bump: float = BASIS_POINT) -> List[BumpSpec]:
    """
    One bucket per tenor rate, shortest tenor first within a currency.

    A currency with no tenor rates contributes its flat yield as a single
    bucket.
    """
    index = market.index
    specs = []
    for ccy in _ir_currencies(market):
        tenors = sorted(index.names(NameKind.TENOR_RATE, ccy), key=lambda n: parse_name(n).days)
        names = tenors if tenors else index.names(NameKind.YIELD, ccy)
        for name in names:
            specs.append(BumpSpec(name, (name,), bump, BumpType.ADDITIVE, BASIS_POINT))
    return specs


def fx_delta_buckets(market: Market, bump: float = 0.001) -> List[BumpSpec]:
    """
    One bucket per currency of the FX matrix other than the quote currency.

    The bumped factor is the direct quote of that currency against the
    quote currency, in either orientation (FX.SPOT.EUR or FX.SPOT.USD.JPY).
    A currency reachable only through crosses has no bucket.
    """
    quote = market.quote_ccy
    cached = market.risk_factors
    specs = []
    for ccy in sorted(market.fx_matrix.currencies):
        if ccy == quote:
            continue
        candidates = (fx_spot_name(ccy), fx_spot_name(quote, ccy))
        name = next((c for c in candidates if c in cached), None)
        if name is None:
            logger.debug("No direct %s quote against %s, skipping FX delta bucket", ccy, quote)
            continue
        specs.append(BumpSpec(name, (name,), bump, BumpType.MULTIPLICATIVE))
    return specs


# =============================================================================
# Engine
# =============================================================================

class SensitivityEngine:
    """
    Portfolio-wide bump-and-revalue engine.

    The baseline Market is never modified: each run works on its own deep
    snapshot.

    Example:
        >>> engine = SensitivityEngine(market, get_pricers(trades, "USD"))
        >>> for result in engine.pv01_parallel():
        ...     print(result.title, result.total.total)
    """

    def __init__(
        self,
        market: Market,
        pricers: Sequence[Pricer],
        fixings: Optional[FixingDataSource] = None,
        conventions: Optional[RiskConventions] = None,
    ):
        self.market = market
        self.pricers = list(pricers)
        self.fixings = fixings
        self.conventions = conventions or RiskConventions.default()

    def _prepare(self) -> Market:
        """Deep snapshot holding every factor the portfolio depends on."""
        snap = self.market.snapshot()
        if snap.is_connected:
            logger.debug("Pricing portfolio on snapshot to discover risk factors")
            compute_prices(self.pricers, snap, self.fixings)
        return snap

    def _bump_and_price(self, snap: Market, spec: BumpSpec) -> List[TradeValue]:
        base = dict(spec.baseline(snap.risk_factors))
        h = spec.step(base)

        snap.set_risk_factors(spec.shocked(base, +1))
        up = compute_prices(self.pricers, snap, self.fixings)

        snap.set_risk_factors(spec.shocked(base, -1))
        down = compute_prices(self.pricers, snap, self.fixings)

        snap.set_risk_factors(list(base.items()))

        return [central_difference(u, d, h, spec.unit) for u, d in zip(up, down)]

    def run(self, measure: str, buckets: Callable[[Market], List[BumpSpec]]) -> List[SensitivityResult]:
        """
        Compute one measure over the buckets discovered on a fresh snapshot.

        Args:
            measure: Label stored on each result
            buckets: Maps the prepared snapshot to its bump specs

        Raises:
            RiskEngineError: Errors from perturbing the shared market state
        """
        snap = self._prepare()
        specs = buckets(snap)
        logger.info("Computing %s over %d buckets for %d trades", measure, len(specs), len(self.pricers))

        return [
            SensitivityResult(measure, spec.label, spec.factors, self._bump_and_price(snap, spec))
            for spec in specs
        ]

    def pv01_parallel(self) -> List[SensitivityResult]:
        bump = self.conventions.ir_bump
        return self.run(PV01_PARALLEL, lambda m: parallel_ir_buckets(m, bump))

    def pv01_bucketed(self) -> List[SensitivityResult]:
        bump = self.conventions.ir_bump
        return self.run(PV01_BUCKETED, lambda m: bucketed_ir_buckets(m, bump))

    def fx_delta(self) -> List[SensitivityResult]:
        bump = self.conventions.fx_bump
        return self.run(FX_DELTA, lambda m: fx_delta_buckets(m, bump))


# =============================================================================
# Convenience Functions
# =============================================================================

def compute_pv01_parallel(
    pricers: Sequence[Pricer],
    market: Market,
    fixings: Optional[FixingDataSource] = None,
    conventions: Optional[RiskConventions] = None,
) -> List[SensitivityResult]:
    """Parallel PV01 per currency."""
    return SensitivityEngine(market, pricers, fixings, conventions).pv01_parallel()


def compute_pv01_bucketed(
    pricers: Sequence[Pricer],
    market: Market,
    fixings: Optional[FixingDataSource] = None,
    conventions: Optional[RiskConventions] = None,
) -> List[SensitivityResult]:
    """PV01 per tenor rate."""
    return SensitivityEngine(market, pricers, fixings, conventions).pv01_bucketed()


def compute_fx_delta(
    pricers: Sequence[Pricer],
    market: Market,
    fixings: Optional[FixingDataSource] = None,
    conventions: Optional[RiskConventions] = None,
) -> List[SensitivityResult]:
    """FX delta per spot rate, relative bump."""
    return SensitivityEngine(market, pricers, fixings, conventions).fx_delta()


__all__ = [
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
