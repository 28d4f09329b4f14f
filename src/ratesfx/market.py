"""
Market snapshot.

The Market is the single gateway to market data for pricing and risk:
- risk-factor cache (name -> value), populated from a MarketDataSource on miss
- curve cache (name -> Curve), built lazily on first request
- FX cross-rate matrix, rebuilt whenever risk factors change

Perturbation goes through set_risk_factors, which overwrites cached
values, drops every cached curve and rebuilds the FX matrix. Curves are
never patched in place.

Two kinds of copy exist:
- view(): shares caches and source handle, for read-only derived use
- snapshot(): independent risk-factor map and FX matrix, empty curve
  cache; the only copy the sensitivity engine perturbs
"""

import logging
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple, Type, TypeVar

from .conventions import (
    CONVENTION_QUOTE_CCY,
    FX_SPOT_PREFIX,
    MarketName,
    NameKind,
    canonical_fx_spot_name,
    compile_pattern,
    fx_spot_name,
    fx_spot_pattern,
    ir_rate_name,
    parse_name,
    tenor_rate_pattern,
    validate_ccy,
)
from .curves.base import Curve
from .curves.discount import DiscountCurve
from .curves.fx import FXForwardCurve, FXSpotCurve
from .data.market_data import MarketDataSource
from .dates import Date
from .errors import (
    DisconnectedSourceError,
    MarketDataError,
    NotFoundError,
    UnsupportedTypeError,
)
from .fx_matrix import FXRateMatrix

logger = logging.getLogger(__name__)

RiskFactor = Tuple[str, float]
C = TypeVar("C", bound=Curve)


class RiskFactorIndex:
    """
    Structured index of cached risk-factor names by (kind, currency).

    Built incrementally as names enter the cache, so bulk lookups such
    as "all tenor rates for EUR" need no pattern matching.
    """

    def __init__(self):
        self._names: Dict[Tuple[NameKind, str], Set[str]] = {}

    def add(self, name: str) -> MarketName:
        """File a risk-factor name. Raises UnsupportedTypeError if malformed."""
        parsed = parse_name(name)
        if not parsed.kind.is_risk_factor:
            raise UnsupportedTypeError(f"{name} is a curve name, not a risk factor")
        self._names.setdefault((parsed.kind, parsed.ccy), set()).add(name)
        return parsed

    def names(self, kind: NameKind, ccy: Optional[str] = None) -> List[str]:
        """Sorted names of one kind, optionally restricted to one currency."""
        if ccy is not None:
            return sorted(self._names.get((kind, ccy), ()))
        result = []
        for (k, _), names in self._names.items():
            if k is kind:
                result.extend(names)
        return sorted(result)

    def currencies(self, kind: NameKind) -> List[str]:
        """Sorted currencies that have at least one name of this kind."""
        return sorted({ccy for (k, ccy), names in self._names.items() if k is kind and names})

    def copy(self) -> "RiskFactorIndex":
        other = RiskFactorIndex()
        other._names = {key: set(names) for key, names in self._names.items()}
        return other


class Market:
    """
    Mutable market snapshot for one anchor date.

    Attributes:
        quote_ccy: Implicit quote currency of unqualified FX spot names

    Example:
        >>> source = MarketDataSource({"IR.USD": 0.02})
        >>> mkt = Market(source, Date.from_ymd(2017, 8, 5))
        >>> mkt.get_discount_curve("IR.DISCOUNT.USD").df(mkt.today() + 365)
    """

    def __init__(
        self,
        source: Optional[MarketDataSource],
        today: Date,
        quote_ccy: str = CONVENTION_QUOTE_CCY,
    ):
        self._today = today
        self._source = source
        self.quote_ccy = validate_ccy(quote_ccy)

        self._risk_factors: Dict[str, float] = {}
        self._index = RiskFactorIndex()
        self._fetched_patterns: Set[str] = set()
        self._curves: Dict[str, Curve] = {}
        self._fx = FXRateMatrix()

        self.construct_fx_spot_rate_matrix()

    @classmethod
    def from_risk_factors(
        cls,
        today: Date,
        risk_factors: Mapping[str, float],
        quote_ccy: str = CONVENTION_QUOTE_CCY,
    ) -> "Market":
        """
        Build a disconnected Market from known risk-factor values.

        Every later cache miss fails with DisconnectedSourceError.
        """
        market = cls(None, today, quote_ccy)
        for name, value in risk_factors.items():
            market._store(name, float(value))
        # the mapping is complete, so no tenor rate is left to discover
        index = market._index
        for ccy in set(index.currencies(NameKind.YIELD)) | set(index.currencies(NameKind.TENOR_RATE)):
            market._fetched_patterns.add(tenor_rate_pattern(ccy))
        market.construct_fx_spot_rate_matrix()
        return market

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def today(self) -> Date:
        """Anchor date of this snapshot."""
        return self._today

    @property
    def is_connected(self) -> bool:
        return self._source is not None

    @property
    def risk_factors(self) -> Mapping[str, float]:
        """Read-only view of the risk-factor cache."""
        return MappingProxyType(self._risk_factors)

    @property
    def fx_matrix(self) -> FXRateMatrix:
        return self._fx

    @property
    def index(self) -> RiskFactorIndex:
        return self._index

    def disconnect(self) -> None:
        """Drop the source; later cache misses fail with DisconnectedSourceError."""
        self._source = None
        logger.info("Market %s disconnected from its data source", self._today)

    def clear(self) -> None:
        """Drop every cached curve, keeping risk-factor values."""
        self._curves.clear()

    def view(self) -> "Market":
        """Shallow copy sharing caches and source handle."""
        other = self._copy_header()
        other._risk_factors = self._risk_factors
        other._index = self._index
        other._fetched_patterns = self._fetched_patterns
        other._curves = self._curves
        other._fx = self._fx
        return other

    def snapshot(self) -> "Market":
        """Deep copy with its own risk factors and FX matrix and no curves."""
        other = self._copy_header()
        other._risk_factors = dict(self._risk_factors)
        other._index = self._index.copy()
        other._fetched_patterns = set(self._fetched_patterns)
        other._curves = {}
        other._fx = self._fx.copy()
        return other

    def _copy_header(self) -> "Market":
        other = Market.__new__(Market)
        other._today = self._today
        other._source = self._source
        other.quote_ccy = self.quote_ccy
        return other

    # ------------------------------------------------------------------
    # Risk factors
    # ------------------------------------------------------------------

    def _factor_key(self, name: str) -> str:
        """Cache key of a risk factor; FX spots against quote_ccy lose the suffix."""
        if not name.startswith(FX_SPOT_PREFIX):
            return name
        parsed = parse_name(name)
        return canonical_fx_spot_name(parsed.ccy, parsed.quote_ccy(self.quote_ccy), self.quote_ccy)

    def _store(self, name: str, value: float) -> str:
        key = self._factor_key(name)
        self._index.add(key)
        self._risk_factors[key] = value
        return key

    def _require_source(self, name: str) -> MarketDataSource:
        if self._source is None:
            raise DisconnectedSourceError(
                f"Cannot fetch {name} because the market data source has been disconnected"
            )
        return self._source

    def _pull(self, name: str) -> float:
        """
        Read a value from the source.

        FX spot names missing verbatim are retried against the equivalent
        qualified/unqualified form and then the reciprocal pair.
        """
        source = self._require_source(name)
        value, found = source.lookup(name)
        if found:
            return value

        parsed = parse_name(name)
        if parsed.kind is NameKind.FX_SPOT:
            base, quote = parsed.ccy, parsed.quote_ccy(self.quote_ccy)
            if base != quote:
                for alt in (fx_spot_name(base, quote), canonical_fx_spot_name(base, quote, self.quote_ccy)):
                    value, found = source.lookup(alt)
                    if found:
                        return value
                for alt in (fx_spot_name(quote, base), canonical_fx_spot_name(quote, base, self.quote_ccy)):
                    value, found = source.lookup(alt)
                    if found:
                        if not value > 0:
                            raise MarketDataError(f"FX quote {alt} must be positive, got {value}")
                        return 1.0 / value

        raise NotFoundError(f"Market data not found: {name}")

    def _populate(self, name: str) -> Tuple[str, float]:
        """(cache key, value) of name, pulling it from the source on a miss."""
        key = self._factor_key(name)
        if key in self._risk_factors:
            return key, self._risk_factors[key]
        value = self._pull(name)
        self._store(key, value)
        logger.debug("Pulled %s = %s from source", key, value)
        return key, value

    def get_risk_factor(self, name: str) -> float:
        """
        Value of one risk factor, populated from the source on a miss.

        FX spot names quoted against the convention currency are cached
        under their unqualified form (FX.SPOT.EUR.USD -> FX.SPOT.EUR).

        Raises:
            UnsupportedTypeError: If the name is malformed
            NotFoundError: If the source has no such factor
            DisconnectedSourceError: On a miss after disconnect()
        """
        parse_name(name)
        return self._populate(name)[1]

    def get_yield(self, ccy: str) -> float:
        """Flat yield IR.<CCY>."""
        return self.get_risk_factor(ir_rate_name(ccy))

    def get_risk_factors(self, pattern: str) -> List[RiskFactor]:
        """Cached risk factors whose name fully matches pattern. Never touches the source."""
        regex = compile_pattern(pattern)
        return [(name, value) for name, value in sorted(self._risk_factors.items()) if regex.fullmatch(name)]

    def fetch_risk_factors(self, pattern: str) -> List[RiskFactor]:
        """
        Pull every source name matching pattern into the cache.

        A pattern fetched before is served from the cache alone. FX spots
        are cached and returned under their canonical names.

        Raises:
            DisconnectedSourceError: If the pattern is new and the source is gone
        """
        if pattern in self._fetched_patterns:
            return self.get_risk_factors(pattern)

        source = self._require_source(pattern)
        result = dict(self._populate(name) for name in source.match(pattern))
        self._fetched_patterns.add(pattern)
        logger.debug("Fetched %d risk factors for pattern %s", len(result), pattern)
        return sorted(result.items())

    def fetch_tenor_rates(self, ccy: str) -> List[RiskFactor]:
        """
        All tenor rates IR.<N><U>.<CCY>, fetching them from the source once.

        Raises:
            DisconnectedSourceError: If they were never fetched and the
                source is gone
        """
        pattern = tenor_rate_pattern(ccy)
        if pattern not in self._fetched_patterns:
            self.fetch_risk_factors(pattern)
        return [(name, self._risk_factors[name]) for name in self._index.names(NameKind.TENOR_RATE, ccy)]

    def set_risk_factors(self, risk_factors: Iterable[RiskFactor]) -> None:
        """
        Overwrite cached risk factors, then invalidate derived state.

        Every name must already be cached; the source is not consulted.
        Drops the whole curve cache and rebuilds the FX matrix.

        Raises:
            NotFoundError: Naming the first missing risk factor; nothing is
                modified in that case
        """
        updates = [(self._factor_key(name), value) for name, value in risk_factors]
        for name, _ in updates:
            if name not in self._risk_factors:
                raise NotFoundError(f"Risk factor not found {name}")

        for name, value in updates:
            self._risk_factors[name] = float(value)

        self.clear()
        self.construct_fx_spot_rate_matrix()

    # ------------------------------------------------------------------
    # FX
    # ------------------------------------------------------------------

    def construct_fx_spot_rate_matrix(self) -> None:
        """Rebuild the FX matrix from every cached FX spot factor."""
        pattern = fx_spot_pattern()
        if self._source is not None and pattern not in self._fetched_patterns:
            self.fetch_risk_factors(pattern)

        quotes = []
        for name in self._index.names(NameKind.FX_SPOT):
            parsed = parse_name(name)
            quotes.append((parsed.ccy, parsed.quote_ccy(self.quote_ccy), self._risk_factors[name]))

        self._fx = FXRateMatrix.from_quotes(quotes)

    def get_fx_spot(self, base: str, quote: str) -> float:
        """
        Price of one unit of base in quote, from the closed FX matrix.

        Raises:
            NotFoundError: If either currency is unknown or no rate is implied
        """
        return self._fx.rate(base, quote)

    # ------------------------------------------------------------------
    # Curves
    # ------------------------------------------------------------------

    def _get_curve(self, name: str, curve_cls: Type[C]) -> C:
        curve = self._curves.get(name)
        if curve is None:
            curve = curve_cls(self, self._today, name)
            self._curves[name] = curve
        elif curve.kind is not curve_cls.kind:
            raise UnsupportedTypeError(
                f"Cannot use object with name {name} as {curve_cls.__name__}"
            )
        return curve

    def _canonical_curve_name(self, name: str, kind: NameKind) -> str:
        parsed = parse_name(name)
        if parsed.kind is not kind:
            raise UnsupportedTypeError(f"{name} is not a {kind.value} name")
        if kind is NameKind.FX_SPOT:
            return canonical_fx_spot_name(parsed.ccy, parsed.quote_ccy(self.quote_ccy), self.quote_ccy)
        return parsed.to_name()

    def get_discount_curve(self, name: str) -> DiscountCurve:
        """Discount curve IR.DISCOUNT.<CCY>, built on first request."""
        return self._get_curve(self._canonical_curve_name(name, NameKind.DISCOUNT_CURVE), DiscountCurve)

    def get_fx_spot_curve(self, name: str) -> FXSpotCurve:
        """FX spot curve FX.SPOT.<BASE>[.<QUOTE>], built on first request."""
        return self._get_curve(self._canonical_curve_name(name, NameKind.FX_SPOT), FXSpotCurve)

    def get_fx_forward_curve(self, name: str) -> FXForwardCurve:
        """FX forward curve FX.FWD.<BASE>.<QUOTE>, built on first request."""
        return self._get_curve(self._canonical_curve_name(name, NameKind.FX_FORWARD), FXForwardCurve)

    def cached_curves(self) -> List[str]:
        """Names of the curves currently built."""
        return sorted(self._curves)

    def __repr__(self) -> str:
        return (f"Market(today={self._today}, risk_factors={len(self._risk_factors)}, "
                f"curves={len(self._curves)}, connected={self.is_connected})")


__all__ = [
    "Market",
    "RiskFactorIndex",
    "RiskFactor",
]
