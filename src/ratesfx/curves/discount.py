"""
Discount curve for one currency.

Bootstrap from tenor rates IR.<N><U>.<CCY>:
- tenor code -> days (D=1, W=7, M=30, Y=365), sorted ascending
- node time t = days / 365, node log DF = -rate * t
- implicit anchor node (0, 0)
- log-linear interpolation between nodes, no extrapolation

With no tenor rates for the currency, the curve falls back to the flat
yield IR.<CCY>: P(0, t) = exp(-yield * t).

Conventions:
    - Rates are continuously compounded
    - Times are ACT/365 year fractions from the anchor date
"""

import logging
import math
from typing import TYPE_CHECKING, List, Optional, Tuple

import numpy as np

from ..conventions import NameKind, parse_name
from ..dates import Date, time_frac
from ..errors import StaleRequestError, UnsupportedTypeError
from .base import Curve
from .interpolation import LogLinearInterpolator

if TYPE_CHECKING:
    from ..market import Market

logger = logging.getLogger(__name__)


class DiscountCurve(Curve):
    """
    Discount factors P(0, t) for a single currency.

    Attributes:
        currency: Currency code
        flat_rate: Flat yield when no tenor rates exist, else None
    """

    kind = NameKind.DISCOUNT_CURVE

    def __init__(self, market: "Market", anchor_date: Date, name: str):
        super().__init__(anchor_date, name)

        parsed = parse_name(name)
        if parsed.kind is not NameKind.DISCOUNT_CURVE:
            raise UnsupportedTypeError(f"{name} is not a discount curve name")
        self.currency = parsed.ccy

        self.flat_rate: Optional[float] = None
        self._tenors: List[Tuple[str, int, float]] = []
        self._interpolator: Optional[LogLinearInterpolator] = None

        tenor_rates = market.fetch_tenor_rates(self.currency)
        if tenor_rates:
            self._bootstrap(tenor_rates)
        else:
            self.flat_rate = market.get_yield(self.currency)
            logger.debug("Built %s from flat yield %.6f", name, self.flat_rate)

    def _bootstrap(self, tenor_rates: List[Tuple[str, float]]) -> None:
        """Build (time, log DF) nodes from tenor quotes."""
        nodes = sorted(
            ((rf_name, parse_name(rf_name).days, rate) for rf_name, rate in tenor_rates),
            key=lambda node: node[1],
        )
        self._tenors = nodes

        times = np.array([0.0] + [days / 365.0 for _, days, _ in nodes])
        rates = np.array([0.0] + [rate for _, _, rate in nodes])
        log_df = -rates * times

        self._interpolator = LogLinearInterpolator()
        self._interpolator.fit(times, log_df)
        logger.debug("Bootstrapped %s from %d tenors", self.name, len(nodes))

    @property
    def is_bootstrapped(self) -> bool:
        return self._interpolator is not None

    @property
    def last_tenor_date(self) -> Optional[Date]:
        """Date of the longest tenor, None in flat-yield mode."""
        if not self._tenors:
            return None
        return self.anchor_date + self._tenors[-1][1]

    def df(self, t: Date) -> float:
        """
        Discount factor for a cash flow on date t.

        Raises:
            StaleRequestError: If t precedes the anchor date, or is beyond
                the last bootstrapped tenor without landing exactly on it
        """
        if t < self.anchor_date:
            raise StaleRequestError(
                f"Cannot get discount factor for date in the past: {t} (curve {self.name} "
                f"anchored at {self.anchor_date})"
            )

        dt = time_frac(self.anchor_date, t)
        if self._interpolator is None:
            return math.exp(-self.flat_rate * dt)

        try:
            return math.exp(self._interpolator.interpolate(dt))
        except StaleRequestError:
            raise StaleRequestError(
                f"Cannot get discount factor for {t}: beyond last tenor "
                f"{self.last_tenor_date} of curve {self.name}"
            ) from None

    def zero_rate(self, t: Date) -> float:
        """Continuously compounded zero rate to date t."""
        dt = time_frac(self.anchor_date, t)
        if dt <= 0:
            if self._interpolator is None:
                return self.flat_rate
            return self._tenors[0][2]
        return -math.log(self.df(t)) / dt

    def get_nodes(self) -> List[Tuple[float, float, float]]:
        """
        Curve nodes as (time, discount_factor, zero_rate), anchor first.

        Flat-yield curves have only the anchor node.
        """
        nodes = [(0.0, 1.0, self.flat_rate if self.flat_rate is not None else 0.0)]
        for _, days, rate in self._tenors:
            t = days / 365.0
            nodes.append((t, math.exp(-rate * t), rate))
        return nodes


__all__ = ["DiscountCurve"]
