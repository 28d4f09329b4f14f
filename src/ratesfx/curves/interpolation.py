"""
Log-linear interpolation on discount factors.

Interpolating linearly in log(discount factor) gives piecewise constant
forward rates between knots. No extrapolation: queries beyond the last
knot are rejected unless they land exactly on it.
"""

from typing import Optional

import numpy as np

from ..errors import StaleRequestError


class LogLinearInterpolator:
    """
    Piecewise-linear interpolator in log-discount-factor space.

    Knot times are year fractions from the curve anchor; the first knot
    is normally the anchor itself, (0, 0).
    """

    def __init__(self):
        self.times: Optional[np.ndarray] = None
        self.log_df: Optional[np.ndarray] = None

    def fit(self, times: np.ndarray, log_discount_factors: np.ndarray) -> None:
        """
        Fit the interpolator.

        Args:
            times: Year fractions, ascending
            log_discount_factors: log(P(0, t)) at each time
        """
        times = np.asarray(times, dtype=np.float64)
        log_df = np.asarray(log_discount_factors, dtype=np.float64)

        if len(times) != len(log_df):
            raise ValueError("Times and log discount factors must have same length")
        if len(times) < 2:
            raise ValueError("Need at least 2 points for interpolation")
        if np.any(np.diff(times) < 0):
            raise ValueError("Times must be sorted ascending")

        self.times = times
        self.log_df = log_df

    def interpolate(self, t: float) -> float:
        """
        Log discount factor at time t.

        Raises:
            StaleRequestError: If t is beyond the last knot (and not equal to it)
        """
        if self.times is None or self.log_df is None:
            raise RuntimeError("Interpolator not fitted")

        # first knot strictly after t
        idx = int(np.searchsorted(self.times, t, side="right"))
        if idx >= len(self.times):
            if t == self.times[-1]:
                return float(self.log_df[-1])
            raise StaleRequestError(
                f"Time {t:.6f} is beyond the last tenor {self.times[-1]:.6f}"
            )
        if idx == 0:
            raise StaleRequestError(f"Time {t:.6f} precedes the first knot {self.times[0]:.6f}")

        t0, t1 = self.times[idx - 1], self.times[idx]
        v0, v1 = self.log_df[idx - 1], self.log_df[idx]

        w = (t - t0) / (t1 - t0)
        return float(v0 + w * (v1 - v0))


__all__ = ["LogLinearInterpolator"]
