"""
Curves package - discount and FX curves built on demand by the Market.

Provides:
- Curve: common base (name, anchor date, kind)
- DiscountCurve: bootstrapped or flat-yield discount factors
- FXSpotCurve / FXForwardCurve: spot capture and covered-parity forwards
- LogLinearInterpolator: log-DF interpolation without extrapolation
"""

from .base import Curve
from .discount import DiscountCurve
from .fx import FXSpotCurve, FXForwardCurve
from .interpolation import LogLinearInterpolator

__all__ = [
    "Curve",
    "DiscountCurve",
    "FXSpotCurve",
    "FXForwardCurve",
    "LogLinearInterpolator",
]
