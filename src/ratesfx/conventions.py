"""
Market naming conventions and risk configuration.

Every risk factor and curve object is identified by a name string.
The grammar is centralised here and nowhere else:

    Flat yield           IR.<CCY>                  IR.USD
    Tenor rate           IR.<N><D|W|M|Y>.<CCY>     IR.3M.EUR
    FX spot              FX.SPOT.<CCY1>[.<CCY2>]   FX.SPOT.EUR, FX.SPOT.EUR.GBP
    Discount curve       IR.DISCOUNT.<CCY>         IR.DISCOUNT.USD
    FX forward curve     FX.FWD.<CCY1>.<CCY2>      FX.FWD.EUR.JPY

An FX spot without a second currency is quoted against the convention
quote currency (USD): FX.SPOT.EUR is the USD price of one EUR.

Tenor codes convert to calendar days as D=1, W=7, M=30, Y=365.
"""

import re
from dataclasses import dataclass, fields
from enum import Enum
from functools import lru_cache
from typing import Any, Mapping, Optional, Tuple

from .errors import UnsupportedTypeError


IR_RATE_PREFIX = "IR."
IR_CURVE_DISCOUNT_PREFIX = "IR.DISCOUNT."
FX_SPOT_PREFIX = "FX.SPOT."
FX_FWD_PREFIX = "FX.FWD."

CONVENTION_QUOTE_CCY = "USD"

TENOR_DAYS = {"D": 1, "W": 7, "M": 30, "Y": 365}

_CCY = r"[A-Z]{3}"
CCY_PATTERN = re.compile(rf"^{_CCY}$")
TENOR_PATTERN = re.compile(r"^(\d+)([DWMY])$")

_YIELD_RE = re.compile(rf"^IR\.({_CCY})$")
_TENOR_RATE_RE = re.compile(rf"^IR\.(\d+[DWMY])\.({_CCY})$")
_DISCOUNT_RE = re.compile(rf"^IR\.DISCOUNT\.({_CCY})$")
_FX_SPOT_RE = re.compile(rf"^FX\.SPOT\.({_CCY})(?:\.({_CCY}))?$")
_FX_FWD_RE = re.compile(rf"^FX\.FWD\.({_CCY})\.({_CCY})$")


class NameKind(Enum):
    """Kind of object a market name refers to."""
    YIELD = "yield"
    TENOR_RATE = "tenor_rate"
    FX_SPOT = "fx_spot"
    DISCOUNT_CURVE = "discount_curve"
    FX_FORWARD = "fx_forward"

    @property
    def is_risk_factor(self) -> bool:
        return self in (NameKind.YIELD, NameKind.TENOR_RATE, NameKind.FX_SPOT)


@dataclass(frozen=True)
class MarketName:
    """
    Structured form of a market name.

    Attributes:
        kind: What the name refers to
        ccy: Currency (base currency for FX names)
        ccy2: Quote currency for FX names, None for an unqualified spot
        tenor: Tenor code for tenor rates (e.g. "3M")
    """
    kind: NameKind
    ccy: str
    ccy2: Optional[str] = None
    tenor: Optional[str] = None

    @property
    def days(self) -> int:
        """Tenor length in days (tenor rates only)."""
        if self.tenor is None:
            raise UnsupportedTypeError(f"{self.to_name()} has no tenor")
        return tenor_to_days(self.tenor)

    def quote_ccy(self, default: str = CONVENTION_QUOTE_CCY) -> str:
        """Quote currency of an FX name, resolving the convention default."""
        return self.ccy2 if self.ccy2 is not None else default

    def to_name(self) -> str:
        if self.kind is NameKind.YIELD:
            return ir_rate_name(self.ccy)
        if self.kind is NameKind.TENOR_RATE:
            return ir_tenor_rate_name(self.tenor, self.ccy)
        if self.kind is NameKind.DISCOUNT_CURVE:
            return ir_curve_discount_name(self.ccy)
        if self.kind is NameKind.FX_SPOT:
            return fx_spot_name(self.ccy, self.ccy2)
        return fx_fwd_name(self.ccy, self.ccy2)


def parse_name(name: str) -> MarketName:
    """
    Parse a market name into its structured form.

    Raises:
        UnsupportedTypeError: If the name does not follow the grammar
    """
    m = _TENOR_RATE_RE.match(name)
    if m:
        return MarketName(NameKind.TENOR_RATE, m.group(2), tenor=m.group(1))
    m = _YIELD_RE.match(name)
    if m:
        return MarketName(NameKind.YIELD, m.group(1))
    m = _DISCOUNT_RE.match(name)
    if m:
        return MarketName(NameKind.DISCOUNT_CURVE, m.group(1))
    m = _FX_SPOT_RE.match(name)
    if m:
        return MarketName(NameKind.FX_SPOT, m.group(1), m.group(2))
    m = _FX_FWD_RE.match(name)
    if m:
        return MarketName(NameKind.FX_FORWARD, m.group(1), m.group(2))
    raise UnsupportedTypeError(f"Unrecognised market name: '{name}'")


def validate_ccy(ccy: str) -> str:
    """Return ccy if it is a three-letter upper-case code."""
    if not isinstance(ccy, str) or not CCY_PATTERN.match(ccy):
        raise UnsupportedTypeError(f"Invalid currency code: '{ccy}'")
    return ccy


def parse_tenor(tenor: str) -> Tuple[int, str]:
    """
    Parse a tenor string into (amount, unit).

    Args:
        tenor: Tenor string like "1D", "3M", "2Y"

    Raises:
        UnsupportedTypeError: If tenor format is invalid
    """
    match = TENOR_PATTERN.match(str(tenor).upper().strip())
    if not match:
        raise UnsupportedTypeError(f"Invalid tenor format: {tenor}. Expected format like '3M', '2Y'")
    return int(match.group(1)), match.group(2)


def tenor_to_days(tenor: str) -> int:
    """Convert a tenor code to a day count (D=1, W=7, M=30, Y=365)."""
    amount, unit = parse_tenor(tenor)
    return amount * TENOR_DAYS[unit]


# Name builders

def ir_rate_name(ccy: str) -> str:
    return IR_RATE_PREFIX + validate_ccy(ccy)


def ir_tenor_rate_name(tenor: str, ccy: str) -> str:
    amount, unit = parse_tenor(tenor)
    return f"{IR_RATE_PREFIX}{amount}{unit}.{validate_ccy(ccy)}"


def ir_curve_discount_name(ccy: str) -> str:
    return IR_CURVE_DISCOUNT_PREFIX + validate_ccy(ccy)


def fx_spot_name(ccy1: str, ccy2: Optional[str] = None) -> str:
    if ccy2 is None:
        return FX_SPOT_PREFIX + validate_ccy(ccy1)
    return f"{FX_SPOT_PREFIX}{validate_ccy(ccy1)}.{validate_ccy(ccy2)}"


def fx_fwd_name(ccy1: str, ccy2: str) -> str:
    return f"{FX_FWD_PREFIX}{validate_ccy(ccy1)}.{validate_ccy(ccy2)}"


def canonical_fx_spot_name(base: str, quote: str, quote_ccy: str = CONVENTION_QUOTE_CCY) -> str:
    """FX spot name with the convention quote currency left implicit."""
    if quote == quote_ccy:
        return fx_spot_name(base)
    return fx_spot_name(base, quote)


# Regex patterns for bulk discovery against a data source

def tenor_rate_pattern(ccy: str) -> str:
    return rf"IR\.\d+[DWMY]\.{validate_ccy(ccy)}"


def fx_spot_pattern() -> str:
    return rf"FX\.SPOT\.{_CCY}(\.{_CCY})?"


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> "re.Pattern":
    """Compiled form of a discovery pattern, cached across calls."""
    return re.compile(pattern)


@dataclass
class RiskConventions:
    """
    Configuration shared by pricers and the sensitivity engine.

    Attributes:
        base_ccy: Reporting currency every price is converted into
        quote_ccy: Implicit quote currency of unqualified FX spot names
        ir_bump: Absolute interest-rate bump (0.0001 = 1bp)
        fx_bump: Relative FX spot bump (0.001 = 0.1%)
    """
    base_ccy: str = "USD"
    quote_ccy: str = CONVENTION_QUOTE_CCY
    ir_bump: float = 0.01 / 100
    fx_bump: float = 0.1 / 100

    def __post_init__(self):
        validate_ccy(self.base_ccy)
        validate_ccy(self.quote_ccy)
        if self.ir_bump <= 0 or self.fx_bump <= 0:
            raise ValueError("Bump sizes must be positive")

    @classmethod
    def default(cls) -> "RiskConventions":
        """Standard setup: USD reporting, 1bp rate bump, 0.1% FX bump."""
        return cls()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RiskConventions":
        """Build from a mapping, ignoring keys that are not fields."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


__all__ = [
    "IR_RATE_PREFIX",
    "IR_CURVE_DISCOUNT_PREFIX",
    "FX_SPOT_PREFIX",
    "FX_FWD_PREFIX",
    "CONVENTION_QUOTE_CCY",
    "TENOR_DAYS",
    "NameKind",
    "MarketName",
    "parse_name",
    "validate_ccy",
    "parse_tenor",
    "tenor_to_days",
    "ir_rate_name",
    "ir_tenor_rate_name",
    "ir_curve_discount_name",
    "fx_spot_name",
    "fx_fwd_name",
    "canonical_fx_spot_name",
    "tenor_rate_pattern",
    "fx_spot_pattern",
    "compile_pattern",
    "RiskConventions",
]
