"""
Risk-factor bump definitions for bump-and-revalue sensitivities.

A BumpSpec names one bucket: the group of risk factors shocked together
and how large the shock is.

Bump types:
- Additive (absolute shift, e.g. 0.0001 = 1bp on a rate)
- Multiplicative (relative shift, e.g. 0.001 = 0.1% of an FX spot)
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Mapping, Tuple

BASIS_POINT = 0.0001


class BumpType(Enum):
    """Type of risk-factor bump."""
    ADDITIVE = "additive"              # Add size to the value
    MULTIPLICATIVE = "multiplicative"  # Add size * value


@dataclass(frozen=True)
class BumpSpec:
    """
    One sensitivity bucket.

    Attributes:
        label: Bucket name shown in reports
        factors: Risk-factor names shocked together
        size: Bump size, absolute or relative according to bump_type
        bump_type: Additive or multiplicative
        unit: Scale applied to the derivative estimate (BASIS_POINT turns
            dV/dr into a per-basis-point PV01)
    """
    label: str
    factors: Tuple[str, ...]
    size: float
    bump_type: BumpType = BumpType.ADDITIVE
    unit: float = 1.0

    def __post_init__(self):
        if not self.factors:
            raise ValueError(f"Bump {self.label} has no risk factors")
        if self.size <= 0:
            raise ValueError(f"Bump size must be positive, got {self.size}")
        if self.bump_type is BumpType.MULTIPLICATIVE and len(self.factors) != 1:
            raise ValueError("A multiplicative bump applies to exactly one risk factor")

    def step(self, base: Mapping[str, float]) -> float:
        """Absolute shift h applied to each factor."""
        if self.bump_type is BumpType.ADDITIVE:
            return self.size
        return abs(base[self.factors[0]]) * self.size

    def baseline(self, base: Mapping[str, float]) -> List[Tuple[str, float]]:
        """Current values of the bucket's factors."""
        return [(name, base[name]) for name in self.factors]

    def shocked(self, base: Mapping[str, float], direction: int) -> List[Tuple[str, float]]:
        """
        Factor values shifted by direction * h from base.

        Args:
            base: Unbumped values
            direction: +1 for the up shock, -1 for the down shock
        """
        h = self.step(base)
        return [(name, base[name] + direction * h) for name in self.factors]


__all__ = ["BASIS_POINT", "BumpType", "BumpSpec"]
