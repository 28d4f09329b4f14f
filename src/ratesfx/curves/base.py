"""
Curve base class.

Curves are built by the Market on first demand and owned by its curve
cache. Construction reads the risk factors a curve needs from the Market
and memoises derived quantities, so a curve is never mutated: when its
inputs change the cache entry is dropped and rebuilt.
"""

from abc import ABC
from typing import ClassVar

from ..conventions import NameKind
from ..dates import Date


class Curve(ABC):
    """
    Common interface of every curve variant.

    Subclasses set `kind`, which the Market uses to check that a cached
    entry matches the variant being requested.
    """

    kind: ClassVar[NameKind]

    def __init__(self, anchor_date: Date, name: str):
        self._anchor_date = anchor_date
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def anchor_date(self) -> Date:
        """Valuation date; the curve has no value before it."""
        return self._anchor_date

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name}, anchor={self._anchor_date})"


__all__ = ["Curve"]
