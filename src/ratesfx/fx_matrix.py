"""
FX cross-rate matrix.

Dense currency x currency table where rate[i, j] is the price of one
unit of currency i expressed in currency j. Built from direct quotes and
completed by transitive closure:

- rate[i, i] = 1
- rate[j, i] = 1 / rate[i, j] for every quoted pair
- rate[i, j] = rate[i, k] * rate[k, j] where the left side is unknown
  and both legs are known

The closure is not an arbitrage check. If two quote chains imply
different crosses, the first one completed under the fixed iteration
order (intermediate currency outermost, indices in discovery order) wins.
"""

import logging
from typing import Dict, Iterable, List, Tuple

import numpy as np

from .conventions import validate_ccy
from .errors import MarketDataError, NotFoundError

logger = logging.getLogger(__name__)


class FXRateMatrix:
    """
    Growable FX rate table indexed by currency code.

    Unknown entries are NaN. Currencies get a dense index in the order
    they are first seen.
    """

    def __init__(self):
        self._index: Dict[str, int] = {}
        self._rates = np.full((0, 0), np.nan)

    @classmethod
    def from_quotes(cls, quotes: Iterable[Tuple[str, str, float]]) -> "FXRateMatrix":
        """
        Build and close a matrix from (base, quote, rate) triples.

        Args:
            quotes: Direct quotes, one unit of base priced in quote

        Returns:
            Closed FXRateMatrix
        """
        matrix = cls()
        for base, quote, rate in quotes:
            matrix.set_quote(base, quote, rate)
        matrix.close()
        return matrix

    @property
    def currencies(self) -> List[str]:
        """Currencies in index order."""
        return sorted(self._index, key=self._index.get)

    @property
    def rates(self) -> np.ndarray:
        """Copy of the underlying table."""
        return self._rates.copy()

    def index_of(self, ccy: str) -> int:
        try:
            return self._index[ccy]
        except KeyError:
            raise NotFoundError(f"Currency {ccy} is unknown to the FX matrix") from None

    def add_currency(self, ccy: str) -> int:
        """Index of ccy, growing the table if it is new."""
        if ccy in self._index:
            return self._index[ccy]

        validate_ccy(ccy)
        idx = len(self._index)
        self._index[ccy] = idx
        self._rates = np.pad(self._rates, ((0, 1), (0, 1)), constant_values=np.nan)
        self._rates[idx, idx] = 1.0
        return idx

    def set_quote(self, base: str, quote: str, rate: float) -> None:
        """
        Seed a direct quote and its reciprocal.

        Raises:
            MarketDataError: If the rate is not positive or base == quote
        """
        if base == quote:
            raise MarketDataError(f"FX quote {base}.{quote} refers to a single currency")
        if not rate > 0:
            raise MarketDataError(f"FX quote {base}.{quote} must be positive, got {rate}")

        i = self.add_currency(base)
        j = self.add_currency(quote)
        self._rates[i, j] = rate
        self._rates[j, i] = 1.0 / rate

    def close(self) -> None:
        """Fill every pair reachable through one or more hops."""
        n = len(self._index)
        for k in range(n):
            via_k = np.outer(self._rates[:, k], self._rates[k, :])
            fill = np.isnan(self._rates) & ~np.isnan(via_k)
            self._rates[fill] = via_k[fill]
        logger.debug("Closed FX matrix over %d currencies", n)

    def rate(self, base: str, quote: str) -> float:
        """
        Price of one unit of base in quote.

        Raises:
            NotFoundError: If either currency is unknown or the pair is
                not connected by any chain of quotes
        """
        value = self._rates[self.index_of(base), self.index_of(quote)]
        if np.isnan(value) or value <= 0:
            raise NotFoundError(f"FX spot {base}.{quote} is not available")
        return float(value)

    def copy(self) -> "FXRateMatrix":
        other = FXRateMatrix()
        other._index = dict(self._index)
        other._rates = self._rates.copy()
        return other

    def __contains__(self, ccy: str) -> bool:
        return ccy in self._index

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        return f"FXRateMatrix(currencies={self.currencies})"


__all__ = ["FXRateMatrix"]
