"""
Market data source.

Raw risk-factor quotes keyed by name. The file format is one
whitespace-delimited record per line:

    IR.USD          0.0215
    IR.3M.EUR       -0.0031
    FX.SPOT.EUR     1.1213

A name appearing twice in one load is fatal. Lines starting with '#'
are ignored.
"""

import logging
import math
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union

import pandas as pd

from ..conventions import compile_pattern
from ..errors import MarketDataError, NotFoundError

logger = logging.getLogger(__name__)


class MarketDataSource:
    """
    Read-only store of raw market quotes.

    The Market pulls from here on cache misses only; pricers never
    talk to the source directly.
    """

    def __init__(self, data: Optional[Mapping[str, float]] = None):
        self._data: Dict[str, float] = {str(k): float(v) for k, v in (data or {}).items()}

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "MarketDataSource":
        """
        Build from a DataFrame with 'name' and 'value' columns.

        Raises:
            MarketDataError: On duplicated names or non-numeric values
        """
        dupes = df.loc[df["name"].duplicated(), "name"]
        if not dupes.empty:
            raise MarketDataError(f"Duplicated risk factor: {dupes.iloc[0]}")

        values = pd.to_numeric(df["value"], errors="coerce")
        bad = df.loc[values.isna(), "name"]
        if not bad.empty:
            raise MarketDataError(f"Invalid value for risk factor: {bad.iloc[0]}")

        return cls(dict(zip(df["name"], values)))

    @classmethod
    def from_file(cls, filepath: Union[str, Path]) -> "MarketDataSource":
        """
        Load '<name> <value>' records from a text file.

        Raises:
            MarketDataError: If the file is missing or corrupt
        """
        path = Path(filepath)
        if not path.exists():
            raise MarketDataError(f"Could not open file {path}")

        try:
            df = pd.read_csv(
                path,
                sep=r"\s+",
                header=None,
                names=["name", "value"],
                dtype={"name": str},
                comment="#",
            )
        except pd.errors.EmptyDataError:
            df = pd.DataFrame(columns=["name", "value"])
        except pd.errors.ParserError as e:
            raise MarketDataError(f"Could not parse {path}: {e}") from e

        source = cls.from_frame(df)
        logger.debug("Loaded %d risk factors from %s", len(source), path)
        return source

    def get(self, name: str) -> float:
        """
        Value of a risk factor.

        Raises:
            NotFoundError: If the name is absent
        """
        try:
            return self._data[name]
        except KeyError:
            raise NotFoundError(f"Market data not found: {name}") from None

    def lookup(self, name: str) -> Tuple[float, bool]:
        """(value, True) if present, else (nan, False). Never raises."""
        if name in self._data:
            return self._data[name], True
        return math.nan, False

    def match(self, pattern: str) -> List[str]:
        """All names fully matching a regular expression, sorted."""
        regex = compile_pattern(pattern)
        return sorted(name for name in self._data if regex.fullmatch(name))

    def names(self) -> List[str]:
        return sorted(self._data)

    def __contains__(self, name: str) -> bool:
        return name in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __repr__(self) -> str:
        return f"MarketDataSource(n={len(self._data)})"


__all__ = ["MarketDataSource"]
