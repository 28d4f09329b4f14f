"""
Fixing data source.

Historical fixings keyed by exact (name, date). File records are
whitespace-delimited triples with the date in persisted form:

    FX.SPOT.EUR.USD 20170804 1.1213

A duplicated (name, date) pair is fatal.
"""

import logging
import math
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import pandas as pd

from ..dates import Date
from ..errors import MarketDataError, NotFoundError

logger = logging.getLogger(__name__)


class FixingDataSource:
    """Read-only store of settled fixings."""

    def __init__(self, data: Optional[Dict[str, Dict[Date, float]]] = None):
        self._data: Dict[str, Dict[Date, float]] = {
            name: dict(series) for name, series in (data or {}).items()
        }

    def add(self, name: str, fixing_date: Date, value: float) -> None:
        """
        Record a fixing.

        Raises:
            MarketDataError: If the (name, date) pair already exists
        """
        series = self._data.setdefault(name, {})
        if fixing_date in series:
            raise MarketDataError(f"Duplicated fixing: {name} {fixing_date.to_string(pretty=False)}")
        series[fixing_date] = float(value)

    @classmethod
    def from_file(cls, filepath: Union[str, Path]) -> "FixingDataSource":
        """Load '<name> <YYYYMMDD> <value>' records from a text file."""
        path = Path(filepath)
        if not path.exists():
            raise MarketDataError(f"Could not open file {path}")

        try:
            df = pd.read_csv(
                path,
                sep=r"\s+",
                header=None,
                names=["name", "date", "value"],
                dtype={"name": str, "date": str},
                comment="#",
            )
        except pd.errors.EmptyDataError:
            return cls()
        except pd.errors.ParserError as e:
            raise MarketDataError(f"Could not parse {path}: {e}") from e

        values = pd.to_numeric(df["value"], errors="coerce")
        if values.isna().any():
            bad = df.loc[values.isna(), "name"].iloc[0]
            raise MarketDataError(f"Invalid fixing value for {bad}")

        source = cls()
        for name, date_str, value in zip(df["name"], df["date"], values):
            source.add(name, Date.from_string(date_str), value)

        logger.debug("Loaded %d fixings from %s", len(df), path)
        return source

    def get(self, name: str, fixing_date: Date) -> float:
        """
        Fixing value for (name, date).

        Raises:
            NotFoundError: If no such fixing exists
        """
        value, found = self.lookup(name, fixing_date)
        if not found:
            raise NotFoundError(f"Fixing not found: {name},{fixing_date.to_string()}")
        return value

    def lookup(self, name: str, fixing_date: Date) -> Tuple[float, bool]:
        """(value, True) if present, else (nan, False)."""
        series = self._data.get(name)
        if series is not None and fixing_date in series:
            return series[fixing_date], True
        return math.nan, False

    def __len__(self) -> int:
        return sum(len(s) for s in self._data.values())


__all__ = ["FixingDataSource"]
