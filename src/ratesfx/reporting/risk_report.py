"""
Risk reporting functionality.

Provides formatted console output and CSV export for:
- Price vectors (PV per trade, with portfolio total and failures)
- Sensitivity results (parallel PV01, bucketed PV01, FX delta)
"""

import math
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import pandas as pd

from ..risk.pricing import TradeValue, portfolio_total
from ..risk.sensitivities import SensitivityResult


class ReportFormatter:
    """
    Formats price vectors for console output.
    """

    def __init__(
        self,
        width: int = 60,
        precision: int = 2,
        thousands_sep: bool = True
    ):
        """
        Initialize formatter.

        Args:
            width: Console width
            precision: Decimal precision for floats
            thousands_sep: Whether to use thousands separator
        """
        self.width = width
        self.precision = precision
        self.thousands_sep = thousands_sep

    def format_number(self, value: float, precision: Optional[int] = None) -> str:
        """Format a number for display; nan prints as 'nan'."""
        if math.isnan(value):
            return "nan"
        p = precision if precision is not None else self.precision
        if self.thousands_sep:
            return f"{value:,.{p}f}"
        return f"{value:.{p}f}"

    def rule(self) -> str:
        return "=" * self.width

    def header(self, title: str) -> str:
        """Create a header block."""
        return f"{self.rule()}\n{title}:\n{self.rule()}"

    def format_price_vector(self, name: str, values: Sequence[TradeValue]) -> str:
        """
        Format a price vector: header, total, failures, then one line per trade.

        Args:
            name: Vector title, e.g. "PV" or "PV01 parallel IR.USD"
            values: One TradeValue per trade
        """
        summary = portfolio_total(values)
        lines = [
            self.header(name),
            f"Total: {self.format_number(summary.total)}",
        ]
        if summary.has_failures:
            lines.append(f"Errors: {summary.failed_count}")
        lines.append(self.rule())

        for i, tv in enumerate(values):
            line = f"{i:>5}: {self.format_number(tv.value)}"
            if not tv.is_valid:
                line += f"  ({tv.error})"
            lines.append(line)

        lines.append(self.rule())
        return "\n".join(lines) + "\n"

    def format_risk_factors(self, risk_factors: Dict[str, float]) -> str:
        """List risk factors and values, sorted by name."""
        lines = ["Risk factors:"]
        for name in sorted(risk_factors):
            lines.append(f"  {name:<20} {risk_factors[name]:.6g}")
        return "\n".join(lines) + "\n"


def price_vector_frame(
    values: Sequence[TradeValue],
    trade_ids: Optional[Sequence[Optional[str]]] = None,
) -> pd.DataFrame:
    """
    Price vector as a DataFrame with columns trade, trade_id, value, error.

    Args:
        values: One TradeValue per trade
        trade_ids: Optional identifiers in the same order
    """
    ids = list(trade_ids) if trade_ids is not None else [None] * len(values)
    if len(ids) != len(values):
        raise ValueError(f"Got {len(ids)} trade ids for {len(values)} values")

    return pd.DataFrame({
        "trade": range(len(values)),
        "trade_id": ids,
        "value": [tv.value for tv in values],
        "error": [tv.error for tv in values],
    })


def sensitivity_frame(results: Sequence[SensitivityResult]) -> pd.DataFrame:
    """
    Sensitivity results in long form.

    Columns: measure, bucket, trade, value, error. One row per
    (bucket, trade).
    """
    rows = []
    for result in results:
        for i, tv in enumerate(result.values):
            rows.append({
                "measure": result.measure,
                "bucket": result.bucket,
                "trade": i,
                "value": tv.value,
                "error": tv.error,
            })
    return pd.DataFrame(rows, columns=["measure", "bucket", "trade", "value", "error"])


def sensitivity_summary(results: Sequence[SensitivityResult]) -> pd.DataFrame:
    """Portfolio total and failure count per bucket."""
    rows = []
    for result in results:
        total = result.total
        rows.append({
            "measure": result.measure,
            "bucket": result.bucket,
            "total": total.total,
            "failed": total.failed_count,
        })
    return pd.DataFrame(rows, columns=["measure", "bucket", "total", "failed"])


def export_to_csv(
    frames: Dict[str, pd.DataFrame],
    output_dir: Union[str, Path],
    prefix: str = "risk"
) -> List[str]:
    """
    Export report frames to CSV files.

    Creates one CSV per frame, named <prefix>_<title>.csv.

    Args:
        frames: {title: DataFrame}
        output_dir: Output directory, created if missing
        prefix: Filename prefix

    Returns:
        List of created file paths
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    created_files = []
    for title, df in frames.items():
        safe_title = title.replace(" ", "_").replace("/", "_")
        filename = output_path / f"{prefix}_{safe_title}.csv"
        df.to_csv(filename, index=False)
        created_files.append(str(filename))

    return created_files


def format_price_vector(
    name: str,
    values: Sequence[TradeValue],
    formatter: Optional[ReportFormatter] = None
) -> str:
    """Console text for one price vector."""
    fmt = formatter or ReportFormatter()
    return fmt.format_price_vector(name, values)


def print_price_vector(
    name: str,
    values: Sequence[TradeValue],
    formatter: Optional[ReportFormatter] = None
):
    """Print one price vector to console."""
    print(format_price_vector(name, values, formatter))


__all__ = [
    "ReportFormatter",
    "price_vector_frame",
    "sensitivity_frame",
    "sensitivity_summary",
    "export_to_csv",
    "format_price_vector",
    "print_price_vector",
]
