"""
Reporting module.

Provides:
- Console formatting of price vectors and sensitivities
- pandas DataFrame views and CSV export
"""

from .risk_report import (
    ReportFormatter,
    export_to_csv,
    format_price_vector,
    price_vector_frame,
    print_price_vector,
    sensitivity_frame,
    sensitivity_summary,
)

__all__ = [
    "ReportFormatter",
    "price_vector_frame",
    "sensitivity_frame",
    "sensitivity_summary",
    "export_to_csv",
    "format_price_vector",
    "print_price_vector",
]
