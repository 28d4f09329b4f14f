#!/usr/bin/env python
"""
Portfolio Risk Script

Runs the full workflow:
1. Load the portfolio (and round-trip it through CSV)
2. Build a Market from the risk-factor file
3. Price every trade
4. Disconnect the market and list the risk factors used
5. Bucketed PV01, parallel PV01 and FX delta

Usage:
    python run_risk.py -p portfolio.csv -f risk_factors.txt [-x fixings.txt] [-b USD] [--ir-bump 0.0001] [--fx-bump 0.001]
"""

import argparse
import logging
import sys
import tempfile
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ratesfx import (
    Date,
    FixingDataSource,
    Market,
    MarketDataSource,
    RiskConventions,
    RiskEngineError,
    SensitivityEngine,
    compute_prices,
    get_pricers,
    load_portfolio,
    save_portfolio,
)
from ratesfx.reporting import (
    ReportFormatter,
    export_to_csv,
    price_vector_frame,
    sensitivity_frame,
)

DEFAULT_VALUATION_DATE = "20170805"


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Portfolio PV and risk")
    parser.add_argument("-p", "--portfolio", required=True, help="Portfolio CSV file")
    parser.add_argument("-f", "--risk-factors", required=True, help="Risk factor file")
    parser.add_argument("-x", "--fixings", default=None, help="Fixings file")
    parser.add_argument("-b", "--base-ccy", default="USD", help="Reporting currency")
    parser.add_argument("--ir-bump", type=float, default=None, help="Absolute rate bump (default 1bp)")
    parser.add_argument("--fx-bump", type=float, default=None, help="Relative FX spot bump (default 0.1%%)")
    parser.add_argument(
        "-d", "--date",
        default=DEFAULT_VALUATION_DATE,
        help="Valuation date as YYYYMMDD"
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Also write PV and sensitivities as CSV to this directory"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> None:
    # unset flags keep the RiskConventions defaults
    conventions = RiskConventions.from_dict({k: v for k, v in vars(args).items() if v is not None})
    fmt = ReportFormatter()

    # Save and reload to exercise the persisted format
    portfolio = load_portfolio(args.portfolio)
    with tempfile.TemporaryDirectory() as tmp:
        tmp_file = Path(tmp) / "portfolio.csv"
        save_portfolio(tmp_file, portfolio)
        portfolio = load_portfolio(tmp_file)

    print("Portfolio:")
    for i, trade in enumerate(portfolio):
        print(f"{i:>5}: {trade}")
    print()

    pricers = get_pricers(portfolio, conventions.base_ccy)

    source = MarketDataSource.from_file(args.risk_factors)
    fixings = FixingDataSource.from_file(args.fixings) if args.fixings else None

    today = Date.from_string(args.date)
    market = Market(source, today, conventions.quote_ccy)

    prices = compute_prices(pricers, market, fixings)
    print(fmt.format_price_vector("PV", prices))

    # No more fetching from the source from here on
    market.disconnect()
    print(fmt.format_risk_factors(dict(market.risk_factors)))

    engine = SensitivityEngine(market, pricers, fixings, conventions)
    results = engine.pv01_bucketed() + engine.pv01_parallel() + engine.fx_delta()
    for result in results:
        print(fmt.format_price_vector(result.title, result.values))

    if args.output_dir:
        trade_ids = [trade.trade_id for trade in portfolio]
        files = export_to_csv(
            {
                "pv": price_vector_frame(prices, trade_ids),
                "sensitivities": sensitivity_frame(results),
            },
            args.output_dir,
        )
        for f in files:
            print(f"  Saved: {f}")


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        run(args)
    except RiskEngineError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
