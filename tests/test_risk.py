"""
Unit tests for portfolio pricing and bump-and-revalue sensitivities.
"""

import logging
import math

import pytest

from ratesfx.conventions import RiskConventions
from ratesfx.data import MarketDataSource
from ratesfx.dates import Date
from ratesfx.market import Market
from ratesfx.portfolio import FXForward, Payment
from ratesfx.pricers import get_pricers
from ratesfx.risk import (
    BASIS_POINT,
    BumpSpec,
    BumpType,
    SensitivityEngine,
    TradeValue,
    central_difference,
    compute_fx_delta,
    compute_prices,
    compute_pv01_bucketed,
    compute_pv01_parallel,
    fx_delta_buckets,
    portfolio_total,
)

TODAY = Date.from_ymd(2017, 8, 5)


@pytest.fixture
def flat_market():
    return Market(MarketDataSource({"IR.USD": 0.02}), TODAY)


@pytest.fixture
def multi_ccy_market():
    source = MarketDataSource({
        "IR.USD": 0.02,
        "IR.1Y.EUR": 0.01,
        "IR.2Y.EUR": 0.015,
        "IR.5Y.EUR": 0.02,
        "IR.GBP": 0.005,
        "FX.SPOT.EUR": 1.18,
        "FX.SPOT.GBP": 1.30,
    })
    return Market(source, TODAY)


@pytest.fixture
def ten_trades():
    """Ten trades, the sixth of which pays before the anchor date."""
    trades = [Payment("USD", 100_000 * (i + 1), TODAY + 30 * (i + 1)) for i in range(10)]
    trades[5] = Payment("USD", 600_000, TODAY - 10)
    return trades


class TestBumpSpec:
    """Tests for bump definitions."""

    def test_additive_step(self):
        spec = BumpSpec("IR.USD", ("IR.USD",), 0.0001)
        base = {"IR.USD": 0.02}
        assert spec.step(base) == 0.0001
        assert spec.shocked(base, +1) == [("IR.USD", pytest.approx(0.0201))]
        assert spec.shocked(base, -1) == [("IR.USD", pytest.approx(0.0199))]

    def test_multiplicative_step(self):
        spec = BumpSpec("FX.SPOT.EUR", ("FX.SPOT.EUR",), 0.001, BumpType.MULTIPLICATIVE)
        base = {"FX.SPOT.EUR": 1.2}
        assert spec.step(base) == pytest.approx(0.0012)
        assert spec.shocked(base, +1)[0][1] == pytest.approx(1.2012)

    def test_validation(self):
        with pytest.raises(ValueError):
            BumpSpec("empty", (), 0.0001)
        with pytest.raises(ValueError):
            BumpSpec("IR.USD", ("IR.USD",), -0.0001)
        with pytest.raises(ValueError):
            BumpSpec("fx", ("FX.SPOT.EUR", "FX.SPOT.GBP"), 0.001, BumpType.MULTIPLICATIVE)


class TestPortfolioPricing:
    """Tests for per-trade failure isolation."""

    def test_one_failure_in_ten(self, flat_market, ten_trades):
        values = compute_prices(get_pricers(ten_trades, "USD"), flat_market)

        assert len(values) == 10
        assert sum(tv.is_valid for tv in values) == 9
        assert math.isnan(values[5].value)
        assert values[5].error.startswith("StaleRequestError:")

        summary = portfolio_total(values)
        assert summary.total == pytest.approx(sum(tv.value for i, tv in enumerate(values) if i != 5))
        assert summary.failures == [(5, values[5].error)]
        assert summary.has_failures

    def test_failure_logged(self, flat_market, ten_trades, caplog):
        with caplog.at_level(logging.WARNING, logger="ratesfx.risk.pricing"):
            compute_prices(get_pricers(ten_trades, "USD"), flat_market)
        assert any("StaleRequestError" in r.getMessage() for r in caplog.records)

    def test_empty_total(self):
        summary = portfolio_total([])
        assert summary.total == 0.0
        assert not summary.has_failures


class TestCentralDifference:
    """Tests for the finite-difference estimator."""

    def test_value(self):
        tv = central_difference(TradeValue(3.0), TradeValue(1.0), 0.5)
        assert tv.value == pytest.approx(2.0)
        assert tv.error is None

    def test_unit_scaling(self):
        tv = central_difference(TradeValue(3.0), TradeValue(1.0), 0.5, unit=BASIS_POINT)
        assert tv.value == pytest.approx(2.0 * BASIS_POINT)

    def test_failure_carried(self):
        tv = central_difference(TradeValue(1.0), TradeValue.failure("NotFoundError: x"), 0.1)
        assert math.isnan(tv.value)
        assert tv.error == "NotFoundError: x"


class TestParallelPV01:
    """Tests for parallel PV01."""

    def test_single_payment_example(self, flat_market):
        pricers = get_pricers([Payment("USD", 1_000_000, TODAY + 365)], "USD")
        assert compute_prices(pricers, flat_market)[0].value == pytest.approx(980_198.67, abs=0.01)

        results = compute_pv01_parallel(pricers, flat_market)
        assert len(results) == 1
        assert results[0].bucket == "IR.USD"
        assert results[0].title == "PV01 parallel IR.USD"
        assert results[0].values[0].value == pytest.approx(-98.02, abs=0.01)

    def test_bump_size_does_not_change_units(self, flat_market):
        pricers = get_pricers([Payment("USD", 1_000_000, TODAY + 365)], "USD")
        conv = RiskConventions(ir_bump=0.001)
        results = compute_pv01_parallel(pricers, flat_market, conventions=conv)
        assert results[0].values[0].value == pytest.approx(-98.02, abs=0.01)

    def test_baseline_unaffected(self, flat_market):
        pricers = get_pricers([Payment("USD", 1_000_000, TODAY + 365)], "USD")
        before = compute_prices(pricers, flat_market)[0].value
        compute_pv01_parallel(pricers, flat_market)
        assert flat_market.risk_factors["IR.USD"] == 0.02
        assert compute_prices(pricers, flat_market)[0].value == before

    def test_parallel_equals_sum_of_buckets(self, multi_ccy_market):
        trades = [Payment("EUR", 1_000_000, TODAY + 500), Payment("EUR", -400_000, TODAY + 1500)]
        pricers = get_pricers(trades, "USD")

        parallel = {r.bucket: r for r in compute_pv01_parallel(pricers, multi_ccy_market)}
        bucketed = compute_pv01_bucketed(pricers, multi_ccy_market)

        eur_total = sum(r.total.total for r in bucketed if r.bucket.endswith(".EUR"))
        assert parallel["IR.EUR"].total.total == pytest.approx(eur_total, rel=1e-6)

    def test_failures_propagate(self, flat_market, ten_trades):
        results = compute_pv01_parallel(get_pricers(ten_trades, "USD"), flat_market)
        values = results[0].values
        assert math.isnan(values[5].value)
        assert values[5].error.startswith("StaleRequestError:")
        assert sum(tv.is_valid for tv in values) == 9
        assert all(tv.value < 0 for i, tv in enumerate(values) if i != 5)


class TestBucketedPV01:
    """Tests for PV01 per tenor."""

    def test_buckets_are_tenors(self, multi_ccy_market):
        pricers = get_pricers([Payment("EUR", 1_000_000, TODAY + 365)], "EUR")
        results = compute_pv01_bucketed(pricers, multi_ccy_market)
        assert [r.bucket for r in results] == ["IR.1Y.EUR", "IR.2Y.EUR", "IR.5Y.EUR"]

        one_year, two_year, five_year = (r.values[0].value for r in results)
        assert one_year == pytest.approx(-1_000_000 * math.exp(-0.01) * BASIS_POINT, rel=1e-6)
        assert two_year == pytest.approx(0.0, abs=1e-8)
        assert five_year == pytest.approx(0.0, abs=1e-8)

    def test_flat_currency_single_bucket(self, multi_ccy_market):
        pricers = get_pricers([Payment("GBP", 1_000_000, TODAY + 730)], "GBP")
        results = compute_pv01_bucketed(pricers, multi_ccy_market)
        assert [r.bucket for r in results] == ["IR.GBP"]
        assert results[0].values[0].value == pytest.approx(
            -1_000_000 * 2 * math.exp(-0.01) * BASIS_POINT, rel=1e-6
        )


class TestFXDelta:
    """Tests for FX delta."""

    def test_payment_delta(self, multi_ccy_market):
        pricers = get_pricers([Payment("EUR", 1_000_000, TODAY)], "USD")
        results = {r.bucket: r for r in compute_fx_delta(pricers, multi_ccy_market)}

        assert set(results) == {"FX.SPOT.EUR", "FX.SPOT.GBP"}
        assert results["FX.SPOT.EUR"].values[0].value == pytest.approx(1_000_000, rel=1e-9)
        assert results["FX.SPOT.GBP"].values[0].value == pytest.approx(0.0, abs=1e-6)

    def test_cross_forward_sees_both_spots(self, multi_ccy_market):
        trade = FXForward("EUR", "GBP", 1_000_000, 0.9, TODAY, TODAY)
        results = {r.bucket: r for r in compute_fx_delta(get_pricers([trade], "USD"), multi_ccy_market)}
        # PV = q * (S_eur / S_gbp - K) * S_gbp = q * (S_eur - K * S_gbp)
        assert results["FX.SPOT.EUR"].values[0].value == pytest.approx(1_000_000, rel=1e-9)
        assert results["FX.SPOT.GBP"].values[0].value == pytest.approx(-900_000, rel=1e-9)

    def test_qualified_spot_quote(self):
        source = MarketDataSource({"IR.USD": 0.02, "IR.EUR": 0.01, "FX.SPOT.EUR.USD": 1.18})
        pricers = get_pricers([Payment("EUR", 1_000_000, TODAY)], "USD")
        results = compute_fx_delta(pricers, Market(source, TODAY))

        assert [r.bucket for r in results] == ["FX.SPOT.EUR"]
        assert results[0].values[0].value == pytest.approx(1_000_000, rel=1e-9)

    def test_usd_based_spot_quote(self):
        source = MarketDataSource({"IR.USD": 0.02, "IR.JPY": 0.001, "FX.SPOT.USD.JPY": 110.0})
        pricers = get_pricers([Payment("JPY", 110_000_000, TODAY)], "USD")
        results = compute_fx_delta(pricers, Market(source, TODAY))

        assert [r.bucket for r in results] == ["FX.SPOT.USD.JPY"]
        # PV = q / S
        assert results[0].values[0].value == pytest.approx(-110_000_000 / 110.0 ** 2, rel=1e-5)

    def test_cross_only_currency_has_no_bucket(self):
        market = Market(MarketDataSource({"FX.SPOT.EUR": 1.18, "FX.SPOT.GBP.EUR": 1.1}), TODAY)
        assert [spec.label for spec in fx_delta_buckets(market)] == ["FX.SPOT.EUR"]


class TestSensitivityEngine:
    """Tests for engine behaviour across runs."""

    def test_disconnected_market(self, multi_ccy_market):
        pricers = get_pricers([Payment("EUR", 1_000_000, TODAY + 365)], "USD")
        expected = compute_pv01_bucketed(pricers, multi_ccy_market)

        compute_prices(pricers, multi_ccy_market)
        multi_ccy_market.disconnect()
        engine = SensitivityEngine(multi_ccy_market, pricers)
        actual = engine.pv01_bucketed()

        assert [r.bucket for r in actual] == [r.bucket for r in expected]
        for a, e in zip(actual, expected):
            assert a.values[0].value == pytest.approx(e.values[0].value)

    def test_runs_are_repeatable(self, multi_ccy_market):
        pricers = get_pricers([Payment("EUR", 1_000_000, TODAY + 365)], "USD")
        engine = SensitivityEngine(multi_ccy_market, pricers)
        first = [r.values[0].value for r in engine.fx_delta()]
        second = [r.values[0].value for r in engine.fx_delta()]
        assert first == second

    def test_run_logged(self, flat_market, caplog):
        pricers = get_pricers([Payment("USD", 1.0, TODAY + 1)], "USD")
        with caplog.at_level(logging.INFO, logger="ratesfx.risk.sensitivities"):
            SensitivityEngine(flat_market, pricers).pv01_parallel()
        assert any("PV01 parallel" in r.getMessage() for r in caplog.records)
