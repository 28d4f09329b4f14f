"""
Unit tests for the serial-day calendar.
"""

from datetime import date, timedelta

import pytest

from ratesfx.dates import (
    Date,
    FIRST_YEAR,
    LAST_YEAR,
    days_in_month,
    difference,
    is_leap_year,
    is_valid_date,
    time_frac,
)
from ratesfx.errors import InvalidDateError


class TestLeapYears:
    """Tests for the Gregorian leap-year rule."""

    def test_divisible_by_four(self):
        assert is_leap_year(2016)
        assert not is_leap_year(2017)

    def test_centuries(self):
        assert not is_leap_year(1900)
        assert not is_leap_year(2100)
        assert is_leap_year(2000)

    def test_days_in_february(self):
        assert days_in_month(2000, 2) == 29
        assert days_in_month(1900, 2) == 28
        assert days_in_month(2016, 2) == 29

    def test_days_in_month_bad_month(self):
        with pytest.raises(InvalidDateError):
            days_in_month(2017, 13)


class TestDateConstruction:
    """Tests for Date factories."""

    def test_epoch(self):
        assert Date.from_ymd(1900, 1, 1).serial == 0

    def test_serial_matches_python_dates(self):
        d = Date.from_ymd(2017, 8, 5)
        assert d.serial == (date(2017, 8, 5) - date(1900, 1, 1)).days

    def test_last_supported_day(self):
        assert Date.from_ymd(2199, 12, 31).serial == 109572

    @pytest.mark.parametrize("ymd", [
        (2021, 2, 30),
        (1899, 1, 1),
        (2200, 1, 1),
        (2021, 13, 1),
        (2021, 0, 1),
        (2021, 4, 31),
        (2021, 1, 0),
        (1900, 2, 29),
        (2100, 2, 29),
    ])
    def test_invalid_dates_rejected(self, ymd):
        assert not is_valid_date(*ymd)
        with pytest.raises(InvalidDateError):
            Date.from_ymd(*ymd)

    def test_leap_day_accepted(self):
        d = Date.from_ymd(2000, 2, 29)
        assert d.to_ymd() == (2000, 2, 29)

    def test_from_serial_no_check(self):
        assert Date.from_serial(-5).serial == -5

    def test_to_ymd_out_of_range(self):
        with pytest.raises(InvalidDateError):
            Date.from_serial(-1).to_ymd()
        with pytest.raises(InvalidDateError):
            Date.from_serial(109573).to_ymd()

    def test_from_date(self):
        d = Date.from_date(date(2017, 8, 5))
        assert d == Date.from_ymd(2017, 8, 5)
        assert d.to_date() == date(2017, 8, 5)


class TestDateRoundTrip:
    """Exhaustive calendar checks over the supported range."""

    def test_every_day_round_trips(self):
        current = date(FIRST_YEAR, 1, 1)
        end = date(LAST_YEAR - 1, 12, 31)
        expected_serial = 0
        one_day = timedelta(days=1)

        while current <= end:
            d = Date.from_ymd(current.year, current.month, current.day)
            assert d.serial == expected_serial
            assert d.to_ymd() == (current.year, current.month, current.day)
            current += one_day
            expected_serial += 1

    def test_leap_boundaries_consecutive(self):
        for year in (1904, 2000, 2096, 2196):
            feb28 = Date.from_ymd(year, 2, 28)
            feb29 = Date.from_ymd(year, 2, 29)
            mar1 = Date.from_ymd(year, 3, 1)
            assert feb29 - feb28 == 1
            assert mar1 - feb29 == 1

        assert Date.from_ymd(1900, 3, 1) - Date.from_ymd(1900, 2, 28) == 1
        assert Date.from_ymd(2100, 3, 1) - Date.from_ymd(2100, 2, 28) == 1


class TestDateStrings:
    """Tests for display and persisted forms."""

    def test_display_form(self):
        d = Date.from_ymd(2017, 8, 5)
        assert str(d) == "5-8-2017"
        assert d.to_string() == "5-8-2017"

    def test_persisted_form(self):
        d = Date.from_ymd(2017, 8, 5)
        assert d.to_string(pretty=False) == "20170805"
        assert Date.from_string("20170805") == d

    @pytest.mark.parametrize("text", ["2017-08-05", "201708", "2017080A", "20170230"])
    def test_bad_strings(self, text):
        with pytest.raises(InvalidDateError):
            Date.from_string(text)


class TestDateArithmetic:
    """Tests for date arithmetic and ordering."""

    def test_add_and_subtract_days(self):
        d = Date.from_ymd(2017, 12, 31)
        assert d + 1 == Date.from_ymd(2018, 1, 1)
        assert 1 + d == Date.from_ymd(2018, 1, 1)
        assert d - 365 == Date.from_ymd(2016, 12, 31)

    def test_difference_is_signed(self):
        d1 = Date.from_ymd(2017, 8, 5)
        d2 = Date.from_ymd(2017, 8, 15)
        assert difference(d1, d2) == 10
        assert difference(d2, d1) == -10
        assert d2 - d1 == 10

    def test_ordering(self):
        d1 = Date.from_ymd(2017, 8, 5)
        d2 = d1 + 1
        assert d1 < d2
        assert max(d2, d1) == d2
        assert sorted([d2, d1]) == [d1, d2]

    def test_time_frac(self):
        d = Date.from_ymd(2017, 8, 5)
        assert time_frac(d, d + 365) == 1.0
        assert time_frac(d, d) == 0.0
        assert time_frac(d + 73, d) == -0.2

    def test_hashable(self):
        d = Date.from_ymd(2017, 8, 5)
        assert {d: 1}[Date.from_string("20170805")] == 1
