"""
Serial-day calendar for valuation arithmetic.

Provides:
- Date: immutable day-serial date, serial 0 = 1-Jan-1900
- Leap-year aware conversion between (year, month, day) and serial
- time_frac: ACT/365 year fraction used by every curve

Supported calendar years are [1900, 2200). Two string forms exist:
- display form "D-M-YYYY" (e.g. "5-8-2017")
- persisted form "YYYYMMDD" (e.g. "20170805"), used by files on disk
"""

from dataclasses import dataclass
from datetime import date
from typing import Tuple

import numpy as np

from .errors import InvalidDateError


FIRST_YEAR = 1900
LAST_YEAR = 2200  # exclusive

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

# Days from 1-Jan to 1-M, normal and leap year
_DAYS_YTD = np.array([0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334])
_DAYS_YTD_LEAP = np.array([0, 31, 60, 91, 121, 152, 182, 213, 244, 274, 305, 335])


def is_leap_year(year: int) -> bool:
    """Gregorian rule: divisible by 4, not by 100 unless by 400."""
    return (year % 4 == 0 and year % 100 != 0) or (year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    """Return number of days in a month."""
    if month < 1 or month > 12:
        raise InvalidDateError(f"Invalid month: {month}")
    if month == 2 and is_leap_year(year):
        return 29
    return _DAYS_IN_MONTH[month - 1]


def is_valid_date(year: int, month: int, day: int) -> bool:
    """Check a (year, month, day) triple against the supported calendar."""
    if year < FIRST_YEAR or year >= LAST_YEAR:
        return False
    if month < 1 or month > 12:
        return False
    return 1 <= day <= days_in_month(year, month)


def _build_year_starts() -> np.ndarray:
    """Serial of 1-Jan for every supported year, plus the end sentinel."""
    lengths = [366 if is_leap_year(y) else 365 for y in range(FIRST_YEAR, LAST_YEAR)]
    return np.concatenate(([0], np.cumsum(lengths)))


# _YEAR_STARTS[i] = serial of 1-Jan-(1900 + i); last entry is 1-Jan-2200
_YEAR_STARTS = _build_year_starts()


@dataclass(frozen=True, order=True)
class Date:
    """
    Calendar date stored as a day serial.

    Use the factory methods rather than the raw constructor:
    from_ymd validates the triple, from_serial accepts any integer.

    Attributes:
        serial: Days elapsed since 1-Jan-1900
    """
    serial: int

    @classmethod
    def from_ymd(cls, year: int, month: int, day: int) -> "Date":
        """
        Build a date from year, month and day.

        Raises:
            InvalidDateError: If the year is outside [1900, 2200) or the
                month/day is not valid for that year
        """
        if not is_valid_date(year, month, day):
            raise InvalidDateError(f"Invalid date {year} {month} {day}")
        ytd = _DAYS_YTD_LEAP if is_leap_year(year) else _DAYS_YTD
        serial = int(_YEAR_STARTS[year - FIRST_YEAR]) + int(ytd[month - 1]) + day - 1
        return cls(serial)

    @classmethod
    def from_serial(cls, serial: int) -> "Date":
        """Build a date from a day serial. No validity check."""
        return cls(int(serial))

    @classmethod
    def from_string(cls, text: str) -> "Date":
        """
        Parse the persisted form "YYYYMMDD".

        Raises:
            InvalidDateError: If the text is not eight digits or not a valid date
        """
        text = str(text).strip()
        if len(text) != 8 or not text.isdigit():
            raise InvalidDateError(f"Invalid date string '{text}', expected YYYYMMDD")
        return cls.from_ymd(int(text[:4]), int(text[4:6]), int(text[6:]))

    @classmethod
    def from_date(cls, d: date) -> "Date":
        """Convert a datetime.date."""
        return cls.from_ymd(d.year, d.month, d.day)

    def to_ymd(self) -> Tuple[int, int, int]:
        """
        Decompose into (year, month, day).

        Locates the year whose cumulative day bracket contains the serial,
        then the month within that year.
        """
        if self.serial < 0 or self.serial >= _YEAR_STARTS[-1]:
            raise InvalidDateError(f"Serial {self.serial} is outside the supported calendar")

        year_idx = int(np.searchsorted(_YEAR_STARTS, self.serial, side="right")) - 1
        year = FIRST_YEAR + year_idx
        days_left = self.serial - int(_YEAR_STARTS[year_idx])

        ytd = _DAYS_YTD_LEAP if is_leap_year(year) else _DAYS_YTD
        month_idx = int(np.searchsorted(ytd, days_left, side="right")) - 1
        day = days_left - int(ytd[month_idx]) + 1
        return year, month_idx + 1, day

    @property
    def year(self) -> int:
        return self.to_ymd()[0]

    @property
    def month(self) -> int:
        return self.to_ymd()[1]

    @property
    def day(self) -> int:
        return self.to_ymd()[2]

    def to_date(self) -> date:
        """Convert to datetime.date."""
        return date(*self.to_ymd())

    def to_string(self, pretty: bool = True) -> str:
        """
        Format the date.

        Args:
            pretty: Display form "D-M-YYYY" if True, else persisted "YYYYMMDD"
        """
        y, m, d = self.to_ymd()
        if pretty:
            return f"{d}-{m}-{y}"
        return f"{y:04d}{m:02d}{d:02d}"

    def __str__(self) -> str:
        return self.to_string(pretty=True)

    def __add__(self, days: int) -> "Date":
        if isinstance(days, bool) or not isinstance(days, (int, np.integer)):
            return NotImplemented
        return Date(self.serial + int(days))

    __radd__ = __add__

    def __sub__(self, other):
        if isinstance(other, Date):
            return self.serial - other.serial
        if isinstance(other, bool) or not isinstance(other, (int, np.integer)):
            return NotImplemented
        return Date(self.serial - int(other))


def difference(d1: Date, d2: Date) -> int:
    """Signed day count d2 - d1."""
    return d2.serial - d1.serial


def time_frac(d1: Date, d2: Date) -> float:
    """ACT/365 year fraction from d1 to d2 (negative if d2 precedes d1)."""
    return (d2 - d1) / 365.0


__all__ = [
    "Date",
    "FIRST_YEAR",
    "LAST_YEAR",
    "is_leap_year",
    "days_in_month",
    "is_valid_date",
    "difference",
    "time_frac",
]
