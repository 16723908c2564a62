"""Date manipulation utilities"""

import math
from datetime import date, datetime, time, timedelta
from typing import Tuple

DAYS_PER_YEAR = 365.25


def add_years(from_date: date, years: int) -> date:
    """Shift a date by whole calendar years; Feb 29 rolls to Mar 1 in non-leap years"""
    target_year = from_date.year + years
    try:
        return from_date.replace(year=target_year)
    except ValueError:
        return date(target_year, 3, 1)


def year_bounds(year: int) -> Tuple[date, date]:
    """First and last day of a calendar year (inclusive)"""
    return date(year, 1, 1), date(year, 12, 31)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def days_until(target: date, now: datetime) -> int:
    """Whole days from now until target midnight, rounded up"""
    delta = start_of_day(target) - now
    return math.ceil(delta / timedelta(days=1))


def years_between(start: datetime, end: date) -> float:
    """Fractional years from start until end midnight, floored at zero"""
    delta = start_of_day(end) - start
    return max(0.0, delta / timedelta(days=DAYS_PER_YEAR))
