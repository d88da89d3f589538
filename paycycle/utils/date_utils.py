"""Calendar month arithmetic with day-of-month clamping"""

import calendar
from datetime import date
from dateutil.relativedelta import relativedelta


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given month"""
    return calendar.monthrange(year, month)[1]


def with_day(value: date, day: int, months: int = 0) -> date:
    """
    Move `value` by `months` calendar months and set its day-of-month to `day`.

    Days past the end of the target month clamp to its last day
    (day 31 in February gives Feb 28/29) instead of overflowing.
    """
    shifted = value + relativedelta(months=months, day=1)
    return shifted.replace(day=min(day, days_in_month(shifted.year, shifted.month)))


def add_months(value: date, months: int) -> date:
    """Same day `months` later, clamped to the end of shorter months"""
    return value + relativedelta(months=months)


def last_day_of_month(year: int, month: int) -> date:
    return date(year, month, days_in_month(year, month))
