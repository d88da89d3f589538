"""Billing cycle resolution - statement periods and payment due dates"""

from datetime import date, timedelta
from typing import Iterable, List, Tuple
from paycycle.domain.models import BillingPeriod, Transaction
from paycycle.utils.date_utils import with_day


def resolve_billing_period(reference_date: date, cutoff_day: int) -> BillingPeriod:
    """
    Return the statement period `reference_date` falls in.

    Rules:
    - On or before the cutoff day: the period closes this month on `cutoff_day`
    - After the cutoff day: the period closes next month on `cutoff_day`
    - The period opens the day after the previous month's cutoff

    Cutoff days beyond the end of a short month clamp to its last day, so
    consecutive periods neither overlap nor leave gaps.

    Example:
        cutoff_day=1, reference 2024-03-10 → [2024-03-02, 2024-04-01]
        cutoff_day=1, reference 2024-03-01 → [2024-02-02, 2024-03-01]
        cutoff_day=31, reference 2024-02-10 → [2024-02-01, 2024-02-29]
    """
    months_ahead = 0 if reference_date.day <= cutoff_day else 1

    end = with_day(reference_date, cutoff_day, months=months_ahead)
    previous_cutoff = with_day(reference_date, cutoff_day, months=months_ahead - 1)

    return BillingPeriod(start=previous_cutoff + timedelta(days=1), end=end)


def resolve_payment_date(period_end: date, payment_day: int) -> date:
    """
    Next occurrence of `payment_day` strictly after the period closes.

    Stays in the closing month when the payment day comes later in that
    month, otherwise rolls to the following month.
    """
    same_month = with_day(period_end, payment_day)
    if same_month > period_end:
        return same_month
    return with_day(period_end, payment_day, months=1)


def resolve_next_statement(as_of: date, cutoff_day: int, payment_day: int) -> Tuple[BillingPeriod, date]:
    """
    Statement whose payment is the next one due on or after `as_of`.

    A closed statement stays outstanding until its payment date passes, so
    between a cutoff and the following payment date this is the previous
    period rather than the one `as_of` falls in.

    Example:
        cutoff_day=1, payment_day=15, as_of 2024-03-10
        → period [2024-02-02, 2024-03-01], payment 2024-03-15
    """
    current = resolve_billing_period(as_of, cutoff_day)
    previous = resolve_billing_period(current.start - timedelta(days=1), cutoff_day)

    previous_payment = resolve_payment_date(previous.end, payment_day)
    if previous_payment >= as_of:
        return previous, previous_payment

    return current, resolve_payment_date(current.end, payment_day)


def filter_by_period(transactions: Iterable[Transaction], start: date, end: date) -> List[Transaction]:
    """Transactions dated within [start, end], both ends inclusive"""
    return [t for t in transactions if start <= t.date <= end]
