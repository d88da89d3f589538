"""Recurring charge activity per billing period"""

from typing import Iterable, List
from paycycle.domain.models import BillingPeriod, RecurringCharge

SUPPORTED_INTERVALS = ("monthly",)


def is_recurring_active(charge: RecurringCharge, period: BillingPeriod) -> bool:
    """
    Whether a recurring charge bills in the given period.

    Active when it started on or before the period closes and has not
    ended by the time the period opens. A monthly charge bills once per
    active period regardless of how many months have elapsed since it
    started. Unsupported intervals never bill.
    """
    started = charge.start_date < period.next_day_after_end()
    not_ended = charge.end_date is None or charge.end_date > period.start

    if not (started and not_ended):
        return False

    return charge.interval in SUPPORTED_INTERVALS


def active_recurring_charges(charges: Iterable[RecurringCharge], period: BillingPeriod) -> List[RecurringCharge]:
    return [c for c in charges if is_recurring_active(c, period)]
