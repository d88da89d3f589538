"""Installment (MSI) schedule generation for deferred card purchases"""

from datetime import date
from typing import Iterable, List
from paycycle.domain.models import BillingPeriod, InstallmentCharge, InstallmentPlan
from paycycle.utils.date_utils import add_months

# Longest plan accepted at ingestion (card issuers offer 3 to 24 months)
MAX_INSTALLMENTS = 48


def _month_index(value: date) -> int:
    return value.year * 12 + value.month - 1


def _installment_charge(plan: InstallmentPlan, i: int) -> InstallmentCharge:
    amount_cents = abs(plan.transaction.amount_cents)

    # Calculate base amount and remainder
    base_amount = amount_cents // plan.installments
    remainder = amount_cents % plan.installments

    return InstallmentCharge(
        transaction=plan.transaction,
        installment_number=i + 1,
        installments_total=plan.installments,
        # Month arithmetic clamps: Jan 31 + 1 month → Feb 28/29
        due_date=add_months(plan.first_payment_date, i),
        amount_cents=base_amount + (remainder if i == plan.installments - 1 else 0),
    )


def generate_installment_schedule(plan: InstallmentPlan) -> List[InstallmentCharge]:
    """
    Generate equal monthly installments for a deferred purchase.

    Requirements:
    - Exactly `plan.installments` charges, no interest
    - One charge per month starting on `first_payment_date`
    - Last installment absorbs rounding remainder (≤ installments-1 cents drift)

    Example:
        $1000.00 over 3 → [$333.33, $333.33, $333.34]
        100000 cents / 3 = 33333 base, remainder 1
        Last installment: 33333 + 1 = 33334
    """
    if plan.installments < 1:
        return []

    return [_installment_charge(plan, i) for i in range(plan.installments)]


def installments_in_period(plans: Iterable[InstallmentPlan], period: BillingPeriod) -> List[InstallmentCharge]:
    """
    Installment charges of all plans whose due date falls within the period.

    Installment i is due in the i-th month after the first payment, so only
    the offsets landing in the period's start or end month are built.
    """
    charges = []
    for plan in plans:
        if plan.installments < 1:
            continue
        first_month = _month_index(plan.first_payment_date)
        low = max(_month_index(period.start) - first_month, 0)
        high = min(_month_index(period.end) - first_month, plan.installments - 1)
        for i in range(low, high + 1):
            charge = _installment_charge(plan, i)
            if period.contains(charge.due_date):
                charges.append(charge)
    return charges
