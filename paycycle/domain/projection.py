"""Payment projection engine - core business logic for card payments"""

import logging
from datetime import date
from typing import Dict, List, Optional, Sequence
from paycycle.domain.models import (
    Card,
    CardPayment,
    InstallmentPlan,
    OrdinaryCharge,
    PaymentProjection,
    PersonalDayPayment,
    RecurringCharge,
    Transaction,
)
from paycycle.domain.billing import filter_by_period, resolve_next_statement
from paycycle.domain.installments import installments_in_period
from paycycle.domain.recurring import active_recurring_charges
from paycycle.domain.validation import classify_transaction, validate_billing_cycle
from paycycle.utils.date_utils import last_day_of_month, with_day

logger = logging.getLogger(__name__)


def calculate_next_payment(
    card: Card,
    transactions: Sequence[Transaction],
    as_of: Optional[date] = None,
    today: Optional[date] = None,
) -> PaymentProjection:
    """
    Project the next payment due on a card.

    Flow:
    1. Resolve the statement whose payment is next due on or after `as_of`
    2. Filter ordinary transactions dated within that statement
    3. Attribute installment charges due within the statement
    4. Add recurring charges active during the statement
    5. Sum expenses only - a card payment reflects spend, not net

    Raises:
        ConfigurationError: Card cycle days are missing or out of range
    """
    validate_billing_cycle(card)

    as_of = as_of or date.today()
    today = today or date.today()

    period, payment_date = resolve_next_statement(as_of, card.cutoff_day, card.payment_day)

    ordinary: List[Transaction] = []
    plans: List[InstallmentPlan] = []
    recurring: List[RecurringCharge] = []
    for transaction in transactions:
        charge = classify_transaction(transaction)
        if isinstance(charge, OrdinaryCharge):
            ordinary.append(transaction)
        elif isinstance(charge, InstallmentPlan) and transaction.is_expense:
            plans.append(charge)
        elif isinstance(charge, RecurringCharge) and transaction.is_expense:
            recurring.append(charge)

    period_transactions = filter_by_period(ordinary, period.start, period.end)
    msi_payments = installments_in_period(plans, period)
    active_recurring = active_recurring_charges(recurring, period)

    total_amount = (
        sum(abs(t.amount_cents) for t in period_transactions if t.is_expense)
        + sum(c.amount_cents for c in msi_payments)
        + sum(abs(c.transaction.amount_cents) for c in active_recurring)
    )

    return PaymentProjection(
        payment_date=payment_date,
        billing_period=period,
        total_amount_cents=total_amount,
        transactions_count=len(period_transactions) + len(msi_payments) + len(active_recurring),
        days_until_payment=(payment_date - today).days,
        period_transactions=period_transactions,
        msi_payments_this_period=msi_payments,
        recurring_transactions=[c.transaction for c in active_recurring],
    )


def _transactions_by_card(transactions: Sequence[Transaction]) -> Dict[Optional[str], List[Transaction]]:
    by_card: Dict[Optional[str], List[Transaction]] = {}
    for transaction in transactions:
        by_card.setdefault(transaction.card_id, []).append(transaction)
    return by_card


def _card_payment(card: Card, projection: PaymentProjection) -> CardPayment:
    return CardPayment(
        card_id=card.id,
        card_name=card.name,
        card_type=card.type,
        bank=card.bank,
        last_four_digits=card.last_four_digits,
        color=card.color,
        personal_payment_days=card.personal_payment_days,
        projection=projection,
    )


def get_all_upcoming_payments(
    cards: Sequence[Card],
    transactions: Sequence[Transaction],
    as_of: Optional[date] = None,
    today: Optional[date] = None,
) -> List[CardPayment]:
    """Next payment of every credit card, soonest first. Debit cards have no cycle and are skipped."""
    by_card = _transactions_by_card(transactions)

    payments = []
    for card in cards:
        if not card.is_credit:
            continue
        projection = calculate_next_payment(card, by_card.get(card.id, []), as_of=as_of, today=today)
        logger.debug(
            "Projected card payment",
            extra={
                "card_id": card.id,
                "payment_date": projection.payment_date.isoformat(),
                "total_amount_cents": projection.total_amount_cents,
                "ordinary_count": len(projection.period_transactions),
                "msi_count": len(projection.msi_payments_this_period),
                "recurring_count": len(projection.recurring_transactions),
            },
        )
        payments.append(_card_payment(card, projection))

    return sorted(payments, key=lambda p: p.payment_date)


def get_total_to_pay_on_personal_day(
    cards: Sequence[Card],
    transactions: Sequence[Transaction],
    day: int,
    as_of: Optional[date] = None,
) -> int:
    """
    Total owed across credit cards the user settles on personal day `day`.

    Answers "how much do I need around the 15th / 30th".
    """
    by_card = _transactions_by_card(transactions)

    return sum(
        calculate_next_payment(card, by_card.get(card.id, []), as_of=as_of).total_amount_cents
        for card in cards
        if card.is_credit and day in card.personal_payment_days
    )


def calculate_personal_payment_amounts(
    card: Card,
    transactions: Sequence[Transaction],
    as_of: Optional[date] = None,
) -> List[PersonalDayPayment]:
    """
    Amount owed if the card is paid on each of its personal payment days.

    Each personal day is placed in the month of `as_of` (clamped to the
    month's last day) and the statement outstanding on that date is
    projected, with the personal day itself as the payment date. This is
    the statement still unpaid on that day, not the period containing it.
    """
    as_of = as_of or date.today()

    results = []
    for day in card.personal_payment_days:
        pay_on = with_day(as_of, day)
        projection = calculate_next_payment(card, transactions, as_of=pay_on)
        results.append(PersonalDayPayment(day=day, payment_date=pay_on, projection=projection))

    return results


def get_payment_history(
    cards: Sequence[Card],
    transactions: Sequence[Transaction],
    year: int,
    month: int,
) -> List[CardPayment]:
    """
    Payment owed by every credit card for a past or future month.

    Evaluated as of the last day of the month, ordered by first personal
    payment day (cards without one first).
    """
    as_of = last_day_of_month(year, month)
    payments = get_all_upcoming_payments(cards, transactions, as_of=as_of)

    return sorted(payments, key=lambda p: p.personal_payment_days[0] if p.personal_payment_days else 0)
