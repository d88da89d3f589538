"""Ingestion rules for cards and transactions, and charge classification"""

import logging
from typing import Optional
from paycycle.domain.models import (
    Card,
    Charge,
    InstallmentPlan,
    OrdinaryCharge,
    RecurringCharge,
    Transaction,
)
from paycycle.domain.exceptions import ConfigurationError, InvalidTransactionError
from paycycle.domain.installments import MAX_INSTALLMENTS
from paycycle.domain.recurring import SUPPORTED_INTERVALS

logger = logging.getLogger(__name__)

CARD_TYPES = ("credit", "debit")
TRANSACTION_TYPES = ("expense", "income")


def _is_day_of_month(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= 31


def validate_card(card: Card) -> None:
    """
    Check a card before it is stored.

    Raises:
        ConfigurationError: Unknown card type, or a credit card with a
            missing/out-of-range cutoff, payment or personal payment day
    """
    if card.type not in CARD_TYPES:
        raise ConfigurationError(f"Unknown card type: {card.type!r}")

    # Debit cards have no billing cycle
    if card.is_credit:
        validate_billing_cycle(card)


def validate_billing_cycle(card: Card) -> None:
    """Raise ConfigurationError unless the card's cycle days are usable for projection"""
    if not _is_day_of_month(card.cutoff_day):
        raise ConfigurationError(f"cutoff_day must be a day of month (1-31), got {card.cutoff_day!r}")
    if not _is_day_of_month(card.payment_day):
        raise ConfigurationError(f"payment_day must be a day of month (1-31), got {card.payment_day!r}")
    for day in card.personal_payment_days:
        if not _is_day_of_month(day):
            raise ConfigurationError(f"personal payment day must be a day of month (1-31), got {day!r}")


def validate_transaction(transaction: Transaction) -> None:
    """
    Reject records that must not be persisted.

    Raises:
        InvalidTransactionError: Missing amount, date, category or card,
            unknown type, incomplete installment/recurring details, or a
            record flagged both deferred and recurring
    """
    if not transaction.amount_cents or transaction.amount_cents <= 0:
        raise InvalidTransactionError("amount_cents must be a positive amount")
    if transaction.date is None:
        raise InvalidTransactionError("date is required")
    if not transaction.category_id:
        raise InvalidTransactionError("category_id is required")
    if not transaction.card_id:
        raise InvalidTransactionError("card_id is required")
    if transaction.type not in TRANSACTION_TYPES:
        raise InvalidTransactionError(f"Unknown transaction type: {transaction.type!r}")

    if transaction.deferred and transaction.recurring:
        raise InvalidTransactionError("A transaction cannot be both deferred and recurring")

    if transaction.deferred:
        if not transaction.installments or not 1 <= transaction.installments <= MAX_INSTALLMENTS:
            raise InvalidTransactionError(
                f"Deferred transactions need installments between 1 and {MAX_INSTALLMENTS}"
            )
        if transaction.first_payment_date is None:
            raise InvalidTransactionError("Deferred transactions need first_payment_date")

    if transaction.recurring:
        if transaction.recurring_interval not in SUPPORTED_INTERVALS:
            raise InvalidTransactionError(
                f"Unsupported recurring interval: {transaction.recurring_interval!r}"
            )
        if transaction.recurring_start_date is None:
            raise InvalidTransactionError("Recurring transactions need recurring_start_date")


def classify_transaction(transaction: Transaction) -> Optional[Charge]:
    """
    Select the charge variant a stored record projects as.

    Returns None for deferred/recurring records missing the details needed
    to project them; those never contribute to a payment.

    A record flagged both deferred and recurring projects as an installment
    plan only and its recurring rule is skipped. Ingestion rejects such
    records, so this only happens to rows stored by other means.
    """
    if transaction.deferred and transaction.recurring:
        logger.warning(
            "Transaction flagged deferred and recurring, projecting as installments",
            extra={"transaction_id": transaction.id},
        )

    if transaction.deferred:
        if not transaction.installments or transaction.first_payment_date is None:
            logger.debug("Skipping deferred transaction without plan", extra={"transaction_id": transaction.id})
            return None
        return InstallmentPlan(
            transaction=transaction,
            installments=transaction.installments,
            first_payment_date=transaction.first_payment_date,
        )

    if transaction.recurring:
        if transaction.recurring_start_date is None:
            logger.debug("Skipping recurring transaction without start date", extra={"transaction_id": transaction.id})
            return None
        return RecurringCharge(
            transaction=transaction,
            interval=transaction.recurring_interval,
            start_date=transaction.recurring_start_date,
            end_date=transaction.recurring_end_date,
        )

    return OrdinaryCharge(transaction=transaction)
