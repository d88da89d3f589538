"""Card payment projection endpoints"""

import re
import time
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request
from sqlalchemy.orm import Session

from paycycle.api.v1.schemas import (
    CardPaymentSchema,
    PaymentProjectionSchema,
    PersonalDayPaymentSchema,
    PersonalDayTotalResponse,
    PersonalPaymentsResponse,
    UpcomingPaymentsResponse,
)
from paycycle.api.dependencies import get_request_id
from paycycle.infrastructure.database.session import get_db
from paycycle.infrastructure.database.repositories import (
    CardRepository,
    TransactionRepository,
    to_domain_card,
    to_domain_transaction,
)
from paycycle.domain.projection import (
    calculate_next_payment,
    calculate_personal_payment_amounts,
    get_all_upcoming_payments,
    get_payment_history,
    get_total_to_pay_on_personal_day,
)
from paycycle.domain.exceptions import ConfigurationError, RecordNotFoundError
from paycycle.infrastructure.observability.metrics import record_projection
from paycycle.infrastructure.observability.logging import log_projection

router = APIRouter()

MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def _load_all(db: Session):
    """Immutable snapshots of every card and transaction for the engine"""
    cards = [to_domain_card(c) for c in CardRepository(db).list_cards()]
    transactions = [to_domain_transaction(t) for t in TransactionRepository(db).list_transactions()]
    return cards, transactions


def _load_card(db: Session, card_id: str):
    try:
        db_card = CardRepository(db).get_card(card_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Card not found")

    card = to_domain_card(db_card)
    if not card.is_credit:
        raise HTTPException(status_code=422, detail="Debit cards have no billing cycle")

    transactions = [to_domain_transaction(t) for t in TransactionRepository(db).list_transactions(card_id)]
    return card, transactions


@router.get("/cards/{card_id}/next-payment", response_model=PaymentProjectionSchema)
def get_next_payment(
    card_id: str,
    request: Request,
    as_of: Optional[date] = Query(None, description="Evaluate as of this date (default today)"),
    db: Session = Depends(get_db),
):
    """
    Project the next payment due on a credit card.

    Returns:
        Billing period, payment date, total owed and the ordinary,
        installment and recurring charges making it up
    """
    start_time = time.time()
    card, transactions = _load_card(db, card_id)

    try:
        projection = calculate_next_payment(card, transactions, as_of=as_of)
    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    duration_ms = (time.time() - start_time) * 1000
    record_projection("card", projection.total_amount_cents)
    log_projection(
        get_request_id(request),
        card.id,
        projection.total_amount_cents,
        projection.transactions_count,
        duration_ms,
    )

    return PaymentProjectionSchema.from_domain(projection)


@router.get("/cards/{card_id}/personal-payments", response_model=PersonalPaymentsResponse)
def get_personal_payments(
    card_id: str,
    as_of: Optional[date] = Query(None, description="Month to place personal days in (default today)"),
    db: Session = Depends(get_db),
):
    """Amount owed on each of the card's personal payment days"""
    card, transactions = _load_card(db, card_id)

    try:
        results = calculate_personal_payment_amounts(card, transactions, as_of=as_of)
    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return PersonalPaymentsResponse(
        card_id=card.id,
        payments=[
            PersonalDayPaymentSchema(
                day=r.day,
                payment_date=r.payment_date,
                projection=PaymentProjectionSchema.from_domain(r.projection),
            )
            for r in results
        ],
    )


@router.get("/payments/upcoming", response_model=UpcomingPaymentsResponse)
def get_upcoming_payments(
    as_of: Optional[date] = Query(None, description="Evaluate as of this date (default today)"),
    db: Session = Depends(get_db),
):
    """Next payment of every credit card, soonest first"""
    cards, transactions = _load_all(db)

    try:
        payments = get_all_upcoming_payments(cards, transactions, as_of=as_of)
    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    for payment in payments:
        record_projection("upcoming", payment.total_amount_cents)

    return UpcomingPaymentsResponse(payments=[CardPaymentSchema.from_card_payment(p) for p in payments])


@router.get("/payments/personal-day/{day}", response_model=PersonalDayTotalResponse)
def get_personal_day_total(
    day: int = Path(..., ge=1, le=31),
    as_of: Optional[date] = Query(None, description="Evaluate as of this date (default today)"),
    db: Session = Depends(get_db),
):
    """Total owed across credit cards settled on personal payment day `day`"""
    cards, transactions = _load_all(db)

    try:
        total = get_total_to_pay_on_personal_day(cards, transactions, day, as_of=as_of)
    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    record_projection("personal_day", total)
    return PersonalDayTotalResponse(day=day, total_amount_cents=total)


@router.get("/payments/history", response_model=UpcomingPaymentsResponse)
def get_history(
    month: str = Query(..., description="Month as YYYY-MM"),
    db: Session = Depends(get_db),
):
    """Payment owed by each credit card for the given month"""
    match = MONTH_PATTERN.match(month)
    if not match or not 1 <= int(match.group(2)) <= 12:
        raise HTTPException(status_code=400, detail="Invalid month format, expected YYYY-MM")

    cards, transactions = _load_all(db)

    try:
        payments = get_payment_history(cards, transactions, int(match.group(1)), int(match.group(2)))
    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    for payment in payments:
        record_projection("history", payment.total_amount_cents)

    return UpcomingPaymentsResponse(payments=[CardPaymentSchema.from_card_payment(p) for p in payments])
