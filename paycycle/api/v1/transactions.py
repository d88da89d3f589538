"""/v1/transactions - transaction recording endpoints"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session

from paycycle.api.v1.schemas import TransactionBatchRequest, TransactionRequest, TransactionResponse
from paycycle.api.dependencies import get_request_id
from paycycle.infrastructure.database.session import get_db
from paycycle.infrastructure.database.repositories import TransactionRepository, to_domain_transaction
from paycycle.domain.exceptions import InvalidTransactionError, RecordNotFoundError

router = APIRouter()


@router.post("/transactions", response_model=TransactionResponse, status_code=201)
def create_transaction(request_body: TransactionRequest, request: Request, db: Session = Depends(get_db)):
    """
    Record a single transaction.

    Amount, date, category and card are required; rejected records are
    never written.
    """
    try:
        db_transaction = TransactionRepository(db).create_transaction(request_body.to_domain())
        db.commit()
    except InvalidTransactionError as e:
        db.rollback()
        logging.warning(f"Rejected transaction: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))

    return TransactionResponse.from_domain(to_domain_transaction(db_transaction))


@router.post("/transactions/batch", response_model=list[TransactionResponse], status_code=201)
def create_transactions(request_body: TransactionBatchRequest, request: Request, db: Session = Depends(get_db)):
    """Record several transactions at once, e.g. reviewed receipt drafts. All or nothing."""
    try:
        records = TransactionRepository(db).create_transactions([t.to_domain() for t in request_body.transactions])
        db.commit()
    except InvalidTransactionError as e:
        db.rollback()
        logging.warning(f"Rejected transaction batch: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))

    logging.info(
        "Transaction batch saved",
        extra={"request_id": get_request_id(request), "count": len(records)},
    )
    return [TransactionResponse.from_domain(to_domain_transaction(r)) for r in records]


@router.get("/transactions", response_model=list[TransactionResponse])
def list_transactions(
    card_id: Optional[str] = Query(None, description="Only transactions of this card"),
    db: Session = Depends(get_db),
):
    records = TransactionRepository(db).list_transactions(card_id)
    return [TransactionResponse.from_domain(to_domain_transaction(r)) for r in records]


@router.delete("/transactions/{transaction_id}", status_code=204)
def delete_transaction(transaction_id: str, db: Session = Depends(get_db)):
    try:
        TransactionRepository(db).delete_transaction(transaction_id)
        db.commit()
    except RecordNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Transaction not found")

    return Response(status_code=204)
