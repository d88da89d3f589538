"""/v1/cards - card management endpoints"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from paycycle.api.v1.schemas import CardRequest, CardResponse
from paycycle.api.dependencies import get_request_id
from paycycle.infrastructure.database.session import get_db
from paycycle.infrastructure.database.repositories import CardRepository, to_domain_card
from paycycle.domain.exceptions import ConfigurationError, RecordNotFoundError

router = APIRouter()


@router.post("/cards", response_model=CardResponse, status_code=201)
def create_card(request_body: CardRequest, request: Request, db: Session = Depends(get_db)):
    """Register a credit or debit card. Credit cards need cutoff and payment days."""
    try:
        db_card = CardRepository(db).create_card(request_body.to_domain())
        db.commit()
    except ConfigurationError as e:
        db.rollback()
        logging.warning(f"Invalid card configuration: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))

    return CardResponse.from_domain(to_domain_card(db_card))


@router.get("/cards", response_model=list[CardResponse])
def list_cards(db: Session = Depends(get_db)):
    return [CardResponse.from_domain(to_domain_card(c)) for c in CardRepository(db).list_cards()]


@router.put("/cards/{card_id}", response_model=CardResponse)
def update_card(card_id: str, request_body: CardRequest, request: Request, db: Session = Depends(get_db)):
    try:
        db_card = CardRepository(db).update_card(card_id, request_body.to_domain(card_id))
        db.commit()
    except RecordNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Card not found")
    except ConfigurationError as e:
        db.rollback()
        logging.warning(f"Invalid card configuration: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))

    return CardResponse.from_domain(to_domain_card(db_card))


@router.delete("/cards/{card_id}", status_code=204)
def delete_card(card_id: str, db: Session = Depends(get_db)):
    """Delete a card together with its transactions"""
    try:
        CardRepository(db).delete_card(card_id)
        db.commit()
    except RecordNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Card not found")

    return Response(status_code=204)
