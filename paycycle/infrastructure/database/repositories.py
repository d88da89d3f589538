"""Data access layer for cards, categories and transactions"""

import uuid
from typing import List, Optional, Sequence
from sqlalchemy.orm import Session
from paycycle.infrastructure.database.models import CardRecord, CategoryRecord, TransactionRecord
from paycycle.domain.models import Card, Transaction
from paycycle.domain.exceptions import InvalidTransactionError, RecordNotFoundError
from paycycle.domain.validation import validate_card, validate_transaction


def parse_id(value: str) -> Optional[uuid.UUID]:
    """UUID from its string form, None when malformed"""
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def to_domain_card(record: CardRecord) -> Card:
    return Card(
        id=str(record.id),
        name=record.name,
        type=record.type,
        cutoff_day=record.cutoff_day,
        payment_day=record.payment_day,
        personal_payment_days=tuple(record.personal_payment_days or ()),
        bank=record.bank,
        last_four_digits=record.last_four_digits,
        color=record.color,
    )


def to_domain_transaction(record: TransactionRecord) -> Transaction:
    return Transaction(
        id=str(record.id),
        amount_cents=record.amount_cents,
        date=record.date,
        type=record.type,
        description=record.description,
        category_id=str(record.category_id),
        card_id=str(record.card_id),
        deferred=record.deferred,
        installments=record.installments,
        first_payment_date=record.first_payment_date,
        recurring=record.recurring,
        recurring_interval=record.recurring_interval,
        recurring_start_date=record.recurring_start_date,
        recurring_end_date=record.recurring_end_date,
    )


class CardRepository:
    """Repository for cards"""

    def __init__(self, db: Session):
        self.db = db

    def create_card(self, card: Card) -> CardRecord:
        """Validate and persist a card"""
        validate_card(card)
        db_card = CardRecord(
            name=card.name,
            type=card.type,
            bank=card.bank,
            last_four_digits=card.last_four_digits,
            color=card.color,
            cutoff_day=card.cutoff_day,
            payment_day=card.payment_day,
            personal_payment_days=list(card.personal_payment_days),
        )
        self.db.add(db_card)
        self.db.flush()  # Get ID without committing
        return db_card

    def update_card(self, card_id: str, card: Card) -> CardRecord:
        """Replace a card's fields, keeping its ID"""
        validate_card(card)
        db_card = self.get_card(card_id)
        db_card.name = card.name
        db_card.type = card.type
        db_card.bank = card.bank
        db_card.last_four_digits = card.last_four_digits
        db_card.color = card.color
        db_card.cutoff_day = card.cutoff_day
        db_card.payment_day = card.payment_day
        db_card.personal_payment_days = list(card.personal_payment_days)
        self.db.flush()
        return db_card

    def get_card(self, card_id: str) -> CardRecord:
        """
        Fetch a card by ID.

        Raises:
            RecordNotFoundError: Unknown or malformed ID
        """
        card_uuid = parse_id(card_id)
        db_card = self.db.get(CardRecord, card_uuid) if card_uuid else None
        if db_card is None:
            raise RecordNotFoundError(f"Card {card_id} not found")
        return db_card

    def list_cards(self) -> List[CardRecord]:
        """All cards, newest first"""
        return self.db.query(CardRecord).order_by(CardRecord.created_at.desc()).all()

    def delete_card(self, card_id: str) -> None:
        """Delete a card and its transactions"""
        self.db.delete(self.get_card(card_id))
        self.db.flush()


class CategoryRepository:
    """Repository for categories"""

    def __init__(self, db: Session):
        self.db = db

    def create_category(self, name: str, type: str) -> CategoryRecord:
        db_category = CategoryRecord(name=name, type=type)
        self.db.add(db_category)
        self.db.flush()
        return db_category

    def list_categories(self) -> List[CategoryRecord]:
        return self.db.query(CategoryRecord).order_by(CategoryRecord.name).all()

    def exists(self, category_id: str) -> bool:
        category_uuid = parse_id(category_id)
        return category_uuid is not None and self.db.get(CategoryRecord, category_uuid) is not None


class TransactionRepository:
    """Repository for transactions"""

    def __init__(self, db: Session):
        self.db = db

    def _check_references(self, transaction: Transaction) -> None:
        """Reject transactions pointing at unknown cards or categories"""
        card_uuid = parse_id(transaction.card_id)
        if card_uuid is None or self.db.get(CardRecord, card_uuid) is None:
            raise InvalidTransactionError(f"Unknown card: {transaction.card_id}")
        if not CategoryRepository(self.db).exists(transaction.category_id):
            raise InvalidTransactionError(f"Unknown category: {transaction.category_id}")

    def _build_record(self, transaction: Transaction) -> TransactionRecord:
        return TransactionRecord(
            card_id=parse_id(transaction.card_id),
            category_id=parse_id(transaction.category_id),
            amount_cents=transaction.amount_cents,
            type=transaction.type,
            date=transaction.date,
            description=transaction.description,
            deferred=transaction.deferred,
            installments=transaction.installments if transaction.deferred else None,
            first_payment_date=transaction.first_payment_date if transaction.deferred else None,
            recurring=transaction.recurring,
            recurring_interval=transaction.recurring_interval if transaction.recurring else None,
            recurring_start_date=transaction.recurring_start_date if transaction.recurring else None,
            recurring_end_date=transaction.recurring_end_date if transaction.recurring else None,
        )

    def create_transaction(self, transaction: Transaction) -> TransactionRecord:
        """
        Validate and persist a single transaction.

        Raises:
            InvalidTransactionError: Missing required fields or unknown references
        """
        validate_transaction(transaction)
        self._check_references(transaction)

        db_transaction = self._build_record(transaction)
        self.db.add(db_transaction)
        self.db.flush()
        return db_transaction

    def create_transactions(self, transactions: Sequence[Transaction]) -> List[TransactionRecord]:
        """
        Persist a batch of transactions, all or nothing.

        Every record is validated before any is written.
        """
        if not transactions:
            raise InvalidTransactionError("No transactions to save")

        for transaction in transactions:
            validate_transaction(transaction)
            self._check_references(transaction)

        records = [self._build_record(t) for t in transactions]
        self.db.add_all(records)
        self.db.flush()
        return records

    def list_transactions(self, card_id: str | None = None) -> List[TransactionRecord]:
        """Transactions newest first, optionally for a single card"""
        query = self.db.query(TransactionRecord)
        if card_id is not None:
            card_uuid = parse_id(card_id)
            if card_uuid is None:
                return []
            query = query.filter(TransactionRecord.card_id == card_uuid)
        return query.order_by(TransactionRecord.date.desc()).all()

    def delete_transaction(self, transaction_id: str) -> None:
        transaction_uuid = parse_id(transaction_id)
        db_transaction = self.db.get(TransactionRecord, transaction_uuid) if transaction_uuid else None
        if db_transaction is None:
            raise RecordNotFoundError(f"Transaction {transaction_id} not found")
        self.db.delete(db_transaction)
        self.db.flush()
