"""SQLAlchemy ORM models for cards, categories and transactions"""

import uuid
from sqlalchemy import Column, String, BigInteger, Boolean, DateTime, Date, Integer, ForeignKey, Text, JSON, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class CardRecord(Base):
    """Credit or debit payment method"""

    __tablename__ = "card"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    type = Column(String(16), nullable=False, default="credit")
    bank = Column(Text, nullable=False, default="")
    last_four_digits = Column(String(4), nullable=False, default="")
    color = Column(String(16), nullable=False, default="#1890ff")
    cutoff_day = Column(Integer, nullable=True)
    payment_day = Column(Integer, nullable=True)
    personal_payment_days = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    transactions = relationship("TransactionRecord", back_populates="card", cascade="all, delete-orphan")


class CategoryRecord(Base):
    """User-defined income or expense category"""

    __tablename__ = "category"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    type = Column(String(16), nullable=False, default="expense")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class TransactionRecord(Base):
    """Income or expense recorded against a card and category"""

    __tablename__ = "card_transaction"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    card_id = Column(Uuid(as_uuid=True), ForeignKey("card.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Uuid(as_uuid=True), ForeignKey("category.id"), nullable=False)
    amount_cents = Column(BigInteger, nullable=False)
    type = Column(String(16), nullable=False, default="expense")
    date = Column(Date, nullable=False, index=True)
    description = Column(Text, nullable=False, default="")

    deferred = Column(Boolean, nullable=False, default=False)
    installments = Column(Integer, nullable=True)
    first_payment_date = Column(Date, nullable=True)

    recurring = Column(Boolean, nullable=False, default=False)
    recurring_interval = Column(String(16), nullable=True)
    recurring_start_date = Column(Date, nullable=True)
    recurring_end_date = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    card = relationship("CardRecord", back_populates="transactions")
