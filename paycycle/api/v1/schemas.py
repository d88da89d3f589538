"""Pydantic schemas for API request/response validation"""

import datetime
from pydantic import BaseModel, Field, model_validator
from datetime import date
from typing import List, Literal, Optional

from paycycle.domain.models import (
    Card,
    CardPayment,
    InstallmentCharge,
    PaymentProjection,
    ReceiptDraft,
    Transaction,
)
from paycycle.domain.installments import MAX_INSTALLMENTS


class CardRequest(BaseModel):
    """Request body for POST/PUT /v1/cards"""

    name: str = Field(..., min_length=1, description="Card display name")
    type: Literal["credit", "debit"] = "credit"
    bank: str = ""
    last_four_digits: str = Field("", pattern=r"^(\d{4})?$")
    color: str = "#1890ff"
    cutoff_day: Optional[int] = Field(None, ge=1, le=31, description="Day of month the statement closes")
    payment_day: Optional[int] = Field(None, ge=1, le=31, description="Day of month payment is due")
    personal_payment_days: List[int] = Field(default_factory=list)
    personal_payment_day: Optional[int] = Field(None, description="Legacy single personal payment day")

    @model_validator(mode="after")
    def merge_legacy_personal_day(self) -> "CardRequest":
        # Singular field is folded into the canonical list
        if self.personal_payment_day is not None and self.personal_payment_day not in self.personal_payment_days:
            self.personal_payment_days = [*self.personal_payment_days, self.personal_payment_day]
        self.personal_payment_day = None
        return self

    def to_domain(self, card_id: str = "") -> Card:
        return Card(
            id=card_id,
            name=self.name,
            type=self.type,
            cutoff_day=self.cutoff_day,
            payment_day=self.payment_day,
            personal_payment_days=tuple(self.personal_payment_days),
            bank=self.bank,
            last_four_digits=self.last_four_digits,
            color=self.color,
        )


class CardResponse(BaseModel):
    id: str
    name: str
    type: str
    bank: str
    last_four_digits: str
    color: str
    cutoff_day: Optional[int]
    payment_day: Optional[int]
    personal_payment_days: List[int]

    @classmethod
    def from_domain(cls, card: Card) -> "CardResponse":
        return cls(
            id=card.id,
            name=card.name,
            type=card.type,
            bank=card.bank,
            last_four_digits=card.last_four_digits,
            color=card.color,
            cutoff_day=card.cutoff_day,
            payment_day=card.payment_day,
            personal_payment_days=list(card.personal_payment_days),
        )


class CategoryRequest(BaseModel):
    name: str = Field(..., min_length=1)
    type: Literal["expense", "income"] = "expense"


class CategoryResponse(BaseModel):
    id: str
    name: str
    type: str


class TransactionRequest(BaseModel):
    """
    Request body for POST /v1/transactions.

    Required-field rules are enforced by domain validation so that a
    missing card or category is reported the same way for single and
    batch writes.
    """

    amount_cents: Optional[int] = Field(None, description="Positive amount in cents")
    type: Literal["expense", "income"] = "expense"
    date: Optional[datetime.date] = None
    description: str = ""
    category_id: Optional[str] = None
    card_id: Optional[str] = None
    deferred: bool = False
    installments: Optional[int] = Field(None, ge=1, le=MAX_INSTALLMENTS, description="Monthly installments of a deferred purchase")
    first_payment_date: Optional[datetime.date] = None
    recurring: bool = False
    recurring_interval: Optional[str] = None
    recurring_start_date: Optional[datetime.date] = None
    recurring_end_date: Optional[datetime.date] = None

    def to_domain(self) -> Transaction:
        return Transaction(
            id="",
            amount_cents=self.amount_cents,
            date=self.date,
            type=self.type,
            description=self.description,
            category_id=self.category_id,
            card_id=self.card_id,
            deferred=self.deferred,
            installments=self.installments,
            first_payment_date=self.first_payment_date,
            recurring=self.recurring,
            recurring_interval=self.recurring_interval or ("monthly" if self.recurring else None),
            recurring_start_date=self.recurring_start_date,
            recurring_end_date=self.recurring_end_date,
        )


class TransactionBatchRequest(BaseModel):
    transactions: List[TransactionRequest]


class TransactionResponse(BaseModel):
    id: str
    amount_cents: int
    type: str
    date: date
    description: str
    category_id: Optional[str]
    card_id: Optional[str]
    deferred: bool
    installments: Optional[int] = None
    first_payment_date: Optional[date] = None
    recurring: bool
    recurring_interval: Optional[str] = None
    recurring_start_date: Optional[date] = None
    recurring_end_date: Optional[date] = None

    @classmethod
    def from_domain(cls, transaction: Transaction) -> "TransactionResponse":
        return cls(
            id=transaction.id,
            amount_cents=transaction.amount_cents,
            type=transaction.type,
            date=transaction.date,
            description=transaction.description,
            category_id=transaction.category_id,
            card_id=transaction.card_id,
            deferred=transaction.deferred,
            installments=transaction.installments,
            first_payment_date=transaction.first_payment_date,
            recurring=transaction.recurring,
            recurring_interval=transaction.recurring_interval,
            recurring_start_date=transaction.recurring_start_date,
            recurring_end_date=transaction.recurring_end_date,
        )


class BillingPeriodSchema(BaseModel):
    start: date
    end: date


class InstallmentChargeSchema(BaseModel):
    """Single MSI charge attributed to a billing period"""

    transaction_id: str
    description: str
    msi_month: int
    msi_total: int
    payment_due: date
    amount_cents: int

    @classmethod
    def from_domain(cls, charge: InstallmentCharge) -> "InstallmentChargeSchema":
        return cls(
            transaction_id=charge.transaction.id,
            description=charge.transaction.description,
            msi_month=charge.installment_number,
            msi_total=charge.installments_total,
            payment_due=charge.due_date,
            amount_cents=charge.amount_cents,
        )


class PaymentProjectionSchema(BaseModel):
    """Amount owed for one billing period"""

    payment_date: date
    billing_period: BillingPeriodSchema
    total_amount_cents: int
    transactions_count: int
    days_until_payment: int
    period_transactions: List[TransactionResponse]
    msi_payments_this_period: List[InstallmentChargeSchema]
    recurring_transactions: List[TransactionResponse]

    @classmethod
    def from_domain(cls, projection: PaymentProjection) -> "PaymentProjectionSchema":
        return cls(
            payment_date=projection.payment_date,
            billing_period=BillingPeriodSchema(
                start=projection.billing_period.start,
                end=projection.billing_period.end,
            ),
            total_amount_cents=projection.total_amount_cents,
            transactions_count=projection.transactions_count,
            days_until_payment=projection.days_until_payment,
            period_transactions=[TransactionResponse.from_domain(t) for t in projection.period_transactions],
            msi_payments_this_period=[
                InstallmentChargeSchema.from_domain(c) for c in projection.msi_payments_this_period
            ],
            recurring_transactions=[TransactionResponse.from_domain(t) for t in projection.recurring_transactions],
        )


class CardPaymentSchema(PaymentProjectionSchema):
    """Projection with the card it belongs to"""

    card_id: str
    card_name: str
    card_type: str
    bank: str
    last_four_digits: str
    color: str
    personal_payment_days: List[int]

    @classmethod
    def from_card_payment(cls, payment: CardPayment) -> "CardPaymentSchema":
        projection = PaymentProjectionSchema.from_domain(payment.projection)
        return cls(
            card_id=payment.card_id,
            card_name=payment.card_name,
            card_type=payment.card_type,
            bank=payment.bank,
            last_four_digits=payment.last_four_digits,
            color=payment.color,
            personal_payment_days=list(payment.personal_payment_days),
            **projection.model_dump(),
        )


class UpcomingPaymentsResponse(BaseModel):
    payments: List[CardPaymentSchema]


class PersonalDayTotalResponse(BaseModel):
    day: int
    total_amount_cents: int


class PersonalDayPaymentSchema(BaseModel):
    day: int
    payment_date: date
    projection: PaymentProjectionSchema


class PersonalPaymentsResponse(BaseModel):
    card_id: str
    payments: List[PersonalDayPaymentSchema]


class ReceiptRequest(BaseModel):
    """Request body for POST /v1/receipts/analyze"""

    image_base64: str = Field(..., min_length=1, description="Base64-encoded receipt image")


class ReceiptDraftSchema(BaseModel):
    """Extracted values pending human review"""

    amount_cents: Optional[int] = None
    date: Optional[datetime.date] = None
    date_text: Optional[str] = None
    description: str
    source_text: str

    @classmethod
    def from_domain(cls, draft: ReceiptDraft) -> "ReceiptDraftSchema":
        return cls(
            amount_cents=draft.amount_cents,
            date=draft.date,
            date_text=draft.date_text,
            description=draft.description,
            source_text=draft.source_text,
        )


class ReceiptResponse(BaseModel):
    transactions: List[ReceiptDraftSchema]
