"""Domain models - pure Python dataclasses representing cards, transactions and projections"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Optional, Tuple, Union


@dataclass(frozen=True)
class Card:
    """Payment method with its statement cycle configuration"""

    id: str
    name: str
    cutoff_day: int
    payment_day: int
    type: str = "credit"  # "credit" or "debit"
    personal_payment_days: Tuple[int, ...] = ()
    bank: str = ""
    last_four_digits: str = ""
    color: str = "#1890ff"

    @property
    def is_credit(self) -> bool:
        return self.type == "credit"


@dataclass(frozen=True)
class Transaction:
    """Income or expense record as stored"""

    id: str
    amount_cents: int
    date: date
    type: str = "expense"  # "expense" or "income"
    description: str = ""
    category_id: Optional[str] = None
    card_id: Optional[str] = None
    deferred: bool = False
    installments: Optional[int] = None
    first_payment_date: Optional[date] = None
    recurring: bool = False
    recurring_interval: Optional[str] = "monthly"
    recurring_start_date: Optional[date] = None
    recurring_end_date: Optional[date] = None

    @property
    def is_expense(self) -> bool:
        return self.type == "expense"


@dataclass(frozen=True)
class OrdinaryCharge:
    """Transaction whose cash-flow date is its record date"""

    transaction: Transaction


@dataclass(frozen=True)
class InstallmentPlan:
    """Deferred purchase paid in equal monthly installments (MSI)"""

    transaction: Transaction
    installments: int
    first_payment_date: date


@dataclass(frozen=True)
class RecurringCharge:
    """Charge repeating every period between a start and optional end date"""

    transaction: Transaction
    interval: Optional[str]
    start_date: date
    end_date: Optional[date] = None


Charge = Union[OrdinaryCharge, InstallmentPlan, RecurringCharge]


@dataclass(frozen=True)
class BillingPeriod:
    """Statement cycle, both ends inclusive"""

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def next_day_after_end(self) -> date:
        return self.end + timedelta(days=1)


@dataclass(frozen=True)
class InstallmentCharge:
    """Single synthesized monthly charge of an installment plan"""

    transaction: Transaction
    installment_number: int  # 1-based
    installments_total: int
    due_date: date
    amount_cents: int


@dataclass(frozen=True)
class PaymentProjection:
    """Amount owed for one billing period and when it is due"""

    payment_date: date
    billing_period: BillingPeriod
    total_amount_cents: int
    transactions_count: int
    days_until_payment: int
    period_transactions: List[Transaction] = field(default_factory=list)
    msi_payments_this_period: List[InstallmentCharge] = field(default_factory=list)
    recurring_transactions: List[Transaction] = field(default_factory=list)


@dataclass(frozen=True)
class CardPayment:
    """Projection with the identity of the card it belongs to"""

    card_id: str
    card_name: str
    card_type: str
    bank: str
    last_four_digits: str
    color: str
    personal_payment_days: Tuple[int, ...]
    projection: PaymentProjection

    @property
    def payment_date(self) -> date:
        return self.projection.payment_date

    @property
    def total_amount_cents(self) -> int:
        return self.projection.total_amount_cents


@dataclass(frozen=True)
class PersonalDayPayment:
    """Amount to pay if a card is settled on one of its personal payment days"""

    day: int
    payment_date: date
    projection: PaymentProjection


@dataclass(frozen=True)
class ReceiptDraft:
    """Best-effort transaction extracted from receipt text, pending human review"""

    amount_cents: Optional[int]
    date_text: Optional[str]
    date: Optional[date]
    description: str
    source_text: str
