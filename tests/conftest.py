"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from paycycle.api.main import create_app
from paycycle.infrastructure.database.models import Base
from paycycle.infrastructure.database.session import get_db
from paycycle.domain.models import Card, Transaction


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def credit_card() -> Card:
    """Card closing on the 1st with payment due on the 15th"""
    return Card(
        id="card_visa",
        name="Visa Oro",
        cutoff_day=1,
        payment_day=15,
        personal_payment_days=(15,),
        bank="BBVA",
        last_four_digits="4321",
    )


@pytest.fixture
def mixed_transactions() -> list[Transaction]:
    """
    One of each kind on `card_visa`, evaluated against [2024-02-02, 2024-03-01]:
    ordinary expense, ordinary income, 3-month installment plan, monthly subscription
    """
    return [
        Transaction(
            id="tx_groceries",
            amount_cents=20000,
            date=date(2024, 2, 20),
            description="Groceries",
            category_id="cat_food",
            card_id="card_visa",
        ),
        Transaction(
            id="tx_refund",
            amount_cents=10000,
            date=date(2024, 2, 21),
            type="income",
            description="Refund",
            category_id="cat_refunds",
            card_id="card_visa",
        ),
        Transaction(
            id="tx_laptop",
            amount_cents=90000,
            date=date(2024, 1, 5),
            description="Laptop 3 MSI",
            category_id="cat_tech",
            card_id="card_visa",
            deferred=True,
            installments=3,
            first_payment_date=date(2024, 1, 10),
        ),
        Transaction(
            id="tx_streaming",
            amount_cents=5000,
            date=date(2023, 12, 1),
            description="Streaming",
            category_id="cat_subscriptions",
            card_id="card_visa",
            recurring=True,
            recurring_interval="monthly",
            recurring_start_date=date(2023, 12, 1),
        ),
    ]
