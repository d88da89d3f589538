"""Integration tests for API endpoints"""

import pytest
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient
from paycycle.domain.exceptions import TextExtractionError


@pytest.fixture
def category_id(client: TestClient) -> str:
    response = client.post("/v1/categories", json={"name": "Food", "type": "expense"})
    assert response.status_code == 201
    return response.json()["id"]


def _create_card(client: TestClient, **overrides) -> str:
    body = {
        "name": "Visa Oro",
        "type": "credit",
        "bank": "BBVA",
        "last_four_digits": "4321",
        "cutoff_day": 1,
        "payment_day": 15,
        "personal_payment_days": [15],
    }
    body.update(overrides)
    response = client.post("/v1/cards", json=body)
    assert response.status_code == 201, response.text
    return response.json()["id"]


def _expense(card_id: str, category_id: str, amount_cents: int, day: str, **overrides) -> dict:
    body = {
        "amount_cents": amount_cents,
        "type": "expense",
        "date": day,
        "description": "Purchase",
        "category_id": category_id,
        "card_id": card_id,
    }
    body.update(overrides)
    return body


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "paycycle_projection" in response.text


def test_request_id_header(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"

    generated = client.get("/health")
    assert generated.headers["X-Request-ID"]


def test_create_and_list_cards(client: TestClient):
    card_id = _create_card(client, personal_payment_days=[], personal_payment_day=30)

    response = client.get("/v1/cards")

    assert response.status_code == 200
    (card,) = response.json()
    assert card["id"] == card_id
    # Legacy single personal day is folded into the list
    assert card["personal_payment_days"] == [30]


def test_create_credit_card_requires_cycle_days(client: TestClient):
    response = client.post("/v1/cards", json={"name": "No cycle", "type": "credit"})

    assert response.status_code == 422
    assert client.get("/v1/cards").json() == []


def test_create_debit_card_without_cycle(client: TestClient):
    response = client.post("/v1/cards", json={"name": "Nomina", "type": "debit"})
    assert response.status_code == 201


def test_create_card_rejects_bad_last_four_digits(client: TestClient):
    response = client.post("/v1/cards", json={"name": "Visa", "cutoff_day": 1, "payment_day": 15, "last_four_digits": "12"})
    assert response.status_code == 422


def test_update_card(client: TestClient):
    card_id = _create_card(client)

    response = client.put(f"/v1/cards/{card_id}", json={"name": "Visa Platino", "cutoff_day": 5, "payment_day": 25})

    assert response.status_code == 200
    assert response.json()["name"] == "Visa Platino"
    assert response.json()["cutoff_day"] == 5


def test_update_unknown_card(client: TestClient):
    response = client.put("/v1/cards/not-a-card", json={"name": "X", "cutoff_day": 5, "payment_day": 25})
    assert response.status_code == 404


def test_create_transaction_and_next_payment(client: TestClient, category_id: str):
    """Test ordinary, installment and recurring charges through the API"""
    card_id = _create_card(client)
    for body in [
        _expense(card_id, category_id, 20000, "2024-02-20"),
        _expense(card_id, category_id, 10000, "2024-02-21", type="income"),
        _expense(
            card_id,
            category_id,
            90000,
            "2024-01-05",
            deferred=True,
            installments=3,
            first_payment_date="2024-01-10",
        ),
        _expense(card_id, category_id, 5000, "2023-12-01", recurring=True, recurring_start_date="2023-12-01"),
    ]:
        assert client.post("/v1/transactions", json=body).status_code == 201

    response = client.get(f"/v1/cards/{card_id}/next-payment", params={"as_of": "2024-03-10"})

    assert response.status_code == 200
    data = response.json()
    assert data["billing_period"] == {"start": "2024-02-02", "end": "2024-03-01"}
    assert data["payment_date"] == "2024-03-15"
    assert data["total_amount_cents"] == 55000
    assert data["transactions_count"] == 4
    (msi,) = data["msi_payments_this_period"]
    assert msi["msi_month"] == 2
    assert msi["msi_total"] == 3
    assert msi["amount_cents"] == 30000
    assert [t["amount_cents"] for t in data["recurring_transactions"]] == [5000]


def test_create_transaction_missing_required_fields(client: TestClient, category_id: str):
    """Test a transaction without a card is rejected and nothing is written"""
    body = _expense("", category_id, 20000, "2024-02-20")
    body.pop("card_id")

    response = client.post("/v1/transactions", json=body)

    assert response.status_code == 422
    assert "card_id" in response.json()["detail"]
    assert client.get("/v1/transactions").json() == []


def test_create_transaction_installments_out_of_range(client: TestClient, category_id: str):
    card_id = _create_card(client)
    body = _expense(card_id, category_id, 90000, "2024-01-05", deferred=True, installments=100_000, first_payment_date="2024-01-10")

    response = client.post("/v1/transactions", json=body)

    assert response.status_code == 422
    assert client.get("/v1/transactions").json() == []


def test_create_transaction_unknown_category(client: TestClient):
    card_id = _create_card(client)

    response = client.post("/v1/transactions", json=_expense(card_id, "00000000-0000-0000-0000-000000000000", 100, "2024-02-20"))

    assert response.status_code == 422


def test_batch_transactions_all_or_nothing(client: TestClient, category_id: str):
    """Test one invalid record rejects the whole batch"""
    card_id = _create_card(client)
    batch = {
        "transactions": [
            _expense(card_id, category_id, 20000, "2024-02-20"),
            _expense(card_id, category_id, 0, "2024-02-21"),
        ]
    }

    response = client.post("/v1/transactions/batch", json=batch)

    assert response.status_code == 422
    assert client.get("/v1/transactions").json() == []

    batch["transactions"][1]["amount_cents"] = 500
    response = client.post("/v1/transactions/batch", json=batch)

    assert response.status_code == 201
    assert len(client.get("/v1/transactions", params={"card_id": card_id}).json()) == 2


def test_batch_transactions_empty(client: TestClient):
    response = client.post("/v1/transactions/batch", json={"transactions": []})
    assert response.status_code == 422


def test_delete_transaction(client: TestClient, category_id: str):
    card_id = _create_card(client)
    created = client.post("/v1/transactions", json=_expense(card_id, category_id, 100, "2024-02-20")).json()

    assert client.delete(f"/v1/transactions/{created['id']}").status_code == 204
    assert client.delete(f"/v1/transactions/{created['id']}").status_code == 404


def test_delete_card_removes_transactions(client: TestClient, category_id: str):
    card_id = _create_card(client)
    client.post("/v1/transactions", json=_expense(card_id, category_id, 100, "2024-02-20"))

    assert client.delete(f"/v1/cards/{card_id}").status_code == 204
    assert client.get("/v1/transactions").json() == []
    assert client.get(f"/v1/cards/{card_id}/next-payment").status_code == 404


def test_next_payment_debit_card(client: TestClient):
    response = client.post("/v1/cards", json={"name": "Nomina", "type": "debit"})

    next_payment = client.get(f"/v1/cards/{response.json()['id']}/next-payment")

    assert next_payment.status_code == 422


def test_upcoming_payments_sorted(client: TestClient, category_id: str):
    late = _create_card(client, name="Late", cutoff_day=20, payment_day=5)
    soon = _create_card(client, name="Soon", cutoff_day=1, payment_day=15)
    client.post("/v1/cards", json={"name": "Nomina", "type": "debit"})
    client.post("/v1/transactions", json=_expense(soon, category_id, 30000, "2024-02-20"))

    response = client.get("/v1/payments/upcoming", params={"as_of": "2024-03-10"})

    assert response.status_code == 200
    payments = response.json()["payments"]
    assert [p["card_id"] for p in payments] == [soon, late]
    assert payments[0]["card_name"] == "Soon"
    assert payments[0]["total_amount_cents"] == 30000
    assert payments[1]["payment_date"] == "2024-04-05"


def test_personal_day_total(client: TestClient, category_id: str):
    first = _create_card(client, personal_payment_days=[15])
    second = _create_card(client, personal_payment_days=[15])
    other = _create_card(client, personal_payment_days=[30])
    client.post("/v1/transactions", json=_expense(first, category_id, 30000, "2024-02-20"))
    client.post("/v1/transactions", json=_expense(second, category_id, 45000, "2024-02-20"))
    client.post("/v1/transactions", json=_expense(other, category_id, 99900, "2024-02-20"))

    response = client.get("/v1/payments/personal-day/15", params={"as_of": "2024-03-10"})

    assert response.status_code == 200
    assert response.json() == {"day": 15, "total_amount_cents": 75000}


def test_personal_day_out_of_range(client: TestClient):
    assert client.get("/v1/payments/personal-day/45").status_code == 422


def test_card_personal_payments(client: TestClient, category_id: str):
    card_id = _create_card(client, personal_payment_days=[15, 30])
    client.post("/v1/transactions", json=_expense(card_id, category_id, 10000, "2024-02-20"))
    client.post("/v1/transactions", json=_expense(card_id, category_id, 20000, "2024-03-05"))

    response = client.get(f"/v1/cards/{card_id}/personal-payments", params={"as_of": "2024-03-10"})

    assert response.status_code == 200
    payments = response.json()["payments"]
    assert [(p["day"], p["payment_date"]) for p in payments] == [(15, "2024-03-15"), (30, "2024-03-30")]
    assert [p["projection"]["total_amount_cents"] for p in payments] == [10000, 20000]


def test_payment_history(client: TestClient, category_id: str):
    card_id = _create_card(client)
    client.post("/v1/transactions", json=_expense(card_id, category_id, 20000, "2024-03-05"))

    response = client.get("/v1/payments/history", params={"month": "2024-03"})

    assert response.status_code == 200
    (payment,) = response.json()["payments"]
    assert payment["payment_date"] == "2024-04-15"
    assert payment["total_amount_cents"] == 20000


@pytest.mark.parametrize("month", ["2024-13", "March", "2024-3"])
def test_payment_history_invalid_month(client: TestClient, month: str):
    assert client.get("/v1/payments/history", params={"month": month}).status_code == 400


@patch("paycycle.infrastructure.clients.text_extraction.TextExtractionClient.extract_text")
def test_analyze_receipt(mock_extract: AsyncMock, client: TestClient):
    """Test POST /v1/receipts/analyze returns a draft for review"""
    mock_extract.return_value = "OXXO\nTotal: $45.50\n2024-03-10"

    response = client.post("/v1/receipts/analyze", json={"image_base64": "aW1hZ2U="})

    assert response.status_code == 200
    (draft,) = response.json()["transactions"]
    assert draft["amount_cents"] == 4550
    assert draft["date"] == "2024-03-10"
    assert draft["source_text"].startswith("OXXO")
    # Drafts are never saved
    assert client.get("/v1/transactions").json() == []


@patch("paycycle.infrastructure.clients.text_extraction.TextExtractionClient.extract_text")
def test_analyze_receipt_without_text(mock_extract: AsyncMock, client: TestClient):
    mock_extract.return_value = ""

    response = client.post("/v1/receipts/analyze", json={"image_base64": "aW1hZ2U="})

    assert response.status_code == 200
    assert response.json() == {"transactions": []}


@patch("paycycle.infrastructure.clients.text_extraction.TextExtractionClient.extract_text")
def test_analyze_receipt_extraction_failure(mock_extract: AsyncMock, client: TestClient):
    mock_extract.side_effect = TextExtractionError("timeout")

    response = client.post("/v1/receipts/analyze", json={"image_base64": "aW1hZ2U="})

    assert response.status_code == 503
