"""Integration tests for API endpoints"""

import httpx
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient
from finance_tracker.api.main import create_app
from finance_tracker.domain.exceptions import FinanceServiceError
from finance_tracker.domain.models import Budget, Category, Period, Transaction, TransactionType, User
from finance_tracker.infrastructure.clients.finance import FinanceServiceClient
from finance_tracker.tracker import FinanceTracker

USER = {"username": "alice", "email": "alice@example.com", "password": "s3cret"}


def login(client: TestClient) -> dict:
    client.post("/v1/register", json=USER)
    response = client.post("/v1/login", json={"email": USER["email"], "password": USER["password"]})
    assert response.status_code == 200
    return response.json()


def category_id(client: TestClient, name: str):
    return next(c["id"] for c in client.get("/v1/categories").json() if c["name"] == name)


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["authenticated"] is False


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    client.get("/health")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "http_request_duration_seconds" in response.text


def test_views_require_login(client: TestClient):
    for path in ("/v1/overview", "/v1/analytics", "/v1/budgets", "/v1/transactions"):
        assert client.get(path).status_code == 401
    assert client.post("/v1/refresh").status_code == 401


def test_register_duplicate_email(client: TestClient):
    assert client.post("/v1/register", json=USER).status_code == 200

    response = client.post("/v1/register", json=USER)

    assert response.status_code == 400
    assert response.json()["detail"] == "User already exists"


def test_login_invalid_credentials(client: TestClient):
    client.post("/v1/register", json=USER)

    response = client.post("/v1/login", json={"email": USER["email"], "password": "wrong"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid credentials"


def test_transactions_and_overview(client: TestClient):
    """Mutations are reflected after the automatic refresh"""
    data = login(client)
    assert data["user"]["username"] == "alice"
    food = category_id(client, "Food")
    today = date.today().isoformat()

    client.post("/v1/transactions", json={"amount": 1000, "type": "income", "description": "Pay", "date": today})
    client.post(
        "/v1/transactions",
        json={"amount": 200, "type": "expense", "description": "Groceries", "category_id": food, "date": today},
    )
    client.post(
        "/v1/transactions",
        json={"amount": 50, "type": "expense", "description": "Lunch", "category_id": food, "date": today},
    )
    client.post("/v1/transactions", json={"amount": 30, "type": "expense", "description": "Cash", "date": today})

    overview = client.get("/v1/overview").json()
    assert overview["totals"] == {"income": 1000.0, "expenses": 280.0, "net": 720.0}
    assert len(overview["recent_transactions"]) == 4

    analytics = client.get("/v1/analytics").json()
    # Service returns newest first, so the uncategorized expense is seen first
    assert analytics["category_breakdown"] == [
        {"name": "Uncategorized", "icon": None, "amount": 30.0, "percentage": 10.7},
        {"name": "Food", "icon": "🍔", "amount": 250.0, "percentage": 89.3},
    ]
    assert analytics["transaction_counts"] == {"income": 1, "expense": 3}


def test_overview_for_other_month_is_empty(client: TestClient):
    login(client)
    client.post("/v1/transactions", json={"amount": 75, "type": "expense", "date": "2020-05-04"})

    response = client.get("/v1/overview", params={"month": 6, "year": 2020})

    assert response.json()["totals"]["expenses"] == 0.0
    assert client.get("/v1/overview", params={"month": 5, "year": 2020}).json()["totals"]["expenses"] == 75.0


def test_budget_lifecycle(client: TestClient):
    login(client)
    food = category_id(client, "Food")
    today = date.today().isoformat()
    client.post("/v1/transactions", json={"amount": 101, "type": "expense", "category_id": food, "date": today})

    response = client.post("/v1/budgets", json={"category_id": food, "budget_amount": 100})
    assert response.status_code == 200

    [budget] = client.get("/v1/budgets").json()
    assert budget["category_name"] == "Food"
    assert budget["status"] == "over"
    assert budget["percentage_used"] == 101
    assert budget["progress_width"] == 100
    assert budget["remaining_amount"] == -1.0

    overview = client.get("/v1/overview").json()["budget_overview"]
    assert overview["over_budget_count"] == 1

    assert client.delete(f"/v1/budgets/{budget['budget_id']}").status_code == 200
    assert client.get("/v1/budgets").json() == []


def test_budget_for_income_category_rejected(client: TestClient):
    login(client)
    salary = category_id(client, "Salary")

    response = client.post("/v1/budgets", json={"category_id": salary, "budget_amount": 100})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid category for budget"


def test_transaction_with_category_of_other_type_rejected(client: TestClient):
    login(client)
    salary = category_id(client, "Salary")

    response = client.post("/v1/transactions", json={"amount": 40, "type": "expense", "category_id": salary})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid category"
    assert client.get("/v1/analytics").json()["category_breakdown"] == []


def test_delete_transaction(client: TestClient):
    login(client)
    created = client.post("/v1/transactions", json={"amount": 5, "type": "expense"}).json()

    assert client.delete(f"/v1/transactions/{created['id']}").status_code == 200
    assert client.get("/v1/transactions").json() == []


def test_logout(client: TestClient):
    login(client)
    assert client.post("/v1/logout").status_code == 200
    assert client.get("/v1/overview").status_code == 401


def test_service_unreachable():
    """Transport failures surface as a generic connection error"""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    tracker = FinanceTracker(client=FinanceServiceClient(base_url="http://down.test/api", transport=httpx.MockTransport(handler)))
    client = TestClient(create_app(tracker=tracker))

    response = client.post("/v1/login", json={"email": "a@b.c", "password": "pw"})

    assert response.status_code == 503
    assert response.json()["detail"] == "Connection error"


def test_request_id_is_propagated(client: TestClient):
    assert client.get("/health", headers={"X-Request-ID": "req-42"}).headers["X-Request-ID"] == "req-42"
    assert len(client.get("/health").headers["X-Request-ID"]) == 36


def test_metrics_label_by_route_template(client: TestClient):
    login(client)
    created = client.post("/v1/transactions", json={"amount": 5, "type": "expense"}).json()
    client.delete(f"/v1/transactions/{created['id']}")

    text = client.get("/metrics").text

    assert 'endpoint="/v1/transactions/{transaction_id}"' in text
    assert f'endpoint="/v1/transactions/{created["id"]}"' not in text


def budget_service(food: Category) -> AsyncMock:
    """Service double whose create response omits the spent amount"""
    service = AsyncMock()
    service.register.return_value = "User registered successfully"
    service.login.return_value = ("tok", User(id=1, username="alice", email="alice@example.com"))
    service.list_categories.return_value = [food]
    service.list_transactions.return_value = [
        Transaction(
            id=3,
            amount=Decimal("90"),
            description="Groceries",
            type=TransactionType.EXPENSE,
            category_id=food.id,
        )
    ]
    service.get_budget_overview.side_effect = FinanceServiceError("down")
    service.create_budget.return_value = Budget(id=7, category_id=food.id, budget_amount=Decimal("100"))
    return service


def test_created_budget_reports_refreshed_figures(food: Category):
    service = budget_service(food)
    service.list_budgets.return_value = [
        Budget(
            id=7,
            category_id=food.id,
            budget_amount=Decimal("100"),
            spent_amount=Decimal("85"),
            period=Period(month=3, year=2025),
            category=food,
        )
    ]
    client = TestClient(create_app(tracker=FinanceTracker(client=service)))
    login(client)

    response = client.post("/v1/budgets", json={"category_id": food.id, "budget_amount": 100})

    body = response.json()
    assert body["budget_id"] == 7
    assert body["category_name"] == "Food"
    assert body["spent_amount"] == 85.0
    assert body["status"] == "warning"


def test_created_budget_falls_back_to_cached_transactions(food: Category):
    service = budget_service(food)
    service.list_budgets.side_effect = FinanceServiceError("down")
    client = TestClient(create_app(tracker=FinanceTracker(client=service)))
    login(client)

    body = client.post("/v1/budgets", json={"category_id": food.id, "budget_amount": 100}).json()

    assert body["spent_amount"] == 90.0
    assert body["status"] == "warning"
