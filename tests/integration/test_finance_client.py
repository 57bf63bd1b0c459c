"""Integration tests for the finance service client against the in-memory service"""

import pytest
import httpx
from datetime import date
from decimal import Decimal
from finance_tracker.domain.exceptions import FinanceServiceError, ServiceRejectedError
from finance_tracker.domain.models import BudgetStatus, Period, TransactionType
from finance_tracker.domain.aggregation import budget_status
from finance_tracker.infrastructure.clients.finance import FinanceServiceClient

MOCK_API_BASE = "http://finance.test/api"


def client_with(handler) -> FinanceServiceClient:
    return FinanceServiceClient(base_url=MOCK_API_BASE, transport=httpx.MockTransport(handler))


async def test_register_and_login(finance_client: FinanceServiceClient, credentials: dict):
    token, user = await finance_client.login(credentials["email"], credentials["password"])

    assert token
    assert user.username == "alice"
    assert user.email == "alice@example.com"


async def test_register_duplicate_email_is_rejected(finance_client: FinanceServiceClient, credentials: dict):
    with pytest.raises(ServiceRejectedError) as exc_info:
        await finance_client.register(**credentials)

    assert exc_info.value.message == "User already exists"


async def test_login_wrong_password_is_rejected(finance_client: FinanceServiceClient, credentials: dict):
    with pytest.raises(ServiceRejectedError) as exc_info:
        await finance_client.login(credentials["email"], "wrong")

    assert exc_info.value.message == "Invalid credentials"
    assert exc_info.value.status_code == 401


async def test_missing_token_is_rejected(finance_client: FinanceServiceClient):
    with pytest.raises(ServiceRejectedError):
        await finance_client.list_transactions("not-a-token")


async def test_transaction_lifecycle(finance_client: FinanceServiceClient, credentials: dict):
    token, _ = await finance_client.login(credentials["email"], credentials["password"])
    categories = await finance_client.list_categories(token)
    food = next(c for c in categories if c.name == "Food")

    created = await finance_client.create_transaction(
        token,
        amount=Decimal("12.50"),
        description="Lunch",
        type=TransactionType.EXPENSE,
        category_id=food.id,
        on=date(2025, 3, 10),
    )

    assert created.amount == Decimal("12.5")
    assert created.category.name == "Food"
    assert created.date == date(2025, 3, 10)

    transactions = await finance_client.list_transactions(token)
    assert [t.id for t in transactions] == [created.id]

    await finance_client.delete_transaction(token, created.id)
    assert await finance_client.list_transactions(token) == []


async def test_budget_spent_and_overview(finance_client: FinanceServiceClient, credentials: dict):
    token, _ = await finance_client.login(credentials["email"], credentials["password"])
    food = next(c for c in await finance_client.list_categories(token) if c.name == "Food")
    march = Period(month=3, year=2025)

    await finance_client.create_transaction(
        token, Decimal("85"), "Groceries", TransactionType.EXPENSE, food.id, date(2025, 3, 5)
    )
    await finance_client.create_transaction(
        token, Decimal("40"), "Groceries", TransactionType.EXPENSE, food.id, date(2025, 4, 5)
    )
    budget = await finance_client.create_budget(token, food.id, Decimal("100"), march)

    assert budget.period == march
    assert budget.spent_amount == Decimal("85")

    overview = await finance_client.get_budget_overview(token)
    assert overview.total_budget == Decimal("100")
    assert overview.total_spent == Decimal("85")
    assert overview.budget_used_percentage == 85
    assert overview.close_to_limit_count == 1

    [listed] = await finance_client.list_budgets(token)
    assert listed.category.name == "Food"


async def test_budget_for_income_category_is_rejected(finance_client: FinanceServiceClient, credentials: dict):
    token, _ = await finance_client.login(credentials["email"], credentials["password"])
    salary = next(c for c in await finance_client.list_categories(token) if c.type == TransactionType.INCOME)

    with pytest.raises(ServiceRejectedError) as exc_info:
        await finance_client.create_budget(token, salary.id, Decimal("100"))

    assert exc_info.value.message == "Invalid category for budget"


async def test_connection_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FinanceServiceError):
        await client_with(handler).list_categories("token")


async def test_timeout():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(FinanceServiceError, match="timeout"):
        await client_with(handler).list_categories("token")


async def test_malformed_response():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>Bad Gateway</html>")

    with pytest.raises(FinanceServiceError, match="Malformed"):
        await client_with(handler).list_budgets("token")


async def test_bearer_token_and_string_amounts():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        seen["url"] = str(request.url)
        return httpx.Response(
            200,
            json={
                "success": True,
                "transactions": [
                    {"id": 1, "amount": "1000.00", "type": "income", "description": "Pay", "CategoryId": None},
                ],
            },
        )

    [txn] = await client_with(handler).list_transactions("abc123")

    assert seen["auth"] == "Bearer abc123"
    assert seen["url"] == f"{MOCK_API_BASE}/transactions"
    assert txn.amount == Decimal("1000.00")


async def test_server_side_status_embedded_in_budgets(finance_client: FinanceServiceClient, credentials: dict):
    token, _ = await finance_client.login(credentials["email"], credentials["password"])
    food = next(c for c in await finance_client.list_categories(token) if c.name == "Food")
    today = date.today()

    await finance_client.create_transaction(token, Decimal("150"), "Feast", TransactionType.EXPENSE, food.id, today)
    budget = await finance_client.create_budget(token, food.id, Decimal("100"), Period.of(today))

    assert budget_status(budget).status == BudgetStatus.OVER


async def test_transaction_category_must_match_type(finance_client: FinanceServiceClient, credentials: dict):
    token, _ = await finance_client.login(credentials["email"], credentials["password"])
    salary = next(c for c in await finance_client.list_categories(token) if c.name == "Salary")

    with pytest.raises(ServiceRejectedError) as exc_info:
        await finance_client.create_transaction(token, Decimal("40"), "Lunch", TransactionType.EXPENSE, salary.id)

    assert exc_info.value.message == "Invalid category"
    assert await finance_client.list_transactions(token) == []


async def test_invalid_base_url():
    client = FinanceServiceClient(base_url="http://finance.test:notaport/api")

    with pytest.raises(FinanceServiceError, match="Invalid finance service URL"):
        await client.list_categories("token")
