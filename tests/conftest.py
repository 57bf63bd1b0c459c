"""Pytest fixtures for testing"""

import pytest
import httpx
from datetime import date
from decimal import Decimal
from fastapi import FastAPI
from fastapi.testclient import TestClient

from finance_tracker.api.main import create_app
from finance_tracker.domain.models import Category, Transaction, TransactionType
from finance_tracker.infrastructure.clients.finance import FinanceServiceClient
from finance_tracker.tracker import FinanceTracker
from mock_service.finance_server.main import create_app as create_mock_service

MOCK_API_BASE = "http://finance.test/api"


@pytest.fixture
def mock_service() -> FastAPI:
    """Fresh in-memory finance service per test"""
    return create_mock_service()


@pytest.fixture
def finance_client(mock_service: FastAPI) -> FinanceServiceClient:
    """Client talking to the in-memory finance service through ASGI"""
    return FinanceServiceClient(base_url=MOCK_API_BASE, transport=httpx.ASGITransport(app=mock_service))


@pytest.fixture
def tracker(finance_client: FinanceServiceClient) -> FinanceTracker:
    return FinanceTracker(client=finance_client, recent_limit=5)


@pytest.fixture
def client(tracker: FinanceTracker) -> TestClient:
    """Gateway test client wired to the in-memory finance service"""
    return TestClient(create_app(tracker=tracker))


@pytest.fixture
async def credentials(finance_client: FinanceServiceClient) -> dict:
    """Registered account on the in-memory finance service"""
    creds = {"username": "alice", "email": "alice@example.com", "password": "s3cret"}
    await finance_client.register(**creds)
    return creds


@pytest.fixture
def food() -> Category:
    return Category(id=1, name="Food", type=TransactionType.EXPENSE, icon="🍔")


@pytest.fixture
def salary() -> Category:
    return Category(id=2, name="Salary", type=TransactionType.INCOME, icon="💼")


@pytest.fixture
def sample_transactions(food: Category, salary: Category) -> list[Transaction]:
    """One income, two Food expenses and one uncategorized expense"""
    day = date(2025, 3, 10)
    return [
        Transaction(
            id=1,
            amount=Decimal("1000"),
            description="Salary",
            type=TransactionType.INCOME,
            date=day,
            category_id=salary.id,
            category=salary,
        ),
        Transaction(
            id=2,
            amount=Decimal("200"),
            description="Groceries",
            type=TransactionType.EXPENSE,
            date=day,
            category_id=food.id,
            category=food,
        ),
        Transaction(
            id=3,
            amount=Decimal("50"),
            description="Lunch",
            type=TransactionType.EXPENSE,
            date=day,
            category_id=food.id,
            category=food,
        ),
        Transaction(
            id=4,
            amount=Decimal("30"),
            description="Cash",
            type=TransactionType.EXPENSE,
            date=day,
        ),
    ]
