"""Finance service HTTP client for auth, transactions, categories and budgets"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

import httpx
from pydantic import ValidationError

from finance_tracker.config import settings
from finance_tracker.domain.exceptions import FinanceServiceError, ServiceRejectedError
from finance_tracker.domain.models import (
    Budget,
    BudgetOverview,
    Category,
    EntityId,
    Period,
    Transaction,
    TransactionType,
    User,
)
from finance_tracker.infrastructure.clients.schemas import (
    BudgetListResponse,
    BudgetOverviewResponse,
    BudgetPayload,
    CategoryListResponse,
    LoginResponse,
    TransactionListResponse,
    TransactionPayload,
)
from finance_tracker.infrastructure.observability.metrics import (
    service_failures_counter,
    service_latency_histogram,
)

logger = logging.getLogger(__name__)


class FinanceServiceClient:
    """Client for the remote finance REST service"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.finance_api_base).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self._transport = transport

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        token: str | None = None,
        json: Dict[str, Any] | None = None,
    ) -> Dict[str, Any]:
        """
        Send one request and unwrap the {"success": ...} envelope.

        Raises:
            FinanceServiceError: On timeout, network failure, an invalid base URL,
                or a body that is not a JSON object
            ServiceRejectedError: When the service answers success=false
        """
        headers = {"Authorization": f"Bearer {token}"} if token else {}

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                with service_latency_histogram.labels(operation=operation).time():
                    response = await client.request(
                        method,
                        f"{self.base_url}{path}",
                        headers=headers,
                        json=json,
                    )
                data = response.json()

            except httpx.TimeoutException as e:
                service_failures_counter.labels(operation=operation, kind="connection").inc()
                raise FinanceServiceError(f"Finance service timeout after {self.timeout}s") from e
            except httpx.RequestError as e:
                service_failures_counter.labels(operation=operation, kind="connection").inc()
                raise FinanceServiceError(f"Finance service unreachable: {e}") from e
            except httpx.InvalidURL as e:
                service_failures_counter.labels(operation=operation, kind="connection").inc()
                raise FinanceServiceError(f"Invalid finance service URL {self.base_url!r}: {e}") from e
            except ValueError as e:
                service_failures_counter.labels(operation=operation, kind="connection").inc()
                raise FinanceServiceError(
                    f"Malformed response from finance service ({response.status_code})"
                ) from e

        if not isinstance(data, dict):
            service_failures_counter.labels(operation=operation, kind="connection").inc()
            raise FinanceServiceError(f"Unexpected {type(data).__name__} body from finance service")

        if not data.get("success"):
            service_failures_counter.labels(operation=operation, kind="rejected").inc()
            message = data.get("message") or f"{operation} failed ({response.status_code})"
            logger.info("Finance service rejected %s: %s", operation, message)
            raise ServiceRejectedError(message, status_code=response.status_code)

        return data

    @staticmethod
    def _parse(schema, data: Dict[str, Any]):
        try:
            return schema.model_validate(data)
        except ValidationError as e:
            raise FinanceServiceError(f"Invalid {schema.__name__} data from finance service: {e}") from e

    # ---- auth ----
    async def register(self, username: str, email: str, password: str) -> str:
        data = await self._request(
            "register",
            "POST",
            "/register",
            json={"username": username, "email": email, "password": password},
        )
        return data.get("message") or "Registration successful"

    async def login(self, email: str, password: str) -> Tuple[str, User]:
        data = await self._request("login", "POST", "/login", json={"email": email, "password": password})
        payload = self._parse(LoginResponse, data)
        return payload.token, payload.user.to_domain()

    # ---- reads ----
    async def list_categories(self, token: str) -> List[Category]:
        data = await self._request("list_categories", "GET", "/categories", token=token)
        return [c.to_domain() for c in self._parse(CategoryListResponse, data).categories]

    async def list_transactions(self, token: str) -> List[Transaction]:
        data = await self._request("list_transactions", "GET", "/transactions", token=token)
        return [t.to_domain() for t in self._parse(TransactionListResponse, data).transactions]

    async def list_budgets(self, token: str) -> List[Budget]:
        data = await self._request("list_budgets", "GET", "/budgets", token=token)
        return [b.to_domain() for b in self._parse(BudgetListResponse, data).budgets]

    async def get_budget_overview(self, token: str) -> BudgetOverview:
        data = await self._request("budget_overview", "GET", "/budgets/overview", token=token)
        return self._parse(BudgetOverviewResponse, data).overview.to_domain()

    # ---- mutations ----
    async def create_transaction(
        self,
        token: str,
        amount: Decimal,
        description: str,
        type: TransactionType,
        category_id: Optional[EntityId] = None,
        on: Optional[date] = None,
    ) -> Transaction:
        body: Dict[str, Any] = {
            "amount": float(amount),
            "description": description,
            "type": TransactionType(type).value,
            "CategoryId": category_id,
        }
        if on is not None:
            body["date"] = on.isoformat()

        data = await self._request("create_transaction", "POST", "/transactions", token=token, json=body)
        return self._parse(TransactionPayload, data.get("transaction") or {}).to_domain()

    async def delete_transaction(self, token: str, transaction_id: EntityId) -> None:
        await self._request("delete_transaction", "DELETE", f"/transactions/{transaction_id}", token=token)

    async def create_budget(
        self,
        token: str,
        category_id: EntityId,
        budget_amount: Decimal,
        period: Optional[Period] = None,
    ) -> Budget:
        body: Dict[str, Any] = {"CategoryId": category_id, "budgetAmount": float(budget_amount)}
        if period is not None:
            body["month"] = period.month
            body["year"] = period.year

        data = await self._request("create_budget", "POST", "/budgets", token=token, json=body)
        return self._parse(BudgetPayload, data.get("budget") or {}).to_domain()

    async def delete_budget(self, token: str, budget_id: EntityId) -> None:
        await self._request("delete_budget", "DELETE", f"/budgets/{budget_id}", token=token)
