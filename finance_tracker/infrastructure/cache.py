"""Local data cache mirroring the user's transactions, categories, budgets and overview"""

import asyncio
import logging
import time
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Any, Awaitable, Dict, List, Optional, Tuple

from finance_tracker.domain.exceptions import DomainException
from finance_tracker.domain.models import Budget, EntityId, Period, Transaction, TransactionType
from finance_tracker.domain.views import CacheSnapshot
from finance_tracker.infrastructure.clients.finance import FinanceServiceClient
from finance_tracker.infrastructure.observability.logging import log_refresh
from finance_tracker.infrastructure.observability.metrics import record_refresh
from finance_tracker.infrastructure.session import SessionState

logger = logging.getLogger(__name__)


@dataclass
class RefreshResult:
    """Which collections a refresh replaced and which kept their last known value"""

    updated: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)  # collection -> error message

    @property
    def ok(self) -> bool:
        return not self.failed


class LocalDataCache:
    """
    In-memory mirror of the finance service, replaced wholesale on refresh.

    Refresh policy:
    - The four fetches run concurrently and are joined before the snapshot changes
    - Each fetch is guarded on its own; a service failure (any DomainException) keeps that
      collection as it was, other exceptions are programming errors and propagate
    - Every mutation is followed by a full refresh (no optimistic patching)
    - Concurrent refreshes are not de-duplicated; the last one to finish wins
    """

    def __init__(self, client: FinanceServiceClient, session: SessionState):
        self._client = client
        self._session = session
        self._snapshot = CacheSnapshot()

    @property
    def snapshot(self) -> CacheSnapshot:
        return self._snapshot

    def clear(self) -> None:
        self._snapshot = CacheSnapshot()

    async def refresh(self) -> RefreshResult:
        """
        Refetch all collections from the finance service.

        Raises:
            NotAuthenticatedError: No session token
        """
        token = self._session.require_token()
        start_time = time.time()

        fetches = {
            "transactions": self._client.list_transactions(token),
            "categories": self._client.list_categories(token),
            "budgets": self._client.list_budgets(token),
            "overview": self._client.get_budget_overview(token),
        }
        outcomes = await asyncio.gather(*(self._guarded(name, call) for name, call in fetches.items()))

        result = RefreshResult()
        updates: Dict[str, Any] = {}
        for name, (value, error) in zip(fetches, outcomes):
            if error is None:
                updates[name] = tuple(value) if isinstance(value, list) else value
                result.updated.append(name)
            else:
                result.failed[name] = error

        # Single assignment so readers never see a half-updated cache
        self._snapshot = replace(self._snapshot, **updates)

        record_refresh(list(result.failed))
        log_refresh(result.updated, result.failed, (time.time() - start_time) * 1000)
        return result

    async def _guarded(self, name: str, call: Awaitable[Any]) -> Tuple[Any, Optional[str]]:
        try:
            return await call, None
        except DomainException as e:
            logger.warning(f"Fetching {name} failed, keeping last known value: {e}", extra={"collection": name})
            return None, str(e)

    # ---- mutations ----
    async def add_transaction(
        self,
        amount: Decimal,
        description: str,
        type: TransactionType,
        category_id: Optional[EntityId] = None,
        on: Optional[date] = None,
    ) -> Transaction:
        token = self._session.require_token()
        created = await self._client.create_transaction(token, amount, description, type, category_id, on)
        await self.refresh()
        return created

    async def delete_transaction(self, transaction_id: EntityId) -> None:
        token = self._session.require_token()
        await self._client.delete_transaction(token, transaction_id)
        await self.refresh()

    async def set_budget(
        self,
        category_id: EntityId,
        budget_amount: Decimal,
        period: Optional[Period] = None,
    ) -> Budget:
        token = self._session.require_token()
        created = await self._client.create_budget(token, category_id, budget_amount, period)
        await self.refresh()
        return created

    async def delete_budget(self, budget_id: EntityId) -> None:
        token = self._session.require_token()
        await self._client.delete_budget(token, budget_id)
        await self.refresh()
