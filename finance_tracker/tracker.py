"""Facade wiring session, cache and view assembly together"""

import logging
from typing import List, Optional, Tuple

from finance_tracker.config import settings
from finance_tracker.domain.models import BudgetProgress, Category, Period, Transaction, User
from finance_tracker.domain.views import AnalyticsView, OverviewView, build_analytics, build_budgets, build_overview
from finance_tracker.infrastructure.cache import LocalDataCache
from finance_tracker.infrastructure.clients.finance import FinanceServiceClient
from finance_tracker.infrastructure.session import SessionState
from finance_tracker.utils.date_utils import current_period

logger = logging.getLogger(__name__)


class FinanceTracker:
    """Single-user client: one session, one cache"""

    def __init__(
        self,
        client: FinanceServiceClient | None = None,
        recent_limit: int | None = None,
    ):
        self.client = client or FinanceServiceClient()
        self.session = SessionState(self.client)
        self.cache = LocalDataCache(self.client, self.session)
        self.recent_limit = recent_limit if recent_limit is not None else settings.recent_transactions_limit

    async def login(self, email: str, password: str) -> Tuple[str, User]:
        """Authenticate, then load the user's data into an emptied cache"""
        token, user = await self.session.login(email, password)
        # A collection whose first fetch fails must not show the previous user's records
        self.cache.clear()
        await self.cache.refresh()
        return token, user

    def logout(self) -> None:
        """Drop the credential and every cached record of the previous user"""
        self.session.logout()
        self.cache.clear()
        logger.info("Logged out")

    # ---- views ----
    def overview(self, period: Optional[Period] = None) -> OverviewView:
        self.session.require_token()
        return build_overview(self.cache.snapshot, period or current_period(), self.recent_limit)

    def analytics(self) -> AnalyticsView:
        self.session.require_token()
        return build_analytics(self.cache.snapshot)

    def budgets(self) -> List[BudgetProgress]:
        self.session.require_token()
        return build_budgets(self.cache.snapshot)

    def transactions(self) -> List[Transaction]:
        self.session.require_token()
        return list(self.cache.snapshot.transactions)

    def categories(self) -> List[Category]:
        self.session.require_token()
        return list(self.cache.snapshot.categories)
