"""Per-tab figures assembled from a cache snapshot and explicit view state"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from finance_tracker.domain.aggregation import (
    category_breakdown,
    evaluate_budgets,
    recent_transactions,
    resolve_overview,
    totals,
    transaction_counts,
)
from finance_tracker.domain.models import (
    Budget,
    BudgetOverview,
    BudgetProgress,
    Category,
    CategoryShare,
    Period,
    Totals,
    Transaction,
    TransactionCounts,
)


@dataclass(frozen=True)
class CacheSnapshot:
    """Immutable copy of the four cached collections"""

    transactions: Tuple[Transaction, ...] = ()
    categories: Tuple[Category, ...] = ()
    budgets: Tuple[Budget, ...] = ()
    overview: Optional[BudgetOverview] = None


@dataclass(frozen=True)
class OverviewView:
    period: Period
    totals: Totals
    budget_overview: BudgetOverview
    recent: List[Transaction] = field(default_factory=list)


@dataclass(frozen=True)
class AnalyticsView:
    totals: Totals
    breakdown: List[CategoryShare]
    counts: TransactionCounts
    budgets: List[BudgetProgress]


def build_overview(snapshot: CacheSnapshot, period: Period, recent_limit: int) -> OverviewView:
    """
    Overview tab: this month's totals, budget overview and latest transactions.

    The service's overview wins over the local summary when it was fetched.
    """
    return OverviewView(
        period=period,
        totals=totals(snapshot.transactions, period),
        budget_overview=resolve_overview(snapshot.overview, snapshot.budgets, snapshot.transactions),
        recent=recent_transactions(snapshot.transactions, recent_limit),
    )


def build_analytics(snapshot: CacheSnapshot) -> AnalyticsView:
    """Analytics tab uses all-time totals"""
    return AnalyticsView(
        totals=totals(snapshot.transactions),
        breakdown=category_breakdown(snapshot.transactions, snapshot.categories),
        counts=transaction_counts(snapshot.transactions),
        budgets=evaluate_budgets(snapshot.budgets, snapshot.transactions),
    )


def build_budgets(snapshot: CacheSnapshot) -> List[BudgetProgress]:
    return evaluate_budgets(snapshot.budgets, snapshot.transactions)
