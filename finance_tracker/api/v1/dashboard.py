"""GET /v1/overview, /v1/analytics, /v1/categories - derived figures for each tab"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from finance_tracker.api.v1.schemas import (
    AnalyticsResponse,
    BudgetOverviewSchema,
    BudgetProgressSchema,
    CategorySchema,
    CategoryShareSchema,
    OverviewResponse,
    TotalsSchema,
    TransactionCountsSchema,
    TransactionSchema,
)
from finance_tracker.api.dependencies import get_tracker
from finance_tracker.domain.models import Period
from finance_tracker.tracker import FinanceTracker
from finance_tracker.utils.date_utils import current_period

router = APIRouter()


@router.get("/overview", response_model=OverviewResponse)
def get_overview(
    month: Optional[int] = Query(None, ge=1, le=12, description="Month to total, defaults to the current one"),
    year: Optional[int] = Query(None, description="Year to total, defaults to the current one"),
    tracker: FinanceTracker = Depends(get_tracker),
):
    """
    Overview tab: month-scoped income/expenses/net, budget overview and recent transactions.
    """
    default = current_period()
    view = tracker.overview(Period(month=month or default.month, year=year or default.year))

    return OverviewResponse(
        month=view.period.month,
        year=view.period.year,
        totals=TotalsSchema.from_domain(view.totals),
        budget_overview=BudgetOverviewSchema.from_domain(view.budget_overview),
        recent_transactions=[TransactionSchema.from_domain(t) for t in view.recent],
    )


@router.get("/analytics", response_model=AnalyticsResponse)
def get_analytics(tracker: FinanceTracker = Depends(get_tracker)):
    """Analytics tab: all-time totals, expense breakdown, counts and budget vs actual"""
    view = tracker.analytics()

    return AnalyticsResponse(
        totals=TotalsSchema.from_domain(view.totals),
        category_breakdown=[CategoryShareSchema.from_domain(s) for s in view.breakdown],
        transaction_counts=TransactionCountsSchema(income=view.counts.income, expense=view.counts.expense),
        budgets=[BudgetProgressSchema.from_domain(p) for p in view.budgets],
    )


@router.get("/categories", response_model=List[CategorySchema])
def list_categories(tracker: FinanceTracker = Depends(get_tracker)):
    return [CategorySchema.from_domain(c) for c in tracker.categories()]
