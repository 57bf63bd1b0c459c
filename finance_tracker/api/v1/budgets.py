"""GET/POST /v1/budgets, DELETE /v1/budgets/{id}"""

from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends

from finance_tracker.api.v1.schemas import BudgetCreateRequest, BudgetProgressSchema, MessageResponse
from finance_tracker.api.dependencies import get_tracker
from finance_tracker.domain.aggregation import evaluate_budgets
from finance_tracker.domain.models import EntityId, Period
from finance_tracker.tracker import FinanceTracker
from finance_tracker.utils.date_utils import current_period

router = APIRouter()


@router.get("/budgets", response_model=List[BudgetProgressSchema])
def list_budgets(tracker: FinanceTracker = Depends(get_tracker)):
    """
    Budgets with spent, remaining, percentage used and status.

    Returns:
        One entry per cached budget, in service order
    """
    return [BudgetProgressSchema.from_domain(p) for p in tracker.budgets()]


@router.post("/budgets", response_model=BudgetProgressSchema)
async def create_budget(request_body: BudgetCreateRequest, tracker: FinanceTracker = Depends(get_tracker)):
    """
    Set a budget for an expense category; month/year default to the current month.

    The figures come from the cache refreshed after the mutation, so spent and
    status reflect the service's transactions. The create payload is only used
    when the budgets fetch of that refresh failed.
    """
    default = current_period()
    period = Period(month=request_body.month or default.month, year=request_body.year or default.year)

    created = await tracker.cache.set_budget(
        category_id=request_body.category_id,
        budget_amount=Decimal(str(request_body.budget_amount)),
        period=period,
    )
    progress = next((p for p in tracker.budgets() if p.budget.id == created.id), None)
    if progress is None:
        [progress] = evaluate_budgets([created], tracker.cache.snapshot.transactions)
    return BudgetProgressSchema.from_domain(progress)


@router.delete("/budgets/{budget_id}", response_model=MessageResponse)
async def delete_budget(budget_id: EntityId, tracker: FinanceTracker = Depends(get_tracker)):
    await tracker.cache.delete_budget(budget_id)
    return MessageResponse(message="Budget deleted")
