"""Aggregation engine - derives totals, breakdowns and budget status from cached data"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from finance_tracker.domain.models import (
    Budget,
    BudgetOverview,
    BudgetProgress,
    BudgetStatus,
    Category,
    CategoryShare,
    Period,
    Totals,
    Transaction,
    TransactionCounts,
    TransactionType,
)

UNCATEGORIZED = "Uncategorized"
WARNING_RATIO = Decimal("0.8")

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def _round_half_up(value: Decimal, places: str = "1") -> Decimal:
    return value.quantize(Decimal(places), rounding=ROUND_HALF_UP)


def _sum(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, ZERO)


def resolve_category_name(
    item: Union[Transaction, Budget],
    categories: Sequence[Category] = (),
    fallback: str = UNCATEGORIZED,
) -> str:
    """
    Display name of the category a transaction or budget points at.

    Embedded category wins, then a lookup by id in `categories`, then `fallback`.
    """
    if item.category is not None and item.category.name:
        return item.category.name
    if item.category_id is not None:
        for category in categories:
            if category.id == item.category_id:
                return category.name
    return fallback


def _resolve_category_icon(item: Transaction, categories: Sequence[Category]) -> Optional[str]:
    if item.category is not None:
        return item.category.icon
    for category in categories:
        if category.id == item.category_id:
            return category.icon
    return None


def totals(transactions: Sequence[Transaction], period: Optional[Period] = None) -> Totals:
    """
    Sum income and expenses, optionally restricted to one calendar month.

    Transactions without a date never fall inside a period.
    """
    if period is not None:
        transactions = [t for t in transactions if period.contains(t.date)]

    income = _sum(t.amount for t in transactions if t.type == TransactionType.INCOME)
    expenses = _sum(t.amount for t in transactions if t.type == TransactionType.EXPENSE)

    return Totals(income=income, expenses=expenses, net=income - expenses)


def recent_transactions(transactions: Sequence[Transaction], n: int) -> List[Transaction]:
    """First n transactions in the order the service returned them (no re-sorting)"""
    return list(transactions[: max(n, 0)])


def transaction_counts(transactions: Sequence[Transaction]) -> TransactionCounts:
    return TransactionCounts(
        income=sum(1 for t in transactions if t.type == TransactionType.INCOME),
        expense=sum(1 for t in transactions if t.type == TransactionType.EXPENSE),
    )


def category_breakdown(
    transactions: Sequence[Transaction],
    categories: Sequence[Category] = (),
) -> List[CategoryShare]:
    """
    Group expenses by category name and compute each group's share.

    Requirements:
    - Only expense transactions count
    - Missing or unresolvable category groups under "Uncategorized"
    - Output keeps first-occurrence order of the groups
    - Percentage rounded to one decimal, 0 when there are no expenses
    """
    groups: Dict[str, Decimal] = {}
    icons: Dict[str, Optional[str]] = {}

    for txn in transactions:
        if txn.type != TransactionType.EXPENSE:
            continue
        name = resolve_category_name(txn, categories)
        if name not in groups:
            groups[name] = ZERO
            icons[name] = _resolve_category_icon(txn, categories)
        groups[name] += txn.amount

    total_expenses = _sum(groups.values())

    shares = []
    for name, amount in groups.items():
        if total_expenses > 0:
            percentage = float(_round_half_up(amount / total_expenses * HUNDRED, "0.1"))
        else:
            percentage = 0.0
        shares.append(CategoryShare(name=name, amount=amount, percentage=percentage, icon=icons[name]))

    return shares


def spent_amount(budget: Budget, transactions: Sequence[Transaction]) -> Decimal:
    """Expense total for the budget's category, within its period when it has one"""
    if budget.category_id is None:
        return ZERO

    return _sum(
        t.amount
        for t in transactions
        if t.type == TransactionType.EXPENSE
        and t.category_id == budget.category_id
        and (budget.period is None or budget.period.contains(t.date))
    )


def classify_usage(spent: Decimal, budget_amount: Decimal) -> BudgetStatus:
    """
    Status thresholds:
    - over:    spent strictly greater than the budget
    - warning: spent at or above 80% of the budget (exactly 100% is still warning)
    - good:    everything else
    """
    if spent > budget_amount:
        return BudgetStatus.OVER
    if spent >= WARNING_RATIO * budget_amount:
        return BudgetStatus.WARNING
    return BudgetStatus.GOOD


def _percentage_used(spent: Decimal, budget_amount: Decimal) -> int:
    if budget_amount == 0:
        return 0
    return int(_round_half_up(spent / budget_amount * HUNDRED))


def budget_status(budget: Budget, spent: Optional[Decimal] = None) -> BudgetProgress:
    """
    Derive remaining amount, usage percentage and status for one budget.

    `spent` overrides the budget's own spent_amount; absent both, spent is 0.
    """
    if spent is None:
        spent = budget.spent_amount if budget.spent_amount is not None else ZERO

    percentage_used = _percentage_used(spent, budget.budget_amount)

    return BudgetProgress(
        budget=budget,
        spent=spent,
        remaining=budget.budget_amount - spent,
        percentage_used=percentage_used,
        status=classify_usage(spent, budget.budget_amount),
        progress_width=min(percentage_used, 100),
    )


def evaluate_budgets(
    budgets: Sequence[Budget],
    transactions: Sequence[Transaction] = (),
) -> List[BudgetProgress]:
    """Server-provided spent amounts take precedence; otherwise recompute from transactions"""
    return [
        budget_status(
            budget,
            budget.spent_amount if budget.spent_amount is not None else spent_amount(budget, transactions),
        )
        for budget in budgets
    ]


def overview_counts(
    budgets: Sequence[Budget],
    transactions: Sequence[Transaction] = (),
) -> Tuple[int, int]:
    """Returns: (over_budget_count, close_to_limit_count)"""
    return _count_statuses(evaluate_budgets(budgets, transactions))


def _count_statuses(progress: Sequence[BudgetProgress]) -> Tuple[int, int]:
    over = sum(1 for p in progress if p.status == BudgetStatus.OVER)
    warning = sum(1 for p in progress if p.status == BudgetStatus.WARNING)
    return over, warning


def summarize_budgets(
    budgets: Sequence[Budget],
    transactions: Sequence[Transaction] = (),
) -> BudgetOverview:
    """Local recomputation of the service's budget overview"""
    progress = evaluate_budgets(budgets, transactions)
    total_budget = _sum(p.budget.budget_amount for p in progress)
    total_spent = _sum(p.spent for p in progress)
    over, warning = _count_statuses(progress)

    return BudgetOverview(
        total_budget=total_budget,
        total_spent=total_spent,
        remaining_budget=total_budget - total_spent,
        budget_used_percentage=_percentage_used(total_spent, total_budget),
        over_budget_count=over,
        close_to_limit_count=warning,
    )


def resolve_overview(
    server_overview: Optional[BudgetOverview],
    budgets: Sequence[Budget],
    transactions: Sequence[Transaction] = (),
) -> BudgetOverview:
    """Use the service's overview when available, fall back to the local summary"""
    if server_overview is not None:
        return server_overview
    return summarize_budgets(budgets, transactions)
