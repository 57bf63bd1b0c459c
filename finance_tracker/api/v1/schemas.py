"""Pydantic schemas for API request/response validation"""

import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from finance_tracker.domain.models import (
    BudgetOverview,
    BudgetProgress,
    Category,
    CategoryShare,
    EntityId,
    Totals,
    Transaction,
    TransactionType,
    User,
)


class RegisterRequest(BaseModel):
    """Request body for POST /v1/register"""

    username: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    """Request body for POST /v1/login"""

    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class UserSchema(BaseModel):
    id: EntityId
    username: str
    email: str

    @classmethod
    def from_domain(cls, user: User) -> "UserSchema":
        return cls(id=user.id, username=user.username, email=user.email)


class LoginResponse(BaseModel):
    """Response for POST /v1/login"""

    token: str
    user: UserSchema


class RefreshResponse(BaseModel):
    updated: List[str]
    failed: Dict[str, str]


class CategorySchema(BaseModel):
    id: EntityId
    name: str
    icon: Optional[str] = None
    type: TransactionType

    @classmethod
    def from_domain(cls, category: Category) -> "CategorySchema":
        return cls(id=category.id, name=category.name, icon=category.icon, type=category.type)


class TransactionSchema(BaseModel):
    id: EntityId
    amount: float
    description: str
    type: TransactionType
    date: Optional[datetime.date] = None
    category_id: Optional[EntityId] = None
    category_name: Optional[str] = None

    @classmethod
    def from_domain(cls, txn: Transaction) -> "TransactionSchema":
        return cls(
            id=txn.id,
            amount=float(txn.amount),
            description=txn.description,
            type=txn.type,
            date=txn.date,
            category_id=txn.category_id,
            category_name=txn.category.name if txn.category else None,
        )


class TransactionCreateRequest(BaseModel):
    """Request body for POST /v1/transactions"""

    amount: float = Field(..., ge=0)
    description: str = ""
    type: TransactionType = TransactionType.EXPENSE
    category_id: Optional[EntityId] = None
    date: Optional[datetime.date] = None


class BudgetCreateRequest(BaseModel):
    """Request body for POST /v1/budgets"""

    category_id: EntityId
    budget_amount: float = Field(..., gt=0)
    month: Optional[int] = Field(default=None, ge=1, le=12)
    year: Optional[int] = None


class BudgetProgressSchema(BaseModel):
    budget_id: EntityId
    category_id: Optional[EntityId] = None
    category_name: Optional[str] = None
    category_icon: Optional[str] = None
    month: Optional[int] = None
    year: Optional[int] = None
    budget_amount: float
    spent_amount: float
    remaining_amount: float
    percentage_used: int
    progress_width: int
    status: str

    @classmethod
    def from_domain(cls, progress: BudgetProgress) -> "BudgetProgressSchema":
        budget = progress.budget
        return cls(
            budget_id=budget.id,
            category_id=budget.category_id,
            category_name=budget.category.name if budget.category else None,
            category_icon=budget.category.icon if budget.category else None,
            month=budget.period.month if budget.period else None,
            year=budget.period.year if budget.period else None,
            budget_amount=float(budget.budget_amount),
            spent_amount=float(progress.spent),
            remaining_amount=float(progress.remaining),
            percentage_used=progress.percentage_used,
            progress_width=progress.progress_width,
            status=progress.status.value,
        )


class TotalsSchema(BaseModel):
    income: float
    expenses: float
    net: float

    @classmethod
    def from_domain(cls, totals: Totals) -> "TotalsSchema":
        return cls(income=float(totals.income), expenses=float(totals.expenses), net=float(totals.net))


class BudgetOverviewSchema(BaseModel):
    total_budget: float
    total_spent: float
    remaining_budget: float
    budget_used_percentage: int
    over_budget_count: int
    close_to_limit_count: int

    @classmethod
    def from_domain(cls, overview: BudgetOverview) -> "BudgetOverviewSchema":
        return cls(
            total_budget=float(overview.total_budget),
            total_spent=float(overview.total_spent),
            remaining_budget=float(overview.remaining_budget),
            budget_used_percentage=overview.budget_used_percentage,
            over_budget_count=overview.over_budget_count,
            close_to_limit_count=overview.close_to_limit_count,
        )


class CategoryShareSchema(BaseModel):
    name: str
    icon: Optional[str] = None
    amount: float
    percentage: float

    @classmethod
    def from_domain(cls, share: CategoryShare) -> "CategoryShareSchema":
        return cls(name=share.name, icon=share.icon, amount=float(share.amount), percentage=share.percentage)


class OverviewResponse(BaseModel):
    """Response for GET /v1/overview"""

    month: int
    year: int
    totals: TotalsSchema
    budget_overview: BudgetOverviewSchema
    recent_transactions: List[TransactionSchema]


class TransactionCountsSchema(BaseModel):
    income: int
    expense: int


class AnalyticsResponse(BaseModel):
    """Response for GET /v1/analytics"""

    totals: TotalsSchema
    category_breakdown: List[CategoryShareSchema]
    transaction_counts: TransactionCountsSchema
    budgets: List[BudgetProgressSchema]
