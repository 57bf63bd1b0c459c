"""Pydantic schemas for finance service payloads and their mapping to domain models"""

import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

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
from finance_tracker.utils.date_utils import parse_service_date

logger = logging.getLogger(__name__)


def parse_amount(value: Any) -> Decimal:
    """Lenient amount parsing: numbers or decimal strings, anything else reads as 0"""
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError):
            logger.warning("Unparseable amount from finance service: %r", value)
            return Decimal("0")
    if not amount.is_finite():
        logger.warning("Non-finite amount from finance service: %r", value)
        return Decimal("0")
    return amount


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class UserPayload(_Payload):
    id: EntityId
    username: str = ""
    email: str = ""

    def to_domain(self) -> User:
        return User(id=self.id, username=self.username, email=self.email)


class CategoryPayload(_Payload):
    id: EntityId
    name: str
    icon: Optional[str] = None
    type: TransactionType

    def to_domain(self) -> Category:
        return Category(id=self.id, name=self.name, type=self.type, icon=self.icon)


class TransactionPayload(_Payload):
    id: EntityId
    amount: Decimal = Decimal("0")
    description: str = ""
    type: TransactionType
    date: Optional[Any] = None
    category_id: Optional[EntityId] = Field(default=None, alias="CategoryId")
    category: Optional[CategoryPayload] = Field(default=None, alias="Category")

    @field_validator("amount", mode="before")
    @classmethod
    def _lenient_amount(cls, value: Any) -> Decimal:
        return parse_amount(value)

    @field_validator("description", mode="before")
    @classmethod
    def _none_description(cls, value: Any) -> str:
        return "" if value is None else value

    def to_domain(self) -> Transaction:
        category = self.category.to_domain() if self.category else None
        return Transaction(
            id=self.id,
            amount=self.amount,
            description=self.description,
            type=self.type,
            date=parse_service_date(self.date),
            category_id=self.category_id if self.category_id is not None else (category.id if category else None),
            category=category,
        )


class BudgetPayload(_Payload):
    id: EntityId
    category_id: Optional[EntityId] = Field(default=None, alias="CategoryId")
    budget_amount: Decimal = Field(default=Decimal("0"), alias="budgetAmount")
    spent_amount: Optional[Decimal] = Field(default=None, alias="spentAmount")
    month: Optional[int] = None
    year: Optional[int] = None
    category: Optional[CategoryPayload] = Field(default=None, alias="Category")

    @field_validator("budget_amount", mode="before")
    @classmethod
    def _lenient_budget_amount(cls, value: Any) -> Decimal:
        return parse_amount(value)

    @field_validator("spent_amount", mode="before")
    @classmethod
    def _lenient_spent_amount(cls, value: Any) -> Optional[Decimal]:
        return None if value is None else parse_amount(value)

    def to_domain(self) -> Budget:
        category = self.category.to_domain() if self.category else None
        period = Period(month=self.month, year=self.year) if self.month and self.year else None
        return Budget(
            id=self.id,
            category_id=self.category_id if self.category_id is not None else (category.id if category else None),
            budget_amount=self.budget_amount,
            spent_amount=self.spent_amount,
            period=period,
            category=category,
        )


class BudgetOverviewPayload(_Payload):
    total_budget: Decimal = Field(default=Decimal("0"), alias="totalBudget")
    total_spent: Decimal = Field(default=Decimal("0"), alias="totalSpent")
    remaining_budget: Decimal = Field(default=Decimal("0"), alias="remainingBudget")
    budget_used_percentage: int = Field(default=0, alias="budgetUsedPercentage")
    over_budget_count: int = Field(default=0, alias="overBudgetCount")
    close_to_limit_count: int = Field(default=0, alias="closeToLimitCount")

    @field_validator("total_budget", "total_spent", "remaining_budget", mode="before")
    @classmethod
    def _lenient_amounts(cls, value: Any) -> Decimal:
        return parse_amount(value)

    @field_validator("budget_used_percentage", mode="before")
    @classmethod
    def _whole_percentage(cls, value: Any) -> int:
        return int(parse_amount(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    def to_domain(self) -> BudgetOverview:
        return BudgetOverview(
            total_budget=self.total_budget,
            total_spent=self.total_spent,
            remaining_budget=self.remaining_budget,
            budget_used_percentage=self.budget_used_percentage,
            over_budget_count=self.over_budget_count,
            close_to_limit_count=self.close_to_limit_count,
        )


class LoginResponse(_Payload):
    token: str
    user: UserPayload


class CategoryListResponse(_Payload):
    categories: List[CategoryPayload] = Field(default_factory=list)


class TransactionListResponse(_Payload):
    transactions: List[TransactionPayload] = Field(default_factory=list)


class BudgetListResponse(_Payload):
    budgets: List[BudgetPayload] = Field(default_factory=list)


class BudgetOverviewResponse(_Payload):
    overview: BudgetOverviewPayload
