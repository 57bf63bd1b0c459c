"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
import datetime
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

EntityId = Union[int, str]


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class BudgetStatus(str, Enum):
    GOOD = "good"
    WARNING = "warning"
    OVER = "over"


@dataclass(frozen=True)
class Period:
    """Calendar month a budget or a view is scoped to"""

    month: int  # 1-12
    year: int

    @classmethod
    def of(cls, day: date) -> "Period":
        return cls(month=day.month, year=day.year)

    def contains(self, day: Optional[date]) -> bool:
        return day is not None and day.month == self.month and day.year == self.year


@dataclass(frozen=True)
class User:
    """Authenticated identity returned by login"""

    id: EntityId
    username: str
    email: str


@dataclass(frozen=True)
class Category:
    """Named classification of income or expense"""

    id: EntityId
    name: str
    type: TransactionType
    icon: Optional[str] = None


@dataclass(frozen=True)
class Transaction:
    """Single recorded money movement"""

    id: EntityId
    amount: Decimal
    description: str
    type: TransactionType
    date: Optional[datetime.date] = None
    category_id: Optional[EntityId] = None
    category: Optional[Category] = None


@dataclass(frozen=True)
class Budget:
    """Spending cap for one expense category"""

    id: EntityId
    category_id: Optional[EntityId]
    budget_amount: Decimal
    spent_amount: Optional[Decimal] = None  # server computed, None when not embedded
    period: Optional[Period] = None  # None means running total
    category: Optional[Category] = None


@dataclass(frozen=True)
class BudgetOverview:
    """Aggregate snapshot across all budgets"""

    total_budget: Decimal
    total_spent: Decimal
    remaining_budget: Decimal
    budget_used_percentage: int
    over_budget_count: int
    close_to_limit_count: int


@dataclass(frozen=True)
class Totals:
    """Income, expense and net sums for a set of transactions"""

    income: Decimal
    expenses: Decimal
    net: Decimal


@dataclass(frozen=True)
class CategoryShare:
    """Expense total for one category and its share of all expenses"""

    name: str
    amount: Decimal
    percentage: float
    icon: Optional[str] = None


@dataclass(frozen=True)
class BudgetProgress:
    """Derived utilization figures for one budget"""

    budget: Budget
    spent: Decimal
    remaining: Decimal
    percentage_used: int
    status: BudgetStatus
    progress_width: int  # percentage_used capped at 100


@dataclass(frozen=True)
class TransactionCounts:
    income: int
    expense: int
