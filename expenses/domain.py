from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class Category(str, Enum):
    HOUSING = "Housing"
    FOOD = "Food"
    TRANSPORTATION = "Transportation"
    HEALTH = "Health"
    ENTERTAINMENT = "Entertainment"
    UTILITIES = "Utilities"
    OTHER = "Other"


class PaymentMethod(str, Enum):
    CARD = "Card"
    CASH = "Cash"
    BANK_TRANSFER = "Bank Transfer"


ALL = "All"

CategoryFilter = Union[Category, str]


@dataclass(frozen=True)
class Transaction:
    id: int
    description: str
    category: Category
    amount: Decimal      # always >= 0
    date: str            # "YYYY-MM-DD"
    payment_method: PaymentMethod
    note: str = ""       # optional note

    @property
    def month(self) -> str:
        return self.date[:7]


# Monthly spending ceiling for a category
@dataclass(frozen=True)
class Budget:
    category: Category
    limit: Decimal


@dataclass(frozen=True)
class Selection:
    month: Optional[str]
    category: CategoryFilter = ALL

    def with_month(self, month: Optional[str]) -> "Selection":
        return replace(self, month=month)

    def with_category(self, category: CategoryFilter) -> "Selection":
        return replace(self, category=category)


@dataclass(frozen=True)
class MonthOverMonth:
    current: Decimal
    previous: Decimal
    delta: Decimal
    percent: Optional[Decimal]  # None when there is nothing to compare against


@dataclass(frozen=True)
class CategoryUsage:
    category: Category
    actual: Decimal
    budget: Decimal
    utilization: int
