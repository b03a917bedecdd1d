"""
Core Data Models for Finance Manager

These are the domain view models the pages work with. Services translate
raw ``_c`` records from the store into these shapes and back.

DESIGN DECISION: Models are lenient about what the store hands back
(a stored balance may be negative, a currency may be unknown) because
the store enforces nothing. The strict rules live in the form
validator, which runs before anything is written.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Currency(str, Enum):
    """Currencies a bank account can be held in."""
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    JPY = "JPY"


class AccountType(str, Enum):
    CHECKING = "Checking"
    SAVINGS = "Savings"
    CREDIT_CARD = "Credit Card"
    INVESTMENT = "Investment"


class CategoryType(str, Enum):
    """Whether a category groups money coming in or going out."""
    INCOME = "income"
    EXPENSE = "expense"


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


DEFAULT_CATEGORY_COLOR = "#3B82F6"
DEFAULT_CATEGORY_ICON = "ShoppingCart"


# =============================================================================
# ENTITIES
# =============================================================================

class BankAccount(BaseModel):
    """A bank account and its current balance."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[int] = None
    name: str = ""
    account_number: str = ""
    bank_name: str = ""
    balance: float = Field(default=0.0, allow_inf_nan=False)
    currency: str = Currency.USD.value
    account_type: Optional[str] = None

    @field_validator('currency')
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return v.upper() if v else Currency.USD.value


class Category(BaseModel):
    """A transaction category, referenced by budgets and transactions."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=100)
    type: CategoryType = CategoryType.EXPENSE
    color: str = DEFAULT_CATEGORY_COLOR
    icon: str = DEFAULT_CATEGORY_ICON


class Budget(BaseModel):
    """
    A monthly spending limit for one category.

    ``spent`` is never persisted. It defaults to zero and is filled in
    from the month's expense transactions when the caller asks for it.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[int] = None
    name: Optional[str] = None
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    month: str = Field(..., pattern=r"^\d{4}-(0[1-9]|1[0-2])$")
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    spent: float = 0.0

    @property
    def remaining(self) -> float:
        return self.amount - self.spent

    @property
    def percent_used(self) -> float:
        if self.amount <= 0:
            return 0.0
        return self.spent / self.amount * 100

    @property
    def is_over_budget(self) -> bool:
        return self.spent > self.amount


class GoalProgress(BaseModel):
    """Derived progress for a savings goal."""
    progress: float = Field(..., ge=0, le=100)
    remaining: float = Field(..., ge=0)
    is_completed: bool


class Goal(BaseModel):
    """A savings goal."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[int] = None
    name: str = ""
    target_amount: float = Field(default=0.0, allow_inf_nan=False)
    current_amount: float = Field(default=0.0, allow_inf_nan=False)
    deadline: Optional[date] = None

    @property
    def is_completed(self) -> bool:
        return self.current_amount >= self.target_amount

    def progress(self) -> GoalProgress:
        """
        Progress as a percentage clamped to [0, 100].

        A zero target is treated as already reached.
        """
        if self.target_amount <= 0:
            percent = 100.0
        else:
            percent = self.current_amount / self.target_amount * 100
        return GoalProgress(
            progress=min(max(percent, 0.0), 100.0),
            remaining=max(self.target_amount - self.current_amount, 0.0),
            is_completed=self.is_completed,
        )


class Transaction(BaseModel):
    """A single income or expense entry."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[int] = None
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    type: TransactionType
    date: date
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None

    @property
    def signed_amount(self) -> float:
        """Positive for income, negative for expenses."""
        return self.amount if self.type == TransactionType.INCOME else -self.amount

    @property
    def month(self) -> str:
        return self.date.strftime("%Y-%m")


# =============================================================================
# REPORT MODELS
# =============================================================================

class PeriodSummary(BaseModel):
    """Income/expense totals over a set of transactions."""
    income: float = 0.0
    expense: float = 0.0
    transaction_count: int = 0

    @property
    def net(self) -> float:
        return self.income - self.expense

    @property
    def savings_rate(self) -> float:
        """Share of income kept, in percent. Zero when there is no income."""
        if self.income <= 0:
            return 0.0
        return self.net / self.income * 100


class CategoryBreakdown(BaseModel):
    """Expense total for one category."""
    category_id: Optional[int] = None
    category_name: str
    color: str = DEFAULT_CATEGORY_COLOR
    total: float = 0.0
    share: float = Field(default=0.0, ge=0, le=100)


class MonthlyTotals(BaseModel):
    month: str
    income: float = 0.0
    expense: float = 0.0

    @property
    def net(self) -> float:
        return self.income - self.expense
