"""
Data Models Package

This package contains all Pydantic models used in the Finance Manager.
All data flowing between the record store, services and pages
conforms to these schemas.
"""

from src.models.finance import (
    AccountType,
    BankAccount,
    Budget,
    Category,
    CategoryBreakdown,
    CategoryType,
    Currency,
    Goal,
    GoalProgress,
    MonthlyTotals,
    PeriodSummary,
    Transaction,
    TransactionType,
)
from src.models.records import (
    FetchParams,
    FieldError,
    FieldSpec,
    OrderBy,
    PagingInfo,
    RecordResponse,
    RecordResult,
    SortType,
    WhereCondition,
    WhereOperator,
)
from src.models.forms import ValidationIssue, ValidationResult
from src.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
    Notice,
    NoticeLevel,
)

__all__ = [
    # Finance models
    "AccountType",
    "BankAccount",
    "Budget",
    "Category",
    "CategoryBreakdown",
    "CategoryType",
    "Currency",
    "Goal",
    "GoalProgress",
    "MonthlyTotals",
    "PeriodSummary",
    "Transaction",
    "TransactionType",
    # Record API models
    "FetchParams",
    "FieldError",
    "FieldSpec",
    "OrderBy",
    "PagingInfo",
    "RecordResponse",
    "RecordResult",
    "SortType",
    "WhereCondition",
    "WhereOperator",
    # Form models
    "ValidationIssue",
    "ValidationResult",
    # Activity models
    "ActivityEvent",
    "ActivityEventBuilder",
    "ActivityEventType",
    "ActivitySeverity",
    "Notice",
    "NoticeLevel",
]
