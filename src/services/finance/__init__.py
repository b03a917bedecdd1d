"""
Domain Services Package

One service per record table. Each translates raw ``_c`` records into
domain models and back, and derives the simple aggregates the pages show.
"""

from src.services.finance.base import RecordService
from src.services.finance.bank_account_service import BankAccountService
from src.services.finance.budget_service import BudgetService
from src.services.finance.category_service import CategoryService
from src.services.finance.goal_service import GoalService
from src.services.finance.transaction_service import TransactionService
from src.services.finance.report_service import (
    ReportService,
    expense_breakdown,
    monthly_totals,
    summarize,
)

__all__ = [
    "BankAccountService",
    "BudgetService",
    "CategoryService",
    "GoalService",
    "RecordService",
    "ReportService",
    "TransactionService",
    "expense_breakdown",
    "monthly_totals",
    "summarize",
]
