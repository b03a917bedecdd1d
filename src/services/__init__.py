"""Services package."""

from src.services.records import (
    ConnectionError,
    GoogleSheetsClient,
    GoogleSheetsRecordGateway,
    InMemoryRecordGateway,
    NotFoundError,
    RecordGateway,
    RecordOperationError,
    RecordStoreError,
    UnknownTableError,
)
from src.services.finance import (
    BankAccountService,
    BudgetService,
    CategoryService,
    GoalService,
    ReportService,
    TransactionService,
)

__all__ = [
    # Record store
    "ConnectionError",
    "GoogleSheetsClient",
    "GoogleSheetsRecordGateway",
    "InMemoryRecordGateway",
    "NotFoundError",
    "RecordGateway",
    "RecordOperationError",
    "RecordStoreError",
    "UnknownTableError",
    # Domain services
    "BankAccountService",
    "BudgetService",
    "CategoryService",
    "GoalService",
    "ReportService",
    "TransactionService",
]
