"""
Record Store Package

Provides the abstract record gateway and its implementations.
Google Sheets is the production backend; the in-memory backend
serves tests and demo mode.
"""

from src.services.records.interface import (
    ConnectionError,
    NotFoundError,
    RecordGateway,
    RecordOperationError,
    RecordStoreError,
    StoreUnavailableError,
    UnknownTableError,
)
from src.services.records.memory import InMemoryRecordGateway
from src.services.records.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsRecordGateway,
)
from src.services.records.schema import (
    BANK_ACCOUNT_TABLE,
    BUDGET_TABLE,
    CATEGORY_TABLE,
    GOAL_TABLE,
    TABLE_SCHEMAS,
    TRANSACTION_TABLE,
    get_schema,
)

__all__ = [
    # Interface
    "RecordGateway",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "RecordOperationError",
    "RecordStoreError",
    "StoreUnavailableError",
    "UnknownTableError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsRecordGateway",
    "InMemoryRecordGateway",
    # Schema
    "BANK_ACCOUNT_TABLE",
    "BUDGET_TABLE",
    "CATEGORY_TABLE",
    "GOAL_TABLE",
    "TABLE_SCHEMAS",
    "TRANSACTION_TABLE",
    "get_schema",
]
