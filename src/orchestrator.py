"""
Application Wiring

This module ties the components together:
1. Record store (Google Sheets, or in-memory demo store as fallback)
2. Activity logger (structured logs and user notices)
3. Domain services, one per table, plus the report service

DESIGN DECISION: The record store is shared by every session, the
activity logger and services are per session. Notices queued by one
user's mutation must never be toasted in another user's browser.
"""

from datetime import date
from typing import Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field

from src.activity import ActivityLogger, configure_logging
from src.config import get_settings
from src.services.finance import (
    BankAccountService,
    BudgetService,
    CategoryService,
    GoalService,
    ReportService,
    TransactionService,
)
from src.services.records import (
    GoogleSheetsClient,
    GoogleSheetsRecordGateway,
    InMemoryRecordGateway,
    RecordGateway,
)
from src.services.records.demo_data import seed_demo_data
from src.validation import FormValidator


logger = structlog.get_logger(__name__)


class StorageStatus(BaseModel):
    """Which backend is in use, and why not Sheets if it isn't."""
    backend: str
    remote: bool
    error: Optional[str] = None


class FinanceServices(BaseModel):
    """Everything a page needs, for one session."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    gateway: RecordGateway
    activity: ActivityLogger
    bank_accounts: BankAccountService
    budgets: BudgetService
    categories: CategoryService
    goals: GoalService
    transactions: TransactionService
    reports: ReportService
    validator: FormValidator
    storage: StorageStatus = Field(
        default_factory=lambda: StorageStatus(backend="memory", remote=False)
    )


def create_gateway(
    use_storage: Optional[bool] = None,
    seed_demo: Optional[bool] = None,
    today: Optional[date] = None,
) -> tuple[RecordGateway, StorageStatus]:
    """
    Create the record store.

    Args:
        use_storage: Connect to Google Sheets. Defaults to
                     AppSettings.use_remote_storage.
        seed_demo: Fill the in-memory fallback with demo data.
                   Defaults to AppSettings.seed_demo_data.

    Returns:
        (gateway, status)
    """
    app_settings = get_settings().app
    if use_storage is None:
        use_storage = app_settings.use_remote_storage
    if seed_demo is None:
        seed_demo = app_settings.seed_demo_data

    error = None
    if use_storage:
        try:
            client = GoogleSheetsClient()
            client.get_spreadsheet()
            logger.info("storage_connected", backend="google_sheets")
            return (
                GoogleSheetsRecordGateway(client),
                StorageStatus(backend="google_sheets", remote=True),
            )
        except Exception as e:
            # Storage not configured - continue with the demo store
            error = str(e)
            logger.warning("storage_unavailable", backend="google_sheets", error=error)

    gateway = InMemoryRecordGateway()
    if seed_demo:
        seed_demo_data(gateway, today=today)
    return gateway, StorageStatus(backend="memory", remote=False, error=error)


def build_services(
    gateway: RecordGateway,
    activity: Optional[ActivityLogger] = None,
    storage: Optional[StorageStatus] = None,
) -> FinanceServices:
    """Create the services of one session over a shared gateway."""
    app_settings = get_settings().app
    activity = activity or ActivityLogger()

    categories = CategoryService(gateway, activity)
    transactions = TransactionService(gateway, activity)

    return FinanceServices(
        gateway=gateway,
        activity=activity,
        bank_accounts=BankAccountService(
            gateway, activity, default_currency=app_settings.default_currency,
        ),
        budgets=BudgetService(gateway, activity),
        categories=categories,
        goals=GoalService(gateway, activity),
        transactions=transactions,
        reports=ReportService(transactions, categories),
        validator=FormValidator(app_settings.currency_list),
        storage=storage or StorageStatus(backend="memory", remote=False),
    )


def create_app_components(
    use_storage: Optional[bool] = None,
    seed_demo: Optional[bool] = None,
) -> FinanceServices:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to connect to Google Sheets.
                     Set to False for running without credentials.

    Returns:
        The wired services, over Sheets or the in-memory store
    """
    configure_logging()
    gateway, status = create_gateway(use_storage=use_storage, seed_demo=seed_demo)
    return build_services(gateway, storage=status)
