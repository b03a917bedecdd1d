"""One module per page. Each exposes ``render(services)``."""

from app.views import (
    bank_accounts,
    budgets,
    dashboard,
    goals,
    reports,
    transactions,
)

PAGES = {
    "dashboard": dashboard.render,
    "transactions": transactions.render,
    "budgets": budgets.render,
    "goals": goals.render,
    "reports": reports.render,
    "bank_accounts": bank_accounts.render,
}

__all__ = ["PAGES"]
