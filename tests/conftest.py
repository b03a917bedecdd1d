"""
Shared fixtures.

Every test runs against the in-memory record store; nothing talks to
Google Sheets.
"""

from datetime import date

import pytest

from src.activity import ActivityLogger
from src.orchestrator import build_services
from src.services.records import (
    CATEGORY_TABLE,
    TRANSACTION_TABLE,
    InMemoryRecordGateway,
)


@pytest.fixture
def gateway():
    return InMemoryRecordGateway()


@pytest.fixture
def activity():
    return ActivityLogger()


@pytest.fixture
def services(gateway, activity):
    return build_services(gateway, activity)


@pytest.fixture
def categories(gateway):
    """Two expense categories and one income category. Returns name -> Id."""
    names = ["Groceries", "Rent", "Salary"]
    ids = gateway.seed(CATEGORY_TABLE, [
        {"name_c": "Groceries", "type_c": "expense", "color_c": "#F59E0B", "icon_c": "ShoppingCart"},
        {"name_c": "Rent", "type_c": "expense", "color_c": "#EF4444", "icon_c": "Home"},
        {"name_c": "Salary", "type_c": "income", "color_c": "#10B981", "icon_c": "Briefcase"},
    ])
    return dict(zip(names, ids))


@pytest.fixture
def transactions(gateway, categories):
    """A few transactions across March and April 2024."""
    return gateway.seed(TRANSACTION_TABLE, [
        {"amount_c": 3000, "type_c": "income", "date_c": "2024-03-01",
         "category_c": categories["Salary"], "description_c": "March salary"},
        {"amount_c": 1200, "type_c": "expense", "date_c": "2024-03-02",
         "category_c": categories["Rent"], "description_c": "March rent"},
        {"amount_c": 80.5, "type_c": "expense", "date_c": "2024-03-15",
         "category_c": categories["Groceries"], "description_c": "Market"},
        {"amount_c": 3000, "type_c": "income", "date_c": "2024-04-01",
         "category_c": categories["Salary"], "description_c": "April salary"},
        {"amount_c": 45, "type_c": "expense", "date_c": "2024-04-03",
         "category_c": categories["Groceries"], "description_c": "Corner shop"},
        {"amount_c": 20, "type_c": "expense", "date_c": "2024-04-05",
         "description_c": "Parking"},
    ])


@pytest.fixture
def today():
    return date(2024, 4, 20)
