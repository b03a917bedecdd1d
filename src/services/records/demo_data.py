"""
Demo Data

A small, believable household ledger for running the app without a
spreadsheet. Transactions are spread over the last three months
relative to ``today`` so the dashboard and trend charts have something
to show whenever the app is started.
"""

from datetime import date, timedelta
from typing import Optional

import structlog

from src.services.records.memory import InMemoryRecordGateway
from src.services.records.schema import (
    BANK_ACCOUNT_TABLE,
    BUDGET_TABLE,
    CATEGORY_TABLE,
    GOAL_TABLE,
    TRANSACTION_TABLE,
)
from src.utils.dates import current_month_str, shift_month


logger = structlog.get_logger(__name__)


DEMO_CATEGORIES = [
    {"name_c": "Salary", "type_c": "income", "color_c": "#10B981", "icon_c": "Briefcase"},
    {"name_c": "Freelance", "type_c": "income", "color_c": "#14B8A6", "icon_c": "Laptop"},
    {"name_c": "Groceries", "type_c": "expense", "color_c": "#F59E0B", "icon_c": "ShoppingCart"},
    {"name_c": "Rent", "type_c": "expense", "color_c": "#EF4444", "icon_c": "Home"},
    {"name_c": "Transport", "type_c": "expense", "color_c": "#6366F1", "icon_c": "Car"},
    {"name_c": "Dining Out", "type_c": "expense", "color_c": "#EC4899", "icon_c": "Utensils"},
    {"name_c": "Utilities", "type_c": "expense", "color_c": "#3B82F6", "icon_c": "Zap"},
]

DEMO_ACCOUNTS = [
    {
        "name_c": "Everyday Checking",
        "account_number_c": "****4821",
        "bank_name_c": "First National",
        "balance_c": 3250.75,
        "currency_c": "USD",
        "account_type_c": "Checking",
    },
    {
        "name_c": "Rainy Day Savings",
        "account_number_c": "****9930",
        "bank_name_c": "First National",
        "balance_c": 12800,
        "currency_c": "USD",
        "account_type_c": "Savings",
    },
    {
        "name_c": "Euro Travel",
        "account_number_c": "DE89****3000",
        "bank_name_c": "Deutsche Bank",
        "balance_c": 940.5,
        "currency_c": "EUR",
        "account_type_c": "Checking",
    },
]

# (day of month, category name, type, amount, description)
MONTHLY_PATTERN = [
    (1, "Salary", "income", 4200.0, "Monthly salary"),
    (2, "Rent", "expense", 1450.0, "Apartment rent"),
    (5, "Groceries", "expense", 86.4, "Weekly groceries"),
    (8, "Utilities", "expense", 112.3, "Electricity and water"),
    (12, "Groceries", "expense", 94.15, "Weekly groceries"),
    (14, "Transport", "expense", 60.0, "Transit pass"),
    (17, "Dining Out", "expense", 48.5, "Dinner with friends"),
    (19, "Groceries", "expense", 77.9, "Weekly groceries"),
    (22, "Freelance", "income", 650.0, "Website project"),
    (26, "Groceries", "expense", 101.2, "Weekly groceries"),
]

DEMO_BUDGETS = {
    "Groceries": 400.0,
    "Dining Out": 150.0,
    "Transport": 100.0,
    "Utilities": 120.0,
}


def _month_day(month: str, day: int) -> date:
    year, month_number = (int(part) for part in month.split("-"))
    return date(year, month_number, day)


def seed_demo_data(
    gateway: InMemoryRecordGateway,
    today: Optional[date] = None,
    months: int = 3,
) -> None:
    """
    Fill an in-memory gateway with demo records.

    Only past-or-today transactions are created, so the current month is
    partially filled in.
    """
    today = today or date.today()
    this_month = current_month_str(today)

    category_ids = dict(zip(
        (c["name_c"] for c in DEMO_CATEGORIES),
        gateway.seed(CATEGORY_TABLE, DEMO_CATEGORIES),
    ))
    gateway.seed(BANK_ACCOUNT_TABLE, DEMO_ACCOUNTS)

    transactions = []
    for offset in range(months - 1, -1, -1):
        month = shift_month(this_month, -offset)
        for day, category, tx_type, amount, description in MONTHLY_PATTERN:
            tx_date = _month_day(month, day)
            if tx_date > today:
                continue
            transactions.append({
                "amount_c": amount,
                "category_c": category_ids[category],
                "date_c": tx_date.isoformat(),
                "description_c": description,
                "type_c": tx_type,
            })
    gateway.seed(TRANSACTION_TABLE, transactions)

    gateway.seed(BUDGET_TABLE, [
        {
            "Name": f"Budget - {this_month}",
            "amount_c": amount,
            "month_c": this_month,
            "category_id_c": category_ids[category],
        }
        for category, amount in DEMO_BUDGETS.items()
    ])

    gateway.seed(GOAL_TABLE, [
        {
            "name_c": "Emergency Fund",
            "target_amount_c": 15000,
            "current_amount_c": 12800,
            "deadline_c": (today + timedelta(days=180)).isoformat(),
        },
        {
            "name_c": "New Laptop",
            "target_amount_c": 1800,
            "current_amount_c": 450,
            "deadline_c": (today + timedelta(days=90)).isoformat(),
        },
        {
            "name_c": "Summer Trip",
            "target_amount_c": 2500,
            "current_amount_c": 2500,
            "deadline_c": (today - timedelta(days=30)).isoformat(),
        },
    ])

    logger.info(
        "demo_data_seeded",
        categories=len(DEMO_CATEGORIES),
        accounts=len(DEMO_ACCOUNTS),
        transactions=len(transactions),
    )
