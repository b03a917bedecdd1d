"""Budgets page: one month at a time, with spending from that month's expenses."""

from datetime import date
from typing import Optional

import streamlit as st

from app.widgets import (
    confirm_delete,
    empty_state,
    error_state,
    load,
    show_validation,
    stat_card,
    submit,
)
from src.models.finance import Budget, Category
from src.orchestrator import FinanceServices
from src.services.finance import BudgetService
from src.utils.currency import format_currency
from src.utils.dates import current_month_str, month_bounds, recent_months, shift_month


@st.dialog("Budget")
def budget_dialog(
    services: FinanceServices,
    categories: list[Category],
    month: str,
    budget: Optional[Budget] = None,
):
    expense_categories = {c.id: c.name for c in categories if c.type == "expense"}
    if not expense_categories:
        empty_state("Add an expense category first.", icon="🏷️")
        return

    with st.form("budget_form"):
        current_category = budget.category_id if budget else None
        options = list(expense_categories)
        category_id = st.selectbox(
            "Category *",
            options=options,
            index=options.index(current_category) if current_category in options else 0,
            format_func=lambda x: expense_categories[x],
        )
        amount = st.number_input(
            "Amount *",
            value=float(budget.amount) if budget else 0.0,
            min_value=0.0,
            step=10.0,
            format="%.2f",
        )
        budget_month = st.text_input(
            "Month * (YYYY-MM)", value=budget.month if budget else month,
        )
        submitted = st.form_submit_button("💾 Save", type="primary")

    if not submitted:
        return

    result = services.validator.validate_budget({
        "id": budget.id if budget else None,
        "amount": amount,
        "month": budget_month,
        "category_id": category_id,
    })
    show_validation(result)
    if not result.is_valid:
        return

    if budget:
        ok = submit(lambda: services.budgets.update(budget.id, result.cleaned))
    else:
        ok = submit(lambda: services.budgets.create(result.cleaned))
    if ok:
        st.rerun()


@st.dialog("Delete Budget")
def delete_dialog(services: FinanceServices, budget: Budget):
    confirm_delete(
        "budget",
        f"{budget.category_name or 'Uncategorized'} ({budget.month})",
        lambda: services.budgets.delete(budget.id),
    )


def render_budget_card(services: FinanceServices, budget: Budget, categories, currency: str):
    with st.container(border=True):
        st.markdown(f"#### {budget.category_name or 'Uncategorized'}")
        st.progress(min(budget.percent_used, 100.0) / 100)
        st.markdown(
            f"{format_currency(budget.spent, currency)} of "
            f"{format_currency(budget.amount, currency)} "
            f"({budget.percent_used:.0f}%)"
        )
        if budget.is_over_budget:
            st.error(f"Over budget by {format_currency(-budget.remaining, currency)}")
        else:
            st.caption(f"{format_currency(budget.remaining, currency)} left")

        col1, col2 = st.columns(2)
        if col1.button("✏️ Edit", key=f"edit_budget_{budget.id}"):
            budget_dialog(services, categories, budget.month, budget)
        if col2.button("🗑️ Delete", key=f"delete_budget_{budget.id}"):
            delete_dialog(services, budget)


def render(services: FinanceServices) -> None:
    """Render the budgets page."""
    header, action = st.columns([4, 1])
    header.title("📅 Budgets")

    this_month = current_month_str()
    months = recent_months(12) + [shift_month(this_month, 1)]
    month = st.selectbox(
        "Month",
        options=months,
        index=months.index(this_month),
        format_func=lambda m: date.fromisoformat(f"{m}-01").strftime("%B %Y"),
    )

    categories, categories_failed = load(services, services.categories.get_all())
    if action.button("➕ Add Budget", type="primary"):
        budget_dialog(services, categories, month)

    start, end = month_bounds(month)
    budgets, budgets_failed = load(services, services.budgets.get_by_month(month))
    transactions, tx_failed = load(services, services.transactions.get_by_date_range(start, end))
    if categories_failed or budgets_failed or tx_failed:
        error_state("Failed to load budgets.", key="budgets")
        return

    budgets = BudgetService.with_spending(budgets, transactions)
    currency = services.bank_accounts.default_currency

    total_budget = sum(b.amount for b in budgets)
    total_spent = sum(b.spent for b in budgets)
    col1, col2, col3 = st.columns(3)
    stat_card(col1, "Budgeted", format_currency(total_budget, currency))
    stat_card(col2, "Spent", format_currency(total_spent, currency))
    stat_card(col3, "Over Budget", str(sum(1 for b in budgets if b.is_over_budget)))

    st.markdown("---")

    if not budgets:
        empty_state(
            "No budgets for this month.",
            icon="📅",
            hint="Set a spending limit for a category to get started.",
        )
        return

    columns = st.columns(2)
    for index, budget in enumerate(budgets):
        with columns[index % 2]:
            render_budget_card(services, budget, categories, currency)
