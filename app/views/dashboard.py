"""Dashboard: this month at a glance."""

import streamlit as st

from app.widgets import empty_state, error_state, load, stat_card
from src.orchestrator import FinanceServices
from src.services.finance import BankAccountService, BudgetService, summarize
from src.utils.currency import format_currency, format_signed
from src.utils.dates import current_month_str, month_bounds


RECENT_TRANSACTIONS = 5


def render(services: FinanceServices) -> None:
    """Render the dashboard page."""
    st.title("🏠 Dashboard")

    month = current_month_str()
    start, end = month_bounds(month)

    accounts, accounts_failed = load(services, services.bank_accounts.get_all())
    transactions, tx_failed = load(services, services.transactions.get_by_date_range(start, end))
    budgets, budgets_failed = load(services, services.budgets.get_by_month(month))
    goals, goals_failed = load(services, services.goals.get_active_goals())
    if accounts_failed or tx_failed or budgets_failed or goals_failed:
        error_state("Failed to load your dashboard.", key="dashboard")
        return

    currency = services.bank_accounts.default_currency
    balance_currency, balance = BankAccountService.primary_total(accounts, currency)
    summary = summarize(transactions)

    col1, col2, col3, col4 = st.columns(4)
    stat_card(col1, "🏦 Total Balance", format_currency(balance, balance_currency))
    stat_card(col2, "💰 Income This Month", format_currency(summary.income, currency))
    stat_card(col3, "💸 Spent This Month", format_currency(summary.expense, currency))
    stat_card(col4, "📈 Net", format_signed(summary.net, currency))

    st.markdown("---")

    col1, col2 = st.columns([3, 2])

    with col1:
        st.markdown("### Recent Transactions")
        if not transactions:
            empty_state("No transactions this month.", icon="💳")
        for tx in transactions[:RECENT_TRANSACTIONS]:
            row1, row2 = st.columns([3, 1])
            row1.markdown(
                f"**{tx.description or 'No description'}**  \n"
                f"{tx.date:%d %b} · {tx.category_name or 'Uncategorized'}"
            )
            row2.markdown(f"**{format_signed(tx.signed_amount, currency)}**")

    with col2:
        st.markdown("### Budgets")
        if not budgets:
            empty_state("No budgets this month.", icon="📅")
        for budget in BudgetService.with_spending(budgets, transactions):
            st.markdown(
                f"{budget.category_name or 'Uncategorized'}: "
                f"{format_currency(budget.spent, currency)} / "
                f"{format_currency(budget.amount, currency)}"
            )
            st.progress(min(budget.percent_used, 100.0) / 100)

        st.markdown("### Goals")
        if not goals:
            empty_state("No active goals.", icon="🎯")
        for goal in goals:
            progress = goal.progress()
            st.markdown(f"{goal.name}: {progress.progress:.0f}%")
            st.progress(progress.progress / 100)
