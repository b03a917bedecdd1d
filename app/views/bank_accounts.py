"""Bank Accounts page: balances per currency, search, add/edit/delete."""

import html
from typing import Optional

import streamlit as st

from app.widgets import (
    choices_with,
    confirm_delete,
    empty_state,
    error_state,
    load,
    show_validation,
    stat_card,
    submit,
)
from src.models.finance import AccountType, BankAccount
from src.orchestrator import FinanceServices
from src.services.finance import BankAccountService
from src.utils.currency import format_currency


ACCOUNT_TYPE_ICONS = {
    AccountType.CHECKING.value: "🏦",
    AccountType.SAVINGS.value: "🐷",
    AccountType.CREDIT_CARD.value: "💳",
    AccountType.INVESTMENT.value: "📈",
}


@st.dialog("Bank Account")
def account_dialog(services: FinanceServices, account: Optional[BankAccount] = None):
    """Add a new account, or edit ``account``."""
    currencies = services.validator.supported_currencies
    account_types = [""] + [t.value for t in AccountType]

    with st.form("bank_account_form"):
        name = st.text_input("Account Name *", value=account.name if account else "")
        account_number = st.text_input(
            "Account Number *", value=account.account_number if account else "",
        )
        bank_name = st.text_input("Bank Name *", value=account.bank_name if account else "")
        balance = st.number_input(
            "Balance *",
            value=float(account.balance) if account else 0.0,
            step=0.01,
            format="%.2f",
        )
        currency_options, currency_index = choices_with(
            currencies, account.currency if account else currencies[0],
        )
        currency = st.selectbox("Currency *", options=currency_options, index=currency_index)
        type_options, type_index = choices_with(
            account_types, account.account_type if account else None,
        )
        account_type = st.selectbox(
            "Account Type",
            options=type_options,
            index=type_index,
            format_func=lambda x: x or "Not specified",
        )
        submitted = st.form_submit_button("💾 Save", type="primary")

    if not submitted:
        return

    result = services.validator.validate_bank_account({
        "id": account.id if account else None,
        "name": name,
        "account_number": account_number,
        "bank_name": bank_name,
        "balance": balance,
        "currency": currency,
        "account_type": account_type,
    })
    show_validation(result)
    if not result.is_valid:
        return

    if account:
        ok = submit(lambda: services.bank_accounts.update(account.id, result.cleaned))
    else:
        ok = submit(lambda: services.bank_accounts.create(result.cleaned))
    if ok:
        st.rerun()


@st.dialog("Delete Account")
def delete_dialog(services: FinanceServices, account: BankAccount):
    confirm_delete("account", account.name, lambda: services.bank_accounts.delete(account.id))


def render_account_card(services: FinanceServices, account: BankAccount) -> None:
    icon = ACCOUNT_TYPE_ICONS.get(account.account_type or "", "🏦")
    with st.container(border=True):
        st.markdown(f"#### {icon} {account.name}")
        st.caption(f"{account.bank_name} · {account.account_number}")
        balance = format_currency(account.balance, account.currency)
        st.markdown(
            f'<div class="big-number">{html.escape(balance)}</div>',
            unsafe_allow_html=True,
        )
        if account.account_type:
            st.caption(account.account_type)

        col1, col2 = st.columns(2)
        if col1.button("✏️ Edit", key=f"edit_account_{account.id}"):
            account_dialog(services, account)
        if col2.button("🗑️ Delete", key=f"delete_account_{account.id}"):
            delete_dialog(services, account)


def render(services: FinanceServices) -> None:
    """Render the bank accounts page."""
    header, action = st.columns([4, 1])
    header.title("🏦 Bank Accounts")
    if action.button("➕ Add Account", type="primary"):
        account_dialog(services)

    accounts, failed = load(services, services.bank_accounts.get_all())
    if failed:
        error_state("Failed to load bank accounts.", key="bank_accounts")
        return

    default_currency = services.bank_accounts.default_currency
    totals = BankAccountService.totals_by_currency(accounts, default_currency)
    primary_currency, primary_total = BankAccountService.primary_total(accounts, default_currency)

    col1, col2, col3 = st.columns(3)
    stat_card(col1, "Total Balance", format_currency(primary_total, primary_currency),
              help_text=f"Sum of {primary_currency} accounts")
    stat_card(col2, "Accounts", str(len(accounts)))
    stat_card(col3, "Currencies", str(len(totals)))

    if len(totals) > 1:
        st.markdown("### Balance by Currency")
        columns = st.columns(len(totals))
        for column, (currency, total) in zip(columns, totals.items()):
            stat_card(column, currency, format_currency(total, currency))

    st.markdown("---")

    if not accounts:
        empty_state(
            "No bank accounts yet.",
            icon="🏦",
            hint="Add your first account to start tracking balances.",
        )
        return

    term = st.text_input("🔍 Search accounts", placeholder="Name, bank, number or type")
    matches = BankAccountService.search(accounts, term)
    if not matches:
        empty_state(f"No accounts match “{term}”.", icon="🔎")
        return

    columns = st.columns(3)
    for index, account in enumerate(matches):
        with columns[index % 3]:
            render_account_card(services, account)
