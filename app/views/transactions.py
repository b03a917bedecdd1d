"""
Transactions page.

Filters (date range, category, type) are applied in the store; the
list comes back newest first. Categories are managed from here too,
since every transaction form needs them.
"""

from datetime import date, timedelta
from typing import Optional

import pandas as pd
import streamlit as st

from app.widgets import (
    confirm_delete,
    empty_state,
    error_state,
    load,
    show_validation,
    stat_card,
    submit,
    swatch,
)
from src.models.finance import Category, CategoryType, Transaction, TransactionType
from src.orchestrator import FinanceServices
from src.services.finance import summarize
from src.utils.currency import format_currency, format_signed


def _category_options(categories: list[Category], tx_type: Optional[str] = None) -> dict:
    """Select box options: None for 'no category', then ids."""
    options = {None: "No category"}
    for category in categories:
        if tx_type and category.type != tx_type:
            continue
        options[category.id] = category.name
    return options


@st.dialog("Transaction")
def transaction_dialog(
    services: FinanceServices,
    categories: list[Category],
    transaction: Optional[Transaction] = None,
):
    types = [t.value for t in TransactionType]
    tx_type = st.radio(
        "Type *",
        options=types,
        index=types.index(transaction.type) if transaction else types.index("expense"),
        format_func=str.title,
        horizontal=True,
    )
    options = _category_options(categories, tx_type)

    with st.form("transaction_form"):
        amount = st.number_input(
            "Amount *",
            value=float(transaction.amount) if transaction else 0.0,
            min_value=0.0,
            step=0.01,
            format="%.2f",
        )
        tx_date = st.date_input("Date *", value=transaction.date if transaction else date.today())
        current_category = transaction.category_id if transaction else None
        category_id = st.selectbox(
            "Category",
            options=list(options),
            index=list(options).index(current_category) if current_category in options else 0,
            format_func=lambda x: options[x],
        )
        description = st.text_input(
            "Description", value=(transaction.description or "") if transaction else "",
        )
        notes = st.text_area("Notes", value=(transaction.notes or "") if transaction else "")
        submitted = st.form_submit_button("💾 Save", type="primary")

    if not submitted:
        return

    result = services.validator.validate_transaction({
        "id": transaction.id if transaction else None,
        "amount": amount,
        "type": tx_type,
        "date": tx_date,
        "category_id": category_id,
        "description": description,
        "notes": notes,
    })
    show_validation(result)
    if not result.is_valid:
        return

    if transaction:
        ok = submit(lambda: services.transactions.update(transaction.id, result.cleaned))
    else:
        ok = submit(lambda: services.transactions.create(result.cleaned))
    if ok:
        st.rerun()


@st.dialog("Delete Transaction")
def delete_dialog(services: FinanceServices, transaction: Transaction):
    confirm_delete(
        "transaction",
        transaction.description or f"#{transaction.id}",
        lambda: services.transactions.delete(transaction.id),
    )


@st.dialog("Category")
def category_dialog(services: FinanceServices, category: Optional[Category] = None):
    types = [t.value for t in CategoryType]
    with st.form("category_form"):
        name = st.text_input("Name *", value=category.name if category else "")
        category_type = st.selectbox(
            "Type *",
            options=types,
            index=types.index(category.type) if category else types.index("expense"),
            format_func=str.title,
        )
        color = st.color_picker("Color", value=category.color if category else "#3B82F6")
        icon = st.text_input("Icon", value=category.icon if category else "ShoppingCart")
        submitted = st.form_submit_button("💾 Save", type="primary")

    if not submitted:
        return

    result = services.validator.validate_category({
        "id": category.id if category else None,
        "name": name,
        "type": category_type,
        "color": color,
        "icon": icon,
    })
    show_validation(result)
    if not result.is_valid:
        return

    if category:
        ok = submit(lambda: services.categories.update(category.id, result.cleaned))
    else:
        ok = submit(lambda: services.categories.create(result.cleaned))
    if ok:
        st.rerun()


@st.dialog("Delete Category")
def delete_category_dialog(services: FinanceServices, category: Category):
    confirm_delete("category", category.name, lambda: services.categories.delete(category.id))


def render_categories(services: FinanceServices, categories: list[Category]) -> None:
    with st.expander("🏷️ Manage Categories"):
        if st.button("➕ Add Category"):
            category_dialog(services)
        if not categories:
            empty_state("No categories yet.", icon="🏷️")
            return
        for category in categories:
            col1, col2, col3, col4 = st.columns([1, 4, 1, 1])
            col1.markdown(swatch(category.color), unsafe_allow_html=True)
            col2.markdown(f"**{category.name}** · {category.type.title()}")
            if col3.button("✏️", key=f"edit_category_{category.id}"):
                category_dialog(services, category)
            if col4.button("🗑️", key=f"delete_category_{category.id}"):
                delete_category_dialog(services, category)


def render_table(transactions: list[Transaction], currency: str) -> None:
    frame = pd.DataFrame([
        {
            "Date": tx.date,
            "Description": tx.description or "",
            "Category": tx.category_name or "Uncategorized",
            "Type": tx.type.title(),
            "Amount": format_signed(tx.signed_amount, currency),
        }
        for tx in transactions
    ])
    st.dataframe(frame, hide_index=True, use_container_width=True)


def render(services: FinanceServices) -> None:
    """Render the transactions page."""
    header, action = st.columns([4, 1])
    header.title("💳 Transactions")

    categories, categories_failed = load(services, services.categories.get_all())
    if action.button("➕ Add Transaction", type="primary"):
        transaction_dialog(services, categories)

    # Filters
    col1, col2, col3 = st.columns(3)
    with col1:
        today = date.today()
        date_range = st.date_input(
            "Date Range",
            value=(today - timedelta(days=90), today),
            help="Both ends are included",
        )
    with col2:
        options = _category_options(categories)
        options[None] = "All Categories"
        category_id = st.selectbox(
            "Category", options=list(options), format_func=lambda x: options[x],
        )
    with col3:
        tx_type = st.selectbox(
            "Type",
            options=[None] + [t.value for t in TransactionType],
            format_func=lambda x: "All Types" if x is None else x.title(),
        )

    # date_input returns a 1-tuple while the user is picking the end date
    start_date = date_range[0] if len(date_range) > 0 else None
    end_date = date_range[1] if len(date_range) > 1 else None

    transactions, failed = load(services, services.transactions.find(
        start_date=start_date,
        end_date=end_date,
        category_id=category_id,
        transaction_type=tx_type,
    ))
    if failed or categories_failed:
        error_state("Failed to load transactions.", key="transactions")
        return

    currency = services.bank_accounts.default_currency
    summary = summarize(transactions)
    col1, col2, col3 = st.columns(3)
    stat_card(col1, "Income", format_currency(summary.income, currency))
    stat_card(col2, "Expenses", format_currency(summary.expense, currency))
    stat_card(col3, "Net", format_signed(summary.net, currency))

    st.markdown("---")

    if not transactions:
        empty_state(
            "No transactions match these filters.",
            icon="💳",
            hint="Widen the date range or add a transaction.",
        )
    else:
        render_table(transactions, currency)

        with st.expander("✏️ Edit or delete a transaction"):
            by_id = {tx.id: tx for tx in transactions}
            selected = st.selectbox(
                "Transaction",
                options=list(by_id),
                format_func=lambda x: (
                    f"{by_id[x].date} · {by_id[x].description or 'No description'} · "
                    f"{format_signed(by_id[x].signed_amount, currency)}"
                ),
            )
            col1, col2 = st.columns(2)
            if col1.button("✏️ Edit", key="edit_transaction"):
                transaction_dialog(services, categories, by_id[selected])
            if col2.button("🗑️ Delete", key="delete_transaction"):
                delete_dialog(services, by_id[selected])

    render_categories(services, categories)
