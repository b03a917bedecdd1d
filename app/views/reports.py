"""Reports page: month KPIs, spending by category and the monthly trend."""

import html
from datetime import date

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from app.widgets import empty_state, error_state, load, stat_card, swatch
from src.config import get_settings
from src.models.finance import CategoryBreakdown, MonthlyTotals
from src.orchestrator import FinanceServices
from src.utils.currency import format_currency, format_signed
from src.utils.dates import current_month_str, recent_months


def income_vs_expense_chart(trend: list[MonthlyTotals]) -> go.Figure:
    """Grouped bars of income and expenses per month, with a net line."""
    months = [date.fromisoformat(f"{t.month}-01").strftime("%b %Y") for t in trend]
    fig = go.Figure()
    fig.add_trace(go.Bar(x=months, y=[t.income for t in trend], name="Income", marker_color="#10B981"))
    fig.add_trace(go.Bar(x=months, y=[t.expense for t in trend], name="Expenses", marker_color="#EF4444"))
    fig.add_trace(go.Scatter(
        x=months, y=[t.net for t in trend], name="Net", mode="lines+markers", line_color="#3B82F6",
    ))
    fig.update_layout(barmode="group", title="Income vs Expenses", height=400)
    return fig


def category_chart(breakdown: list[CategoryBreakdown]) -> go.Figure:
    """Donut chart of spending by category, in each category's color."""
    frame = pd.DataFrame([
        {"Category": row.category_name, "Amount": row.total, "Color": row.color}
        for row in breakdown
    ])
    fig = px.pie(
        frame,
        values="Amount",
        names="Category",
        color="Category",
        color_discrete_map=dict(zip(frame["Category"], frame["Color"])),
        hole=0.4,
        title="Spending by Category",
    )
    fig.update_traces(textposition="inside", textinfo="percent+label")
    return fig


def render(services: FinanceServices) -> None:
    """Render the reports page."""
    st.title("📊 Reports")

    months = recent_months(12)
    month = st.selectbox(
        "Month",
        options=months,
        index=months.index(current_month_str()),
        format_func=lambda m: date.fromisoformat(f"{m}-01").strftime("%B %Y"),
    )

    summary, summary_failed = load(services, services.reports.get_month_summary(month))
    breakdown, breakdown_failed = load(services, services.reports.get_category_breakdown(month))
    trend, trend_failed = load(
        services,
        services.reports.get_monthly_trend(get_settings().app.report_months),
    )
    if summary_failed or breakdown_failed or trend_failed:
        error_state("Failed to load report data.", key="reports")
        return

    currency = services.bank_accounts.default_currency
    col1, col2, col3, col4 = st.columns(4)
    stat_card(col1, "💰 Income", format_currency(summary.income, currency))
    stat_card(col2, "💸 Expenses", format_currency(summary.expense, currency))
    stat_card(col3, "📈 Net", format_signed(summary.net, currency))
    stat_card(col4, "📉 Savings Rate", f"{summary.savings_rate:.1f}%")

    st.markdown("---")

    if summary.transaction_count == 0 and not any(t.income or t.expense for t in trend):
        empty_state(
            "No transactions to report on yet.",
            icon="📊",
            hint="Reports fill in as you record income and expenses.",
        )
        return

    col1, col2 = st.columns(2)
    with col1:
        if breakdown:
            st.plotly_chart(category_chart(breakdown), use_container_width=True)
            for row in breakdown:
                st.markdown(
                    f"{swatch(row.color)} "
                    f"**{html.escape(row.category_name)}**: {format_currency(row.total, currency)} "
                    f"({row.share:.1f}%)",
                    unsafe_allow_html=True,
                )
        else:
            empty_state("No expenses this month.", icon="🧾")
    with col2:
        st.plotly_chart(income_vs_expense_chart(trend), use_container_width=True)
