"""Goals page: active and completed savings goals, with add-funds."""

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
from src.models.finance import Goal
from src.orchestrator import FinanceServices
from src.utils.currency import format_currency


@st.dialog("Goal")
def goal_dialog(services: FinanceServices, goal: Optional[Goal] = None):
    with st.form("goal_form"):
        name = st.text_input("Goal Name *", value=goal.name if goal else "")
        target = st.number_input(
            "Target Amount *",
            value=float(goal.target_amount) if goal else 0.0,
            min_value=0.0,
            step=50.0,
            format="%.2f",
        )
        current = st.number_input(
            "Saved So Far",
            value=float(goal.current_amount) if goal else 0.0,
            min_value=0.0,
            step=50.0,
            format="%.2f",
        )
        deadline = st.date_input("Deadline", value=goal.deadline if goal else None)
        submitted = st.form_submit_button("💾 Save", type="primary")

    if not submitted:
        return

    result = services.validator.validate_goal({
        "id": goal.id if goal else None,
        "name": name,
        "target_amount": target,
        "current_amount": current,
        "deadline": deadline,
    })
    show_validation(result)
    if not result.is_valid:
        return

    if goal:
        ok = submit(lambda: services.goals.update(goal.id, result.cleaned))
    else:
        ok = submit(lambda: services.goals.create(result.cleaned))
    if ok:
        st.rerun()


@st.dialog("Add Funds")
def add_funds_dialog(services: FinanceServices, goal: Goal, currency: str):
    progress = goal.progress()
    st.markdown(
        f"**{goal.name}**: {format_currency(progress.remaining, currency)} to go"
    )
    with st.form("add_funds_form"):
        amount = st.number_input("Amount *", min_value=0.0, step=10.0, format="%.2f")
        submitted = st.form_submit_button("💰 Add", type="primary")

    if not submitted:
        return
    if amount <= 0:
        st.error("**Amount:** Amount must be greater than zero")
        return
    if submit(lambda: services.goals.add_funds(goal.id, amount)):
        st.rerun()


@st.dialog("Delete Goal")
def delete_dialog(services: FinanceServices, goal: Goal):
    confirm_delete("goal", goal.name, lambda: services.goals.delete(goal.id))


def render_goal_card(services: FinanceServices, goal: Goal, currency: str) -> None:
    progress = goal.progress()
    with st.container(border=True):
        title = f"#### {'🏆' if progress.is_completed else '🎯'} {goal.name or 'Untitled Goal'}"
        st.markdown(title)
        st.progress(progress.progress / 100)
        st.markdown(
            f"{format_currency(goal.current_amount, currency)} of "
            f"{format_currency(goal.target_amount, currency)} "
            f"({progress.progress:.0f}%)"
        )
        if goal.deadline:
            days_left = (goal.deadline - date.today()).days
            if progress.is_completed:
                st.caption(f"Deadline {goal.deadline:%d %b %Y}")
            elif days_left < 0:
                st.caption(f"⏰ Deadline passed {-days_left} days ago")
            else:
                st.caption(f"{days_left} days left")

        columns = st.columns(3)
        if not progress.is_completed and columns[0].button("💰 Add Funds", key=f"fund_goal_{goal.id}"):
            add_funds_dialog(services, goal, currency)
        if columns[1].button("✏️ Edit", key=f"edit_goal_{goal.id}"):
            goal_dialog(services, goal)
        if columns[2].button("🗑️ Delete", key=f"delete_goal_{goal.id}"):
            delete_dialog(services, goal)


def render(services: FinanceServices) -> None:
    """Render the goals page."""
    header, action = st.columns([4, 1])
    header.title("🎯 Goals")
    if action.button("➕ Add Goal", type="primary"):
        goal_dialog(services)

    goals, failed = load(services, services.goals.get_all())
    if failed:
        error_state("Failed to load goals.", key="goals")
        return

    currency = services.bank_accounts.default_currency
    active = [g for g in goals if not g.is_completed]
    completed = [g for g in goals if g.is_completed]

    col1, col2, col3 = st.columns(3)
    stat_card(col1, "Saved", format_currency(sum(g.current_amount for g in goals), currency))
    stat_card(col2, "Active Goals", str(len(active)))
    stat_card(col3, "Completed", str(len(completed)))

    st.markdown("---")

    if not goals:
        empty_state(
            "No savings goals yet.",
            icon="🎯",
            hint="Create a goal to start saving towards it.",
        )
        return

    st.markdown("### In Progress")
    if not active:
        empty_state("Every goal is complete. Time for a new one!", icon="🏆")
    columns = st.columns(2)
    for index, goal in enumerate(active):
        with columns[index % 2]:
            render_goal_card(services, goal, currency)

    if completed:
        st.markdown("### Completed")
        columns = st.columns(2)
        for index, goal in enumerate(completed):
            with columns[index % 2]:
                render_goal_card(services, goal, currency)
