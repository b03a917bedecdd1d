"""
Shared UI pieces: async bridge, notices, empty/error states, stat cards
and the save/delete helpers every form uses.
"""

import asyncio
import html
from typing import Any, Awaitable, Callable, Optional

import streamlit as st

from src.models.activity import NoticeLevel
from src.models.finance import DEFAULT_CATEGORY_COLOR
from src.models.forms import ValidationResult
from src.orchestrator import FinanceServices
from src.services.records import RecordOperationError, RecordStoreError
from src.validation.validator import COLOR_PATTERN


NOTICE_ICONS = {
    NoticeLevel.SUCCESS: "✅",
    NoticeLevel.INFO: "ℹ️",
    NoticeLevel.WARNING: "⚠️",
    NoticeLevel.ERROR: "❌",
}


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def show_notices(services: FinanceServices) -> None:
    """Toast every notice queued since the last run."""
    for notice in services.activity.drain_notices():
        st.toast(notice.message, icon=NOTICE_ICONS.get(notice.level, "ℹ️"))


def load(services: FinanceServices, coro: Awaitable[Any]) -> tuple[Any, bool]:
    """
    Run a service read.

    Returns:
        (result, failed) where failed is True if any read inside
        the call couldn't reach the store
    """
    before = services.activity.load_failures
    result = run_async(coro)
    return result, services.activity.load_failures > before


def empty_state(message: str, icon: str = "📭", hint: Optional[str] = None) -> None:
    """Dashed box for an empty list. Text is escaped; it may echo user input."""
    hint_html = f"<small>{html.escape(hint)}</small>" if hint else ""
    st.markdown(f"""
    <div class="empty-box">
        <div class="empty-icon">{html.escape(icon)}</div>
        <p>{html.escape(message)}</p>
        {hint_html}
    </div>
    """, unsafe_allow_html=True)


def error_state(message: str, key: str) -> None:
    """Error box with a retry button that reruns the page."""
    st.markdown(f"""
    <div class="error-box">
        <h4>❌ Something went wrong</h4>
        <p>{html.escape(message)}</p>
    </div>
    """, unsafe_allow_html=True)
    if st.button("🔄 Try Again", key=f"retry_{key}"):
        st.rerun()


def swatch(color: Optional[str]) -> str:
    """Colored dot markup. Anything but #RRGGBB is drawn in the default color."""
    if not color or not COLOR_PATTERN.match(color):
        color = DEFAULT_CATEGORY_COLOR
    return f'<span class="swatch" style="background:{color}"></span>'


def choices_with(options: list[str], current: Optional[str]) -> tuple[list[str], int]:
    """
    Select box options and index with the stored value preselected.

    A stored value missing from ``options`` is appended rather than
    silently swapped for the first option; validation then says why
    it can't be saved.
    """
    if current and current not in options:
        options = options + [current]
    return options, options.index(current) if current in options else 0


def stat_card(column, label: str, value: str, help_text: Optional[str] = None) -> None:
    column.metric(label, value, help=help_text)


def show_validation(result: ValidationResult) -> None:
    """Show a form's errors and warnings under it."""
    for field, message in result.errors_by_field().items():
        st.error(f"**{field.replace('_', ' ').title()}:** {message}")
    for message in result.warnings:
        st.warning(message)


def submit(action: Callable[[], Awaitable[Any]]) -> bool:
    """
    Run a create/update/delete and report store failures inline.

    Returns True if it succeeded. The success notice itself is queued
    by the service and toasted on the next run.
    """
    try:
        run_async(action())
    except RecordOperationError as e:
        st.error(str(e))
        for error in e.field_errors:
            st.caption(f"{error.field_label}: {error.message}")
        return False
    except RecordStoreError as e:
        st.error(f"Could not reach the record store: {e}")
        return False
    return True


def confirm_delete(label: str, name: str, action: Callable[[], Awaitable[Any]]) -> None:
    """Body of a delete confirmation dialog."""
    st.markdown(f"Delete {label} **{name}**? This can't be undone.")
    col1, col2 = st.columns(2)
    with col1:
        if st.button("🗑️ Delete", type="primary", key="confirm_delete"):
            if submit(action):
                st.rerun()
    with col2:
        if st.button("Cancel", key="cancel_delete"):
            st.rerun()
