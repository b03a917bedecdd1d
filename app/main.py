"""
Streamlit Frontend for Finance Manager

Run with: streamlit run app/main.py

DESIGN PRINCIPLES:
1. Every page reads through a service and reloads after any change
2. Forms validate before anything is written
3. Clear success and error notices for every operation
4. Load failures show an error with a retry, never a blank page

The record store is created once per server process; services and
their notice queue are created once per browser session.
"""

import streamlit as st

from app.views import PAGES
from app.widgets import empty_state, show_notices
from src.activity import configure_logging
from src.config import validate_all_settings
from src.navigation import NOT_FOUND_ROUTE, Route, nav_routes, resolve_route
from src.orchestrator import (
    FinanceServices,
    StorageStatus,
    build_services,
    create_gateway,
)
from src.services.records import RecordGateway


# Page configuration
st.set_page_config(
    page_title="Finance Manager",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .error-box {
        padding: 20px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
    }
    .empty-box {
        padding: 30px;
        text-align: center;
        color: #6b7280;
        border: 1px dashed #d1d5db;
        border-radius: 10px;
        margin: 10px 0;
    }
    .empty-icon {
        font-size: 2.5em;
    }
    .big-number {
        font-size: 2em;
        font-weight: bold;
        color: #2c3e50;
    }
    .swatch {
        display: inline-block;
        width: 14px;
        height: 14px;
        border-radius: 50%;
        vertical-align: middle;
    }
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def get_store() -> tuple[RecordGateway, StorageStatus]:
    """Get or create the shared record store (cached)."""
    configure_logging()
    return create_gateway()


def get_services() -> FinanceServices:
    """This session's services over the shared store."""
    if "services" not in st.session_state:
        gateway, status = get_store()
        st.session_state.services = build_services(gateway, storage=status)
    return st.session_state.services


def current_route() -> Route:
    return resolve_route(st.query_params.get("path", "/"))


def render_sidebar(services: FinanceServices, route: Route) -> Route:
    """Navigation radio. Keeps the URL's ?path= in sync with the selection."""
    st.sidebar.title("💰 Finance Manager")
    st.sidebar.markdown("---")

    routes = nav_routes()
    labels = [r.label for r in routes]
    index = labels.index(route.label) if route in routes else 0
    # Keyed by path so links that change ?path= also move the selection
    choice = st.sidebar.radio("Navigate to:", labels, index=index, key=f"nav_{route.path}")
    selected = routes[labels.index(choice)]

    # On an unknown path the radio shows its first entry without navigating
    navigated = selected is not routes[0] if route is NOT_FOUND_ROUTE else selected.path != route.path
    if navigated:
        st.query_params["path"] = selected.path
        route = selected

    st.sidebar.markdown("---")
    render_storage_status(services.storage)
    return route


def render_storage_status(storage: StorageStatus) -> None:
    with st.sidebar.expander("⚙️ Connection Status"):
        if storage.remote:
            st.success("✅ Google Sheets - Connected")
        else:
            st.info("🧪 Demo mode - data lives in memory until the app restarts")
            if storage.error:
                st.caption(storage.error)

        status = validate_all_settings()
        for name, key in [("Google Sheets", "google_sheets"), ("App settings", "app")]:
            if not status.get(key, False):
                error = status.get(f"{key}_error", "Not configured")
                st.caption(f"❌ {name}: {error}")

        st.markdown(
            "To connect your own spreadsheet, create a `.env` file. "
            "See `.env.example` for the required variables."
        )


def render_not_found() -> None:
    st.title(f"{NOT_FOUND_ROUTE.icon} {NOT_FOUND_ROUTE.title}")
    empty_state(
        f"There is no page at “{st.query_params.get('path', '')}”.",
        icon="🧭",
        hint="Use the menu on the left to find your way back.",
    )
    if st.button("🏠 Go to Dashboard"):
        st.query_params["path"] = "/"
        st.rerun()


def main():
    """Main application entry point."""
    services = get_services()
    show_notices(services)

    route = render_sidebar(services, current_route())
    render_page = PAGES.get(route.page_key)
    if render_page is None:
        render_not_found()
    else:
        render_page(services)


if __name__ == "__main__":
    main()
