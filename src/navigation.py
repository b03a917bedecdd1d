"""
Route Table

Maps URL paths to pages. The Streamlit shell reads the current path from
the query string, resolves it here and renders the matching page; any
unknown path lands on the not-found page.

Every route declares its access level. Sign-in is out of scope, so
public is the only level there is.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class RouteAccess(str, Enum):
    """Who may open a route."""
    PUBLIC = "public"


class Route(BaseModel):
    """One entry in the navigation."""

    path: str = Field(..., description="URL path, always starting with '/'")
    title: str
    icon: str
    page_key: str = Field(..., description="Key of the page renderer")
    access: RouteAccess = RouteAccess.PUBLIC
    show_in_nav: bool = True

    @property
    def label(self) -> str:
        return f"{self.icon} {self.title}"


ROUTES: list[Route] = [
    Route(path="/", title="Dashboard", icon="🏠", page_key="dashboard"),
    Route(path="/transactions", title="Transactions", icon="💳", page_key="transactions"),
    Route(path="/budgets", title="Budgets", icon="📅", page_key="budgets"),
    Route(path="/goals", title="Goals", icon="🎯", page_key="goals"),
    Route(path="/reports", title="Reports", icon="📊", page_key="reports"),
    Route(path="/bank-accounts", title="Bank Accounts", icon="🏦", page_key="bank_accounts"),
]

NOT_FOUND_ROUTE = Route(
    path="*",
    title="Page Not Found",
    icon="🔎",
    page_key="not_found",
    show_in_nav=False,
)


def normalize_path(path: Optional[str]) -> str:
    """'' and None become '/', trailing slashes and case are ignored."""
    if not path:
        return "/"
    path = "/" + path.strip().strip("/").lower()
    return path


def resolve_route(path: Optional[str]) -> Route:
    """The route for ``path``, or the not-found route."""
    wanted = normalize_path(path)
    for route in ROUTES:
        if route.path == wanted:
            return route
    return NOT_FOUND_ROUTE


def nav_routes() -> list[Route]:
    return [route for route in ROUTES if route.show_in_nav]
