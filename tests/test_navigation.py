"""
Tests for the route table.
"""

import pytest

from src.navigation import NOT_FOUND_ROUTE, ROUTES, RouteAccess, nav_routes, resolve_route


class TestRoutes:
    """Tests for route resolution."""

    @pytest.mark.parametrize("path,page_key", [
        ("/", "dashboard"),
        ("", "dashboard"),
        (None, "dashboard"),
        ("/transactions", "transactions"),
        ("/budgets/", "budgets"),
        ("goals", "goals"),
        ("/Reports", "reports"),
        ("/bank-accounts", "bank_accounts"),
    ])
    def test_resolves_known_paths(self, path, page_key):
        """Test every main path resolves, ignoring slashes and case."""
        assert resolve_route(path).page_key == page_key

    def test_unknown_path_is_not_found(self):
        """Test unknown paths fall back to the not-found route."""
        assert resolve_route("/settings/advanced") is NOT_FOUND_ROUTE

    def test_main_routes_are_public(self):
        """Test no main route requires authentication."""
        assert all(route.access == RouteAccess.PUBLIC for route in ROUTES)

    def test_every_access_level_is_in_use(self):
        """Test the route table uses each declared access level."""
        routes = ROUTES + [NOT_FOUND_ROUTE]
        assert {route.access for route in routes} == set(RouteAccess)

    def test_nav_lists_every_main_route(self):
        """Test the sidebar shows each main route once, dashboard first."""
        paths = [route.path for route in nav_routes()]
        assert paths == ["/", "/transactions", "/budgets", "/goals", "/reports", "/bank-accounts"]
        assert NOT_FOUND_ROUTE not in nav_routes()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
