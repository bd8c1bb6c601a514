from __future__ import annotations

import pytest

from legallens.errors import RouteError
from legallens.navigation.service import (
    SIDEBAR,
    VIEWS,
    AnalysisRoute,
    AuthRoute,
    ChatRoute,
    DashboardRoute,
    NavigationController,
    route_for,
)


class FakeSession:
    def __init__(self, authenticated: bool = False) -> None:
        self.is_authenticated = authenticated


def test_every_navigation_without_session_renders_auth():
    controller = NavigationController(FakeSession())
    for view in VIEWS:
        document_id = "42" if view in ("analysis", "chat") else None
        assert controller.navigate(view, document_id) == AuthRoute()
        assert controller.view == "auth"


def test_requested_route_is_recorded_while_signed_out():
    controller = NavigationController(FakeSession())
    controller.navigate("chat", "42")
    assert controller.route == ChatRoute(document_id="42")
    assert controller.effective == AuthRoute()


def test_login_lands_on_dashboard_and_drops_deep_link():
    session = FakeSession()
    controller = NavigationController(session)
    controller.navigate("analysis", "7")

    session.is_authenticated = True
    assert controller.on_login() == DashboardRoute()
    assert controller.route == DashboardRoute()


def test_logout_returns_to_auth_and_clears_params():
    session = FakeSession(authenticated=True)
    controller = NavigationController(session)
    controller.navigate("chat", "42")

    session.is_authenticated = False
    assert controller.on_logout() == AuthRoute()
    assert controller.route == AuthRoute()


def test_authenticated_navigation_keeps_document_id():
    controller = NavigationController(FakeSession(authenticated=True))
    assert controller.navigate("analysis", "doc-1") == AnalysisRoute(document_id="doc-1")
    assert controller.is_active("analysis")


def test_authenticated_request_for_auth_resolves_to_dashboard():
    controller = NavigationController(FakeSession(authenticated=True))
    assert controller.navigate("auth") == DashboardRoute()


def test_start_picks_initial_route_from_session():
    assert NavigationController(FakeSession(authenticated=True)).start() == DashboardRoute()
    assert NavigationController(FakeSession()).start() == AuthRoute()


def test_route_for_rejects_bad_params():
    with pytest.raises(RouteError):
        route_for("dashboard", "42")
    with pytest.raises(RouteError):
        route_for("settings")
    with pytest.raises(ValueError):
        route_for("profile", "1")


def test_sidebar_history_points_at_dashboard():
    labels = {item.label: item.view for item in SIDEBAR}
    assert labels["History"] == "dashboard"
    assert set(labels.values()) <= set(VIEWS)
