"""Route state machine guarded by the session store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol, Union, get_args

from legallens.errors import RouteError
from legallens.metrics.observability import get_logger

View = Literal["auth", "dashboard", "upload", "analysis", "chat", "profile"]
VIEWS: tuple[str, ...] = get_args(View)


@dataclass(frozen=True)
class AuthRoute:
    view: Literal["auth"] = "auth"


@dataclass(frozen=True)
class DashboardRoute:
    view: Literal["dashboard"] = "dashboard"


@dataclass(frozen=True)
class UploadRoute:
    view: Literal["upload"] = "upload"


@dataclass(frozen=True)
class AnalysisRoute:
    document_id: str | None = None
    view: Literal["analysis"] = "analysis"


@dataclass(frozen=True)
class ChatRoute:
    document_id: str | None = None
    view: Literal["chat"] = "chat"


@dataclass(frozen=True)
class ProfileRoute:
    view: Literal["profile"] = "profile"


Route = Union[AuthRoute, DashboardRoute, UploadRoute, AnalysisRoute, ChatRoute, ProfileRoute]

_PLAIN_ROUTES = {
    "auth": AuthRoute,
    "dashboard": DashboardRoute,
    "upload": UploadRoute,
    "profile": ProfileRoute,
}
_DOCUMENT_ROUTES = {
    "analysis": AnalysisRoute,
    "chat": ChatRoute,
}


def route_for(view: str, document_id: str | None = None) -> Route:
    """Build the route variant for ``view``; only analysis and chat take a document id."""

    if view in _DOCUMENT_ROUTES:
        return _DOCUMENT_ROUTES[view](document_id=document_id)
    if view in _PLAIN_ROUTES:
        if document_id is not None:
            raise RouteError(f"View '{view}' does not take a document id")
        return _PLAIN_ROUTES[view]()
    raise RouteError(f"Unknown view: {view!r}")


@dataclass(frozen=True)
class SidebarItem:
    label: str
    view: View


SIDEBAR: tuple[SidebarItem, ...] = (
    SidebarItem("Dashboard", "dashboard"),
    SidebarItem("Upload", "upload"),
    SidebarItem("History", "dashboard"),
    SidebarItem("Chat", "chat"),
    SidebarItem("Profile", "profile"),
)


class SessionState(Protocol):
    @property
    def is_authenticated(self) -> bool:
        """Whether a session is currently active."""


class NavigationController:
    """Owns the active route.

    The requested route is always recorded; :attr:`effective` applies the
    auth gate on every read, so it follows session changes without a new
    ``navigate`` call.
    """

    def __init__(self, session: SessionState, initial: Route | None = None) -> None:
        self._session = session
        self._route: Route = initial or AuthRoute()
        self._logger = get_logger("navigation")

    @property
    def route(self) -> Route:
        """The last requested route, before the auth gate."""

        return self._route

    @property
    def effective(self) -> Route:
        if not self._session.is_authenticated:
            return AuthRoute()
        if isinstance(self._route, AuthRoute):
            return DashboardRoute()
        return self._route

    @property
    def view(self) -> View:
        return self.effective.view

    def navigate(self, view: str, document_id: str | None = None) -> Route:
        self._route = route_for(view, document_id)
        effective = self.effective
        self._logger.info(
            "navigation.navigate",
            requested=view,
            effective=effective.view,
            document_id=document_id,
        )
        return effective

    def on_login(self) -> Route:
        # Deep links requested while signed out are not resumed.
        self._route = DashboardRoute()
        return self.effective

    def on_logout(self) -> Route:
        self._route = AuthRoute()
        return self._route

    def start(self) -> Route:
        """Pick the initial route once the session has been restored."""

        self._route = DashboardRoute() if self._session.is_authenticated else AuthRoute()
        return self.effective

    def is_active(self, view: str) -> bool:
        return self.view == view
