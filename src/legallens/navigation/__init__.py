"""Page routing."""

from .service import (
    SIDEBAR,
    VIEWS,
    AnalysisRoute,
    AuthRoute,
    ChatRoute,
    DashboardRoute,
    NavigationController,
    ProfileRoute,
    Route,
    SidebarItem,
    UploadRoute,
    View,
    route_for,
)

__all__ = [
    "SIDEBAR",
    "VIEWS",
    "AnalysisRoute",
    "AuthRoute",
    "ChatRoute",
    "DashboardRoute",
    "NavigationController",
    "ProfileRoute",
    "Route",
    "SidebarItem",
    "UploadRoute",
    "View",
    "route_for",
]
