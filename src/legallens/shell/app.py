"""Application shell composing session, navigation, registry and workflows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from legallens.backend.client import BackendAnalysisFetch, BackendClient, BackendHistoryFetch
from legallens.config import Settings, get_settings
from legallens.errors import LegalLensError
from legallens.metrics.observability import configure_logging, get_logger
from legallens.models import Session
from legallens.navigation.service import AnalysisRoute, ChatRoute, NavigationController, Route, View
from legallens.registry.service import DocumentRegistry
from legallens.services.analysis import AnalysisWorkflow
from legallens.services.chat import ChatWorkflow
from legallens.services.demo import DemoAnalysisFetch, DemoHistoryFetch, DemoUploadTransport
from legallens.services.generation import TemplateReplyGenerator
from legallens.services.history import HistoryWorkflow
from legallens.services.notifications import QueueNotificationSink
from legallens.services.upload import ContentTypeValidator, UploadConfig, UploadWorkflow
from legallens.session.auth import DemoAuthConfig, DemoAuthProvider
from legallens.session.persistence import JsonFilePersistence
from legallens.session.store import SessionStore

Theme = Literal["light", "dark"]


@dataclass(frozen=True)
class ShellDependencies:
    session: SessionStore
    navigation: NavigationController
    registry: DocumentRegistry
    upload: UploadWorkflow
    analysis: AnalysisWorkflow
    chat: ChatWorkflow
    history: HistoryWorkflow
    notifications: QueueNotificationSink


@dataclass(frozen=True)
class Screen:
    """What the view layer should mount."""

    view: View | None
    route: Route | None
    session: Session | None
    show_chrome: bool
    theme: Theme = "light"

    @property
    def loading(self) -> bool:
        return self.view is None

    @property
    def document_id(self) -> str | None:
        if isinstance(self.route, (AnalysisRoute, ChatRoute)):
            return self.route.document_id
        return None


def _build_dependencies(settings: Settings) -> ShellDependencies:
    latency = 0.0 if settings.is_test else settings.simulated_latency_seconds
    if settings.backend == "http":
        client = BackendClient(base_url=settings.api_url, timeout=settings.request_timeout)
        auth = client
        transport = client
        fetcher = BackendAnalysisFetch(client)
        history_fetcher = BackendHistoryFetch(client)
        generator = client
    else:
        auth = DemoAuthProvider(
            DemoAuthConfig(
                email=settings.demo_email,
                password=settings.demo_password,
                latency_seconds=latency,
                sign_out_latency_seconds=latency / 2,
            ),
        )
        transport = DemoUploadTransport(latency_seconds=latency * 3)
        fetcher = DemoAnalysisFetch(latency_seconds=latency)
        history_fetcher = DemoHistoryFetch(latency_seconds=latency)
        generator = TemplateReplyGenerator(latency_seconds=latency * 1.5)

    session = SessionStore(auth, JsonFilePersistence(settings.storage_dir), key=settings.session_key)
    registry = DocumentRegistry()
    notifications = QueueNotificationSink()
    upload = UploadWorkflow(
        registry,
        transport,
        notifications,
        validator=ContentTypeValidator(settings.allowed_content_types_tuple, settings.max_upload_bytes),
        config=UploadConfig(
            progress_interval=settings.progress_interval_seconds,
            progress_step=settings.progress_step,
            progress_ceiling=settings.progress_ceiling,
        ),
    )
    return ShellDependencies(
        session=session,
        navigation=NavigationController(session),
        registry=registry,
        upload=upload,
        analysis=AnalysisWorkflow(registry, fetcher, notifications),
        chat=ChatWorkflow(registry, generator, notifications),
        history=HistoryWorkflow(registry, history_fetcher, notifications),
        notifications=notifications,
    )


class ApplicationShell:
    """Decides, on every render, which view to mount and with what.

    :meth:`start` restores the persisted session before the first route is
    computed; until then :meth:`render` reports a loading screen.
    """

    def __init__(self, dependencies: ShellDependencies) -> None:
        self.deps = dependencies
        self._started = False
        self._theme: Theme = "light"
        self._logger = get_logger("shell")

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> Screen:
        if not self._started:
            self.deps.session.restore()
            self.deps.navigation.start()
            self._started = True
            self._logger.info("shell.started", authenticated=self.deps.session.is_authenticated)
        return self.render()

    def render(self) -> Screen:
        if not self._started:
            return Screen(view=None, route=None, session=None, show_chrome=False, theme=self._theme)
        session = self.deps.session.current
        route = self.deps.navigation.effective
        return Screen(
            view=route.view,
            route=route,
            session=session,
            show_chrome=session is not None,
            theme=self._theme,
        )

    def navigate(self, view: str, document_id: str | None = None) -> Screen:
        self.deps.navigation.navigate(view, document_id)
        return self.render()

    async def login(self, email: str, password: str) -> Screen:
        await self.deps.session.login(email, password)
        self.deps.navigation.on_login()
        return self.render()

    async def signup(self, email: str, password: str) -> Screen:
        await self.deps.session.signup(email, password)
        self.deps.navigation.on_login()
        return self.render()

    async def logout(self) -> Screen:
        await self.deps.session.logout()
        self.deps.navigation.on_logout()
        return self.render()

    async def update_profile(self, display_name: str) -> Screen:
        name = display_name.strip()
        if not name:
            self.deps.notifications.error("Display name cannot be empty")
            return self.render()
        try:
            await self.deps.session.update_profile(display_name=name)
        except LegalLensError:
            self.deps.notifications.error("Failed to update profile")
            raise
        self.deps.notifications.success("Profile updated successfully!")
        return self.render()

    def toggle_theme(self) -> Screen:
        self._theme = "dark" if self._theme == "light" else "light"
        return self.render()


def create_shell(
    *,
    settings: Settings | None = None,
    dependencies: ShellDependencies | None = None,
    start: bool = True,
) -> ApplicationShell:
    settings = settings or get_settings()
    configure_logging()
    shell = ApplicationShell(dependencies or _build_dependencies(settings))
    if start:
        shell.start()
    return shell
