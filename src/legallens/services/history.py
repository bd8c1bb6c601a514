"""History workflow: refresh the dashboard's document listing."""

from __future__ import annotations

from typing import Protocol, Sequence

from legallens.metrics.observability import get_logger
from legallens.models import DocumentSummary
from legallens.registry.service import DocumentRegistry
from legallens.services.notifications import NotificationSink


class HistoryFetch(Protocol):
    async def fetch(self) -> Sequence[DocumentSummary]:
        """Return the user's document history."""


class HistoryWorkflow:
    def __init__(self, registry: DocumentRegistry, fetcher: HistoryFetch, notifications: NotificationSink) -> None:
        self._registry = registry
        self._fetcher = fetcher
        self._notifications = notifications
        self._logger = get_logger("history")

    async def refresh(self) -> Sequence[DocumentSummary]:
        """Fetch and cache the history; on failure keep the previous cache."""

        try:
            summaries = await self._fetcher.fetch()
        except Exception as exc:
            self._logger.warning("history.fetch_failed", error=str(exc))
            self._notifications.error("Failed to fetch document history")
            return self._registry.list_documents()
        self._registry.store_history(summaries)
        return self._registry.list_documents()
