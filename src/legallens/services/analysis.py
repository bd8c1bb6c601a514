"""Analysis workflow: serve analyses from the registry, fetching history documents on demand."""

from __future__ import annotations

from typing import Protocol

from legallens.errors import AnalysisFailed, AnalysisPending, NotFound, UnknownDocument
from legallens.metrics.observability import TimedSection, WorkflowMetrics, get_logger
from legallens.models import Analysis
from legallens.registry.service import DocumentRegistry
from legallens.services.notifications import NotificationSink


class AnalysisFetch(Protocol):
    """Protocol for fetching a stored analysis."""

    async def fetch(self, document_id: str) -> Analysis:
        """Return the analysis or raise :class:`NotFound`."""


class AnalysisWorkflow:
    """Loads the analysis shown on the analysis view."""

    def __init__(self, registry: DocumentRegistry, fetcher: AnalysisFetch, notifications: NotificationSink) -> None:
        self._registry = registry
        self._fetcher = fetcher
        self._notifications = notifications
        self._logger = get_logger("analysis")

    async def load(self, document_id: str) -> Analysis:
        try:
            return self._registry.get_analysis(document_id)
        except (AnalysisPending, AnalysisFailed):
            raise
        except NotFound:
            # Not tracked yet; it may still be a history-only document.
            try:
                summary = self._registry.describe(document_id)
            except UnknownDocument:
                self._notifications.error("Failed to load document analysis")
                raise NotFound(document_id) from None

        if summary.status == "processing":
            raise AnalysisPending(document_id)
        if summary.status == "error":
            raise AnalysisFailed(document_id)

        try:
            with TimedSection(WorkflowMetrics.observe_analysis_fetch):
                analysis = await self._fetcher.fetch(document_id)
        except Exception as exc:
            self._logger.warning("analysis.fetch_failed", document_id=document_id, error=str(exc))
            self._notifications.error("Failed to load document analysis")
            raise
        self._registry.attach_fetched(summary, analysis)
        self._logger.info("analysis.fetched", document_id=document_id)
        return self._registry.get_analysis(document_id)
