from __future__ import annotations

import pytest

from legallens.errors import AnalysisFailed, AnalysisPending, NotFound, TransportFailure
from legallens.models import Analysis, UploadFile, UploadResult
from legallens.registry.service import DocumentRegistry
from legallens.services.analysis import AnalysisWorkflow
from legallens.services.demo import SAMPLE_ANALYSIS, SAMPLE_HISTORY
from legallens.services.notifications import QueueNotificationSink


def _file() -> UploadFile:
    return UploadFile(name="contract.pdf", content_type="application/pdf", size=1024)


class CountingFetch:
    def __init__(self, analysis: Analysis = SAMPLE_ANALYSIS, error: Exception | None = None) -> None:
        self.analysis = analysis
        self.error = error
        self.calls: list[str] = []

    async def fetch(self, document_id: str) -> Analysis:
        self.calls.append(document_id)
        if self.error is not None:
            raise self.error
        return self.analysis


def _workflow(fetcher: CountingFetch) -> tuple[AnalysisWorkflow, DocumentRegistry, QueueNotificationSink]:
    registry = DocumentRegistry()
    registry.store_history(SAMPLE_HISTORY)
    sink = QueueNotificationSink()
    return AnalysisWorkflow(registry, fetcher, sink), registry, sink


@pytest.mark.asyncio
async def test_tracked_document_is_served_without_fetching():
    fetcher = CountingFetch()
    workflow, registry, _ = _workflow(fetcher)
    document = registry.begin_upload(_file())
    registry.complete_upload(document.id, UploadResult("r1", Analysis(summary="Local"), "low"))

    analysis = await workflow.load(document.id)

    assert analysis.summary == "Local"
    assert fetcher.calls == []


@pytest.mark.asyncio
async def test_history_document_is_fetched_once_and_tracked():
    fetcher = CountingFetch()
    workflow, registry, _ = _workflow(fetcher)

    first = await workflow.load("1")
    second = await workflow.load("1")

    assert first == second == SAMPLE_ANALYSIS
    assert fetcher.calls == ["1"]
    assert registry.get_document("1").status == "completed"
    assert registry.get_document("1").risk_level == "low"


@pytest.mark.asyncio
async def test_processing_history_document_reports_pending():
    fetcher = CountingFetch()
    workflow, _, sink = _workflow(fetcher)

    with pytest.raises(AnalysisPending):
        await workflow.load("3")
    assert fetcher.calls == []
    assert sink.drain() == []


@pytest.mark.asyncio
async def test_unknown_document_notifies_and_raises_not_found():
    workflow, _, sink = _workflow(CountingFetch())

    with pytest.raises(NotFound) as excinfo:
        await workflow.load("unknown-id")

    assert not isinstance(excinfo.value, (AnalysisPending, AnalysisFailed))
    assert [n.message for n in sink.drain()] == ["Failed to load document analysis"]


@pytest.mark.asyncio
async def test_fetch_failure_leaves_registry_untouched():
    fetcher = CountingFetch(error=TransportFailure("offline"))
    workflow, registry, sink = _workflow(fetcher)

    with pytest.raises(TransportFailure):
        await workflow.load("2")

    assert [n.level for n in sink.drain()] == ["error"]
    assert registry.describe("2").status == "completed"
    with pytest.raises(NotFound):
        registry.get_analysis("2")


@pytest.mark.asyncio
async def test_failed_upload_reports_failure_kind():
    workflow, registry, _ = _workflow(CountingFetch())
    document = registry.begin_upload(_file())
    registry.fail_upload(document.id, "boom")

    with pytest.raises(AnalysisFailed):
        await workflow.load(document.id)
