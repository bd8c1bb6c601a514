from __future__ import annotations

import asyncio

import pytest

from legallens.errors import AnalysisFailed, DocumentStateError, TransportFailure, UploadRejected
from legallens.models import Analysis, UploadFile, UploadResult
from legallens.registry.service import DocumentRegistry
from legallens.services.notifications import QueueNotificationSink
from legallens.services.upload import (
    ContentTypeValidator,
    ProgressTicker,
    UploadConfig,
    UploadOperation,
    UploadWorkflow,
)

FAST = UploadConfig(progress_interval=0.01, progress_step=10, progress_ceiling=90)


class GatedTransport:
    """Holds every submission until ``release`` is set."""

    def __init__(self, error: Exception | None = None) -> None:
        self.release = asyncio.Event()
        self.error = error
        self.calls = 0

    async def submit(self, file: UploadFile) -> UploadResult:
        self.calls += 1
        await self.release.wait()
        if self.error is not None:
            raise self.error
        return UploadResult(document_id="remote-1", analysis=Analysis(summary=f"About {file.name}"), risk_level="medium")


def _file(name: str = "contract.pdf", content_type: str = "application/pdf", size: int = 2048) -> UploadFile:
    return UploadFile(name=name, content_type=content_type, size=size)


def _workflow(transport, registry: DocumentRegistry, sink: QueueNotificationSink, **kwargs) -> UploadWorkflow:
    return UploadWorkflow(registry, transport, sink, config=FAST, **kwargs)


@pytest.mark.asyncio
async def test_upload_completes_and_stops_progress():
    registry = DocumentRegistry()
    sink = QueueNotificationSink()
    transport = GatedTransport()
    workflow = _workflow(transport, registry, sink)
    seen: list[int] = []

    operation = workflow.start(_file())
    operation.subscribe(seen.append)
    assert registry.get_document(operation.document_id).status == "processing"

    await asyncio.sleep(0.05)
    assert seen and all(0 < value <= 90 for value in seen)

    assert not operation.done
    transport.release.set()
    document = await operation.wait()

    assert document.status == "completed"
    assert document.remote_id == "remote-1"
    assert operation.done
    assert operation.progress == 100
    assert seen[-1] == 100
    assert registry.get_analysis(document.id).summary == "About contract.pdf"
    assert [n.level for n in sink.drain()] == ["success"]

    ticks = len(seen)
    await asyncio.sleep(0.05)
    assert len(seen) == ticks


@pytest.mark.asyncio
async def test_transport_failure_marks_document_error():
    registry = DocumentRegistry()
    sink = QueueNotificationSink()
    transport = GatedTransport(error=TransportFailure("connection reset"))
    transport.release.set()

    document = await _workflow(transport, registry, sink).upload(_file())

    assert document.status == "error"
    assert document.analysis is None
    assert "connection reset" in (document.error or "")
    with pytest.raises(AnalysisFailed):
        registry.get_analysis(document.id)
    assert [(n.level, n.message) for n in sink.drain()] == [("error", "Upload failed. Please try again.")]


@pytest.mark.asyncio
async def test_detach_stops_ticks_but_upload_still_settles():
    registry = DocumentRegistry()
    sink = QueueNotificationSink()
    transport = GatedTransport()
    seen: list[int] = []

    operation = _workflow(transport, registry, sink).start(_file())
    operation.subscribe(seen.append)
    await asyncio.sleep(0.03)
    operation.detach()
    frozen = list(seen)
    progress_at_detach = operation.progress

    await asyncio.sleep(0.05)
    assert seen == frozen
    assert operation.progress == progress_at_detach

    transport.release.set()
    document = await operation.wait()

    assert document.status == "completed"
    assert seen == frozen
    assert registry.get_document(document.id).status == "completed"


@pytest.mark.asyncio
async def test_progress_ceiling_holds_until_completion():
    values: list[int] = []
    async with ProgressTicker(values.append, interval=0.001, step=30, ceiling=90) as ticker:
        await asyncio.sleep(0.05)
    assert values == [30, 60, 90]
    assert ticker.value == 90
    assert ticker.ticks == 3
    assert not ticker.running


@pytest.mark.asyncio
async def test_ticker_is_cancelled_when_body_raises():
    values: list[int] = []
    ticker = ProgressTicker(values.append, interval=0.01, step=10, ceiling=90)
    with pytest.raises(RuntimeError):
        async with ticker:
            raise RuntimeError("boom")
    assert not ticker.running
    await asyncio.sleep(0.03)
    assert values == []


@pytest.mark.asyncio
async def test_validator_rejects_before_registry_is_touched():
    registry = DocumentRegistry()
    sink = QueueNotificationSink()
    transport = GatedTransport()
    workflow = _workflow(transport, registry, sink, validator=ContentTypeValidator(max_bytes=1024))

    with pytest.raises(UploadRejected):
        workflow.start(_file("notes.txt", content_type="text/plain", size=10))
    with pytest.raises(UploadRejected):
        workflow.start(_file(size=4096))

    assert registry.list_documents() == []
    assert transport.calls == 0
    assert [n.level for n in sink.drain()] == ["error", "error"]


@pytest.mark.asyncio
async def test_concurrent_uploads_get_distinct_documents():
    registry = DocumentRegistry()
    transport = GatedTransport()
    transport.release.set()
    workflow = _workflow(transport, registry, QueueNotificationSink())

    first, second = await asyncio.gather(workflow.upload(_file()), workflow.upload(_file()))

    assert first.id != second.id
    assert {d.status for d in registry.list_documents()} == {"completed"}


@pytest.mark.asyncio
async def test_detach_before_first_step_never_starts_progress():
    registry = DocumentRegistry()
    transport = GatedTransport()
    seen: list[int] = []

    operation = _workflow(transport, registry, QueueNotificationSink()).start(_file())
    operation.subscribe(seen.append)
    operation.detach()

    await asyncio.sleep(0.06)
    assert seen == []
    assert operation.progress == 0
    assert operation._ticker is not None and operation._ticker.ticks == 0

    transport.release.set()
    document = await operation.wait()

    assert document.status == "completed"
    assert operation.progress == 0
    assert seen == []


@pytest.mark.asyncio
async def test_cancelled_ticker_does_not_start():
    values: list[int] = []
    ticker = ProgressTicker(values.append, interval=0.001, step=10, ceiling=90)
    ticker.cancel()

    async with ticker:
        assert not ticker.running
        await asyncio.sleep(0.02)

    assert values == []
    assert ticker.value == 0


@pytest.mark.asyncio
async def test_waiting_on_unstarted_operation_is_rejected():
    document = DocumentRegistry().begin_upload(_file())
    operation = UploadOperation(document)

    assert not operation.done
    with pytest.raises(DocumentStateError):
        await operation.wait()
