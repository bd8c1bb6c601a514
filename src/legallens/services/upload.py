"""Upload workflow: submit a file, simulate progress and settle the registry."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Protocol, Sequence
from uuid import uuid4

from legallens.errors import DocumentStateError, UploadRejected
from legallens.metrics.observability import WorkflowMetrics, bind_correlation_id, clear_correlation_id, get_logger
from legallens.models import Document, UploadFile, UploadResult
from legallens.registry.service import DocumentRegistry
from legallens.services.notifications import NotificationSink

ProgressListener = Callable[[int], None]


class UploadTransport(Protocol):
    """Protocol for the upload-and-analyze backend."""

    async def submit(self, file: UploadFile) -> UploadResult:
        """Upload ``file`` and resolve once its analysis is available."""


class FileValidator(Protocol):
    def validate(self, file: UploadFile) -> None:
        """Raise :class:`UploadRejected` when ``file`` must not be uploaded."""


@dataclass(frozen=True)
class UploadConfig:
    """Configuration for the upload workflow."""

    progress_interval: float = 0.3
    progress_step: int = 10
    progress_ceiling: int = 90


class ContentTypeValidator:
    """Accepts a fixed set of content types up to a maximum size."""

    def __init__(
        self,
        allowed_content_types: Sequence[str] = ("application/pdf", "image/jpeg", "image/png", "image/jpg"),
        max_bytes: int = 10 * 1024 * 1024,
    ) -> None:
        self._allowed = tuple(allowed_content_types)
        self._max_bytes = max_bytes

    def validate(self, file: UploadFile) -> None:
        if file.content_type not in self._allowed:
            raise UploadRejected(f"{file.name}: Invalid file type. Please upload PDF or image files.")
        if file.size > self._max_bytes:
            limit_mb = self._max_bytes // (1024 * 1024)
            raise UploadRejected(f"{file.name}: File size too large. Please upload files under {limit_mb}MB.")


class ProgressTicker:
    """Advances a percentage on a timer until the ceiling or until stopped.

    Use as an async context manager: the timer task is cancelled on every
    exit path and :meth:`cancel` may stop it earlier.
    """

    def __init__(self, on_tick: ProgressListener, *, interval: float, step: int, ceiling: int) -> None:
        self._on_tick = on_tick
        self._interval = interval
        self._step = step
        self._ceiling = ceiling
        self._value = 0
        self._ticks = 0
        self._cancelled = False
        self._task: asyncio.Task[None] | None = None

    @property
    def value(self) -> int:
        return self._value

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def __aenter__(self) -> "ProgressTicker":
        if not self._cancelled:
            self._task = asyncio.create_task(self._run())
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    def cancel(self) -> None:
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def stop(self) -> None:
        self.cancel()
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    async def _run(self) -> None:
        while self._value < self._ceiling:
            await asyncio.sleep(self._interval)
            self._value = min(self._value + self._step, self._ceiling)
            self._ticks += 1
            self._on_tick(self._value)


class UploadOperation:
    """Handle on one in-flight upload.

    The registry is settled by the operation's own task; :meth:`detach` only
    severs the view (listener and progress timer).
    """

    def __init__(self, document: Document) -> None:
        self.document_id = document.id
        self.progress = 0
        self._listener: ProgressListener | None = None
        self._ticker: ProgressTicker | None = None
        self._detached = False
        self._task: asyncio.Task[Document] | None = None

    def subscribe(self, listener: ProgressListener) -> None:
        if not self._detached:
            self._listener = listener

    def detach(self) -> None:
        self._detached = True
        self._listener = None
        if self._ticker is not None:
            self._ticker.cancel()

    @property
    def done(self) -> bool:
        return self._task is not None and self._task.done()

    async def wait(self) -> Document:
        if self._task is None:
            raise DocumentStateError(f"Upload of {self.document_id} has not started")
        return await asyncio.shield(self._task)

    def _report(self, value: int) -> None:
        if self._detached:
            return
        self.progress = value
        if self._listener is not None:
            self._listener(value)

    def _attach_ticker(self, ticker: ProgressTicker) -> None:
        self._ticker = ticker
        if self._detached:
            ticker.cancel()


class UploadWorkflow:
    """Orchestrates upload submission against the registry."""

    def __init__(
        self,
        registry: DocumentRegistry,
        transport: UploadTransport,
        notifications: NotificationSink,
        *,
        validator: FileValidator | None = None,
        config: UploadConfig | None = None,
    ) -> None:
        self._registry = registry
        self._transport = transport
        self._notifications = notifications
        self._validator = validator
        self._config = config or UploadConfig()
        self._logger = get_logger("upload")

    def start(self, file: UploadFile) -> UploadOperation:
        """Register the document and run the upload in a background task."""

        if self._validator is not None:
            try:
                self._validator.validate(file)
            except UploadRejected as exc:
                self._notifications.error(str(exc))
                raise
        document = self._registry.begin_upload(file)
        operation = UploadOperation(document)
        operation._task = asyncio.create_task(self._run(operation, file))
        return operation

    async def upload(self, file: UploadFile) -> Document:
        return await self.start(file).wait()

    async def _run(self, operation: UploadOperation, file: UploadFile) -> Document:
        bind_correlation_id(uuid4().hex)
        document_id = operation.document_id
        start = time.perf_counter()
        ticker = ProgressTicker(
            operation._report,
            interval=self._config.progress_interval,
            step=self._config.progress_step,
            ceiling=self._config.progress_ceiling,
        )
        operation._attach_ticker(ticker)
        try:
            async with ticker:
                result = await self._transport.submit(file)
        except asyncio.CancelledError:
            self._registry.fail_upload(document_id, "Upload cancelled")
            WorkflowMetrics.observe_upload(time.perf_counter() - start, "cancelled")
            raise
        except Exception as exc:
            document = self._registry.fail_upload(document_id, str(exc) or type(exc).__name__)
            WorkflowMetrics.observe_upload(time.perf_counter() - start, "error")
            self._logger.warning("upload.failed", document_id=document_id, error=str(exc))
            self._notifications.error("Upload failed. Please try again.")
            return document
        else:
            document = self._registry.complete_upload(document_id, result)
            operation._report(100)
            WorkflowMetrics.observe_upload(time.perf_counter() - start, "success")
            self._logger.info("upload.complete", document_id=document_id, risk_level=result.risk_level)
            self._notifications.success("Document uploaded and analyzed successfully!")
            return document
        finally:
            clear_correlation_id()
