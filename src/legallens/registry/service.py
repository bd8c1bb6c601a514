"""Document registry: lifecycle state, analyses, conversations and history cache."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Dict, Iterable, List, Sequence

from legallens.errors import AnalysisFailed, AnalysisPending, DocumentStateError, NotFound, UnknownDocument
from legallens.metrics.observability import get_logger
from legallens.models import (
    Analysis,
    Conversation,
    DeliveryStatus,
    Document,
    DocumentStats,
    DocumentSummary,
    Message,
    RiskLevel,
    UploadFile,
    UploadResult,
    utcnow,
)

WELCOME_MESSAGE_ID = "welcome"

_RISK_ORDER: Dict[str, int] = {"low": 0, "medium": 1, "high": 2}


def welcome_text(document_name: str) -> str:
    return (
        f'Hello! I\'m your AI legal assistant. I\'ve analyzed the document "{document_name}" '
        "and I'm ready to help you understand its contents. You can ask me about:\n\n"
        "• Risk assessment and concerns\n"
        "• Key terms and clauses\n"
        "• Financial details\n"
        "• Negotiation opportunities\n"
        "• Legal obligations\n\n"
        "What would you like to know about this document?"
    )


def overall_risk(analysis: Analysis) -> RiskLevel:
    """Highest severity among the analysis risks, ``low`` when there are none."""

    level: RiskLevel = "low"
    for risk in analysis.risks:
        if _RISK_ORDER.get(risk.severity, 0) > _RISK_ORDER[level]:
            level = risk.severity
    return level


def _document_type(file: UploadFile) -> str:
    if "." in file.name:
        return file.name.rsplit(".", 1)[1].lower()
    return file.content_type.rsplit("/", 1)[-1]


class DocumentRegistry:
    """Single writer for every document, analysis and conversation.

    Reads hand out frozen snapshots; callers refer back to entities by id.
    """

    def __init__(self) -> None:
        self._documents: Dict[str, Document] = {}
        self._history: tuple[DocumentSummary, ...] = ()
        self._conversations: Dict[str, List[Message]] = {}
        self._pending: set[str] = set()
        self._logger = get_logger("registry")

    # -- listing -------------------------------------------------------

    def list_documents(self) -> Sequence[DocumentSummary]:
        """Tracked documents and the cached history, most recent upload first."""

        merged: Dict[str, DocumentSummary] = {summary.id: summary for summary in self._history}
        for document in self._documents.values():
            merged[document.id] = self._summarize(document)
        return sorted(merged.values(), key=lambda item: item.uploaded_at, reverse=True)

    def store_history(self, summaries: Iterable[DocumentSummary]) -> None:
        self._history = tuple(summaries)
        self._logger.info("registry.history_stored", count=len(self._history))

    def get_document(self, document_id: str) -> Document:
        try:
            return self._documents[document_id]
        except KeyError:
            raise UnknownDocument(document_id) from None

    def describe(self, document_id: str) -> DocumentSummary:
        """Summary for a tracked or history-only document."""

        document = self._documents.get(document_id)
        if document is not None:
            return self._summarize(document)
        for summary in self._history:
            if summary.id == document_id:
                return summary
        raise UnknownDocument(document_id)

    def stats(self) -> DocumentStats:
        documents = self.list_documents()
        return DocumentStats(
            total=len(documents),
            completed=sum(1 for d in documents if d.status == "completed"),
            processing=sum(1 for d in documents if d.status == "processing"),
            high_risk=sum(1 for d in documents if d.risk_level == "high"),
            chat_sessions=sum(
                1 for messages in self._conversations.values() if any(m.role == "user" for m in messages)
            ),
        )

    # -- lifecycle -----------------------------------------------------

    def begin_upload(self, file: UploadFile, *, submitted_at: datetime | None = None) -> Document:
        submitted_at = submitted_at or utcnow()
        document_id = self._unique_id(f"{file.name}_{int(submitted_at.timestamp() * 1000)}")
        if document_id in self._pending:
            raise DocumentStateError(f"Document {document_id} already has an upload in progress")
        document = Document(
            id=document_id,
            name=file.name,
            type=_document_type(file),
            uploaded_at=submitted_at,
        )
        self._documents[document_id] = document
        self._pending.add(document_id)
        self._logger.info("registry.upload_begun", document_id=document_id, name=file.name)
        return document

    def complete_upload(self, document_id: str, result: UploadResult) -> Document:
        document = self._processing(document_id)
        completed = replace(
            document,
            status="completed",
            risk_level=result.risk_level,
            analysis=result.analysis,
            type=result.analysis.document_type or document.type,
            remote_id=result.document_id,
        )
        self._documents[document_id] = completed
        self._pending.discard(document_id)
        self._logger.info("registry.upload_completed", document_id=document_id, risk_level=result.risk_level)
        return completed

    def fail_upload(self, document_id: str, reason: str) -> Document:
        document = self._processing(document_id)
        failed = replace(document, status="error", error=reason)
        self._documents[document_id] = failed
        self._pending.discard(document_id)
        self._logger.info("registry.upload_failed", document_id=document_id, reason=reason)
        return failed

    def is_pending(self, document_id: str) -> bool:
        return document_id in self._pending

    def get_analysis(self, document_id: str) -> Analysis:
        document = self._documents.get(document_id)
        if document is None:
            raise NotFound(document_id)
        if document.status == "processing":
            raise AnalysisPending(document_id)
        if document.status == "error":
            raise AnalysisFailed(document_id, document.error)
        return document.analysis

    def attach_fetched(self, summary: DocumentSummary, analysis: Analysis) -> Document:
        """Track a history document whose analysis was fetched on demand."""

        existing = self._documents.get(summary.id)
        if existing is not None:
            if existing.status == "completed":
                return existing
            raise DocumentStateError(f"Document {summary.id} is {existing.status}; cannot attach a fetched analysis")
        document = Document(
            id=summary.id,
            name=summary.name,
            type=analysis.document_type or summary.type,
            uploaded_at=summary.uploaded_at,
            status="completed",
            risk_level=summary.risk_level or overall_risk(analysis),
            analysis=analysis,
        )
        self._documents[summary.id] = document
        self._logger.info("registry.analysis_attached", document_id=summary.id)
        return document

    # -- conversations -------------------------------------------------

    def get_conversation(self, document_id: str) -> Conversation:
        return Conversation(document_id=document_id, messages=tuple(self._messages(document_id)))

    def append_message(self, document_id: str, message: Message) -> Conversation:
        messages = self._messages(document_id)
        messages.append(message)
        return Conversation(document_id=document_id, messages=tuple(messages))

    def set_delivery_status(self, document_id: str, message_id: str, status: DeliveryStatus) -> Message:
        messages = self._messages(document_id)
        for index, message in enumerate(messages):
            if message.id == message_id:
                updated = replace(message, delivery_status=status)
                messages[index] = updated
                return updated
        raise DocumentStateError(f"Message {message_id} not found in conversation {document_id}")

    # -- helpers -------------------------------------------------------

    def _messages(self, document_id: str) -> List[Message]:
        messages = self._conversations.get(document_id)
        if messages is not None:
            return messages
        summary = self.describe(document_id)
        if summary.status == "error":
            raise DocumentStateError(f"Document {document_id} failed processing and has no conversation")
        messages = [Message(id=WELCOME_MESSAGE_ID, role="assistant", content=welcome_text(summary.name))]
        self._conversations[document_id] = messages
        self._logger.info("registry.conversation_created", document_id=document_id)
        return messages

    def _processing(self, document_id: str) -> Document:
        document = self._documents.get(document_id)
        if document is None:
            raise UnknownDocument(document_id)
        if document.status != "processing":
            raise DocumentStateError(f"Document {document_id} is already {document.status}")
        return document

    def _unique_id(self, base: str) -> str:
        known = set(self._documents) | {summary.id for summary in self._history}
        candidate = base
        counter = 1
        while candidate in known:
            candidate = f"{base}-{counter}"
            counter += 1
        return candidate

    @staticmethod
    def _summarize(document: Document) -> DocumentSummary:
        return DocumentSummary(
            id=document.id,
            name=document.name,
            type=document.type,
            uploaded_at=document.uploaded_at,
            status=document.status,
            risk_level=document.risk_level,
            summary=document.analysis.summary if document.analysis else None,
        )
