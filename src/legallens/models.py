"""Shared domain models for sessions, documents, analyses and conversations."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal, Sequence

DocumentStatus = Literal["processing", "completed", "error"]
RiskLevel = Literal["low", "medium", "high"]
ObligationStatus = Literal["pending", "completed", "overdue"]
DateCategory = Literal["deadline", "renewal", "payment", "milestone"]
MessageRole = Literal["user", "assistant"]
DeliveryStatus = Literal["sending", "sent", "error"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Session:
    """Authenticated identity of the single local user."""

    id: str
    email: str
    display_name: str | None = None


@dataclass(frozen=True)
class UploadFile:
    """File handed to the upload workflow by the view layer."""

    name: str
    content_type: str
    size: int
    data: bytes = b""
    path: Path | None = None

    @classmethod
    def from_path(cls, path: Path) -> "UploadFile":
        mime, _ = mimetypes.guess_type(path.name)
        data = path.read_bytes()
        return cls(
            name=path.name,
            content_type=mime or "application/octet-stream",
            size=len(data),
            data=data,
            path=path,
        )


@dataclass(frozen=True)
class Risk:
    type: str
    description: str
    severity: RiskLevel
    recommendation: str


@dataclass(frozen=True)
class Obligation:
    party: str
    description: str
    status: ObligationStatus = "pending"
    deadline: str | None = None


@dataclass(frozen=True)
class ImportantDate:
    date: str
    description: str
    category: DateCategory


@dataclass(frozen=True)
class KeyTerm:
    term: str
    definition: str
    importance: RiskLevel = "medium"


@dataclass(frozen=True)
class FinancialTerm:
    type: str
    amount: str
    frequency: str
    due_date: str | None = None


@dataclass(frozen=True)
class Party:
    name: str
    role: str
    responsibilities: Sequence[str] = ()


@dataclass(frozen=True)
class Analysis:
    """AI-generated analysis attached to a completed document.

    Every collection is ordered in display order.
    """

    summary: str
    risks: Sequence[Risk] = ()
    obligations: Sequence[Obligation] = ()
    important_dates: Sequence[ImportantDate] = ()
    key_terms: Sequence[KeyTerm] = ()
    financial_terms: Sequence[FinancialTerm] = ()
    parties: Sequence[Party] = ()
    key_findings: Sequence[str] = ()
    document_type: str | None = None


@dataclass(frozen=True)
class UploadResult:
    """Resolved value of an upload transport submission."""

    document_id: str
    analysis: Analysis
    risk_level: RiskLevel
    message: str = ""


@dataclass(frozen=True)
class Document:
    """A document tracked by the registry.

    ``analysis`` is set exactly when ``status`` is ``"completed"``.
    """

    id: str
    name: str
    type: str
    uploaded_at: datetime
    status: DocumentStatus = "processing"
    risk_level: RiskLevel | None = None
    analysis: Analysis | None = None
    error: str | None = None
    remote_id: str | None = None

    def __post_init__(self) -> None:
        if (self.status == "completed") != (self.analysis is not None):
            raise ValueError(f"Document {self.id}: analysis must be present iff status is completed")


@dataclass(frozen=True)
class DocumentSummary:
    """Entry of the document history listing."""

    id: str
    name: str
    type: str
    uploaded_at: datetime
    status: DocumentStatus
    risk_level: RiskLevel | None = None
    summary: str | None = None


@dataclass(frozen=True)
class DocumentStats:
    """Counters shown on the dashboard and profile pages."""

    total: int = 0
    completed: int = 0
    processing: int = 0
    high_risk: int = 0
    chat_sessions: int = 0


@dataclass(frozen=True)
class Message:
    id: str
    role: MessageRole
    content: str
    timestamp: datetime = field(default_factory=utcnow)
    delivery_status: DeliveryStatus | None = None


@dataclass(frozen=True)
class Conversation:
    """Snapshot of the transcript for one document, in send order."""

    document_id: str
    messages: Sequence[Message] = ()

    def __len__(self) -> int:
        return len(self.messages)
