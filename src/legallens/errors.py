"""Error taxonomy shared by the session, registry and workflow layers."""

from __future__ import annotations


class LegalLensError(RuntimeError):
    """Base class for all LegalLens failures."""


class InvalidCredentials(LegalLensError):
    """Raised when the auth provider rejects an email/password pair."""


class NoActiveSession(LegalLensError):
    """Raised when an operation needs a signed-in user and there is none."""


class UnknownDocument(LegalLensError):
    """Raised when a document id is not tracked by the registry."""

    def __init__(self, document_id: str) -> None:
        super().__init__(f"Unknown document: {document_id}")
        self.document_id = document_id


class NotFound(LegalLensError):
    """Raised when an analysis is absent for the requested document."""

    def __init__(self, document_id: str, message: str | None = None) -> None:
        super().__init__(message or f"No analysis found for document {document_id}")
        self.document_id = document_id


class AnalysisPending(NotFound):
    """The document exists but is still processing."""

    def __init__(self, document_id: str) -> None:
        super().__init__(document_id, f"Analysis for document {document_id} is still processing")


class AnalysisFailed(NotFound):
    """The document exists but its analysis failed."""

    def __init__(self, document_id: str, reason: str | None = None) -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(document_id, f"Analysis for document {document_id} failed{detail}")
        self.reason = reason


class TransportFailure(LegalLensError):
    """Raised when a network collaborator fails (upload, fetch, reply)."""


class DocumentStateError(LegalLensError):
    """Raised when a lifecycle transition is not valid from the current status."""


class UploadRejected(LegalLensError):
    """Raised by file validation before an upload is submitted."""


class RouteError(LegalLensError, ValueError):
    """Raised for unknown views or parameters a view does not accept."""


__all__ = [
    "AnalysisFailed",
    "AnalysisPending",
    "DocumentStateError",
    "InvalidCredentials",
    "LegalLensError",
    "NoActiveSession",
    "NotFound",
    "RouteError",
    "TransportFailure",
    "UnknownDocument",
    "UploadRejected",
]
