"""Pydantic models for the LegalLens backend API."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from legallens import models

RiskLiteral = Literal["low", "medium", "high"]
StatusLiteral = Literal["processing", "completed", "error"]


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SessionModel(_WireModel):
    uid: str = Field(..., min_length=1)
    email: str
    display_name: Optional[str] = Field(default=None, alias="displayName")

    def to_domain(self) -> models.Session:
        return models.Session(id=self.uid, email=self.email, display_name=self.display_name)


class CredentialsRequest(_WireModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RiskModel(_WireModel):
    type: str
    description: str
    severity: RiskLiteral
    recommendation: str


class ObligationModel(_WireModel):
    party: str
    description: str
    deadline: Optional[str] = None
    status: Literal["pending", "completed", "overdue"] = "pending"


class ImportantDateModel(_WireModel):
    date: str
    description: str
    category: Literal["deadline", "renewal", "payment", "milestone"] = Field(alias="type")


class KeyTermModel(_WireModel):
    term: str
    definition: str
    importance: RiskLiteral = "medium"


class FinancialTermModel(_WireModel):
    type: str
    amount: str
    frequency: str
    due_date: Optional[str] = Field(default=None, alias="dueDate")


class PartyModel(_WireModel):
    name: str
    role: str
    responsibilities: List[str] = Field(default_factory=list)


class AnalysisModel(_WireModel):
    summary: str
    risks: List[RiskModel] = Field(default_factory=list)
    obligations: List[ObligationModel] = Field(default_factory=list)
    important_dates: List[ImportantDateModel] = Field(default_factory=list, alias="importantDates")
    key_terms: List[KeyTermModel] = Field(default_factory=list, alias="keyTerms")
    financial_terms: List[FinancialTermModel] = Field(default_factory=list, alias="financialTerms")
    parties: List[PartyModel] = Field(default_factory=list)
    key_findings: List[str] = Field(default_factory=list, alias="keyFindings")
    document_type: Optional[str] = Field(default=None, alias="documentType")

    def to_domain(self) -> models.Analysis:
        return models.Analysis(
            summary=self.summary,
            risks=tuple(models.Risk(r.type, r.description, r.severity, r.recommendation) for r in self.risks),
            obligations=tuple(
                models.Obligation(o.party, o.description, o.status, o.deadline) for o in self.obligations
            ),
            important_dates=tuple(
                models.ImportantDate(d.date, d.description, d.category) for d in self.important_dates
            ),
            key_terms=tuple(models.KeyTerm(k.term, k.definition, k.importance) for k in self.key_terms),
            financial_terms=tuple(
                models.FinancialTerm(f.type, f.amount, f.frequency, f.due_date) for f in self.financial_terms
            ),
            parties=tuple(models.Party(p.name, p.role, tuple(p.responsibilities)) for p in self.parties),
            key_findings=tuple(self.key_findings),
            document_type=self.document_type,
        )


class UploadResponse(_WireModel):
    success: bool = True
    document_id: str = Field(..., alias="documentId")
    message: str = ""
    risk_level: RiskLiteral = Field(..., alias="riskLevel")
    analysis: AnalysisModel

    def to_domain(self) -> models.UploadResult:
        return models.UploadResult(
            document_id=self.document_id,
            analysis=self.analysis.to_domain(),
            risk_level=self.risk_level,
            message=self.message,
        )


class DocumentSummaryModel(_WireModel):
    id: str
    name: str
    type: str
    uploaded_at: datetime = Field(..., alias="uploadDate")
    status: StatusLiteral
    risk_level: Optional[RiskLiteral] = Field(default=None, alias="riskLevel")
    summary: Optional[str] = None

    @field_validator("uploaded_at", mode="before")
    @classmethod
    def _accept_bare_date(cls, value: object) -> object:
        if isinstance(value, str) and len(value) == 10:
            return f"{value}T00:00:00"
        return value

    @field_validator("uploaded_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def to_domain(self) -> models.DocumentSummary:
        return models.DocumentSummary(
            id=self.id,
            name=self.name,
            type=self.type,
            uploaded_at=self.uploaded_at,
            status=self.status,
            risk_level=self.risk_level,
            summary=self.summary,
        )


class HistoryResponse(_WireModel):
    documents: List[DocumentSummaryModel]


class ChatRequest(_WireModel):
    message: str = Field(..., min_length=1)


class ChatReplyResponse(_WireModel):
    reply: str


class ProfileUpdateRequest(_WireModel):
    display_name: Optional[str] = Field(default=None, alias="displayName")
