"""Deterministic stand-ins for the remote upload, analysis and history services."""

from __future__ import annotations

import asyncio
import time
from datetime import datetime, timezone
from typing import Sequence

from legallens.models import (
    Analysis,
    DocumentSummary,
    FinancialTerm,
    ImportantDate,
    KeyTerm,
    Obligation,
    Party,
    Risk,
    UploadFile,
    UploadResult,
)

SAMPLE_ANALYSIS = Analysis(
    summary=(
        "This employment agreement establishes the terms and conditions for a full-time software engineer "
        "position. The contract includes competitive compensation, comprehensive benefits, and standard "
        "employment clauses with some areas requiring attention."
    ),
    risks=(
        Risk(
            "Termination Clause",
            "The termination clause may be overly broad and could limit future employment opportunities.",
            "medium",
            "Consider negotiating more specific termination conditions and reducing the scope of "
            "post-employment restrictions.",
        ),
        Risk(
            "Intellectual Property",
            "IP assignment clause covers work done outside of company time, which may be too broad.",
            "high",
            "Request modification to limit IP assignment to work directly related to company business.",
        ),
        Risk(
            "Non-Compete",
            "Non-compete period extends to 18 months, which may be excessive.",
            "medium",
            "Negotiate to reduce non-compete period to 6-12 months and narrow the scope.",
        ),
    ),
    obligations=(
        Obligation("Employee", "Complete mandatory training within 30 days of start date", "pending", "2024-02-15"),
        Obligation("Employer", "Provide equipment and office space within 5 business days", "completed", "2024-01-22"),
        Obligation("Employee", "Submit annual performance goals by March 1st", "pending", "2024-03-01"),
    ),
    important_dates=(
        ImportantDate("2024-01-15", "Employment start date", "milestone"),
        ImportantDate("2024-02-15", "Probationary period ends", "milestone"),
        ImportantDate("2024-07-15", "First performance review", "milestone"),
        ImportantDate("2025-01-15", "Annual contract review", "renewal"),
    ),
    key_terms=(
        KeyTerm("Base Salary", "Annual compensation of $120,000 paid bi-weekly", "high"),
        KeyTerm("Equity Compensation", "5,000 stock options vesting over 4 years with 1-year cliff", "high"),
        KeyTerm("Confidentiality", "Employee must maintain confidentiality of proprietary information", "medium"),
    ),
    financial_terms=(
        FinancialTerm("Base Salary", "$120,000", "Annual"),
        FinancialTerm("Signing Bonus", "$10,000", "One-time", "2024-02-01"),
        FinancialTerm("Health Insurance", "$400/month", "Monthly"),
    ),
    parties=(
        Party(
            "TechCorp Inc.",
            "Employer",
            (
                "Provide competitive compensation and benefits",
                "Supply necessary equipment and resources",
                "Maintain safe working environment",
                "Conduct fair performance evaluations",
            ),
        ),
        Party(
            "John Smith",
            "Employee",
            (
                "Perform assigned duties with professional competence",
                "Maintain confidentiality of company information",
                "Complete required training and certifications",
                "Follow company policies and procedures",
            ),
        ),
    ),
    key_findings=(
        "Payment terms require 30-day notice period",
        "Liability clauses may need review",
        "Termination conditions are clearly defined",
        "Intellectual property rights are addressed",
    ),
    document_type="employment",
)

UPLOAD_ANALYSIS = Analysis(
    summary=(
        "This appears to be a standard legal contract with moderate complexity. The document contains standard "
        "clauses and terms that are commonly found in commercial agreements."
    ),
    key_findings=SAMPLE_ANALYSIS.key_findings,
    document_type="contract",
)


def _day(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


SAMPLE_HISTORY: tuple[DocumentSummary, ...] = (
    DocumentSummary(
        id="1",
        name="Employment_Agreement_2024.pdf",
        type="employment",
        uploaded_at=_day("2024-01-15"),
        status="completed",
        risk_level="low",
        summary="Standard employment agreement with competitive salary and benefits package.",
    ),
    DocumentSummary(
        id="2",
        name="Vendor_Contract_ABC_Corp.pdf",
        type="contract",
        uploaded_at=_day("2024-01-14"),
        status="completed",
        risk_level="medium",
        summary="Service agreement with payment terms requiring review.",
    ),
    DocumentSummary(
        id="3",
        name="Partnership_Agreement_Draft.pdf",
        type="partnership",
        uploaded_at=_day("2024-01-13"),
        status="processing",
        risk_level="high",
        summary="Complex partnership structure with multiple stakeholders.",
    ),
)


async def _pause(seconds: float) -> None:
    if seconds > 0:
        await asyncio.sleep(seconds)


class DemoUploadTransport:
    """Resolves every submission with a canned medium-risk analysis."""

    def __init__(self, latency_seconds: float = 3.0) -> None:
        self._latency = latency_seconds

    async def submit(self, file: UploadFile) -> UploadResult:  # noqa: ARG002 - content is not inspected
        await _pause(self._latency)
        return UploadResult(
            document_id=f"doc_{int(time.time() * 1000)}",
            analysis=UPLOAD_ANALYSIS,
            risk_level="medium",
            message="Document uploaded and analyzed successfully",
        )


class DemoAnalysisFetch:
    def __init__(self, latency_seconds: float = 1.0, analysis: Analysis = SAMPLE_ANALYSIS) -> None:
        self._latency = latency_seconds
        self._analysis = analysis

    async def fetch(self, document_id: str) -> Analysis:  # noqa: ARG002
        await _pause(self._latency)
        return self._analysis


class DemoHistoryFetch:
    def __init__(self, latency_seconds: float = 1.0, history: Sequence[DocumentSummary] = SAMPLE_HISTORY) -> None:
        self._latency = latency_seconds
        self._history = tuple(history)

    async def fetch(self) -> Sequence[DocumentSummary]:
        await _pause(self._latency)
        return self._history
