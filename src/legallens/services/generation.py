"""Assistant reply generators for the document chat."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol, Sequence

LOGGER = logging.getLogger(__name__)


class ReplyGenerator(Protocol):
    """Protocol describing assistant reply generation."""

    async def reply(self, document_id: str, text: str) -> str:
        """Return the assistant's answer to ``text`` about ``document_id``."""


@dataclass(frozen=True)
class ReplyTemplate:
    keywords: Sequence[str]
    text: str


_TEMPLATES: tuple[ReplyTemplate, ...] = (
    ReplyTemplate(
        ("risk",),
        "Based on my analysis of the agreement, I've identified several key risks:\n\n"
        "1. **Intellectual Property Assignment**: The IP clause is quite broad and may cover personal projects. "
        "Consider negotiating to limit this to work directly related to company business.\n\n"
        "2. **Non-Compete Period**: The 18-month non-compete period is longer than typical. "
        "Industry standard is usually 6-12 months.\n\n"
        "3. **Termination Clause**: The termination conditions could be more specific to protect both parties.\n\n"
        "Would you like me to elaborate on any of these risks or discuss potential negotiation strategies?",
    ),
    ReplyTemplate(
        ("salary", "compensation", "pay"),
        "The compensation package in this agreement includes:\n\n"
        "**Base Salary**: $120,000 annually (paid bi-weekly)\n"
        "**Equity**: 5,000 stock options vesting over 4 years with 1-year cliff\n"
        "**Signing Bonus**: $10,000 (payable by February 1st, 2024)\n"
        "**Benefits**: Health insurance ($400/month employer contribution)\n\n"
        "Is there a specific aspect of the compensation you'd like to discuss?",
    ),
    ReplyTemplate(
        ("termination", "quit", "fire"),
        "The termination provisions in this agreement include:\n\n"
        "**For Cause Termination**: Immediate, for misconduct or breach after written notice and opportunity to cure.\n\n"
        "**Without Cause Termination**: Either party can terminate with 30 days written notice.\n\n"
        "**Severance**: 2 weeks severance pay if terminated without cause.\n\n"
        "**Post-Employment**: 18-month non-compete and 24-month non-solicitation.\n\n"
        "**Recommendation**: Consider negotiating the non-compete down to 6-12 months.",
    ),
    ReplyTemplate(
        ("negotiate", "negotiation"),
        "Here are key areas you might consider negotiating:\n\n"
        "**High Priority**:\n"
        "• Reduce non-compete period from 18 to 6-12 months\n"
        "• Narrow IP assignment clause to work-related projects only\n\n"
        "**Medium Priority**:\n"
        "• Increase severance to 4-6 weeks\n"
        "• Add specific performance review criteria\n\n"
        "Would you like me to help draft specific negotiation points for any of these areas?",
    ),
    ReplyTemplate(
        ("benefits", "insurance", "vacation"),
        "The benefits package outlined in the agreement includes:\n\n"
        "**Health Insurance**: $400/month employer contribution\n"
        "**401(k)**: Company match up to 4%\n"
        "**Vacation**: 15 days PTO in year 1, increasing to 20 days in year 2\n"
        "**Professional Development**: $2,000 annual budget\n\n"
        "The PTO is slightly below market average, which could be a negotiation point.",
    ),
)

DEFAULT_REPLY = (
    "I can help you understand this agreement in detail. I've analyzed the document and can answer questions about:\n\n"
    "• Risk assessment and red flags\n"
    "• Compensation and benefits breakdown\n"
    "• Termination and employment terms\n"
    "• Negotiation opportunities\n"
    "• Legal obligations for both parties\n\n"
    "What specific aspect of the agreement would you like to discuss?"
)


class TemplateReplyGenerator:
    """Deterministic keyword-matched replies used for demos and tests."""

    def __init__(self, latency_seconds: float = 0.0, templates: Sequence[ReplyTemplate] = _TEMPLATES) -> None:
        self._latency = latency_seconds
        self._templates = tuple(templates)

    async def reply(self, document_id: str, text: str) -> str:
        if self._latency > 0:
            await asyncio.sleep(self._latency)
        lowered = text.lower()
        for template in self._templates:
            if any(keyword in lowered for keyword in template.keywords):
                LOGGER.debug("Matched reply template %s for document %s", template.keywords[0], document_id)
                return template.text
        return DEFAULT_REPLY
