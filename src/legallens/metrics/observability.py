"""Observability helpers for LegalLens."""

from __future__ import annotations

import logging
import time
from contextvars import ContextVar

import structlog
from prometheus_client import Counter, Histogram

_logger_configured = False
_correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="-")


def configure_logging(level: int = logging.INFO) -> None:
    global _logger_configured  # noqa: PLW0603 - module-level guard
    if _logger_configured:
        return
    logging.basicConfig(level=level, format="%(message)s")
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _logger_configured = True


def bind_correlation_id(correlation_id: str) -> None:
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)
    _correlation_id_var.set(correlation_id)


def clear_correlation_id() -> None:
    structlog.contextvars.clear_contextvars()
    _correlation_id_var.set("-")


def get_correlation_id() -> str:
    return _correlation_id_var.get()


def get_logger(name: str = "legallens") -> structlog.BoundLogger:
    configure_logging()
    return structlog.get_logger(name)


class WorkflowMetrics:
    """Prometheus metrics for the upload, analysis and chat workflows."""

    upload_latency = Histogram(
        "legallens_upload_duration_seconds",
        "Time from upload submission to completion or failure.",
        buckets=(0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
    )
    upload_outcomes = Counter(
        "legallens_upload_total",
        "Uploads by outcome.",
        ["outcome"],
    )
    analysis_fetch_latency = Histogram(
        "legallens_analysis_fetch_duration_seconds",
        "Time spent fetching analyses for history documents.",
        buckets=(0.05, 0.1, 0.5, 1.0, 2.0, 5.0),
    )
    reply_latency = Histogram(
        "legallens_reply_duration_seconds",
        "Time spent waiting for assistant replies.",
        buckets=(0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0),
    )
    reply_outcomes = Counter(
        "legallens_reply_total",
        "Chat replies by outcome.",
        ["outcome"],
    )

    @classmethod
    def observe_upload(cls, duration_seconds: float, outcome: str) -> None:
        cls.upload_latency.observe(duration_seconds)
        cls.upload_outcomes.labels(outcome=outcome).inc()

    @classmethod
    def observe_analysis_fetch(cls, duration_seconds: float) -> None:
        cls.analysis_fetch_latency.observe(duration_seconds)

    @classmethod
    def observe_reply(cls, duration_seconds: float, outcome: str) -> None:
        cls.reply_latency.observe(duration_seconds)
        cls.reply_outcomes.labels(outcome=outcome).inc()


class TimedSection:
    """Context manager capturing elapsed time for metrics."""

    def __init__(self, callback) -> None:
        self._callback = callback
        self._start = 0.0

    def __enter__(self) -> "TimedSection":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: D401
        duration = time.perf_counter() - self._start
        self._callback(duration)


__all__ = [
    "TimedSection",
    "WorkflowMetrics",
    "bind_correlation_id",
    "clear_correlation_id",
    "configure_logging",
    "get_correlation_id",
    "get_logger",
]
