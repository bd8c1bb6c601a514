"""Workflow services wiring asynchronous collaborators into the registry."""

from .analysis import AnalysisFetch, AnalysisWorkflow
from .chat import ChatExchange, ChatWorkflow
from .demo import DemoAnalysisFetch, DemoHistoryFetch, DemoUploadTransport
from .generation import ReplyGenerator, TemplateReplyGenerator
from .history import HistoryFetch, HistoryWorkflow
from .notifications import LoggingNotificationSink, Notification, NotificationSink, QueueNotificationSink
from .upload import (
    ContentTypeValidator,
    FileValidator,
    ProgressTicker,
    UploadConfig,
    UploadOperation,
    UploadTransport,
    UploadWorkflow,
)

__all__ = [
    "AnalysisFetch",
    "AnalysisWorkflow",
    "ChatExchange",
    "ChatWorkflow",
    "ContentTypeValidator",
    "DemoAnalysisFetch",
    "DemoHistoryFetch",
    "DemoUploadTransport",
    "FileValidator",
    "HistoryFetch",
    "HistoryWorkflow",
    "LoggingNotificationSink",
    "Notification",
    "NotificationSink",
    "ProgressTicker",
    "QueueNotificationSink",
    "ReplyGenerator",
    "TemplateReplyGenerator",
    "UploadConfig",
    "UploadOperation",
    "UploadTransport",
    "UploadWorkflow",
]
