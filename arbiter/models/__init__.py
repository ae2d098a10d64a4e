"""Core data models for the arbitration service."""

from .lifecycle import (
    AgentEvent,
    AgentStatus,
    DocumentEvent,
    DocumentStatus,
    Transition,
)
from .notifications import Notification
from .tracing import TraceEvent

__all__ = [
    # Lifecycle
    "AgentStatus",
    "AgentEvent",
    "DocumentStatus",
    "DocumentEvent",
    "Transition",
    # Notifications
    "Notification",
    # Tracing
    "TraceEvent",
]
