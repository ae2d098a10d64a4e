"""Tracing and observability data models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class TraceEvent:
    """A single observability event."""

    id: str
    event_type: str  # e.g. "access_granted", "resource_released"
    actor: str  # who created this event
    data: dict  # self-contained data for display
    timestamp: datetime
