"""Notification data models."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Notification:
    """A status message broadcast to every registered agent."""

    sequence: int
    message: str
    source: str  # component that broadcast
    timestamp: datetime
    recipients: list[str] = field(default_factory=list)  # names, delivery order
