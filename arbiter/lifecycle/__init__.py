"""Lifecycle state machines."""

from .document import Document
from .machine import LifecycleStateMachine
from .tables import (
    AGENT_LIFECYCLE,
    AGENT_TRANSITIONS,
    DOCUMENT_LIFECYCLE,
    DOCUMENT_TRANSITIONS,
    transition_agent,
    transition_document,
)

__all__ = [
    "LifecycleStateMachine",
    "AGENT_LIFECYCLE",
    "AGENT_TRANSITIONS",
    "DOCUMENT_LIFECYCLE",
    "DOCUMENT_TRANSITIONS",
    "transition_agent",
    "transition_document",
    "Document",
]
