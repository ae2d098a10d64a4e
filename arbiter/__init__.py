"""Exclusive resource arbitration service."""

from .agents import Agent, IAgent
from .app import Application, IApplication
from .arbitration import (
    FREE_MESSAGE,
    GRANTED_MESSAGE,
    ArbitrationService,
    IArbitrationService,
)
from .errors import (
    ArbiterError,
    IncompleteTransitionTableError,
    InvalidEventError,
    InvalidTransitionError,
)
from .lifecycle import (
    AGENT_LIFECYCLE,
    DOCUMENT_LIFECYCLE,
    Document,
    LifecycleStateMachine,
    transition_agent,
    transition_document,
)
from .models import (
    AgentEvent,
    AgentStatus,
    DocumentEvent,
    DocumentStatus,
    Notification,
    TraceEvent,
    Transition,
)
from .notification_bus import INotificationBus, NotificationBus
from .scheduling import (
    CompletionTimer,
    DelayScheduler,
    ICompletionScheduler,
    ManualScheduler,
)
from .storage import ITraceStorage, TraceStorage
from .tracker import ITracker, Tracker

__all__ = [
    # Application
    "Application",
    "IApplication",
    # Models
    "AgentStatus",
    "AgentEvent",
    "DocumentStatus",
    "DocumentEvent",
    "Transition",
    "Notification",
    "TraceEvent",
    # Errors
    "ArbiterError",
    "InvalidTransitionError",
    "InvalidEventError",
    "IncompleteTransitionTableError",
    # Lifecycle
    "LifecycleStateMachine",
    "AGENT_LIFECYCLE",
    "DOCUMENT_LIFECYCLE",
    "transition_agent",
    "transition_document",
    "Document",
    # Components
    "IAgent",
    "Agent",
    "IArbitrationService",
    "ArbitrationService",
    "GRANTED_MESSAGE",
    "FREE_MESSAGE",
    "INotificationBus",
    "NotificationBus",
    "CompletionTimer",
    "ICompletionScheduler",
    "DelayScheduler",
    "ManualScheduler",
    "ITraceStorage",
    "TraceStorage",
    "ITracker",
    "Tracker",
]
