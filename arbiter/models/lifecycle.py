"""Lifecycle-related data models."""

from dataclasses import dataclass
from enum import Enum


class AgentStatus(str, Enum):
    """Lifecycle states of an Agent competing for the resource."""

    IDLE = "idle"
    REQUESTING = "requesting"
    HOLDING = "holding"
    COMPLETED = "completed"


class AgentEvent(str, Enum):
    """Events driving the Agent lifecycle."""

    REQUEST = "request"
    GRANT = "grant"
    DENY = "deny"
    COMPLETE = "complete"
    REVOKE = "revoke"
    RESET = "reset"


class DocumentStatus(str, Enum):
    """Lifecycle states of a reviewed document."""

    DRAFT = "draft"
    UNDER_REVIEW = "under_review"
    PUBLISHED = "published"


class DocumentEvent(str, Enum):
    """Events driving the document lifecycle."""

    PUBLISH = "publish"
    REJECT = "reject"


@dataclass(frozen=True)
class Transition:
    """One row of a transition table."""

    state: Enum
    event: Enum
    next_state: Enum
    message: str

    @property
    def is_self_loop(self) -> bool:
        return self.state == self.next_state
