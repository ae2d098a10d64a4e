"""Transition tables for agents and documents."""

from ..models import (
    AgentEvent,
    AgentStatus,
    DocumentEvent,
    DocumentStatus,
    Transition,
)
from .machine import LifecycleStateMachine


def _row(state, event, next_state, message: str) -> Transition:
    return Transition(state=state, event=event, next_state=next_state, message=message)


_IDLE = AgentStatus.IDLE
_REQUESTING = AgentStatus.REQUESTING
_HOLDING = AgentStatus.HOLDING
_COMPLETED = AgentStatus.COMPLETED

AGENT_TRANSITIONS: list[Transition] = [
    # idle
    _row(_IDLE, AgentEvent.REQUEST, _REQUESTING, "requesting access"),
    _row(_IDLE, AgentEvent.GRANT, _IDLE, "no pending request to grant"),
    _row(_IDLE, AgentEvent.DENY, _IDLE, "no pending request to deny"),
    _row(_IDLE, AgentEvent.COMPLETE, _IDLE, "not holding the resource"),
    _row(_IDLE, AgentEvent.REVOKE, _IDLE, "nothing to revoke"),
    _row(_IDLE, AgentEvent.RESET, _IDLE, "already idle"),
    # requesting
    _row(_REQUESTING, AgentEvent.REQUEST, _REQUESTING, "request already pending"),
    _row(_REQUESTING, AgentEvent.GRANT, _HOLDING, "access granted"),
    _row(_REQUESTING, AgentEvent.DENY, _REQUESTING, "access denied; waiting for clearance"),
    _row(_REQUESTING, AgentEvent.COMPLETE, _REQUESTING, "not holding the resource"),
    _row(_REQUESTING, AgentEvent.REVOKE, _IDLE, "request withdrawn"),
    _row(_REQUESTING, AgentEvent.RESET, _IDLE, "request abandoned"),
    # holding
    _row(_HOLDING, AgentEvent.REQUEST, _HOLDING, "already holding the resource"),
    _row(_HOLDING, AgentEvent.GRANT, _HOLDING, "already holding the resource"),
    _row(_HOLDING, AgentEvent.DENY, _HOLDING, "already holding the resource"),
    _row(_HOLDING, AgentEvent.COMPLETE, _COMPLETED, "completed; releasing the resource"),
    _row(_HOLDING, AgentEvent.REVOKE, _IDLE, "hold revoked"),
    _row(_HOLDING, AgentEvent.RESET, _HOLDING, "cannot reset while holding the resource"),
    # completed
    _row(_COMPLETED, AgentEvent.REQUEST, _REQUESTING, "requesting access again"),
    _row(_COMPLETED, AgentEvent.GRANT, _COMPLETED, "no pending request to grant"),
    _row(_COMPLETED, AgentEvent.DENY, _COMPLETED, "no pending request to deny"),
    _row(_COMPLETED, AgentEvent.COMPLETE, _COMPLETED, "already completed"),
    _row(_COMPLETED, AgentEvent.REVOKE, _COMPLETED, "nothing to revoke"),
    _row(_COMPLETED, AgentEvent.RESET, _IDLE, "reset to idle"),
]

DOCUMENT_TRANSITIONS: list[Transition] = [
    _row(
        DocumentStatus.DRAFT,
        DocumentEvent.PUBLISH,
        DocumentStatus.UNDER_REVIEW,
        "Draft: submitted for review",
    ),
    _row(
        DocumentStatus.DRAFT,
        DocumentEvent.REJECT,
        DocumentStatus.DRAFT,
        "Draft: document is rejected",
    ),
    _row(
        DocumentStatus.UNDER_REVIEW,
        DocumentEvent.PUBLISH,
        DocumentStatus.PUBLISHED,
        "Review: document is published",
    ),
    _row(
        DocumentStatus.UNDER_REVIEW,
        DocumentEvent.REJECT,
        DocumentStatus.DRAFT,
        "Review: document is rejected, back to draft",
    ),
    _row(
        DocumentStatus.PUBLISHED,
        DocumentEvent.PUBLISH,
        DocumentStatus.PUBLISHED,
        "Published: document is already published",
    ),
    _row(
        DocumentStatus.PUBLISHED,
        DocumentEvent.REJECT,
        DocumentStatus.PUBLISHED,
        "Published: document is already published",
    ),
]

AGENT_LIFECYCLE = LifecycleStateMachine(
    "agent", AgentStatus, AgentEvent, AGENT_TRANSITIONS
)
DOCUMENT_LIFECYCLE = LifecycleStateMachine(
    "document", DocumentStatus, DocumentEvent, DOCUMENT_TRANSITIONS
)


def transition_agent(
    state: AgentStatus | str, event: AgentEvent | str
) -> tuple[AgentStatus, str]:
    """Agent lifecycle transition."""
    return AGENT_LIFECYCLE.transition(state, event)


def transition_document(
    state: DocumentStatus | str, event: DocumentEvent | str
) -> tuple[DocumentStatus, str]:
    """Document lifecycle transition."""
    return DOCUMENT_LIFECYCLE.transition(state, event)
