"""Tests for lifecycle state machines."""

import pytest

from arbiter.errors import (
    IncompleteTransitionTableError,
    InvalidEventError,
    InvalidTransitionError,
)
from arbiter.lifecycle import (
    AGENT_LIFECYCLE,
    DOCUMENT_LIFECYCLE,
    DOCUMENT_TRANSITIONS,
    Document,
    LifecycleStateMachine,
    transition_agent,
    transition_document,
)
from arbiter.models import AgentEvent, AgentStatus, DocumentEvent, DocumentStatus


class TestAgentTable:
    """Tests for the agent transition table."""

    @pytest.mark.parametrize("state", list(AgentStatus))
    @pytest.mark.parametrize("event", list(AgentEvent))
    def test_every_pair_is_defined(self, state, event):
        """Test that every (state, event) pair yields a state and a message."""
        next_state, message = transition_agent(state, event)

        assert next_state in AgentStatus
        assert isinstance(message, str) and message

    @pytest.mark.parametrize("state", list(AgentStatus))
    @pytest.mark.parametrize("event", list(AgentEvent))
    def test_transition_is_deterministic(self, state, event):
        """Test that the same inputs always give the same outputs."""
        assert transition_agent(state, event) == transition_agent(state, event)
        assert transition_agent(state.value, event.value) == transition_agent(state, event)

    def test_table_size(self):
        """Test that the table has one row per pair."""
        assert len(AGENT_LIFECYCLE.table) == len(AgentStatus) * len(AgentEvent)

    def test_happy_path(self):
        """Test idle -> requesting -> holding -> completed -> idle."""
        state = AgentStatus.IDLE
        state, _ = transition_agent(state, AgentEvent.REQUEST)
        assert state == AgentStatus.REQUESTING
        state, message = transition_agent(state, AgentEvent.GRANT)
        assert state == AgentStatus.HOLDING
        assert message == "access granted"
        state, _ = transition_agent(state, AgentEvent.COMPLETE)
        assert state == AgentStatus.COMPLETED
        state, _ = transition_agent(state, AgentEvent.RESET)
        assert state == AgentStatus.IDLE

    def test_deny_keeps_waiting(self):
        """Test that a denied request stays in requesting."""
        state, message = transition_agent(AgentStatus.REQUESTING, AgentEvent.DENY)

        assert state == AgentStatus.REQUESTING
        assert "denied" in message

    def test_completed_can_request_again(self):
        """Test that a completed agent can ask again."""
        state, _ = transition_agent(AgentStatus.COMPLETED, AgentEvent.REQUEST)
        assert state == AgentStatus.REQUESTING

    def test_reset_while_holding_is_self_loop(self):
        """Test that reset cannot drop a held resource."""
        state, message = transition_agent(AgentStatus.HOLDING, AgentEvent.RESET)

        assert state == AgentStatus.HOLDING
        assert "cannot reset" in message

    def test_revoke_while_holding_returns_to_idle(self):
        """Test that a revoked hold returns to idle."""
        state, _ = transition_agent(AgentStatus.HOLDING, AgentEvent.REVOKE)
        assert state == AgentStatus.IDLE


class TestDocumentTable:
    """Tests for the document transition table."""

    @pytest.mark.parametrize("state", list(DocumentStatus))
    @pytest.mark.parametrize("event", list(DocumentEvent))
    def test_every_pair_is_defined(self, state, event):
        """Test that every (state, event) pair yields a state and a message."""
        next_state, message = transition_document(state, event)

        assert next_state in DocumentStatus
        assert message

    def test_publish_workflow(self):
        """Test draft -> under review -> published, then reject is a no-op."""
        state, _ = transition_document(DocumentStatus.DRAFT, "publish")
        assert state == DocumentStatus.UNDER_REVIEW

        state, _ = transition_document(state, "publish")
        assert state == DocumentStatus.PUBLISHED

        state, message = transition_document(state, "reject")
        assert state == DocumentStatus.PUBLISHED
        assert "already published" in message

    def test_republish_is_self_loop(self):
        """Test that publishing a published document is not an error."""
        state, message = transition_document(DocumentStatus.PUBLISHED, DocumentEvent.PUBLISH)

        assert state == DocumentStatus.PUBLISHED
        assert "already published" in message

    def test_reject_under_review_returns_to_draft(self):
        """Test that rejecting a reviewed document sends it back."""
        state, _ = transition_document(DocumentStatus.UNDER_REVIEW, DocumentEvent.REJECT)
        assert state == DocumentStatus.DRAFT

    def test_reject_draft_stays_draft(self):
        """Test that rejecting a draft keeps it a draft."""
        state, message = transition_document(DocumentStatus.DRAFT, DocumentEvent.REJECT)

        assert state == DocumentStatus.DRAFT
        assert "rejected" in message


class TestInvalidInput:
    """Tests for rejection of undefined input."""

    def test_unknown_event_raises(self):
        """Test that an unknown event is rejected, not ignored."""
        with pytest.raises(InvalidEventError) as exc_info:
            transition_agent(AgentStatus.IDLE, "explode")

        assert exc_info.value.event == "explode"
        assert exc_info.value.machine == "agent"

    def test_unknown_event_is_invalid_transition(self):
        """Test that InvalidEventError is an InvalidTransitionError."""
        with pytest.raises(InvalidTransitionError):
            transition_document(DocumentStatus.DRAFT, "archive")

    def test_event_from_other_machine_raises(self):
        """Test that agent events are not document events."""
        with pytest.raises(InvalidEventError):
            transition_document(DocumentStatus.DRAFT, AgentEvent.GRANT)

    def test_unknown_state_raises(self):
        """Test that an unknown state is rejected."""
        with pytest.raises(InvalidTransitionError) as exc_info:
            transition_agent("flying", AgentEvent.REQUEST)

        assert not isinstance(exc_info.value, InvalidEventError)

    def test_unhashable_event_raises(self):
        """Test that garbage input is rejected with the same error."""
        with pytest.raises(InvalidEventError):
            DOCUMENT_LIFECYCLE.transition(DocumentStatus.DRAFT, ["publish"])


class TestLifecycleStateMachine:
    """Tests for LifecycleStateMachine construction."""

    def test_incomplete_table_rejected(self):
        """Test that a table missing a pair cannot be built."""
        rows = [
            row
            for row in DOCUMENT_TRANSITIONS
            if not (
                row.state == DocumentStatus.PUBLISHED
                and row.event == DocumentEvent.REJECT
            )
        ]

        with pytest.raises(IncompleteTransitionTableError) as exc_info:
            LifecycleStateMachine("partial", DocumentStatus, DocumentEvent, rows)

        assert exc_info.value.missing == [("published", "reject")]

    def test_lookup_returns_row(self):
        """Test that lookup returns the full table row."""
        row = DOCUMENT_LIFECYCLE.lookup("draft", "publish")

        assert row.state == DocumentStatus.DRAFT
        assert row.event == DocumentEvent.PUBLISH
        assert row.next_state == DocumentStatus.UNDER_REVIEW
        assert not row.is_self_loop

    def test_table_order(self):
        """Test that rows come back in declaration order."""
        table = DOCUMENT_LIFECYCLE.table

        assert [(r.state, r.event) for r in table[:2]] == [
            (DocumentStatus.DRAFT, DocumentEvent.PUBLISH),
            (DocumentStatus.DRAFT, DocumentEvent.REJECT),
        ]


class TestDocument:
    """Tests for the Document entity."""

    def test_starts_in_draft(self):
        """Test that a new document is a draft."""
        document = Document("doc1")

        assert document.state == DocumentStatus.DRAFT
        assert document.last_message == ""
        assert document.history == []

    def test_workflow(self):
        """Test publish, publish, reject, publish."""
        document = Document("doc1")

        document.publish()
        assert document.state == DocumentStatus.UNDER_REVIEW
        document.publish()
        assert document.state == DocumentStatus.PUBLISHED

        message = document.reject()
        assert document.state == DocumentStatus.PUBLISHED
        assert message == "Published: document is already published"

        document.publish()
        assert document.state == DocumentStatus.PUBLISHED
        assert len(document.history) == 4
        assert document.history[-1].is_self_loop

    def test_apply_unknown_event_keeps_state(self):
        """Test that a rejected event leaves the document untouched."""
        document = Document("doc1")

        with pytest.raises(InvalidEventError):
            document.apply("shred")

        assert document.state == DocumentStatus.DRAFT
        assert document.history == []
