"""Tests for data models."""

from datetime import datetime, timezone

import pytest

from arbiter.models import (
    AgentEvent,
    AgentStatus,
    DocumentEvent,
    DocumentStatus,
    Notification,
    TraceEvent,
    Transition,
)


class TestEnums:
    """Tests for lifecycle enums."""

    def test_agent_status_values(self):
        """Test agent states."""
        assert [s.value for s in AgentStatus] == [
            "idle",
            "requesting",
            "holding",
            "completed",
        ]

    def test_document_status_values(self):
        """Test document states."""
        assert [s.value for s in DocumentStatus] == [
            "draft",
            "under_review",
            "published",
        ]

    def test_enums_are_strings(self):
        """Test that enums compare to their values."""
        assert AgentEvent.REQUEST == "request"
        assert DocumentEvent.PUBLISH == "publish"


class TestTransition:
    """Tests for Transition model."""

    def test_self_loop(self):
        """Test detecting a self-loop."""
        row = Transition(
            state=DocumentStatus.PUBLISHED,
            event=DocumentEvent.REJECT,
            next_state=DocumentStatus.PUBLISHED,
            message="already published",
        )
        assert row.is_self_loop

    def test_frozen(self):
        """Test that rows are immutable."""
        row = Transition(
            state=AgentStatus.IDLE,
            event=AgentEvent.REQUEST,
            next_state=AgentStatus.REQUESTING,
            message="requesting access",
        )
        with pytest.raises(AttributeError):
            row.message = "changed"


class TestNotification:
    """Tests for Notification model."""

    def test_create_notification(self):
        """Test creating a Notification."""
        ts = datetime.now(timezone.utc)
        notification = Notification(
            sequence=1, message="resource now free", source="test", timestamp=ts
        )
        assert notification.recipients == []
        assert notification.timestamp == ts


class TestTraceEvent:
    """Tests for TraceEvent model."""

    def test_create_trace_event(self):
        """Test creating a TraceEvent."""
        ts = datetime.now(timezone.utc)
        event = TraceEvent(
            id="trace1",
            event_type="access_granted",
            actor="plane-a",
            data={"holder": "plane-a"},
            timestamp=ts,
        )
        assert event.id == "trace1"
        assert event.event_type == "access_granted"
        assert event.data == {"holder": "plane-a"}
