"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))


class FakeAgent:
    """Minimal IAgent recording every callback from the service."""

    def __init__(self, name: str):
        self.name = name
        self.messages: list[str] = []
        self.granted = 0
        self.revoked = 0
        self.unregistered = 0

    def on_notification(self, message: str) -> None:
        self.messages.append(message)

    def on_granted(self) -> None:
        self.granted += 1

    def on_revoked(self) -> None:
        self.revoked += 1

    def on_unregistered(self) -> None:
        self.unregistered += 1


@pytest.fixture
def fake_agent():
    """Factory for FakeAgent instances."""
    return FakeAgent


@pytest_asyncio.fixture
async def storage():
    """Create in-memory trace storage for testing."""
    from arbiter.storage import TraceStorage

    st = TraceStorage(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest.fixture
def tracker(storage):
    """Create Tracker with storage (background loop not started)."""
    from arbiter.tracker import Tracker

    return Tracker(storage=storage)


@pytest.fixture
def bus():
    """Create an empty NotificationBus."""
    from arbiter.notification_bus import NotificationBus

    return NotificationBus()


@pytest.fixture
def service(bus):
    """Create ArbitrationService without tracing."""
    from arbiter.arbitration import ArbitrationService

    return ArbitrationService(bus)


@pytest.fixture
def traced_service(bus, tracker):
    """Create ArbitrationService that records trace events."""
    from arbiter.arbitration import ArbitrationService

    return ArbitrationService(bus, tracker)


@pytest.fixture
def manual_scheduler():
    """Create a virtual-clock scheduler."""
    from arbiter.scheduling import ManualScheduler

    return ManualScheduler()


@pytest.fixture
def planes(service, manual_scheduler):
    """Three registered agents sharing one service and a 2s hold."""
    from arbiter.agents import Agent

    agents = [
        Agent(name, service, manual_scheduler, hold_delay=2.0)
        for name in ("Plane A", "Plane B", "Plane C")
    ]
    for agent in agents:
        service.register(agent)
    return agents
