"""Tests for the landing scenario simulator."""

import httpx
import pytest

from arbiter.api import create_fastapi_app
from arbiter.app import Application
from sim import Sim


@pytest.fixture
async def app():
    """Create and start an application with a short real hold."""
    application = Application(db_path=":memory:", hold_delay=0.05)
    await application.start()
    yield application
    await application.stop()


@pytest.mark.asyncio
async def test_landing_scenario(app: Application):
    """Test A cleared, B told to hold, C cleared after A lands."""
    transport = httpx.ASGITransport(app=create_fastapi_app(app))

    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        sim = Sim(
            api_url="http://test",
            tracker=app.tracker,
            client=client,
            late_request_delay=0.3,
        )
        await sim.start()
        await sim.wait()

    assert sim.outcomes == [
        ("Plane A", True),
        ("Plane B", False),
        ("Plane C", True),
    ]

    events = await app.storage.get_trace_events(actor="sim")
    assert {e.event_type for e in events} == {"sim_started", "sim_completed"}


@pytest.mark.asyncio
async def test_stop_before_finish(app: Application):
    """Test that stopping the scenario early is clean."""
    transport = httpx.ASGITransport(app=create_fastapi_app(app))

    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        sim = Sim(api_url="http://test", client=client, late_request_delay=10.0)
        await sim.start()
        await sim.stop()

    assert ("Plane C", True) not in sim.outcomes


@pytest.mark.asyncio
async def test_two_agents_both_request_right_away(app: Application):
    """Test that with two names both ask immediately and nobody comes late."""
    transport = httpx.ASGITransport(app=create_fastapi_app(app))

    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        sim = Sim(
            api_url="http://test",
            client=client,
            agent_names=["Plane A", "Plane B"],
            late_request_delay=10.0,
        )
        await sim.start()
        await sim.wait()

    assert sim.outcomes == [("Plane A", True), ("Plane B", False)]
