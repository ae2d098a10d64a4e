"""SIM implementation - the landing scenario replayed over HTTP."""

import asyncio
from typing import Protocol

import httpx

from arbiter.logging_config import get_logger
from arbiter.tracker import ITracker

logger = get_logger(__name__)

DEFAULT_AGENTS = ["Plane A", "Plane B", "Plane C"]


class ISim(Protocol):
    """Drive agents through the API. Hardcoded landing scenario."""

    async def start(self) -> None:
        """Start the scenario."""
        ...

    async def stop(self) -> None:
        """Stop the scenario."""
        ...


class Sim:
    """Three planes competing for one runway.

    Plane A and Plane B ask to land right away; A is cleared, B is told to
    hold. Plane C asks once A's landing should be over.
    """

    def __init__(
        self,
        api_url: str = "http://localhost:8000",
        tracker: ITracker | None = None,
        agent_names: list[str] | None = None,
        late_request_delay: float = 3.0,
        client: httpx.AsyncClient | None = None,
    ):
        self._api_url = api_url
        self._tracker = tracker
        self._agent_names = agent_names or list(DEFAULT_AGENTS)
        self._late_request_delay = late_request_delay
        self._running = False
        self._task: asyncio.Task | None = None
        self._client = client
        self._owns_client = client is None
        self._outcomes: list[tuple[str, bool]] = []

    @property
    def outcomes(self) -> list[tuple[str, bool]]:
        """(agent name, granted) for every request made so far."""
        return list(self._outcomes)

    def set_tracker(self, tracker: ITracker) -> None:
        """Inject tracker for SIM trace events."""
        self._tracker = tracker

    async def start(self) -> None:
        """Start the scenario."""
        if self._running:
            return

        self._running = True
        if self._client is None:
            self._client = httpx.AsyncClient()

        self._task = asyncio.create_task(self._run_scenario())

    async def stop(self) -> None:
        """Stop the scenario."""
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def wait(self) -> None:
        """Wait for the scenario to finish."""
        if self._task:
            await self._task

    async def _run_scenario(self) -> None:
        """Run the landing scenario."""
        # The first two ask right away, everyone else after the pause
        early, late = self._agent_names[:2], self._agent_names[2:]

        try:
            if self._tracker:
                await self._tracker.track(
                    "sim_started",
                    "sim",
                    {"scenario": "landing", "agents": self._agent_names},
                )

            for name in self._agent_names:
                await self._register(name)

            for name in early:
                if not self._running:
                    return
                await self._request(name)

            if late:
                await asyncio.sleep(self._late_request_delay)

            for name in late:
                if not self._running:
                    return
                await self._request(name)

        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error("SIM scenario error: %s", e)
        finally:
            if self._tracker:
                await self._tracker.track(
                    "sim_completed",
                    "sim",
                    {
                        "scenario": "landing",
                        "outcomes": [
                            {"agent": name, "granted": granted}
                            for name, granted in self._outcomes
                        ],
                    },
                )

    async def _register(self, name: str) -> None:
        """Register an agent via HTTP API."""
        if not self._client:
            return

        response = await self._client.post(
            f"{self._api_url}/api/agents",
            json={"name": name},
            timeout=10.0,
        )
        if response.status_code == 409:
            logger.info("SIM: %s already registered", name)
        elif response.status_code != 200:
            logger.error("SIM: Error registering %s: %s", name, response.status_code)

    async def _request(self, name: str) -> None:
        """Ask for the resource via HTTP API."""
        if not self._client:
            return

        try:
            response = await self._client.post(
                f"{self._api_url}/api/agents/{name}/request",
                timeout=10.0,
            )

            if response.status_code == 200:
                data = response.json()
                self._outcomes.append((name, data["granted"]))
                logger.info(
                    "SIM: %s -> %s (%s)",
                    name,
                    "granted" if data["granted"] else "denied",
                    data.get("message", "N/A"),
                )
            else:
                logger.error(
                    "SIM: Error requesting for %s: %s",
                    name,
                    response.status_code,
                )

        except httpx.HTTPError as e:
            logger.error("SIM: Failed to request for %s: %s", name, e)
