"""Application bootstrap and lifecycle management."""

import os
from typing import Protocol

from .agents import Agent
from .arbitration import ArbitrationService
from .config import resolve_db_path, resolve_hold_delay
from .lifecycle import Document
from .logging_config import get_logger
from .notification_bus import NotificationBus
from .scheduling import DelayScheduler, ICompletionScheduler
from .storage import ITraceStorage, TraceStorage
from .tracker import Tracker

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    async def reset(self) -> None:
        """Drop all agents, documents and trace data."""
        ...


class Application:
    """Main application bootstrap.

    Owns the agents and documents it constructs; the arbitration service only
    ever sees them through ``register``.
    """

    def __init__(
        self,
        db_path: str | None = None,
        hold_delay: float | None = None,
        scheduler: ICompletionScheduler | None = None,
    ):
        env_db_path = os.getenv("TRACE_DB_URL") if db_path is None else db_path
        self._db_path = resolve_db_path(env_db_path)
        self._hold_delay = (
            resolve_hold_delay(os.getenv("ARBITER_HOLD_DELAY"))
            if hold_delay is None
            else resolve_hold_delay(hold_delay)
        )
        self._scheduler: ICompletionScheduler = scheduler or DelayScheduler()

        # Components (will be initialized in start())
        self._storage: ITraceStorage | None = None
        self._tracker: Tracker | None = None
        self._bus: NotificationBus | None = None
        self._service: ArbitrationService | None = None

        self._agents: dict[str, Agent] = {}
        self._documents: dict[str, Document] = {}

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Storage (no dependencies)
        self._storage = TraceStorage(self._db_path)
        await self._storage.init()
        logger.info("Trace storage initialized")

        # 2. Tracker (depends on Storage)
        self._tracker = Tracker(self._storage)
        await self._tracker.start()

        # 3. NotificationBus (no dependencies)
        self._bus = NotificationBus()

        # 4. ArbitrationService (depends on NotificationBus + Tracker)
        self._service = ArbitrationService(self._bus, self._tracker)
        logger.info(
            "Arbitration service started (hold delay %.2fs)", self._hold_delay
        )

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._service:
            for name in list(self._agents):
                self._service.unregister(name)
        self._agents.clear()

        if self._tracker:
            await self._tracker.stop()
        if self._storage:
            await self._storage.close()
            logger.info("Trace storage closed")

    async def reset(self) -> None:
        """Drop all agents, documents and trace data."""
        if self._service:
            for name in list(self._agents):
                self._service.unregister(name)
        self._agents.clear()
        self._documents.clear()

        if self._tracker:
            self._tracker.discard_pending()
        if self._storage:
            await self._storage.clear()
            logger.info("Reset complete")

    # Agents

    def add_agent(self, name: str) -> Agent:
        """Construct an agent and register it with the service."""
        if name in self._agents:
            raise ValueError(f"Agent {name!r} already exists")

        agent = Agent(
            name=name,
            service=self.service,
            scheduler=self._scheduler,
            hold_delay=self._hold_delay,
        )
        self._agents[name] = agent
        self.service.register(agent)
        return agent

    def get_agent(self, name: str) -> Agent:
        try:
            return self._agents[name]
        except KeyError:
            raise KeyError(f"Unknown agent {name!r}") from None

    def remove_agent(self, name: str) -> None:
        """Unregister and drop an agent."""
        agent = self.get_agent(name)
        self.service.unregister(agent)
        del self._agents[name]

    def request(self, name: str) -> bool:
        """Have the named agent request the resource."""
        return self.get_agent(name).request_resource()

    # Documents

    def add_document(self, doc_id: str) -> Document:
        if doc_id in self._documents:
            raise ValueError(f"Document {doc_id!r} already exists")
        document = Document(doc_id)
        self._documents[doc_id] = document
        return document

    def get_document(self, doc_id: str) -> Document:
        try:
            return self._documents[doc_id]
        except KeyError:
            raise KeyError(f"Unknown document {doc_id!r}") from None

    def apply_document_event(self, doc_id: str, event: str) -> Document:
        """Apply a lifecycle event to a document and trace it."""
        document = self.get_document(doc_id)
        previous = document.state
        message = document.apply(event)
        self.tracker.record(
            "document_transition",
            f"document:{doc_id}",
            {
                "event": document.history[-1].event.value,
                "from": previous.value,
                "to": document.state.value,
                "message": message,
            },
        )
        return document

    # Accessors

    @property
    def agents(self) -> list[Agent]:
        """Agents in registration order."""
        return [
            self._agents[name]
            for name in self.service.agents
            if name in self._agents
        ]

    @property
    def documents(self) -> list[Document]:
        return list(self._documents.values())

    @property
    def hold_delay(self) -> float:
        return self._hold_delay

    @property
    def scheduler(self) -> ICompletionScheduler:
        return self._scheduler

    @property
    def service(self) -> ArbitrationService:
        """Get arbitration service instance."""
        if not self._service:
            raise RuntimeError("Application not started")
        return self._service

    @property
    def tracker(self) -> Tracker:
        """Get tracker instance."""
        if not self._tracker:
            raise RuntimeError("Application not started")
        return self._tracker

    @property
    def storage(self) -> ITraceStorage:
        """Get storage instance."""
        if not self._storage:
            raise RuntimeError("Application not started")
        return self._storage
