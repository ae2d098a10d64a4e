"""ArbitrationService: exclusive access to a single shared resource."""

import threading
import weakref
from collections import deque
from contextlib import contextmanager
from typing import Callable, Iterator, Protocol

from ..logging_config import get_logger
from ..models import Notification
from ..notification_bus import IAgent, INotificationBus, NotificationBus
from ..tracker import ITracker

logger = get_logger(__name__)

GRANTED_MESSAGE = "{name} granted; others hold position"
FREE_MESSAGE = "resource now free"

ACTOR = "arbitration_service"


class IArbitrationService(Protocol):
    """Coordinator granting one resource to at most one agent at a time."""

    @property
    def current_holder(self) -> IAgent | None:
        """The agent holding the resource, if any."""
        ...

    @property
    def holder_name(self) -> str | None:
        """Name of the current holder, if any."""
        ...

    def register(self, agent: IAgent) -> bool:
        """Add agent to the broadcast list. Idempotent."""
        ...

    def unregister(self, agent: IAgent | str) -> bool:
        """Remove agent, releasing its slot if it holds one."""
        ...

    def request_access(self, agent: IAgent) -> bool:
        """Grant the resource if free. Never raises on contention."""
        ...

    def release(self, agent: IAgent) -> None:
        """Free the resource if agent holds it, otherwise do nothing."""
        ...


class ArbitrationService:
    """Grants a single exclusive resource and broadcasts status changes.

    Every call that reads or mutates the holder or the registry runs inside
    one critical section guarded by a ``threading.Lock``. Broadcasts happen
    inside that section, so all agents observe them in issue order. The
    service keeps only weak references to agents and never owns their
    lifetime.

    A subscriber calling back into the service while a broadcast is being
    delivered does not interleave with it: a nested ``request_access`` is
    denied, a nested ``release`` or ``unregister`` runs once the current
    operation has finished.

    Example:
        service = ArbitrationService()
        service.register(plane_a)
        service.register(plane_b)

        service.request_access(plane_a)  # True, everyone told plane_a holds
        service.request_access(plane_b)  # False
        service.release(plane_a)         # everyone told "resource now free"
    """

    def __init__(
        self,
        bus: INotificationBus | None = None,
        tracker: ITracker | None = None,
    ):
        self._bus = bus if bus is not None else NotificationBus()
        self._tracker = tracker
        self._holder: weakref.ReferenceType | None = None
        self._lock = threading.Lock()
        self._owner: int | None = None
        self._deferred: deque[Callable[[], None]] = deque()

    # Views

    @property
    def bus(self) -> INotificationBus:
        return self._bus

    @property
    def current_holder(self) -> IAgent | None:
        """The agent holding the resource, if any."""
        ref = self._holder
        return ref() if ref is not None else None

    @property
    def holder_name(self) -> str | None:
        holder = self.current_holder
        return holder.name if holder is not None else None

    @property
    def agents(self) -> list[str]:
        """Registered agent names in registration order."""
        if self._in_critical_section():
            return [agent.name for agent in self._bus.subscribers()]
        with self._critical_section():
            return [agent.name for agent in self._bus.subscribers()]

    def is_registered(self, name: str) -> bool:
        return name in self.agents

    # Operations

    def register(self, agent: IAgent) -> bool:
        """Add agent to the broadcast list. Idempotent."""
        if self._in_critical_section():
            return self._register(agent)
        with self._critical_section():
            return self._register(agent)

    def unregister(self, agent: IAgent | str) -> bool:
        """Remove agent, releasing its slot if it holds one.

        Returns True if the agent was registered.
        """
        name = agent if isinstance(agent, str) else agent.name

        if self._in_critical_section():
            registered = name in self._bus
            self._deferred.append(lambda: self._unregister(name))
            return registered
        with self._critical_section():
            return self._unregister(name)

    def request_access(self, agent: IAgent) -> bool:
        """Grant the resource if free. Never raises on contention."""
        if self._in_critical_section():
            logger.warning(
                "%s requested access while a broadcast was in flight; denied",
                agent.name,
            )
            self._trace("access_denied", agent.name, reason="reentrant")
            return False

        with self._critical_section():
            return self._request_access(agent)

    def release(self, agent: IAgent) -> None:
        """Free the resource if agent holds it, otherwise do nothing."""
        if self._in_critical_section():
            self._deferred.append(lambda: self._release(agent))
            return

        with self._critical_section():
            self._release(agent)

    # Critical section

    @contextmanager
    def _critical_section(self) -> Iterator[None]:
        with self._lock:
            self._owner = threading.get_ident()
            try:
                yield
            finally:
                try:
                    while self._deferred:
                        self._deferred.popleft()()
                finally:
                    self._owner = None

    def _in_critical_section(self) -> bool:
        return self._owner == threading.get_ident()

    # Internals, called with the lock held

    def _register(self, agent: IAgent) -> bool:
        self._reclaim_if_collected()

        if not self._bus.subscribe(agent):
            logger.debug("Agent %s already registered", agent.name)
            return False

        logger.info("Agent %s registered", agent.name)
        self._trace("agent_registered", agent.name)
        return True

    def _unregister(self, name: str) -> bool:
        self._reclaim_if_collected()

        agent = self._bus.unsubscribe(name)
        if agent is None:
            logger.debug("Agent %s is not registered", name)
            return False

        if self.current_holder is agent:
            self._holder = None
            logger.info("Agent %s unregistered while holding; releasing", name)
            self._call_agent(agent, "on_revoked")
            self._trace("resource_released", name, reason="unregistered")
            self._broadcast(FREE_MESSAGE)

        self._call_agent(agent, "on_unregistered")
        logger.info("Agent %s unregistered", name)
        self._trace("agent_unregistered", name)
        return True

    def _request_access(self, agent: IAgent) -> bool:
        self._reclaim_if_collected()

        if self._bus.get(agent.name) is not agent:
            logger.warning("Access request from unregistered agent %s denied", agent.name)
            self._trace("access_denied", agent.name, reason="unregistered")
            return False

        holder = self.current_holder
        if holder is not None:
            logger.info("%s denied; resource held by %s", agent.name, holder.name)
            self._trace("access_denied", agent.name, reason="busy", holder=holder.name)
            return False

        self._holder = weakref.ref(agent)
        if not self._call_agent(agent, "on_granted"):
            self._holder = None
            # Undo whatever part of the grant the agent already applied
            self._call_agent(agent, "on_revoked")
            self._trace("access_denied", agent.name, reason="grant_failed")
            return False

        logger.info("%s granted", agent.name)
        self._trace("access_granted", agent.name)
        self._broadcast(GRANTED_MESSAGE.format(name=agent.name))
        return True

    def _release(self, agent: IAgent) -> None:
        self._reclaim_if_collected()

        if self.current_holder is not agent:
            logger.debug("Ignoring stale release from %s", agent.name)
            self._trace("stale_release_ignored", agent.name, holder=self.holder_name)
            return

        self._holder = None
        logger.info("%s released the resource", agent.name)
        self._trace("resource_released", agent.name, reason="completed")
        self._broadcast(FREE_MESSAGE)

    def _reclaim_if_collected(self) -> None:
        """Free the slot if its holder has been garbage-collected."""
        if self._holder is None or self._holder() is not None:
            return

        self._holder = None
        logger.warning("Holder was garbage-collected; reclaiming the resource")
        self._trace("holder_reclaimed", ACTOR)
        self._broadcast(FREE_MESSAGE)

    def _broadcast(self, message: str) -> Notification:
        notification = self._bus.broadcast(message, source=ACTOR)
        self._trace(
            "notification_broadcast",
            ACTOR,
            sequence=notification.sequence,
            message=message,
            recipients=notification.recipients,
        )
        return notification

    def _call_agent(self, agent: IAgent, hook: str) -> bool:
        try:
            getattr(agent, hook)()
        except Exception:
            logger.exception("Agent %s failed in %s", agent.name, hook)
            return False
        return True

    def _trace(self, event_type: str, actor: str, **data) -> None:
        if self._tracker is not None:
            self._tracker.record(event_type, actor, data)
