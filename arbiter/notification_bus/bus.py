"""NotificationBus implementation for ordered status broadcasts."""

import itertools
import weakref
from datetime import datetime, timezone
from typing import Protocol

from ..logging_config import get_logger
from ..models import Notification

logger = get_logger(__name__)


class IAgent(Protocol):
    """An entity competing for the exclusive resource."""

    @property
    def name(self) -> str:
        """Unique, stable agent name."""
        ...

    def on_notification(self, message: str) -> None:
        """Receive a broadcast status message."""
        ...

    def on_granted(self) -> None:
        """Called by the service, inside its critical section, on grant."""
        ...

    def on_revoked(self) -> None:
        """Called by the service when it takes back a held slot."""
        ...

    def on_unregistered(self) -> None:
        """Called by the service after the agent is removed."""
        ...


class INotificationBus(Protocol):
    """Ordered, synchronous broadcast to registered agents."""

    def subscribe(self, agent: IAgent) -> bool:
        """Add an agent. Returns False if the name is already present."""
        ...

    def unsubscribe(self, name: str) -> IAgent | None:
        """Remove an agent by name. Returns the agent if it was present."""
        ...

    def subscribers(self) -> list[IAgent]:
        """Live agents in registration order."""
        ...

    def broadcast(self, message: str, source: str = "arbitration_service") -> Notification:
        """Deliver message to every agent before returning."""
        ...


class NotificationBus:
    """In-memory broadcast bus holding weak references to agents.

    Delivery is synchronous and follows registration order. The bus does not
    lock; the arbitration service serializes every call into it.
    """

    def __init__(self):
        self._agents: dict[str, weakref.ReferenceType] = {}
        self._sequence = itertools.count(1)

    def __contains__(self, name: object) -> bool:
        ref = self._agents.get(name)  # type: ignore[arg-type]
        return ref is not None and ref() is not None

    def __len__(self) -> int:
        return len(self.subscribers())

    def get(self, name: str) -> IAgent | None:
        """Return the live agent registered under name, if any."""
        ref = self._agents.get(name)
        return ref() if ref is not None else None

    def subscribe(self, agent: IAgent) -> bool:
        """Add an agent. Returns False if the name is already present."""
        if agent.name in self:
            return False
        # Replaces a dead reference left under the same name
        self._agents.pop(agent.name, None)
        self._agents[agent.name] = weakref.ref(agent)
        return True

    def unsubscribe(self, name: str) -> IAgent | None:
        """Remove an agent by name. Returns the agent if it was present."""
        ref = self._agents.pop(name, None)
        return ref() if ref is not None else None

    def subscribers(self) -> list[IAgent]:
        """Live agents in registration order."""
        live = []
        for name, ref in list(self._agents.items()):
            agent = ref()
            if agent is None:
                logger.debug("Pruning collected agent %s", name)
                del self._agents[name]
                continue
            live.append(agent)
        return live

    def broadcast(self, message: str, source: str = "arbitration_service") -> Notification:
        """Deliver message to every agent before returning."""
        notification = Notification(
            sequence=next(self._sequence),
            message=message,
            source=source,
            timestamp=datetime.now(timezone.utc),
        )

        for agent in self.subscribers():
            try:
                agent.on_notification(message)
            except Exception as e:
                logger.error("Error delivering notification to %s: %s", agent.name, e)
            notification.recipients.append(agent.name)

        return notification
