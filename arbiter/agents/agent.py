"""Agent competing for the exclusive resource."""

import threading

from ..arbitration import IArbitrationService
from ..config import DEFAULT_HOLD_DELAY
from ..lifecycle import AGENT_LIFECYCLE
from ..logging_config import get_logger
from ..models import AgentEvent, AgentStatus
from ..scheduling import CompletionTimer, ICompletionScheduler

logger = get_logger(__name__)


class Agent:
    """An entity that requests the resource and owns a lifecycle state.

    The agent never holds its own lock while calling into the service; the
    service calls back into the agent (``on_granted``, ``on_notification``,
    ...) while holding its lock.
    """

    def __init__(
        self,
        name: str,
        service: IArbitrationService,
        scheduler: ICompletionScheduler,
        hold_delay: float = DEFAULT_HOLD_DELAY,
    ):
        if hold_delay < 0:
            raise ValueError(f"Hold delay must be non-negative, got {hold_delay}")

        self._name = name
        self._service = service
        self._scheduler = scheduler
        self._hold_delay = hold_delay
        self._state = AgentStatus.IDLE
        self._last_message = ""
        self._timer: CompletionTimer | None = None
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"Agent(name={self._name!r}, state={self._state.value!r})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def state(self) -> AgentStatus:
        return self._state

    @property
    def last_message(self) -> str:
        return self._last_message

    @property
    def hold_delay(self) -> float:
        return self._hold_delay

    @property
    def timer(self) -> CompletionTimer | None:
        """The armed completion timer, if any."""
        return self._timer

    def request_resource(self) -> bool:
        """Ask the service for the resource. Returns True if granted."""
        self._apply(AgentEvent.REQUEST)
        logger.info("%s is requesting the resource", self._name)

        granted = self._service.request_access(self)

        if not granted:
            message = self._apply(AgentEvent.DENY)
            holder = self._service.holder_name
            with self._lock:
                self._last_message = (
                    f"{message} ({holder} holds the resource)" if holder else message
                )
            logger.info("%s was denied; waiting for clearance", self._name)
        return granted

    def on_granted(self) -> None:
        """Move to holding and arm the completion timer.

        A grant reaching an agent that never went through ``request_resource``
        (the service was called directly) counts as its request.
        """
        with self._lock:
            if self._state != AgentStatus.REQUESTING:
                self._apply(AgentEvent.REQUEST)
            self._apply(AgentEvent.GRANT)
            if self._timer is not None:
                self._timer.cancel()
            self._timer = self._scheduler.schedule(self._hold_delay, self.on_timer_fire)
        logger.info("%s holds the resource for %.2fs", self._name, self._hold_delay)

    def on_notification(self, message: str) -> None:
        """Record the latest broadcast message."""
        with self._lock:
            self._last_message = message
        logger.debug("%s received: %s", self._name, message)

    def on_timer_fire(self) -> None:
        """Complete the hold and hand the resource back."""
        self._apply(AgentEvent.COMPLETE)
        with self._lock:
            self._timer = None
        logger.info("%s has completed", self._name)
        self._service.release(self)

    def on_revoked(self) -> None:
        """The service took the slot back."""
        self._apply(AgentEvent.REVOKE)
        self.cancel_timer()

    def on_unregistered(self) -> None:
        """Stop any pending completion."""
        self.cancel_timer()

    def cancel_timer(self) -> bool:
        """Cancel the pending completion timer. Returns True if one was cancelled."""
        with self._lock:
            timer, self._timer = self._timer, None
        return timer.cancel() if timer is not None else False

    def reset(self) -> str:
        """Return to idle where the lifecycle allows it."""
        return self._apply(AgentEvent.RESET)

    def _apply(self, event: AgentEvent) -> str:
        with self._lock:
            next_state, message = AGENT_LIFECYCLE.transition(self._state, event)
            if next_state != self._state:
                logger.debug(
                    "%s: %s -> %s on %s",
                    self._name,
                    self._state.value,
                    next_state.value,
                    event.value,
                )
            self._state = next_state
            self._last_message = message
            return message
