"""Single-shot, cancellable completion timers."""

import asyncio
import heapq
import itertools
import threading
from typing import Callable, Protocol

from ..logging_config import get_logger

logger = get_logger(__name__)

TimerCallback = Callable[[], None]


class CompletionTimer:
    """Handle for one scheduled callback.

    The callback runs at most once. Whichever of ``fire()`` and ``cancel()``
    takes the internal lock first wins; a cancelled timer never fires and a
    fired timer cannot be cancelled.
    """

    _PENDING = "pending"
    _FIRED = "fired"
    _CANCELLED = "cancelled"

    def __init__(self, delay: float, callback: TimerCallback):
        if delay < 0:
            raise ValueError(f"Timer delay must be non-negative, got {delay}")
        self._delay = delay
        self._callback = callback
        self._status = self._PENDING
        self._lock = threading.Lock()
        # Backend cancel hook (TimerHandle.cancel, threading.Timer.cancel, ...)
        self._on_cancel: Callable[[], None] | None = None

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        return self._status == self._PENDING

    @property
    def fired(self) -> bool:
        return self._status == self._FIRED

    @property
    def cancelled(self) -> bool:
        return self._status == self._CANCELLED

    def bind(self, on_cancel: Callable[[], None]) -> None:
        """Attach the backend hook used to drop the underlying timer."""
        self._on_cancel = on_cancel

    def cancel(self) -> bool:
        """Cancel the timer. Returns True if this call cancelled it."""
        with self._lock:
            if self._status != self._PENDING:
                return False
            self._status = self._CANCELLED

        if self._on_cancel is not None:
            self._on_cancel()
        return True

    def fire(self) -> bool:
        """Run the callback if still pending. Returns True if it ran."""
        with self._lock:
            if self._status != self._PENDING:
                return False
            self._status = self._FIRED

        try:
            self._callback()
        except Exception:
            logger.exception("Completion timer callback failed")
        return True


class ICompletionScheduler(Protocol):
    """Delayed, cancellable completion."""

    def schedule(self, delay: float, callback: TimerCallback) -> CompletionTimer:
        """Arm a single-shot timer firing callback after delay seconds."""
        ...


class DelayScheduler:
    """Wall-clock scheduler.

    Uses the running event loop's ``call_later`` when scheduled from inside a
    loop, otherwise a daemon ``threading.Timer``.
    """

    def schedule(self, delay: float, callback: TimerCallback) -> CompletionTimer:
        """Arm a single-shot timer firing callback after delay seconds."""
        timer = CompletionTimer(delay, callback)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop on this thread
            thread_timer = threading.Timer(delay, timer.fire)
            thread_timer.daemon = True
            timer.bind(thread_timer.cancel)
            thread_timer.start()
        else:
            handle = loop.call_later(delay, timer.fire)

            def cancel_handle() -> None:
                if not loop.is_closed():
                    loop.call_soon_threadsafe(handle.cancel)

            timer.bind(cancel_handle)

        return timer


class ManualScheduler:
    """Virtual-clock scheduler for deterministic tests and simulations.

    Time only moves when ``advance()`` is called. Due timers fire in deadline
    order, ties broken by scheduling order.

    Example:
        scheduler = ManualScheduler()
        timer = scheduler.schedule(2.0, on_done)
        scheduler.advance(1.0)   # nothing fires
        scheduler.advance(1.0)   # on_done runs
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: list[tuple[float, int, CompletionTimer]] = []
        self._counter = itertools.count()
        self._lock = threading.Lock()

    @property
    def now(self) -> float:
        """Current virtual time in seconds."""
        return self._now

    @property
    def pending(self) -> int:
        """Number of timers still waiting to fire."""
        with self._lock:
            return sum(1 for _, _, timer in self._queue if timer.pending)

    def schedule(self, delay: float, callback: TimerCallback) -> CompletionTimer:
        """Arm a single-shot timer firing callback after delay seconds."""
        timer = CompletionTimer(delay, callback)
        with self._lock:
            heapq.heappush(self._queue, (self._now + delay, next(self._counter), timer))
        return timer

    def advance(self, seconds: float) -> int:
        """Move the clock forward and fire due timers. Returns fired count."""
        if seconds < 0:
            raise ValueError(f"Cannot move the clock backwards ({seconds})")

        target = self._now + seconds
        fired = 0

        while True:
            with self._lock:
                if not self._queue or self._queue[0][0] > target:
                    break
                deadline, _, timer = heapq.heappop(self._queue)
                self._now = max(self._now, deadline)

            # Fire outside the lock: callbacks may schedule new timers
            if timer.fire():
                fired += 1

        self._now = target
        return fired
