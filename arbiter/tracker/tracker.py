"""Tracker implementation for creating TraceEvents."""

import asyncio
import threading
import uuid
from datetime import datetime, timezone
from typing import Protocol

from ..logging_config import get_logger
from ..models import TraceEvent
from ..storage import ITraceStorage

logger = get_logger(__name__)


class ITracker(Protocol):
    """Creating TraceEvents. Two channels: buffered record() + direct track()."""

    def record(self, event_type: str, actor: str, data: dict) -> TraceEvent:
        """Buffer a TraceEvent. Safe to call from any thread, never blocks on I/O."""
        ...

    async def track(self, event_type: str, actor: str, data: dict) -> None:
        """Create TraceEvent and save to storage."""
        ...

    async def flush(self) -> int:
        """Persist buffered events. Returns the number written."""
        ...


class Tracker:
    """Creates TraceEvents from synchronous callers and persists them.

    The arbitration service runs synchronously inside a lock, so it only
    buffers events through ``record()``. A background task started by
    ``start()`` drains the buffer into storage.
    """

    def __init__(self, storage: ITraceStorage, flush_interval: float = 1.0):
        self._storage = storage
        self._flush_interval = flush_interval
        self._pending: list[TraceEvent] = []
        self._lock = threading.Lock()
        self._running = False
        self._task: asyncio.Task | None = None

    @property
    def pending(self) -> int:
        """Number of buffered, not yet persisted events."""
        with self._lock:
            return len(self._pending)

    def record(self, event_type: str, actor: str, data: dict) -> TraceEvent:
        """Buffer a TraceEvent. Safe to call from any thread, never blocks on I/O."""
        event = TraceEvent(
            id=str(uuid.uuid4()),
            event_type=event_type,
            actor=actor,
            data=data,
            timestamp=datetime.now(timezone.utc),
        )
        with self._lock:
            self._pending.append(event)
        return event

    async def track(self, event_type: str, actor: str, data: dict) -> None:
        """Create TraceEvent and save to storage."""
        self.record(event_type, actor, data)
        await self.flush()

    async def flush(self) -> int:
        """Persist buffered events. Returns the number written."""
        with self._lock:
            batch, self._pending = self._pending, []

        if batch:
            try:
                await self._storage.save_trace_events(batch)
            except Exception:
                # Keep the batch ahead of anything recorded meanwhile
                with self._lock:
                    self._pending[:0] = batch
                raise
        return len(batch)

    def discard_pending(self) -> None:
        """Drop buffered events without persisting them."""
        with self._lock:
            self._pending.clear()

    async def start(self) -> None:
        """Start the background flush loop."""
        if self._running:
            return

        self._running = True
        self._task = asyncio.create_task(self._flush_loop())

    async def stop(self) -> None:
        """Stop the flush loop and persist what is left."""
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        await self.flush()

    async def _flush_loop(self) -> None:
        """Background loop draining the buffer into storage."""
        while self._running:
            try:
                await asyncio.sleep(self._flush_interval)
                await self.flush()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("Trace flush error: %s", e, exc_info=True)
