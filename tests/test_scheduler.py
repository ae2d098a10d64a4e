"""Tests for completion scheduling."""

import asyncio
import threading

import pytest

from arbiter.scheduling import CompletionTimer, DelayScheduler, ManualScheduler


class TestCompletionTimer:
    """Tests for CompletionTimer."""

    def test_fire_runs_callback_once(self):
        """Test that a timer fires at most once."""
        calls = []
        timer = CompletionTimer(1.0, lambda: calls.append("fired"))

        assert timer.fire() is True
        assert timer.fire() is False
        assert calls == ["fired"]
        assert timer.fired

    def test_cancel_before_fire(self):
        """Test that a cancelled timer never fires."""
        calls = []
        timer = CompletionTimer(1.0, lambda: calls.append("fired"))

        assert timer.cancel() is True
        assert timer.fire() is False
        assert calls == []
        assert timer.cancelled

    def test_cancel_is_idempotent(self):
        """Test that cancelling twice is a no-op."""
        timer = CompletionTimer(1.0, lambda: None)

        assert timer.cancel() is True
        assert timer.cancel() is False

    def test_cancel_after_fire_is_noop(self):
        """Test that cancelling a fired timer is not an error."""
        timer = CompletionTimer(1.0, lambda: None)
        timer.fire()

        assert timer.cancel() is False
        assert timer.fired

    def test_cancel_calls_backend_hook(self):
        """Test that the backend hook runs only on effective cancel."""
        hooks = []
        timer = CompletionTimer(1.0, lambda: None)
        timer.bind(lambda: hooks.append("cancel"))

        timer.cancel()
        timer.cancel()

        assert hooks == ["cancel"]

    def test_negative_delay_rejected(self):
        """Test that a negative delay raises ValueError."""
        with pytest.raises(ValueError):
            CompletionTimer(-1.0, lambda: None)

    def test_callback_error_is_contained(self):
        """Test that a failing callback still marks the timer fired."""

        def boom():
            raise RuntimeError("boom")

        timer = CompletionTimer(0.0, boom)

        assert timer.fire() is True
        assert timer.fired

    def test_concurrent_fire_and_cancel(self):
        """Test that fire and cancel racing never both win."""
        for _ in range(50):
            calls = []
            timer = CompletionTimer(0.0, lambda: calls.append(1))
            barrier = threading.Barrier(2)
            results = {}

            def fire():
                barrier.wait()
                results["fire"] = timer.fire()

            def cancel():
                barrier.wait()
                results["cancel"] = timer.cancel()

            threads = [threading.Thread(target=fire), threading.Thread(target=cancel)]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

            assert results["fire"] != results["cancel"]
            assert len(calls) == (1 if results["fire"] else 0)


class TestManualScheduler:
    """Tests for ManualScheduler."""

    def test_fires_when_due(self, manual_scheduler):
        """Test that a timer fires once the clock reaches its deadline."""
        calls = []
        manual_scheduler.schedule(2.0, lambda: calls.append("done"))

        assert manual_scheduler.advance(1.0) == 0
        assert calls == []
        assert manual_scheduler.advance(1.0) == 1
        assert calls == ["done"]
        assert manual_scheduler.now == 2.0

    def test_fires_in_deadline_order(self, manual_scheduler):
        """Test that due timers fire by deadline, then by scheduling order."""
        calls = []
        manual_scheduler.schedule(3.0, lambda: calls.append("late"))
        manual_scheduler.schedule(1.0, lambda: calls.append("first"))
        manual_scheduler.schedule(1.0, lambda: calls.append("second"))

        manual_scheduler.advance(5.0)

        assert calls == ["first", "second", "late"]

    def test_cancelled_timer_never_fires(self, manual_scheduler):
        """Test that cancel before the deadline suppresses the callback."""
        calls = []
        timer = manual_scheduler.schedule(1.0, lambda: calls.append("fired"))

        timer.cancel()

        assert manual_scheduler.advance(10.0) == 0
        assert calls == []
        assert manual_scheduler.pending == 0

    def test_callback_can_schedule(self, manual_scheduler):
        """Test that a callback scheduling a new due timer sees it fire."""
        calls = []

        def chain():
            calls.append("outer")
            manual_scheduler.schedule(1.0, lambda: calls.append("inner"))

        manual_scheduler.schedule(1.0, chain)
        manual_scheduler.advance(3.0)

        assert calls == ["outer", "inner"]

    def test_cannot_go_backwards(self, manual_scheduler):
        """Test that advance rejects negative time."""
        with pytest.raises(ValueError):
            manual_scheduler.advance(-1.0)

    def test_pending_count(self, manual_scheduler):
        """Test that pending counts only live timers."""
        manual_scheduler.schedule(1.0, lambda: None)
        manual_scheduler.schedule(2.0, lambda: None)

        assert manual_scheduler.pending == 2
        manual_scheduler.advance(1.0)
        assert manual_scheduler.pending == 1


class TestDelayScheduler:
    """Tests for DelayScheduler."""

    @pytest.mark.asyncio
    async def test_fires_on_event_loop(self):
        """Test that scheduling inside a loop uses the loop."""
        fired = asyncio.Event()
        timer = DelayScheduler().schedule(0.01, fired.set)

        await asyncio.wait_for(fired.wait(), timeout=1.0)

        assert timer.fired

    @pytest.mark.asyncio
    async def test_cancel_on_event_loop(self):
        """Test that a cancelled loop timer never fires."""
        calls = []
        timer = DelayScheduler().schedule(0.01, lambda: calls.append("fired"))

        timer.cancel()
        await asyncio.sleep(0.05)

        assert calls == []
        assert timer.cancelled

    def test_fires_on_thread(self):
        """Test that scheduling outside a loop uses a thread timer."""
        fired = threading.Event()
        timer = DelayScheduler().schedule(0.01, fired.set)

        assert fired.wait(timeout=1.0)
        assert timer.fired

    def test_cancel_on_thread(self):
        """Test that a cancelled thread timer never fires."""
        fired = threading.Event()
        timer = DelayScheduler().schedule(0.05, fired.set)

        timer.cancel()

        assert not fired.wait(timeout=0.15)
        assert timer.cancelled
