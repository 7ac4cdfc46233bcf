"""
scheduler.py — Cancellable Delayed Callbacks
=============================================
The playback controller never sleeps and never owns a thread.  It asks
a scheduler for "call me back in N ms" and gets a Timer back; the Timer
is the cancellation token.

Three schedulers share one interface (call_later → Timer):

    ManualScheduler     virtual clock, advanced explicitly.  Tests and
                        deterministic replays drive this one.
    MonotonicScheduler  real clock, fires whatever is due on tick().
                        The web app ticks it on every request.
    AsyncioScheduler    hands the delay to a running asyncio loop.

Thread safety:
  None of these are thread-safe.  Everything runs on one thread, the
  same way a UI event loop does.
"""

import asyncio
import heapq
import itertools
import logging
import time
from typing import Callable, List, Optional, Tuple

log = logging.getLogger(__name__)

Callback = Callable[[], None]


class Timer:
    """Handle for one scheduled callback.  cancel() may be called any number of times."""

    def __init__(self, due_ms: float, callback: Callback):
        self.due_ms     = due_ms
        self._callback  = callback
        self._cancelled = False
        self._fired     = False
        self.on_cancel: Optional[Callback] = None   # extra hook run on cancel()

    @property
    def active(self) -> bool:
        return not (self._cancelled or self._fired)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if not self.active:
            return
        self._cancelled = True
        if self.on_cancel is not None:
            self.on_cancel()

    def fire(self) -> bool:
        """Run the callback unless cancelled.  Returns True if it ran."""
        if not self.active:
            return False
        self._fired = True
        self._callback()
        return True


# ---------------------------------------------------------------------------
# Heap-backed base shared by the two clock-driven schedulers
# ---------------------------------------------------------------------------
class _TimerQueue:
    def __init__(self):
        self._heap: List[Tuple[float, int, Timer]] = []
        self._seq = itertools.count()

    def now_ms(self) -> float:
        raise NotImplementedError

    def call_later(self, delay_ms: float, callback: Callback) -> Timer:
        timer = Timer(self.now_ms() + max(0.0, delay_ms), callback)
        heapq.heappush(self._heap, (timer.due_ms, next(self._seq), timer))
        log.debug("scheduled timer due at %.1f ms", timer.due_ms)
        return timer

    @property
    def pending(self) -> int:
        return sum(1 for _, _, t in self._heap if t.active)

    def next_due_ms(self) -> Optional[float]:
        self._discard_inactive()
        return self._heap[0][0] if self._heap else None

    def _pop_due(self, limit_ms: float) -> Optional[Timer]:
        self._discard_inactive()
        if self._heap and self._heap[0][0] <= limit_ms:
            return heapq.heappop(self._heap)[2]
        return None

    def _discard_inactive(self) -> None:
        while self._heap and not self._heap[0][2].active:
            heapq.heappop(self._heap)


class ManualScheduler(_TimerQueue):
    """Virtual-time scheduler.  Time only moves when advance() is called."""

    def __init__(self, start_ms: float = 0.0):
        super().__init__()
        self._now = start_ms

    def now_ms(self) -> float:
        return self._now

    def advance(self, ms: float) -> int:
        """
        Move the clock forward by `ms`, firing every timer that falls due
        on the way, in due order.  Timers scheduled by a firing callback
        also fire if they land inside the window.  Returns the count fired.
        """
        target = self._now + ms
        fired = 0
        while True:
            timer = self._pop_due(target)
            if timer is None:
                break
            self._now = max(self._now, timer.due_ms)
            if timer.fire():
                fired += 1
        self._now = target
        return fired

    def run_until_idle(self, max_ms: float = 3_600_000) -> int:
        """Fire timers until none are left (bounded so a loop cannot spin forever)."""
        fired = 0
        deadline = self._now + max_ms
        while True:
            due = self.next_due_ms()
            if due is None or due > deadline:
                return fired
            fired += self.advance(due - self._now)


class MonotonicScheduler(_TimerQueue):
    """Wall-clock scheduler.  Nothing fires until tick() is called."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        super().__init__()
        self._clock = clock

    def now_ms(self) -> float:
        return self._clock() * 1000.0

    def tick(self) -> int:
        """Fire every timer already due.  Returns the count fired."""
        now = self.now_ms()
        fired = 0
        while True:
            timer = self._pop_due(now)
            if timer is None:
                return fired
            if timer.fire():
                fired += 1


class AsyncioScheduler:
    """Adapter over loop.call_later; each Timer wraps an asyncio.TimerHandle."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def now_ms(self) -> float:
        return self.loop.time() * 1000.0

    def call_later(self, delay_ms: float, callback: Callback) -> Timer:
        loop = self.loop
        timer = Timer(self.now_ms() + max(0.0, delay_ms), callback)
        handle = loop.call_later(max(0.0, delay_ms) / 1000.0, timer.fire)
        timer.on_cancel = handle.cancel
        return timer


__all__ = ["Timer", "ManualScheduler", "MonotonicScheduler", "AsyncioScheduler"]
