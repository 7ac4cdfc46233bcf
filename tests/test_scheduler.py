import asyncio

from engine import AsyncioScheduler, ManualScheduler, MonotonicScheduler


def test_manual_scheduler_fires_in_due_order():
    sched = ManualScheduler()
    fired = []
    sched.call_later(300, lambda: fired.append("b"))
    sched.call_later(100, lambda: fired.append("a"))
    sched.call_later(900, lambda: fired.append("c"))
    assert sched.advance(500) == 2
    assert fired == ["a", "b"]
    assert sched.now_ms() == 500
    assert sched.pending == 1


def test_timers_scheduled_inside_the_window_also_fire():
    sched = ManualScheduler()
    fired = []

    def first():
        fired.append(sched.now_ms())
        sched.call_later(100, lambda: fired.append(sched.now_ms()))

    sched.call_later(100, first)
    sched.advance(250)
    assert fired == [100, 200]


def test_cancel_is_idempotent():
    sched = ManualScheduler()
    calls = []
    timer = sched.call_later(10, lambda: calls.append(1))
    timer.cancel()
    timer.cancel()
    assert timer.cancelled and not timer.active
    sched.advance(100)
    assert calls == []
    assert sched.pending == 0


def test_run_until_idle_drains_the_queue():
    sched = ManualScheduler()
    count = []
    sched.call_later(50, lambda: count.append(1))
    sched.call_later(5000, lambda: count.append(2))
    assert sched.run_until_idle() == 2
    assert sched.next_due_ms() is None


def test_monotonic_scheduler_fires_on_tick():
    now = [10.0]
    sched = MonotonicScheduler(clock=lambda: now[0])
    fired = []
    sched.call_later(500, lambda: fired.append(True))
    assert sched.tick() == 0
    now[0] = 10.6
    assert sched.tick() == 1
    assert fired == [True]


def test_asyncio_scheduler_runs_and_cancels():
    async def scenario():
        sched = AsyncioScheduler()
        fired = []
        sched.call_later(1, lambda: fired.append("kept"))
        dropped = sched.call_later(1, lambda: fired.append("dropped"))
        dropped.cancel()
        await asyncio.sleep(0.05)
        return fired

    assert asyncio.run(scenario()) == ["kept"]
