from __future__ import annotations

import asyncio

from juror_agent.runtime.scheduler import PollScheduler
from juror_agent.types import CycleResult, CycleStage, CycleStatus

IDLE = CycleResult(CycleStatus.NO_ASSIGNMENTS, CycleStage.SELECTING)


def test_overlapping_trigger_is_dropped_not_queued() -> None:
    release = asyncio.Event()
    started = 0

    async def slow_cycle() -> CycleResult:
        nonlocal started
        started += 1
        await release.wait()
        return IDLE

    async def scenario() -> tuple[bool, bool]:
        scheduler = PollScheduler(cycle=slow_cycle, interval_seconds=60)
        first = asyncio.create_task(scheduler.trigger())
        await asyncio.sleep(0)
        second = await scheduler.trigger()
        release.set()
        return await first, second

    first, second = asyncio.run(scenario())

    assert first is True
    assert second is False
    assert started == 1


def test_trigger_after_completion_runs_again() -> None:
    calls = 0

    async def cycle() -> CycleResult:
        nonlocal calls
        calls += 1
        return IDLE

    async def scenario() -> PollScheduler:
        scheduler = PollScheduler(cycle=cycle, interval_seconds=60)
        await scheduler.trigger()
        await scheduler.trigger()
        return scheduler

    scheduler = asyncio.run(scenario())

    assert calls == 2
    assert scheduler.status.cycles_started == 2
    assert scheduler.status.last_result == IDLE


def test_crashing_cycle_does_not_escape() -> None:
    async def broken_cycle() -> CycleResult:
        raise ValueError("boom")

    async def scenario() -> PollScheduler:
        scheduler = PollScheduler(cycle=broken_cycle, interval_seconds=60)
        await scheduler.trigger()
        return scheduler

    scheduler = asyncio.run(scenario())

    assert scheduler.status.last_error == "ValueError('boom')"
    assert scheduler.status.in_flight is False


def test_run_forever_fires_immediately_then_on_interval() -> None:
    calls = 0

    async def cycle() -> CycleResult:
        nonlocal calls
        calls += 1
        return IDLE

    async def scenario() -> None:
        scheduler = PollScheduler(cycle=cycle, interval_seconds=0.05)
        task = asyncio.create_task(scheduler.run_forever())
        await asyncio.sleep(0.01)
        assert calls == 1
        await asyncio.sleep(0.1)
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    asyncio.run(scenario())

    assert calls >= 2


def test_ticks_during_a_long_cycle_are_skipped() -> None:
    release = asyncio.Event()

    async def slow_cycle() -> CycleResult:
        await release.wait()
        return IDLE

    async def scenario() -> PollScheduler:
        scheduler = PollScheduler(cycle=slow_cycle, interval_seconds=0.02)
        task = asyncio.create_task(scheduler.run_forever())
        await asyncio.sleep(0.09)
        release.set()
        await asyncio.sleep(0)
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        return scheduler

    scheduler = asyncio.run(scenario())

    assert scheduler.status.cycles_started == 1
    assert scheduler.status.cycles_skipped >= 2
