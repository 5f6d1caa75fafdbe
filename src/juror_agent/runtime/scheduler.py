from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from juror_agent.observability.logging import get_logger
from juror_agent.types import CycleResult

Cycle = Callable[[], Awaitable[CycleResult]]


@dataclass(slots=True)
class SchedulerStatus:
    cycles_started: int = 0
    cycles_skipped: int = 0
    in_flight: bool = False
    last_result: CycleResult | None = None
    last_finished_at: datetime | None = None
    last_error: str | None = None

    def as_dict(self) -> dict[str, object]:
        return {
            "cycles_started": self.cycles_started,
            "cycles_skipped": self.cycles_skipped,
            "in_flight": self.in_flight,
            "last_status": self.last_result.status.value if self.last_result else None,
            "last_dispute_id": self.last_result.dispute_id if self.last_result else None,
            "last_finished_at": (
                self.last_finished_at.isoformat() if self.last_finished_at else None
            ),
            "last_error": self.last_error,
        }


@dataclass(slots=True)
class PollScheduler:
    """Fires ``cycle`` at startup and then every ``interval_seconds``.

    Only one cycle runs at a time; a tick that arrives while a cycle is
    still running is dropped.
    """

    cycle: Cycle
    interval_seconds: float
    status: SchedulerStatus = field(default_factory=SchedulerStatus)
    _guard: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)
    _tasks: set[asyncio.Task[None]] = field(default_factory=set, init=False, repr=False)

    async def trigger(self) -> bool:
        """Run one cycle unless one is in flight. Returns False when the tick was dropped."""
        logger = get_logger("poll_scheduler")
        if self._guard.locked():
            self.status.cycles_skipped += 1
            logger.info("cycle_skipped", reason="previous cycle still in flight")
            return False

        async with self._guard:
            self.status.cycles_started += 1
            self.status.in_flight = True
            try:
                self.status.last_result = await self.cycle()
                self.status.last_error = None
            except Exception as exc:
                self.status.last_result = None
                self.status.last_error = repr(exc)
                logger.exception("cycle_crashed", error=repr(exc))
            finally:
                self.status.in_flight = False
                self.status.last_finished_at = datetime.now(timezone.utc)
        return True

    def _spawn(self) -> None:
        task = asyncio.create_task(self.trigger())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def run_forever(self) -> None:
        logger = get_logger("poll_scheduler")
        logger.info("scheduler_started", interval_seconds=self.interval_seconds)
        try:
            while True:
                self._spawn()
                await asyncio.sleep(self.interval_seconds)
        finally:
            for task in list(self._tasks):
                task.cancel()
            if self._tasks:
                await asyncio.gather(*self._tasks, return_exceptions=True)
            logger.info("scheduler_stopped")
