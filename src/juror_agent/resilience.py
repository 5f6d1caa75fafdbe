from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TypeVar

from juror_agent.observability.logging import get_logger

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Linear backoff: the n-th failed attempt waits ``base_delay * n`` seconds.

    The policy only counts attempts. The last exception is re-raised unchanged
    once ``retries`` attempts have failed.
    """

    retries: int = 3
    base_delay: float = 0.5
    timeout: float | None = None
    sleep: Sleep = field(default=asyncio.sleep, compare=False)

    def __post_init__(self) -> None:
        if self.retries < 1:
            raise ValueError("retries must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay must be non-negative")

    async def run(self, operation: Callable[[], Awaitable[T]], *, name: str = "operation") -> T:
        logger = get_logger("resilience")
        for attempt in range(1, self.retries + 1):
            try:
                if self.timeout is None:
                    return await operation()
                return await asyncio.wait_for(operation(), timeout=self.timeout)
            except Exception as exc:
                if attempt >= self.retries:
                    logger.warning(
                        "retry_exhausted",
                        operation=name,
                        attempts=attempt,
                        error=repr(exc),
                    )
                    raise
                delay = self.base_delay * attempt
                logger.warning(
                    "retry_scheduled",
                    operation=name,
                    attempt=attempt,
                    delay_seconds=delay,
                    error=repr(exc),
                )
                await self.sleep(delay)
        raise AssertionError("unreachable")
