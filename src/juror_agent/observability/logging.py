from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import cast
from uuid import uuid4

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from juror_agent.observability.redaction import redact_sensitive


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def drop_secrets(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    return cast(EventDict, redact_sensitive(dict(event_dict)))


def _processors() -> list[Processor]:
    # merge_contextvars must run before drop_secrets
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        drop_secrets,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(sort_keys=True),
    ]


def configure_logging(level: str = "INFO") -> None:
    numeric = _level(level)
    logging.basicConfig(level=numeric, format="%(message)s")
    structlog.configure(
        processors=_processors(),
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        logger_factory=structlog.PrintLoggerFactory(sys.stdout),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str = "juror_agent") -> structlog.stdlib.BoundLogger:
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))


@contextmanager
def cycle_log_context(cycle_id: str | None = None) -> Iterator[str]:
    """Tag every entry logged during one poll cycle.

    ``dispute_id`` starts out unset and is filled in by :func:`bind_dispute`
    once a dispute has been selected; both keys are dropped on exit.
    """
    cycle_id = cycle_id or uuid4().hex[:12]
    with structlog.contextvars.bound_contextvars(cycle_id=cycle_id, dispute_id=None):
        yield cycle_id


def bind_dispute(dispute_id: str) -> None:
    structlog.contextvars.bind_contextvars(dispute_id=dispute_id)
