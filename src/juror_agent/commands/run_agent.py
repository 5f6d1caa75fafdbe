from __future__ import annotations

import asyncio
from argparse import Namespace

from juror_agent.config import AppSettings
from juror_agent.runtime.worker import run_agent
from juror_agent.types import CommandResult, CommandStatus


def run_daemon(_: Namespace, settings: AppSettings) -> CommandResult:
    try:
        asyncio.run(run_agent(settings))
    except KeyboardInterrupt:
        pass
    return CommandResult(
        command="run",
        status=CommandStatus.OK,
        details={"juror_address": settings.juror_address, "stopped": True},
    )
