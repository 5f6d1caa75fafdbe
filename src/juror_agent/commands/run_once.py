from __future__ import annotations

import asyncio
from argparse import Namespace

from juror_agent.config import AppSettings
from juror_agent.runtime.worker import run_once
from juror_agent.types import CommandResult, CommandStatus


def run_single_cycle(_: Namespace, settings: AppSettings) -> CommandResult:
    result = asyncio.run(run_once(settings))
    return CommandResult(
        command="run-once",
        status=CommandStatus.FAILED if result.failed else CommandStatus.OK,
        details=result.to_dict(),
    )
