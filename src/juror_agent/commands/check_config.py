from __future__ import annotations

from argparse import Namespace

from juror_agent.config import AppSettings
from juror_agent.observability.redaction import redact_sensitive
from juror_agent.types import CommandResult, CommandStatus


def run_check_config(_: Namespace, settings: AppSettings) -> CommandResult:
    effective = redact_sensitive(settings.model_dump(mode="json"))
    effective["juror_address"] = settings.juror_address
    return CommandResult(
        command="check-config",
        status=CommandStatus.OK,
        details=effective,
    )
