"""Command handlers for the juror agent CLI."""

from juror_agent.commands.check_config import run_check_config
from juror_agent.commands.run_agent import run_daemon
from juror_agent.commands.run_once import run_single_cycle

__all__ = [
    "run_check_config",
    "run_daemon",
    "run_single_cycle",
]
