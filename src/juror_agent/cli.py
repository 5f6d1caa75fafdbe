from __future__ import annotations

import json
from argparse import ArgumentParser, Namespace
from collections.abc import Callable, Sequence

from juror_agent.commands import run_check_config, run_daemon, run_single_cycle
from juror_agent.config import AppSettings, load_settings
from juror_agent.errors import ConfigurationError
from juror_agent.observability.logging import configure_logging
from juror_agent.types import CommandResult

CommandHandler = Callable[[Namespace, AppSettings], CommandResult]

COMMAND_HANDLERS: dict[str, CommandHandler] = {
    "run": run_daemon,
    "run-once": run_single_cycle,
    "check-config": run_check_config,
}


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog="juror-agent", description="Autonomous juror agent")
    parser.add_argument("--json", action="store_true", help="emit machine-readable JSON output")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("run", help="poll for assigned disputes until interrupted")
    subparsers.add_parser("run-once", help="process at most one dispute and exit")
    subparsers.add_parser("check-config", help="validate settings and print them redacted")

    return parser


def _emit_result(result: CommandResult, *, as_json: bool) -> None:
    if as_json:
        print(result.to_json())
        return

    print(f"{result.command}: {result.status.value}")
    if result.details:
        print(json.dumps(result.details, indent=2, sort_keys=True))


def entrypoint(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    command = str(args.command)

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        failure = CommandResult.failure(command, exc)
        _emit_result(failure, as_json=bool(args.json))
        return failure.exit_code

    configure_logging(settings.log_level)
    handler = COMMAND_HANDLERS[command]
    try:
        result = handler(args, settings)
    except ConfigurationError as exc:
        failure = CommandResult.failure(command, exc)
        _emit_result(failure, as_json=bool(args.json))
        return failure.exit_code

    _emit_result(result, as_json=bool(args.json))
    return result.exit_code


if __name__ == "__main__":
    raise SystemExit(entrypoint())
