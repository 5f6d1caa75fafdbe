from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from juror_agent.errors import ConfigurationError

JsonDict = dict[str, Any]

EXIT_CONFIGURATION_ERROR = 2


def compact_json(payload: JsonDict) -> str:
    return json.dumps(payload, sort_keys=True, separators=(",", ":"))


class CycleStatus(StrEnum):
    NO_ASSIGNMENTS = "no_assignments"
    INELIGIBLE = "ineligible"
    SUBMITTED = "submitted"
    ALREADY_RULED = "already_ruled"
    FAILED = "failed"


class CycleStage(StrEnum):
    SELECTING = "selecting"
    ELIGIBILITY = "eligibility"
    AGGREGATING = "aggregating"
    DECIDING = "deciding"
    SUBMITTING = "submitting"
    DONE = "done"


@dataclass(slots=True, frozen=True)
class CycleResult:
    status: CycleStatus
    stage: CycleStage
    dispute_id: str | None = None
    details: JsonDict = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return self.status == CycleStatus.FAILED

    def to_dict(self) -> JsonDict:
        return {
            "status": self.status.value,
            "stage": self.stage.value,
            "dispute_id": self.dispute_id,
            "details": self.details,
        }


class CommandStatus(StrEnum):
    OK = "ok"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class CommandResult:
    """What a CLI command prints; ``details`` is command specific."""

    command: str
    status: CommandStatus
    details: JsonDict = field(default_factory=dict)
    configuration_error: bool = False

    @classmethod
    def failure(cls, command: str, error: Exception) -> CommandResult:
        return cls(
            command,
            CommandStatus.FAILED,
            {"error": str(error)},
            configuration_error=isinstance(error, ConfigurationError),
        )

    @property
    def exit_code(self) -> int:
        if self.configuration_error:
            return EXIT_CONFIGURATION_ERROR
        return 1 if self.status == CommandStatus.FAILED else 0

    def to_json(self) -> str:
        return compact_json(
            {"command": self.command, "status": self.status.value, "details": self.details}
        )
