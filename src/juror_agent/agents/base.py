from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from juror_agent.domain import RulingDecision

SYSTEM_INSTRUCTION = (
    "You are an impartial arbitrator acting as a juror in a decentralized court. "
    "Weigh the evidence and the dispute template carefully, then choose one of the "
    "template's answers. Output JSON: "
    '{"ruling": <number>, "justification": <string>}'
)

DEFAULT_TEMPERATURE = 0.2


@dataclass(slots=True, frozen=True)
class OracleConfig:
    model: str
    temperature: float = DEFAULT_TEMPERATURE
    system_instruction: str = SYSTEM_INSTRUCTION
    timeout_seconds: float | None = None


class DecisionOracle(Protocol):
    async def decide(self, prompt: str) -> RulingDecision:
        ...
