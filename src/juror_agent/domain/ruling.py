from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True, frozen=True)
class RulingDecision:
    ruling: int
    justification: str | None = None


@dataclass(slots=True, frozen=True)
class SubmissionReceipt:
    tx_hash: str
    block_number: int | None
    confirmations: int = 1

    def as_dict(self) -> dict[str, Any]:
        return {
            "tx_hash": self.tx_hash,
            "block_number": self.block_number,
            "confirmations": self.confirmations,
        }
