from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class Period(StrEnum):
    EVIDENCE = "evidence"
    COMMIT = "commit"
    VOTE = "vote"
    APPEAL = "appeal"
    EXECUTION = "execution"


@dataclass(slots=True, frozen=True)
class Dispute:
    id: str
    dispute_id: str
    court_id: str
    period: str
    ruled: bool
    round_id: str
    round_votes: int
    template_id: str | None = None

    @property
    def onchain_id(self) -> int:
        return int(self.dispute_id)

    @classmethod
    def from_graph(cls, payload: dict[str, Any]) -> Dispute:
        court = payload.get("court") or {}
        current_round = payload.get("currentRound") or {}
        template_id = payload.get("templateId")
        identifier = str(payload["id"])
        return cls(
            id=identifier,
            dispute_id=str(payload.get("disputeID") or identifier),
            court_id=str(court.get("id", "")),
            period=str(payload.get("period", "")),
            ruled=bool(payload.get("ruled", False)),
            round_id=str(current_round.get("id", "")),
            round_votes=int(current_round.get("nbVotes") or 0),
            template_id=str(template_id) if template_id not in (None, "") else None,
        )


def check_eligibility(dispute: Dispute, court_id: str) -> str | None:
    """Return why the juror may not rule on ``dispute``, or None when it may."""
    if dispute.court_id != court_id:
        return f"court {dispute.court_id} is not the configured court {court_id}"
    if dispute.period != Period.VOTE:
        return f"period is {dispute.period}, not {Period.VOTE.value}"
    if dispute.ruled:
        return "dispute is already ruled"
    return None
