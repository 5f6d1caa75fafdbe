from __future__ import annotations

from juror_agent.domain import check_eligibility
from juror_agent.observability.logging import get_logger
from juror_agent.subgraph import CaseDataSource


class SubmissionReconciler:
    """Re-reads a dispute right before a broadcast.

    A dispute that has been ruled or has left the vote period since it was
    selected must not receive another ``giveRuling``.
    """

    def __init__(self, source: CaseDataSource, dispute_id: str, court_id: str) -> None:
        self._source = source
        self._dispute_id = dispute_id
        self._court_id = court_id

    async def still_pending(self) -> bool:
        dispute = await self._source.details(self._dispute_id)
        reason = check_eligibility(dispute, self._court_id)
        if reason is not None:
            get_logger("reconciliation").info(
                "dispute_no_longer_pending",
                dispute_id=self._dispute_id,
                reason=reason,
            )
            return False
        return True
