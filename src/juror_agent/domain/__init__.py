"""Domain models for dispute selection and ruling submission."""

from juror_agent.domain.dispute import Dispute, Period, check_eligibility
from juror_agent.domain.evidence import DisputeTemplate, EvidenceItem
from juror_agent.domain.ruling import RulingDecision, SubmissionReceipt

__all__ = [
    "Dispute",
    "Period",
    "check_eligibility",
    "DisputeTemplate",
    "EvidenceItem",
    "RulingDecision",
    "SubmissionReceipt",
]
