from __future__ import annotations

from dataclasses import dataclass

from juror_agent.agents.base import DecisionOracle
from juror_agent.chain.ruling_submitter import RulingSubmitter
from juror_agent.domain import DisputeTemplate, RulingDecision, check_eligibility
from juror_agent.errors import DataSourceError, DecisionError, SubmissionError
from juror_agent.observability.logging import bind_dispute, cycle_log_context, get_logger
from juror_agent.orchestration.prompt import DEFAULT_GATEWAY, build_prompt
from juror_agent.orchestration.reconciliation import SubmissionReconciler
from juror_agent.orchestration.selection import select_assignment
from juror_agent.subgraph import CaseDataSource
from juror_agent.types import CycleResult, CycleStage, CycleStatus


@dataclass(slots=True, frozen=True)
class OrchestratorConfig:
    juror_address: str
    court_id: str
    gateway: str = DEFAULT_GATEWAY


def check_answer(decision: RulingDecision, template: DisputeTemplate | None) -> str | None:
    if template is None:
        return None
    codes = template.answer_codes()
    if codes and decision.ruling not in codes:
        return f"ruling {decision.ruling} is not one of the template answers {sorted(codes)}"
    return None


class DisputeOrchestrator:
    """Advances at most one assigned dispute per call.

    Nothing is remembered between calls: eligibility is derived again from
    the subgraph every cycle.
    """

    def __init__(
        self,
        config: OrchestratorConfig,
        source: CaseDataSource,
        oracle: DecisionOracle,
        submitter: RulingSubmitter,
    ) -> None:
        self.config = config
        self._source = source
        self._oracle = oracle
        self._submitter = submitter

    async def process_next_dispute(self) -> CycleResult:
        with cycle_log_context():
            result = await self._run_cycle()
            self._log_result(result)
        return result

    async def _run_cycle(self) -> CycleResult:
        stage = CycleStage.SELECTING
        dispute_id: str | None = None
        try:
            assignments = await self._source.assignments(self.config.juror_address)
            dispute_id = select_assignment(assignments)
            if dispute_id is None:
                return CycleResult(CycleStatus.NO_ASSIGNMENTS, stage)
            bind_dispute(dispute_id)

            stage = CycleStage.ELIGIBILITY
            dispute = await self._source.details(dispute_id)
            reason = check_eligibility(dispute, self.config.court_id)
            if reason is not None:
                return CycleResult(
                    CycleStatus.INELIGIBLE,
                    stage,
                    dispute_id,
                    {"reason": reason, "period": dispute.period, "court_id": dispute.court_id},
                )

            stage = CycleStage.AGGREGATING
            evidence = await self._source.evidence(dispute_id)
            template = (
                await self._source.template(dispute.template_id) if dispute.template_id else None
            )
            prompt = build_prompt(dispute, evidence, template, gateway=self.config.gateway)

            stage = CycleStage.DECIDING
            decision = await self._oracle.decide(prompt)
            invalid = check_answer(decision, template)
            if invalid is not None:
                raise DecisionError(invalid)

            stage = CycleStage.SUBMITTING
            reconciler = SubmissionReconciler(self._source, dispute_id, self.config.court_id)
            receipt = await self._submitter.submit(
                dispute.onchain_id,
                decision.ruling,
                still_pending=reconciler.still_pending,
            )
            if receipt is None:
                return CycleResult(
                    CycleStatus.ALREADY_RULED,
                    stage,
                    dispute_id,
                    {"ruling": decision.ruling},
                )

            return CycleResult(
                CycleStatus.SUBMITTED,
                CycleStage.DONE,
                dispute_id,
                {
                    "ruling": decision.ruling,
                    "justification": decision.justification,
                    "evidence_count": len(evidence),
                    **receipt.as_dict(),
                },
            )
        except DecisionError as exc:
            details = {"error": str(exc)}
            if exc.raw_text:
                details["raw_text"] = exc.raw_text
            return CycleResult(CycleStatus.FAILED, stage, dispute_id, details)
        except (DataSourceError, SubmissionError) as exc:
            return CycleResult(
                CycleStatus.FAILED,
                stage,
                dispute_id,
                {"error": str(exc), "error_type": type(exc).__name__},
            )
        except Exception as exc:
            # malformed subgraph data and the like; the cycle still ends in a result
            return CycleResult(
                CycleStatus.FAILED,
                stage,
                dispute_id,
                {"error": repr(exc), "error_type": type(exc).__name__, "unexpected": True},
            )

    def _log_result(self, result: CycleResult) -> None:
        logger = get_logger("dispute_orchestrator").bind(
            dispute_id=result.dispute_id,
            stage=result.stage.value,
            status=result.status.value,
        )
        if result.failed:
            logger.error("dispute_cycle_failed", **result.details)
        else:
            logger.info("dispute_cycle_completed", **result.details)
