from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeVar

from juror_agent.domain import Dispute, DisputeTemplate, EvidenceItem
from juror_agent.errors import DataSourceError
from juror_agent.resilience import RetryPolicy
from juror_agent.subgraph.queries import GET_DETAILS, GET_DRAWS, GET_EVIDENCE, GET_TEMPLATE

T = TypeVar("T")


class GraphTransport(Protocol):
    async def request(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        ...


class CaseDataSource:
    """Read-only accessors over the main and template subgraphs.

    Every accessor runs under its own retry policy and raises
    ``DataSourceError`` once the policy gives up.
    """

    def __init__(
        self,
        main: GraphTransport,
        templates: GraphTransport,
        policy: RetryPolicy,
    ) -> None:
        self._main = main
        self._templates = templates
        self._policy = policy

    async def _call(self, operation: str, fetch: Callable[[], Awaitable[T]]) -> T:
        try:
            return await self._policy.run(fetch, name=operation)
        except Exception as exc:
            raise DataSourceError(operation, exc) from exc

    async def assignments(self, juror_address: str) -> list[str]:
        async def fetch() -> list[str]:
            data = await self._main.request(GET_DRAWS, {"juror": juror_address.lower()})
            draws = data.get("draws") or []
            return [str(draw["dispute"]["id"]) for draw in draws if draw.get("dispute")]

        return await self._call("assignments", fetch)

    async def details(self, dispute_id: str) -> Dispute:
        async def fetch() -> Dispute:
            data = await self._main.request(GET_DETAILS, {"id": dispute_id})
            payload = data.get("dispute")
            if not payload:
                raise LookupError(f"dispute {dispute_id} not found")
            return Dispute.from_graph(payload)

        return await self._call("details", fetch)

    async def evidence(self, dispute_id: str) -> list[EvidenceItem]:
        async def fetch() -> list[EvidenceItem]:
            data = await self._main.request(GET_EVIDENCE, {"disputeId": dispute_id})
            return [EvidenceItem.from_graph(item) for item in data.get("evidences") or []]

        return await self._call("evidence", fetch)

    async def template(self, template_id: str) -> DisputeTemplate:
        async def fetch() -> DisputeTemplate:
            data = await self._templates.request(GET_TEMPLATE, {"id": str(template_id)})
            payload = data.get("disputeTemplate")
            if not payload:
                raise LookupError(f"dispute template {template_id} not found")
            return DisputeTemplate(
                template_id=str(template_id),
                template_data=str(payload.get("templateData") or ""),
            )

        return await self._call("template", fetch)
