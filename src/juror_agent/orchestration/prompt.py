from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone

from juror_agent.domain import Dispute, DisputeTemplate, EvidenceItem

DEFAULT_GATEWAY = "https://ipfs.io"


def rewrite_locator(uri: str, gateway: str = DEFAULT_GATEWAY) -> str:
    base = gateway.rstrip("/")
    if uri.startswith("ipfs://"):
        path = uri[len("ipfs://"):].lstrip("/")
        if path.startswith("ipfs/"):
            path = path[len("ipfs/"):]
        return f"{base}/ipfs/{path}"
    if uri.startswith("/ipfs/"):
        return f"{base}{uri}"
    return uri


def format_timestamp(seconds: int) -> str:
    moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_evidence_line(item: EvidenceItem, gateway: str = DEFAULT_GATEWAY) -> str:
    return (
        f"• [{format_timestamp(item.timestamp)}] {item.label}\n"
        f"  ({rewrite_locator(item.uri, gateway)})"
    )


def build_prompt(
    dispute: Dispute,
    evidence: Sequence[EvidenceItem],
    template: DisputeTemplate | None = None,
    *,
    gateway: str = DEFAULT_GATEWAY,
) -> str:
    header = (
        f"Dispute #{dispute.dispute_id} (Court {dispute.court_id}, "
        f"Round {dispute.round_id} – {dispute.round_votes} votes)"
    )
    evidence_text = "\n".join(format_evidence_line(item, gateway) for item in evidence)
    sections = [header, f"Evidence:\n{evidence_text}"]
    if template is not None and template.template_data:
        sections.append(f"Template Data:\n{template.template_data}")
    return "\n\n".join(sections).strip()
