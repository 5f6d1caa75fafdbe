from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any


@dataclass(slots=True, frozen=True)
class EvidenceItem:
    id: str
    uri: str
    sender: str
    timestamp: int
    name: str = ""
    description: str = ""

    @property
    def label(self) -> str:
        return self.description or self.name

    @classmethod
    def from_graph(cls, payload: dict[str, Any]) -> EvidenceItem:
        sender = payload.get("sender") or {}
        return cls(
            id=str(payload["id"]),
            uri=str(payload.get("evidence") or ""),
            sender=str(sender.get("id", "")),
            timestamp=int(payload.get("timestamp") or 0),
            name=str(payload.get("name") or ""),
            description=str(payload.get("description") or ""),
        )


@dataclass(slots=True, frozen=True)
class DisputeTemplate:
    template_id: str
    template_data: str

    def parsed(self) -> dict[str, Any]:
        try:
            data = json.loads(self.template_data)
        except (TypeError, ValueError):
            return {}
        return data if isinstance(data, dict) else {}

    @property
    def answers(self) -> list[dict[str, Any]]:
        answers = self.parsed().get("answers")
        if not isinstance(answers, list):
            return []
        return [answer for answer in answers if isinstance(answer, dict)]

    def answer_codes(self) -> frozenset[int]:
        codes: set[int] = set()
        for answer in self.answers:
            try:
                codes.add(int(str(answer.get("id")), 0))
            except ValueError:
                continue
        return frozenset(codes)
