from __future__ import annotations

import json
import re
from dataclasses import dataclass

from juror_agent.domain import RulingDecision

_RULING_PATTERN = re.compile(
    r"""(?<![A-Za-z_])["']?ruling["']?\s*[:=]\s*["']?(\d+)""",
    re.IGNORECASE,
)
_JUSTIFICATION_PATTERN = re.compile(
    r'"justification"\s*:\s*"((?:[^"\\]|\\.)*)"',
    re.IGNORECASE | re.DOTALL,
)


@dataclass(slots=True, frozen=True)
class ExtractionFailure:
    raw_text: str
    reason: str


def _justification(text: str) -> str | None:
    match = _JUSTIFICATION_PATTERN.search(text)
    if match is None:
        return None
    try:
        return str(json.loads(f'"{match.group(1)}"'))
    except ValueError:
        return match.group(1)


def extract_ruling(text: str) -> RulingDecision | ExtractionFailure:
    """Scan free text for the first ruling field.

    The response does not have to be valid JSON; prose and code fences
    around the field are ignored.
    """
    match = _RULING_PATTERN.search(text)
    if match is None:
        return ExtractionFailure(raw_text=text, reason="no ruling field in response")
    return RulingDecision(ruling=int(match.group(1)), justification=_justification(text))
