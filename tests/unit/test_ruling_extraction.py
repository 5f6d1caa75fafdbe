from __future__ import annotations

from juror_agent.agents.extraction import ExtractionFailure, extract_ruling
from juror_agent.domain import RulingDecision


def test_strict_json_response() -> None:
    result = extract_ruling('{"ruling": 2, "justification": "The evidence supports it."}')

    assert result == RulingDecision(ruling=2, justification="The evidence supports it.")


def test_ruling_inside_prose_and_code_fence() -> None:
    text = (
        "After weighing everything, here is my answer.\n"
        "```json\n"
        '{\n  "ruling": 2,\n  "justification": "Deadline was missed."\n}\n'
        "```\n"
        "Thank you."
    )

    result = extract_ruling(text)

    assert isinstance(result, RulingDecision)
    assert result.ruling == 2
    assert result.justification == "Deadline was missed."


def test_unquoted_and_string_valued_ruling() -> None:
    assert extract_ruling("ruling: 1").ruling == 1  # type: ignore[union-attr]
    assert extract_ruling('{"ruling": "3"}').ruling == 3  # type: ignore[union-attr]


def test_justification_is_optional() -> None:
    result = extract_ruling('{"ruling": 1}')

    assert result == RulingDecision(ruling=1, justification=None)


def test_escaped_justification_is_decoded() -> None:
    result = extract_ruling('{"ruling": 1, "justification": "said \\"yes\\"\\nthen left"}')

    assert isinstance(result, RulingDecision)
    assert result.justification == 'said "yes"\nthen left'


def test_missing_ruling_field_is_a_failure_value() -> None:
    text = "I cannot decide this case."

    result = extract_ruling(text)

    assert isinstance(result, ExtractionFailure)
    assert result.raw_text == text


def test_similar_words_are_not_mistaken_for_the_field() -> None:
    result = extract_ruling('{"overruling": 4}')

    assert isinstance(result, ExtractionFailure)
