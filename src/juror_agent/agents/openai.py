from __future__ import annotations

import asyncio

from openai import AsyncOpenAI, OpenAIError

from juror_agent.agents.base import OracleConfig
from juror_agent.agents.extraction import ExtractionFailure, extract_ruling
from juror_agent.domain import RulingDecision
from juror_agent.errors import DecisionError
from juror_agent.observability.logging import get_logger


class OpenAIDecisionOracle:
    """Chat-completions backed oracle. A failed call is never retried here."""

    def __init__(self, client: AsyncOpenAI, config: OracleConfig) -> None:
        self._client = client
        self.config = config

    async def complete(self, prompt: str) -> str:
        request = self._client.chat.completions.create(
            model=self.config.model,
            messages=[
                {"role": "system", "content": self.config.system_instruction},
                {"role": "user", "content": prompt},
            ],
            temperature=self.config.temperature,
        )
        try:
            if self.config.timeout_seconds is None:
                response = await request
            else:
                response = await asyncio.wait_for(request, timeout=self.config.timeout_seconds)
        except asyncio.TimeoutError as exc:
            raise DecisionError(
                f"decision oracle timed out after {self.config.timeout_seconds}s"
            ) from exc
        except OpenAIError as exc:
            raise DecisionError(f"decision oracle request failed: {exc}") from exc

        if not response.choices:
            return ""
        return (response.choices[0].message.content or "").strip()

    async def decide(self, prompt: str) -> RulingDecision:
        text = await self.complete(prompt)
        result = extract_ruling(text)
        if isinstance(result, ExtractionFailure):
            get_logger("decision_oracle").warning(
                "ruling_extraction_failed",
                model=self.config.model,
                reason=result.reason,
                raw_text=result.raw_text,
            )
            raise DecisionError(result.reason, raw_text=result.raw_text)
        return result


def create_openai_client(api_key: str, base_url: str | None = None) -> AsyncOpenAI:
    return AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0)
