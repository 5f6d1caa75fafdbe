"""Decision oracle contract and implementations."""

from juror_agent.agents.base import DecisionOracle, OracleConfig
from juror_agent.agents.extraction import ExtractionFailure, extract_ruling
from juror_agent.agents.openai import OpenAIDecisionOracle, create_openai_client

__all__ = [
    "DecisionOracle",
    "OracleConfig",
    "ExtractionFailure",
    "extract_ruling",
    "OpenAIDecisionOracle",
    "create_openai_client",
]
