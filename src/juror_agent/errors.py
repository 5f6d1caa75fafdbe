from __future__ import annotations


class JurorAgentError(Exception):
    """Base class for every failure the agent reports."""


class ConfigurationError(JurorAgentError):
    pass


class DataSourceError(JurorAgentError):
    def __init__(self, operation: str, cause: BaseException) -> None:
        super().__init__(f"{operation} failed: {cause!r}")
        self.operation = operation
        self.cause = cause


class DecisionError(JurorAgentError):
    def __init__(self, message: str, raw_text: str = "") -> None:
        super().__init__(message)
        self.raw_text = raw_text


class SubmissionError(JurorAgentError):
    def __init__(self, dispute_id: int, ruling: int, cause: BaseException) -> None:
        super().__init__(f"giveRuling({dispute_id}, {ruling}) failed: {cause!r}")
        self.dispute_id = dispute_id
        self.ruling = ruling
        self.cause = cause
