from __future__ import annotations

from functools import lru_cache

from eth_account import Account
from pydantic import SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from juror_agent.errors import ConfigurationError


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_env: str = "dev"
    log_level: str = "INFO"
    agent_name: str = "juror-agent"

    subgraph_url: str
    template_subgraph_url: str

    rpc_url: str
    private_key: SecretStr
    kleros_court_address: str
    court_id: str

    poll_interval_ms: int = 60_000

    openai_api_key: SecretStr
    openai_model: str = "gpt-4"
    openai_base_url: str | None = None

    retry_attempts: int = 3
    retry_base_delay_ms: int = 500
    request_timeout_seconds: float = 30.0
    decision_timeout_seconds: float = 120.0
    confirmation_timeout_seconds: float = 180.0

    ipfs_gateway: str = "https://ipfs.io"

    health_port: int | None = None

    telegram_bot_token: SecretStr | None = None
    telegram_chat_id: str | None = None

    @property
    def juror_address(self) -> str:
        return derive_juror_address(self.private_key.get_secret_value())

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_ms / 1000

    @property
    def retry_base_delay_seconds(self) -> float:
        return self.retry_base_delay_ms / 1000


def derive_juror_address(private_key: str) -> str:
    try:
        return Account.from_key(private_key).address.lower()
    except (ValueError, TypeError) as exc:
        raise ConfigurationError("private_key is not a valid signing key") from exc


def _validate(settings: AppSettings) -> AppSettings:
    if settings.poll_interval_ms <= 0:
        raise ConfigurationError("poll_interval_ms must be positive")
    if settings.retry_attempts < 1:
        raise ConfigurationError("retry_attempts must be at least 1")
    if settings.retry_base_delay_ms < 0:
        raise ConfigurationError("retry_base_delay_ms must be non-negative")
    if not settings.court_id.strip():
        raise ConfigurationError("court_id is required")
    derive_juror_address(settings.private_key.get_secret_value())
    return settings


def load_settings(**overrides: object) -> AppSettings:
    try:
        settings = AppSettings(**overrides)  # type: ignore[arg-type]
    except ValidationError as exc:
        missing = sorted(
            str(error["loc"][0]) for error in exc.errors() if error.get("loc")
        )
        raise ConfigurationError(
            f"invalid or missing settings: {', '.join(missing) or 'unknown'}"
        ) from exc
    return _validate(settings)


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return load_settings()
