from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

import httpx
import uvicorn
from openai import AsyncOpenAI

from juror_agent.agents import OpenAIDecisionOracle, OracleConfig, create_openai_client
from juror_agent.chain import RulingSubmitter, Web3ClientFactory, Web3RulingGateway
from juror_agent.config import AppSettings, load_settings
from juror_agent.errors import ConfigurationError
from juror_agent.notifications import TelegramNotifier
from juror_agent.observability.logging import configure_logging, get_logger
from juror_agent.orchestration.pipeline import DisputeOrchestrator, OrchestratorConfig
from juror_agent.resilience import RetryPolicy
from juror_agent.runtime.health_api import build_health_app
from juror_agent.runtime.scheduler import PollScheduler
from juror_agent.subgraph import CaseDataSource, GraphQLClient, HttpClientFactory
from juror_agent.types import EXIT_CONFIGURATION_ERROR, CycleResult


@dataclass(slots=True)
class AgentRuntime:
    settings: AppSettings
    orchestrator: DisputeOrchestrator
    http: httpx.AsyncClient
    llm_client: AsyncOpenAI | None = None
    notifier: TelegramNotifier | None = None
    scheduler: PollScheduler | None = field(default=None, init=False)

    async def run_cycle(self) -> CycleResult:
        result = await self.orchestrator.process_next_dispute()
        if self.notifier is not None:
            await self.notifier.notify(result)
        return result

    def build_scheduler(self) -> PollScheduler:
        self.scheduler = PollScheduler(
            cycle=self.run_cycle,
            interval_seconds=self.settings.poll_interval_seconds,
        )
        return self.scheduler

    async def aclose(self) -> None:
        await self.http.aclose()
        if self.llm_client is not None:
            await self.llm_client.close()


def _retry_policy(settings: AppSettings, *, timeout: float | None) -> RetryPolicy:
    return RetryPolicy(
        retries=settings.retry_attempts,
        base_delay=settings.retry_base_delay_seconds,
        timeout=timeout,
    )


def build_runtime(settings: AppSettings) -> AgentRuntime:
    try:
        gateway = Web3RulingGateway(
            Web3ClientFactory(settings).create(),
            settings.kleros_court_address,
            settings.private_key.get_secret_value(),
            confirmation_timeout=settings.confirmation_timeout_seconds,
        )
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc
    # the confirmation wait carries its own timeout
    submitter = RulingSubmitter(gateway, _retry_policy(settings, timeout=None))

    http = HttpClientFactory(settings.request_timeout_seconds).create()
    source = CaseDataSource(
        main=GraphQLClient(settings.subgraph_url, http),
        templates=GraphQLClient(settings.template_subgraph_url, http),
        policy=_retry_policy(settings, timeout=settings.request_timeout_seconds),
    )

    llm_client = create_openai_client(
        settings.openai_api_key.get_secret_value(),
        base_url=settings.openai_base_url,
    )
    oracle = OpenAIDecisionOracle(
        llm_client,
        OracleConfig(
            model=settings.openai_model,
            timeout_seconds=settings.decision_timeout_seconds,
        ),
    )

    notifier = None
    if settings.telegram_bot_token is not None and settings.telegram_chat_id:
        notifier = TelegramNotifier(
            http,
            settings.telegram_bot_token.get_secret_value(),
            settings.telegram_chat_id,
        )

    orchestrator = DisputeOrchestrator(
        OrchestratorConfig(
            juror_address=settings.juror_address,
            court_id=settings.court_id,
            gateway=settings.ipfs_gateway,
        ),
        source=source,
        oracle=oracle,
        submitter=submitter,
    )
    return AgentRuntime(
        settings=settings,
        orchestrator=orchestrator,
        http=http,
        llm_client=llm_client,
        notifier=notifier,
    )


async def run_once(settings: AppSettings) -> CycleResult:
    runtime = build_runtime(settings)
    try:
        return await runtime.run_cycle()
    finally:
        await runtime.aclose()


async def run_agent(settings: AppSettings) -> None:
    runtime = build_runtime(settings)
    scheduler = runtime.build_scheduler()
    get_logger("worker").info(
        "agent_started",
        juror_address=settings.juror_address,
        court_id=settings.court_id,
        poll_interval_ms=settings.poll_interval_ms,
        model=settings.openai_model,
    )

    tasks = [asyncio.create_task(scheduler.run_forever())]
    if settings.health_port is not None:
        app = build_health_app(
            settings.agent_name,
            settings.juror_address,
            settings.court_id,
            scheduler.status,
        )
        server = uvicorn.Server(
            uvicorn.Config(app, host="0.0.0.0", port=settings.health_port, log_level="warning")
        )
        tasks.append(asyncio.create_task(server.serve()))

    try:
        await asyncio.gather(*tasks)
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        await runtime.aclose()


def main() -> int:
    configure_logging()
    logger = get_logger("worker")
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        logger.error("configuration_invalid", error=str(exc))
        return EXIT_CONFIGURATION_ERROR

    configure_logging(settings.log_level)
    try:
        asyncio.run(run_agent(settings))
    except ConfigurationError as exc:
        logger.error("configuration_invalid", error=str(exc))
        return EXIT_CONFIGURATION_ERROR
    except KeyboardInterrupt:
        logger.info("agent_stopped")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
