from __future__ import annotations

import httpx

from juror_agent.observability.logging import get_logger
from juror_agent.types import CycleResult, CycleStatus

TELEGRAM_API = "https://api.telegram.org"


class TelegramNotifier:
    """Posts a short message for cycles that submitted or failed.

    Delivery problems are logged and never affect the cycle.
    """

    def __init__(self, http: httpx.AsyncClient, bot_token: str, chat_id: str) -> None:
        self._http = http
        self._bot_token = bot_token
        self._chat_id = chat_id

    async def send(self, text: str) -> None:
        url = f"{TELEGRAM_API}/bot{self._bot_token}/sendMessage"
        try:
            response = await self._http.post(url, json={"chat_id": self._chat_id, "text": text})
            response.raise_for_status()
        except httpx.HTTPError as exc:
            get_logger("telegram_notifier").warning(
                "notification_failed", error=type(exc).__name__
            )

    async def notify(self, result: CycleResult) -> None:
        message = format_cycle_message(result)
        if message is not None:
            await self.send(message)


def format_cycle_message(result: CycleResult) -> str | None:
    if result.status == CycleStatus.SUBMITTED:
        return (
            f"Ruling {result.details.get('ruling')} submitted for dispute {result.dispute_id}\n"
            f"tx: {result.details.get('tx_hash')}"
        )
    if result.status == CycleStatus.FAILED:
        return (
            f"Dispute {result.dispute_id or '-'} failed at {result.stage.value}: "
            f"{result.details.get('error', 'unknown error')}"
        )
    return None
