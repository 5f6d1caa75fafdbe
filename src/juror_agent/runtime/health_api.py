from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from juror_agent.runtime.scheduler import SchedulerStatus


def build_health_app(
    agent_name: str,
    juror_address: str,
    court_id: str,
    status: SchedulerStatus,
) -> FastAPI:
    app = FastAPI(title=f"{agent_name}-health", version="0.1.0")

    @app.get("/livez")
    async def livez() -> dict[str, str]:
        return {"status": "ok", "juror_address": juror_address}

    @app.get("/readyz")
    async def readyz() -> dict[str, Any]:
        return {
            "juror_address": juror_address,
            "court_id": court_id,
            "runtime_status": "ready" if status.cycles_started else "starting",
            **status.as_dict(),
        }

    return app
