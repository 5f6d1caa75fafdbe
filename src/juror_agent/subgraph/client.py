from __future__ import annotations

from typing import Any

import httpx


class GraphQLError(RuntimeError):
    def __init__(self, errors: list[dict[str, Any]]) -> None:
        messages = "; ".join(str(error.get("message", error)) for error in errors)
        super().__init__(messages or "graphql request failed")
        self.errors = errors


class GraphQLClient:
    """Minimal GraphQL-over-HTTP transport for subgraph endpoints."""

    def __init__(self, endpoint: str, http: httpx.AsyncClient) -> None:
        self._endpoint = endpoint
        self._http = http

    async def request(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        response = await self._http.post(
            self._endpoint,
            json={"query": query, "variables": variables or {}},
            headers={"Content-Type": "application/json"},
        )
        response.raise_for_status()
        body = response.json()
        if not isinstance(body, dict):
            raise GraphQLError([{"message": "response body is not an object"}])
        errors = body.get("errors")
        if errors:
            raise GraphQLError(list(errors))
        data = body.get("data")
        if not isinstance(data, dict):
            raise GraphQLError([{"message": "response has no data"}])
        return data


class HttpClientFactory:
    def __init__(self, timeout_seconds: float) -> None:
        self._timeout = timeout_seconds

    def create(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))
