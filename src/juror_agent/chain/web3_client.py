from __future__ import annotations

from web3 import Web3

from juror_agent.config import AppSettings


class Web3ClientFactory:
    """Thin factory for the HTTP-backed Web3 client used for signing and broadcast."""

    def __init__(self, settings: AppSettings) -> None:
        self._settings = settings

    def create(self) -> Web3:
        return Web3(
            Web3.HTTPProvider(
                self._settings.rpc_url,
                request_kwargs={"timeout": self._settings.request_timeout_seconds},
            )
        )
