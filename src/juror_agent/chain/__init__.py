"""EVM binding for ruling submission."""

from juror_agent.chain.addresses import normalize_address
from juror_agent.chain.ruling_submitter import (
    GIVE_RULING_ABI,
    RulingGateway,
    RulingSubmitter,
    SignedRuling,
    TransactionReverted,
    Web3RulingGateway,
)
from juror_agent.chain.web3_client import Web3ClientFactory

__all__ = [
    "GIVE_RULING_ABI",
    "RulingGateway",
    "RulingSubmitter",
    "SignedRuling",
    "TransactionReverted",
    "Web3ClientFactory",
    "Web3RulingGateway",
    "normalize_address",
]
