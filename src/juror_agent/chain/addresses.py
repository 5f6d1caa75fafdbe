from __future__ import annotations

from eth_utils import is_address, to_checksum_address


def normalize_address(raw_value: str, *, field_name: str) -> str:
    candidate = raw_value.strip()
    if not candidate:
        raise ValueError(f"{field_name} is required")
    if not is_address(candidate):
        raise ValueError(f"{field_name} must be a valid EVM address")
    return to_checksum_address(candidate)
