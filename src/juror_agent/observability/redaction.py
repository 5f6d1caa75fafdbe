from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlsplit, urlunsplit

REDACTED = "***REDACTED***"

# Matched as substrings of the lower-cased key.
SECRET_KEY_MARKERS: tuple[str, ...] = (
    "private_key",
    "api_key",
    "token",
    "secret",
    "mnemonic",
    "password",
    "authorization",
)


def is_secret_key(key: str) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in SECRET_KEY_MARKERS)


def mask_url_credentials(url: str) -> str:
    """Drop userinfo and query strings, where hosted RPC and subgraph keys usually live."""
    parts = urlsplit(url)
    if not parts.scheme or not parts.hostname:
        return url
    netloc = parts.hostname if parts.port is None else f"{parts.hostname}:{parts.port}"
    if parts.username or parts.password:
        netloc = f"{REDACTED}@{netloc}"
    query = REDACTED if parts.query else ""
    return urlunsplit((parts.scheme, netloc, parts.path, query, parts.fragment))


def redact_sensitive(data: Any, *, _key: str = "") -> Any:
    if isinstance(data, Mapping):
        return {
            key: REDACTED if is_secret_key(str(key)) else redact_sensitive(value, _key=str(key))
            for key, value in data.items()
        }
    if isinstance(data, (list, tuple)):
        return [redact_sensitive(item, _key=_key) for item in data]
    if isinstance(data, str) and _key.lower().endswith("_url"):
        return mask_url_credentials(data)
    return data
