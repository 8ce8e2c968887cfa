"""Process configuration read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

_TRUTHY = ("1", "true", "yes", "on")


def _optional(name: str) -> str | None:
    value = os.environ.get(name, "").strip()
    return value or None


@dataclass(frozen=True)
class Settings:
    webhook_url: str | None = None
    allow_list_path: str = "config/allow-list.json"
    waha_url: str = "http://localhost:3000"
    waha_api_key: str | None = None
    waha_session: str = "default"
    waha_hmac_key: str | None = None
    waha_auto_start: bool = False
    max_concurrency: int | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        max_concurrency = _optional("RELAY_MAX_CONCURRENCY")
        return cls(
            webhook_url=_optional("N8N_WEBHOOK_URL"),
            allow_list_path=os.environ.get("ALLOW_LIST_PATH", "config/allow-list.json"),
            waha_url=os.environ.get("WAHA_URL", "http://localhost:3000"),
            waha_api_key=_optional("WAHA_API_KEY"),
            waha_session=os.environ.get("WAHA_SESSION", "default"),
            waha_hmac_key=_optional("WAHA_WEBHOOK_HMAC_KEY"),
            waha_auto_start=os.environ.get("WAHA_AUTO_START", "false").strip().lower()
            in _TRUTHY,
            max_concurrency=int(max_concurrency) if max_concurrency else None,
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )
