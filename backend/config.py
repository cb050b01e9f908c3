import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent / ".env")


def _get_int(name: str, fallback: int) -> int:
    raw_value = os.getenv(name)
    if not raw_value:
        return fallback
    try:
        return int(raw_value)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable {name} must be an integer") from exc


def _get_list(name: str, fallback: str = "") -> List[str]:
    raw_value = os.getenv(name, fallback)
    if not raw_value:
        return []
    return [item.strip() for item in raw_value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    oauth_state_ttl_ms: int = _get_int("OAUTH_STATE_TTL_MS", 10 * 60 * 1000)
    handshake_sweep_interval_seconds: int = _get_int(
        "HANDSHAKE_SWEEP_INTERVAL_SECONDS", 60
    )
    delivery_tiers_json: str | None = os.getenv("DELIVERY_TIERS_JSON")
    web_app_base_url: str = os.getenv("WEB_APP_BASE_URL", "/")
    admin_api_token: str | None = os.getenv("ADMIN_API_TOKEN")
    payment_webhook_token: str | None = os.getenv("PAYMENT_WEBHOOK_TOKEN")
    allowed_origins: List[str] = field(
        default_factory=lambda: _get_list("ALLOWED_ORIGINS", "*")
    )


settings = Settings()
