"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    telegram_bot_token: str
    admin_token: str
    telegram_allowed_user_ids: str | None = None
    printer_uri: str | None = None
    printer_user_name: str = "PrintBot"
    printer_timeout_seconds: float = 30
    uploads_dir: str = "impressoes_recebidas"
    session_backend: str = "memory"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    session_idle_timeout_seconds: int | None = None
    session_eviction_interval_seconds: int = 60
    polling_timeout_seconds: int = 30
    polling_backoff_initial_seconds: float = 1.0
    polling_backoff_max_seconds: float = 60.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_allowed_user_ids(raw: str | None) -> set[int] | None:
    """Parse allowed Telegram user IDs from env."""
    if raw is None:
        return None
    cleaned = raw.strip()
    if cleaned in {"", "*"}:
        return None
    ids: set[int] = set()
    for chunk in cleaned.split(","):
        value = chunk.strip()
        if not value:
            continue
        if value.isdigit():
            ids.add(int(value))
    return ids or None
