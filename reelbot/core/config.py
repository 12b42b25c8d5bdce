"""Central runtime configuration for reelbot."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    env: str = "development"
    log_level: str = "INFO"
    app_name: str = "reelbot"
    app_version: str = "0.1.0"
    data_dir: str = "data"
    runtime_file_path: str = "config/runtime.yaml"
    telegram_bot_token: str = ""
    telegram_api_base_url: str = "https://api.telegram.org"
    telegram_admin_chat_id: int = 0
    telegram_timeout_seconds: int = 35
    telegram_poll_timeout_seconds: int = 30
    preview_duration_seconds: float = 30.0
    scheduler_interval_minutes: float = 15.0
    upload_without_approval: bool = False
    generation_queue_max_size: int = 10
    approval_queue_max_size: int = 5
    producer_provider: str = "mock"
    producer_webhook_url: str = ""
    producer_webhook_token: str = ""
    producer_timeout_seconds: int = 900
    publisher_provider: str = "mock"
    publisher_webhook_url: str = ""
    publisher_webhook_token: str = ""
    publisher_timeout_seconds: int = 600
    sentry_dsn: str = ""
    sentry_traces_sample_rate: float = 0.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


_PROVIDERS = {"mock", "webhook"}


def _validate(settings: Settings) -> Settings:
    is_production = settings.env.lower() in {"prod", "production"}
    if is_production and not settings.telegram_bot_token.strip():
        raise ValueError("Missing required production secrets/config: TELEGRAM_BOT_TOKEN.")
    if settings.telegram_timeout_seconds <= 0:
        raise ValueError("TELEGRAM_TIMEOUT_SECONDS must be positive.")
    if settings.telegram_poll_timeout_seconds < 0:
        raise ValueError("TELEGRAM_POLL_TIMEOUT_SECONDS must be zero or positive.")
    if settings.telegram_poll_timeout_seconds >= settings.telegram_timeout_seconds:
        raise ValueError("TELEGRAM_POLL_TIMEOUT_SECONDS must be lower than TELEGRAM_TIMEOUT_SECONDS.")
    if settings.scheduler_interval_minutes <= 0:
        raise ValueError("SCHEDULER_INTERVAL_MINUTES must be positive.")
    if settings.generation_queue_max_size <= 0:
        raise ValueError("GENERATION_QUEUE_MAX_SIZE must be positive.")
    if settings.approval_queue_max_size <= 0:
        raise ValueError("APPROVAL_QUEUE_MAX_SIZE must be positive.")
    if settings.producer_provider.strip().lower() not in _PROVIDERS:
        raise ValueError("PRODUCER_PROVIDER must be one of: mock, webhook.")
    if settings.publisher_provider.strip().lower() not in _PROVIDERS:
        raise ValueError("PUBLISHER_PROVIDER must be one of: mock, webhook.")
    if settings.producer_provider.strip().lower() == "webhook" and not settings.producer_webhook_url.strip():
        raise ValueError("PRODUCER_WEBHOOK_URL is required when PRODUCER_PROVIDER=webhook.")
    if settings.publisher_provider.strip().lower() == "webhook" and not settings.publisher_webhook_url.strip():
        raise ValueError("PUBLISHER_WEBHOOK_URL is required when PUBLISHER_PROVIDER=webhook.")
    if settings.sentry_traces_sample_rate < 0 or settings.sentry_traces_sample_rate > 1:
        raise ValueError("SENTRY_TRACES_SAMPLE_RATE must be between 0 and 1.")
    return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return validated settings as a cached singleton."""

    return _validate(Settings())
