"""Factory to resolve the active producer and publisher."""

from __future__ import annotations

from functools import lru_cache

from reelbot.core.config import get_settings
from reelbot.core.runtime import resolve_control_config
from reelbot.providers.base import Producer, Publisher
from reelbot.providers.mock_provider import MockProducer, MockPublisher
from reelbot.providers.webhook_provider import WebhookProducer, WebhookPublisher


@lru_cache(maxsize=1)
def get_producer() -> Producer:
    settings = get_settings()
    if settings.producer_provider.strip().lower() == "webhook":
        return WebhookProducer(
            webhook_url=settings.producer_webhook_url,
            webhook_token=settings.producer_webhook_token,
            timeout_seconds=settings.producer_timeout_seconds,
        )
    return MockProducer(output_dir=resolve_control_config(settings).data_dir)


@lru_cache(maxsize=1)
def get_publisher() -> Publisher:
    settings = get_settings()
    if settings.publisher_provider.strip().lower() == "webhook":
        return WebhookPublisher(
            webhook_url=settings.publisher_webhook_url,
            webhook_token=settings.publisher_webhook_token,
            timeout_seconds=settings.publisher_timeout_seconds,
        )
    return MockPublisher()


def reset_provider_cache() -> None:
    get_producer.cache_clear()
    get_publisher.cache_clear()
