"""Producer and publisher integrations."""

from reelbot.providers.base import Producer, ProducerError, PublishResult, Publisher, PublisherError
from reelbot.providers.factory import get_producer, get_publisher, reset_provider_cache
from reelbot.providers.mock_provider import MockProducer, MockPublisher
from reelbot.providers.webhook_provider import WebhookProducer, WebhookPublisher

__all__ = [
    "MockProducer",
    "MockPublisher",
    "Producer",
    "ProducerError",
    "PublishResult",
    "Publisher",
    "PublisherError",
    "WebhookProducer",
    "WebhookPublisher",
    "get_producer",
    "get_publisher",
    "reset_provider_cache",
]
