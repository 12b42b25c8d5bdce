"""Capability contracts for video producers and publishers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

from reelbot.queues.models import QueuedVideo


class ProducerError(RuntimeError):
    """Raised when a producer cannot create a video."""


class PublisherError(RuntimeError):
    """Raised when a publisher cannot upload a video."""


@dataclass(frozen=True)
class PublishResult:
    url: str
    video_id: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict)


class Producer(Protocol):
    provider_name: str

    def generate(self, topic: str) -> QueuedVideo:
        raise NotImplementedError

    def generate_autonomous(self) -> QueuedVideo:
        raise NotImplementedError


class Publisher(Protocol):
    provider_name: str

    def publish(self, video: QueuedVideo) -> PublishResult:
        raise NotImplementedError
