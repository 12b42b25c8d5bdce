"""Durable queues backing the approval and generation flows."""

from reelbot.queues.approval import VideoQueue
from reelbot.queues.generation import GenerationQueue
from reelbot.queues.models import GenerationRequest, QueuedVideo, Reviewer
from reelbot.queues.persistent import PersistentQueue, QueueEmptyError, QueueFullError

__all__ = [
    "GenerationQueue",
    "GenerationRequest",
    "PersistentQueue",
    "QueueEmptyError",
    "QueueFullError",
    "QueuedVideo",
    "Reviewer",
    "VideoQueue",
]
