"""Deterministic mock producer and publisher for local/dev usage."""

from __future__ import annotations

import hashlib
from pathlib import Path

from reelbot.providers.base import Producer, PublishResult, Publisher
from reelbot.queues.models import QueuedVideo


_AUTONOMOUS_TOPICS = (
    "the strangest laws still on the books",
    "animals that outlived their species",
    "inventions discovered by accident",
)


class MockProducer(Producer):
    provider_name = "mock"

    def __init__(self, *, output_dir: str | Path) -> None:
        self._output_dir = Path(output_dir) / "mock_videos"
        self._counter = 0

    def generate(self, topic: str) -> QueuedVideo:
        normalized = " ".join(topic.split()) or "untitled"
        seed = hashlib.sha1(normalized.encode("utf-8")).hexdigest()[:12]
        self._output_dir.mkdir(parents=True, exist_ok=True)
        video_path = self._output_dir / f"{seed}.mp4"
        video_path.write_bytes(b"")
        return QueuedVideo(
            video_path=str(video_path),
            title=normalized.capitalize(),
            script=f"A short video about {normalized}.",
            tags=["shorts", *normalized.split()[:3]],
            topic=normalized,
        )

    def generate_autonomous(self) -> QueuedVideo:
        topic = _AUTONOMOUS_TOPICS[self._counter % len(_AUTONOMOUS_TOPICS)]
        self._counter += 1
        return self.generate(topic)


class MockPublisher(Publisher):
    provider_name = "mock"

    def publish(self, video: QueuedVideo) -> PublishResult:
        video_id = hashlib.sha1(video.video_path.encode("utf-8")).hexdigest()[:11]
        return PublishResult(
            url=f"https://youtube.com/shorts/{video_id}",
            video_id=video_id,
            payload={"title": video.title},
        )
