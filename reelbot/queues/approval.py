"""Queue of produced videos awaiting a reviewer verdict."""

from __future__ import annotations

from pathlib import Path

from reelbot.queues.models import QueuedVideo, utc_now
from reelbot.queues.persistent import PersistentQueue


VIDEO_QUEUE_FILENAME = "video_queue.json"
DEFAULT_VIDEO_QUEUE_SIZE = 5


class VideoQueue(PersistentQueue[QueuedVideo]):
    def __init__(self, data_dir: str | Path, *, max_size: int = DEFAULT_VIDEO_QUEUE_SIZE) -> None:
        super().__init__(
            QueuedVideo,
            data_dir=data_dir,
            filename=VIDEO_QUEUE_FILENAME,
            max_size=max_size,
        )

    def add(self, item: QueuedVideo) -> None:
        super().add(item.model_copy(update={"added_at": utc_now()}))
