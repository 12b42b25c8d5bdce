"""Generation request queue with a pending/generating lifecycle."""

from __future__ import annotations

from pathlib import Path
from typing import List

from reelbot.core.logger import get_logger
from reelbot.queues.models import GenerationRequest, utc_now
from reelbot.queues.persistent import PersistentQueue, QueueEmptyError


GENERATION_QUEUE_FILENAME = "generation_queue.json"
DEFAULT_GENERATION_QUEUE_SIZE = 10

logger = get_logger("reelbot.queues.generation")


class GenerationQueue(PersistentQueue[GenerationRequest]):
    def __init__(self, data_dir: str | Path, *, max_size: int = DEFAULT_GENERATION_QUEUE_SIZE) -> None:
        super().__init__(
            GenerationRequest,
            data_dir=data_dir,
            filename=GENERATION_QUEUE_FILENAME,
            max_size=max_size,
        )

    def _after_load(self, items: List[GenerationRequest]) -> List[GenerationRequest]:
        recovered = 0
        for item in items:
            if item.status == "generating":
                item.status = "pending"
                recovered += 1
        if recovered:
            logger.info("generation_requests_recovered", count=recovered)
        return items

    def add(self, item: GenerationRequest) -> None:
        request = item.model_copy(update={"created_at": utc_now(), "status": "pending"})
        super().add(request)

    def pop(self) -> GenerationRequest:
        """Mark the oldest runnable request as generating and return a copy of it.

        A request is runnable when its originator has nothing else generating.
        """

        with self._lock:
            busy = {item.chat_id for item in self._items if item.status == "generating"}
            for item in self._items:
                if item.status == "pending" and item.chat_id not in busy:
                    item.status = "generating"
                    self._save()
                    return item.model_copy(deep=True)
        raise QueueEmptyError("no pending requests")

    def complete(self, chat_id: int) -> None:
        self._remove_generating(chat_id)

    def fail(self, chat_id: int) -> None:
        self._remove_generating(chat_id)

    def is_generating(self) -> bool:
        return self.find_first(lambda item: item.status == "generating") is not None

    def _remove_generating(self, chat_id: int) -> None:
        self.find_and_remove(lambda item: item.chat_id == chat_id and item.status == "generating")
