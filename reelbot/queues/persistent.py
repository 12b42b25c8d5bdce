"""Bounded FIFO queue persisted as a JSON array on disk."""

from __future__ import annotations

import json
from pathlib import Path
from threading import RLock
from typing import Any, Callable, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from reelbot.core.logger import get_logger


T = TypeVar("T", bound=BaseModel)

logger = get_logger("reelbot.queues.persistent")


class QueueFullError(RuntimeError):
    """Raised when adding to a queue that reached its cap."""


class QueueEmptyError(RuntimeError):
    """Raised when popping or peeking an empty queue."""


class PersistentQueue(Generic[T]):
    """Thread-safe bounded FIFO of pydantic models.

    Every mutation rewrites ``{data_dir}/{filename}``; the in-memory list stays
    authoritative when the write fails. A corrupt file loads as an empty queue.
    """

    def __init__(self, model: Type[T], *, data_dir: str | Path, filename: str, max_size: int) -> None:
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self._model = model
        self._path = Path(data_dir) / filename
        self._max_size = max_size
        self._lock = RLock()
        self._items: List[T] = self._after_load(self._load())

    @property
    def path(self) -> Path:
        return self._path

    @property
    def max_size(self) -> int:
        return self._max_size

    def add(self, item: T) -> None:
        with self._lock:
            if len(self._items) >= self._max_size:
                raise QueueFullError(f"queue is full ({len(self._items)}/{self._max_size})")
            self._items.append(item)
            self._save()

    def pop(self) -> T:
        with self._lock:
            if not self._items:
                raise QueueEmptyError("queue is empty")
            item = self._items.pop(0)
            self._save()
            return item

    def peek(self) -> T:
        with self._lock:
            if not self._items:
                raise QueueEmptyError("queue is empty")
            return self._items[0].model_copy(deep=True)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def is_full(self) -> bool:
        with self._lock:
            return len(self._items) >= self._max_size

    def list(self) -> List[T]:
        with self._lock:
            return [item.model_copy(deep=True) for item in self._items]

    def clear(self) -> None:
        with self._lock:
            self._items = []
            self._save()

    def update(self, fn: Callable[[List[T]], List[T]]) -> None:
        """Replace the backing list with ``fn(items)``; ``fn`` must not touch the queue."""

        with self._lock:
            self._items = list(fn(list(self._items)))
            self._save()

    def find_first(self, predicate: Callable[[T], bool]) -> Optional[T]:
        with self._lock:
            for item in self._items:
                if predicate(item):
                    return item.model_copy(deep=True)
            return None

    def find_and_remove(self, predicate: Callable[[T], bool]) -> Optional[T]:
        with self._lock:
            for index, item in enumerate(self._items):
                if predicate(item):
                    del self._items[index]
                    self._save()
                    return item
            return None

    def _after_load(self, items: List[T]) -> List[T]:
        return items

    def _load(self) -> List[T]:
        if not self._path.exists():
            return []
        try:
            payload: Any = json.loads(self._path.read_text(encoding="utf-8"))
            if not isinstance(payload, list):
                raise ValueError("queue file must hold a JSON array")
            return [self._model.model_validate(row) for row in payload]
        except (OSError, ValueError, ValidationError) as exc:
            logger.warning("queue_load_failed", path=str(self._path), error=str(exc))
            return []

    def _save(self) -> None:
        rows = [item.model_dump(mode="json") for item in self._items]
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(rows, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
        except OSError as exc:
            logger.error("queue_persist_failed", path=str(self._path), error=str(exc))
