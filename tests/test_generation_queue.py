from __future__ import annotations

from datetime import datetime, timezone

import pytest

from reelbot.queues.approval import VideoQueue
from reelbot.queues.generation import GenerationQueue
from reelbot.queues.models import GenerationRequest, QueuedVideo
from reelbot.queues.persistent import QueueEmptyError


def test_add_stamps_pending_status_and_creation_time(tmp_path) -> None:
    queue = GenerationQueue(tmp_path)
    stale = datetime(2020, 1, 1, tzinfo=timezone.utc)
    queue.add(GenerationRequest(topic="cats", chat_id=1, created_at=stale, status="generating"))

    item = queue.peek()
    assert item.status == "pending"
    assert item.created_at > stale


def test_pop_skips_originators_already_generating(tmp_path) -> None:
    queue = GenerationQueue(tmp_path)
    queue.add(GenerationRequest(topic="a", chat_id=1))
    queue.add(GenerationRequest(topic="b", chat_id=1))
    queue.add(GenerationRequest(topic="c", chat_id=2))

    first = queue.pop()
    second = queue.pop()
    assert (first.topic, first.status) == ("a", "generating")
    assert second.topic == "c"
    assert len(queue) == 3

    with pytest.raises(QueueEmptyError, match="no pending requests"):
        queue.pop()

    queue.complete(1)
    assert queue.pop().topic == "b"
    generating_by_chat = [item.chat_id for item in queue.list() if item.status == "generating"]
    assert sorted(generating_by_chat) == [1, 2]


def test_complete_and_fail_are_idempotent(tmp_path) -> None:
    queue = GenerationQueue(tmp_path)
    queue.add(GenerationRequest(topic="a", chat_id=1))

    queue.complete(1)
    queue.fail(1)
    assert len(queue) == 1

    queue.pop()
    queue.fail(1)
    queue.fail(1)
    assert len(queue) == 0
    assert queue.is_generating() is False


def test_restart_demotes_generating_requests(tmp_path) -> None:
    queue = GenerationQueue(tmp_path)
    for topic in ("a", "b", "c"):
        queue.add(GenerationRequest(topic=topic, chat_id=ord(topic)))
    queue.pop()
    assert queue.is_generating() is True

    restarted = GenerationQueue(tmp_path)
    assert len(restarted) == 3
    assert {item.status for item in restarted.list()} == {"pending"}


def test_video_queue_stamps_added_at_and_persists_fifo(tmp_path) -> None:
    queue = VideoQueue(tmp_path)
    stale = datetime(2020, 1, 1, tzinfo=timezone.utc)
    queue.add(QueuedVideo(video_path="/v/1.mp4", title="T1", added_at=stale))
    queue.add(QueuedVideo(video_path="/v/2.mp4", title="T2", preview_path="/v/2-preview.mp4", tags=["a", "b"]))

    restarted = VideoQueue(tmp_path)
    first = restarted.pop()
    second = restarted.pop()
    assert first.title == "T1"
    assert first.added_at > stale
    assert second.media_path == "/v/2-preview.mp4"
    assert second.tags == ["a", "b"]
    assert (tmp_path / "video_queue.json").exists()
