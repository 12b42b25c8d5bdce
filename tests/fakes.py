"""Hand-written fakes for the chat transport, producer and publisher."""

from __future__ import annotations

import threading
from typing import Any, List, Optional, Tuple

from reelbot.integrations.telegram.client import TelegramClientError
from reelbot.integrations.telegram.types import (
    CallbackQuery,
    Chat,
    InlineKeyboard,
    Message,
    MessageResponse,
    Update,
    User,
)
from reelbot.providers.base import ProducerError, PublishResult, PublisherError
from reelbot.queues.models import QueuedVideo


ADMIN_CHAT_ID = 999


class FakeTransport:
    """In-memory chat transport recording every outbound call in order."""

    def __init__(self) -> None:
        self.calls: List[Tuple[Any, ...]] = []
        self.next_message_id = 100
        self.fail_send_video = False
        self.fail_edit_caption = False
        self.update_batches: List[Any] = []
        self.drained = threading.Event()
        self.poll_offsets: List[int] = []
        self._lock = threading.Lock()

    def _record(self, *call: Any) -> None:
        with self._lock:
            self.calls.append(call)

    def calls_named(self, name: str) -> List[Tuple[Any, ...]]:
        with self._lock:
            return [call for call in self.calls if call[0] == name]

    def messages_to(self, chat_id: int) -> List[str]:
        return [call[2] for call in self.calls_named("send_message") if call[1] == chat_id]

    def send_message(self, chat_id: int, text: str) -> None:
        self._record("send_message", chat_id, text)

    def send_video(
        self,
        chat_id: int,
        video_path: str,
        caption: str,
        keyboard: Optional[InlineKeyboard] = None,
    ) -> MessageResponse:
        if self.fail_send_video:
            raise TelegramClientError("sendVideo failed")
        self._record("send_video", chat_id, video_path, caption, keyboard)
        message_id = self.next_message_id
        self.next_message_id += 1
        return MessageResponse(message_id=message_id, chat=Chat(id=chat_id))

    def edit_reply_markup(self, chat_id: int, message_id: int, keyboard: Optional[InlineKeyboard] = None) -> None:
        self._record("edit_reply_markup", chat_id, message_id, keyboard)

    def edit_caption(self, chat_id: int, message_id: int, caption: str) -> None:
        if self.fail_edit_caption:
            raise TelegramClientError("editMessageCaption failed")
        self._record("edit_caption", chat_id, message_id, caption)

    def answer_callback(self, callback_id: str, text: str = "") -> None:
        self._record("answer_callback", callback_id, text)

    def get_updates(self, offset: int) -> List[Update]:
        self.poll_offsets.append(offset)
        if not self.update_batches:
            self.drained.set()
            threading.Event().wait(0.01)
            return []
        batch = self.update_batches.pop(0)
        if isinstance(batch, Exception):
            raise batch
        return list(batch)


class FakeProducer:
    provider_name = "fake"

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.topics: List[Optional[str]] = []
        self._counter = 0

    def _video(self, title: str, topic: str) -> QueuedVideo:
        self._counter += 1
        return QueuedVideo(video_path=f"/v/{self._counter}.mp4", title=title, topic=topic)

    def generate(self, topic: str) -> QueuedVideo:
        self.topics.append(topic)
        if self.fail:
            raise ProducerError("producer exploded")
        return self._video(topic.title(), topic)

    def generate_autonomous(self) -> QueuedVideo:
        self.topics.append(None)
        if self.fail:
            raise ProducerError("producer exploded")
        return self._video(f"Autonomous {self._counter + 1}", "")


class FakePublisher:
    provider_name = "fake"

    def __init__(self, *, url: str = "https://youtube.com/shorts/xyz", fail: bool = False) -> None:
        self.url = url
        self.fail = fail
        self.published: List[QueuedVideo] = []

    def publish(self, video: QueuedVideo) -> PublishResult:
        self.published.append(video)
        if self.fail:
            raise PublisherError("quota exceeded")
        return PublishResult(url=self.url, video_id="xyz")


def text_update(update_id: int, chat_id: int, text: str, *, first_name: str = "Ada") -> Update:
    return Update(
        update_id=update_id,
        message=Message(
            message_id=update_id,
            from_user=User(id=chat_id, first_name=first_name),
            chat=Chat(id=chat_id, type="private"),
            text=text,
        ),
    )


def callback_update(update_id: int, chat_id: int, data: str, *, message_id: int = 100) -> Update:
    return Update(
        update_id=update_id,
        callback_query=CallbackQuery(
            id=f"cb-{update_id}",
            from_user=User(id=chat_id, first_name="Ada"),
            message=Message(message_id=message_id, chat=Chat(id=chat_id)),
            data=data,
        ),
    )
