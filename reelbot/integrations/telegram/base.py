"""Chat transport contract used by the approval service."""

from __future__ import annotations

from typing import List, Optional, Protocol

from reelbot.integrations.telegram.types import InlineKeyboard, MessageResponse, Update


class ChatTransport(Protocol):
    def send_message(self, chat_id: int, text: str) -> None:
        raise NotImplementedError

    def send_video(
        self,
        chat_id: int,
        video_path: str,
        caption: str,
        keyboard: Optional[InlineKeyboard] = None,
    ) -> MessageResponse:
        raise NotImplementedError

    def edit_reply_markup(self, chat_id: int, message_id: int, keyboard: Optional[InlineKeyboard] = None) -> None:
        raise NotImplementedError

    def edit_caption(self, chat_id: int, message_id: int, caption: str) -> None:
        raise NotImplementedError

    def answer_callback(self, callback_id: str, text: str = "") -> None:
        raise NotImplementedError

    def get_updates(self, offset: int) -> List[Update]:
        raise NotImplementedError
