"""Telegram Bot API payloads consumed and produced by the control plane."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _TelegramModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class User(_TelegramModel):
    id: int
    first_name: str = ""
    username: Optional[str] = None


class Chat(_TelegramModel):
    id: int
    type: str = ""
    title: Optional[str] = None


class Message(_TelegramModel):
    message_id: int
    from_user: Optional[User] = Field(default=None, alias="from")
    chat: Optional[Chat] = None
    text: Optional[str] = None


class CallbackQuery(_TelegramModel):
    id: str
    from_user: Optional[User] = Field(default=None, alias="from")
    message: Optional[Message] = None
    data: str = ""


class Update(_TelegramModel):
    update_id: int
    message: Optional[Message] = None
    callback_query: Optional[CallbackQuery] = None


class MessageResponse(_TelegramModel):
    message_id: int
    chat: Optional[Chat] = None


class InlineButton(_TelegramModel):
    text: str
    callback_data: str


class InlineKeyboard(_TelegramModel):
    inline_keyboard: List[List[InlineButton]] = Field(default_factory=list)


def build_approval_keyboard(approve_data: str, reject_data: str) -> InlineKeyboard:
    return InlineKeyboard(
        inline_keyboard=[
            [
                InlineButton(text="✅ Upload", callback_data=approve_data),
                InlineButton(text="❌ Reject", callback_data=reject_data),
            ]
        ]
    )
