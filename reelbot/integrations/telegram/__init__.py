"""Telegram Bot API integration."""

from reelbot.integrations.telegram.base import ChatTransport
from reelbot.integrations.telegram.client import TelegramClient, TelegramClientError, get_telegram_client
from reelbot.integrations.telegram.types import (
    CallbackQuery,
    Chat,
    InlineButton,
    InlineKeyboard,
    Message,
    MessageResponse,
    Update,
    User,
    build_approval_keyboard,
)

__all__ = [
    "CallbackQuery",
    "Chat",
    "ChatTransport",
    "InlineButton",
    "InlineKeyboard",
    "Message",
    "MessageResponse",
    "TelegramClient",
    "TelegramClientError",
    "Update",
    "User",
    "build_approval_keyboard",
    "get_telegram_client",
]
