"""HTTP client for the Telegram Bot API."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import httpx
from pydantic import ValidationError

from reelbot.core.config import get_settings
from reelbot.integrations.telegram.types import InlineKeyboard, MessageResponse, Update


DEFAULT_TIMEOUT_SECONDS = 35
DEFAULT_POLL_TIMEOUT_SECONDS = 30


class TelegramClientError(RuntimeError):
    """Raised when a Telegram Bot API request fails."""


class TelegramClient:
    def __init__(
        self,
        *,
        token: str,
        base_url: str = "https://api.telegram.org",
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
        poll_timeout_seconds: int = DEFAULT_POLL_TIMEOUT_SECONDS,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.token = token.strip()
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = max(1, timeout_seconds)
        self.poll_timeout_seconds = max(0, poll_timeout_seconds)
        self._client = client

    def _url(self, method: str) -> str:
        return f"{self.base_url}/bot{self.token}/{method}"

    def _request(self, method: str, **kwargs: Any) -> httpx.Response:
        if not self.token:
            raise TelegramClientError("TELEGRAM_BOT_TOKEN is not configured")
        try:
            if self._client is not None:
                response = self._client.post(self._url(method), **kwargs)
            else:
                with httpx.Client(timeout=self.timeout_seconds) as client:
                    response = client.post(self._url(method), **kwargs)
        except httpx.HTTPError as exc:
            raise TelegramClientError(f"Telegram {method} request failed") from exc
        if response.status_code >= 400:
            raise TelegramClientError(
                f"Telegram {method} failed with status {response.status_code}: {response.text[:255]}"
            )
        return response

    def _result(self, response: httpx.Response, *, method: str) -> Any:
        try:
            payload = response.json()
        except ValueError as exc:
            raise TelegramClientError(f"Telegram {method} returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise TelegramClientError(f"Telegram {method} returned invalid payload format")
        if not payload.get("ok"):
            description = str(payload.get("description") or "unknown error")
            raise TelegramClientError(f"Telegram {method} error: {description}")
        return payload.get("result")

    def _post_json(self, method: str, payload: Dict[str, Any]) -> Any:
        response = self._request(method, json=payload)
        return self._result(response, method=method)

    def send_message(self, chat_id: int, text: str) -> None:
        self._post_json(
            "sendMessage",
            {
                "chat_id": chat_id,
                "text": text,
                "parse_mode": "Markdown",
                "disable_web_page_preview": True,
            },
        )

    def send_video(
        self,
        chat_id: int,
        video_path: str,
        caption: str,
        keyboard: Optional[InlineKeyboard] = None,
    ) -> MessageResponse:
        path = Path(video_path)
        data: Dict[str, str] = {"chat_id": str(chat_id)}
        if caption:
            data["caption"] = caption
            data["parse_mode"] = "Markdown"
        if keyboard is not None:
            data["reply_markup"] = json.dumps(keyboard.model_dump(mode="json"), ensure_ascii=False)

        try:
            with path.open("rb") as handle:
                files = {"video": (path.name, handle, "video/mp4")}
                response = self._request("sendVideo", data=data, files=files)
        except OSError as exc:
            raise TelegramClientError(f"Cannot read video file {video_path}") from exc

        result = self._result(response, method="sendVideo")
        try:
            return MessageResponse.model_validate(result)
        except ValidationError as exc:
            raise TelegramClientError("Telegram sendVideo returned an unexpected message payload") from exc

    def edit_reply_markup(self, chat_id: int, message_id: int, keyboard: Optional[InlineKeyboard] = None) -> None:
        markup = keyboard or InlineKeyboard()
        self._post_json(
            "editMessageReplyMarkup",
            {
                "chat_id": chat_id,
                "message_id": message_id,
                "reply_markup": markup.model_dump(mode="json"),
            },
        )

    def edit_caption(self, chat_id: int, message_id: int, caption: str) -> None:
        self._post_json(
            "editMessageCaption",
            {
                "chat_id": chat_id,
                "message_id": message_id,
                "caption": caption,
                "parse_mode": "Markdown",
            },
        )

    def answer_callback(self, callback_id: str, text: str = "") -> None:
        self._post_json("answerCallbackQuery", {"callback_query_id": callback_id, "text": text})

    def get_updates(self, offset: int) -> List[Update]:
        result = self._post_json(
            "getUpdates",
            {"offset": offset, "timeout": self.poll_timeout_seconds},
        )
        if not isinstance(result, list):
            raise TelegramClientError("Telegram getUpdates returned invalid result format")
        try:
            return [Update.model_validate(row) for row in result]
        except ValidationError as exc:
            raise TelegramClientError("Telegram getUpdates returned an unexpected update payload") from exc

    def discover_chat(self) -> Tuple[int, str]:
        """Return the id and display name of the first chat that messaged the bot."""

        for update in self.get_updates(0):
            message = update.message
            if message is None or message.chat is None:
                continue
            name = message.chat.title or ""
            if not name and message.from_user is not None:
                name = message.from_user.first_name
                if message.from_user.username:
                    name += f" (@{message.from_user.username})"
            return message.chat.id, name
        raise TelegramClientError("No messages found; send a message to the bot first")


def get_telegram_client() -> TelegramClient:
    settings = get_settings()
    return TelegramClient(
        token=settings.telegram_bot_token,
        base_url=settings.telegram_api_base_url,
        timeout_seconds=settings.telegram_timeout_seconds,
        poll_timeout_seconds=settings.telegram_poll_timeout_seconds,
    )
