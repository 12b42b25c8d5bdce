"""Persisted control-plane records."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


GenerationStatus = Literal["pending", "generating"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GenerationRequest(BaseModel):
    topic: str = ""
    chat_id: int
    autonomous_source: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    status: GenerationStatus = "pending"


class QueuedVideo(BaseModel):
    video_path: str
    preview_path: Optional[str] = None
    title: str
    script: str = ""
    tags: List[str] = Field(default_factory=list)
    topic: str = ""
    added_at: datetime = Field(default_factory=utc_now)
    message_id: Optional[int] = None
    chat_id: Optional[int] = None

    @property
    def media_path(self) -> str:
        """Path sent to chat: the preview clip when present, else the final video."""

        return self.preview_path or self.video_path

    @property
    def has_message_ref(self) -> bool:
        return bool(self.message_id) and bool(self.chat_id)


class Reviewer(BaseModel):
    chat_id: int
    name: str = ""
    username: Optional[str] = None
