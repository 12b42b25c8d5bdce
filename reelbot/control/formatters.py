"""Formatting helpers for chat replies and captions."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional

from reelbot.queues.models import GenerationRequest, QueuedVideo


HELP_TEXT = (
    "*Reelbot*\n"
    "\n"
    "*Commands:*\n"
    "/generate [topic] - Generate video (Reddit topic if empty)\n"
    "/status - Generation queue status\n"
    "/help - Show this message\n"
    "\n"
    "*Admin:*\n"
    "/review - Review next video\n"
    "/queue - Approval queue status\n"
    "/stop - Unsubscribe from notifications"
)


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def format_age(started_at: datetime, *, now: Optional[datetime] = None) -> str:
    current = now or datetime.now(timezone.utc)
    seconds = max(0, int((current - _aware(started_at)).total_seconds()))
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}h{minutes}m"
    if minutes:
        return f"{minutes}m"
    return f"{secs}s"


def presentation_caption(video: QueuedVideo, *, position: int, capacity: int, preview_duration: float) -> str:
    caption = f"*{video.title}*\n\n📹 Video {position}/{capacity} remaining in queue"
    if video.preview_path:
        caption += f"\n\n⏱ Preview ({preview_duration:.0f}s)"
    return caption


def decision_caption(title: str, *, approved: bool) -> str:
    if approved:
        return f"*{title}*\n\n⏳ Uploading…"
    return f"*{title}*\n\n❌ Rejected"


def generated_caption(video: QueuedVideo, *, preview_duration: float) -> str:
    caption = f"*{video.title}*\n\nGenerated successfully."
    if video.preview_path:
        caption += f"\n\n⏱ Preview ({preview_duration:.0f}s)"
    return caption


def upload_complete_caption(title: str, url: str) -> str:
    return f"*{title}*\n\n✅ Uploaded\n{url}"


def upload_complete_fallback(title: str, url: str) -> str:
    return f"*{title}* uploaded\n\n{url}"


def upload_failed_caption(title: str, error: str) -> str:
    return f"*{title}*\n\n❌ Upload failed: {error}"


def upload_failed_fallback(title: str, error: str) -> str:
    return f"Failed to upload *{title}*\n\n{error}"


def new_video_notice(count: int, capacity: int) -> str:
    return f"📹 New video queued ({count}/{capacity} in queue)\n\nType /review to review."


def remaining_reminder(count: int) -> str:
    return f"{count} video(s) remaining. Type /review to continue."


def generating_notice(topic: str) -> str:
    if not topic:
        return "Generating video from Reddit...\n\nThis may take a few minutes."
    return f"Generating video...\n\nTopic: {topic}\n\nThis may take a few minutes."


def generation_failed_notice(error: str) -> str:
    return f"Generation failed\n\n{error}"


def generation_queued_reply(request: GenerationRequest, *, position: int, generating: bool) -> str:
    if request.autonomous_source:
        text = f"Queued generation from Reddit\nPosition: {position}"
    else:
        text = f"Queued generation\nTopic: {request.topic}\nPosition: {position}"
    if generating:
        text += "\n\nGenerating another video..."
    return text


def render_generation_status(
    requests: Iterable[GenerationRequest],
    *,
    capacity: int,
    now: Optional[datetime] = None,
) -> str:
    rows = list(requests)
    if not rows:
        return "Generation queue empty.\n\nUse /generate to create a video."

    lines = [f"*Generation Queue* ({len(rows)}/{capacity})", ""]
    for index, request in enumerate(rows, start=1):
        marker = "🔄" if request.status == "generating" else "⏳"
        topic = "(Reddit)" if request.autonomous_source else request.topic
        lines.append(f"{marker} {index}. {topic} ({format_age(request.created_at, now=now)} ago)")
    return "\n".join(lines)


def render_approval_queue(
    videos: Iterable[QueuedVideo],
    *,
    capacity: int,
    now: Optional[datetime] = None,
) -> str:
    rows = list(videos)
    if not rows:
        return "Approval queue empty."

    lines = [f"*Approval Queue* ({len(rows)}/{capacity})", ""]
    for index, video in enumerate(rows, start=1):
        lines.append(f"{index}. {video.title} ({format_age(video.added_at, now=now)} ago)")
    lines.append("")
    lines.append("Type /review to review.")
    return "\n".join(lines)
