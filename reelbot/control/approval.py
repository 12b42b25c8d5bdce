"""Chat-driven approval service.

Owns the approval queue, the generation queue, the reviewer registry and the
single pending slot. A background thread long-polls the chat transport and
dispatches commands and button callbacks; the scheduler consumes verdicts and
generation requests through ``wait_for_result`` and
``wait_for_generation_request``.
"""

from __future__ import annotations

import json
import queue as queue_module
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from pydantic import ValidationError

from reelbot.control import formatters
from reelbot.control.command_router import CommandContext, dispatch_command
from reelbot.control.command_schema import parse_command
from reelbot.core.logger import get_logger
from reelbot.integrations.telegram.base import ChatTransport
from reelbot.integrations.telegram.client import TelegramClientError
from reelbot.integrations.telegram.types import CallbackQuery, Message, Update, User, build_approval_keyboard
from reelbot.queues.approval import DEFAULT_VIDEO_QUEUE_SIZE, VideoQueue
from reelbot.queues.generation import DEFAULT_GENERATION_QUEUE_SIZE, GenerationQueue
from reelbot.queues.models import GenerationRequest, QueuedVideo, Reviewer
from reelbot.queues.persistent import QueueEmptyError, QueueFullError


logger = get_logger("reelbot.control.approval")

CALLBACK_APPROVE = "approve"
CALLBACK_REJECT = "reject"
REVIEWERS_FILENAME = "reviewers.json"
DEFAULT_PREVIEW_SECONDS = 30.0


class OperationCancelled(RuntimeError):
    pass


@dataclass(frozen=True)
class ApprovalRequest:
    video_path: str
    title: str
    preview_path: Optional[str] = None
    script: str = ""
    tags: List[str] = field(default_factory=list)
    topic: str = ""


@dataclass(frozen=True)
class ApprovalResult:
    approved: bool
    reviewer_id: int = 0
    message: str = ""


class ApprovalService:
    def __init__(
        self,
        transport: ChatTransport,
        *,
        data_dir: str | Path,
        admin_chat_id: int = 0,
        preview_duration_seconds: float = DEFAULT_PREVIEW_SECONDS,
        video_queue_size: int = DEFAULT_VIDEO_QUEUE_SIZE,
        generation_queue_size: int = DEFAULT_GENERATION_QUEUE_SIZE,
        wait_poll_interval: float = 0.2,
    ) -> None:
        self._transport = transport
        self._admin_chat_id = int(admin_chat_id or 0)
        self._preview_duration = (
            float(preview_duration_seconds) if preview_duration_seconds and preview_duration_seconds > 0 else DEFAULT_PREVIEW_SECONDS
        )
        self._wait_poll_interval = wait_poll_interval

        self._data_dir = Path(data_dir)
        self._reviewers_path = self._data_dir / REVIEWERS_FILENAME
        self._reviewers_lock = threading.Lock()
        self._reviewers: Dict[int, Reviewer] = self._load_reviewers()

        self._queue = VideoQueue(self._data_dir, max_size=video_queue_size)
        self._generation_queue = GenerationQueue(self._data_dir, max_size=generation_queue_size)

        self._pending_lock = threading.Lock()
        self._pending: Optional[QueuedVideo] = None
        self._decided = False

        self._results: "queue_module.Queue[ApprovalResult]" = queue_module.Queue(maxsize=1)
        self._generation_signals: "queue_module.Queue[None]" = queue_module.Queue(maxsize=max(1, generation_queue_size))

        self._offset = 0
        self._stop = threading.Event()
        self._poll_thread: Optional[threading.Thread] = None

    # -- accessors -----------------------------------------------------------

    @property
    def queue(self) -> VideoQueue:
        return self._queue

    @property
    def generation_queue(self) -> GenerationQueue:
        return self._generation_queue

    @property
    def admin_chat_id(self) -> int:
        return self._admin_chat_id

    @property
    def offset(self) -> int:
        return self._offset

    def reviewers(self) -> List[Reviewer]:
        with self._reviewers_lock:
            return [reviewer.model_copy() for reviewer in self._reviewers.values()]

    def pending_video(self) -> Optional[QueuedVideo]:
        with self._pending_lock:
            return self._pending.model_copy(deep=True) if self._pending is not None else None

    def has_pending_video(self) -> bool:
        with self._pending_lock:
            return self._pending is not None

    def is_admin_chat(self, chat_id: int) -> bool:
        return not self._admin_chat_id or chat_id == self._admin_chat_id

    # -- approval flow -------------------------------------------------------

    def queue_video(self, video: QueuedVideo) -> None:
        """Append to the approval queue, then present or announce it.

        Raises ``QueueFullError`` when the approval queue is at capacity.
        """

        self._queue.add(video)
        logger.info("video_queued", title=video.title, queue_size=len(self._queue))
        if self._admin_chat_id:
            self.present_next(self._admin_chat_id)
        else:
            self._broadcast(formatters.new_video_notice(len(self._queue), self._queue.max_size))

    def request_approval(self, request: ApprovalRequest) -> ApprovalResult:
        self.queue_video(
            QueuedVideo(
                video_path=request.video_path,
                preview_path=request.preview_path,
                title=request.title,
                script=request.script,
                tags=list(request.tags),
                topic=request.topic,
            )
        )
        return ApprovalResult(approved=False, message="queued")

    def present_next(self, chat_id: int) -> None:
        with self._pending_lock:
            if self._pending is not None:
                return
            try:
                video = self._queue.pop()
            except QueueEmptyError:
                return
            self._pending = video
            self._decided = False
            position = len(self._queue) + 1

        caption = formatters.presentation_caption(
            video,
            position=position,
            capacity=self._queue.max_size,
            preview_duration=self._preview_duration,
        )
        keyboard = build_approval_keyboard(CALLBACK_APPROVE, CALLBACK_REJECT)
        try:
            response = self._transport.send_video(chat_id, video.media_path, caption, keyboard)
        except TelegramClientError as exc:
            with self._pending_lock:
                if self._pending is video:
                    self._pending = None
            try:
                self._queue.add(video)
            except QueueFullError:
                logger.error("video_requeue_failed", title=video.title, error="queue_full")
            logger.warning("video_presentation_failed", chat_id=chat_id, title=video.title, error=str(exc))
            return

        with self._pending_lock:
            if self._pending is video:
                video.message_id = response.message_id
                video.chat_id = response.chat.id if response.chat is not None else chat_id
        logger.info("video_presented", chat_id=chat_id, title=video.title, message_id=response.message_id)

    def wait_for_result(self, cancel: threading.Event) -> Tuple[ApprovalResult, Optional[QueuedVideo]]:
        """Block until a verdict arrives and pair it with the pending video.

        The pending slot is cleared here rather than in the callback handler so
        the verdict and its video are always observed together.
        """

        while True:
            if cancel.is_set():
                raise OperationCancelled("wait_for_result cancelled")
            try:
                result = self._results.get(timeout=self._wait_poll_interval)
            except queue_module.Empty:
                continue
            with self._pending_lock:
                video = self._pending
                self._pending = None
                self._decided = False
            return result, video

    def wait_for_generation_request(self, cancel: threading.Event) -> GenerationRequest:
        while True:
            if cancel.is_set():
                raise OperationCancelled("wait_for_generation_request cancelled")
            try:
                return self._generation_queue.pop()
            except QueueEmptyError:
                pass
            try:
                self._generation_signals.get(timeout=self._wait_poll_interval)
            except queue_module.Empty:
                continue

    def signal_generation_request(self) -> None:
        try:
            self._generation_signals.put_nowait(None)
        except queue_module.Full:
            # Request is already durable in the generation queue.
            pass

    # -- notifications -------------------------------------------------------

    def notify_generating(self, chat_id: int, topic: str) -> None:
        self.reply(chat_id, formatters.generating_notice(topic))

    def notify_generation_complete(self, chat_id: int, video: QueuedVideo) -> None:
        caption = formatters.generated_caption(video, preview_duration=self._preview_duration)
        try:
            self._transport.send_video(chat_id, video.media_path, caption)
        except TelegramClientError as exc:
            logger.error("generated_video_send_failed", chat_id=chat_id, title=video.title, error=str(exc))

        # Admin-chat and no-admin requests stay out of the approval queue.
        if not self._admin_chat_id or chat_id == self._admin_chat_id:
            return
        try:
            self.queue_video(video)
        except QueueFullError:
            logger.warning("generated_video_not_queued", chat_id=chat_id, title=video.title, reason="queue_full")
            self.reply(chat_id, "Approval queue full. Video was not queued for review.")

    def notify_generation_failed(self, chat_id: int, error: str) -> None:
        self.reply(chat_id, formatters.generation_failed_notice(error))

    def notify_upload_complete(self, title: str, url: str, video: Optional[QueuedVideo] = None) -> None:
        self._notify_result(
            video,
            formatters.upload_complete_caption(title, url),
            formatters.upload_complete_fallback(title, url),
        )

    def notify_upload_failed(self, title: str, error: str, video: Optional[QueuedVideo] = None) -> None:
        self._notify_result(
            video,
            formatters.upload_failed_caption(title, error),
            formatters.upload_failed_fallback(title, error),
        )

    def _notify_result(self, video: Optional[QueuedVideo], caption: str, fallback: str) -> None:
        if video is not None and video.has_message_ref:
            try:
                self._transport.edit_caption(int(video.chat_id), int(video.message_id), caption)
                return
            except TelegramClientError as exc:
                logger.warning(
                    "telegram_edit_caption_failed",
                    chat_id=video.chat_id,
                    message_id=video.message_id,
                    error=str(exc),
                )
        self._broadcast(fallback)

    def complete_generation(self, chat_id: int) -> None:
        self._generation_queue.complete(chat_id)

    def fail_generation(self, chat_id: int) -> None:
        self._generation_queue.fail(chat_id)

    # -- chat egress ---------------------------------------------------------

    def reply(self, chat_id: int, text: str) -> bool:
        try:
            self._transport.send_message(chat_id, text)
        except TelegramClientError as exc:
            logger.warning("telegram_send_message_failed", chat_id=chat_id, error=str(exc))
            return False
        return True

    def _broadcast(self, text: str) -> None:
        for reviewer in self.reviewers():
            self.reply(reviewer.chat_id, text)

    # -- reviewers -----------------------------------------------------------

    def register_reviewer(self, chat_id: int, user: Optional[User]) -> bool:
        """Add the chat to the reviewer registry. Returns False when already registered."""

        with self._reviewers_lock:
            if chat_id in self._reviewers:
                return False
            self._reviewers[chat_id] = Reviewer(
                chat_id=chat_id,
                name=user.first_name if user is not None else "",
                username=user.username if user is not None else None,
            )
            self._save_reviewers()
        logger.info("reviewer_registered", chat_id=chat_id)
        return True

    def remove_reviewer(self, chat_id: int) -> bool:
        with self._reviewers_lock:
            if self._reviewers.pop(chat_id, None) is None:
                return False
            self._save_reviewers()
        logger.info("reviewer_removed", chat_id=chat_id)
        return True

    def _load_reviewers(self) -> Dict[int, Reviewer]:
        if not self._reviewers_path.exists():
            return {}
        try:
            raw = json.loads(self._reviewers_path.read_text(encoding="utf-8"))
            if not isinstance(raw, list):
                raise ValueError("reviewers file must contain a JSON array")
            reviewers = [Reviewer.model_validate(item) for item in raw]
        except (OSError, ValueError, ValidationError) as exc:
            logger.warning("reviewers_load_failed", path=str(self._reviewers_path), error=str(exc))
            return {}
        logger.info("reviewers_loaded", count=len(reviewers))
        return {reviewer.chat_id: reviewer for reviewer in reviewers}

    def _save_reviewers(self) -> None:
        # Caller holds the reviewers lock.
        payload = [reviewer.model_dump(mode="json") for reviewer in self._reviewers.values()]
        try:
            self._reviewers_path.parent.mkdir(parents=True, exist_ok=True)
            self._reviewers_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as exc:
            logger.error("reviewers_persist_failed", path=str(self._reviewers_path), error=str(exc))

    # -- polling -------------------------------------------------------------

    def start_bot(self) -> None:
        if self._poll_thread is not None and self._poll_thread.is_alive():
            return
        self._stop.clear()
        self._poll_thread = threading.Thread(target=self.poll_commands, name="reelbot-poll", daemon=True)
        self._poll_thread.start()
        logger.info("approval_bot_started", admin_chat_id=self._admin_chat_id, reviewers=len(self.reviewers()))

    def stop_bot(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        thread = self._poll_thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._poll_thread = None
        logger.info("approval_bot_stopped")

    def poll_commands(self) -> None:
        while not self._stop.is_set():
            try:
                updates = self._transport.get_updates(self._offset)
            except Exception as exc:
                logger.warning("telegram_get_updates_failed", offset=self._offset, error=str(exc))
                self._stop.wait(1.0)
                continue

            for update in updates:
                self._offset = update.update_id + 1
                try:
                    self.handle_update(update)
                except Exception as exc:
                    logger.error("telegram_update_failed", update_id=update.update_id, error=str(exc))

    def handle_update(self, update: Update) -> None:
        if update.callback_query is not None:
            self.handle_callback(update.callback_query)
            return
        if update.message is not None and update.message.text:
            self.handle_message(update.message)

    def handle_message(self, message: Message) -> None:
        command = parse_command(message.text or "")
        if command is None or message.chat is None:
            return
        context = CommandContext(
            service=self,
            chat_id=message.chat.id,
            user=message.from_user,
            command=command,
        )
        logger.info("control_command_received", chat_id=message.chat.id, command=command.name)
        dispatch_command(context)

    def handle_callback(self, callback: CallbackQuery) -> None:
        message = callback.message
        reviewer_id = callback.from_user.id if callback.from_user is not None else 0
        chat_id = message.chat.id if message is not None and message.chat is not None else reviewer_id

        if self._admin_chat_id and chat_id != self._admin_chat_id:
            self._answer(callback.id, "Not authorized")
            return

        title = ""
        message_ref: Tuple[Optional[int], Optional[int]] = (None, None)
        with self._pending_lock:
            video = self._pending
            if video is None or self._decided:
                video = None
            elif message is not None and video.message_id and message.message_id != video.message_id:
                video = None
            else:
                self._decided = True
                title = video.title
                message_ref = (video.chat_id, video.message_id)

        if video is None:
            self._answer(callback.id, "No video pending")
            return

        approved = callback.data == CALLBACK_APPROVE
        self._answer(callback.id, "")

        ref_chat, ref_message = message_ref
        if ref_chat and ref_message:
            try:
                self._transport.edit_reply_markup(ref_chat, ref_message, None)
            except TelegramClientError as exc:
                logger.warning("telegram_edit_reply_markup_failed", chat_id=ref_chat, error=str(exc))
            try:
                self._transport.edit_caption(
                    ref_chat,
                    ref_message,
                    formatters.decision_caption(title, approved=approved),
                )
            except TelegramClientError as exc:
                logger.warning("telegram_edit_caption_failed", chat_id=ref_chat, error=str(exc))

        result = ApprovalResult(approved=approved, reviewer_id=reviewer_id)
        try:
            self._results.put_nowait(result)
        except queue_module.Full:
            logger.warning("approval_result_dropped", title=title, approved=approved)
        logger.info("approval_verdict", title=title, approved=approved, reviewer_id=reviewer_id)

        remaining = len(self._queue)
        if remaining > 0:
            self.reply(chat_id, formatters.remaining_reminder(remaining))

    def _answer(self, callback_id: str, text: str) -> None:
        try:
            self._transport.answer_callback(callback_id, text)
        except TelegramClientError as exc:
            logger.warning("telegram_answer_callback_failed", error=str(exc))
