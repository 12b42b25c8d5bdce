"""Autonomous video scheduler with approval and generation-request drains."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
from uuid import uuid4

from reelbot.control.approval import ApprovalRequest, ApprovalResult, ApprovalService, OperationCancelled
from reelbot.core.logger import bind_run_context, clear_run_context, get_logger
from reelbot.core.observability import capture_exception, sentry_scope
from reelbot.providers.base import Producer, PublishResult, Publisher
from reelbot.queues.models import GenerationRequest, QueuedVideo
from reelbot.queues.persistent import QueueFullError


DEFAULT_INTERVAL_SECONDS = 15 * 60

logger = get_logger("reelbot.orchestrator.scheduler")


@dataclass(frozen=True)
class TickResult:
    status: str
    title: str = ""
    url: str = ""
    video_path: str = ""
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status in {"queued", "published", "generated"}


def _new_run_id() -> str:
    return uuid4().hex[:12]


def remove_preview(video: QueuedVideo) -> None:
    if not video.preview_path:
        return
    try:
        Path(video.preview_path).unlink()
    except FileNotFoundError:
        return
    except OSError as exc:
        logger.warning("preview_cleanup_failed", path=video.preview_path, error=str(exc))
        return
    logger.debug("preview_cleaned_up", path=video.preview_path)


class VideoScheduler:
    """Generate on a fixed interval and route results through approval or straight to upload."""

    def __init__(
        self,
        *,
        producer: Producer,
        publisher: Publisher,
        approval: Optional[ApprovalService] = None,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        upload_without_approval: bool = False,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._producer = producer
        self._publisher = publisher
        self._approval = approval
        self._interval = float(interval_seconds)
        self._upload_without_approval = upload_without_approval

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def approval_enabled(self) -> bool:
        return self._approval is not None and not self._upload_without_approval

    def run(self, cancel: threading.Event) -> None:
        workers: List[threading.Thread] = []
        if self.approval_enabled:
            workers = [
                threading.Thread(
                    target=self.drain_approvals,
                    args=(cancel,),
                    name="reelbot-approval-drain",
                    daemon=True,
                ),
                threading.Thread(
                    target=self.drain_generation_requests,
                    args=(cancel,),
                    name="reelbot-request-drain",
                    daemon=True,
                ),
            ]
            for worker in workers:
                worker.start()

        logger.info(
            "scheduler_started",
            interval_seconds=self._interval,
            approval=self.approval_enabled,
        )

        self._safe_tick()
        while not cancel.wait(self._interval):
            self._safe_tick()

        for worker in workers:
            worker.join()
        logger.info("scheduler_stopped")

    def _safe_tick(self) -> None:
        try:
            self.generate_once()
        except Exception as exc:
            capture_exception(exc)
            logger.error("scheduler_tick_failed", error=str(exc))

    def generate_once(self) -> TickResult:
        if self.approval_enabled and self._approval.queue.is_full():
            logger.info("scheduler_tick_skipped_queue_full", queue_size=len(self._approval.queue))
            return TickResult(status="skipped")

        run_id = _new_run_id()
        bind_run_context(run_id)
        try:
            with sentry_scope(run_id=run_id):
                return self._tick()
        finally:
            clear_run_context()

    def _tick(self) -> TickResult:
        try:
            video = self._producer.generate_autonomous()
        except Exception as exc:
            capture_exception(exc)
            logger.error("scheduler_generation_failed", error=str(exc))
            return TickResult(status="failed", error=str(exc))

        logger.info("scheduler_video_generated", title=video.title, path=video.video_path)

        if self._upload_without_approval:
            return self._publish_direct(video)
        if self._approval is None:
            logger.info("scheduler_video_kept_without_approval", title=video.title, path=video.video_path)
            return TickResult(status="generated", title=video.title, video_path=video.video_path)

        try:
            self._approval.request_approval(
                ApprovalRequest(
                    video_path=video.video_path,
                    preview_path=video.preview_path,
                    title=video.title,
                    script=video.script,
                    tags=list(video.tags),
                    topic=video.topic,
                )
            )
        except QueueFullError as exc:
            logger.warning("scheduler_approval_queue_full", title=video.title, error=str(exc))
            return TickResult(status="skipped", title=video.title, video_path=video.video_path, error=str(exc))
        return TickResult(status="queued", title=video.title, video_path=video.video_path)

    def _publish_direct(self, video: QueuedVideo) -> TickResult:
        try:
            published = self._publisher.publish(video)
        except Exception as exc:
            capture_exception(exc)
            logger.error("scheduler_upload_failed", title=video.title, error=str(exc))
            return TickResult(status="failed", title=video.title, video_path=video.video_path, error=str(exc))
        finally:
            remove_preview(video)
        logger.info("scheduler_upload_complete", title=video.title, url=published.url)
        return TickResult(status="published", title=video.title, url=published.url, video_path=video.video_path)

    def generate_single(self, topic: Optional[str], *, upload: bool = False) -> TickResult:
        """One-shot generation; an empty topic asks the producer to pick one."""

        run_id = _new_run_id()
        bind_run_context(run_id)
        try:
            with sentry_scope(run_id=run_id):
                try:
                    video = self._producer.generate(topic) if topic else self._producer.generate_autonomous()
                except Exception as exc:
                    capture_exception(exc)
                    logger.error("once_generation_failed", topic=topic or "", error=str(exc))
                    return TickResult(status="failed", error=str(exc))

                logger.info("once_video_generated", title=video.title, path=video.video_path)
                if not upload:
                    return TickResult(status="generated", title=video.title, video_path=video.video_path)
                return self._publish_direct(video)
        finally:
            clear_run_context()

    # -- approval drain ------------------------------------------------------

    def _require_approval(self) -> ApprovalService:
        if self._approval is None:
            raise RuntimeError("scheduler has no approval service configured")
        return self._approval

    def drain_approvals(self, cancel: threading.Event) -> None:
        approval = self._require_approval()
        while True:
            try:
                result, video = approval.wait_for_result(cancel)
            except OperationCancelled:
                return
            try:
                self.process_verdict(result, video)
            except Exception as exc:
                capture_exception(exc)
                logger.error("approval_verdict_processing_failed", error=str(exc))

    def process_verdict(self, result: ApprovalResult, video: Optional[QueuedVideo]) -> Optional[PublishResult]:
        approval = self._require_approval()
        if video is None:
            logger.warning("approval_verdict_without_video", approved=result.approved)
            return None

        try:
            if not result.approved:
                logger.info("video_rejected", title=video.title, reviewer_id=result.reviewer_id)
                return None

            logger.info("video_approved", title=video.title, reviewer_id=result.reviewer_id)
            try:
                published = self._publisher.publish(video)
            except Exception as exc:
                capture_exception(exc)
                logger.error("video_upload_failed", title=video.title, error=str(exc))
                approval.notify_upload_failed(video.title, str(exc), video)
                return None

            logger.info("video_upload_complete", title=video.title, url=published.url)
            approval.notify_upload_complete(video.title, published.url, video)
            return published
        finally:
            remove_preview(video)

    # -- generation request drain -------------------------------------------

    def drain_generation_requests(self, cancel: threading.Event) -> None:
        approval = self._require_approval()
        while True:
            try:
                request = approval.wait_for_generation_request(cancel)
            except OperationCancelled:
                return
            try:
                self.process_generation_request(request)
            except Exception as exc:
                capture_exception(exc)
                logger.error("generation_request_processing_failed", chat_id=request.chat_id, error=str(exc))

    def process_generation_request(self, request: GenerationRequest) -> Optional[QueuedVideo]:
        approval = self._require_approval()

        run_id = _new_run_id()
        bind_run_context(run_id)
        try:
            with sentry_scope(run_id=run_id, chat_id=request.chat_id):
                approval.notify_generating(request.chat_id, request.topic)
                try:
                    if request.autonomous_source or not request.topic:
                        video = self._producer.generate_autonomous()
                    else:
                        video = self._producer.generate(request.topic)
                except Exception as exc:
                    capture_exception(exc)
                    logger.error("generation_request_failed", chat_id=request.chat_id, error=str(exc))
                    approval.notify_generation_failed(request.chat_id, str(exc))
                    approval.fail_generation(request.chat_id)
                    return None

                logger.info("generation_request_complete", chat_id=request.chat_id, title=video.title)
                try:
                    approval.notify_generation_complete(request.chat_id, video)
                finally:
                    approval.complete_generation(request.chat_id)
                return video
        finally:
            clear_run_context()
