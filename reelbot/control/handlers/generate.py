"""Generation request handler."""

from __future__ import annotations

from typing import TYPE_CHECKING

from reelbot.control.formatters import generation_queued_reply
from reelbot.core.logger import get_logger
from reelbot.queues.models import GenerationRequest
from reelbot.queues.persistent import QueueFullError

if TYPE_CHECKING:
    from reelbot.control.command_router import CommandContext


logger = get_logger("reelbot.control.generate")


def handle(context: "CommandContext") -> None:
    service = context.service
    topic = context.command.argument
    generation_queue = service.generation_queue

    if generation_queue.is_full():
        service.reply(context.chat_id, "Queue full. Please wait.")
        return

    request = GenerationRequest(
        topic=topic,
        chat_id=context.chat_id,
        autonomous_source=not topic,
    )
    try:
        generation_queue.add(request)
    except QueueFullError as exc:
        service.reply(context.chat_id, f"Failed to queue: {exc}")
        return

    logger.info(
        "generation_request_queued",
        chat_id=context.chat_id,
        topic=topic,
        autonomous_source=request.autonomous_source,
    )
    service.reply(
        context.chat_id,
        generation_queued_reply(
            request,
            position=len(generation_queue),
            generating=generation_queue.is_generating(),
        ),
    )
    service.signal_generation_request()
