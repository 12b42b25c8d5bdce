"""Generation queue status handler."""

from __future__ import annotations

from typing import TYPE_CHECKING

from reelbot.control.formatters import render_generation_status

if TYPE_CHECKING:
    from reelbot.control.command_router import CommandContext


def handle(context: "CommandContext") -> None:
    generation_queue = context.service.generation_queue
    context.service.reply(
        context.chat_id,
        render_generation_status(generation_queue.list(), capacity=generation_queue.max_size),
    )
