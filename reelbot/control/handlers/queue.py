"""Approval queue inspection handler."""

from __future__ import annotations

from typing import TYPE_CHECKING

from reelbot.control.formatters import render_approval_queue

if TYPE_CHECKING:
    from reelbot.control.command_router import CommandContext


def handle(context: "CommandContext") -> None:
    service = context.service
    if not service.is_admin_chat(context.chat_id):
        service.reply(context.chat_id, "Review commands only available in admin chat.")
        return
    service.reply(
        context.chat_id,
        render_approval_queue(service.queue.list(), capacity=service.queue.max_size),
    )
