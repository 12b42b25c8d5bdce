"""Review command handler: registers the reviewer and presents the next video."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from reelbot.control.command_router import CommandContext


def handle(context: "CommandContext") -> None:
    service = context.service
    chat_id = context.chat_id

    if not service.is_admin_chat(chat_id):
        service.reply(chat_id, "Review commands only available in admin chat.")
        return

    if service.register_reviewer(chat_id, context.user):
        service.reply(chat_id, "Registered as reviewer.")

    if service.has_pending_video():
        service.reply(chat_id, "A video is being reviewed. Please wait.")
        return

    if len(service.queue) == 0:
        service.reply(chat_id, "No videos in queue.")
        return

    service.present_next(chat_id)
