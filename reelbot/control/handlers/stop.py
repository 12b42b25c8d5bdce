"""Reviewer unsubscribe handler."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from reelbot.control.command_router import CommandContext


def handle(context: "CommandContext") -> None:
    context.service.remove_reviewer(context.chat_id)
    context.service.reply(context.chat_id, "Removed from reviewers.")
