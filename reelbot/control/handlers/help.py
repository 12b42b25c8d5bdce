"""Help command handler."""

from __future__ import annotations

from typing import TYPE_CHECKING

from reelbot.control.formatters import HELP_TEXT

if TYPE_CHECKING:
    from reelbot.control.command_router import CommandContext


def handle(context: "CommandContext") -> None:
    context.service.reply(context.chat_id, HELP_TEXT)
