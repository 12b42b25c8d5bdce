"""Chat command dispatcher."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, Optional

from reelbot.control.command_schema import ControlCommand
from reelbot.control.handlers import (
    generate,
    help as help_handler,
    queue,
    review,
    status,
    stop,
)
from reelbot.integrations.telegram.types import User

if TYPE_CHECKING:
    from reelbot.control.approval import ApprovalService


@dataclass(frozen=True)
class CommandContext:
    service: "ApprovalService"
    chat_id: int
    user: Optional[User]
    command: ControlCommand


Handler = Callable[[CommandContext], None]


_HANDLER_MAP: Dict[str, Handler] = {
    "generate": generate.handle,
    "review": review.handle,
    "queue": queue.handle,
    "status": status.handle,
    "stop": stop.handle,
    "help": help_handler.handle,
}


def dispatch_command(context: CommandContext) -> bool:
    handler = _HANDLER_MAP.get(context.command.name)
    if handler is None:
        return False
    handler(context)
    return True
