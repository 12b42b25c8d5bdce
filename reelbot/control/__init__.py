"""Control plane (Telegram approval bot and chat commands)."""

from reelbot.control.approval import (
    ApprovalRequest,
    ApprovalResult,
    ApprovalService,
    OperationCancelled,
)

__all__ = [
    "ApprovalRequest",
    "ApprovalResult",
    "ApprovalService",
    "OperationCancelled",
]
