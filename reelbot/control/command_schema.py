"""Chat command parsing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


# Checked in order; first prefix that matches wins.
COMMAND_PREFIXES: Tuple[Tuple[str, str], ...] = (
    ("/generate", "generate"),
    ("/review", "review"),
    ("/queue", "queue"),
    ("/status", "status"),
    ("/stop", "stop"),
    ("/help", "help"),
    ("/start", "help"),
)


@dataclass(frozen=True)
class ControlCommand:
    name: str
    argument: str = ""
    raw_text: str = ""


def _strip_mention(remainder: str) -> str:
    # "/generate@my_bot cats" arrives in group chats
    if not remainder.startswith("@"):
        return remainder
    parts = remainder.split(maxsplit=1)
    return parts[1] if len(parts) > 1 else ""


def parse_command(text: str) -> Optional[ControlCommand]:
    stripped = (text or "").strip()
    lowered = stripped.lower()
    for prefix, name in COMMAND_PREFIXES:
        if lowered.startswith(prefix):
            remainder = _strip_mention(stripped[len(prefix):].strip())
            return ControlCommand(name=name, argument=remainder.strip(), raw_text=stripped)
    return None
