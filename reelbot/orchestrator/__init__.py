"""Scheduling primitives for autonomous generation and approval drains."""

from reelbot.orchestrator.scheduler import TickResult, VideoScheduler

__all__ = ["TickResult", "VideoScheduler"]
