"""Control plane for short-form video generation with Telegram approval."""

__version__ = "0.1.0"
