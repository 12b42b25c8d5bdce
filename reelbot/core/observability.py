"""Observability bootstrap helpers."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import sentry_sdk

from reelbot.core.config import get_settings
from reelbot.core.logger import get_logger


_SENTRY_INITIALIZED = False


def init_sentry() -> bool:
    """Initialize Sentry once when DSN is configured."""

    global _SENTRY_INITIALIZED
    if _SENTRY_INITIALIZED:
        return True

    settings = get_settings()
    dsn = settings.sentry_dsn.strip()
    if not dsn:
        return False

    sentry_sdk.init(
        dsn=dsn,
        environment=settings.env,
        release=f"{settings.app_name}@{settings.app_version}",
        traces_sample_rate=settings.sentry_traces_sample_rate,
        send_default_pii=False,
    )
    _SENTRY_INITIALIZED = True
    get_logger("reelbot.observability").info(
        "sentry_initialized",
        env=settings.env,
        traces_sample_rate=settings.sentry_traces_sample_rate,
    )
    return True


@contextmanager
def sentry_scope(*, run_id: str | None = None, chat_id: int | None = None) -> Iterator[None]:
    """Create a temporary Sentry scope tagged with the run and requesting chat."""

    if not _SENTRY_INITIALIZED:
        yield
        return

    with sentry_sdk.new_scope() as scope:
        context_payload: dict[str, str] = {}
        if run_id:
            scope.set_tag("run_id", run_id)
            context_payload["run_id"] = run_id
        if chat_id:
            scope.set_tag("chat_id", str(chat_id))
            context_payload["chat_id"] = str(chat_id)
        if context_payload:
            scope.set_context("reelbot", context_payload)
        yield


def capture_exception(exc: BaseException) -> None:
    if not _SENTRY_INITIALIZED:
        return
    sentry_sdk.capture_exception(exc)


def reset_observability_for_tests() -> None:
    global _SENTRY_INITIALIZED
    _SENTRY_INITIALIZED = False
