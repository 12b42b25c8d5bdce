"""Command line entrypoint: scheduler mode, one-shot generation and queue maintenance."""

from __future__ import annotations

import argparse
import re
import signal
import sys
import threading
from typing import List, Optional

from reelbot.control.approval import ApprovalService
from reelbot.core.config import get_settings
from reelbot.core.logger import configure_logging, get_logger
from reelbot.core.observability import init_sentry
from reelbot.core.runtime import ControlPlaneConfig, resolve_control_config
from reelbot.integrations.telegram.client import TelegramClientError, get_telegram_client
from reelbot.orchestrator.scheduler import VideoScheduler
from reelbot.providers.factory import get_producer, get_publisher
from reelbot.queues.approval import VideoQueue


logger = get_logger("reelbot.cli")

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_UNIT_SECONDS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}
BOT_SHUTDOWN_TIMEOUT_SECONDS = 5.0


def parse_duration(value: str) -> float:
    """Parse ``90s``, ``15m`` or ``1h30m`` into seconds."""

    text = (value or "").strip().lower()
    if not text:
        raise argparse.ArgumentTypeError("duration must not be empty")

    total = 0.0
    position = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != position:
            break
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        position = match.end()
    if position != len(text):
        raise argparse.ArgumentTypeError(f"invalid duration: {value!r}")
    if total <= 0:
        raise argparse.ArgumentTypeError("duration must be positive")
    return total


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="reelbot", description="Generate short videos and route them through Telegram approval.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Generate on an interval and queue videos for approval.")
    run_parser.add_argument("-i", "--interval", type=parse_duration, default=None, help="Interval between generations (e.g. 15m, 1h30m).")
    run_parser.add_argument("-u", "--upload", action="store_true", help="Upload directly instead of queueing for approval.")

    once_parser = subparsers.add_parser("once", help="Generate a single video.")
    source = once_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("-t", "--topic", default=None, help="Topic for video generation.")
    source.add_argument("-r", "--reddit", action="store_true", help="Let the producer pick a topic from Reddit.")
    once_parser.add_argument("-u", "--upload", action="store_true", help="Upload after generation.")

    subparsers.add_parser("clear", help="Empty the approval queue.")
    subparsers.add_parser("chat-id", help="Print the chat id of the latest message sent to the bot.")
    return parser


def build_approval_service(config: ControlPlaneConfig) -> Optional[ApprovalService]:
    settings = get_settings()
    if not settings.telegram_bot_token.strip():
        logger.info("approval_service_disabled", reason="telegram_bot_token_missing")
        return None
    return ApprovalService(
        get_telegram_client(),
        data_dir=config.data_dir,
        admin_chat_id=config.admin_chat_id,
        preview_duration_seconds=config.preview_duration_seconds,
        video_queue_size=settings.approval_queue_max_size,
        generation_queue_size=settings.generation_queue_max_size,
    )


def _install_signal_handlers(cancel: threading.Event) -> None:
    def _handle(signum, frame) -> None:  # noqa: ARG001
        logger.info("shutdown_signal_received", signal=signum)
        cancel.set()

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)


def cmd_run(args: argparse.Namespace) -> int:
    config = resolve_control_config()
    upload = bool(args.upload) or config.upload_without_approval
    interval = args.interval or config.scheduler_interval_seconds

    approval = None if upload else build_approval_service(config)
    scheduler = VideoScheduler(
        producer=get_producer(),
        publisher=get_publisher(),
        approval=approval,
        interval_seconds=interval,
        upload_without_approval=upload,
    )

    cancel = threading.Event()
    _install_signal_handlers(cancel)

    if approval is not None:
        approval.start_bot()
    try:
        scheduler.run(cancel)
    finally:
        if approval is not None:
            approval.stop_bot(timeout=BOT_SHUTDOWN_TIMEOUT_SECONDS)
    logger.info("shutdown_complete")
    return 0


def cmd_once(args: argparse.Namespace) -> int:
    config = resolve_control_config()
    scheduler = VideoScheduler(
        producer=get_producer(),
        publisher=get_publisher(),
        interval_seconds=config.scheduler_interval_seconds,
        upload_without_approval=True,
    )
    topic = None if args.reddit else args.topic
    result = scheduler.generate_single(topic, upload=bool(args.upload))
    if not result.ok:
        print(f"error: {result.error}", file=sys.stderr)
        return 1

    print(f"Generated: {result.title}")
    print(f"Path: {result.video_path}")
    if result.url:
        print(f"Uploaded: {result.url}")
    return 0


def cmd_clear(args: argparse.Namespace) -> int:  # noqa: ARG001
    config = resolve_control_config()
    queue = VideoQueue(config.data_dir, max_size=get_settings().approval_queue_max_size)
    count = len(queue)
    queue.clear()
    logger.info("approval_queue_cleared", count=count)
    print(f"Cleared {count} video(s) from queue")
    return 0


def cmd_chat_id(args: argparse.Namespace) -> int:  # noqa: ARG001
    if not get_settings().telegram_bot_token.strip():
        print("error: TELEGRAM_BOT_TOKEN is not set", file=sys.stderr)
        return 1
    try:
        chat_id, name = get_telegram_client().discover_chat()
    except TelegramClientError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(f"Chat ID: {chat_id}")
    if name:
        print(f"Name: {name}")
    print(f"\nSet TELEGRAM_ADMIN_CHAT_ID={chat_id}")
    return 0


_COMMANDS = {
    "run": cmd_run,
    "once": cmd_once,
    "clear": cmd_clear,
    "chat-id": cmd_chat_id,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging("DEBUG" if args.verbose else None)
    init_sentry()
    return _COMMANDS[args.command](args)


if __name__ == "__main__":
    raise SystemExit(main())
