from __future__ import annotations

import argparse

import pytest

import reelbot.cli as cli
from reelbot.queues.approval import VideoQueue
from reelbot.queues.models import QueuedVideo

from tests.fakes import FakeProducer, FakePublisher


def test_parse_duration_accepts_compound_values() -> None:
    assert cli.parse_duration("90s") == 90
    assert cli.parse_duration("15m") == 900
    assert cli.parse_duration("1h30m") == 5400
    assert cli.parse_duration("1500ms") == 1.5


@pytest.mark.parametrize("value", ["", "15", "m15", "15x", "0s", "1h 30m"])
def test_parse_duration_rejects_invalid_values(value: str) -> None:
    with pytest.raises(argparse.ArgumentTypeError):
        cli.parse_duration(value)


def test_once_requires_topic_or_reddit() -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["once"])
    assert exc_info.value.code == 2


def test_once_generates_with_mock_producer(capsys) -> None:
    assert cli.main(["once", "--topic", "deep sea creatures"]) == 0

    output = capsys.readouterr().out
    assert "Generated: Deep sea creatures" in output
    assert "Uploaded:" not in output


def test_once_upload_publishes(monkeypatch, capsys) -> None:
    publisher = FakePublisher(url="https://youtube.com/shorts/abc")
    monkeypatch.setattr(cli, "get_producer", lambda: FakeProducer())
    monkeypatch.setattr(cli, "get_publisher", lambda: publisher)

    assert cli.main(["once", "--reddit", "--upload"]) == 0

    assert "Uploaded: https://youtube.com/shorts/abc" in capsys.readouterr().out
    assert len(publisher.published) == 1


def test_once_exits_non_zero_on_failure(monkeypatch, capsys) -> None:
    monkeypatch.setattr(cli, "get_producer", lambda: FakeProducer(fail=True))

    assert cli.main(["once", "--topic", "cats"]) == 1
    assert "producer exploded" in capsys.readouterr().err

    monkeypatch.setattr(cli, "get_producer", lambda: FakeProducer())
    monkeypatch.setattr(cli, "get_publisher", lambda: FakePublisher(fail=True))
    assert cli.main(["once", "--topic", "cats", "--upload"]) == 1


def test_clear_empties_approval_queue(tmp_path, capsys) -> None:
    queue = VideoQueue(tmp_path / "data")
    queue.add(QueuedVideo(video_path="/v/1.mp4", title="T1"))
    queue.add(QueuedVideo(video_path="/v/2.mp4", title="T2"))

    assert cli.main(["clear"]) == 0

    assert "Cleared 2 video(s) from queue" in capsys.readouterr().out
    assert len(VideoQueue(tmp_path / "data")) == 0


def test_chat_id_requires_bot_token(capsys) -> None:
    assert cli.main(["chat-id"]) == 1
    assert "TELEGRAM_BOT_TOKEN" in capsys.readouterr().err


def test_run_without_token_never_publishes(monkeypatch) -> None:
    captured = {}
    publisher = FakePublisher()

    def fake_run(self, cancel):
        captured["approval"] = self.approval_enabled
        captured["interval"] = self.interval_seconds
        captured["status"] = self.generate_once().status
        cancel.set()

    monkeypatch.setattr(cli, "_install_signal_handlers", lambda cancel: None)
    monkeypatch.setattr(cli, "get_producer", lambda: FakeProducer())
    monkeypatch.setattr(cli, "get_publisher", lambda: publisher)
    monkeypatch.setattr(cli.VideoScheduler, "run", fake_run)

    assert cli.main(["run", "--interval", "90s"]) == 0
    assert captured == {"approval": False, "interval": 90, "status": "generated"}
    assert publisher.published == []


class _RecordingApproval:
    def __init__(self) -> None:
        self.stop_timeouts = []

    def start_bot(self) -> None:
        pass

    def stop_bot(self, timeout=None) -> None:
        self.stop_timeouts.append(timeout)


def test_run_bounds_bot_shutdown_wait(monkeypatch) -> None:
    approval = _RecordingApproval()

    monkeypatch.setattr(cli, "_install_signal_handlers", lambda cancel: None)
    monkeypatch.setattr(cli, "build_approval_service", lambda config: approval)
    monkeypatch.setattr(cli.VideoScheduler, "run", lambda self, cancel: cancel.set())

    assert cli.main(["run"]) == 0
    assert approval.stop_timeouts == [cli.BOT_SHUTDOWN_TIMEOUT_SECONDS]
