from __future__ import annotations

import pytest

from reelbot.core.config import get_settings
from reelbot.core.runtime import (
    RuntimeConfig,
    load_runtime_config,
    reset_runtime_config_cache,
    resolve_control_config,
)


def _clear_caches() -> None:
    get_settings.cache_clear()
    reset_runtime_config_cache()


def test_runtime_config_defaults_when_file_missing(monkeypatch, tmp_path) -> None:
    runtime_path = tmp_path / "runtime-missing.yaml"
    monkeypatch.setenv("RUNTIME_FILE_PATH", str(runtime_path))
    _clear_caches()

    config = load_runtime_config()
    assert config == RuntimeConfig()

    _clear_caches()


def test_runtime_config_overrides_env_values(monkeypatch, tmp_path) -> None:
    runtime_path = tmp_path / "runtime.yaml"
    runtime_path.write_text(
        "admin_chat_id: 999\nscheduler_interval_minutes: 5\ndata_dir: ' /srv/reelbot '\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("RUNTIME_FILE_PATH", str(runtime_path))
    monkeypatch.setenv("TELEGRAM_ADMIN_CHAT_ID", "111")
    monkeypatch.setenv("UPLOAD_WITHOUT_APPROVAL", "true")
    _clear_caches()

    resolved = resolve_control_config()
    assert resolved.admin_chat_id == 999
    assert resolved.scheduler_interval_seconds == 300
    assert resolved.data_dir == "/srv/reelbot"
    assert resolved.upload_without_approval is True
    assert resolved.preview_duration_seconds == 30.0

    _clear_caches()


def test_non_positive_preview_duration_falls_back_to_default(monkeypatch, tmp_path) -> None:
    runtime_path = tmp_path / "runtime.yaml"
    runtime_path.write_text("preview_duration_seconds: 0\n", encoding="utf-8")
    monkeypatch.setenv("RUNTIME_FILE_PATH", str(runtime_path))
    _clear_caches()

    assert resolve_control_config().preview_duration_seconds == 30.0

    _clear_caches()


def test_runtime_config_rejects_non_mapping_document(monkeypatch, tmp_path) -> None:
    runtime_path = tmp_path / "runtime-invalid.yaml"
    runtime_path.write_text("- just\n- a list\n", encoding="utf-8")
    monkeypatch.setenv("RUNTIME_FILE_PATH", str(runtime_path))
    _clear_caches()

    with pytest.raises(ValueError):
        load_runtime_config()

    _clear_caches()


def test_runtime_config_rejects_non_positive_interval(monkeypatch, tmp_path) -> None:
    runtime_path = tmp_path / "runtime-invalid.yaml"
    runtime_path.write_text("scheduler_interval_minutes: 0\n", encoding="utf-8")
    monkeypatch.setenv("RUNTIME_FILE_PATH", str(runtime_path))
    _clear_caches()

    with pytest.raises(ValueError):
        load_runtime_config()

    _clear_caches()
