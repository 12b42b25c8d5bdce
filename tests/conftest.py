from __future__ import annotations

import pytest

from reelbot.control.approval import ApprovalService
from reelbot.core.config import get_settings
from reelbot.core.runtime import reset_runtime_config_cache
from reelbot.providers.factory import reset_provider_cache

from tests.fakes import ADMIN_CHAT_ID, FakeTransport


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch, tmp_path):
    monkeypatch.setenv("RUNTIME_FILE_PATH", str(tmp_path / "runtime-missing.yaml"))
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
    monkeypatch.delenv("TELEGRAM_ADMIN_CHAT_ID", raising=False)
    get_settings.cache_clear()
    reset_runtime_config_cache()
    reset_provider_cache()
    yield
    get_settings.cache_clear()
    reset_runtime_config_cache()
    reset_provider_cache()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def service(transport, tmp_path) -> ApprovalService:
    return ApprovalService(
        transport,
        data_dir=tmp_path / "data",
        admin_chat_id=ADMIN_CHAT_ID,
        wait_poll_interval=0.01,
    )


@pytest.fixture
def open_service(transport, tmp_path) -> ApprovalService:
    """Approval service without a designated admin chat."""

    return ApprovalService(transport, data_dir=tmp_path / "data", wait_poll_interval=0.01)
