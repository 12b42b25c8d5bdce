"""Runtime configuration loader (control-plane overrides from YAML)."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, field_validator

from reelbot.core.config import Settings, get_settings


DEFAULT_PREVIEW_DURATION_SECONDS = 30.0


class RuntimeConfig(BaseModel):
    admin_chat_id: Optional[int] = None
    scheduler_interval_minutes: Optional[float] = None
    upload_without_approval: Optional[bool] = None
    data_dir: Optional[str] = None
    preview_duration_seconds: Optional[float] = None

    @field_validator("data_dir", mode="before")
    @classmethod
    def _normalize_data_dir(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        normalized = str(value).strip()
        return normalized or None

    @field_validator("scheduler_interval_minutes")
    @classmethod
    def _validate_interval(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value <= 0:
            raise ValueError("scheduler_interval_minutes must be positive")
        return value


@dataclass(frozen=True)
class ControlPlaneConfig:
    admin_chat_id: int
    scheduler_interval_seconds: float
    upload_without_approval: bool
    data_dir: str
    preview_duration_seconds: float


def _resolve_runtime_path() -> Path:
    settings = get_settings()
    configured = Path(settings.runtime_file_path)
    if configured.is_absolute():
        return configured
    return Path.cwd() / configured


@lru_cache(maxsize=1)
def load_runtime_config() -> RuntimeConfig:
    path = _resolve_runtime_path()
    if not path.exists():
        return RuntimeConfig()

    content = path.read_text(encoding="utf-8")
    parsed = yaml.safe_load(content) or {}
    if not isinstance(parsed, dict):
        raise ValueError("Runtime config must be a YAML object")

    data: Dict[str, Any] = dict(parsed)
    return RuntimeConfig.model_validate(data)


def reset_runtime_config_cache() -> None:
    load_runtime_config.cache_clear()


def resolve_control_config(
    settings: Settings | None = None,
    runtime: RuntimeConfig | None = None,
) -> ControlPlaneConfig:
    """Merge env settings with YAML overrides; YAML values win when present."""

    settings = settings or get_settings()
    runtime = runtime or load_runtime_config()

    def pick(override: Any, fallback: Any) -> Any:
        return fallback if override is None else override

    interval_minutes = float(pick(runtime.scheduler_interval_minutes, settings.scheduler_interval_minutes))
    preview = float(pick(runtime.preview_duration_seconds, settings.preview_duration_seconds))
    if preview <= 0:
        preview = DEFAULT_PREVIEW_DURATION_SECONDS

    return ControlPlaneConfig(
        admin_chat_id=int(pick(runtime.admin_chat_id, settings.telegram_admin_chat_id)),
        scheduler_interval_seconds=interval_minutes * 60,
        upload_without_approval=bool(pick(runtime.upload_without_approval, settings.upload_without_approval)),
        data_dir=str(pick(runtime.data_dir, settings.data_dir)),
        preview_duration_seconds=preview,
    )
