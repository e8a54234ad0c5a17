"""Typed schema + light validation for the monitor settings file.

The settings live in ``dynisland.yaml`` (app state dir by default) and are read
as a loose mapping. We normalize that mapping through a dataclass:

- missing keys are filled with defaults
- basic type coercion is applied (e.g. "1500" -> 1500)
- out-of-range values are clamped
- unknown keys are ignored (forward compatibility)

A missing or unreadable file is not an error: defaults are used.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

import yaml

from dynisland.config import (
    AUTO_HIDE_S,
    COMPLETION_AUTO_HIDE_S,
    DEFAULT_DISK_PATH,
    DETACH_SNAP_DISTANCE,
    GPU_CACHE_SECONDS,
    GPU_ESTIMATE_JITTER,
    HISTORY_POINTS,
    SAMPLE_INTERVAL_MS,
    SETTINGS_FILE_NAME,
)
from dynisland.core.errors import ValidationError

log = logging.getLogger(__name__)

ENV_INTERVAL_MS = "DYNISLAND_INTERVAL_MS"
ENV_DISK_PATH = "DYNISLAND_DISK_PATH"


def _as_int(value: Any, default: int) -> int:
    try:
        if isinstance(value, bool):
            return default
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_float(value: Any, default: float) -> float:
    try:
        if isinstance(value, bool):
            return default
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_str(value: Any, default: str) -> str:
    if value is None:
        return default
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        text = str(value).strip()
        return text or default
    return default


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


@dataclass(frozen=True, slots=True)
class MonitorSettings:
    interval_ms: int = SAMPLE_INTERVAL_MS
    gpu_cache_s: float = GPU_CACHE_SECONDS
    gpu_jitter: float = GPU_ESTIMATE_JITTER
    disk_path: str = DEFAULT_DISK_PATH
    history_points: int = HISTORY_POINTS
    auto_hide_s: float = AUTO_HIDE_S
    completion_hide_s: float = COMPLETION_AUTO_HIDE_S
    snap_distance: int = DETACH_SNAP_DISTANCE

    @classmethod
    def from_dict(cls, d: Mapping[str, Any] | None) -> MonitorSettings:
        if not d:
            return cls()
        return cls(
            interval_ms=int(_clamp(_as_int(d.get("interval_ms"), SAMPLE_INTERVAL_MS), 100, 60_000)),
            gpu_cache_s=_clamp(_as_float(d.get("gpu_cache_s"), GPU_CACHE_SECONDS), 0.0, 60.0),
            gpu_jitter=_clamp(_as_float(d.get("gpu_jitter"), GPU_ESTIMATE_JITTER), 0.0, 50.0),
            disk_path=_as_str(d.get("disk_path"), DEFAULT_DISK_PATH),
            history_points=int(_clamp(_as_int(d.get("history_points"), HISTORY_POINTS), 2, 3600)),
            auto_hide_s=_clamp(_as_float(d.get("auto_hide_s"), AUTO_HIDE_S), 0.5, 600.0),
            completion_hide_s=_clamp(
                _as_float(d.get("completion_hide_s"), COMPLETION_AUTO_HIDE_S), 0.5, 600.0
            ),
            snap_distance=int(
                _clamp(_as_int(d.get("snap_distance"), DETACH_SNAP_DISTANCE), 0, 2000)
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def with_env(self, environ: Mapping[str, str] | None = None) -> MonitorSettings:
        """Apply DYNISLAND_* environment overrides on top of file values."""
        env = os.environ if environ is None else environ
        data = self.to_dict()
        if env.get(ENV_INTERVAL_MS):
            data["interval_ms"] = env[ENV_INTERVAL_MS]
        if env.get(ENV_DISK_PATH):
            data["disk_path"] = env[ENV_DISK_PATH]
        return MonitorSettings.from_dict(data)


def default_settings_path() -> Path:
    from dynisland.core.paths import get_app_state_dir

    return get_app_state_dir() / SETTINGS_FILE_NAME


def parse_settings(text: str) -> MonitorSettings:
    """Parse YAML text; raises ValidationError when it is not a mapping."""
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValidationError("Settings file is not valid YAML", cause=e) from e
    if raw is None:
        return MonitorSettings()
    if not isinstance(raw, Mapping):
        raise ValidationError("Settings file must contain a mapping at the top level")
    section = raw.get("monitor", raw)
    if not isinstance(section, Mapping):
        raise ValidationError("'monitor' section must be a mapping")
    return MonitorSettings.from_dict(section)


def load_settings(
    path: Path | None = None, *, environ: Mapping[str, str] | None = None
) -> MonitorSettings:
    path = path or default_settings_path()
    settings = MonitorSettings()
    if path.is_file():
        try:
            settings = parse_settings(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            log.warning("Ignoring settings file %s: %s", path, e)
    return settings.with_env(environ)


def save_settings(settings: MonitorSettings, path: Path | None = None) -> Path:
    path = path or default_settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        yaml.safe_dump({"monitor": settings.to_dict()}, sort_keys=False), encoding="utf-8"
    )
    return path
