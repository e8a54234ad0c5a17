from __future__ import annotations

import logging

import pytest

from dynisland.core.errors import ValidationError
from dynisland.features.settings_schema import (
    MonitorSettings,
    load_settings,
    parse_settings,
    save_settings,
)


def test_defaults_when_empty() -> None:
    s = MonitorSettings.from_dict({})
    assert s.interval_ms == 1000
    assert s.gpu_cache_s == 2.0
    assert s.disk_path == "/"
    assert s.auto_hide_s == 3.0
    assert s.completion_hide_s == 8.0
    assert s.snap_distance == 60


def test_coercion_and_clamping() -> None:
    s = MonitorSettings.from_dict(
        {
            "interval_ms": "20",
            "gpu_cache_s": "1.5",
            "gpu_jitter": -3,
            "history_points": 10_000,
            "snap_distance": True,
            "disk_path": "  ",
            "something_new": 1,
        }
    )
    assert s.interval_ms == 100
    assert s.gpu_cache_s == 1.5
    assert s.gpu_jitter == 0.0
    assert s.history_points == 3600
    assert s.snap_distance == 60
    assert s.disk_path == "/"


def test_parse_accepts_monitor_section() -> None:
    s = parse_settings("monitor:\n  interval_ms: 500\n  disk_path: /home\n")
    assert (s.interval_ms, s.disk_path) == (500, "/home")


def test_parse_accepts_flat_mapping_and_empty_text() -> None:
    assert parse_settings("interval_ms: 2500").interval_ms == 2500
    assert parse_settings("") == MonitorSettings()


@pytest.mark.parametrize("text", ["- 1\n- 2\n", "monitor: 5\n", "a: [unclosed\n"])
def test_parse_rejects_bad_documents(text: str) -> None:
    with pytest.raises(ValidationError):
        parse_settings(text)


def test_save_then_load(tmp_path) -> None:
    path = tmp_path / "dynisland.yaml"
    save_settings(MonitorSettings(interval_ms=750, disk_path="/data"), path)

    loaded = load_settings(path, environ={})

    assert loaded.interval_ms == 750
    assert loaded.disk_path == "/data"


def test_missing_file_gives_defaults(tmp_path) -> None:
    assert load_settings(tmp_path / "nope.yaml", environ={}) == MonitorSettings()


def test_invalid_file_is_ignored_with_warning(tmp_path, caplog) -> None:
    path = tmp_path / "dynisland.yaml"
    path.write_text("- not\n- a mapping\n", encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        s = load_settings(path, environ={})

    assert s == MonitorSettings()
    assert "Ignoring settings file" in caplog.text


def test_environment_overrides_file(tmp_path) -> None:
    path = tmp_path / "dynisland.yaml"
    path.write_text("interval_ms: 750\n", encoding="utf-8")

    s = load_settings(
        path, environ={"DYNISLAND_INTERVAL_MS": "1500", "DYNISLAND_DISK_PATH": "/mnt/ssd"}
    )

    assert s.interval_ms == 1500
    assert s.disk_path == "/mnt/ssd"


def test_garbage_env_value_falls_back_to_default() -> None:
    s = MonitorSettings(interval_ms=750).with_env({"DYNISLAND_INTERVAL_MS": "fast"})
    assert s.interval_ms == 1000
